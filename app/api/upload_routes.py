"""Voyage CMS - Media Upload Routes.

The upload boundary: checks mimetype and size before the asset store is
touched. Images up to ``max_image_bytes``, videos up to ``max_video_bytes``.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from app.assets.store import AssetStore, get_asset_store
from app.config import settings
from app.core.errors import UploadError
from app.core.logging import get_logger
from app.core.security import Identity, require_admin
from app.repository.mapping import AssetKind

logger = get_logger("api.upload")

router = APIRouter(prefix="/api/upload", tags=["Upload"])


def _size_limit(kind: AssetKind) -> int:
    if kind is AssetKind.VIDEO:
        return settings.max_video_bytes
    return settings.max_image_bytes


async def _accept(file: UploadFile, kind: AssetKind) -> bytes:
    content_type = file.content_type or ""
    if not content_type.startswith(f"{kind.value}/"):
        raise UploadError(f"Only {kind.value} files are allowed", status_code=400)

    limit = _size_limit(kind)
    if file.size is not None and file.size > limit:
        raise _too_large(file.size, limit)

    # Never buffer more than one byte past the limit.
    data = await file.read(limit + 1)
    if not data:
        raise UploadError("Uploaded file is empty", status_code=400)
    if len(data) > limit:
        raise _too_large(len(data), limit)
    return data


def _too_large(size: int, limit: int) -> UploadError:
    return UploadError(
        f"File too large: {size} bytes exceeds {limit} bytes", status_code=400
    )


async def _upload(file: UploadFile, kind: AssetKind, store: AssetStore, identity: Identity):
    data = await _accept(file, kind)
    asset = await store.upload(data, kind, filename=file.filename or "upload")
    logger.info(
        f"{kind.value.title()} uploaded by {identity.user_id}",
        extra={"public_id": asset.public_id, "user_id": identity.user_id},
    )
    return {"url": asset.url, "publicId": asset.public_id, "kind": kind.value}


@router.post("/image", status_code=201)
async def upload_image(
    file: UploadFile = File(...),
    store: AssetStore = Depends(get_asset_store),
    identity: Identity = Depends(require_admin),
):
    return await _upload(file, AssetKind.IMAGE, store, identity)


@router.post("/video", status_code=201)
async def upload_video(
    file: UploadFile = File(...),
    store: AssetStore = Depends(get_asset_store),
    identity: Identity = Depends(require_admin),
):
    return await _upload(file, AssetKind.VIDEO, store, identity)
