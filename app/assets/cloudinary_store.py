"""Voyage CMS - Cloudinary Asset Store.

Wraps the Cloudinary SDK's upload and destroy calls. The SDK is blocking, so
each call runs in the threadpool to keep the event loop free.
"""

import io
from typing import Any, Dict, Optional

import cloudinary.exceptions
import cloudinary.uploader
from fastapi.concurrency import run_in_threadpool

from app.assets.store import AssetStore, StoredAsset
from app.config import settings
from app.core.errors import StoreError, UploadError
from app.core.logging import get_logger
from app.repository.mapping import AssetKind

logger = get_logger("assets.cloudinary")


class CloudinaryStore(AssetStore):
    """Cloudinary-backed media host."""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: Optional[str] = None,
    ):
        self.cloud_name = (cloud_name or settings.cloudinary_cloud_name).strip()
        self.api_key = (api_key or settings.cloudinary_api_key).strip()
        self.api_secret = (api_secret or settings.cloudinary_api_secret).strip()
        self.folder = settings.cloudinary_folder if folder is None else folder

    def is_available(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _options(self, kind: AssetKind, **extra: Any) -> Dict[str, Any]:
        """Credentials travel with each call; the global SDK config stays untouched."""
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "resource_type": kind.value,
            "timeout": settings.asset_store_timeout,
            **extra,
        }

    # ── Upload ──

    async def upload(
        self, data: bytes, kind: AssetKind, filename: str = "upload"
    ) -> StoredAsset:
        if not self.is_available():
            raise UploadError("Asset store is not configured", status_code=503)

        options = self._options(kind, filename=filename)
        if self.folder:
            options["folder"] = self.folder
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload, io.BytesIO(data), **options
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload rejected: {e}")
            raise UploadError(f"Upload failed: {e}") from e

        asset = StoredAsset(
            url=result.get("secure_url") or result.get("url", ""),
            public_id=result.get("public_id", ""),
            kind=kind,
        )
        if not asset.url or not asset.public_id:
            raise UploadError("Upload failed: incomplete response from store")
        logger.info(
            f"Uploaded {kind.value} ({len(data)} bytes)",
            extra={"public_id": asset.public_id},
        )
        return asset

    # ── Destroy ──

    async def delete(self, public_id: str, kind: AssetKind) -> bool:
        if not self.is_available():
            raise StoreError("Asset store is not configured", status_code=503)

        try:
            result = await run_in_threadpool(
                cloudinary.uploader.destroy, public_id, **self._options(kind)
            )
        except cloudinary.exceptions.Error as e:
            raise StoreError(f"Destroy request failed: {e}") from e

        outcome = result.get("result")
        if outcome != "ok":
            logger.warning(
                f"Cloudinary destroy returned {outcome!r}", extra={"public_id": public_id}
            )
            return False
        return True
