"""Voyage CMS - Abstract Asset Store."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from app.repository.mapping import AssetKind


class StoredAsset(BaseModel):
    """What the store hands back for a successful upload."""

    url: str
    public_id: str
    kind: AssetKind


class AssetStore(ABC):
    """Abstract base for the external media host.

    Uploads and deletions may fail independently of the database. Callers
    treat an upload failure as fatal to their request and a deletion failure
    as a logged leak.
    """

    @abstractmethod
    async def upload(
        self, data: bytes, kind: AssetKind, filename: str = "upload"
    ) -> StoredAsset:
        """Store ``data`` and return its durable URL and deletion handle.

        Raises:
            UploadError: the store rejected or failed the upload.
        """
        ...

    @abstractmethod
    async def delete(self, public_id: str, kind: AssetKind) -> bool:
        """Remove the asset behind ``public_id``. Returns ``False`` on failure.

        May raise ``StoreError`` on transport faults.
        """
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this store is configured and ready."""
        ...


def get_asset_store() -> AssetStore:
    """Dependency: the configured asset store for this request."""
    from app.assets.cloudinary_store import CloudinaryStore

    return CloudinaryStore()
