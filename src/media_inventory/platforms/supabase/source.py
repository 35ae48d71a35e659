"""Object storage source adapter."""

import logging
import posixpath
from dataclasses import dataclass

from ...sources.base import Source, SourceAsset
from ...storage import StorageObject, SupabaseStorageGateway
from ...transformers.base import Transformer

logger = logging.getLogger(__name__)


class StorageObjectAsset:
    """Adapter that makes a StorageObject compatible with SourceAsset.

    The folder is the listing scope plus the object's sub-directory below
    the listed prefix.
    """

    def __init__(self, storage_object: StorageObject, folder: str):
        self._object = storage_object
        self.folder = folder

    @property
    def uid(self) -> str:
        """Bucket-relative object path."""
        return self._object.path

    @property
    def title(self) -> str:
        return self._object.name or self._object.path.rsplit("/", 1)[-1]

    @property
    def raw_object(self) -> StorageObject:
        return self._object


@dataclass
class StorageErrorAsset:
    """Stands in for a failed listing so the error reaches the caller."""

    uid: str
    title: str
    message: str


class SupabaseSource(Source):
    """Source adapter for Supabase Storage.

    A failed listing does not abort the inventory; it is reported as a
    single StorageErrorAsset instead.
    """

    name = "supabase"

    def __init__(self, gateway: SupabaseStorageGateway):
        self.gateway = gateway

    def list_assets(self, scope: str) -> list[SourceAsset]:
        prefix = self.gateway.build_media_path(scope, "")
        try:
            result = self.gateway.list_media(scope)
        except Exception as e:
            logger.exception("Storage listing for %s raised", scope)
            return [self._error_asset(scope, str(e))]
        if result.skipped:
            return []
        if not result.ok:
            logger.warning("Storage listing for %s failed: %s", scope, result.error)
            return [self._error_asset(scope, result.error)]

        assets: list[SourceAsset] = []
        for storage_object in result.items:
            if storage_object.path.startswith(prefix):
                relative = storage_object.path[len(prefix):].lstrip("/")
            else:
                relative = storage_object.name
            folder = posixpath.join(scope, posixpath.dirname(relative)).rstrip("/")
            assets.append(StorageObjectAsset(storage_object, folder))
        return assets

    @staticmethod
    def _error_asset(scope: str, message: str | None) -> StorageErrorAsset:
        return StorageErrorAsset(
            uid=f"supabase-error-{scope}",
            title="Supabase listing failed",
            message=message or "Unable to list Supabase storage objects.",
        )

    def get_transformer(self) -> Transformer:
        from .transformer import SupabaseTransformer

        return SupabaseTransformer()
