"""Cross-backend delete.

A delete touches up to three places: object storage, the local media pool
and the manifest. Each leg reports its own outcome so callers can tell a
partial success from a total failure. The manifest record is kept when the
storage leg fails, so the manifest never forgets an object that still
exists remotely.
"""

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Any

from .config import MediaSettings
from .core.classify import is_placeholder_file
from .core.paths import MEDIA_POOL_DIR, normalize_rel_path, validate_path_safety
from .core.types import ManifestDocument
from .manifest_store import ManifestStore
from .storage import StorageResult, SupabaseStorageGateway

logger = logging.getLogger(__name__)


class DeleteRejectedError(ValueError):
    """Raised when a delete request is refused before any side effect."""


@dataclass
class EntryRef:
    """Identifies the asset to delete.

    Any combination of locators may be given; at least one of ``path``,
    ``id`` or ``supabase_path`` is required.
    """

    path: str | None = None
    id: str | None = None
    supabase_bucket: str | None = None
    supabase_path: str | None = None
    file_name: str | None = None


@dataclass
class StorageLeg:
    attempted: bool = False
    deleted: bool = False
    error: str | None = None


@dataclass
class FilesystemLeg:
    attempted: bool = False
    deleted: bool = False


@dataclass
class DeleteResult:
    removed: int = 0
    storage: StorageLeg = field(default_factory=StorageLeg)
    filesystem: FilesystemLeg = field(default_factory=FilesystemLeg)

    def to_dict(self) -> dict[str, Any]:
        return {
            "removed": self.removed,
            "supabase": {
                "attempted": self.storage.attempted,
                "deleted": self.storage.deleted,
                "error": self.storage.error,
            },
            "filesystem": {
                "attempted": self.filesystem.attempted,
                "deleted": self.filesystem.deleted,
            },
        }


class DeleteCoordinator:
    """Removes an asset from object storage, disk and the manifest."""

    def __init__(
        self,
        settings: MediaSettings,
        store: ManifestStore,
        gateway: SupabaseStorageGateway | None = None,
    ):
        self.settings = settings
        self.store = store
        self.gateway = gateway

    def check(self, ref: EntryRef) -> str:
        """Validate a delete request.

        Returns:
            The normalized project-relative path (empty if none was given)

        Raises:
            DeleteRejectedError: If the request must not be carried out
        """
        rel_path = normalize_rel_path(ref.path)
        if not (rel_path or ref.id or ref.supabase_path):
            raise DeleteRejectedError("Missing path, id or supabase target")

        names = [ref.file_name, posixpath.basename(rel_path), posixpath.basename(ref.supabase_path or "")]
        if any(is_placeholder_file(name) for name in names if name):
            raise DeleteRejectedError("Placeholder files keep folders tracked and cannot be deleted")

        if not rel_path:
            return ""
        if not rel_path.startswith(f"{MEDIA_POOL_DIR}/"):
            raise DeleteRejectedError("Only Media Pool files can be deleted")
        if ".." in rel_path.split("/"):
            raise DeleteRejectedError(f"Illegal path: {ref.path}")
        try:
            validate_path_safety(self.settings.project_root / rel_path, self.settings.media_root)
        except ValueError as e:
            raise DeleteRejectedError(str(e)) from e
        return rel_path

    def _delete_remote(self, ref: EntryRef) -> StorageLeg:
        leg = StorageLeg(attempted=True)
        if self.gateway is None or not self.gateway.enabled:
            leg.error = "Supabase media disabled"
            return leg
        try:
            result: StorageResult = self.gateway.delete_media(ref.supabase_path, ref.supabase_bucket)
        except Exception as e:
            logger.exception("Storage delete for %s raised", ref.supabase_path)
            leg.error = str(e) or "Supabase delete failed"
            return leg
        leg.deleted = result.ok
        leg.error = None if result.ok else result.message
        if not result.ok:
            logger.warning("Storage delete for %s failed: %s", ref.supabase_path, leg.error)
        return leg

    def _delete_local(self, rel_path: str) -> FilesystemLeg:
        leg = FilesystemLeg(attempted=True)
        absolute = self.settings.project_root / rel_path
        if absolute.is_file():
            absolute.unlink()
            leg.deleted = True
        return leg

    def _remove_entries(self, rel_path: str, ref: EntryRef) -> int:
        def drop(manifest: ManifestDocument) -> int:
            items = manifest["items"]
            kept = []
            for entry in items:
                entry_path = normalize_rel_path(entry.get("path"))
                entry_remote = (entry.get("supabase") or {}).get("path", "")
                matches = (
                    (rel_path and entry_path == rel_path)
                    or (ref.supabase_path and entry_remote == ref.supabase_path)
                    or (ref.id and entry.get("id") == ref.id)
                )
                if not matches:
                    kept.append(entry)
            manifest["items"] = kept
            return len(items) - len(kept)

        removed, _ = self.store.update(drop)
        return removed

    def remove(self, ref: EntryRef) -> DeleteResult:
        """Delete an asset from every backend that holds it.

        Args:
            ref: Locators of the asset

        Returns:
            DeleteResult with the number of manifest entries removed and
            the outcome of the storage and filesystem legs

        Raises:
            DeleteRejectedError: If the request is refused (nothing is touched)
            OSError: If the local file exists but cannot be removed
        """
        rel_path = self.check(ref)
        result = DeleteResult()

        if ref.supabase_path:
            result.storage = self._delete_remote(ref)
        if rel_path:
            result.filesystem = self._delete_local(rel_path)
        if not ref.supabase_path or result.storage.deleted:
            result.removed = self._remove_entries(rel_path, ref)

        logger.info(
            "Deleted %s: manifest=%d storage=%s filesystem=%s",
            rel_path or ref.id or ref.supabase_path,
            result.removed,
            result.storage.deleted,
            result.filesystem.deleted,
        )
        return result
