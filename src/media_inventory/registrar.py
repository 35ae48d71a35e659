"""Upload registration.

Registering an upload records a manifest entry; binaries never land in the
project tree. When object storage is configured and content is supplied,
the binary is pushed there and the entry points at it. Registration is
append-only and never fails just because the storage upload failed: the
entry is still useful as a pending reference.
"""

import logging
import posixpath
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

from .core.classify import build_media_slug, classify, derive_folder_meta
from .core.folders import canonicalize, folder_tag
from .core.paths import folder_from_media_path, media_repo_path, sanitize_filename, validate_url
from .core.types import ManifestDocument, ManifestEntry, SupabaseRef
from .manifest_store import ManifestStore, utc_now_iso
from .storage import StorageResult, SupabaseStorageGateway

logger = logging.getLogger(__name__)

# Folder used when neither a folder nor a media path is given
DEFAULT_UPLOAD_FOLDER = "mediapool/Other"


@dataclass
class RegistrationResult:
    entry: ManifestEntry
    manifest_path: Path
    manifest_fallback: bool
    storage: StorageResult | None = None


def generate_entry_id(safe_name: str) -> str:
    """Unique id: millisecond timestamp, random suffix, sanitized name."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}-{safe_name}"


def resolve_upload_folder(folder: str | None, path: str | None) -> str:
    """Pick the canonical folder for an upload.

    An explicit folder wins; otherwise the folder part of a
    ``public/media/...`` path is used.
    """
    raw = folder if isinstance(folder, str) and folder.strip() else folder_from_media_path(path)
    if not str(raw or "").strip():
        return DEFAULT_UPLOAD_FOLDER
    return canonicalize(raw)


class UploadRegistrar:
    """Registers uploads in the manifest, optionally storing the binary.

    Example:
        >>> registrar = UploadRegistrar(store, gateway)
        >>> result = registrar.register(file_name="hero.png", folder="icons")
        >>> result.entry["status"]
        'pending-external'
    """

    def __init__(self, store: ManifestStore, gateway: SupabaseStorageGateway | None = None):
        self.store = store
        self.gateway = gateway

    def build_entry(
        self,
        file_name: str | None = None,
        folder: str | None = None,
        path: str | None = None,
        remote_url: str | None = None,
        size_bytes: int | None = None,
    ) -> ManifestEntry:
        """Derive a manifest entry without touching any backend.

        Raises:
            ValueError: If remote_url uses a scheme other than http/https
        """
        validate_url(remote_url)

        derived_name = posixpath.basename(str(path or "").replace("\\", "/"))
        safe_name = sanitize_filename(file_name or derived_name or "upload")
        resolved_folder = resolve_upload_folder(folder, path)

        extension_type = classify(safe_name)
        meta = derive_folder_meta(resolved_folder, extension_type)
        entry_type = meta["type"] or extension_type
        slug = build_media_slug(resolved_folder, entry_type, safe_name)
        tags = list(
            dict.fromkeys([entry_type, *meta["tags"], folder_tag(resolved_folder), f"slug:{slug}"])
        )

        entry = ManifestEntry(
            id=generate_entry_id(safe_name),
            name=posixpath.splitext(safe_name)[0] or safe_name,
            fileName=safe_name,
            folder=resolved_folder,
            path=media_repo_path(resolved_folder, safe_name),
            type=entry_type,
            kind=entry_type,
            url=remote_url or "",
            status="external" if remote_url else "pending-external",
            notes=(
                "External media registered."
                if remote_url
                else "Upload recorded. Provide an external URL to activate this asset."
            ),
            createdAt=utc_now_iso(),
            tags=tags,
            category=meta["category"],
            categoryLabel=meta["categoryLabel"],
            slug=slug,
        )
        if isinstance(size_bytes, int) and size_bytes >= 0:
            entry["sizeBytes"] = size_bytes
        return entry

    def _store_binary(
        self,
        gateway: SupabaseStorageGateway,
        entry: ManifestEntry,
        content: bytes | str,
        size_bytes: int | None,
    ) -> StorageResult:
        """Upload the binary and record the outcome on the entry."""
        try:
            upload = gateway.upload_media(entry["folder"], entry["fileName"], content, size_bytes)
        except Exception as e:
            logger.exception("Storage upload for %s raised", entry["fileName"])
            entry["status"] = "error-supabase"
            entry["notes"] = str(e) or "Supabase upload threw unexpectedly."
            return StorageResult(ok=False, error=entry["notes"])

        if upload.ok:
            entry["url"] = upload.public_url or entry.get("url", "")
            entry["status"] = "supabase"
            entry["notes"] = "Uploaded to Supabase storage."
            entry["supabase"] = SupabaseRef(
                bucket=upload.bucket or "",
                path=upload.path or "",
                publicUrl=upload.public_url or "",
                sizeBytes=upload.size_bytes or 0,
            )
            entry["sizeBytes"] = upload.size_bytes or 0
        elif not upload.skipped:
            logger.warning("Storage upload for %s failed: %s", entry["fileName"], upload.message)
            entry["status"] = "error-supabase"
            entry["notes"] = upload.message or "Supabase upload failed."
        return upload

    def register(
        self,
        file_name: str | None = None,
        folder: str | None = None,
        content: bytes | str | None = None,
        remote_url: str | None = None,
        size_bytes: int | None = None,
        path: str | None = None,
    ) -> RegistrationResult:
        """Register an upload and append it to the manifest.

        Args:
            file_name: Original file name (sanitized before use)
            folder: Folder alias or path; defaults to the folder of ``path``
            content: Binary payload as bytes, base64 text or a data URL
            remote_url: Where the binary already lives, if not uploaded here
            size_bytes: Size hint recorded on the entry
            path: ``public/media/...`` path the upload was meant for

        Returns:
            RegistrationResult with the appended entry and where it was written

        Raises:
            ValueError: If remote_url uses a scheme other than http/https
            OSError: If the manifest cannot be written anywhere
        """
        entry = self.build_entry(file_name, folder, path, remote_url, size_bytes)

        storage: StorageResult | None = None
        if content and self.gateway is not None and self.gateway.enabled:
            storage = self._store_binary(self.gateway, entry, content, size_bytes)

        def append(manifest: ManifestDocument) -> bool:
            manifest["items"].append(entry)
            return True

        _, write = self.store.update(append, changed=[entry])
        if write is None:
            raise RuntimeError(f"Manifest was not written for {entry['id']}")
        logger.info("Registered %s in %s (%s)", entry["id"], entry["folder"], entry["status"])
        return RegistrationResult(
            entry=entry,
            manifest_path=write.path,
            manifest_fallback=write.fallback,
            storage=storage,
        )
