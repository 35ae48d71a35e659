"""Manifest document persistence with a writable fallback location.

The primary manifest lives inside the project tree, which may be mounted
read-only (a deployed build). Writes that hit a permission or read-only
error are redirected to a fallback location, and the last successful
location is remembered in a ``StorageContext`` so the next read finds
what was just written.

Concurrency: ``update`` serializes read-modify-write cycles within one
process. Separate processes sharing the same manifest still race; the last
writer wins and overwrites the whole document.
"""

import errno
import json
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from .config import MediaSettings
from .core.types import ManifestDocument, ManifestEntry
from .core.validator import validate_entries

logger = logging.getLogger(__name__)

MANIFEST_VERSION = 1

# Write errors that trigger the fallback location
FALLBACK_ERRNOS = {errno.EROFS, errno.EACCES, errno.EPERM}

T = TypeVar("T")


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def empty_manifest() -> ManifestDocument:
    return ManifestDocument(version=MANIFEST_VERSION, updatedAt=utc_now_iso(), items=[])


@dataclass
class StorageContext:
    """Remembers where the manifest was last read from or written to."""

    runtime_path: Path | None = None


@dataclass
class ManifestReadResult:
    manifest: ManifestDocument
    path: Path


@dataclass
class ManifestWriteResult:
    path: Path
    fallback: bool = False
    error: OSError | None = field(default=None, repr=False)


class ManifestStore:
    """Reads and writes the manifest document.

    Example:
        >>> store = ManifestStore(MediaSettings.from_env())
        >>> result = store.read()
        >>> result.manifest["items"].append(entry)
        >>> store.write(result.manifest)
    """

    def __init__(self, settings: MediaSettings, context: StorageContext | None = None):
        """Initialize the store.

        Args:
            settings: Resolved primary/fallback manifest locations
            context: Shared remembered-path state; defaults to a fresh context
                     seeded from settings.runtime_manifest_path
        """
        self.settings = settings
        self.context = context or StorageContext(runtime_path=settings.runtime_manifest_path)
        self._lock = threading.RLock()

    @property
    def primary_path(self) -> Path:
        return self.settings.manifest_path

    @property
    def fallback_path(self) -> Path:
        return self.settings.fallback_manifest_path

    def _search_paths(self) -> list[Path]:
        candidates = [self.context.runtime_path, self.primary_path, self.fallback_path]
        paths: list[Path] = []
        for candidate in candidates:
            if candidate is not None and candidate not in paths:
                paths.append(candidate)
        return paths

    def read(self) -> ManifestReadResult:
        """Read the manifest from the first available location.

        Candidates are tried in order: the remembered runtime path, the
        primary path, the fallback path. Missing files are skipped; any
        other error is only raised when it comes from the last candidate.

        Returns:
            ManifestReadResult with the document and the path it came from.
            When no candidate exists, a fresh empty document (not written)
            reported against the primary path.

        Raises:
            OSError: If the last candidate exists but cannot be read
            json.JSONDecodeError: If the last candidate is not valid JSON
        """
        paths = self._search_paths()
        for index, candidate in enumerate(paths):
            try:
                data = json.loads(candidate.read_text(encoding="utf-8"))
            except FileNotFoundError:
                continue
            except (OSError, json.JSONDecodeError) as e:
                if index == len(paths) - 1:
                    raise
                logger.warning("Skipping unreadable manifest %s: %s", candidate, e)
                continue

            self.context.runtime_path = candidate
            manifest: dict[str, Any] = data if isinstance(data, dict) else {}
            if not isinstance(manifest.get("items"), list):
                manifest["items"] = []
            manifest.setdefault("version", MANIFEST_VERSION)
            return ManifestReadResult(manifest=manifest, path=candidate)  # type: ignore[arg-type]

        return ManifestReadResult(manifest=empty_manifest(), path=self.primary_path)

    def write(
        self, manifest: ManifestDocument, changed: list[ManifestEntry] | None = None
    ) -> ManifestWriteResult:
        """Write the whole manifest document.

        Args:
            manifest: Document to persist
            changed: Entries added or edited by this write; only these are
                     validated, existing records are written back as found

        Returns:
            ManifestWriteResult; ``fallback`` is True when the primary path
            was read-only and the fallback path was used instead

        Raises:
            jsonschema.ValidationError: If a changed entry is not valid
            OSError: If the primary write fails for a non-permission reason,
                     or the fallback write fails
        """
        validate_entries(manifest, changed or [])
        payload = json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"

        with self._lock:
            try:
                self._write_file(self.primary_path, payload)
            except OSError as e:
                if e.errno not in FALLBACK_ERRNOS:
                    raise
                logger.warning(
                    "Primary manifest %s is not writable (%s); writing fallback %s",
                    self.primary_path,
                    e,
                    self.fallback_path,
                )
                self._write_file(self.fallback_path, payload)
                self.context.runtime_path = self.fallback_path
                return ManifestWriteResult(path=self.fallback_path, fallback=True, error=e)

            self.context.runtime_path = self.primary_path
            return ManifestWriteResult(path=self.primary_path, fallback=False)

    def update(
        self,
        mutate: Callable[[ManifestDocument], T],
        changed: list[ManifestEntry] | None = None,
    ) -> tuple[T, ManifestWriteResult | None]:
        """Run a read-modify-write cycle under the store lock.

        ``mutate`` edits the document in place and returns a value. The
        document is written only when that value is truthy, with
        ``updatedAt`` refreshed.

        Returns:
            Tuple of (mutate's return value, write result or None)
        """
        with self._lock:
            manifest = self.read().manifest
            outcome = mutate(manifest)
            if not outcome:
                return outcome, None
            manifest["updatedAt"] = utc_now_iso()
            return outcome, self.write(manifest, changed)

    def debug_info(self) -> dict[str, str]:
        """Locations involved in manifest resolution, for diagnostics."""
        runtime = self.context.runtime_path
        return {
            "runtime": str(runtime) if runtime else "",
            "primary": str(self.primary_path),
            "fallback": str(self.fallback_path),
        }

    @staticmethod
    def _write_file(path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
