"""Filesystem source adapter.

This module provides a Source implementation that walks the local media
pool tree (``<project_root>/public/media/<scope>``).
"""

import logging
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path

from ...core.paths import media_repo_path, validate_path_safety
from ...sources.base import Source, SourceAsset
from ...transformers.base import Transformer

logger = logging.getLogger(__name__)

# Index and OS metadata files never surface as assets (compared lower-case)
SKIPPED_FILE_NAMES = {"index.json", ".ds_store", "thumbs.db", "desktop.ini"}


def list_media_files(root: Path) -> list[str]:
    """Recursively list media files below a directory.

    Args:
        root: Directory to walk

    Returns:
        Sorted POSIX paths relative to ``root``; empty when root is missing
    """
    if not root.is_dir():
        return []

    files: list[str] = []
    root_resolved = root.resolve()

    # Walk the directory tree
    for dirpath, _, filenames in os.walk(root):
        for filename in filenames:
            if filename.lower() in SKIPPED_FILE_NAMES:
                continue

            file_path = Path(dirpath) / filename
            try:
                # Symlinks must not lead outside the walked tree
                validate_path_safety(file_path, root_resolved)
            except ValueError as e:
                logger.warning("Skipping %s: %s", file_path, e)
                continue

            files.append(file_path.relative_to(root).as_posix())

    return sorted(files)


@dataclass
class FilesystemAsset:
    """A file found on disk.

    Attributes:
        uid: Project-relative path (or bundle key for fallback bundles)
        title: File name
        relative_path: Path relative to the scope directory
        folder: Folder containing the file, rooted at the scope
        path: Absolute location on disk
    """

    uid: str
    title: str
    relative_path: str
    folder: str
    path: Path


def build_assets(root: Path, scope: str, uid_prefix: str = "") -> list[SourceAsset]:
    """Wrap every file below ``root`` (the directory of ``scope``) as an asset."""
    assets: list[SourceAsset] = []
    for relative in list_media_files(root):
        folder = posixpath.join(scope, posixpath.dirname(relative)).rstrip("/")
        file_name = posixpath.basename(relative)
        uid = f"{uid_prefix}{posixpath.join(scope, relative)}" if uid_prefix else media_repo_path(folder, file_name)
        assets.append(
            FilesystemAsset(
                uid=uid,
                title=file_name,
                relative_path=relative,
                folder=folder,
                path=root / relative,
            )
        )
    return assets


class FilesystemSource(Source):
    """Source adapter for the local media pool.

    Example:
        >>> source = FilesystemSource(Path('/srv/admin/public/media'))
        >>> assets = source.list_assets('mediapool/Audio')
    """

    name = "filesystem"

    def __init__(self, media_root: Path):
        """Initialize filesystem source.

        Args:
            media_root: Directory holding ``mediapool/`` (public/media)
        """
        self.media_root = media_root

    def list_assets(self, scope: str) -> list[SourceAsset]:
        """List files below the scope directory; a missing directory is empty."""
        return build_assets(self.media_root / scope, scope)

    def get_transformer(self) -> Transformer:
        from .transformer import FilesystemTransformer

        return FilesystemTransformer()
