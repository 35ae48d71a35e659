"""Filesystem platform for the inventory pipeline.

This platform lists the local media pool tree under
``<project_root>/public/media``.
"""

from .source import FilesystemAsset, FilesystemSource, list_media_files
from .transformer import FilesystemTransformer

# Auto-register with the registry
from ...registry import SourceRegistry


def _create_filesystem_source(settings, **kwargs) -> FilesystemSource:
    """Factory function for creating filesystem sources.

    Args:
        settings: MediaSettings with the project root
        **kwargs: Shared collaborators (unused for filesystem)

    Returns:
        FilesystemSource instance
    """
    return FilesystemSource(settings.media_root)


# Auto-register at module import
SourceRegistry.register_factory("filesystem", _create_filesystem_source)

__all__ = [
    "FilesystemAsset",
    "FilesystemSource",
    "FilesystemTransformer",
    "list_media_files",
]
