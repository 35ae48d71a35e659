"""Manifest platform for the inventory pipeline.

Registered entries from the manifest document have the highest
precedence: the manifest is authoritative for registration, even when
the file it points at is not on disk.
"""

from .source import ManifestAsset, ManifestSource
from .transformer import ManifestTransformer

# Auto-register with the registry
from ...registry import SourceRegistry


def _create_manifest_source(settings, store, **kwargs) -> ManifestSource:
    """Factory function for creating manifest sources.

    Args:
        settings: MediaSettings with the project root
        store: ManifestStore shared with the registrar and deleter
    """
    return ManifestSource(store, settings.project_root)


# Auto-register at module import
SourceRegistry.register_factory("manifest", _create_manifest_source)

__all__ = ["ManifestAsset", "ManifestSource", "ManifestTransformer"]
