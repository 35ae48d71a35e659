"""Object storage platform for the inventory pipeline.

Lists media objects from Supabase Storage. The platform only registers a
source when the storage endpoint, bucket and credentials are configured.
"""

from .source import StorageErrorAsset, StorageObjectAsset, SupabaseSource
from .transformer import SupabaseTransformer

# Auto-register with the registry
from ...registry import SourceRegistry


def _create_supabase_source(gateway, **kwargs) -> SupabaseSource | None:
    """Factory function for creating object storage sources.

    Args:
        gateway: SupabaseStorageGateway shared with the registrar and deleter

    Returns:
        SupabaseSource, or None when storage is not configured
    """
    if not gateway.enabled:
        return None
    return SupabaseSource(gateway)


# Auto-register at module import
SourceRegistry.register_factory("supabase", _create_supabase_source)

__all__ = [
    "StorageErrorAsset",
    "StorageObjectAsset",
    "SupabaseSource",
    "SupabaseTransformer",
]
