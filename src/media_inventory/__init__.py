"""Media Inventory - manifest reconciliation for the media pool.

This package merges the media manifest, object storage, the local media
pool and the game fallback bundle into one de-duplicated inventory, and
registers and deletes assets across those backends.
"""

# Core library interface
from .config import ConfigError, MediaSettings
from .deleter import DeleteCoordinator, DeleteRejectedError, DeleteResult, EntryRef
from .manifest_store import ManifestStore, StorageContext
from .pipeline import InventoryPipeline, merge_ranked
from .registrar import RegistrationResult, UploadRegistrar
from .registry import SOURCE_PRECEDENCE, SourceRegistry
from .sources.base import MergeCandidate, Source, SourceAsset
from .storage import StorageResult, SupabaseStorageGateway

# Core utilities
from .core import (
    InventoryItem,
    ManifestDocument,
    ManifestEntry,
    canonicalize,
    classify,
    derive_folder_meta,
    sanitize_filename,
    validate_manifest,
    validate_manifest_with_error_details,
    validate_path_safety,
    validate_url,
)

__version__ = "0.1.0"

# Auto-discover and register all platforms
SourceRegistry.discover_platforms()

__all__ = [
    # Primary library interface
    "InventoryPipeline",
    "SourceRegistry",
    "SOURCE_PRECEDENCE",
    "Source",
    "SourceAsset",
    "MergeCandidate",
    "merge_ranked",
    "MediaSettings",
    "ConfigError",
    "ManifestStore",
    "StorageContext",
    "SupabaseStorageGateway",
    "StorageResult",
    "UploadRegistrar",
    "RegistrationResult",
    "DeleteCoordinator",
    "DeleteRejectedError",
    "DeleteResult",
    "EntryRef",
    # Core utilities
    "InventoryItem",
    "ManifestDocument",
    "ManifestEntry",
    "canonicalize",
    "classify",
    "derive_folder_meta",
    "sanitize_filename",
    "validate_manifest",
    "validate_manifest_with_error_details",
    "validate_path_safety",
    "validate_url",
]
