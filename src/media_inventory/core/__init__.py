"""Core utilities for media inventory and manifests.

This package contains the pure building blocks shared by every backend:
folder canonicalization, type classification, path safety, the manifest
type definitions and schema validation.
"""

from .classify import (
    PLACEHOLDER_FILE_NAME,
    build_media_slug,
    classify,
    derive_folder_meta,
    guess_content_type,
    is_placeholder_file,
    resolve_placeholder,
)
from .folders import canonicalize, folder_matches_scope, folder_tag, normalize_folder, slugify
from .paths import sanitize_filename, validate_path_safety, validate_url
from .types import FolderMeta, InventoryItem, ManifestDocument, ManifestEntry, PlaceholderInfo
from .validator import validate_entries, validate_manifest, validate_manifest_with_error_details

__all__ = [
    "FolderMeta",
    "InventoryItem",
    "ManifestDocument",
    "ManifestEntry",
    "PLACEHOLDER_FILE_NAME",
    "PlaceholderInfo",
    "build_media_slug",
    "canonicalize",
    "classify",
    "derive_folder_meta",
    "folder_matches_scope",
    "folder_tag",
    "guess_content_type",
    "is_placeholder_file",
    "normalize_folder",
    "resolve_placeholder",
    "sanitize_filename",
    "slugify",
    "validate_entries",
    "validate_manifest",
    "validate_manifest_with_error_details",
    "validate_path_safety",
    "validate_url",
]
