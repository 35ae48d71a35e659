"""Type definitions for the media manifest and inventory views.

This module defines TypedDict classes that mirror the JSON schema structure
defined in schemas/manifest.schema.json. Keys are camelCase because the
manifest document and the HTTP payloads are shared with a JavaScript UI.
"""

from typing import Literal, TypedDict

MediaKind = Literal[
    "image",
    "gif",
    "video",
    "audio",
    "ar-overlay",
    "ar-target",
    "placeholder",
    "other",
]

EntryStatus = Literal[
    "available",
    "external",
    "pending-external",
    "supabase",
    "error-supabase",
    "placeholder",
    "missing",
]

ItemSource = Literal["manifest", "supabase", "filesystem", "game", "supabase-error"]


class SupabaseRef(TypedDict, total=False):
    """Location of an asset's binary inside object storage."""

    bucket: str
    path: str
    publicUrl: str
    sizeBytes: int
    size: int
    updatedAt: str | None


class PlaceholderInfo(TypedDict):
    """Fallback preview shown when an asset has no thumbnail of its own."""

    kind: str
    file: str
    path: str  # Project-relative, e.g. public/media/placeholders/audio.svg
    url: str  # Public URL, e.g. /media/placeholders/audio.svg


class FolderMeta(TypedDict):
    """Default classification inferred from a canonical folder."""

    category: str  # Category key, e.g. 'images', 'ar-target'
    categoryLabel: str  # Display label, e.g. 'Images', 'AR Target'
    type: str  # Default media kind for the folder
    tags: list[str]


class ManifestEntry(TypedDict, total=False):
    """One registered asset in the manifest document."""

    id: str
    name: str
    fileName: str
    folder: str  # Always canonical (mediapool/...)
    path: str  # Project-relative locator, e.g. public/media/mediapool/Audio/a.mp3
    type: str
    kind: str
    url: str
    status: str
    notes: str
    sizeBytes: int
    createdAt: str
    tags: list[str]
    category: str
    categoryLabel: str
    slug: str
    supabase: SupabaseRef
    placeholder: PlaceholderInfo
    thumbUrl: str


class ManifestDocument(TypedDict):
    """The manifest document of record."""

    version: int
    updatedAt: str
    items: list[ManifestEntry]


class InventoryItem(TypedDict, total=False):
    """Caller-facing, read-only projection of one de-duplicated asset."""

    id: str
    name: str
    fileName: str
    url: str
    path: str
    folder: str
    type: str
    kind: str
    source: str
    category: str
    categoryLabel: str
    tags: list[str]
    status: str
    notes: str
    existsOnDisk: bool
    supabase: SupabaseRef | None
    thumbUrl: str
    placeholder: PlaceholderInfo | None
    slug: str
    deletable: bool  # False for keep-alive markers and read-only sources
