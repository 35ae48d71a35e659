"""Media type classification.

Assets are classified two ways: by file extension, and by the canonical
folder they live in. The folder wins when both are available, because
authors deliberately drop non-standard extensions into typed folders
(a ``.bin`` marker inside ``AR Target`` is still an AR target).

This module also derives the secondary descriptors every inventory item
carries: the placeholder preview, the human-readable slug and the MIME
type used for object uploads.
"""

import re
from dataclasses import dataclass
from typing import Callable

from .folders import MEDIA_ROOT_FOLDER, slugify
from .types import FolderMeta, PlaceholderInfo

# Ordered: gif must be tested before the generic image pattern.
EXTENSION_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("gif", re.compile(r"\.gif$", re.IGNORECASE)),
    ("image", re.compile(r"\.(png|jpe?g|webp|svg|bmp|tiff?|avif|heic|heif)$", re.IGNORECASE)),
    ("video", re.compile(r"\.(mp4|webm|mov)$", re.IGNORECASE)),
    ("audio", re.compile(r"\.(mp3|wav|ogg|m4a|aiff?)$", re.IGNORECASE)),
    ("ar-overlay", re.compile(r"\.(glb|gltf|usdz|reality|vrm|fbx|obj)$", re.IGNORECASE)),
]

PLACEHOLDER_FILE_NAME = ".gitkeep"

# category key -> (label, default type or None to keep the extension type, base tags)
CATEGORY_INFO: dict[str, tuple[str, str | None, tuple[str, ...]]] = {
    "audio": ("Audio", "audio", ("audio",)),
    "video": ("Video", "video", ("video",)),
    "ar-target": ("AR Target", "ar-target", ("ar", "ar-target")),
    "ar-overlay": ("AR Overlay", "ar-overlay", ("ar", "ar-overlay")),
    "images": ("Images", None, ("image",)),
    "gif": ("Gif", "gif", ("gif",)),
    "other": ("Other", None, ("other",)),
}

# Category used when the folder does not pin one down.
TYPE_CATEGORIES: dict[str, str] = {
    "image": "images",
    "gif": "gif",
    "video": "video",
    "audio": "audio",
    "ar-overlay": "ar-overlay",
    "ar-target": "ar-target",
    "other": "other",
}

IMAGE_SUBFOLDER_TAGS: dict[str, str] = {
    "icons": "icon",
    "covers": "cover",
    "bundles": "bundle",
    "uploads": "upload",
}

PLACEHOLDER_BASE_PATH = "public/media/placeholders"
PLACEHOLDER_BASE_URL = "/media/placeholders"

MAX_SLUG_LENGTH = 80

CONTENT_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "svg": "image/svg+xml",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "avif": "image/avif",
    "heic": "image/heif",
    "heif": "image/heif",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "webm": "video/webm",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "m4a": "audio/m4a",
    "aif": "audio/aiff",
    "aiff": "audio/aiff",
    "glb": "model/gltf-binary",
    "gltf": "model/gltf+json",
    "usdz": "model/vnd.usdz+zip",
    "obj": "model/obj",
    "json": "application/json",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _strip_query(name_or_url: str) -> str:
    return re.split(r"[?#]", str(name_or_url or ""), maxsplit=1)[0]


def classify(name_or_url: str | None) -> str:
    """Classify a file name or URL by extension.

    Args:
        name_or_url: File name, path or URL (query strings are ignored)

    Returns:
        One of 'gif', 'image', 'video', 'audio', 'ar-overlay' or 'other'
    """
    candidate = _strip_query(name_or_url or "")
    for kind, pattern in EXTENSION_PATTERNS:
        if pattern.search(candidate):
            return kind
    return "other"


def is_placeholder_file(file_name: str | None) -> bool:
    """Check whether a file is the keep-alive marker that keeps a folder tracked."""
    base = str(file_name or "").replace("\\", "/").rstrip("/").split("/")[-1]
    return base.lower() == PLACEHOLDER_FILE_NAME


def derive_folder_meta(folder: str | None, fallback_type: str = "other") -> FolderMeta:
    """Infer the default category, type and tags for a canonical folder.

    The second segment of a ``mediapool/...`` folder selects the category.
    Typed categories (Audio, Video, Gif, AR Target, AR Overlay) force their
    type; Images and Other keep ``fallback_type``. When the folder names no
    known category the category follows ``fallback_type`` instead.

    Args:
        folder: Canonical folder, e.g. 'mediapool/Images/icons'
        fallback_type: Type derived from the file extension

    Returns:
        FolderMeta with category, categoryLabel, type and tags
    """
    normalized = str(folder or "").replace("\\", "/").strip("/")
    segments = [segment.strip() for segment in normalized.split("/") if segment.strip()]

    category = ""
    if segments and segments[0].lower() == MEDIA_ROOT_FOLDER and len(segments) > 1:
        second = slugify(segments[1])
        if second == "gifs":
            second = "gif"
        if second in CATEGORY_INFO:
            category = second
    if not category:
        category = TYPE_CATEGORIES.get(fallback_type, "other")

    label, forced_type, base_tags = CATEGORY_INFO[category]
    tags = [f"category:{category}", *base_tags]

    if category == "images" and len(segments) > 2:
        sub_tag = IMAGE_SUBFOLDER_TAGS.get(slugify(segments[2]))
        if sub_tag:
            tags.append(sub_tag)

    return FolderMeta(
        category=category,
        categoryLabel=label,
        type=forced_type or fallback_type,
        tags=tags,
    )


@dataclass(frozen=True)
class _PlaceholderRule:
    file: str
    kind: str
    match: Callable[[str, str], bool]


PLACEHOLDER_RULES: list[_PlaceholderRule] = [
    _PlaceholderRule(
        "ar-overlay.svg",
        "ar-overlay",
        lambda folder, kind: "ar overlay" in folder or kind in ("ar-overlay", "ar"),
    ),
    _PlaceholderRule(
        "ar-target.svg",
        "ar-target",
        lambda folder, kind: "ar target" in folder or kind == "ar-target",
    ),
    _PlaceholderRule("bundle.svg", "bundle", lambda folder, _: "bundles" in folder),
    _PlaceholderRule("cover.svg", "cover", lambda folder, _: "covers" in folder),
    _PlaceholderRule("icon.svg", "icon", lambda folder, _: "icons" in folder),
    _PlaceholderRule("upload.svg", "upload", lambda folder, _: "uploads" in folder),
    _PlaceholderRule("audio.svg", "audio", lambda _, kind: kind == "audio"),
    _PlaceholderRule("video.svg", "video", lambda _, kind: kind == "video"),
]


def _placeholder(kind: str, file: str) -> PlaceholderInfo:
    return PlaceholderInfo(
        kind=kind,
        file=file,
        path=f"{PLACEHOLDER_BASE_PATH}/{file}",
        url=f"{PLACEHOLDER_BASE_URL}/{file}",
    )


def resolve_placeholder(folder: str | None, media_type: str | None) -> PlaceholderInfo:
    """Pick the preview image shown for an asset without a thumbnail.

    The first matching rule wins; otherwise the folder name decides between
    the video, audio and generic image previews.
    """
    folder_lower = str(folder or "").lower()
    type_lower = str(media_type or "").lower()
    for rule in PLACEHOLDER_RULES:
        if rule.match(folder_lower, type_lower):
            return _placeholder(rule.kind, rule.file)

    if "video" in folder_lower:
        return _placeholder("video", "video.svg")
    if "audio" in folder_lower:
        return _placeholder("audio", "audio.svg")
    return _placeholder("image", "image.svg")


def build_media_slug(folder: str | None, media_type: str | None, name: str | None) -> str:
    """Build a readable identifier: type + folder leaf + base name.

    Not globally unique; capped at MAX_SLUG_LENGTH characters.

    Example:
        ("mediapool/Images/icons", "image", "hero.png") -> "image-icons-hero"
    """
    type_slug = slugify(media_type) or "media"
    folder_leaf = str(folder or "").replace("\\", "/").strip("/").split("/")[-1]
    folder_hint = slugify(folder_leaf)
    base = slugify(re.sub(r"\.[^.]+$", "", _strip_query(name or "").split("/")[-1])) or "asset"

    parts = [type_slug]
    if folder_hint and folder_hint != type_slug:
        parts.append(folder_hint)
    parts.append(base)
    return re.sub(r"-+", "-", "-".join(parts))[:MAX_SLUG_LENGTH]


def guess_content_type(file_name: str | None) -> str:
    """Return the MIME type used when uploading a file to object storage."""
    extension = str(file_name or "").lower().rsplit(".", 1)[-1]
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)
