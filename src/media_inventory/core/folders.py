"""Folder canonicalization for the media pool.

Authors refer to folders by short aliases ("audio", "icons"), nested paths
("mediapool/images/icons") or legacy names. Everything is mapped onto one
canonical path under the fixed ``mediapool`` root so that the manifest, the
object-storage prefix and the local filesystem tree agree on naming.

All functions here are pure: no I/O, no clock.
"""

import re

MEDIA_ROOT_FOLDER = "mediapool"

# Aliases for a folder's first segment (or the whole input).
DIR_ALIASES: dict[str, str] = {
    "": "mediapool",
    "mediapool": "mediapool",
    "all": "mediapool",
    "audio": "mediapool/Audio",
    "video": "mediapool/Video",
    "ar-target": "mediapool/AR Target",
    "ar-overlay": "mediapool/AR Overlay",
    "images": "mediapool/Images",
    "gif": "mediapool/Gif",
    "gifs": "mediapool/Gif",
    "other": "mediapool/Other",
    "bundles": "mediapool/Images/bundles",
    "icons": "mediapool/Images/icons",
    "covers": "mediapool/Images/covers",
    "uploads": "mediapool/Images/uploads",
}

# Display-case names for segments directly below the mediapool root.
SEGMENT_ALIASES: dict[str, str] = {
    "audio": "Audio",
    "video": "Video",
    "ar-target": "AR Target",
    "ar-overlay": "AR Overlay",
    "images": "Images",
    "gif": "Gif",
    "gifs": "Gif",
    "other": "Other",
}

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(value: str | None) -> str:
    """Lower-case a value and collapse every non-alphanumeric run to '-'.

    Example:
        "AR Target" -> "ar-target"
    """
    return _NON_SLUG_CHARS.sub("-", str(value or "").lower()).strip("-")


def normalize_folder(folder: str | None) -> str:
    """Normalize separators and trim slashes; empty input means the pool root."""
    normalized = str(folder or "").strip().replace("\\", "/").strip("/")
    return normalized or MEDIA_ROOT_FOLDER


def _split_segments(value: str) -> list[str]:
    return [segment.strip() for segment in value.split("/") if segment.strip()]


def canonicalize(raw_folder: str | None) -> str:
    """Map a user-supplied folder name onto its canonical media pool path.

    Args:
        raw_folder: Alias, nested path, or ad-hoc folder name

    Returns:
        Canonical folder. Inputs outside the mediapool root that match no
        alias are returned trimmed but otherwise unchanged.

    Example:
        >>> canonicalize("icons")
        'mediapool/Images/icons'
        >>> canonicalize("/mediapool/audio/")
        'mediapool/Audio'
    """
    segments = _split_segments(str(raw_folder or "").replace("\\", "/"))
    if not segments:
        return DIR_ALIASES[""]

    # "mediapool" is itself an alias, so rooted inputs resolve here too.
    root_slug = slugify(segments[0])
    root_alias = DIR_ALIASES.get(root_slug) if root_slug else None
    if root_alias is None:
        return "/".join(segments)

    normalized = root_alias.split("/")
    for segment in segments[1:]:
        normalized.append(SEGMENT_ALIASES.get(slugify(segment), segment))
    return "/".join(normalized)


def folder_matches_scope(folder: str | None, scope: str | None) -> bool:
    """Check whether a folder equals or descends from the requested scope.

    The pool root (or an empty scope) matches everything. Comparison is
    case-insensitive.
    """
    normalized_folder = normalize_folder(folder).lower()
    normalized_scope = normalize_folder(scope).lower()
    if normalized_scope == MEDIA_ROOT_FOLDER:
        return True
    if normalized_folder == normalized_scope:
        return True
    return normalized_folder.startswith(f"{normalized_scope}/")


def folder_slug(folder: str | None) -> str:
    """Tag value used for ``folder:<slug>`` tags."""
    return slugify(normalize_folder(folder))


def folder_tag(folder: str | None) -> str:
    return f"folder:{folder_slug(folder)}"
