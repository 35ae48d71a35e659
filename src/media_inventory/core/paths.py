"""Name, path and URL safety helpers.

Uploads arrive with arbitrary file names and delete requests carry
caller-supplied paths, so everything that reaches the filesystem or a
storage key passes through here first.
"""

import posixpath
import re
import time
from pathlib import Path
from urllib.parse import urlparse

# Anything outside this set is replaced in uploaded file names
UNSAFE_FILENAME_CHARS = r"[^A-Za-z0-9._-]+"

MEDIA_DIR = "public/media"
MEDIA_POOL_DIR = f"{MEDIA_DIR}/mediapool"


def sanitize_filename(filename: str | None) -> str:
    """Sanitize a filename for use in storage keys and manifest entries.

    Runs of unsafe characters (including path separators) become a single
    underscore; leading/trailing underscores are trimmed.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename, or ``upload_<ms>`` when nothing usable remains
    """
    sanitized = re.sub(UNSAFE_FILENAME_CHARS, "_", str(filename or "").strip())
    sanitized = re.sub(r"_+", "_", sanitized).strip("_")
    return sanitized or f"upload_{int(time.time() * 1000)}"


def validate_path_safety(path: Path, base_dir: Path) -> None:
    """Validate that a path stays within the base directory.

    This prevents path traversal attacks.

    Args:
        path: Path to validate
        base_dir: Base directory that path must be within

    Raises:
        ValueError: If path escapes the base directory
    """
    resolved_path = path.resolve()
    resolved_base = base_dir.resolve()

    if not resolved_path.is_relative_to(resolved_base):
        raise ValueError(f"Path {path} escapes base directory {base_dir}")


def validate_url(url: str | None) -> None:
    """Validate URL format and scheme.

    Only allows http:// and https:// schemes (or scheme-less relative URLs).

    Args:
        url: URL to validate

    Raises:
        ValueError: If URL has invalid format or dangerous scheme
    """
    if not url:  # Empty string is allowed
        return

    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https", ""):
        raise ValueError(f"Invalid URL scheme: {parsed.scheme}. Only http and https are allowed.")


def normalize_rel_path(path: str | None) -> str:
    """Use forward slashes and drop leading/trailing separators."""
    return str(path or "").replace("\\", "/").strip("/")


def media_repo_path(folder: str, file_name: str) -> str:
    """Project-relative path of a media pool file, e.g. public/media/mediapool/Audio/a.mp3."""
    return posixpath.join(MEDIA_DIR, normalize_rel_path(folder), file_name)


def build_url_from_path(repo_path: str | None) -> str:
    """Public URL under which a project-relative path is served.

    Example:
        "public/media/mediapool/Audio/a.mp3" -> "/media/mediapool/Audio/a.mp3"
    """
    normalized = normalize_rel_path(repo_path)
    if not normalized:
        return ""
    if normalized.startswith("public/"):
        return f"/{normalized[len('public/'):]}"
    return f"/{normalized}"


def folder_from_media_path(path: str | None) -> str:
    """Extract the folder part that follows ``public/media/`` in a path."""
    normalized = str(path or "").replace("\\", "/")
    marker = f"{MEDIA_DIR}/"
    index = normalized.find(marker)
    if index < 0:
        return ""
    after = normalized[index + len(marker):]
    return "/".join(after.split("/")[:-1])
