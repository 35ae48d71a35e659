"""Runtime configuration for the media inventory.

Every storage location is resolved from environment variables at the time
``MediaSettings.from_env()`` is called; nothing is cached across calls.
"""

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .core.paths import MEDIA_DIR

DEFAULT_MEDIA_BUCKET = "media"
DEFAULT_MEDIA_PREFIX = "mediapool"
DEFAULT_HTTP_TIMEOUT = 10.0
MANIFEST_FILE_NAME = "manifest.json"

_TRUE_VALUES = {"1", "true", "on", "yes", "enabled"}
_FALSE_VALUES = {"0", "false", "off", "no", "disabled"}


class ConfigError(Exception):
    """Raised when an environment value cannot be interpreted."""


def parse_flag(value: str | None, default: bool = False) -> bool:
    """Interpret an on/off environment flag.

    Unrecognised values fall back to ``default``.
    """
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def _default_temp_root(env: Mapping[str, str]) -> Path:
    for key in ("TMPDIR", "TEMP", "TEMPDIR"):
        if env.get(key):
            return Path(env[key])
    return Path(tempfile.gettempdir())


@dataclass(frozen=True)
class MediaSettings:
    """Resolved storage locations and remote-storage credentials."""

    project_root: Path
    manifest_path: Path
    fallback_manifest_path: Path
    runtime_manifest_path: Path | None = None
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_anon_key: str = ""
    media_bucket: str = DEFAULT_MEDIA_BUCKET
    media_prefix: str = DEFAULT_MEDIA_PREFIX
    game_enabled: bool = False
    game_root: Path | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @property
    def media_root(self) -> Path:
        """Local directory holding ``mediapool/``."""
        return self.project_root / MEDIA_DIR

    @property
    def game_media_root(self) -> Path | None:
        if self.game_root is None:
            return None
        return self.game_root / MEDIA_DIR

    @classmethod
    def for_project(cls, project_root: Path, **overrides) -> "MediaSettings":
        """Build settings rooted at ``project_root`` with default locations.

        Example:
            >>> settings = MediaSettings.for_project(Path("/srv/admin"), game_enabled=False)
        """
        root = project_root.resolve()
        values = {
            "project_root": root,
            "manifest_path": root / MEDIA_DIR / MANIFEST_FILE_NAME,
            "fallback_manifest_path": Path(tempfile.gettempdir()) / "admin-media" / MANIFEST_FILE_NAME,
            "game_root": root.parent / "game-web",
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "MediaSettings":
        """Resolve settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ`` (used by tests)

        Raises:
            ConfigError: If MEDIA_HTTP_TIMEOUT is not a positive number
        """
        env = os.environ if env is None else env

        project_root = Path(env.get("MEDIA_PROJECT_ROOT") or os.getcwd()).resolve()

        if env.get("MEDIA_MANIFEST_PATH"):
            manifest_path = Path(env["MEDIA_MANIFEST_PATH"]).resolve()
        else:
            manifest_path = project_root / MEDIA_DIR / MANIFEST_FILE_NAME

        if env.get("MEDIA_MANIFEST_FALLBACK_PATH"):
            fallback_path = Path(env["MEDIA_MANIFEST_FALLBACK_PATH"]).resolve()
        else:
            if env.get("MEDIA_STORAGE_ROOT"):
                storage_root = Path(env["MEDIA_STORAGE_ROOT"]).resolve()
            else:
                storage_root = _default_temp_root(env) / "admin-media"
            fallback_path = storage_root / MANIFEST_FILE_NAME

        runtime_path = env.get("MEDIA_MANIFEST_RUNTIME_PATH")

        game_flag = env.get("NEXT_PUBLIC_GAME_ENABLED", env.get("GAME_ENABLED", "1"))
        if env.get("MEDIA_GAME_ROOT"):
            game_root = Path(env["MEDIA_GAME_ROOT"]).resolve()
        else:
            game_root = project_root.parent / "game-web"

        raw_timeout = env.get("MEDIA_HTTP_TIMEOUT", "")
        try:
            http_timeout = float(raw_timeout) if raw_timeout else DEFAULT_HTTP_TIMEOUT
        except ValueError as e:
            raise ConfigError(f"MEDIA_HTTP_TIMEOUT must be a number, got {raw_timeout!r}") from e
        if http_timeout <= 0:
            raise ConfigError(f"MEDIA_HTTP_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(
            project_root=project_root,
            manifest_path=manifest_path,
            fallback_manifest_path=fallback_path,
            runtime_manifest_path=Path(runtime_path) if runtime_path else None,
            supabase_url=env.get("SUPABASE_URL", "").rstrip("/"),
            supabase_service_role_key=env.get("SUPABASE_SERVICE_ROLE_KEY", ""),
            supabase_anon_key=env.get("SUPABASE_ANON_KEY", ""),
            media_bucket=env.get("SUPABASE_MEDIA_BUCKET", DEFAULT_MEDIA_BUCKET),
            media_prefix=env.get("SUPABASE_MEDIA_PREFIX", DEFAULT_MEDIA_PREFIX),
            game_enabled=parse_flag(game_flag),
            game_root=game_root,
            http_timeout=http_timeout,
        )
