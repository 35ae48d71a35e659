"""Shared fixtures: an isolated project tree with its own manifest locations."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from media_inventory.config import MediaSettings
from media_inventory.manifest_store import ManifestStore
from media_inventory.storage import SupabaseStorageGateway


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "admin"
    (root / "public" / "media" / "mediapool").mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def settings(tmp_path: Path, project_root: Path) -> MediaSettings:
    """Settings with storage disabled and no fallback bundle."""
    return MediaSettings.for_project(
        project_root,
        fallback_manifest_path=tmp_path / "fallback" / "manifest.json",
        game_enabled=False,
    )


@pytest.fixture
def store(settings: MediaSettings) -> ManifestStore:
    return ManifestStore(settings)


@pytest.fixture
def offline_gateway(settings: MediaSettings) -> Iterator[SupabaseStorageGateway]:
    """Gateway without credentials: every call is skipped."""
    gateway = SupabaseStorageGateway(settings)
    yield gateway
    gateway.close()


@pytest.fixture
def write_media(project_root: Path) -> Callable[..., Path]:
    """Factory creating a file under public/media; returns its absolute path."""

    def _write(rel_path: str, content: bytes = b"data") -> Path:
        target = project_root / "public" / "media" / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return target

    return _write
