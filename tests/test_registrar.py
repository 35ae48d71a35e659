"""Tests for upload registration."""

import base64
import dataclasses
import errno
import json
import re
from pathlib import Path
from unittest.mock import Mock

import httpx
import pytest

from media_inventory.config import MediaSettings
from media_inventory.manifest_store import ManifestStore
from media_inventory.registrar import DEFAULT_UPLOAD_FOLDER, UploadRegistrar, resolve_upload_folder
from media_inventory.registry import SourceRegistry
from media_inventory.storage import SupabaseStorageGateway

SUPABASE_URL = "https://proj.supabase.co"


@pytest.fixture
def registrar(store: ManifestStore, offline_gateway: SupabaseStorageGateway) -> UploadRegistrar:
    return UploadRegistrar(store, offline_gateway)


def online_registrar(settings: MediaSettings, store: ManifestStore, handler) -> UploadRegistrar:
    online = dataclasses.replace(settings, supabase_url=SUPABASE_URL, supabase_service_role_key="key")
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return UploadRegistrar(store, SupabaseStorageGateway(online, client=client))


def manifest_on_disk(settings: MediaSettings) -> dict:
    return json.loads(settings.manifest_path.read_text(encoding="utf-8"))


class TestResolveUploadFolder:
    def test_explicit_folder_wins(self) -> None:
        assert resolve_upload_folder("icons", "public/media/mediapool/Audio/a.mp3") == "mediapool/Images/icons"

    def test_folder_from_path(self) -> None:
        assert resolve_upload_folder(None, "public/media/mediapool/audio/a.mp3") == "mediapool/Audio"

    def test_default_folder(self) -> None:
        assert resolve_upload_folder(None, None) == DEFAULT_UPLOAD_FOLDER
        assert resolve_upload_folder("  ", "a.mp3") == DEFAULT_UPLOAD_FOLDER


class TestRegister:
    """Test registration without object storage."""

    def test_icon_upload(self, registrar: UploadRegistrar, settings: MediaSettings) -> None:
        """Test registering hero.png into the icons folder."""
        result = registrar.register(file_name="hero.png", folder="icons")
        entry = result.entry

        assert re.fullmatch(r"\d+-[0-9a-f]{6}-hero\.png", entry["id"])
        assert entry["folder"] == "mediapool/Images/icons"
        assert entry["path"] == "public/media/mediapool/Images/icons/hero.png"
        assert entry["type"] == "image"
        assert entry["kind"] == "image"
        assert entry["status"] == "pending-external"
        assert entry["slug"] == "image-icons-hero"
        assert entry["category"] == "images"
        assert entry["tags"] == [
            "image",
            "category:images",
            "icon",
            "folder:mediapool-images-icons",
            "slug:image-icons-hero",
        ]
        assert result.storage is None
        assert result.manifest_path == settings.manifest_path
        assert result.manifest_fallback is False
        assert manifest_on_disk(settings)["items"] == [entry]

    def test_registered_entry_is_listed_in_its_scope(
        self, registrar: UploadRegistrar, settings: MediaSettings, store: ManifestStore,
        offline_gateway: SupabaseStorageGateway,
    ) -> None:
        entry = registrar.register(file_name="hero.png", folder="icons").entry
        pipeline = SourceRegistry.create_pipeline(settings, store=store, gateway=offline_gateway)

        assert pipeline.list_inventory("audio") == []
        listed = pipeline.list_inventory("icons")
        assert [item["id"] for item in listed] == [entry["id"]]
        assert listed[0]["source"] == "manifest"
        assert listed[0]["existsOnDisk"] is False

    def test_remote_url_marks_external(self, registrar: UploadRegistrar) -> None:
        entry = registrar.register(
            file_name="theme.mp3", folder="audio", remote_url="https://cdn.example.com/theme.mp3"
        ).entry

        assert entry["status"] == "external"
        assert entry["url"] == "https://cdn.example.com/theme.mp3"
        assert entry["type"] == "audio"

    def test_rejects_unsafe_remote_url(self, registrar: UploadRegistrar, settings: MediaSettings) -> None:
        with pytest.raises(ValueError, match="Invalid URL scheme"):
            registrar.register(file_name="x.png", remote_url="javascript:alert(1)")
        assert not settings.manifest_path.exists()

    def test_name_and_folder_from_path(self, registrar: UploadRegistrar) -> None:
        entry = registrar.register(path="public/media/mediapool/Audio/theme song.mp3").entry

        assert entry["fileName"] == "theme_song.mp3"
        assert entry["folder"] == "mediapool/Audio"
        assert entry["type"] == "audio"

    def test_defaults_to_other_folder(self, registrar: UploadRegistrar) -> None:
        entry = registrar.register(file_name="clip.mp4").entry

        assert entry["folder"] == "mediapool/Other"
        assert entry["category"] == "other"
        assert entry["type"] == "video"

    def test_size_hint_is_recorded(self, registrar: UploadRegistrar) -> None:
        assert registrar.register(file_name="a.png", size_bytes=42).entry["sizeBytes"] == 42

    def test_registration_is_append_only(self, registrar: UploadRegistrar, settings: MediaSettings) -> None:
        first = registrar.register(file_name="a.png", folder="icons").entry
        second = registrar.register(file_name="a.png", folder="icons").entry

        items = manifest_on_disk(settings)["items"]
        assert items == [first, second]
        assert first["id"] != second["id"]

    def test_content_is_ignored_without_storage(self, registrar: UploadRegistrar) -> None:
        result = registrar.register(file_name="a.png", content=b"png")

        assert result.storage is None
        assert result.entry["status"] == "pending-external"

    def test_legacy_entry_does_not_block_registration(
        self, registrar: UploadRegistrar, settings: MediaSettings
    ) -> None:
        """Test registering next to a hand-edited entry that has no id."""
        legacy = {"fileName": "old.mp3", "folder": "audio"}
        settings.manifest_path.write_text(json.dumps({"version": 1, "items": [legacy]}), encoding="utf-8")

        entry = registrar.register(file_name="hero.png", folder="icons").entry

        assert manifest_on_disk(settings)["items"] == [legacy, entry]

    def test_read_only_manifest_uses_fallback(
        self, registrar: UploadRegistrar, settings: MediaSettings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def read_only(path: Path, payload: str) -> None:
            if path == settings.manifest_path:
                raise OSError(errno.EROFS, "Read-only file system")
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")

        monkeypatch.setattr(ManifestStore, "_write_file", staticmethod(read_only))

        result = registrar.register(file_name="a.png")

        assert result.manifest_fallback is True
        assert result.manifest_path == settings.fallback_manifest_path
        assert registrar.store.read().manifest["items"] == [result.entry]


class TestRegisterWithStorage:
    """Test registration with object storage configured."""

    def test_successful_upload(self, settings: MediaSettings, store: ManifestStore) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"Key": "media/mediapool/Audio/theme.mp3"})

        registrar = online_registrar(settings, store, handler)
        payload = base64.b64encode(b"mp3-bytes").decode()
        result = registrar.register(file_name="theme.mp3", folder="audio", content=payload)
        entry = result.entry

        public_url = f"{SUPABASE_URL}/storage/v1/object/public/media/mediapool/Audio/theme.mp3"
        assert entry["status"] == "supabase"
        assert entry["url"] == public_url
        assert entry["supabase"] == {
            "bucket": "media",
            "path": "mediapool/Audio/theme.mp3",
            "publicUrl": public_url,
            "sizeBytes": 9,
        }
        assert entry["sizeBytes"] == 9
        assert result.storage is not None and result.storage.ok
        assert seen[0].url.params["upsert"] == "true"
        assert seen[0].content == b"mp3-bytes"

    def test_failed_upload_is_recorded(self, settings: MediaSettings, store: ManifestStore) -> None:
        registrar = online_registrar(settings, store, lambda request: httpx.Response(500, text="boom"))

        result = registrar.register(file_name="theme.mp3", folder="audio", content=b"mp3")

        assert result.entry["status"] == "error-supabase"
        assert result.entry["notes"] == "Supabase upload failed: 500 boom"
        assert "supabase" not in result.entry
        assert store.read().manifest["items"] == [result.entry]

    def test_raising_gateway_is_recorded(self, store: ManifestStore) -> None:
        gateway = Mock(spec=SupabaseStorageGateway)
        gateway.enabled = True
        gateway.upload_media.side_effect = RuntimeError("connection reset")

        result = UploadRegistrar(store, gateway).register(file_name="a.png", content=b"png")

        assert result.entry["status"] == "error-supabase"
        assert result.entry["notes"] == "connection reset"
        assert result.storage is not None and result.storage.ok is False

    def test_unwritten_manifest_is_an_error(self) -> None:
        store = Mock(spec=ManifestStore)
        store.update.return_value = (True, None)

        with pytest.raises(RuntimeError, match="Manifest was not written"):
            UploadRegistrar(store).register(file_name="a.png")
