"""Tests for manifest persistence and the fallback location."""

import errno
import json
from pathlib import Path

import pytest
from jsonschema import ValidationError

from media_inventory.config import MediaSettings
from media_inventory.manifest_store import (
    ManifestStore,
    StorageContext,
    empty_manifest,
    utc_now_iso,
)


def make_manifest(*ids: str) -> dict:
    manifest = empty_manifest()
    manifest["items"] = [{"id": entry_id, "name": entry_id, "tags": ["other"]} for entry_id in ids]
    return manifest


@pytest.fixture
def read_only_primary(monkeypatch: pytest.MonkeyPatch, settings: MediaSettings) -> None:
    """Make writes to the primary manifest fail as on a read-only mount."""
    real_write = ManifestStore._write_file

    def fake_write(path: Path, payload: str) -> None:
        if path == settings.manifest_path:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        real_write(path, payload)

    monkeypatch.setattr(ManifestStore, "_write_file", staticmethod(fake_write))


class TestRead:
    """Test manifest resolution order."""

    def test_missing_manifest_is_empty(self, store: ManifestStore, settings: MediaSettings) -> None:
        """Test that a missing manifest reads as an empty document."""
        result = store.read()

        assert result.path == settings.manifest_path
        assert result.manifest["version"] == 1
        assert result.manifest["items"] == []
        assert not settings.manifest_path.exists()

    def test_normalizes_missing_items(self, store: ManifestStore, settings: MediaSettings) -> None:
        settings.manifest_path.write_text(json.dumps({"items": "nope"}), encoding="utf-8")

        manifest = store.read().manifest

        assert manifest["items"] == []
        assert manifest["version"] == 1

    def test_skips_unreadable_runtime_path(self, settings: MediaSettings, tmp_path: Path) -> None:
        """Test that a corrupt remembered location falls through to the primary."""
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        settings.manifest_path.write_text(json.dumps(make_manifest("a")), encoding="utf-8")

        store = ManifestStore(settings, StorageContext(runtime_path=broken))
        result = store.read()

        assert result.path == settings.manifest_path
        assert [entry["id"] for entry in result.manifest["items"]] == ["a"]
        assert store.context.runtime_path == settings.manifest_path

    def test_last_candidate_errors_propagate(self, store: ManifestStore, settings: MediaSettings) -> None:
        settings.fallback_manifest_path.parent.mkdir(parents=True)
        settings.fallback_manifest_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            store.read()


class TestWrite:
    """Test writing and the fallback location."""

    def test_write_then_read(self, store: ManifestStore, settings: MediaSettings) -> None:
        result = store.write(make_manifest("a", "b"))

        assert result.path == settings.manifest_path
        assert result.fallback is False
        text = settings.manifest_path.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert [entry["id"] for entry in store.read().manifest["items"]] == ["a", "b"]

    def test_read_only_primary_uses_fallback(
        self, store: ManifestStore, settings: MediaSettings, read_only_primary: None
    ) -> None:
        """Test that a read-only primary redirects the write and later reads."""
        result = store.write(make_manifest("a"))

        assert result.fallback is True
        assert result.path == settings.fallback_manifest_path
        assert isinstance(result.error, PermissionError)
        assert not settings.manifest_path.exists()
        assert store.context.runtime_path == settings.fallback_manifest_path

        reread = store.read()
        assert reread.path == settings.fallback_manifest_path
        assert [entry["id"] for entry in reread.manifest["items"]] == ["a"]

    def test_fresh_store_finds_fallback(
        self, store: ManifestStore, settings: MediaSettings, read_only_primary: None
    ) -> None:
        """Test that a store without remembered state still finds the fallback."""
        store.write(make_manifest("a"))

        result = ManifestStore(settings).read()

        assert result.path == settings.fallback_manifest_path
        assert len(result.manifest["items"]) == 1

    def test_other_errors_propagate(
        self, store: ManifestStore, monkeypatch: pytest.MonkeyPatch, settings: MediaSettings
    ) -> None:
        def disk_full(path: Path, payload: str) -> None:
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(ManifestStore, "_write_file", staticmethod(disk_full))

        with pytest.raises(OSError, match="No space"):
            store.write(make_manifest("a"))
        assert not settings.fallback_manifest_path.exists()

    def test_invalid_changed_entry_is_not_written(self, store: ManifestStore, settings: MediaSettings) -> None:
        manifest = make_manifest("a")
        bad = {"name": "no id"}
        manifest["items"].append(bad)

        with pytest.raises(ValidationError):
            store.write(manifest, changed=[bad])
        assert not settings.manifest_path.exists()

    def test_duplicate_ids_are_rejected(self, store: ManifestStore) -> None:
        manifest = make_manifest("a", "a")

        with pytest.raises(ValidationError, match="Duplicate manifest id"):
            store.write(manifest, changed=[manifest["items"][1]])

    def test_legacy_entries_are_written_back(self, store: ManifestStore, settings: MediaSettings) -> None:
        """Test that hand-edited records on disk do not block later writes."""
        legacy = {"fileName": "old.mp3", "folder": "audio", "status": "imported", "tags": []}
        manifest = make_manifest("a")
        manifest["items"].insert(0, legacy)

        store.write(manifest, changed=[manifest["items"][1]])

        on_disk = json.loads(settings.manifest_path.read_text(encoding="utf-8"))
        assert on_disk["items"][0] == legacy


class TestUpdate:
    """Test read-modify-write cycles."""

    def test_falsy_result_skips_write(self, store: ManifestStore, settings: MediaSettings) -> None:
        outcome, write = store.update(lambda manifest: 0)

        assert outcome == 0
        assert write is None
        assert not settings.manifest_path.exists()

    def test_truthy_result_writes(self, store: ManifestStore, settings: MediaSettings) -> None:
        store.write(make_manifest("a"))
        before = json.loads(settings.manifest_path.read_text(encoding="utf-8"))
        before["updatedAt"] = "2000-01-01T00:00:00.000Z"
        settings.manifest_path.write_text(json.dumps(before), encoding="utf-8")

        def add(manifest: dict) -> int:
            manifest["items"].append({"id": "b", "tags": ["other"]})
            return 1

        outcome, write = store.update(add)

        assert outcome == 1
        assert write is not None and write.path == settings.manifest_path
        after = json.loads(settings.manifest_path.read_text(encoding="utf-8"))
        assert [entry["id"] for entry in after["items"]] == ["a", "b"]
        assert after["updatedAt"] != "2000-01-01T00:00:00.000Z"


def test_utc_now_iso_format() -> None:
    stamp = utc_now_iso()
    assert stamp.endswith("Z")
    assert "T" in stamp


def test_debug_info(store: ManifestStore, settings: MediaSettings) -> None:
    info = store.debug_info()
    assert info == {
        "runtime": "",
        "primary": str(settings.manifest_path),
        "fallback": str(settings.fallback_manifest_path),
    }
