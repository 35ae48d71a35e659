"""Tests for the command-line interface."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from media_inventory.cli import main


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, project_root: Path, tmp_path: Path) -> None:
    monkeypatch.setenv("MEDIA_PROJECT_ROOT", str(project_root))
    monkeypatch.setenv("MEDIA_MANIFEST_FALLBACK_PATH", str(tmp_path / "fallback" / "manifest.json"))
    monkeypatch.setenv("GAME_ENABLED", "0")
    monkeypatch.delenv("NEXT_PUBLIC_GAME_ENABLED", raising=False)
    monkeypatch.delenv("MEDIA_MANIFEST_PATH", raising=False)
    monkeypatch.delenv("MEDIA_MANIFEST_RUNTIME_PATH", raising=False)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("MEDIA_HTTP_TIMEOUT", raising=False)


def run(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, dict | None, str]:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    captured = capsys.readouterr()
    payload = json.loads(captured.out) if captured.out.strip() else None
    return exc_info.value.code, payload, captured.err


class TestCli:
    """Test the list/register/delete/validate commands."""

    def test_list(self, capsys: pytest.CaptureFixture[str], write_media: Callable[..., Path]) -> None:
        write_media("mediapool/Audio/theme.mp3")

        code, payload, err = run(["list", "--dir", "audio"], capsys)

        assert code == 0
        assert payload["dir"] == "mediapool/Audio"
        assert [item["name"] for item in payload["items"]] == ["theme.mp3"]
        assert "Found 1 item(s)" in err

    def test_register_then_delete(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, payload, _ = run(["register", "--file-name", "hero.png", "--folder", "icons"], capsys)
        assert code == 0
        entry_id = payload["item"]["id"]
        assert payload["item"]["folder"] == "mediapool/Images/icons"

        code, payload, _ = run(["delete", "--id", entry_id], capsys)
        assert code == 0
        assert payload["removed"] == 1

    def test_register_rejects_bad_url(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, payload, err = run(
            ["register", "--file-name", "x.png", "--remote-url", "file:///etc/passwd"], capsys
        )

        assert code == 1
        assert payload is None
        assert "Invalid URL scheme" in err

    def test_delete_placeholder_is_rejected(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _, err = run(["delete", "--path", "public/media/mediapool/Audio/.gitkeep"], capsys)

        assert code == 1
        assert "Placeholder" in err

    def test_validate(self, capsys: pytest.CaptureFixture[str]) -> None:
        run(["register", "--file-name", "hero.png"], capsys)

        code, _, err = run(["validate"], capsys)

        assert code == 0
        assert "Validation successful!" in err

    def test_legacy_manifest_registers_but_fails_validation(
        self, capsys: pytest.CaptureFixture[str], project_root: Path
    ) -> None:
        manifest_path = project_root / "public" / "media" / "manifest.json"
        manifest_path.write_text(
            json.dumps({"version": 1, "items": [{"fileName": "old.mp3", "folder": "audio"}]}), encoding="utf-8"
        )

        code, payload, _ = run(["register", "--file-name", "hero.png", "--folder", "icons"], capsys)
        assert code == 0
        assert payload["item"]["folder"] == "mediapool/Images/icons"

        code, _, err = run(["validate"], capsys)
        assert code == 1
        assert "'id' is a required property" in err

    def test_bad_timeout_is_a_config_error(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MEDIA_HTTP_TIMEOUT", "soon")

        code, _, err = run(["list"], capsys)

        assert code == 2
        assert "MEDIA_HTTP_TIMEOUT" in err
