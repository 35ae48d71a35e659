"""Tests for media type classification and derived descriptors."""

from media_inventory.core.classify import (
    MAX_SLUG_LENGTH,
    build_media_slug,
    classify,
    derive_folder_meta,
    guess_content_type,
    is_placeholder_file,
    resolve_placeholder,
)


class TestClassify:
    """Test extension-based classification."""

    def test_known_extensions(self) -> None:
        assert classify("hero.PNG") == "image"
        assert classify("photo.jpeg") == "image"
        assert classify("anim.gif") == "gif"
        assert classify("clip.mov") == "video"
        assert classify("theme.mp3") == "audio"
        assert classify("model.glb") == "ar-overlay"

    def test_gif_is_not_a_plain_image(self) -> None:
        """Test that gif wins over the generic image pattern."""
        assert classify("spin.GIF") == "gif"

    def test_ignores_query_and_fragment(self) -> None:
        assert classify("https://cdn.example.com/x.webp?v=2") == "image"
        assert classify("theme.mp3#t=10") == "audio"

    def test_unknown_is_other(self) -> None:
        assert classify("notes.txt") == "other"
        assert classify("") == "other"
        assert classify(None) == "other"

    def test_is_deterministic(self) -> None:
        assert all(classify("a/b/c.webm") == "video" for _ in range(5))


class TestPlaceholderFile:
    """Test keep-alive marker detection."""

    def test_detects_marker_anywhere(self) -> None:
        assert is_placeholder_file(".gitkeep")
        assert is_placeholder_file("public/media/mediapool/Audio/.GITKEEP")

    def test_other_names(self) -> None:
        assert not is_placeholder_file("gitkeep.txt")
        assert not is_placeholder_file(None)


class TestDeriveFolderMeta:
    """Test folder-based category inference."""

    def test_image_subfolder_adds_tag(self) -> None:
        meta = derive_folder_meta("mediapool/Images/icons", "image")
        assert meta["category"] == "images"
        assert meta["categoryLabel"] == "Images"
        assert meta["type"] == "image"
        assert meta["tags"] == ["category:images", "image", "icon"]

    def test_typed_folder_forces_type(self) -> None:
        """Test that a typed folder overrides the extension."""
        assert derive_folder_meta("mediapool/Audio", "other")["type"] == "audio"
        meta = derive_folder_meta("mediapool/AR Target", "other")
        assert meta["type"] == "ar-target"
        assert meta["tags"] == ["category:ar-target", "ar", "ar-target"]

    def test_untyped_folder_keeps_extension_type(self) -> None:
        meta = derive_folder_meta("mediapool/Other", "image")
        assert meta["category"] == "other"
        assert meta["type"] == "image"

    def test_unknown_folder_follows_extension(self) -> None:
        meta = derive_folder_meta("custom", "video")
        assert meta["category"] == "video"
        assert meta["type"] == "video"


class TestResolvePlaceholder:
    """Test preview selection."""

    def test_folder_rules(self) -> None:
        assert resolve_placeholder("mediapool/Images/icons", "image")["file"] == "icon.svg"
        assert resolve_placeholder("mediapool/Images/covers", "image")["file"] == "cover.svg"
        assert resolve_placeholder("mediapool/AR Overlay", "ar-overlay")["kind"] == "ar-overlay"

    def test_type_rules(self) -> None:
        placeholder = resolve_placeholder("mediapool/Audio", "audio")
        assert placeholder == {
            "kind": "audio",
            "file": "audio.svg",
            "path": "public/media/placeholders/audio.svg",
            "url": "/media/placeholders/audio.svg",
        }

    def test_generic_image_fallback(self) -> None:
        assert resolve_placeholder("mediapool/Images", "image")["file"] == "image.svg"


class TestBuildMediaSlug:
    """Test human-readable slugs."""

    def test_type_folder_and_name(self) -> None:
        assert build_media_slug("mediapool/Images/icons", "image", "hero.png") == "image-icons-hero"

    def test_folder_equal_to_type_is_not_repeated(self) -> None:
        assert build_media_slug("mediapool/Audio", "audio", "Theme Song.mp3") == "audio-theme-song"

    def test_is_capped(self) -> None:
        slug = build_media_slug("mediapool/Other", "other", "x" * 200 + ".bin")
        assert len(slug) == MAX_SLUG_LENGTH


class TestGuessContentType:
    def test_known_and_unknown(self) -> None:
        assert guess_content_type("a.PNG") == "image/png"
        assert guess_content_type("a.mp3") == "audio/mpeg"
        assert guess_content_type("a.xyz") == "application/octet-stream"
