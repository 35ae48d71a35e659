"""Fallback bundle source adapter."""

from pathlib import Path

from ...sources.base import Source, SourceAsset
from ...transformers.base import Transformer
from ..filesystem.source import build_assets

GAME_KEY_PREFIX = "game://"


class GameBundleSource(Source):
    """Read-only source over the game bundle's media tree."""

    name = "game"

    def __init__(self, media_root: Path):
        """Initialize the bundle source.

        Args:
            media_root: The bundle's public/media directory
        """
        self.media_root = media_root

    def list_assets(self, scope: str) -> list[SourceAsset]:
        return build_assets(self.media_root / scope, scope, uid_prefix=GAME_KEY_PREFIX)

    def get_transformer(self) -> Transformer:
        from .transformer import GameBundleTransformer

        return GameBundleTransformer()
