"""Fallback bundle platform for the inventory pipeline.

The game bundle is a secondary, read-only media tree. It has the lowest
precedence and only contributes files nothing else already lists.
"""

from .source import GameBundleSource
from .transformer import GameBundleTransformer

# Auto-register with the registry
from ...registry import SourceRegistry


def _create_game_source(settings, **kwargs) -> GameBundleSource | None:
    """Factory function for the fallback bundle source.

    Returns:
        GameBundleSource, or None when the bundle is disabled
    """
    if not settings.game_enabled or settings.game_media_root is None:
        return None
    return GameBundleSource(settings.game_media_root)


# Auto-register at module import
SourceRegistry.register_factory("game", _create_game_source)

__all__ = ["GameBundleSource", "GameBundleTransformer"]
