"""Source registry for factory-based pipeline creation.

This module provides a central registry for source factories, enabling
backend-agnostic pipeline creation and automatic platform discovery.
The registry also owns the precedence order in which sources are merged.
"""

import importlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .config import MediaSettings
    from .manifest_store import ManifestStore
    from .pipeline import InventoryPipeline
    from .sources.base import Source
    from .storage import SupabaseStorageGateway

logger = logging.getLogger(__name__)

# Highest precedence first: on a de-duplication conflict the earlier source wins.
SOURCE_PRECEDENCE: tuple[str, ...] = ("manifest", "supabase", "filesystem", "game")

SourceFactory = Callable[..., Optional["Source"]]


class SourceRegistry:
    """Central registry for source factories.

    Platforms register a factory when imported. A factory receives the
    shared collaborators as keyword arguments (``settings``, ``store``,
    ``gateway``) and returns a Source, or None when its backend is not
    configured or disabled.
    """

    _factories: dict[str, SourceFactory] = {}

    @classmethod
    def register_factory(cls, name: str, factory: SourceFactory) -> None:
        """Register a factory function for creating sources.

        Args:
            name: Name of the source (e.g., 'filesystem', 'supabase')
            factory: Callable that creates a Source instance or returns None
        """
        cls._factories[name] = factory

    @classmethod
    def list_sources(cls) -> list[str]:
        """List registered source names in precedence order.

        Names not listed in SOURCE_PRECEDENCE come last, in registration order.

        Example:
            >>> SourceRegistry.list_sources()
            ['manifest', 'supabase', 'filesystem', 'game']
        """
        ranked = [name for name in SOURCE_PRECEDENCE if name in cls._factories]
        extra = [name for name in cls._factories if name not in SOURCE_PRECEDENCE]
        return ranked + extra

    @classmethod
    def create_source(cls, source_name: str, **kwargs) -> Optional["Source"]:
        """Create one source through its registered factory.

        Raises:
            ValueError: If source_name is not registered
        """
        if source_name not in cls._factories:
            available = ", ".join(cls._factories.keys()) or "none"
            raise ValueError(f"Unknown source: '{source_name}'. Available sources: {available}")
        return cls._factories[source_name](**kwargs)

    @classmethod
    def create_pipeline(
        cls,
        settings: "MediaSettings",
        store: "ManifestStore | None" = None,
        gateway: "SupabaseStorageGateway | None" = None,
    ) -> "InventoryPipeline":
        """Create a pipeline over every enabled source, in precedence order.

        Args:
            settings: Resolved configuration
            store: Manifest store to share with the registrar/deleter
            gateway: Object storage gateway to share with the registrar/deleter

        Returns:
            InventoryPipeline configured with the enabled sources
        """
        # Import here to avoid circular dependency
        from .manifest_store import ManifestStore
        from .pipeline import InventoryPipeline
        from .storage import SupabaseStorageGateway

        store = store or ManifestStore(settings)
        gateway = gateway or SupabaseStorageGateway(settings)

        sources = []
        for name in cls.list_sources():
            source = cls.create_source(name, settings=settings, store=store, gateway=gateway)
            if source is None:
                logger.debug("Source '%s' disabled", name)
                continue
            sources.append(source)
        return InventoryPipeline(sources)

    @classmethod
    def discover_platforms(cls) -> None:
        """Auto-discover and import all platforms.

        This method iterates through the platforms/ directory and imports
        each platform module. Platforms register themselves via their
        __init__.py files.
        """
        platforms_dir = Path(__file__).parent / "platforms"

        if not platforms_dir.exists():
            return

        for platform_path in sorted(platforms_dir.iterdir()):
            if not platform_path.is_dir():
                continue

            if not (platform_path / "__init__.py").exists():
                continue

            importlib.import_module(f".platforms.{platform_path.name}", package="media_inventory")
