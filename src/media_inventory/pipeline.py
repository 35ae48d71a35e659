"""Inventory merge pipeline.

This module provides the main interface for listing the media inventory.
The pipeline is backend-agnostic: it walks its sources in precedence order
(manifest > object storage > local filesystem > fallback bundle) and keeps
the first item seen for every de-duplication key.
"""

import logging
from collections.abc import Iterable

from .core.folders import canonicalize
from .core.types import InventoryItem
from .sources.base import MergeCandidate, Source

logger = logging.getLogger(__name__)


def merge_ranked(groups: Iterable[Iterable[MergeCandidate]]) -> list[InventoryItem]:
    """Merge candidate groups, highest precedence first.

    A candidate is dropped when any of its match keys was already recorded
    by an accepted candidate. Accepted candidates record both their match
    and claim keys.

    Args:
        groups: One iterable of candidates per source, in precedence order

    Returns:
        Accepted items, in the order they were accepted
    """
    seen: set[str] = set()
    merged: list[InventoryItem] = []
    for group in groups:
        for candidate in group:
            if any(key in seen for key in candidate.match_keys if key):
                continue
            seen.update(key for key in candidate.all_keys() if key)
            merged.append(candidate.item)
    return merged


def sort_inventory(items: list[InventoryItem]) -> list[InventoryItem]:
    """Sort case-insensitively by display name."""
    return sorted(items, key=lambda item: str(item.get("name") or "").lower())


class InventoryPipeline:
    """Main interface for inventory listings.

    Sources register themselves via SourceRegistry, which assembles the
    pipeline in precedence order.

    Example:
        >>> from media_inventory import MediaSettings, SourceRegistry
        >>> pipeline = SourceRegistry.create_pipeline(MediaSettings.from_env())
        >>> for item in pipeline.list_inventory("audio"):
        ...     print(item["name"], item["source"])
    """

    def __init__(self, sources: list[Source]):
        """Initialize the pipeline.

        Args:
            sources: Sources in precedence order (earlier sources win)
        """
        self.sources = sources

    def candidates(self, source: Source, scope: str) -> Iterable[MergeCandidate]:
        """Project every asset of one source for the given scope."""
        transformer = source.get_transformer()
        for asset in source.list_assets(scope):
            yield transformer.transform(asset, scope)

    def list_inventory(self, folder_scope: str | None = None) -> list[InventoryItem]:
        """List the de-duplicated inventory for a folder scope.

        Sources are consulted sequentially, in precedence order.

        Args:
            folder_scope: Folder alias or path; empty means the whole pool

        Returns:
            Inventory items sorted case-insensitively by name

        Raises:
            ValueError: If the scope contains a parent-directory segment
        """
        scope = canonicalize(folder_scope)
        if ".." in scope.split("/"):
            raise ValueError(f"Illegal folder scope: {folder_scope}")
        groups = (self.candidates(source, scope) for source in self.sources)
        items = sort_inventory(merge_ranked(groups))
        logger.info("Listed %d item(s) for %s from %d source(s)", len(items), scope, len(self.sources))
        return items
