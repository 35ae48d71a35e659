"""Base transformer class for projecting source assets into inventory items.

This module defines the base interface for transformers that convert
source-specific assets into caller-facing InventoryItem dictionaries,
along with the helpers they share.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..core.folders import folder_tag

if TYPE_CHECKING:
    from ..sources.base import MergeCandidate, SourceAsset

# Types whose own URL can be used as a thumbnail
PREVIEWABLE_TYPES = {"image", "gif"}


def merge_tags(*groups: list[str] | tuple[str, ...] | None) -> list[str]:
    """Concatenate tag groups, dropping empties and duplicates, keeping order."""
    merged: dict[str, None] = {}
    for group in groups:
        for tag in group or ():
            if tag:
                merged[str(tag)] = None
    return list(merged)


def standard_tags(
    base: list[str] | tuple[str, ...] | None,
    media_type: str,
    folder: str,
    slug: str,
) -> list[str]:
    """Tags every item carries: base tags, its type, folder and slug tags."""
    return merge_tags(base, [media_type, folder_tag(folder), f"slug:{slug}" if slug else ""])


def thumbnail_for(media_type: str, url: str, placeholder_url: str) -> str:
    if media_type in PREVIEWABLE_TYPES and url:
        return url
    return placeholder_url


class Transformer(ABC):
    """Abstract base class for inventory transformers.

    Transformers convert one source asset into a MergeCandidate: the
    projected InventoryItem plus the keys used for de-duplication.
    """

    @abstractmethod
    def transform(self, asset: "SourceAsset", scope: str) -> "MergeCandidate":
        """Transform a source asset into a merge candidate.

        Args:
            asset: The source asset being transformed
            scope: Canonical folder scope of the current listing

        Returns:
            MergeCandidate wrapping an InventoryItem
        """
        pass
