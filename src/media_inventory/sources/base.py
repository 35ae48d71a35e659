"""Base abstractions for inventory sources.

This module defines the core interfaces and data structures that every
storage backend (manifest, object storage, local filesystem, fallback
bundle) implements to take part in the inventory merge.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..core.types import InventoryItem

if TYPE_CHECKING:
    from ..transformers.base import Transformer


@runtime_checkable
class SourceAsset(Protocol):
    """Protocol for assets from any source.

    Any object with a uid and title can act as a SourceAsset. This allows
    manifest entries, storage objects and files on disk to all be treated
    uniformly by the pipeline.

    Attributes:
        uid: Identifier of the asset within its source
        title: Human-readable name
    """

    uid: str
    title: str


@dataclass
class MergeCandidate:
    """An inventory item together with its de-duplication keys.

    Attributes:
        item: The projected inventory item
        match_keys: Keys that, when already seen, make this item a duplicate
        claim_keys: Extra keys recorded once the item is accepted, so that
                    lower-ranked sources recognise the same physical object
                    under a different key shape
    """

    item: InventoryItem
    match_keys: tuple[str, ...]
    claim_keys: tuple[str, ...] = field(default_factory=tuple)

    def all_keys(self) -> tuple[str, ...]:
        return self.match_keys + self.claim_keys


class Source(ABC):
    """Abstract base class for all inventory sources.

    Implementations provide backend-specific logic for listing assets in a
    folder scope, while adhering to this common interface. Sources are
    merged in the order the pipeline receives them; earlier sources win.
    """

    #: Value of InventoryItem.source for items produced by this source
    name: str = ""

    @abstractmethod
    def list_assets(self, scope: str) -> list[SourceAsset]:
        """List the assets inside a canonical folder scope.

        Args:
            scope: Canonical folder, e.g. 'mediapool/Audio'

        Returns:
            Raw assets from this source; a missing scope yields an empty list
        """
        pass

    @abstractmethod
    def get_transformer(self) -> "Transformer":
        """Return the transformer that projects this source's assets."""
        pass
