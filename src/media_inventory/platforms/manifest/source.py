"""Manifest source adapter."""

from dataclasses import dataclass
from pathlib import Path

from ...core.folders import canonicalize, folder_matches_scope
from ...core.types import ManifestEntry
from ...manifest_store import ManifestStore
from ...sources.base import Source, SourceAsset
from ...transformers.base import Transformer


@dataclass
class ManifestAsset:
    """A registered manifest entry.

    Attributes:
        uid: Entry id (may be empty for hand-edited legacy entries)
        title: Display name
        entry: The raw manifest entry
    """

    uid: str
    title: str
    entry: ManifestEntry


class ManifestSource(Source):
    """Source adapter for the manifest document."""

    name = "manifest"

    def __init__(self, store: ManifestStore, project_root: Path):
        """Initialize manifest source.

        Args:
            store: Store to read the manifest from
            project_root: Root used to check whether entry paths exist
        """
        self.store = store
        self.project_root = project_root

    def list_assets(self, scope: str) -> list[SourceAsset]:
        """List entries whose folder equals or descends from the scope."""
        manifest = self.store.read().manifest
        assets: list[SourceAsset] = []
        for entry in manifest["items"]:
            if not isinstance(entry, dict):
                continue
            if not folder_matches_scope(canonicalize(entry.get("folder")), scope):
                continue
            assets.append(
                ManifestAsset(
                    uid=entry.get("id") or "",
                    title=entry.get("name") or entry.get("fileName") or entry.get("url") or "",
                    entry=entry,
                )
            )
        return assets

    def get_transformer(self) -> Transformer:
        from .transformer import ManifestTransformer

        return ManifestTransformer(self.project_root)
