"""Fallback bundle transformer.

Bundle files are served by the game app under ``/media/<folder>/<file>``,
the same URL shape as the local pool, so a file present in both trees is
listed once from the higher-ranked source.
"""

import posixpath

from ...core.classify import build_media_slug, classify, derive_folder_meta, resolve_placeholder
from ...core.types import InventoryItem
from ...sources.base import MergeCandidate, SourceAsset
from ...transformers.base import Transformer, standard_tags, thumbnail_for


class GameBundleTransformer(Transformer):
    """Transformer for files in the fallback bundle."""

    def transform(self, asset: SourceAsset, scope: str) -> MergeCandidate:
        folder: str = asset.folder  # type: ignore[attr-defined]
        file_name = asset.title
        key = asset.uid.lower()
        url = "/" + posixpath.join("media", folder, file_name)

        meta = derive_folder_meta(folder, classify(file_name))
        media_type = meta["type"].lower()
        slug = build_media_slug(folder, media_type, file_name)
        placeholder = resolve_placeholder(folder, media_type)

        item = InventoryItem(
            id=key,
            name=file_name,
            fileName=file_name,
            url=url,
            path="",
            folder=folder,
            type=media_type,
            kind=media_type,
            source="game",
            category=meta["category"],
            categoryLabel=meta["categoryLabel"],
            tags=standard_tags(meta["tags"], media_type, folder, slug),
            status="game-fallback",
            notes="Served from game bundle",
            existsOnDisk=False,
            supabase=None,
            thumbUrl=thumbnail_for(media_type, url, placeholder["url"]),
            placeholder=placeholder,
            slug=slug,
            deletable=False,
        )
        return MergeCandidate(item=item, match_keys=(key, url.lower()))
