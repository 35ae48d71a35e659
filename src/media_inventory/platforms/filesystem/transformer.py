"""Filesystem transformer.

This module converts files found in the local media pool into inventory
items. The ``.gitkeep`` keep-alive marker is surfaced as a protected,
non-deletable placeholder item.
"""

from ...core.classify import (
    build_media_slug,
    classify,
    derive_folder_meta,
    is_placeholder_file,
    resolve_placeholder,
)
from ...core.folders import slugify
from ...core.paths import build_url_from_path
from ...core.types import InventoryItem
from ...sources.base import MergeCandidate, SourceAsset
from ...transformers.base import Transformer, merge_tags, standard_tags, thumbnail_for

PLACEHOLDER_NOTES = "Git placeholder file that keeps this folder tracked without storing media."


class FilesystemTransformer(Transformer):
    """Transformer for files in the local media pool."""

    def transform(self, asset: SourceAsset, scope: str) -> MergeCandidate:
        """Transform a file on disk into a merge candidate.

        Args:
            asset: FilesystemAsset for the file
            scope: Canonical folder scope of the listing

        Returns:
            MergeCandidate keyed by the project-relative path and public URL
        """
        folder: str = asset.folder  # type: ignore[attr-defined]
        file_name = asset.title
        repo_path = asset.uid
        url = build_url_from_path(repo_path)

        if is_placeholder_file(file_name):
            item = self._placeholder_item(folder, file_name, repo_path, url)
        else:
            meta = derive_folder_meta(folder, classify(file_name))
            media_type = meta["type"].lower()
            slug = build_media_slug(folder, media_type, file_name)
            placeholder = resolve_placeholder(folder, media_type)
            item = InventoryItem(
                id=repo_path.lower(),
                name=file_name,
                fileName=file_name,
                url=url,
                path=repo_path,
                folder=folder,
                type=media_type,
                kind=media_type,
                source="filesystem",
                category=meta["category"],
                categoryLabel=meta["categoryLabel"],
                tags=standard_tags(meta["tags"], media_type, folder, slug),
                status="available",
                notes="",
                existsOnDisk=True,
                supabase=None,
                thumbUrl=thumbnail_for(media_type, url, placeholder["url"]),
                placeholder=placeholder,
                slug=slug,
                deletable=True,
            )

        return MergeCandidate(
            item=item,
            match_keys=(repo_path.lower(), url.lower()),
        )

    @staticmethod
    def _placeholder_item(folder: str, file_name: str, repo_path: str, url: str) -> InventoryItem:
        slug = f"placeholder-{slugify(folder) or 'mediapool'}"
        placeholder = resolve_placeholder(folder, "placeholder")
        tags = merge_tags(
            standard_tags(["placeholder"], "", folder, slug),
            ["gitkeep", "keepalive"],
        )
        return InventoryItem(
            id=repo_path.lower(),
            name=f"Placeholder ({file_name})",
            fileName=file_name,
            url=url,
            path=repo_path,
            folder=folder,
            type="placeholder",
            kind="placeholder",
            source="filesystem",
            category="placeholder",
            categoryLabel="Placeholder",
            tags=tags,
            status="placeholder",
            notes=PLACEHOLDER_NOTES,
            existsOnDisk=True,
            supabase=None,
            thumbUrl=placeholder["url"],
            placeholder=placeholder,
            slug=slug,
            deletable=False,
        )
