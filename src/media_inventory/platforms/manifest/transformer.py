"""Manifest transformer.

This module projects registered manifest entries into inventory items,
filling in whatever a (possibly older) entry does not record itself:
type, tags, slug, placeholder preview and on-disk presence.
"""

from pathlib import Path

from ...core.classify import build_media_slug, classify, derive_folder_meta, resolve_placeholder
from ...core.folders import canonicalize
from ...core.paths import build_url_from_path, media_repo_path, normalize_rel_path
from ...core.types import InventoryItem, PlaceholderInfo
from ...sources.base import MergeCandidate, SourceAsset
from ...transformers.base import Transformer, standard_tags

SUPABASE_KEY_PREFIX = "supabase://"


class ManifestTransformer(Transformer):
    """Transformer for manifest entries."""

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def transform(self, asset: SourceAsset, scope: str) -> MergeCandidate:
        """Transform a manifest entry into a merge candidate.

        The de-duplication key is the entry's id, else its path, else its
        URL, else folder/fileName. The resolved path, URL and storage
        locator are claimed as well so lower-ranked sources skip the same
        object.
        """
        entry = asset.entry  # type: ignore[attr-defined]
        folder = canonicalize(entry.get("folder") or scope)
        file_name = entry.get("fileName") or ""
        display_name = entry.get("name") or file_name or entry.get("url") or ""

        if "path" in entry:
            repo_path = normalize_rel_path(entry.get("path"))
        else:
            repo_path = media_repo_path(folder, file_name) if file_name else ""

        meta = derive_folder_meta(folder, classify(file_name or entry.get("url") or display_name))
        media_type = str(entry.get("type") or entry.get("kind") or meta["type"]).lower()
        slug = entry.get("slug") or build_media_slug(folder, media_type, file_name or display_name)
        placeholder = self._placeholder(entry, folder, media_type)

        url = entry.get("url") or build_url_from_path(repo_path) or placeholder["url"]
        thumb_url = entry.get("thumbUrl") or placeholder["url"]

        key = (entry.get("id") or repo_path or entry.get("url") or f"{folder}/{file_name or display_name}").lower()
        exists_on_disk = bool(repo_path) and (self.project_root / repo_path).exists()
        if entry.get("status"):
            status = entry["status"]
        elif exists_on_disk:
            status = "available"
        elif entry.get("url"):
            status = "external"
        else:
            status = "missing"

        supabase = entry.get("supabase") or None
        item = InventoryItem(
            id=entry.get("id") or key,
            name=display_name,
            fileName=file_name,
            url=url,
            path=repo_path,
            folder=folder,
            type=media_type,
            kind=media_type,
            source="manifest",
            category=meta["category"],
            categoryLabel=meta["categoryLabel"],
            tags=standard_tags([*(entry.get("tags") or []), *meta["tags"]], media_type, folder, slug),
            status=status,
            notes=entry.get("notes") or "",
            existsOnDisk=exists_on_disk,
            supabase=supabase,
            thumbUrl=thumb_url,
            placeholder=placeholder,
            slug=slug,
            deletable=True,
        )

        claims = [repo_path.lower(), url.lower()]
        if supabase and supabase.get("path"):
            claims.append(f"{SUPABASE_KEY_PREFIX}{supabase['path'].lower()}")
        return MergeCandidate(item=item, match_keys=(key,), claim_keys=tuple(claims))

    @staticmethod
    def _placeholder(entry: dict, folder: str, media_type: str) -> PlaceholderInfo:
        derived = resolve_placeholder(folder, media_type)
        recorded = entry.get("placeholder") or {}
        return PlaceholderInfo(
            kind=recorded.get("kind") or derived["kind"],
            file=recorded.get("file") or derived["file"],
            path=entry.get("placeholderPath") or recorded.get("path") or derived["path"],
            url=entry.get("placeholderUrl") or recorded.get("url") or derived["url"],
        )
