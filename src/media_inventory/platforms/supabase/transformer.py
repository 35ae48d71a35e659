"""Object storage transformer."""

from ...core.classify import build_media_slug, classify, derive_folder_meta, resolve_placeholder
from ...core.folders import folder_tag, slugify
from ...core.types import InventoryItem, SupabaseRef
from ...sources.base import MergeCandidate, SourceAsset
from ...transformers.base import Transformer, merge_tags, standard_tags, thumbnail_for
from ..manifest.transformer import SUPABASE_KEY_PREFIX
from .source import StorageErrorAsset


class SupabaseTransformer(Transformer):
    """Transformer for storage objects and listing failures."""

    def transform(self, asset: SourceAsset, scope: str) -> MergeCandidate:
        """Transform a storage object into a merge candidate.

        Objects are keyed by ``supabase://<object path>`` and by their
        public URL, both of which a manifest entry for an uploaded binary
        claims first.
        """
        if isinstance(asset, StorageErrorAsset):
            return self._error_candidate(asset, scope)

        storage_object = asset.raw_object  # type: ignore[attr-defined]
        folder: str = asset.folder  # type: ignore[attr-defined]
        name = asset.title
        key = f"{SUPABASE_KEY_PREFIX}{storage_object.path.lower()}"

        meta = derive_folder_meta(folder, classify(name or storage_object.path))
        media_type = meta["type"].lower()
        slug = build_media_slug(folder, media_type, name)
        placeholder = resolve_placeholder(folder, media_type)
        tags = merge_tags(
            standard_tags(meta["tags"], media_type, folder, slug),
            [f"supabase:{slugify(storage_object.path)}"],
        )

        item = InventoryItem(
            id=key,
            name=name or storage_object.path,
            fileName=name,
            url=storage_object.public_url,
            path="",
            folder=folder,
            type=media_type,
            kind=media_type,
            source="supabase",
            category=meta["category"],
            categoryLabel=meta["categoryLabel"],
            tags=tags,
            status="available",
            notes="Supabase storage object",
            existsOnDisk=False,
            supabase=SupabaseRef(
                bucket=storage_object.bucket,
                path=storage_object.path,
                size=storage_object.size,
                updatedAt=storage_object.updated_at,
            ),
            thumbUrl=thumbnail_for(media_type, storage_object.public_url, placeholder["url"]),
            placeholder=placeholder,
            slug=slug,
            deletable=True,
        )
        return MergeCandidate(item=item, match_keys=(key, storage_object.public_url.lower()))

    @staticmethod
    def _error_candidate(asset: StorageErrorAsset, scope: str) -> MergeCandidate:
        item = InventoryItem(
            id=asset.uid,
            name=asset.title,
            fileName="",
            url="",
            path="",
            folder=scope,
            type="other",
            kind="other",
            source="supabase-error",
            category="other",
            categoryLabel="Other",
            tags=["error", folder_tag(scope)],
            status="error",
            notes=asset.message,
            existsOnDisk=False,
            supabase=None,
            thumbUrl="",
            placeholder=None,
            slug="",
            deletable=False,
        )
        return MergeCandidate(item=item, match_keys=(asset.uid.lower(),))
