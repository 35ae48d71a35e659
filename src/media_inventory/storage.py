"""Object storage gateway for the Supabase Storage REST API.

A thin synchronous client: upload (optionally upsert), paginated
list-by-prefix and delete-by-prefix. Nothing here raises for remote or
configuration problems; every call returns a ``StorageResult`` so callers
can degrade to local-only behaviour instead of failing the request.
"""

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from .config import MediaSettings
from .core.classify import guess_content_type

logger = logging.getLogger(__name__)

CLIENT_INFO = "media-inventory/0.1"
DEFAULT_PAGE_SIZE = 1000


@dataclass
class StorageObject:
    """One object found by a listing."""

    name: str
    bucket: str
    path: str
    size: int = 0
    updated_at: str | None = None
    public_url: str = ""


@dataclass
class StorageResult:
    """Outcome of a storage call.

    ``skipped`` means the call was never attempted (missing configuration
    or input); ``error`` carries the failure message of an attempted call.
    """

    ok: bool
    skipped: bool = False
    reason: str | None = None
    error: str | None = None
    bucket: str | None = None
    path: str | None = None
    public_url: str | None = None
    size_bytes: int | None = None
    items: list[StorageObject] = field(default_factory=list)

    @property
    def message(self) -> str | None:
        return self.error or self.reason

    def to_dict(self) -> dict[str, Any]:
        """Wire representation used in HTTP responses."""
        payload: dict[str, Any] = {"ok": self.ok, "skipped": self.skipped}
        if self.reason:
            payload["reason"] = self.reason
        if self.error:
            payload["error"] = self.error
        if self.bucket:
            payload["bucket"] = self.bucket
        if self.path:
            payload["path"] = self.path
        if self.public_url:
            payload["publicUrl"] = self.public_url
        if self.size_bytes is not None:
            payload["sizeBytes"] = self.size_bytes
        return payload


def join_object_path(*segments: str | None) -> str:
    """Join path segments, dropping empty pieces and stray slashes."""
    parts: list[str] = []
    for segment in segments:
        for piece in str(segment or "").split("/"):
            piece = piece.strip()
            if piece:
                parts.append(piece)
    return "/".join(parts)


def encode_object_path(object_path: str) -> str:
    return "/".join(quote(segment, safe="") for segment in object_path.split("/") if segment)


def decode_base64_payload(content: str | None) -> bytes | None:
    """Decode a base64 string or ``data:`` URL; None when it is not decodable."""
    if not content:
        return None
    trimmed = content.strip()
    if trimmed.startswith("data:") and "," in trimmed:
        trimmed = trimmed.split(",", 1)[1]
    try:
        return base64.b64decode(trimmed, validate=False)
    except (binascii.Error, ValueError):
        return None


class SupabaseStorageGateway:
    """HTTP client for one Supabase Storage endpoint.

    Example:
        >>> gateway = SupabaseStorageGateway(MediaSettings.from_env())
        >>> if gateway.enabled:
        ...     result = gateway.list_media("mediapool/Audio")
    """

    def __init__(self, settings: MediaSettings, client: httpx.Client | None = None):
        """Initialize the gateway.

        Args:
            settings: Endpoint, bucket, prefix, credentials and timeout
            client: Pre-built HTTP client (tests pass one with a MockTransport)
        """
        self.settings = settings
        self._client = client or httpx.Client(timeout=httpx.Timeout(settings.http_timeout))
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SupabaseStorageGateway":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def storage_base_url(self) -> str:
        base = self.settings.supabase_url.rstrip("/")
        return f"{base}/storage/v1" if base else ""

    @property
    def auth_key(self) -> str:
        """Service-role key when present, anon key otherwise."""
        return self.settings.supabase_service_role_key or self.settings.supabase_anon_key

    @property
    def enabled(self) -> bool:
        return bool(self.storage_base_url and self.settings.media_bucket and self.auth_key)

    def _missing_config(self) -> StorageResult | None:
        if not self.storage_base_url:
            return StorageResult(ok=False, skipped=True, reason="SUPABASE_URL missing")
        if not self.auth_key:
            return StorageResult(ok=False, skipped=True, reason="Supabase key missing")
        return None

    def _headers(self, content_type: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.auth_key}",
            "apikey": self.auth_key,
            "Content-Type": content_type,
            "x-client-info": CLIENT_INFO,
        }

    # ------------------------------------------------------------------
    # URLs and object paths
    # ------------------------------------------------------------------

    def public_url(self, bucket: str, object_path: str) -> str:
        if not self.storage_base_url:
            return ""
        return (
            f"{self.storage_base_url}/object/public/"
            f"{quote(bucket, safe='')}/{encode_object_path(object_path)}"
        )

    def build_media_path(self, folder: str | None, file_name: str | None = "") -> str:
        """Object path for a media file; the configured prefix is added once.

        Example:
            ("Audio", "a.mp3") -> "mediapool/Audio/a.mp3"
            ("mediapool/Audio", "a.mp3") -> "mediapool/Audio/a.mp3"
        """
        prefix = self.settings.media_prefix.strip("/")
        normalized_folder = str(folder or "").strip("/")
        if prefix and normalized_folder.lower().startswith(prefix.lower()):
            return join_object_path(normalized_folder, file_name)
        return join_object_path(prefix, normalized_folder, file_name)

    # ------------------------------------------------------------------
    # Raw object operations
    # ------------------------------------------------------------------

    def upload_object(
        self,
        bucket: str,
        object_path: str,
        body: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> StorageResult:
        """Upload one object with POST /object/<bucket>/<path>."""
        missing = self._missing_config()
        if missing:
            return missing

        target = f"{self.storage_base_url}/object/{quote(bucket, safe='')}/{encode_object_path(object_path)}"
        params = {"upsert": "true"} if upsert else None
        try:
            response = self._client.post(
                target, content=body, headers=self._headers(content_type), params=params
            )
        except httpx.HTTPError as e:
            logger.warning("Upload of %s/%s failed: %s", bucket, object_path, e)
            return StorageResult(ok=False, error=f"Supabase upload failed: {e}")

        if response.is_error:
            return StorageResult(
                ok=False,
                error=f"Supabase upload failed: {response.status_code} {response.text}",
            )

        return StorageResult(
            ok=True,
            bucket=bucket,
            path=object_path,
            public_url=self.public_url(bucket, object_path),
        )

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        recursive: bool = True,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> StorageResult:
        """List objects below a prefix, following offset pagination.

        Entries without an ``id`` are folders; they are listed recursively
        when ``recursive`` is set and ignored otherwise. Entries with an empty
        name or a non-object shape are skipped. Pages are fetched until one
        returns fewer than ``limit`` entries.
        """
        missing = self._missing_config()
        if missing:
            return missing

        target = f"{self.storage_base_url}/object/list/{quote(bucket, safe='')}"
        headers = self._headers("application/json")
        items: list[StorageObject] = []
        offset = 0

        while True:
            body = {
                "prefix": prefix,
                "limit": limit,
                "offset": offset,
                "sortBy": {"column": "name", "order": "asc"},
            }
            try:
                response = self._client.post(target, json=body, headers=headers)
            except httpx.HTTPError as e:
                return StorageResult(ok=False, error=f"Supabase list failed: {e}", items=items)

            if response.is_error:
                return StorageResult(
                    ok=False,
                    error=f"Supabase list failed: {response.status_code} {response.text}",
                    items=items,
                )

            try:
                data = response.json()
            except ValueError as e:
                return StorageResult(ok=False, error=f"Supabase list returned invalid JSON: {e}", items=items)
            if isinstance(data, dict):
                data = data.get("items")
            entries = data if isinstance(data, list) else []
            if not entries:
                break

            for entry in entries:
                if not isinstance(entry, dict):
                    continue
                name = entry.get("name") or ""
                if not name:
                    continue
                entry_path = join_object_path(prefix, name)
                if not entry.get("id"):
                    if recursive:
                        nested = self.list_objects(bucket, entry_path, recursive=True, limit=limit)
                        if not nested.ok:
                            return StorageResult(ok=False, error=nested.error, items=items)
                        items.extend(nested.items)
                    continue

                metadata = entry.get("metadata")
                if not isinstance(metadata, dict):
                    metadata = {}
                items.append(
                    StorageObject(
                        name=name,
                        bucket=bucket,
                        path=entry_path,
                        size=metadata.get("size") or metadata.get("content_length") or entry.get("size") or 0,
                        updated_at=entry.get("updated_at") or entry.get("last_accessed_at"),
                        public_url=self.public_url(bucket, entry_path),
                    )
                )

            if len(entries) < limit:
                break
            offset += limit

        return StorageResult(ok=True, items=items)

    def delete_object(self, bucket: str, object_path: str) -> StorageResult:
        """Delete by prefix with DELETE /object/<bucket>."""
        missing = self._missing_config()
        if missing:
            return missing

        target = f"{self.storage_base_url}/object/{quote(bucket, safe='')}"
        try:
            response = self._client.request(
                "DELETE",
                target,
                json={"prefixes": [object_path]},
                headers=self._headers("application/json"),
            )
        except httpx.HTTPError as e:
            return StorageResult(ok=False, error=f"Supabase delete failed: {e}")

        if response.is_error:
            return StorageResult(
                ok=False,
                error=f"Supabase delete failed: {response.status_code} {response.text}",
            )
        return StorageResult(ok=True, bucket=bucket, path=object_path)

    # ------------------------------------------------------------------
    # Media helpers
    # ------------------------------------------------------------------

    def upload_media(
        self,
        folder: str,
        file_name: str,
        content: bytes | str,
        size_bytes: int | None = None,
    ) -> StorageResult:
        """Upload a media binary (bytes or base64 text) with upsert semantics."""
        if not self.enabled:
            return StorageResult(ok=False, skipped=True, reason="Supabase media disabled")

        body = decode_base64_payload(content) if isinstance(content, str) else content
        if not body:
            return StorageResult(ok=False, skipped=True, reason="No binary payload decoded")

        bucket = self.settings.media_bucket
        object_path = self.build_media_path(folder, file_name)
        result = self.upload_object(
            bucket,
            object_path,
            body,
            content_type=guess_content_type(file_name),
            upsert=True,
        )
        if result.ok:
            result.size_bytes = size_bytes or len(body)
        return result

    def list_media(self, folder: str) -> StorageResult:
        """List media objects under a canonical folder."""
        if not self.enabled:
            return StorageResult(ok=False, skipped=True, reason="Supabase media disabled")
        return self.list_objects(self.settings.media_bucket, self.build_media_path(folder, ""))

    def delete_media(self, object_path: str | None, bucket: str | None = None) -> StorageResult:
        if not object_path:
            return StorageResult(ok=False, skipped=True, reason="Missing object path")
        return self.delete_object(bucket or self.settings.media_bucket, object_path)
