"""Request and response models for the media API.

Wire keys are camelCase; Python attributes are snake_case with aliases.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UploadRequest(_CamelModel):
    """Body of ``POST /media/upload``."""

    file_name: str | None = Field(default=None, alias="fileName")
    folder: str | None = None
    path: str | None = None
    remote_url: str | None = Field(default=None, alias="remoteUrl")
    size_bytes: int | None = Field(default=None, alias="sizeBytes", ge=0)
    content_base64: str | None = Field(default=None, alias="contentBase64")


class SupabaseTarget(_CamelModel):
    bucket: str | None = None
    path: str | None = None


class DeleteRequest(_CamelModel):
    """Body of ``POST /media/delete``."""

    path: str | None = None
    id: str | None = None
    file_name: str | None = Field(default=None, alias="fileName")
    supabase: SupabaseTarget | None = None


class ErrorResponse(BaseModel):
    """Uniform failure envelope: ``{"ok": false, "error": "..."}``."""

    ok: bool = False
    error: str


class ListResponse(_CamelModel):
    ok: bool = True
    dir: str
    items: list[dict[str, Any]]
    manifest_path: str = Field(alias="manifestPath")
    manifest_debug: dict[str, str] = Field(alias="manifestDebug")


class UploadResponse(_CamelModel):
    ok: bool = True
    item: dict[str, Any]
    manifest_path: str = Field(alias="manifestPath")
    manifest_fallback: bool = Field(alias="manifestFallback")
    manifest_debug: dict[str, str] = Field(alias="manifestDebug")
    storage: dict[str, Any] | None = None
