"""Media inventory endpoints: list, register upload, delete."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from ...core.folders import canonicalize
from ...deleter import EntryRef
from ..deps import MediaServices, get_services
from ..models import DeleteRequest, ListResponse, UploadRequest, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])


@router.get("", response_model=ListResponse, response_model_by_alias=True)
def list_media(
    folder: str = Query(default="", alias="dir"),
    services: MediaServices = Depends(get_services),
) -> dict[str, Any]:
    """List the merged inventory for a folder scope."""
    items = services.pipeline.list_inventory(folder)
    return {
        "ok": True,
        "dir": canonicalize(folder),
        "items": items,
        "manifestPath": str(services.store.read().path),
        "manifestDebug": services.store.debug_info(),
    }


@router.post("/upload", response_model=UploadResponse, response_model_by_alias=True)
def upload_media(body: UploadRequest, services: MediaServices = Depends(get_services)) -> dict[str, Any]:
    """Register an upload, pushing the binary to storage when one is sent."""
    result = services.registrar.register(
        file_name=body.file_name,
        folder=body.folder,
        path=body.path,
        remote_url=body.remote_url,
        size_bytes=body.size_bytes,
        content=body.content_base64,
    )
    return {
        "ok": True,
        "item": result.entry,
        "manifestPath": str(result.manifest_path),
        "manifestFallback": result.manifest_fallback,
        "manifestDebug": services.store.debug_info(),
        "storage": result.storage.to_dict() if result.storage else None,
    }


@router.post("/delete")
def delete_media(body: DeleteRequest, services: MediaServices = Depends(get_services)) -> dict[str, Any]:
    """Delete an asset from storage, disk and the manifest."""
    target = body.supabase
    ref = EntryRef(
        path=body.path,
        id=body.id,
        file_name=body.file_name,
        supabase_bucket=target.bucket if target else None,
        supabase_path=target.path if target else None,
    )
    result = services.deleter.remove(ref)
    return {"ok": True, **result.to_dict()}
