"""Shared services for request handlers.

One ``MediaServices`` bundle is built per application so that every request
goes through the same manifest store (and therefore the same lock and
remembered manifest location) and the same storage client.
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from ..config import MediaSettings
from ..deleter import DeleteCoordinator
from ..manifest_store import ManifestStore
from ..pipeline import InventoryPipeline
from ..registrar import UploadRegistrar
from ..registry import SourceRegistry
from ..storage import SupabaseStorageGateway

logger = logging.getLogger(__name__)


@dataclass
class MediaServices:
    settings: MediaSettings
    store: ManifestStore
    gateway: SupabaseStorageGateway
    pipeline: InventoryPipeline
    registrar: UploadRegistrar
    deleter: DeleteCoordinator

    @classmethod
    def build(
        cls,
        settings: MediaSettings,
        gateway: SupabaseStorageGateway | None = None,
    ) -> "MediaServices":
        store = ManifestStore(settings)
        gateway = gateway or SupabaseStorageGateway(settings)
        if not gateway.enabled:
            logger.info("Supabase storage not configured; serving local media only")
        return cls(
            settings=settings,
            store=store,
            gateway=gateway,
            pipeline=SourceRegistry.create_pipeline(settings, store=store, gateway=gateway),
            registrar=UploadRegistrar(store, gateway),
            deleter=DeleteCoordinator(settings, store, gateway),
        )

    def close(self) -> None:
        self.gateway.close()


def get_services(request: Request) -> MediaServices:
    """FastAPI dependency returning the application's services."""
    return request.app.state.services
