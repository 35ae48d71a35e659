"""FastAPI application factory for the media API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ..config import MediaSettings
from ..storage import SupabaseStorageGateway
from .deps import MediaServices
from .middleware import register_error_handlers
from .routers.media import router as media_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the storage client on shutdown."""
    yield
    app.state.services.close()


def create_app(
    settings: MediaSettings | None = None,
    gateway: SupabaseStorageGateway | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Resolved configuration; read from the environment if omitted
        gateway: Storage gateway to use instead of one built from settings

    Returns:
        FastAPI app exposing ``/media``, ``/media/upload`` and ``/media/delete``
    """
    settings = settings or MediaSettings.from_env()

    app = FastAPI(
        title="Media Inventory API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = MediaServices.build(settings, gateway=gateway)

    register_error_handlers(app)
    app.include_router(media_router)

    logger.info("Media API ready (project root %s)", settings.project_root)
    return app
