"""HTTP surface for the media inventory (FastAPI)."""

from .app import create_app

__all__ = ["create_app"]
