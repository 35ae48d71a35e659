"""API error handling: every failure becomes ``{"ok": false, "error": ...}``.

Status code mapping:
- ``RequestValidationError`` (malformed body) → 400 Bad Request
- ``ValueError`` (rejected delete, bad URL, illegal scope) → 400 Bad Request
- Any other ``Exception`` → 500 Internal Server Error
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .models import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the request body does not match its model."""
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}" for error in errors
    )
    logger.info("Invalid request on %s: %s", request.url.path, message)
    return error_response(400, message or "Invalid request")


async def _handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Return 400 for rejected requests."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return error_response(400, str(exc))


class CatchAllErrorMiddleware(BaseHTTPMiddleware):
    """Convert any unhandled exception into a 500 error envelope."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "Unhandled exception on %s %s",
                request.method,
                request.url.path,
                exc_info=True,
            )
            return error_response(500, str(e) or "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI application."""
    app.add_exception_handler(RequestValidationError, _handle_request_validation)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, _handle_value_error)  # type: ignore[arg-type]
    app.add_middleware(CatchAllErrorMiddleware)
