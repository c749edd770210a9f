"""
Error types shared by the store, the services and the HTTP layer.

Every error carries a client-safe ``message`` and the HTTP status it
maps to.  ``register_exception_handlers`` installs FastAPI handlers
that render them as ``{"error": <message>}``; details of the
underlying failure are logged, never returned.  Any other exception
becomes a 500 with the generic ``Internal server error`` message.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class TransactionsAPIError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TransactionsAPIError):
    """A request parameter is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request parameters"


class StoreError(TransactionsAPIError):
    """The record store could not be reached or queried."""

    default_message = "Record store failure"


class SeedError(StoreError):
    """The seed dataset could not be fetched or loaded."""

    default_message = "Failed to initialize database"


class UpstreamError(TransactionsAPIError):
    """A sub-query of a composed endpoint failed."""

    default_message = "Failed to fetch combined data"


async def _handle_api_error(request: Request, exc: TransactionsAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Collapse FastAPI's error list into one readable line.
    reasons = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "query")
        reasons.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    message = "; ".join(reasons) or ValidationError.default_message
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": TransactionsAPIError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""
    app.add_exception_handler(TransactionsAPIError, _handle_api_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
