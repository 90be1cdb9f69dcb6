"""Global exception handlers for FastAPI application.

Every error response has the same shape, ``{"error": <token or message>}``.
Internal details go to the logs only.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from remote_kv.core.exceptions import AppException

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "invalid request"


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state."""
    return getattr(request.state, "request_id", None)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an AppException as ``{"error": exc.error}``.

    Client errors are logged at WARNING, server errors at ERROR with the
    traceback of the underlying cause.
    """
    log_extra = {
        "request_id": _get_request_id(request),
        "path": request.url.path,
        "method": request.method,
        "exception_type": type(exc).__name__,
        "status_code": exc.status_code,
        "detail": exc.detail,
        **{f"error_{k}": v for k, v in exc.extra.items()},
    }

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed", extra=log_extra, exc_info=exc)
    else:
        logger.warning("Request rejected", extra=log_extra)

    return JSONResponse(status_code=exc.status_code, content={"error": exc.error})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI request validation errors as a plain 400."""
    logger.warning(
        "Request validation failed",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "error_count": len(exc.errors()),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": INVALID_REQUEST_MESSAGE},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Logs the full traceback and returns ``{"error": "internal"}``.
    """
    logger.error(
        "Unexpected exception occurred",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal"},
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application.

    Example:
        app = FastAPI()
        configure_exception_handlers(app)
    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
