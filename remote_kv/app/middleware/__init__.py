"""Middleware configuration for FastAPI application.

The middleware stack, in execution order (outermost first):

1. Request ID - X-Request-ID header and logging context
2. Metrics - request count and latency per route
3. CORS - open by default, configured via APP_CORS_*
4. Size Limit - 413 for bodies above APP_MAX_BODY_BYTES

Example Usage:
    from remote_kv.app.middleware import configure_middleware

    configure_middleware(app, settings)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

from remote_kv.app.middleware.metrics import MetricsMiddleware
from remote_kv.app.middleware.request_id import RequestIDMiddleware
from remote_kv.app.middleware.size_limit import RequestSizeLimitMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from remote_kv.core.settings import Settings

__all__ = [
    "MetricsMiddleware",
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "configure_middleware",
]


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure all middleware for the FastAPI application.

    Middleware is applied in REVERSE order (last added = first to execute).

    Args:
        app: FastAPI application instance
        settings: Unified settings instance
    """
    app_settings = settings.app

    app.add_middleware(RequestSizeLimitMiddleware, max_size=app_settings.max_body_bytes)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
        expose_headers=["X-Request-ID"],
        max_age=app_settings.cors_max_age,
    )

    app.add_middleware(MetricsMiddleware)

    app.add_middleware(RequestIDMiddleware)
