"""Application lifespan management.

Startup configures logging and opens the storage client; shutdown closes the
client and flushes the log queue. Both live on ``app.state`` so tests can
inject their own settings and backend through the app factory.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from remote_kv.infra.logging import setup_logging
from remote_kv.infra.logging import shutdown as shutdown_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan events.

    Args:
        app: FastAPI application instance

    Yields:
        None during application runtime
    """
    settings = app.state.settings
    backend = app.state.kv_service.backend

    setup_logging(settings.logging)

    logger.info(
        "Application starting",
        extra={
            "service": settings.app.service_name,
            "version": settings.app.version,
            "environment": settings.app.environment,
            "port": settings.app.port,
        },
    )

    if not settings.auth.enabled:
        logger.warning("AUTH_TOKEN is not set, every route is publicly accessible")

    await backend.startup()
    logger.info(
        "Storage backend initialized",
        extra={
            "backend": backend.backend_name,
            "bucket": settings.storage.bucket,
            "key_prefix": settings.storage.key_prefix,
            "endpoint": settings.storage.endpoint,
        },
    )

    try:
        yield
    finally:
        logger.info("Application shutting down")
        try:
            await backend.shutdown()
        except Exception as e:
            logger.warning("Error during storage shutdown", extra={"error": str(e)})
        shutdown_logging()
