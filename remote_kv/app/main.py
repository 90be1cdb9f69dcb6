"""FastAPI application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from remote_kv.app.exception_handlers import configure_exception_handlers
from remote_kv.app.lifespan import lifespan
from remote_kv.app.middleware import configure_middleware
from remote_kv.app.router import setup_routers
from remote_kv.core.settings import get_settings
from remote_kv.features.kv.service import KeyValueService
from remote_kv.infra.storage.backends import create_storage_backend

if TYPE_CHECKING:
    from remote_kv.core.settings import Settings
    from remote_kv.infra.storage.backends import StorageBackend


def create_app(
    settings: Settings | None = None,
    backend: StorageBackend | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        backend: Storage backend to use. Defaults to the backend selected by
            ``settings.storage.backend``.

    Returns:
        Configured FastAPI application instance.

    Raises:
        pydantic.ValidationError: If settings are loaded from the environment
            and no bucket name is configured.
    """
    settings = settings or get_settings()
    app_settings = settings.app

    if backend is None:
        backend = create_storage_backend(settings.storage)

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.get_docs_url(),
        redoc_url=app_settings.get_redoc_url(),
        openapi_url=app_settings.get_openapi_url(),
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.kv_service = KeyValueService(backend, key_prefix=settings.storage.key_prefix)

    # Exception handlers first, middleware wraps them
    configure_exception_handlers(app)

    configure_middleware(app, settings)

    setup_routers(app)

    return app
