"""Router registry and setup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_kv.features.health.router import router as health_router
from remote_kv.features.kv.router import router as kv_router
from remote_kv.features.metrics.router import router as metrics_router

if TYPE_CHECKING:
    from fastapi import FastAPI


def setup_routers(app: FastAPI) -> None:
    """Register all feature routers with the application.

    All routes live at the root: ``/healthz`` is public, ``/metrics`` and the
    key-value routes sit behind the bearer token gate.
    """
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(kv_router)
