"""Tests for the application factory and lifespan."""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi import FastAPI
import pytest

from remote_kv.app.main import create_app
from remote_kv.features.kv.service import KeyValueService
from remote_kv.infra.storage.backends.gcs.backend import GCSBackend
from tests.fixtures import InMemoryBackend


def test_create_app_wires_settings_and_service(settings, backend: InMemoryBackend):
    app = create_app(settings=settings, backend=backend)

    assert isinstance(app, FastAPI)
    assert app.state.settings is settings
    assert isinstance(app.state.kv_service, KeyValueService)
    assert app.state.kv_service.backend is backend


def test_create_app_applies_key_prefix(make_settings, backend: InMemoryBackend):
    app = create_app(settings=make_settings(key_prefix="kv/"), backend=backend)

    assert app.state.kv_service.key_prefix == "kv/"


def test_create_app_builds_backend_from_settings(settings):
    app = create_app(settings=settings)

    assert isinstance(app.state.kv_service.backend, GCSBackend)


def test_create_app_loads_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUCKET_NAME", "env-bucket")
    monkeypatch.setenv("KEY_PREFIX", "env/")

    app = create_app(backend=InMemoryBackend())

    assert app.state.settings.storage.bucket == "env-bucket"
    assert app.state.kv_service.key_prefix == "env/"


def test_routes_registered(app: FastAPI):
    paths = {route.path for route in app.routes}

    assert {"/healthz", "/get", "/set", "/delete", "/list", "/metrics"} <= paths


class TestLifespan:
    @pytest.fixture(autouse=True)
    def _no_logging_setup(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("remote_kv.app.lifespan.setup_logging", MagicMock())
        monkeypatch.setattr("remote_kv.app.lifespan.shutdown_logging", MagicMock())

    async def test_starts_and_stops_backend(self, settings):
        backend = InMemoryBackend()
        app = create_app(settings=settings, backend=backend)

        async with app.router.lifespan_context(app):
            assert backend.is_ready

        assert not backend.is_ready

    async def test_warns_when_auth_disabled(self, settings, caplog: pytest.LogCaptureFixture):
        app = create_app(settings=settings, backend=InMemoryBackend())

        with caplog.at_level("WARNING", logger="remote_kv.app.lifespan"):
            async with app.router.lifespan_context(app):
                pass

        assert "AUTH_TOKEN is not set" in caplog.text

    async def test_shutdown_errors_do_not_propagate(self, settings):
        class BrokenShutdown(InMemoryBackend):
            async def shutdown(self) -> None:
                raise RuntimeError("close failed")

        app = create_app(settings=settings, backend=BrokenShutdown())

        async with app.router.lifespan_context(app):
            pass

    async def test_startup_failure_propagates(self, settings):
        class BrokenStartup(InMemoryBackend):
            async def startup(self) -> None:
                raise RuntimeError("no credentials")

        app = create_app(settings=settings, backend=BrokenStartup())

        with pytest.raises(RuntimeError):
            async with app.router.lifespan_context(app):
                pass
