"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: explicit settings objects, no environment required
    - Storage Fixtures: in-memory backend implementing StorageBackend
    - Application Fixtures: FastAPI app and HTTP client

Every app fixture is built with ``create_app(settings=..., backend=...)`` so
tests never talk to a real bucket.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
import os

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
import pytest

from remote_kv.core.settings import (
    AppSettings,
    AuthSettings,
    LoggingSettings,
    Settings,
    StorageSettings,
    clear_all_caches,
)
from tests.fixtures import InMemoryBackend

# Ensure settings loaded from the environment validate without real config
os.environ.setdefault("BUCKET_NAME", "test-bucket")
os.environ.setdefault("LOG_JSON", "false")

TEST_TOKEN = "s3cret-token"


@pytest.fixture(autouse=True)
def _clear_settings_caches():
    """Drop cached settings before and after each test."""
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Factory for unified settings built from keyword overrides.

    Example:
        def test_prefix(make_settings):
            settings = make_settings(key_prefix="kv/", token="abc")
    """

    def _make(
        *,
        token: str | None = None,
        key_prefix: str = "",
        bucket: str = "test-bucket",
        max_body_bytes: int = 1024 * 1024,
    ) -> Settings:
        return Settings(
            app=AppSettings(environment="test", max_body_bytes=max_body_bytes),
            auth=AuthSettings(token=token),
            storage=StorageSettings(bucket=bucket, key_prefix=key_prefix),
            logging=LoggingSettings(json_logs=False, console_enabled=False),
        )

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    """Settings with authentication disabled and no key prefix."""
    return make_settings()


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def backend() -> InMemoryBackend:
    """Fresh in-memory backend, already started."""
    return InMemoryBackend(started=True)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(settings: Settings, backend: InMemoryBackend) -> FastAPI:
    """FastAPI application over the in-memory backend, auth disabled."""
    from remote_kv.app.main import create_app

    return create_app(settings=settings, backend=backend)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for the application.

    Example:
        async def test_health_check(client):
            response = await client.get("/healthz")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def auth_client(make_settings, backend: InMemoryBackend) -> AsyncGenerator[AsyncClient]:
    """Client for an application that requires ``Bearer TEST_TOKEN``."""
    from remote_kv.app.main import create_app

    app = create_app(settings=make_settings(token=TEST_TOKEN), backend=backend)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
