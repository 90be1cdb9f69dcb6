"""Tests for the liveness probe."""

from __future__ import annotations

from httpx import AsyncClient

from tests.fixtures import InMemoryBackend


async def test_healthz_returns_ok(client: AsyncClient):
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.text == "ok"
    assert response.headers["content-type"].startswith("text/plain")


async def test_healthz_does_not_touch_storage(client: AsyncClient, backend: InMemoryBackend):
    await client.get("/healthz")

    assert backend.calls == []


async def test_unknown_route_is_not_found(client: AsyncClient):
    response = await client.get("/does-not-exist")

    assert response.status_code == 404
