"""Unit tests for RequestIDMiddleware."""

from __future__ import annotations

import uuid

from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
import pytest

from remote_kv.app.middleware.request_id import RequestIDMiddleware
from remote_kv.infra.logging import get_log_context


class TestRequestIDMiddleware:
    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def test_endpoint(request: Request):
            return {"request_id": request.state.request_id, "context": get_log_context()}

        return app

    @pytest.fixture
    async def client(self, app: FastAPI) -> AsyncClient:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac

    async def test_generates_request_id_when_not_provided(self, client: AsyncClient):
        response = await client.get("/test")

        request_id = response.headers["X-Request-ID"]
        assert str(uuid.UUID(request_id)) == request_id
        assert response.json()["request_id"] == request_id

    async def test_echoes_incoming_request_id(self, client: AsyncClient):
        response = await client.get("/test", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"

    async def test_sets_log_context_during_request(self, client: AsyncClient):
        response = await client.get("/test", headers={"X-Request-ID": "req-ctx"})

        assert response.json()["context"] == {
            "request_id": "req-ctx",
            "method": "GET",
            "path": "/test",
        }

    async def test_clears_log_context_after_request(self, client: AsyncClient):
        await client.get("/test")

        assert "request_id" not in get_log_context()


async def test_request_id_on_gateway_responses(client: AsyncClient):
    for response in (
        await client.get("/healthz"),
        await client.get("/get"),
        await client.get("/get", params={"key": "missing"}),
    ):
        assert response.headers.get("X-Request-ID")
