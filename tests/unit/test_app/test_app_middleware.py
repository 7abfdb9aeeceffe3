"""Tests for request ID middleware and middleware wiring."""

from __future__ import annotations

import uuid

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from volunteer_service.app.middleware import RequestIDMiddleware, configure_middleware
from volunteer_service.infra.logging import get_log_context


@pytest.fixture
def echo_app() -> FastAPI:
    app = FastAPI()
    configure_middleware(app)

    @app.get("/echo")
    async def echo(request: Request):
        return {
            "state": request.state.request_id,
            "log_context": get_log_context().get("request_id"),
        }

    return app


@pytest.fixture
async def echo_client(echo_app):
    async with AsyncClient(transport=ASGITransport(app=echo_app), base_url="http://test") as ac:
        yield ac


@pytest.mark.unit
class TestRequestIDMiddleware:
    @pytest.mark.asyncio
    async def test_incoming_id_is_propagated(self, echo_client):
        response = await echo_client.get("/echo", headers={"X-Request-ID": "abc-123"})

        assert response.headers["x-request-id"] == "abc-123"
        assert response.json() == {"state": "abc-123", "log_context": "abc-123"}

    @pytest.mark.asyncio
    async def test_id_is_generated_when_missing(self, echo_client):
        response = await echo_client.get("/echo")

        generated = response.headers["x-request-id"]
        assert uuid.UUID(generated).version == 4
        assert response.json()["state"] == generated

    @pytest.mark.asyncio
    async def test_log_context_is_cleared_after_request(self, echo_client):
        await echo_client.get("/echo", headers={"X-Request-ID": "abc-123"})

        assert "request_id" not in get_log_context()

    @pytest.mark.asyncio
    async def test_non_http_scope_passes_through(self):
        seen = []

        async def inner(scope, receive, send):
            seen.append(scope["type"])

        await RequestIDMiddleware(inner)({"type": "lifespan"}, None, None)

        assert seen == ["lifespan"]


@pytest.mark.unit
class TestCors:
    @pytest.mark.asyncio
    async def test_preflight_allowed(self, echo_client):
        response = await echo_client.options(
            "/echo",
            headers={
                "Origin": "https://volunteer.example.org",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
