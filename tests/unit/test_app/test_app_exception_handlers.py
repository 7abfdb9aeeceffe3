"""Tests for the problem+json exception handlers."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from volunteer_service.app.exception_handlers import configure_exception_handlers
from volunteer_service.app.middleware import RequestIDMiddleware
from volunteer_service.core.exceptions import AppException
from volunteer_service.features.volunteers.exceptions import PersistenceFailureError


class _Body(BaseModel):
    count: int


@pytest.fixture
def failing_app() -> FastAPI:
    app = FastAPI()
    configure_exception_handlers(app)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/teapot")
    async def teapot():
        raise AppException(status_code=418, detail="short and stout", type="teapot")

    @app.get("/store-down")
    async def store_down():
        raise PersistenceFailureError("register")

    @app.get("/boom")
    async def boom():
        msg = "secret internals"
        raise RuntimeError(msg)

    @app.post("/things")
    async def things(body: _Body):
        return body

    return app


@pytest.fixture
async def failing_client(failing_app):
    transport = ASGITransport(app=failing_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.unit
class TestExceptionHandlers:
    """Every error is rendered as RFC 7807 problem details."""

    @pytest.mark.asyncio
    async def test_app_exception(self, failing_client, metric_value):
        before = metric_value(
            "errors_total", error_type="teapot", endpoint="/teapot", status_code="418"
        )

        response = await failing_client.get("/teapot", headers={"X-Request-ID": "r-1"})

        assert response.status_code == 418
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["type"] == "teapot"
        assert body["title"] == "Error"
        assert body["detail"] == "short and stout"
        assert body["instance"] == "http://test/teapot"
        assert body["request_id"] == "r-1"
        assert (
            metric_value("errors_total", error_type="teapot", endpoint="/teapot", status_code="418")
            == before + 1
        )

    @pytest.mark.asyncio
    async def test_retryable_failure_sets_retry_after(self, failing_client):
        response = await failing_client.get("/store-down")

        assert response.status_code == 503
        assert response.headers["retry-after"] == "1"
        body = response.json()
        assert body["type"] == "persistence-failure"
        assert body["retryable"] is True
        assert body["kind"] == "PERSISTENCE_FAILURE"

    @pytest.mark.asyncio
    async def test_validation_error(self, failing_client):
        response = await failing_client.post("/things", json={"count": "many"})

        assert response.status_code == 422
        body = response.json()
        assert body["title"] == "Validation Error"
        assert body["errors"][0]["field"] == "body.count"
        assert body["errors"][0]["value"] == "many"

    @pytest.mark.asyncio
    async def test_unexpected_error_hides_details(self, failing_client, metric_value):
        before = metric_value(
            "exceptions_unhandled_total", exception_type="RuntimeError", endpoint="/boom"
        )

        response = await failing_client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["type"] == "internal-error"
        assert body["title"] == "Internal Server Error"
        assert "secret internals" not in response.text
        assert (
            metric_value(
                "exceptions_unhandled_total", exception_type="RuntimeError", endpoint="/boom"
            )
            == before + 1
        )
