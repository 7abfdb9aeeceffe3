"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings that keep tests off real infrastructure
    - Database Fixtures: in-memory SQLite engine and sessions
    - Volunteer Fixtures: payloads, publisher doubles, services
    - Application Fixtures: FastAPI app and HTTP client with overridden dependencies
    - Metrics Helpers: counter deltas against the service registry
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from volunteer_service.features.volunteers.schemas import VolunteerCreate
    from volunteer_service.features.volunteers.service import VolunteerService

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_ENABLED", "false")
os.environ.setdefault("RABBIT_ENABLED", "false")
os.environ.setdefault("LOG_FILE_ENABLED", "false")


@pytest.fixture(autouse=True)
def _clear_settings_caches():
    """Reload settings for every test so monkeypatched env vars take effect."""
    from volunteer_service.core.settings import clear_all_caches

    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine over a single shared in-memory SQLite connection.

    StaticPool keeps every session on the same connection, so data written by
    one request is visible to the next.
    """
    from volunteer_service.core.database import Base
    from volunteer_service.features.volunteers import models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Database session for service and repository tests."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ============================================================================
# Volunteer Fixtures
# ============================================================================


@pytest.fixture
def make_payload() -> Callable[..., VolunteerCreate]:
    """Factory for registration payloads; defaults to the Jane scenario.

    Example:
        payload = make_payload(phone="0722000222", ward="Ward 7")
    """
    from volunteer_service.features.volunteers.schemas import VolunteerCreate

    def _make(**overrides: Any) -> VolunteerCreate:
        data: dict[str, Any] = {
            "name": "Jane",
            "phone": "0711000111",
            "email": "jane@x.com",
            "ward": "Kibra",
            "interest": "Health",
        }
        data.update(overrides)
        return VolunteerCreate(**data)

    return _make


@pytest.fixture
def publisher() -> AsyncMock:
    """Event publisher double satisfying VolunteerEventPublisher."""
    mock = AsyncMock()
    mock.channel = "volunteer-events"
    return mock


@pytest.fixture
def service(db_session: AsyncSession, publisher: AsyncMock) -> VolunteerService:
    from volunteer_service.features.volunteers.service import VolunteerService

    return VolunteerService(db_session, publisher=publisher, publish_timeout=0.2)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    publisher: AsyncMock,
) -> FastAPI:
    """FastAPI app wired to the test database and the publisher double.

    The lifespan is not run, so no real database or broker is touched.
    """
    from volunteer_service.app.main import create_app
    from volunteer_service.core.dependencies.database import get_db_session
    from volunteer_service.features.volunteers.publisher import get_volunteer_event_publisher

    application = create_app()

    async def _session_override() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = _session_override
    application.dependency_overrides[get_volunteer_event_publisher] = lambda: publisher
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for the test app.

    Example:
        async def test_health_check(client):
            response = await client.get("/api/v1/health")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Metrics Helpers
# ============================================================================


@pytest.fixture
def metric_value() -> Callable[..., float]:
    """Current value of a sample in the service registry (0.0 if never set)."""
    from volunteer_service.infra.metrics import REGISTRY

    def _value(name: str, **labels: str) -> float:
        return REGISTRY.get_sample_value(name, labels) or 0.0

    return _value
