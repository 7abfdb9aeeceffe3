"""Application lifespan management.

Startup Order:
1. Core (logging, application metrics) - always runs first
2. Database (PostgreSQL) - conditional on configuration
3. Messaging (RabbitMQ) - conditional on configuration

Shutdown Order: Reverse of startup.

Registrations need the database, so a database outage fails startup unless
``DB_STARTUP_REQUIRE_DB`` is false. Event publishing is best-effort: a RabbitMQ
outage only degrades the service unless ``RABBIT_STARTUP_REQUIRE_RABBIT`` is set.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from volunteer_service.core.settings import (
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_rabbit_settings,
)
from volunteer_service.infra.logging.config import setup_logging
from volunteer_service.infra.logging.config import shutdown as shutdown_logging
from volunteer_service.infra.metrics.prometheus import application_info

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


# =============================================================================
# Startup functions
# =============================================================================


async def _startup_core() -> None:
    """Initialize core services: logging and the application info metric."""
    app = get_app_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )

    application_info.labels(
        version=app.version,
        service=app.service_name,
        environment=app.environment,
    ).set(1)


async def _startup_database() -> None:
    """Verify the database connection."""
    from volunteer_service.infra.database.session import init_database

    db = get_db_settings()

    if not db.is_configured:
        logger.warning("Database not configured - volunteer endpoints will fail")
        return

    try:
        await init_database()
        logger.info("Database connection initialized")
    except Exception as e:
        if db.startup_require_db:
            logger.exception(
                "Database required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_db": True},
            )
            raise
        logger.warning(
            "Database unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_db": False},
        )


async def _startup_messaging() -> None:
    """Connect the RabbitMQ broker used for volunteer events."""
    from volunteer_service.infra.messaging.broker import start_broker

    settings = get_rabbit_settings()

    if not settings.is_configured:
        return

    try:
        await start_broker()
        logger.info("RabbitMQ broker initialized", extra={"exchange": settings.events_exchange})
    except Exception as e:
        if settings.startup_require_rabbit:
            logger.exception("RabbitMQ required but unavailable, failing startup")
            raise
        logger.warning(
            "RabbitMQ unavailable, continuing in degraded mode (events will not be published)",
            extra={"error": str(e), "startup_require_rabbit": False},
        )


# =============================================================================
# Shutdown functions
# =============================================================================


async def _shutdown_messaging() -> None:
    from volunteer_service.infra.messaging.broker import stop_broker

    if not get_rabbit_settings().is_configured:
        return

    await stop_broker()
    logger.info("RabbitMQ broker closed")


async def _shutdown_database() -> None:
    from volunteer_service.infra.database.session import close_database

    if not get_db_settings().is_configured:
        return

    await close_database()
    logger.info("Database connection closed")


async def _shutdown_core() -> None:
    """Flush queued log records and stop the log listener."""
    shutdown_logging()


# =============================================================================
# Main lifespan context manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    _ = app

    await _startup_core()
    await _startup_database()
    await _startup_messaging()

    app_settings = get_app_settings()
    logger.info(
        "Application startup complete - listening on %s:%s",
        app_settings.host,
        app_settings.port,
        extra={
            "service": app_settings.service_name,
            "environment": app_settings.environment,
            "version": app_settings.version,
            "database_enabled": get_db_settings().is_configured,
            "messaging_enabled": get_rabbit_settings().is_configured,
        },
    )

    yield

    logger.info("Application shutting down", extra={"service": app_settings.service_name})

    await _shutdown_messaging()
    await _shutdown_database()

    logger.info("Application shutdown complete")
    await _shutdown_core()


__all__ = ["lifespan"]
