"""Database session management for the async SQLAlchemy engine.

The engine is built on first use from ``DB_*`` settings, so importing this
module never opens a connection and tests can swap the URL before anything
touches the database.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from volunteer_service.core.settings import get_app_settings, get_db_settings
from volunteer_service.utils.retry import retry

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the process-wide async engine, creating it on first call."""
    global _engine

    if _engine is None:
        db_settings = get_db_settings()
        engine_kwargs = db_settings.engine_kwargs()
        engine_kwargs["echo"] = db_settings.echo or get_app_settings().debug
        _engine = create_async_engine(db_settings.get_sqlalchemy_url(), **engine_kwargs)
        logger.debug(
            "Database engine created",
            extra={"driver": _engine.dialect.driver, "sqlite": db_settings.is_sqlite},
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the process-wide engine."""
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(Volunteer))
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_database() -> None:
    """Verify connectivity with retry, optionally creating missing tables.

    Uses retry settings from PostgresSettings:
    - startup_retry_attempts: Maximum number of connection attempts
    - startup_retry_delay: Initial delay between retries

    Raises:
        RetryError: If unable to connect after all retry attempts.
    """
    db_settings = get_db_settings()
    engine = get_engine()

    @retry(
        max_attempts=db_settings.startup_retry_attempts,
        initial_delay=db_settings.startup_retry_delay,
    )
    async def _ping() -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    logger.info(
        "Initializing database connection with retry",
        extra={
            "max_attempts": db_settings.startup_retry_attempts,
            "initial_delay": db_settings.startup_retry_delay,
        },
    )
    await _ping()

    if db_settings.create_tables_on_startup:
        await create_tables()

    logger.info("Database connection established", extra={"driver": engine.dialect.driver})


async def create_tables() -> None:
    """Create any missing tables from the ORM metadata (development only)."""
    from volunteer_service.core.database import Base
    from volunteer_service.features.volunteers import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


async def check_database_health() -> bool:
    """Run ``SELECT 1`` against the engine within ``DB_HEALTH_CHECK_TIMEOUT``.

    Returns False on any failure, including a ping that does not answer in time.
    """
    timeout = get_db_settings().health_check_timeout

    async def _select_one() -> None:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))

    try:
        await asyncio.wait_for(_select_one(), timeout=timeout)
    except TimeoutError:
        logger.warning("Database health check timed out", extra={"timeout": timeout})
        return False
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return False
    return True


async def close_database() -> None:
    """Dispose of the engine; the next get_engine() call builds a fresh one."""
    global _engine, _session_factory

    if _engine is None:
        return

    logger.info("Closing database connection")
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database connection closed successfully")
