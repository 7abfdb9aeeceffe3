"""Database infrastructure package.

Example:
    from volunteer_service.infra.database import get_async_session

    async with get_async_session() as session:
        result = await session.execute(...)
"""

from __future__ import annotations

from .session import (
    check_database_health,
    close_database,
    create_tables,
    get_async_session,
    get_engine,
    get_session_factory,
    init_database,
)

__all__ = [
    "check_database_health",
    "close_database",
    "create_tables",
    "get_async_session",
    "get_engine",
    "get_session_factory",
    "init_database",
]
