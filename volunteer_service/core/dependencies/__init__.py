"""FastAPI dependencies for route handlers.

Features import their dependencies from here rather than from ``infra``
directly, which keeps the composition root in one place.
"""

from __future__ import annotations

from volunteer_service.core.dependencies.database import DbSessionDep, get_db_session
from volunteer_service.core.dependencies.messaging import (
    BusPublisher,
    BusPublisherDep,
    RabbitBusPublisher,
    get_bus_publisher,
)

__all__ = [
    "BusPublisher",
    "BusPublisherDep",
    "DbSessionDep",
    "RabbitBusPublisher",
    "get_bus_publisher",
    "get_db_session",
]
