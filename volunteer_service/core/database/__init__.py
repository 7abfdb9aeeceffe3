"""Core database package: declarative base, mixins and the thin repository layer.

Example:
    from volunteer_service.core.database import BaseRepository, SearchResult

    class VolunteerRepository(BaseRepository[Volunteer]):
        ...
"""

from __future__ import annotations

from volunteer_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampMixin,
)
from volunteer_service.core.database.exceptions import NotFoundError, RepositoryError
from volunteer_service.core.database.repository import BaseRepository, SearchResult

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "IntegerPKMixin",
    "NotFoundError",
    "RepositoryError",
    "SearchResult",
    "TimestampMixin",
]
