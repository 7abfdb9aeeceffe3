"""Repository for the volunteers feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Select, select

from volunteer_service.core.database.repository import BaseRepository
from volunteer_service.features.volunteers.models import Volunteer, VolunteerStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class VolunteerRepository(BaseRepository[Volunteer]):
    """Repository for Volunteer model.

    Inherits from BaseRepository:
        - get(session, id) -> Volunteer | None
        - get_by(session, attr, value) -> Volunteer | None
        - search(session, statement, limit, offset) -> SearchResult[Volunteer]
        - count(session, *criteria) -> int
        - create(session, instance) -> Volunteer
        - delete(session, instance) -> None

    Feature-specific methods below. Nothing here commits.
    """

    def __init__(self) -> None:
        super().__init__(Volunteer)

    async def get_by_phone(self, session: AsyncSession, phone: str) -> Volunteer | None:
        """Get the volunteer registered with ``phone``, if any."""
        return await self.get_by(session, Volunteer.phone, phone)

    async def list_by_ward(self, session: AsyncSession, ward: str) -> Sequence[Volunteer]:
        """All volunteers in a ward, any status."""
        return await self.list_where(session, Volunteer.ward == ward)

    async def list_by_status(
        self,
        session: AsyncSession,
        status: VolunteerStatus,
    ) -> Sequence[Volunteer]:
        """All volunteers with the given status."""
        return await self.list_where(session, Volunteer.status == status)

    async def list_by_status_and_ward(
        self,
        session: AsyncSession,
        status: VolunteerStatus,
        ward: str,
    ) -> Sequence[Volunteer]:
        """Volunteers in a ward with the given status."""
        return await self.list_where(
            session,
            Volunteer.status == status,
            Volunteer.ward == ward,
        )

    async def count_by_status(self, session: AsyncSession, status: VolunteerStatus) -> int:
        return await self.count(session, Volunteer.status == status)

    async def count_by_ward(self, session: AsyncSession, ward: str) -> int:
        return await self.count(session, Volunteer.ward == ward)

    def search_statement(
        self,
        status: VolunteerStatus | None = None,
        ward: str | None = None,
    ) -> Select[tuple[Volunteer]]:
        """Base statement for paginated listing, ordered by id.

        Args:
            status: Optional status filter
            ward: Optional ward filter

        Returns:
            Select statement ready for BaseRepository.search()
        """
        stmt = select(Volunteer)
        if status is not None:
            stmt = stmt.where(Volunteer.status == status)
        if ward is not None:
            stmt = stmt.where(Volunteer.ward == ward)
        return stmt.order_by(Volunteer.id.asc())


_volunteer_repository: VolunteerRepository | None = None


def get_volunteer_repository() -> VolunteerRepository:
    """Get the shared VolunteerRepository instance (it holds no session state)."""
    global _volunteer_repository
    if _volunteer_repository is None:
        _volunteer_repository = VolunteerRepository()
    return _volunteer_repository
