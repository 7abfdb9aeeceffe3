"""Unit tests for VolunteerRepository against SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from volunteer_service.core.database import NotFoundError
from volunteer_service.features.volunteers.models import Volunteer, VolunteerStatus
from volunteer_service.features.volunteers.repository import (
    VolunteerRepository,
    get_volunteer_repository,
)
from volunteer_service.features.volunteers.service import is_phone_conflict


def _volunteer(name: str, phone: str, ward: str = "Kibra", **kwargs) -> Volunteer:
    return Volunteer(name=name, phone=phone, ward=ward, **kwargs)


@pytest.fixture
def repo() -> VolunteerRepository:
    return VolunteerRepository()


@pytest.mark.unit
class TestVolunteerRepository:
    """Tests for VolunteerRepository."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_defaults(self, repo, db_session):
        volunteer = await repo.create(db_session, _volunteer("Jane", "0711000111"))

        assert volunteer.id == 1
        assert volunteer.status == VolunteerStatus.ACTIVE
        assert volunteer.created_at is not None
        assert volunteer.updated_at is not None

    @pytest.mark.asyncio
    async def test_get_by_phone(self, repo, db_session):
        await repo.create(db_session, _volunteer("Jane", "0711000111"))

        found = await repo.get_by_phone(db_session, "0711000111")
        missing = await repo.get_by_phone(db_session, "0700000000")

        assert found is not None
        assert found.name == "Jane"
        assert missing is None

    @pytest.mark.asyncio
    async def test_phone_unique_constraint(self, repo, db_session):
        await repo.create(db_session, _volunteer("Jane", "0711000111"))

        with pytest.raises(IntegrityError) as exc_info:
            await repo.create(db_session, _volunteer("Copy", "0711000111"))

        assert is_phone_conflict(exc_info.value)

    @pytest.mark.asyncio
    async def test_ward_and_status_queries(self, repo, db_session):
        await repo.create(db_session, _volunteer("A", "0711000001", "Kibra"))
        await repo.create(
            db_session, _volunteer("B", "0711000002", "Kibra", status=VolunteerStatus.SUSPENDED)
        )
        await repo.create(db_session, _volunteer("C", "0711000003", "Langata"))

        assert [v.name for v in await repo.list_by_ward(db_session, "Kibra")] == ["A", "B"]
        assert [
            v.name for v in await repo.list_by_status(db_session, VolunteerStatus.SUSPENDED)
        ] == ["B"]
        assert [
            v.name
            for v in await repo.list_by_status_and_ward(
                db_session, VolunteerStatus.ACTIVE, "Kibra"
            )
        ] == ["A"]
        assert await repo.count_by_status(db_session, VolunteerStatus.ACTIVE) == 2
        assert await repo.count_by_ward(db_session, "Langata") == 1

    @pytest.mark.asyncio
    async def test_search_statement_pagination(self, repo, db_session):
        for i in range(5):
            await repo.create(db_session, _volunteer(f"V{i}", f"071100000{i}"))

        result = await repo.search(db_session, repo.search_statement(), limit=2, offset=2)

        assert result.total == 5
        assert [v.name for v in result.items] == ["V2", "V3"]
        assert result.page == 2
        assert result.pages == 3
        assert result.has_next
        assert result.has_prev

    @pytest.mark.asyncio
    async def test_get_or_raise(self, repo, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await repo.get_or_raise(db_session, 77)

        assert exc_info.value.model_name == "Volunteer"
        assert exc_info.value.identifier == {"id": 77}
        assert "Volunteer not found with id=77" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_delete(self, repo, db_session):
        volunteer = await repo.create(db_session, _volunteer("Jane", "0711000111"))

        await repo.delete(db_session, volunteer)

        assert await repo.get(db_session, volunteer.id) is None
        assert await repo.count(db_session) == 0

    def test_shared_instance(self):
        assert get_volunteer_repository() is get_volunteer_repository()
