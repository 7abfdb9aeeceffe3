"""API router for the volunteers feature.

Endpoints:
    Registration:
        POST   /volunteers                       - Register a volunteer (201)

    Queries:
        GET    /volunteers                       - Paginated list, optional status filter
        GET    /volunteers/active                - All ACTIVE volunteers
        GET    /volunteers/active/ward/{ward}    - ACTIVE volunteers in a ward
        GET    /volunteers/ward/{ward}           - All volunteers in a ward
        GET    /volunteers/status/{status}       - Volunteers with a status
        GET    /volunteers/stats/active-count    - Number of ACTIVE volunteers
        GET    /volunteers/stats/ward/{ward}     - Number of volunteers in a ward
        GET    /volunteers/{volunteer_id}        - Single volunteer

    Administration:
        PATCH  /volunteers/{volunteer_id}        - Partial profile update
        PUT    /volunteers/{volunteer_id}/status - Change status (?status=INACTIVE)
        DELETE /volunteers/{volunteer_id}        - Permanent delete (204)

Example Usage:
    POST /api/v1/volunteers
    {"name": "Jane", "phone": "0711000111", "ward": "Ward 5", "interest": "Logistics"}

    PUT /api/v1/volunteers/1/status?status=SUSPENDED
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from volunteer_service.core.dependencies.database import DbSessionDep
from volunteer_service.features.volunteers.models import Volunteer, VolunteerStatus
from volunteer_service.features.volunteers.publisher import (
    VolunteerEventPublisher,
    get_volunteer_event_publisher,
)
from volunteer_service.features.volunteers.schemas import (
    VolunteerCountResponse,
    VolunteerCreate,
    VolunteerListResponse,
    VolunteerResponse,
    VolunteerUpdate,
)
from volunteer_service.features.volunteers.service import VolunteerService

router = APIRouter(prefix="/volunteers", tags=["volunteers"])
logger = logging.getLogger(__name__)


def get_volunteer_service(
    session: DbSessionDep,
    publisher: Annotated[VolunteerEventPublisher | None, Depends(get_volunteer_event_publisher)],
) -> VolunteerService:
    """Build a VolunteerService for the current request."""
    return VolunteerService(session, publisher=publisher)


VolunteerServiceDep = Annotated[VolunteerService, Depends(get_volunteer_service)]


def _to_responses(volunteers: Sequence[Volunteer]) -> list[VolunteerResponse]:
    return [VolunteerResponse.model_validate(v) for v in volunteers]


# ──────────────────────────────────────────────────────────────
# Registration
# ──────────────────────────────────────────────────────────────


@router.post(
    "",
    response_model=VolunteerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a volunteer",
    description=(
        "Register a new volunteer. Phone numbers are unique; a second registration "
        "with the same number is rejected with 409. A VOLUNTEER_REGISTERED event is "
        "published on a best-effort basis and never affects the response."
    ),
    responses={409: {"description": "Phone number already registered"}},
)
async def register_volunteer(
    payload: VolunteerCreate,
    service: VolunteerServiceDep,
) -> VolunteerResponse:
    """Register a volunteer.

    Example:
        ```bash
        curl -X POST http://localhost:8003/api/v1/volunteers \\
          -H "Content-Type: application/json" \\
          -d '{"name": "Jane", "phone": "0711000111", "ward": "Ward 5"}'
        ```
    """
    volunteer = await service.register(payload)
    return VolunteerResponse.model_validate(volunteer)


# ──────────────────────────────────────────────────────────────
# Queries
# ──────────────────────────────────────────────────────────────


@router.get(
    "",
    response_model=VolunteerListResponse,
    summary="List volunteers",
)
async def list_volunteers(
    service: VolunteerServiceDep,
    limit: int = Query(20, ge=1, le=100, description="Page size"),
    offset: int = Query(0, ge=0, description="Number of volunteers to skip"),
    status_filter: VolunteerStatus | None = Query(
        None, alias="status", description="Only volunteers with this status"
    ),
) -> VolunteerListResponse:
    """List volunteers ordered by id."""
    result = await service.list_volunteers(limit=limit, offset=offset, status=status_filter)
    return VolunteerListResponse(
        items=_to_responses(result.items),
        total=result.total,
        limit=result.limit,
        offset=result.offset,
        has_next=result.has_next,
    )


@router.get(
    "/active",
    response_model=list[VolunteerResponse],
    summary="List active volunteers",
)
async def list_active_volunteers(service: VolunteerServiceDep) -> list[VolunteerResponse]:
    return _to_responses(await service.list_active())


@router.get(
    "/active/ward/{ward}",
    response_model=list[VolunteerResponse],
    summary="List active volunteers in a ward",
)
async def list_active_volunteers_by_ward(
    ward: str,
    service: VolunteerServiceDep,
) -> list[VolunteerResponse]:
    return _to_responses(await service.list_active_by_ward(ward))


@router.get(
    "/ward/{ward}",
    response_model=list[VolunteerResponse],
    summary="List volunteers in a ward",
)
async def list_volunteers_by_ward(
    ward: str,
    service: VolunteerServiceDep,
) -> list[VolunteerResponse]:
    return _to_responses(await service.list_by_ward(ward))


@router.get(
    "/status/{volunteer_status}",
    response_model=list[VolunteerResponse],
    summary="List volunteers by status",
)
async def list_volunteers_by_status(
    volunteer_status: VolunteerStatus,
    service: VolunteerServiceDep,
) -> list[VolunteerResponse]:
    return _to_responses(await service.list_by_status(volunteer_status))


@router.get(
    "/stats/active-count",
    response_model=VolunteerCountResponse,
    summary="Count active volunteers",
)
async def count_active_volunteers(service: VolunteerServiceDep) -> VolunteerCountResponse:
    count = await service.count_active()
    return VolunteerCountResponse(count=count, status=VolunteerStatus.ACTIVE)


@router.get(
    "/stats/ward/{ward}",
    response_model=VolunteerCountResponse,
    summary="Count volunteers in a ward",
)
async def count_volunteers_by_ward(
    ward: str,
    service: VolunteerServiceDep,
) -> VolunteerCountResponse:
    count = await service.count_by_ward(ward)
    return VolunteerCountResponse(count=count, ward=ward)


@router.get(
    "/{volunteer_id}",
    response_model=VolunteerResponse,
    summary="Get a volunteer",
    responses={404: {"description": "Volunteer not found"}},
)
async def get_volunteer(
    volunteer_id: int,
    service: VolunteerServiceDep,
) -> VolunteerResponse:
    volunteer = await service.get_volunteer(volunteer_id)
    return VolunteerResponse.model_validate(volunteer)


# ──────────────────────────────────────────────────────────────
# Administration
# ──────────────────────────────────────────────────────────────


@router.patch(
    "/{volunteer_id}",
    response_model=VolunteerResponse,
    summary="Update a volunteer",
    description="Partial profile update. Only provided fields are changed.",
    responses={
        404: {"description": "Volunteer not found"},
        409: {"description": "Phone number already registered"},
    },
)
async def update_volunteer(
    volunteer_id: int,
    payload: VolunteerUpdate,
    service: VolunteerServiceDep,
) -> VolunteerResponse:
    volunteer = await service.update_profile(volunteer_id, payload)
    return VolunteerResponse.model_validate(volunteer)


@router.put(
    "/{volunteer_id}/status",
    response_model=VolunteerResponse,
    summary="Change a volunteer's status",
    responses={404: {"description": "Volunteer not found"}},
)
async def update_volunteer_status(
    volunteer_id: int,
    service: VolunteerServiceDep,
    new_status: VolunteerStatus = Query(..., alias="status", description="Target status"),
) -> VolunteerResponse:
    """Change status. Changing to the current status is a successful no-op."""
    volunteer = await service.update_status(volunteer_id, new_status)
    return VolunteerResponse.model_validate(volunteer)


@router.delete(
    "/{volunteer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a volunteer",
    responses={404: {"description": "Volunteer not found"}},
)
async def delete_volunteer(
    volunteer_id: int,
    service: VolunteerServiceDep,
) -> None:
    """Delete a volunteer permanently."""
    await service.delete_volunteer(volunteer_id)
