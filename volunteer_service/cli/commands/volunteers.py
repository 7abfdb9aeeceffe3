"""Volunteer management commands.

This module provides CLI commands for operators:
- Register a volunteer (publishes VOLUNTEER_REGISTERED when RabbitMQ is up)
- List volunteers, optionally by ward or status
- Change a volunteer's status
- Show registration statistics
"""

import json
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import click
from pydantic import ValidationError

from volunteer_service.cli.utils import (
    coro,
    error,
    header,
    info,
    section,
    success,
    volunteer_row,
    warning,
)
from volunteer_service.core.exceptions import AppException
from volunteer_service.features.volunteers.models import VolunteerStatus
from volunteer_service.features.volunteers.publisher import (
    RabbitVolunteerEventPublisher,
    VolunteerEventPublisher,
)
from volunteer_service.features.volunteers.schemas import VolunteerCreate, VolunteerResponse
from volunteer_service.features.volunteers.service import VolunteerService

STATUS_CHOICES = [s.value for s in VolunteerStatus]


@asynccontextmanager
async def _event_publisher() -> AsyncIterator[VolunteerEventPublisher | None]:
    """Connect to RabbitMQ for the duration of a command, if possible.

    Yields None when RabbitMQ is disabled or unreachable; registration
    still succeeds without an event.
    """
    from volunteer_service.core.dependencies.messaging import RabbitBusPublisher
    from volunteer_service.infra.messaging import get_broker, start_broker, stop_broker

    broker = get_broker()
    if broker is None:
        yield None
        return

    try:
        await start_broker()
    except Exception as e:
        warning(f"RabbitMQ unavailable, event will not be published: {e}")
        yield None
        return

    try:
        yield RabbitVolunteerEventPublisher(RabbitBusPublisher(broker))
    finally:
        await stop_broker()


@click.group(name="volunteers")
def volunteers() -> None:
    """Volunteer registration and administration."""


@volunteers.command(name="register")
@click.option("--name", required=True, help="Full name")
@click.option("--phone", required=True, help="Contact phone number (must be unique)")
@click.option("--ward", required=True, help="Ward the volunteer serves")
@click.option("--email", default=None, help="Optional contact email")
@click.option("--interest", default=None, help="Optional area of interest")
@coro
async def register(
    name: str,
    phone: str,
    ward: str,
    email: str | None,
    interest: str | None,
) -> None:
    """Register a new volunteer."""
    from volunteer_service.infra.database import get_async_session

    try:
        payload = VolunteerCreate(
            name=name, phone=phone, ward=ward, email=email, interest=interest
        )
    except ValidationError as e:
        for err in e.errors():
            error(f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        sys.exit(2)

    try:
        async with _event_publisher() as publisher, get_async_session() as session:
            service = VolunteerService(session, publisher=publisher)
            volunteer = await service.register(payload)
            if not service.has_publisher():
                info("No event publisher available; registration event skipped")
    except AppException as e:
        error(e.detail)
        sys.exit(1)

    success(f"Registered volunteer #{volunteer.id} ({volunteer.name}) in {volunteer.ward}")


@volunteers.command(name="list")
@click.option("--ward", default=None, help="Only volunteers in this ward")
@click.option(
    "--status",
    "status_filter",
    type=click.Choice(STATUS_CHOICES, case_sensitive=False),
    default=None,
    help="Only volunteers with this status",
)
@click.option(
    "--limit",
    default=50,
    type=int,
    help="Maximum number of volunteers to show (default: 50)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@coro
async def list_volunteers(
    ward: str | None,
    status_filter: str | None,
    limit: int,
    output_format: str,
) -> None:
    """List registered volunteers."""
    from volunteer_service.infra.database import get_async_session

    status = VolunteerStatus(status_filter.upper()) if status_filter else None

    try:
        async with get_async_session() as session:
            service = VolunteerService(session)
            result = await service.list_volunteers(limit=limit, status=status, ward=ward)
    except AppException as e:
        error(e.detail)
        sys.exit(1)

    rows = list(result.items)

    if output_format == "json":
        data = [VolunteerResponse.model_validate(v).model_dump(mode="json") for v in rows]
        click.echo(json.dumps(data, indent=2))
        return

    header("Volunteers")
    if not rows:
        info("No volunteers found")
        return
    click.echo(f"  {'ID':>6}  {'Name':<28}  {'Phone':<16}  {'Ward':<20}  Status")
    for volunteer in rows:
        click.echo(volunteer_row(volunteer))
    info(f"Showing {len(rows)} of {result.total}")


@volunteers.command(name="status")
@click.argument("volunteer_id", type=int)
@click.argument("new_status", type=click.Choice(STATUS_CHOICES, case_sensitive=False))
@coro
async def set_status(volunteer_id: int, new_status: str) -> None:
    """Change a volunteer's status (ACTIVE, INACTIVE, SUSPENDED)."""
    from volunteer_service.infra.database import get_async_session

    try:
        async with get_async_session() as session:
            volunteer = await VolunteerService(session).update_status(
                volunteer_id, VolunteerStatus(new_status.upper())
            )
    except AppException as e:
        error(e.detail)
        sys.exit(1)

    success(f"Volunteer #{volunteer.id} is now {volunteer.status.value}")


@volunteers.command(name="stats")
@click.option("--ward", default=None, help="Also count volunteers in this ward")
@coro
async def stats(ward: str | None) -> None:
    """Show registration statistics."""
    from volunteer_service.infra.database import get_async_session

    try:
        async with get_async_session() as session:
            service = VolunteerService(session)
            active = await service.count_active()
            ward_count = await service.count_by_ward(ward) if ward else None
    except AppException as e:
        error(e.detail)
        sys.exit(1)

    section("Volunteer Statistics")
    click.echo(f"  Active volunteers: {active}")
    if ward_count is not None:
        click.echo(f"  In ward {ward!r}: {ward_count}")
