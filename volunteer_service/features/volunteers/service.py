"""Service layer for the volunteers feature.

VolunteerService is the registration coordinator: duplicate check,
transactional persist, then a best-effort event publish that can never fail
the registration.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from volunteer_service.core.database import NotFoundError
from volunteer_service.core.settings import get_rabbit_settings
from volunteer_service.features.volunteers.events import (
    VOLUNTEER_REGISTERED,
    VolunteerRegisteredEvent,
)
from volunteer_service.features.volunteers.exceptions import (
    DuplicateRegistrationError,
    PersistenceFailureError,
    VolunteerNotFoundError,
)
from volunteer_service.features.volunteers.models import Volunteer, VolunteerStatus
from volunteer_service.features.volunteers.repository import (
    VolunteerRepository,
    get_volunteer_repository,
)
from volunteer_service.infra.logging import get_lazy_logger
from volunteer_service.infra.metrics import tracking

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from volunteer_service.core.database import SearchResult
    from volunteer_service.features.volunteers.publisher import VolunteerEventPublisher
    from volunteer_service.features.volunteers.schemas import VolunteerCreate, VolunteerUpdate


# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)

# Markers that identify a violation of uq_volunteers_phone across drivers
# (PostgreSQL reports the constraint name, SQLite the column).
_PHONE_CONSTRAINT_MARKERS = ("uq_volunteers_phone", "volunteers.phone")


def is_phone_conflict(error: IntegrityError) -> bool:
    """Whether an IntegrityError came from the phone unique constraint."""
    message = str(error.orig if error.orig is not None else error)
    return any(marker in message for marker in _PHONE_CONSTRAINT_MARKERS)


class VolunteerService:
    """Service for volunteer registration and administration.

    Collaborators are passed in explicitly:
        - session: unit of work for this call (one per request)
        - repo: store queries (defaults to the shared VolunteerRepository)
        - publisher: optional event publisher; when absent, registration
          skips publishing entirely

    Business outcomes (duplicate, not found) and store failures surface as
    typed VolunteerError subclasses; publish failures never leave this class.
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: VolunteerRepository | None = None,
        publisher: VolunteerEventPublisher | None = None,
        *,
        publish_timeout: float | None = None,
    ) -> None:
        """Initialize the volunteer service.

        Args:
            session: Database session for operations
            repo: Volunteer repository (optional, uses default if not provided)
            publisher: Event publisher, or None to run without events
            publish_timeout: Upper bound in seconds for one publish attempt
                (defaults to RABBIT_PUBLISH_TIMEOUT)
        """
        self._session = session
        self._repo = repo or get_volunteer_repository()
        self._publisher = publisher
        self._publish_timeout = (
            publish_timeout if publish_timeout is not None else get_rabbit_settings().publish_timeout
        )

    def has_publisher(self) -> bool:
        """Whether registrations will attempt to publish an event."""
        return self._publisher is not None

    # ──────────────────────────────────────────────────────────────
    # Registration
    # ──────────────────────────────────────────────────────────────

    async def register(self, payload: VolunteerCreate) -> Volunteer:
        """Register a new volunteer and announce it.

        Args:
            payload: Validated registration request. Any ``status`` it carries
                is ignored; new volunteers are always ACTIVE.

        Returns:
            The persisted volunteer, whatever happened to the event.

        Raises:
            DuplicateRegistrationError: The phone number is already registered
                (found by the pre-check or by the unique constraint).
            PersistenceFailureError: The store could not durably save the record.
        """
        async with self._store_guard("register"):
            existing = await self._repo.get_by_phone(self._session, payload.phone)
        if existing is not None:
            tracking.track_registration("duplicate")
            logger.info(
                "Registration rejected: phone already registered",
                extra={"existing_volunteer_id": existing.id, "ward": payload.ward},
            )
            raise DuplicateRegistrationError(payload.phone)

        volunteer = Volunteer(
            name=payload.name,
            phone=payload.phone,
            email=str(payload.email) if payload.email else None,
            ward=payload.ward,
            interest=payload.interest,
            status=VolunteerStatus.ACTIVE,
        )

        try:
            await self._repo.create(self._session, volunteer)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            if is_phone_conflict(e):
                # Lost a race with a concurrent registration for the same phone
                tracking.track_registration("duplicate")
                logger.info(
                    "Registration rejected by phone unique constraint",
                    extra={"ward": payload.ward},
                )
                raise DuplicateRegistrationError(payload.phone) from e
            tracking.track_registration("persistence_failure")
            logger.exception("Volunteer insert violated a constraint")
            raise PersistenceFailureError("register") from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            tracking.track_registration("persistence_failure")
            logger.exception("Failed to persist volunteer registration")
            raise PersistenceFailureError("register") from e

        tracking.track_registration("created")
        logger.info(
            "Volunteer registered",
            extra={"volunteer_id": volunteer.id, "ward": volunteer.ward},
        )

        await self._attempt_publish(volunteer)
        return volunteer

    async def _attempt_publish(self, volunteer: Volunteer) -> bool:
        """Publish VOLUNTEER_REGISTERED for ``volunteer``; never raises.

        Returns:
            True if the event was handed to the channel, False if it was
            skipped (no publisher) or failed.
        """
        if self._publisher is None:
            tracking.track_event_publish(VOLUNTEER_REGISTERED, "skipped")
            lazy_logger.debug(
                lambda: f"No event publisher configured; {VOLUNTEER_REGISTERED} "
                f"not published for volunteer {volunteer.id}"
            )
            return False

        channel = self._publisher.channel
        started = time.perf_counter()
        try:
            event = VolunteerRegisteredEvent.from_volunteer(volunteer)
            await asyncio.wait_for(
                self._publisher.publish(event, key=str(volunteer.id)),
                timeout=self._publish_timeout,
            )
        except Exception as e:
            tracking.track_event_publish(
                VOLUNTEER_REGISTERED, "failure", time.perf_counter() - started
            )
            # Enough context to backfill the dropped notification later
            logger.warning(
                "Volunteer event publish failed",
                extra={
                    "volunteer_id": volunteer.id,
                    "channel": channel,
                    "event_type": VOLUNTEER_REGISTERED,
                    "error": str(e) or repr(e),
                    "error_type": type(e).__name__,
                },
            )
            return False

        tracking.track_event_publish(VOLUNTEER_REGISTERED, "success", time.perf_counter() - started)
        lazy_logger.debug(
            lambda: f"Published {VOLUNTEER_REGISTERED} for volunteer {volunteer.id} to {channel}"
        )
        return True

    # ──────────────────────────────────────────────────────────────
    # Updates
    # ──────────────────────────────────────────────────────────────

    async def update_status(self, volunteer_id: int, status: VolunteerStatus) -> Volunteer:
        """Change a volunteer's status. No event is published.

        Raises:
            VolunteerNotFoundError: If no volunteer has this id
            PersistenceFailureError: If the store fails
        """
        async with self._store_guard("update_status"):
            volunteer = await self._get_or_raise(volunteer_id)
            previous = volunteer.status
            volunteer.status = status
            await self._session.flush()
            await self._session.refresh(volunteer)
            await self._session.commit()

        tracking.track_status_change(status.value)
        logger.info(
            "Volunteer status updated",
            extra={
                "volunteer_id": volunteer_id,
                "from_status": previous.value,
                "to_status": status.value,
            },
        )
        return volunteer

    async def update_profile(self, volunteer_id: int, payload: VolunteerUpdate) -> Volunteer:
        """Apply a partial profile update. No event is published.

        Raises:
            VolunteerNotFoundError: If no volunteer has this id
            DuplicateRegistrationError: If the new phone belongs to someone else
            PersistenceFailureError: If the store fails
        """
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("email") is not None:
            changes["email"] = str(changes["email"])

        async with self._store_guard("update_profile"):
            volunteer = await self._get_or_raise(volunteer_id)

            new_phone = changes.get("phone")
            if new_phone is not None and new_phone != volunteer.phone:
                holder = await self._repo.get_by_phone(self._session, new_phone)
                if holder is not None:
                    raise DuplicateRegistrationError(new_phone)

            for field, value in changes.items():
                setattr(volunteer, field, value)

            try:
                await self._session.flush()
            except IntegrityError as e:
                await self._session.rollback()
                if is_phone_conflict(e):
                    raise DuplicateRegistrationError(new_phone or volunteer.phone) from e
                raise
            await self._session.refresh(volunteer)
            await self._session.commit()

        logger.info(
            "Volunteer profile updated",
            extra={"volunteer_id": volunteer_id, "fields": sorted(changes)},
        )
        return volunteer

    async def delete_volunteer(self, volunteer_id: int) -> None:
        """Permanently remove a volunteer.

        Raises:
            VolunteerNotFoundError: If no volunteer has this id
            PersistenceFailureError: If the store fails
        """
        async with self._store_guard("delete"):
            volunteer = await self._get_or_raise(volunteer_id)
            await self._repo.delete(self._session, volunteer)
            await self._session.commit()

        logger.info("Volunteer deleted", extra={"volunteer_id": volunteer_id})

    # ──────────────────────────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────────────────────────

    async def get_volunteer(self, volunteer_id: int) -> Volunteer:
        """Get a volunteer by id.

        Raises:
            VolunteerNotFoundError: If no volunteer has this id
        """
        async with self._store_guard("get"):
            return await self._get_or_raise(volunteer_id)

    async def list_volunteers(
        self,
        *,
        limit: int = 20,
        offset: int = 0,
        status: VolunteerStatus | None = None,
        ward: str | None = None,
    ) -> SearchResult[Volunteer]:
        """One page of volunteers ordered by id, optionally filtered by status and ward."""
        async with self._store_guard("list"):
            result = await self._repo.search(
                self._session,
                self._repo.search_statement(status, ward),
                limit=limit,
                offset=offset,
            )

        lazy_logger.debug(
            lambda: f"service.list_volunteers(limit={limit}, offset={offset}, status={status}, ward={ward}) "
            f"-> {len(result.items)}/{result.total}"
        )
        return result

    async def list_by_ward(self, ward: str) -> Sequence[Volunteer]:
        async with self._store_guard("list_by_ward"):
            return await self._repo.list_by_ward(self._session, ward)

    async def list_by_status(self, status: VolunteerStatus) -> Sequence[Volunteer]:
        async with self._store_guard("list_by_status"):
            return await self._repo.list_by_status(self._session, status)

    async def list_active(self) -> Sequence[Volunteer]:
        return await self.list_by_status(VolunteerStatus.ACTIVE)

    async def list_active_by_ward(self, ward: str) -> Sequence[Volunteer]:
        async with self._store_guard("list_active_by_ward"):
            return await self._repo.list_by_status_and_ward(
                self._session, VolunteerStatus.ACTIVE, ward
            )

    async def count_active(self) -> int:
        async with self._store_guard("count_active"):
            return await self._repo.count_by_status(self._session, VolunteerStatus.ACTIVE)

    async def count_by_ward(self, ward: str) -> int:
        async with self._store_guard("count_by_ward"):
            return await self._repo.count_by_ward(self._session, ward)

    # ──────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────

    async def _get_or_raise(self, volunteer_id: int) -> Volunteer:
        try:
            return await self._repo.get_or_raise(self._session, volunteer_id)
        except NotFoundError as e:
            raise VolunteerNotFoundError(volunteer_id) from e

    @asynccontextmanager
    async def _store_guard(self, operation: str) -> AsyncIterator[None]:
        """Map store failures inside the block to PersistenceFailureError.

        Domain errors raised inside the block pass through unchanged.
        """
        try:
            yield
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.exception(
                "Volunteer store operation failed",
                extra={"operation": operation, "error_type": type(e).__name__},
            )
            raise PersistenceFailureError(operation) from e
