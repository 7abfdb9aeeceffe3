"""Error taxonomy for volunteer operations.

Every error carries a ``kind`` so callers can tell business outcomes
(duplicate, not found) apart from infrastructure failures without matching
on exception classes or messages.
"""

from __future__ import annotations

from enum import Enum

from volunteer_service.core.exceptions import (
    AppException,
    ConflictException,
    NotFoundException,
    ServiceUnavailableException,
)


class VolunteerErrorKind(str, Enum):
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    NOT_FOUND = "NOT_FOUND"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    PUBLISH_FAILURE = "PUBLISH_FAILURE"

    @property
    def is_business_outcome(self) -> bool:
        """True for caller-correctable outcomes, False for infrastructure failures."""
        return self in (VolunteerErrorKind.DUPLICATE_REGISTRATION, VolunteerErrorKind.NOT_FOUND)


class DuplicateRegistrationError(ConflictException):
    """Phone number already belongs to a registered volunteer. Not retryable."""

    kind = VolunteerErrorKind.DUPLICATE_REGISTRATION

    def __init__(self, phone: str) -> None:
        self.phone = phone
        super().__init__(
            detail="Phone number already registered!",
            type="duplicate-registration",
            extra={"kind": self.kind.value},
        )


class VolunteerNotFoundError(NotFoundException):
    """No volunteer with the requested id."""

    kind = VolunteerErrorKind.NOT_FOUND

    def __init__(self, volunteer_id: int) -> None:
        self.volunteer_id = volunteer_id
        super().__init__(
            detail=f"Volunteer with id {volunteer_id} not found",
            type="volunteer-not-found",
            extra={"kind": self.kind.value, "volunteer_id": volunteer_id},
        )


class PersistenceFailureError(ServiceUnavailableException):
    """The store could not complete the operation. Safe for the caller to retry."""

    kind = VolunteerErrorKind.PERSISTENCE_FAILURE

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            detail=f"Volunteer store unavailable during {operation}; please retry",
            type="persistence-failure",
            extra={"kind": self.kind.value, "retryable": True},
        )


class PublishFailureError(AppException):
    """An event could not be delivered to the message channel.

    Raised by publishers and always absorbed by the service layer; it never
    reaches an HTTP response.
    """

    kind = VolunteerErrorKind.PUBLISH_FAILURE

    def __init__(self, volunteer_id: int, channel: str, reason: str) -> None:
        self.volunteer_id = volunteer_id
        self.channel = channel
        self.reason = reason
        super().__init__(
            status_code=502,
            detail=f"Failed to publish event for volunteer {volunteer_id} to {channel}: {reason}",
            type="publish-failure",
            extra={"kind": self.kind.value},
        )
