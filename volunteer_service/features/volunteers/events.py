"""Domain events published by the volunteers feature."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from volunteer_service.features.volunteers.models import Volunteer

VOLUNTEER_REGISTERED = "VOLUNTEER_REGISTERED"


def _epoch_seconds() -> int:
    return int(time.time())


class VolunteerRegisteredEvent(BaseModel):
    """Snapshot of a newly registered volunteer.

    ``timestamp`` is when the event was built for publishing, not the
    record's ``created_at``; consumers read it as "observed at".
    ``event_version`` travels as a message header so the body stays stable.
    """

    model_config = ConfigDict(frozen=True)

    event_version: ClassVar[int] = 1

    volunteer_id: int
    name: str
    phone: str
    email: str | None = None
    ward: str
    interest: str | None = None
    timestamp: int = Field(default_factory=_epoch_seconds, description="Unix epoch seconds")
    event_type: Literal["VOLUNTEER_REGISTERED"] = VOLUNTEER_REGISTERED

    @classmethod
    def from_volunteer(
        cls,
        volunteer: Volunteer,
        *,
        timestamp: int | None = None,
    ) -> VolunteerRegisteredEvent:
        """Build a fresh event from a persisted volunteer.

        Args:
            volunteer: Volunteer with an assigned id.
            timestamp: Override for the epoch-seconds stamp (defaults to now).
        """
        data: dict[str, Any] = {
            "volunteer_id": volunteer.id,
            "name": volunteer.name,
            "phone": volunteer.phone,
            "email": volunteer.email,
            "ward": volunteer.ward,
            "interest": volunteer.interest,
        }
        if timestamp is not None:
            data["timestamp"] = timestamp
        return cls(**data)

    @property
    def message_id(self) -> str:
        """Deterministic id consumers can use to drop redeliveries."""
        return f"{self.event_type}:{self.volunteer_id}:{self.timestamp}"

    def to_message(self) -> dict[str, Any]:
        """JSON-compatible message body."""
        return self.model_dump(mode="json")

    def headers(self) -> dict[str, str]:
        """Message headers describing the body schema."""
        return {"event_type": self.event_type, "event_version": str(self.event_version)}
