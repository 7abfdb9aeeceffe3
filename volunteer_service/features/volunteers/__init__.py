"""Volunteers feature: registration, administration and registration events."""

from __future__ import annotations

from .events import VOLUNTEER_REGISTERED, VolunteerRegisteredEvent
from .exceptions import (
    DuplicateRegistrationError,
    PersistenceFailureError,
    PublishFailureError,
    VolunteerErrorKind,
    VolunteerNotFoundError,
)
from .models import Volunteer, VolunteerStatus
from .publisher import RabbitVolunteerEventPublisher, VolunteerEventPublisher
from .repository import VolunteerRepository, get_volunteer_repository
from .schemas import VolunteerCreate, VolunteerResponse, VolunteerUpdate
from .service import VolunteerService

__all__ = [
    "VOLUNTEER_REGISTERED",
    "DuplicateRegistrationError",
    "PersistenceFailureError",
    "PublishFailureError",
    "RabbitVolunteerEventPublisher",
    "Volunteer",
    "VolunteerCreate",
    "VolunteerErrorKind",
    "VolunteerEventPublisher",
    "VolunteerNotFoundError",
    "VolunteerRegisteredEvent",
    "VolunteerRepository",
    "VolunteerResponse",
    "VolunteerService",
    "VolunteerStatus",
    "VolunteerUpdate",
    "get_volunteer_repository",
]
