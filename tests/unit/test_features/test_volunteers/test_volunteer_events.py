"""Unit tests for volunteer domain events."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from volunteer_service.features.volunteers.events import (
    VOLUNTEER_REGISTERED,
    VolunteerRegisteredEvent,
)
from volunteer_service.features.volunteers.models import Volunteer, VolunteerStatus


def _volunteer(**overrides) -> Volunteer:
    data = {
        "id": 5,
        "name": "Jane",
        "phone": "0711000111",
        "email": None,
        "ward": "Kibra",
        "interest": None,
        "status": VolunteerStatus.ACTIVE,
        "created_at": datetime(2026, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2026, 1, 1, tzinfo=UTC),
    }
    data.update(overrides)
    return Volunteer(**data)


@pytest.mark.unit
class TestVolunteerRegisteredEvent:
    def test_from_volunteer_copies_profile(self):
        event = VolunteerRegisteredEvent.from_volunteer(_volunteer(), timestamp=1700000000)

        assert event.volunteer_id == 5
        assert event.name == "Jane"
        assert event.ward == "Kibra"
        assert event.email is None
        assert event.event_type == VOLUNTEER_REGISTERED
        assert event.timestamp == 1700000000

    def test_timestamp_defaults_to_now_in_seconds(self):
        before = int(datetime.now(UTC).timestamp())
        event = VolunteerRegisteredEvent.from_volunteer(_volunteer())
        after = int(datetime.now(UTC).timestamp())

        assert before <= event.timestamp <= after

    def test_message_body_is_json_compatible(self):
        event = VolunteerRegisteredEvent.from_volunteer(
            _volunteer(email="jane@x.com", interest="Health"), timestamp=1
        )

        assert event.to_message() == {
            "volunteer_id": 5,
            "name": "Jane",
            "phone": "0711000111",
            "email": "jane@x.com",
            "ward": "Kibra",
            "interest": "Health",
            "timestamp": 1,
            "event_type": "VOLUNTEER_REGISTERED",
        }

    def test_message_id_is_deterministic(self):
        event = VolunteerRegisteredEvent.from_volunteer(_volunteer(), timestamp=42)

        assert event.message_id == "VOLUNTEER_REGISTERED:5:42"

    def test_headers_carry_version(self):
        event = VolunteerRegisteredEvent.from_volunteer(_volunteer(), timestamp=42)

        assert event.headers() == {"event_type": "VOLUNTEER_REGISTERED", "event_version": "1"}

    def test_events_are_immutable(self):
        event = VolunteerRegisteredEvent.from_volunteer(_volunteer(), timestamp=42)

        with pytest.raises(ValidationError):
            event.ward = "Langata"
