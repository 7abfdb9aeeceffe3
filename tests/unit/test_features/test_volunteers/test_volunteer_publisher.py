"""Unit tests for the RabbitMQ volunteer event publisher."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from volunteer_service.core.dependencies.messaging import RabbitBusPublisher
from volunteer_service.features.volunteers.events import VolunteerRegisteredEvent
from volunteer_service.features.volunteers.exceptions import PublishFailureError
from volunteer_service.features.volunteers.publisher import (
    RabbitVolunteerEventPublisher,
    VolunteerEventPublisher,
    get_volunteer_event_publisher,
)
from volunteer_service.infra.logging import log_context


@pytest.fixture
def event() -> VolunteerRegisteredEvent:
    return VolunteerRegisteredEvent(
        volunteer_id=1,
        name="Jane",
        phone="0711000111",
        email="jane@x.com",
        ward="Kibra",
        interest="Health",
        timestamp=1700000000,
    )


@pytest.fixture
def bus() -> AsyncMock:
    mock = AsyncMock()
    mock.is_configured = True
    return mock


@pytest.mark.unit
class TestRabbitVolunteerEventPublisher:
    """Tests for RabbitVolunteerEventPublisher."""

    @pytest.mark.asyncio
    async def test_publish_sends_event_to_topic_exchange(self, bus, event):
        publisher = RabbitVolunteerEventPublisher(bus, exchange="volunteer-events", timeout=1.0)

        await publisher.publish(event, key="1")

        bus.publish.assert_awaited_once()
        args, kwargs = bus.publish.await_args
        assert args[0] == event.to_message()
        assert kwargs["exchange"].name == "volunteer-events"
        assert kwargs["routing_key"] == "1"
        assert kwargs["headers"] == {"event_type": "VOLUNTEER_REGISTERED", "event_version": "1"}
        assert kwargs["message_id"] == "VOLUNTEER_REGISTERED:1:1700000000"
        assert kwargs["correlation_id"] is None

    @pytest.mark.asyncio
    async def test_request_id_becomes_correlation_id(self, bus, event):
        publisher = RabbitVolunteerEventPublisher(bus, timeout=1.0)

        with log_context(request_id="req-42"):
            await publisher.publish(event, key="1")

        assert bus.publish.await_args.kwargs["correlation_id"] == "req-42"

    @pytest.mark.asyncio
    async def test_channel_defaults_to_configured_exchange(self, bus, monkeypatch):
        from volunteer_service.core.settings import clear_all_caches

        monkeypatch.setenv("RABBIT_EVENTS_EXCHANGE", "ward-events")
        clear_all_caches()

        publisher = RabbitVolunteerEventPublisher(bus)

        assert publisher.channel == "ward-events"

    @pytest.mark.asyncio
    async def test_bus_error_becomes_publish_failure(self, bus, event):
        bus.publish.side_effect = ConnectionError("RabbitMQ broker is not connected")
        publisher = RabbitVolunteerEventPublisher(bus, exchange="volunteer-events", timeout=1.0)

        with pytest.raises(PublishFailureError) as exc_info:
            await publisher.publish(event, key="1")

        err = exc_info.value
        assert err.volunteer_id == 1
        assert err.channel == "volunteer-events"
        assert "not connected" in err.reason
        assert isinstance(err.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_slow_bus_times_out(self, bus, event):
        async def hang(*args, **kwargs):
            await asyncio.sleep(5)

        bus.publish.side_effect = hang
        publisher = RabbitVolunteerEventPublisher(bus, timeout=0.05)

        with pytest.raises(PublishFailureError) as exc_info:
            await publisher.publish(event, key="1")

        assert "timed out" in exc_info.value.reason

    def test_satisfies_publisher_protocol(self, bus):
        assert isinstance(RabbitVolunteerEventPublisher(bus), VolunteerEventPublisher)


@pytest.mark.unit
class TestRabbitBusPublisher:
    """Tests for the FastStream-backed bus adapter."""

    def test_not_configured_without_broker(self):
        assert RabbitBusPublisher(None).is_configured is False

    def test_not_configured_when_broker_stopped(self):
        broker = MagicMock()
        broker.running = False

        assert RabbitBusPublisher(broker).is_configured is False

    @pytest.mark.asyncio
    async def test_publish_without_connection_raises(self):
        with pytest.raises(ConnectionError):
            await RabbitBusPublisher(None).publish({"x": 1}, routing_key="1")

    @pytest.mark.asyncio
    async def test_publish_is_persistent(self):
        broker = MagicMock()
        broker.running = True
        broker.publish = AsyncMock()

        await RabbitBusPublisher(broker).publish(
            {"x": 1}, exchange="volunteer-events", routing_key="7", message_id="m-1"
        )

        kwargs = broker.publish.await_args.kwargs
        assert kwargs["persist"] is True
        assert kwargs["routing_key"] == "7"
        assert kwargs["message_id"] == "m-1"


@pytest.mark.unit
class TestGetVolunteerEventPublisher:
    def test_none_when_bus_not_configured(self):
        assert get_volunteer_event_publisher(RabbitBusPublisher(None)) is None

    def test_publisher_when_bus_connected(self, bus):
        publisher = get_volunteer_event_publisher(bus)

        assert isinstance(publisher, RabbitVolunteerEventPublisher)
