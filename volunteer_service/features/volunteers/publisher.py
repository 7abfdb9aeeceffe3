"""Event publishing for the volunteers feature.

The service depends on the small VolunteerEventPublisher protocol; the
RabbitMQ implementation adapts it onto the generic BusPublisher.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Annotated, Protocol, runtime_checkable

from fastapi import Depends

from volunteer_service.core.dependencies.messaging import BusPublisher, get_bus_publisher
from volunteer_service.core.settings import get_rabbit_settings
from volunteer_service.features.volunteers.exceptions import PublishFailureError
from volunteer_service.infra.logging import get_lazy_logger, get_log_context
from volunteer_service.infra.messaging.broker import get_events_exchange

if TYPE_CHECKING:
    from volunteer_service.features.volunteers.events import VolunteerRegisteredEvent

lazy_logger = get_lazy_logger(__name__)


@runtime_checkable
class VolunteerEventPublisher(Protocol):
    """Publishes volunteer events to a named channel."""

    channel: str

    async def publish(self, event: VolunteerRegisteredEvent, *, key: str) -> None:
        """Publish ``event`` with partition/routing ``key``.

        Raises:
            PublishFailureError: If the event could not be handed to the channel.
        """
        ...


class RabbitVolunteerEventPublisher:
    """Publishes volunteer events to the RabbitMQ topic exchange.

    Each event goes out as a persistent JSON message with:
        - routing key: the volunteer id
        - headers: event_type, event_version
        - message_id: ``<event_type>:<volunteer_id>:<timestamp>``
        - correlation_id: the current request id, when one is in the log context
    """

    def __init__(
        self,
        bus: BusPublisher,
        *,
        exchange: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            bus: Connected message bus
            exchange: Exchange name (defaults to RABBIT_EVENTS_EXCHANGE)
            timeout: Seconds allowed per publish (defaults to RABBIT_PUBLISH_TIMEOUT)
        """
        settings = get_rabbit_settings()
        self._bus = bus
        self.channel = exchange or settings.events_exchange
        self._exchange = get_events_exchange(self.channel)
        self._timeout = timeout if timeout is not None else settings.publish_timeout

    async def publish(self, event: VolunteerRegisteredEvent, *, key: str) -> None:
        try:
            await asyncio.wait_for(
                self._bus.publish(
                    event.to_message(),
                    exchange=self._exchange,
                    routing_key=key,
                    headers=event.headers(),
                    message_id=event.message_id,
                    correlation_id=get_log_context().get("request_id"),
                ),
                timeout=self._timeout,
            )
        except TimeoutError as e:
            raise PublishFailureError(
                event.volunteer_id,
                self.channel,
                f"publish timed out after {self._timeout}s",
            ) from e
        except Exception as e:
            raise PublishFailureError(event.volunteer_id, self.channel, str(e) or type(e).__name__) from e

        lazy_logger.debug(
            lambda: f"Published {event.event_type} for volunteer {event.volunteer_id} "
            f"to {self.channel} (key={key})"
        )


def get_volunteer_event_publisher(
    bus: Annotated[BusPublisher, Depends(get_bus_publisher)],
) -> VolunteerEventPublisher | None:
    """FastAPI dependency: a publisher when the bus is connected, otherwise None."""
    if not bus.is_configured:
        return None
    return RabbitVolunteerEventPublisher(bus)
