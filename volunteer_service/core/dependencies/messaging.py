"""Message bus publisher dependency.

Features publish through the BusPublisher protocol rather than touching
FastStream directly, which keeps them testable with a plain AsyncMock.

Usage:
    from volunteer_service.core.dependencies.messaging import BusPublisherDep

    @router.post("/things")
    async def create_thing(bus: BusPublisherDep):
        if bus.is_configured:
            await bus.publish({"id": 1}, exchange="things", routing_key="1")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Protocol, runtime_checkable

from fastapi import Depends

if TYPE_CHECKING:
    from faststream.rabbit import RabbitBroker, RabbitExchange


@runtime_checkable
class BusPublisher(Protocol):
    """Protocol for message bus publishers.

    Structural (PEP 544): anything with ``is_configured`` and a matching
    ``publish`` satisfies it without inheritance.
    """

    @property
    def is_configured(self) -> bool:
        """True if the publisher is configured and connected."""
        ...

    async def publish(
        self,
        message: dict[str, Any] | bytes | str,
        *,
        exchange: RabbitExchange | str | None = None,
        routing_key: str = "",
        headers: dict[str, Any] | None = None,
        message_id: str | None = None,
        correlation_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Publish a message to the bus.

        Args:
            message: The message payload (dict, bytes, or string)
            exchange: Target exchange (name or FastStream RabbitExchange)
            routing_key: Message routing key for exchange routing
            headers: Message headers for metadata
            message_id: Broker-level message id (used for consumer dedup)
            correlation_id: Correlation ID for tracing across services
            **kwargs: Additional broker-specific options
        """
        ...


class RabbitBusPublisher:
    """RabbitMQ message bus publisher backed by a FastStream RabbitBroker."""

    def __init__(self, broker: RabbitBroker | None) -> None:
        """Initialize the publisher with a RabbitMQ broker.

        Args:
            broker: FastStream RabbitBroker instance, or None if not configured
        """
        self._broker = broker

    @property
    def is_configured(self) -> bool:
        if self._broker is None:
            return False
        return bool(getattr(self._broker, "running", False))

    async def publish(
        self,
        message: dict[str, Any] | bytes | str,
        *,
        exchange: RabbitExchange | str | None = None,
        routing_key: str = "",
        headers: dict[str, Any] | None = None,
        message_id: str | None = None,
        correlation_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Publish a persistent message to RabbitMQ.

        Raises:
            ConnectionError: If the broker is not connected. Callers that
                treat publishing as optional check ``is_configured`` first.
        """
        if not self.is_configured:
            msg = "RabbitMQ broker is not connected"
            raise ConnectionError(msg)

        await self._broker.publish(
            message,
            exchange=exchange,
            routing_key=routing_key,
            headers=headers,
            message_id=message_id,
            correlation_id=correlation_id,
            persist=True,
            **kwargs,
        )


def get_bus_publisher() -> BusPublisher:
    """Get the message bus publisher.

    If RabbitMQ is not configured the publisher wraps None and reports
    ``is_configured == False``.
    """
    from volunteer_service.infra.messaging.broker import get_broker

    return RabbitBusPublisher(get_broker())


BusPublisherDep = Annotated[BusPublisher, Depends(get_bus_publisher)]
"""Message bus publisher dependency (may or may not be configured)."""


__all__ = [
    "BusPublisher",
    "BusPublisherDep",
    "RabbitBusPublisher",
    "get_bus_publisher",
]
