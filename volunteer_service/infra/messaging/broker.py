"""RabbitMQ broker configuration using FastStream.

The service only produces messages, so it holds a bare RabbitBroker (no
subscribers, no FastAPI RabbitRouter) whose lifecycle is driven explicitly by
the application lifespan and the CLI.

Volunteer events go to a durable topic exchange (``RABBIT_EVENTS_EXCHANGE``,
default ``volunteer-events``). The routing key is the volunteer id, so every
event for one volunteer carries the same key; consumers bind with ``#`` or use
a consistent-hash exchange to keep per-volunteer ordering.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from faststream.rabbit import ExchangeType, RabbitBroker, RabbitExchange

from volunteer_service.core.settings import get_rabbit_settings


class ConnectionState(str, Enum):
    """Connection states reported by check_broker_health()."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    FAILED = "failed"


logger = logging.getLogger(__name__)

broker: RabbitBroker | None = None
_not_configured_logged = False


def get_events_exchange(name: str | None = None) -> RabbitExchange:
    """Durable topic exchange for volunteer events (``RABBIT_EVENTS_EXCHANGE`` by default)."""
    return RabbitExchange(
        name or get_rabbit_settings().events_exchange,
        type=ExchangeType.TOPIC,
        durable=True,
    )


def _ensure_broker_initialized() -> RabbitBroker | None:
    """Create the RabbitBroker on first use; None when RabbitMQ is disabled."""
    global broker, _not_configured_logged

    if broker is not None:
        return broker

    rabbit_settings = get_rabbit_settings()
    if not rabbit_settings.is_configured:
        if not _not_configured_logged:
            logger.warning("RabbitMQ not configured - volunteer events will not be published")
            _not_configured_logged = True
        return None

    broker = RabbitBroker(
        rabbit_settings.get_url(),
        graceful_timeout=rabbit_settings.graceful_timeout,
        logger=logger,
    )
    return broker


def get_broker() -> RabbitBroker | None:
    """Get the RabbitMQ broker instance, or None if not configured."""
    return _ensure_broker_initialized()


def is_broker_running() -> bool:
    """Whether the broker exists and has an open connection."""
    return broker is not None and bool(getattr(broker, "running", False))


async def start_broker() -> None:
    """Connect the broker and declare the events exchange.

    The connection is wrapped with a timeout so an unreachable RabbitMQ
    cannot block startup indefinitely.

    Raises:
        ConnectionError: If the connection does not open within
            ``RABBIT_CONNECTION_TIMEOUT`` seconds.
    """
    rabbit_settings = get_rabbit_settings()
    current = _ensure_broker_initialized()

    if current is None:
        logger.warning("RabbitMQ not configured, skipping broker startup")
        return

    if is_broker_running():
        logger.debug("RabbitMQ broker already running")
        return

    logger.info(
        "Starting RabbitMQ broker",
        extra={
            "host": rabbit_settings.host,
            "port": rabbit_settings.port,
            "connection_timeout": rabbit_settings.connection_timeout,
        },
    )

    try:
        await asyncio.wait_for(current.start(), timeout=rabbit_settings.connection_timeout)
    except TimeoutError:
        error_msg = f"RabbitMQ connection timeout after {rabbit_settings.connection_timeout}s"
        logger.error(error_msg, extra={"connection_timeout": rabbit_settings.connection_timeout})
        raise ConnectionError(error_msg) from None

    await current.declare_exchange(get_events_exchange())
    logger.info(
        "RabbitMQ broker started successfully",
        extra={"exchange": rabbit_settings.events_exchange},
    )


async def stop_broker() -> None:
    """Close the broker connection if one was opened."""
    if broker is None:
        logger.debug("RabbitMQ not configured, skipping broker shutdown")
        return

    logger.info("Stopping RabbitMQ broker")
    try:
        await broker.close()
        logger.info("RabbitMQ broker stopped successfully")
    except Exception as e:
        logger.exception("Error stopping RabbitMQ broker", extra={"error": str(e)})


async def check_broker_health() -> dict[str, Any]:
    """Check RabbitMQ broker health status.

    Returns:
        Dictionary containing:
            - status: "healthy", "unhealthy" or "unavailable"
            - state: ConnectionState value
            - is_connected: Boolean connection status
            - reason: Optional reason for unhealthy/unavailable status
    """
    if _ensure_broker_initialized() is None:
        return {
            "status": "unavailable",
            "state": ConnectionState.DISCONNECTED.value,
            "is_connected": False,
            "reason": "rabbitmq_not_enabled",
        }

    if is_broker_running():
        return {
            "status": "healthy",
            "state": ConnectionState.CONNECTED.value,
            "is_connected": True,
        }
    return {
        "status": "unhealthy",
        "state": ConnectionState.DISCONNECTED.value,
        "is_connected": False,
        "reason": "broker_not_running",
    }
