"""RabbitMQ messaging via FastStream."""

from __future__ import annotations

from .broker import (
    ConnectionState,
    check_broker_health,
    get_broker,
    get_events_exchange,
    is_broker_running,
    start_broker,
    stop_broker,
)

__all__ = [
    "ConnectionState",
    "check_broker_health",
    "get_broker",
    "get_events_exchange",
    "is_broker_running",
    "start_broker",
    "stop_broker",
]
