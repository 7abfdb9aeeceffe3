"""Unit tests for the FastStream RabbitMQ broker module."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from faststream.rabbit import ExchangeType

from volunteer_service.core.settings import clear_all_caches
from volunteer_service.infra.messaging import broker as broker_module


@pytest.fixture(autouse=True)
def _reset_broker(monkeypatch):
    monkeypatch.setattr(broker_module, "broker", None)
    monkeypatch.setattr(broker_module, "_not_configured_logged", False)


@pytest.mark.unit
class TestEventsExchange:
    def test_durable_topic_exchange(self):
        exchange = broker_module.get_events_exchange()

        assert exchange.name == "volunteer-events"
        assert exchange.type == ExchangeType.TOPIC
        assert exchange.durable

    def test_custom_name(self):
        assert broker_module.get_events_exchange("ward-events").name == "ward-events"


@pytest.mark.unit
class TestBrokerLifecycle:
    def test_no_broker_when_disabled(self):
        assert broker_module.get_broker() is None
        assert not broker_module.is_broker_running()

    def test_broker_created_when_enabled(self, monkeypatch):
        monkeypatch.setenv("RABBIT_ENABLED", "true")
        clear_all_caches()

        created = broker_module.get_broker()

        assert created is not None
        assert broker_module.get_broker() is created

    @pytest.mark.asyncio
    async def test_start_declares_events_exchange(self, monkeypatch):
        fake = MagicMock()
        fake.running = False
        fake.start = AsyncMock()
        fake.declare_exchange = AsyncMock()
        monkeypatch.setattr(broker_module, "broker", fake)

        await broker_module.start_broker()

        fake.start.assert_awaited_once()
        declared = fake.declare_exchange.await_args.args[0]
        assert declared.name == "volunteer-events"

    @pytest.mark.asyncio
    async def test_start_is_skipped_when_running(self, monkeypatch):
        fake = MagicMock()
        fake.running = True
        fake.start = AsyncMock()
        monkeypatch.setattr(broker_module, "broker", fake)

        await broker_module.start_broker()

        fake.start.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_timeout_becomes_connection_error(self, monkeypatch):
        async def hang():
            await asyncio.sleep(5)

        monkeypatch.setenv("RABBIT_CONNECTION_TIMEOUT", "1")
        clear_all_caches()
        fake = MagicMock()
        fake.running = False
        fake.start = hang
        monkeypatch.setattr(broker_module, "broker", fake)

        with pytest.raises(ConnectionError, match="timeout"):
            await broker_module.start_broker()

    @pytest.mark.asyncio
    async def test_stop_swallows_close_errors(self, monkeypatch):
        fake = MagicMock()
        fake.close = AsyncMock(side_effect=RuntimeError("channel gone"))
        monkeypatch.setattr(broker_module, "broker", fake)

        await broker_module.stop_broker()

        fake.close.assert_awaited_once()


@pytest.mark.unit
class TestBrokerHealth:
    @pytest.mark.asyncio
    async def test_unavailable_when_disabled(self):
        health = await broker_module.check_broker_health()

        assert health["status"] == "unavailable"
        assert health["reason"] == "rabbitmq_not_enabled"

    @pytest.mark.asyncio
    async def test_connected(self, monkeypatch):
        fake = MagicMock()
        fake.running = True
        monkeypatch.setattr(broker_module, "broker", fake)

        health = await broker_module.check_broker_health()

        assert health == {"status": "healthy", "state": "connected", "is_connected": True}

    @pytest.mark.asyncio
    async def test_not_running(self, monkeypatch):
        fake = MagicMock()
        fake.running = False
        monkeypatch.setattr(broker_module, "broker", fake)

        health = await broker_module.check_broker_health()

        assert health["status"] == "unhealthy"
        assert health["is_connected"] is False
