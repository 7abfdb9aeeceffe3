"""Modular Pydantic Settings v2 configuration.

One settings class per domain (app/db/rabbit/logging), each frozen and read
from environment variables or a local .env file, exposed through LRU-cached
loaders:

    from volunteer_service.core.settings import get_rabbit_settings

    rabbit = get_rabbit_settings()
    print(rabbit.events_exchange)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_rabbit_settings,
)
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .rabbit import RabbitSettings

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "PostgresSettings",
    "RabbitSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_rabbit_settings",
]
