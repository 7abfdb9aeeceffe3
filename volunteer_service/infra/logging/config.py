"""Logging configuration setup.

Root logger gets a single QueueHandler; a QueueListener drains the queue into
the console and (optionally) a rotating JSONL file. Application loggers
propagate up, so modules only ever call ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from volunteer_service.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from volunteer_service.core.settings.logs import LoggingSettings

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def shutdown() -> None:
    """Stop the QueueListener, flushing pending records.

    Registered with atexit on first configuration; safe to call repeatedly.
    """
    global _log_queue, _listener, _queue_handler

    if _listener is not None:
        # QueueListener.stop() enqueues a sentinel and joins the thread,
        # so everything queued before this point is written.
        _listener.stop()
        _listener = None

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None

    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from volunteer_service.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = settings_obj.to_logging_kwargs()
    if configure_kwargs:
        log_config = {**log_config, **configure_kwargs}

    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    service_name: str = "volunteer-service",
    log_level: str = "INFO",
    console_level: str | None = None,
    file_level: str | None = None,
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    **kwargs: Any,
) -> None:
    """Configure logging with dictConfig and the QueueHandler pattern.

    Args:
        service_name: Static ``service`` field stamped on every JSON record.
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        console_level: Console handler level. If None, uses log_level.
        file_level: File handler level. If None, uses log_level.
        file_path: Path to log file. None disables file logging.
        json_logs: Enable JSONL (JSON Lines) structured logging.
        console_enabled: Enable console/stderr logging.
        include_context: Enable ContextInjectingFilter for auto context.
        capture_warnings: Forward Python warnings to logging system.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        **kwargs: Ignored extras (logged at debug level).

    Example:
        from volunteer_service.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    if capture_warnings:
        logging.captureWarnings(True)

    # Reconfiguration replaces the previous listener instead of stacking handlers
    shutdown()

    resolved_path = Path(file_path) if file_path else None
    if resolved_path:
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

    root_filters = ["context"] if include_context else []
    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": _build_filters_config(include_context=include_context),
        "root": {
            "level": log_level.upper(),
            "handlers": [],
            "filters": root_filters,
        },
        "loggers": {
            # aio-pika/aiormq reconnect chatter drowns registration logs
            "aiormq": {"level": "WARNING"},
            "aio_pika": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(logging_config)

    _setup_queue_logging(
        service_name=service_name,
        console_enabled=console_enabled,
        file_path=resolved_path,
        console_level=console_level or log_level,
        file_level=file_level or log_level,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
        json_logs=json_logs,
    )


def _build_filters_config(include_context: bool) -> dict[str, Any]:
    filters: dict[str, Any] = {}
    if include_context:
        filters["context"] = {
            "()": "volunteer_service.infra.logging.context.ContextInjectingFilter",
        }
    return filters


def _build_formatter(service_name: str, json_logs: bool) -> logging.Formatter:
    if json_logs:
        return JSONFormatter(
            fmt_keys={"level": "levelname", "logger": "name", "message": "message"},
            static={"service": service_name},
        )
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _setup_queue_logging(
    service_name: str,
    console_enabled: bool,
    file_path: Path | None,
    console_level: str,
    file_level: str,
    file_max_bytes: int,
    file_backup_count: int,
    json_logs: bool,
) -> None:
    """Create handlers, attach them to a QueueListener, and hook the root logger.

    Args:
        service_name: Static service field for JSON output.
        console_enabled: Enable console handler.
        file_path: File path or None.
        console_level: Console handler level.
        file_level: File handler level.
        file_max_bytes: Max file size.
        file_backup_count: Backup count.
        json_logs: Use JSON format.
    """
    global _log_queue, _listener, _queue_handler

    _log_queue = Queue()
    handlers: list[logging.Handler] = []

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(_build_formatter(service_name, json_logs))
        handlers.append(console_handler)

    if file_path:
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper()))
        # Files are always machine-read
        file_handler.setFormatter(_build_formatter(service_name, json_logs=True))
        handlers.append(file_handler)

    if handlers:
        _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)

    _queue_handler = QueueHandler(_log_queue)
    logging.getLogger().addHandler(_queue_handler)
