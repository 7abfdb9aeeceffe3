"""Context management for structured logging.

Request-scoped fields (request_id, volunteer_id, ...) live in a ContextVar and
are copied onto every LogRecord by ContextInjectingFilter, so call sites do
not need to thread them through ``extra=``. Each asyncio task sees its own copy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(request_id="abc-123")
        logger.info("Registering volunteer")  # record carries request_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Drop every field from the current logging context."""
    _log_context.set({})


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Temporarily extend the logging context.

    The previous context is restored on exit, including on error.

    Example:
        ```python
        with log_context(volunteer_id=42):
            await publisher.publish(event, key="42")
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    token = _log_context.set(current)
    try:
        yield
    finally:
        _log_context.reset(token)


class ContextInjectingFilter(logging.Filter):
    """Logging filter that copies the context fields onto each LogRecord.

    Installed on the root logger by configure_logging(); fields already set
    via ``extra=`` take precedence.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
