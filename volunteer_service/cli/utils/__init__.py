"""CLI utilities for running async operations and formatting output."""

from volunteer_service.cli.utils.async_runner import coro
from volunteer_service.cli.utils.formatters import (
    error,
    header,
    info,
    section,
    success,
    volunteer_row,
    warning,
)

__all__ = [
    "coro",
    "error",
    "header",
    "info",
    "section",
    "success",
    "volunteer_row",
    "warning",
]
