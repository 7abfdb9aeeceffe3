"""Shared utilities."""

from __future__ import annotations

from volunteer_service.utils.retry import RetryError, retry

__all__ = ["RetryError", "retry"]
