"""Helper functions for tracking business and operational metrics."""

from __future__ import annotations

import logging
from typing import Any

from volunteer_service.infra.metrics import prometheus

logger = logging.getLogger(__name__)


# ============================================================================
# Error Tracking
# ============================================================================


def track_error(
    error_type: str,
    endpoint: str,
    status_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Track an error occurrence.

    Args:
        error_type: Type of error (e.g., 'duplicate-registration', 'volunteer-not-found')
        endpoint: API endpoint where error occurred
        status_code: HTTP status code
        extra: Additional context for logging

    Example:
        track_error("duplicate-registration", "/api/v1/volunteers", 409)
    """
    prometheus.errors_total.labels(
        error_type=error_type,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    logger.debug(
        "Tracked error: %s",
        error_type,
        extra={"endpoint": endpoint, "status_code": status_code, **(extra or {})},
    )


def track_validation_error(endpoint: str, field: str) -> None:
    """Track a validation error for a specific field."""
    prometheus.validation_errors_total.labels(endpoint=endpoint, field=field).inc()


def track_unhandled_exception(exception_type: str, endpoint: str) -> None:
    """Track an unhandled exception."""
    prometheus.exceptions_unhandled_total.labels(
        exception_type=exception_type,
        endpoint=endpoint,
    ).inc()


# ============================================================================
# Volunteer Tracking
# ============================================================================


def track_registration(outcome: str) -> None:
    """Count a registration attempt.

    Args:
        outcome: One of ``created``, ``duplicate`` or ``persistence_failure``.
    """
    prometheus.volunteer_registrations_total.labels(outcome=outcome).inc()


def track_status_change(status: str) -> None:
    """Count a volunteer moving to ``status``."""
    prometheus.volunteer_status_changes_total.labels(status=status).inc()


def track_event_publish(event_type: str, outcome: str, duration: float | None = None) -> None:
    """Record a publish attempt and, when it was attempted, its duration.

    Args:
        event_type: Event type tag, e.g. ``VOLUNTEER_REGISTERED``.
        outcome: One of ``success``, ``failure`` or ``skipped``.
        duration: Seconds spent publishing; None when no publish was attempted.
    """
    prometheus.volunteer_event_publish_total.labels(event_type=event_type, outcome=outcome).inc()
    if duration is not None:
        prometheus.volunteer_event_publish_duration_seconds.labels(
            event_type=event_type
        ).observe(duration)
