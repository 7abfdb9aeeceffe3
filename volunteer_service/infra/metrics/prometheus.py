"""Prometheus metrics for the volunteer service.

All collectors live on a dedicated registry so tests and the /metrics
endpoint see only what this service defines.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

REGISTRY = CollectorRegistry()

# Event publishes are bounded by RABBIT_PUBLISH_TIMEOUT (0.3s default)
PUBLISH_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.2,
    0.3,
    0.5,
    1.0,
)

# ============================================================================
# Application
# ============================================================================

application_info = Gauge(
    "application_info",
    "Application build and environment information",
    ["version", "service", "environment"],
    registry=REGISTRY,
)

# ============================================================================
# Volunteer registration
# ============================================================================

volunteer_registrations_total = Counter(
    "volunteer_registrations_total",
    "Volunteer registration attempts by outcome",
    ["outcome"],  # created, duplicate, persistence_failure
    registry=REGISTRY,
)

volunteer_status_changes_total = Counter(
    "volunteer_status_changes_total",
    "Volunteer status transitions by target status",
    ["status"],
    registry=REGISTRY,
)

# ============================================================================
# Event publishing
# ============================================================================

volunteer_event_publish_total = Counter(
    "volunteer_event_publish_total",
    "Volunteer event publish attempts by outcome",
    ["event_type", "outcome"],  # outcome: success, failure, skipped
    registry=REGISTRY,
)

volunteer_event_publish_duration_seconds = Histogram(
    "volunteer_event_publish_duration_seconds",
    "Time spent publishing a volunteer event, including failed attempts",
    ["event_type"],
    buckets=PUBLISH_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# ============================================================================
# Errors
# ============================================================================

errors_total = Counter(
    "errors_total",
    "Total number of errors by type and endpoint",
    ["error_type", "endpoint", "status_code"],
    registry=REGISTRY,
)

exceptions_unhandled_total = Counter(
    "exceptions_unhandled_total",
    "Total number of unhandled exceptions",
    ["exception_type", "endpoint"],
    registry=REGISTRY,
)

validation_errors_total = Counter(
    "validation_errors_total",
    "Total number of validation errors",
    ["endpoint", "field"],
    registry=REGISTRY,
)
