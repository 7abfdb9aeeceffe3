"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    - volunteer_registrations_total{outcome} - created / duplicate / persistence_failure
    - volunteer_status_changes_total{status} - status transitions
    - volunteer_event_publish_total{event_type,outcome} - success / failure / skipped
    - volunteer_event_publish_duration_seconds{event_type} - publish latency
    - errors_total, validation_errors_total, exceptions_unhandled_total - API errors
    - application_info - service version, name and environment labels
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from volunteer_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose the service registry in Prometheus text format."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
