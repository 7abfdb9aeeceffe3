"""Health check API endpoint.

A dependency disabled by configuration is left out of ``checks``; an enabled
one reports whether it is currently reachable.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Response, status

from volunteer_service.core.settings import get_app_settings, get_db_settings
from volunteer_service.features.health.schemas import HealthResponse, HealthStatus
from volunteer_service.infra.database import check_database_health
from volunteer_service.infra.messaging import check_broker_health

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable"}},
    summary="Service health",
    description="Database and message broker status. Returns 503 only when the database is down.",
)
async def health_check(response: Response) -> HealthResponse:
    """Comprehensive health check endpoint.

    A broker outage only degrades the service, since event publishing is
    best-effort; a database outage makes it unhealthy.
    """
    app_settings = get_app_settings()
    checks: dict[str, bool] = {}

    if get_db_settings().is_configured:
        checks["database"] = await check_database_health()

    broker_health = await check_broker_health()
    if broker_health["status"] != "unavailable":
        checks["messaging"] = broker_health["is_connected"]

    if not checks.get("database", True):
        health_status = HealthStatus.UNHEALTHY
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif not checks.get("messaging", True):
        health_status = HealthStatus.DEGRADED
    else:
        health_status = HealthStatus.HEALTHY

    return HealthResponse(
        status=health_status,
        timestamp=datetime.now(UTC),
        service=app_settings.service_name,
        version=app_settings.version,
        checks=checks,
    )
