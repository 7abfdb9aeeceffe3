"""Health check response schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Overall service health.

    ``unhealthy`` means the database is unreachable. ``degraded`` means
    registrations work but events are not being published.

    Example:
        ```json
        {
            "status": "degraded",
            "timestamp": "2026-01-01T00:00:00Z",
            "service": "volunteer-service",
            "version": "1.0.0",
            "checks": {"database": true, "messaging": false}
        }
        ```
    """

    status: HealthStatus = Field(description="Health status (healthy, degraded, unhealthy)")
    timestamp: datetime = Field(description="Check timestamp")
    service: str = Field(min_length=1, max_length=100, description="Service name")
    version: str = Field(min_length=1, max_length=50, description="Service version")
    checks: dict[str, bool] = Field(
        default_factory=dict, description="Individual dependency health checks"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2026-01-01T00:00:00Z",
                "service": "volunteer-service",
                "version": "1.0.0",
                "checks": {"database": True, "messaging": True},
            }
        },
    )
