"""Metrics infrastructure for Prometheus monitoring."""

from __future__ import annotations

from prometheus_client import generate_latest

from volunteer_service.infra.metrics import prometheus, tracking
from volunteer_service.infra.metrics.prometheus import REGISTRY

__all__ = [
    "REGISTRY",
    "generate_latest",
    "prometheus",
    "tracking",
]
