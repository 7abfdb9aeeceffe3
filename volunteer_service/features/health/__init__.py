"""Health check feature: database and message broker status."""

from __future__ import annotations

from .router import router

__all__ = ["router"]
