"""Middleware configuration for FastAPI application."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import MutableHeaders

from volunteer_service.core.settings import get_app_settings
from volunteer_service.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RequestIDMiddleware:
    """Add a request ID to every HTTP request for log correlation.

    The ID is taken from the ``X-Request-ID`` header or generated as a UUID4,
    stored in ``request.state.request_id`` and in the logging context, and
    echoed back in the response headers. Published events reuse it as their
    correlation id.

    Pure ASGI so the logging context is set in the same task that runs the
    route handler.
    """

    header_name = "x-request-id"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._extract(scope) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        set_log_context(request_id=request_id)

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.append(self.header_name, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            clear_log_context()

    def _extract(self, scope: Scope) -> str | None:
        for name, value in scope.get("headers", []):
            if name == self.header_name.encode("latin-1") and value:
                return value.decode("latin-1")
        return None


def configure_middleware(app: FastAPI) -> None:
    """Configure middleware for the application.

    Args:
        app: FastAPI application instance.
    """
    app_settings = get_app_settings()

    cors_origins = app_settings.cors_origins or ["*"]
    logger.info("Configuring CORS", extra={"origins": cors_origins})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.add_middleware(RequestIDMiddleware)
