"""Server management commands."""

import click

from volunteer_service.cli.utils import info
from volunteer_service.core.settings import get_app_settings, get_logging_settings


@click.group(name="server")
def server() -> None:
    """Server management commands."""


@server.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind (default: APP_HOST)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind (default: APP_PORT)",
)
@click.option(
    "--reload/--no-reload",
    default=False,
    help="Enable auto-reload on code changes",
)
def run(host: str | None, port: int | None, reload: bool) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    info(f"Server will run at: http://{host}:{port}")
    info(f"Environment: {settings.environment}")

    uvicorn.run(
        "volunteer_service.app.main:app",
        host=host,
        port=port,
        reload=reload,
        access_log=settings.debug,
        log_level=get_logging_settings().level.lower(),
    )
