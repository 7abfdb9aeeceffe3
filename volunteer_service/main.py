"""Main entry point for volunteer-service.

Routes to the CLI by default, or straight to the API server when ``--server``
is passed.
"""

from __future__ import annotations

import sys
from typing import NoReturn


def run_fastapi_server() -> NoReturn:
    """Run the FastAPI application server with uvicorn."""
    import uvicorn

    from volunteer_service.core.settings import get_app_settings, get_logging_settings

    settings = get_app_settings()

    uvicorn.run(
        "volunteer_service.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        access_log=settings.debug,
        log_level=get_logging_settings().level.lower(),
    )
    sys.exit(0)


def run_cli() -> NoReturn:
    """Run the CLI interface."""
    from volunteer_service.cli.main import main as cli_main

    cli_main()
    sys.exit(0)


def main() -> NoReturn:
    """Main entry point - routes to CLI or server based on arguments."""
    if "--server" in sys.argv:
        sys.argv.remove("--server")
        run_fastapi_server()
    else:
        run_cli()


if __name__ == "__main__":
    main()
