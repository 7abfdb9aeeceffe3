"""CLI command modules."""

from volunteer_service.cli.commands import db, server, volunteers

__all__ = [
    "db",
    "server",
    "volunteers",
]
