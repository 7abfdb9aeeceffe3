"""Database management commands.

Example:
    volunteer-service db init            # Verify connectivity
    volunteer-service db create-tables   # Create missing tables (development)
    volunteer-service db upgrade         # Apply Alembic migrations
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from volunteer_service.cli.utils import coro, error, info, success
from volunteer_service.core.settings import get_db_settings


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command()
@coro
async def init() -> None:
    """Verify the database connection (with startup retry)."""
    from volunteer_service.infra.database import close_database, init_database

    db_settings = get_db_settings()
    if not db_settings.is_configured:
        error("Database is disabled (DB_ENABLED=false)")
        sys.exit(1)

    info(f"Connecting to: {db_settings.host}:{db_settings.port}/{db_settings.name}")
    try:
        await init_database()
        success("Database connected successfully!")
    except Exception as e:
        error(f"Failed to connect to database: {e}")
        sys.exit(1)
    finally:
        await close_database()


@db.command(name="create-tables")
@coro
async def create_tables_cmd() -> None:
    """Create any missing tables from the ORM models (development only).

    Use ``db upgrade`` for managed schemas.
    """
    from volunteer_service.infra.database import close_database, create_tables

    try:
        await create_tables()
        success("Database tables created successfully")
    except Exception as e:
        error(f"Failed to create tables: {e}")
        sys.exit(1)
    finally:
        await close_database()


@db.command()
@click.argument("revision", default="head")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("alembic.ini"),
    show_default=True,
    help="Path to alembic.ini",
)
def upgrade(revision: str, config_path: Path) -> None:
    """Apply Alembic migrations up to REVISION (default: head)."""
    from alembic import command
    from alembic.config import Config

    if not config_path.exists():
        error(f"Alembic config not found: {config_path}")
        sys.exit(1)

    info(f"Upgrading database to {revision}...")
    try:
        command.upgrade(Config(str(config_path)), revision)
    except Exception as e:
        error(f"Migration failed: {e}")
        sys.exit(1)
    success(f"Database upgraded to {revision}")
