"""Main CLI entry point for volunteer-service management commands."""

import click

from volunteer_service.cli.commands import db, server, volunteers
from volunteer_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="1.0.0", prog_name="volunteer-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Volunteer Service CLI - registration and operations commands.

    \b
    Command Groups:
      volunteers  Register, list and administer volunteers
      db          Database connectivity and migrations
      server      Run the API server

    \b
    Quick Start:
      volunteer-service db upgrade
      volunteer-service volunteers register --name Jane --phone 0711000111 --ward "Ward 5"
      volunteer-service volunteers stats
      volunteer-service server run
    """
    ctx.ensure_object(dict)


cli.add_command(volunteers.volunteers)
cli.add_command(db.db)
cli.add_command(server.server)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
