"""Main CLI entry point for social-graph management commands."""

import click

from social_graph import __version__
from social_graph.cli.commands import database, server
from social_graph.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="social-graph")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Social Graph CLI - management commands for the GraphQL service.

    \b
    Command Groups:
      db         Create tables and seed member types
      server     Development and production servers

    \b
    Quick Start:
      social-graph db init        # Create tables + seed member types
      social-graph server dev     # Run with auto-reload
    """
    ctx.ensure_object(dict)


cli.add_command(database.db)
cli.add_command(server.server)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
