"""Timebill CLI.

This module provides a command-line interface for running and maintaining
the billing API: database setup, user accounts, demo data, the HTTP server
and invoice housekeeping.
"""

import click

from timebill import __version__
from timebill.cli.commands.database import init_db, seed
from timebill.cli.commands.invoices import list_invoices, mark_overdue
from timebill.cli.commands.serve import serve
from timebill.cli.commands.users import create_user
from timebill.config.logging_config import LoggingConfig, configure_logging


@click.group(help="Timebill CLI - Manage the time tracking and invoicing API")
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Show full stack traces and debug logs")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Timebill CLI main entry point."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    logging_config = LoggingConfig.from_env(default_level="WARNING")
    if debug:
        logging_config.log_level = "DEBUG"
    configure_logging(logging_config)


# Register commands
cli.add_command(init_db)
cli.add_command(create_user)
cli.add_command(seed)
cli.add_command(serve)
cli.add_command(list_invoices)
cli.add_command(mark_overdue)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
