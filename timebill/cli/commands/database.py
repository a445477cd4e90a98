"""Database setup commands."""

import click

from timebill.cli.error_handlers import ErrorHandler
from timebill.cli.utils.database import cli_session
from timebill.cli.utils.formatters import format_info, format_success, format_warning
from timebill.config import get_config
from timebill.db import create_db_engine, init_database
from timebill.services import seed_demo_data
from timebill.services.seed_service import DEMO_PASSWORD, DEMO_USERS


@click.command(name="init-db")
@click.pass_context
def init_db(ctx: click.Context):
    """Create all database tables that do not exist yet.

    Example:
        timebill init-db
    """
    with ErrorHandler(ctx.obj["debug"]):
        config = get_config()
        click.echo(format_info(f"Initializing database at {config.database_url}"))

        engine = create_db_engine(config.database_url, config.database_echo)
        try:
            init_database(engine)
        finally:
            engine.dispose()

        click.echo(format_success("Database tables are ready"))


@click.command(name="seed")
@click.pass_context
def seed(ctx: click.Context):
    """Load demo users, a project, tasks and time entries.

    Does nothing if the database already has users.
    """
    with ErrorHandler(ctx.obj["debug"]):
        config = get_config()
        with cli_session(config) as db:
            counts = seed_demo_data(db, config)

        if counts is None:
            click.echo(format_warning("Database already contains users, nothing seeded"))
            return

        summary = ", ".join(f"{count} {name.replace('_', ' ')}" for name, count in counts.items())
        click.echo(format_success(f"Seeded {summary}"))
        click.echo(format_info(f"Demo accounts use the password {DEMO_PASSWORD}:"))
        for user in DEMO_USERS:
            click.echo(f"  {user['role']:<7} {user['email']}")
