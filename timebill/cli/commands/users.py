"""User management commands."""

from typing import Optional

import click

from timebill.cli.error_handlers import DataValidationError, ErrorHandler
from timebill.cli.utils.database import cli_session
from timebill.cli.utils.formatters import format_success
from timebill.config import get_config
from timebill.services import AuthService


@click.command(name="create-user")
@click.option("--email", required=True, help="Login email address")
@click.option("--first-name", required=True, help="First name")
@click.option("--last-name", required=True, help="Last name")
@click.option(
    "--role",
    type=click.Choice(["admin", "user", "client"]),
    default="user",
    show_default=True,
    help="Account role",
)
@click.option("--company-name", default=None, help="Company name (client accounts)")
@click.password_option(help="Account password (prompted when omitted)")
@click.pass_context
def create_user(
    ctx: click.Context,
    email: str,
    first_name: str,
    last_name: str,
    role: str,
    company_name: Optional[str],
    password: str,
):
    """Create a user account, e.g. the first administrator.

    Example:
        timebill create-user --email admin@example.com --first-name Ada \\
            --last-name Admin --role admin
    """
    with ErrorHandler(ctx.obj["debug"]):
        if role == "client" and not company_name:
            raise DataValidationError(
                "Client accounts need a company name",
                recovery_hint="Pass --company-name",
            )

        config = get_config()
        with cli_session(config) as db:
            user = AuthService(db, config).create_user(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role=role,
                company_name=company_name,
            )
            click.echo(format_success(f"Created {user.role} {user.email} (id {user.id})"))
