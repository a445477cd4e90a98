"""Invoice reporting and maintenance commands."""

import datetime as dt
from typing import Optional

import click

from timebill.cli.error_handlers import ErrorHandler
from timebill.cli.utils.database import cli_session
from timebill.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
)
from timebill.config import get_config
from timebill.services import CurrentUser, InvoiceService

# Identity used for admin-only service calls made from the command line
CLI_OPERATOR = CurrentUser(id=0, email="cli@localhost", role="admin", first_name="CLI")

INVOICE_STATUSES = ["draft", "sent", "paid", "overdue", "cancelled"]


@click.command(name="list-invoices")
@click.option("--status", type=click.Choice(INVOICE_STATUSES), default=None)
@click.option("--client-id", type=click.IntRange(min=1), default=None)
@click.option(
    "--limit", type=click.IntRange(1, 100), default=20, show_default=True
)
@click.pass_context
def list_invoices(
    ctx: click.Context, status: Optional[str], client_id: Optional[int], limit: int
):
    """List the most recent invoices as a table.

    Example:
        timebill list-invoices --status sent
    """
    with ErrorHandler(ctx.obj["debug"]):
        config = get_config()
        with cli_session(config) as db:
            invoices, total = InvoiceService(db, config).list_invoices(
                CLI_OPERATOR, client_id=client_id, status=status, limit=limit
            )

            if not invoices:
                click.echo(format_info("No invoices found."))
                return

            headers = ["Number", "Client", "Issued", "Due", "Status", "Total"]
            rows = [
                [
                    invoice.invoice_number,
                    invoice.client.company_name or invoice.client.full_name,
                    invoice.issue_date.isoformat(),
                    invoice.due_date.isoformat(),
                    invoice.status,
                    format_money(invoice.total_amount),
                ]
                for invoice in invoices
            ]

        click.echo()
        click.echo(format_table(headers, rows))
        click.echo()
        click.echo(format_success(f"Showing {len(invoices)} of {total} invoice(s)"))


@click.command(name="mark-overdue")
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date (YYYY-MM-DD, default: today)",
)
@click.pass_context
def mark_overdue(ctx: click.Context, as_of: Optional[dt.datetime]):
    """Mark sent invoices past their due date as overdue."""
    with ErrorHandler(ctx.obj["debug"]):
        config = get_config()
        with cli_session(config) as db:
            invoices = InvoiceService(db, config).mark_overdue(
                as_of.date() if as_of else None
            )
            numbers = [invoice.invoice_number for invoice in invoices]

        if not numbers:
            click.echo(format_info("No sent invoices are past due."))
            return
        for number in numbers:
            click.echo(f"  {number}")
        click.echo(format_success(f"Marked {len(numbers)} invoice(s) overdue"))
