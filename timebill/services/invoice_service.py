"""Invoice generation, lookup and status management.

Creating an invoice is a single transaction: allocate the next invoice
number, insert the invoice with its items and time entry links, and mark
every linked time entry ``billed``. If any step fails nothing is stored.
"""

import datetime as dt
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timebill.calculators import (
    calculate_invoice_totals,
    format_invoice_number,
    next_invoice_sequence,
    utc_now,
    utc_today,
)
from timebill.calculators.invoice_number import invoice_number_period
from timebill.config import TimebillConfig
from timebill.db import Invoice, InvoiceItem, Project, Task, TimeEntry, User, transaction
from timebill.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    TimebillError,
    ValidationFailedError,
    raise_for_report,
)
from timebill.models.invoice import InvoiceCreate, InvoiceStatusUpdate
from timebill.models.time_entry import UnbilledEntryOut
from timebill.services.email_service import EmailService
from timebill.services.pdf_renderer import render_invoice_pdf
from timebill.services.security import CurrentUser
from timebill.utils.logging_utils import log_function_call
from timebill.validators import PayloadValidator, ValidationReport

logger = logging.getLogger(__name__)


def _require_admin(user: CurrentUser, action: str) -> None:
    if not user.is_admin:
        raise PermissionDeniedError(f"Only administrators can {action}")


class InvoiceService:
    """Invoice operations for admins and the invoiced clients."""

    def __init__(self, db: Session, config: TimebillConfig):
        self.db = db
        self.config = config
        self.validator = PayloadValidator()

    def _get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.db.get(Invoice, invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        return invoice

    def _get_visible_invoice(self, invoice_id: int, user: CurrentUser, action: str) -> Invoice:
        invoice = self._get_invoice(invoice_id)
        if not user.is_admin and invoice.client_id != user.id:
            raise PermissionDeniedError(f"Not authorized to {action} this invoice")
        return invoice

    def _get_client(self, client_id: int) -> User:
        client = self.db.get(User, client_id)
        if client is None or client.role != "client":
            raise NotFoundError("Client not found")
        return client

    def _billable_entries(
        self, payload: InvoiceCreate, client_id: int
    ) -> Dict[int, TimeEntry]:
        """Load and check every time entry referenced by the invoice items.

        Raises:
            ValidationFailedError: Listing each entry that cannot be billed
        """
        report = ValidationReport()
        seen = set()
        for index, item in enumerate(payload.items):
            for entry_id in item.time_entry_ids:
                if entry_id in seen:
                    report.add_error(
                        f"items[{index}].timeEntryIds",
                        f"Time entry {entry_id} is listed more than once",
                        entry_id,
                    )
                seen.add(entry_id)
        if not seen:
            return {}

        rows = self.db.execute(
            select(TimeEntry, Project.client_id)
            .join(Task, TimeEntry.task_id == Task.id)
            .join(Project, Task.project_id == Project.id)
            .where(TimeEntry.id.in_(seen))
        ).all()
        entries = {entry.id: entry for entry, _ in rows}
        owners = {entry.id: owner for entry, owner in rows}

        for index, item in enumerate(payload.items):
            field = f"items[{index}].timeEntryIds"
            for entry_id in item.time_entry_ids:
                entry = entries.get(entry_id)
                if entry is None:
                    problem = "not found"
                elif owners[entry_id] != client_id:
                    problem = "does not belong to this client"
                elif entry.invoice_items:
                    problem = "has already been invoiced"
                elif entry.status != "approved":
                    problem = f"is not approved (status '{entry.status}')"
                elif not entry.is_billable:
                    problem = "is not billable"
                else:
                    continue
                report.add_error(field, f"Time entry {entry_id} {problem}", entry_id)

        if report.has_errors():
            raise ValidationFailedError(report, "Some time entries cannot be invoiced")
        return entries

    def _next_invoice_number(self, on: dt.date) -> str:
        prefix = self.config.invoice_prefix
        existing = self.db.scalars(
            select(Invoice.invoice_number).where(
                Invoice.invoice_number.like(f"{invoice_number_period(prefix, on)}%")
            )
        )
        return format_invoice_number(prefix, on, next_invoice_sequence(existing, prefix, on))

    @log_function_call(level="INFO", expected=(TimebillError,))
    def create_invoice(self, payload: InvoiceCreate, admin: CurrentUser) -> Invoice:
        """Create an invoice from line items and bill the linked time entries.

        Raises:
            PermissionDeniedError: If the caller is not an admin
            NotFoundError: If the client does not exist
            ValidationFailedError: If the payload or a time entry is invalid
            ConflictError: If the allocated invoice number was taken concurrently
        """
        _require_admin(admin, "create invoices")
        raise_for_report(self.validator.validate_invoice_create(payload))
        due_date = payload.due_date or payload.issue_date + dt.timedelta(
            days=self.config.default_payment_days
        )

        client = self._get_client(payload.client_id)
        entries = self._billable_entries(payload, client.id)

        totals = calculate_invoice_totals(
            [(item.quantity, item.unit_price) for item in payload.items],
            payload.tax_rate,
        )
        invoice = Invoice(
            client_id=client.id,
            invoice_number=self._next_invoice_number(utc_today()),
            issue_date=payload.issue_date,
            due_date=due_date,
            status="draft",
            subtotal=totals.subtotal,
            tax_rate=totals.tax_rate,
            tax_amount=totals.tax_amount,
            total_amount=totals.total,
            notes=payload.notes,
        )
        for item, amount in zip(payload.items, totals.line_amounts):
            linked = [entries[entry_id] for entry_id in item.time_entry_ids]
            invoice.items.append(
                InvoiceItem(
                    description=item.description,
                    quantity=item.quantity,
                    rate=item.unit_price,
                    amount=amount,
                    time_entries=linked,
                )
            )
            for entry in linked:
                entry.status = "billed"

        try:
            with transaction(self.db):
                self.db.add(invoice)
        except IntegrityError as e:
            logger.warning(f"Invoice insert conflicted: {e.orig}")
            raise ConflictError(
                "Invoice could not be created because of a conflicting update, please retry"
            )

        logger.info(
            f"Created invoice {invoice.invoice_number} for client {client.id}: "
            f"total {totals.total}, {len(entries)} time entries billed"
        )
        return invoice

    def get_invoice(self, invoice_id: int, user: CurrentUser) -> Invoice:
        return self._get_visible_invoice(invoice_id, user, "view")

    def list_invoices(
        self,
        user: CurrentUser,
        client_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Invoice], int]:
        """Admins see all invoices (optionally one client's); others their own.

        The date filters apply to the issue date, both ends included.
        """
        raise_for_report(self.validator.validate_date_filter(start_date, end_date))

        owner_id = client_id if user.is_admin else user.id
        query = select(Invoice)
        if owner_id is not None:
            query = query.where(Invoice.client_id == owner_id)
        if status is not None:
            query = query.where(Invoice.status == status)
        if start_date is not None:
            query = query.where(Invoice.issue_date >= start_date)
        if end_date is not None:
            query = query.where(Invoice.issue_date <= end_date)

        total = self.db.scalar(select(func.count()).select_from(query.subquery()))
        invoices = self.db.scalars(
            query.order_by(Invoice.issue_date.desc(), Invoice.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(invoices), total or 0

    @log_function_call(level="INFO", expected=(TimebillError,))
    def update_status(
        self, invoice_id: int, payload: InvoiceStatusUpdate, admin: CurrentUser
    ) -> Invoice:
        _require_admin(admin, "update invoice status")
        invoice = self._get_invoice(invoice_id)
        raise_for_report(
            self.validator.validate_invoice_status_change(
                invoice.status, payload.status, payload.notes
            )
        )

        previous = invoice.status
        with transaction(self.db):
            invoice.status = payload.status
            if payload.notes is not None:
                invoice.notes = payload.notes
            if payload.status == "paid":
                invoice.paid_at = utc_now()

        logger.info(f"Invoice {invoice.invoice_number}: {previous} -> {invoice.status}")
        return invoice

    def unbilled_entries(self, client_id: int, admin: CurrentUser) -> List[UnbilledEntryOut]:
        """Approved, billable, never invoiced entries on the client's projects."""
        _require_admin(admin, "view unbilled time entries")

        rows = self.db.execute(
            select(
                TimeEntry,
                Task.name,
                Project.name,
                Project.hourly_rate,
                User.first_name,
                User.last_name,
            )
            .join(Task, TimeEntry.task_id == Task.id)
            .join(Project, Task.project_id == Project.id)
            .join(User, TimeEntry.user_id == User.id)
            .where(
                Project.client_id == client_id,
                TimeEntry.status == "approved",
                TimeEntry.is_billable.is_(True),
                ~TimeEntry.invoice_items.any(),
            )
            .order_by(TimeEntry.start_time.desc())
        )
        return [
            UnbilledEntryOut(
                id=entry.id,
                start_time=entry.start_time,
                end_time=entry.end_time,
                duration_minutes=entry.duration_minutes,
                description=entry.description,
                is_billable=entry.is_billable,
                status=entry.status,
                task_name=task_name,
                project_name=project_name,
                hourly_rate=hourly_rate,
                first_name=first_name,
                last_name=last_name,
            )
            for entry, task_name, project_name, hourly_rate, first_name, last_name in rows
        ]

    def invoice_pdf(self, invoice_id: int, user: CurrentUser) -> Tuple[Invoice, bytes]:
        invoice = self._get_visible_invoice(invoice_id, user, "download")
        return invoice, render_invoice_pdf(invoice, self.config)

    @log_function_call(level="INFO", expected=(TimebillError,))
    def send_invoice(
        self, invoice_id: int, recipient_email: str, admin: CurrentUser
    ) -> Invoice:
        """Email the invoice PDF; a draft invoice becomes ``sent``."""
        _require_admin(admin, "send invoice emails")
        raise_for_report(self.validator.validate_recipient_email(recipient_email))

        invoice = self._get_invoice(invoice_id)
        pdf = render_invoice_pdf(invoice, self.config)
        if not EmailService(self.config).send_invoice(
            recipient_email, invoice.invoice_number, pdf
        ):
            raise TimebillError("Failed to send invoice email")

        if invoice.status == "draft":
            with transaction(self.db):
                invoice.status = "sent"
        return invoice

    @log_function_call(level="INFO")
    def mark_overdue(self, today: Optional[dt.date] = None) -> List[Invoice]:
        """Move sent invoices whose due date has passed to ``overdue``."""
        today = today or utc_today()
        invoices = list(
            self.db.scalars(
                select(Invoice).where(Invoice.status == "sent", Invoice.due_date < today)
            )
        )
        with transaction(self.db):
            for invoice in invoices:
                invoice.status = "overdue"

        logger.info(f"Marked {len(invoices)} invoices overdue")
        return invoices
