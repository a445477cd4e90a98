"""Business services behind the API routes and CLI commands."""

from timebill.services.auth_service import AuthService
from timebill.services.email_service import EmailService
from timebill.services.invoice_service import InvoiceService
from timebill.services.pdf_renderer import render_invoice_pdf
from timebill.services.security import (
    CurrentUser,
    TokenSigner,
    hash_password,
    verify_password,
)
from timebill.services.seed_service import seed_demo_data
from timebill.services.task_service import TaskService
from timebill.services.time_entry_service import TimeEntryService
from timebill.services.timesheet_service import TimesheetService

__all__ = [
    "AuthService",
    "CurrentUser",
    "EmailService",
    "InvoiceService",
    "TaskService",
    "TimeEntryService",
    "TimesheetService",
    "TokenSigner",
    "hash_password",
    "render_invoice_pdf",
    "seed_demo_data",
    "verify_password",
]
