"""Database layer: engine, sessions and ORM models."""

from timebill.db.database import (
    Base,
    create_db_engine,
    get_db,
    get_session_factory,
    init_database,
    transaction,
)
from timebill.db.models import (
    Client,
    Invoice,
    InvoiceItem,
    Project,
    Task,
    TimeEntry,
    Timesheet,
    User,
    invoice_item_time_entries,
)

__all__ = [
    "Base",
    "create_db_engine",
    "get_db",
    "get_session_factory",
    "init_database",
    "transaction",
    "User",
    "Client",
    "Project",
    "Task",
    "TimeEntry",
    "Timesheet",
    "Invoice",
    "InvoiceItem",
    "invoice_item_time_entries",
]
