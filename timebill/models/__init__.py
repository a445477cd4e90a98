"""Request and response models for the REST API."""

from timebill.models.base import (
    BaseDataModel,
    MessageResponse,
    Money,
    Page,
    Pagination,
    ResponseModel,
)
from timebill.models.invoice import (
    InvoiceClientOut,
    InvoiceCreate,
    InvoiceDetailOut,
    InvoiceItemInput,
    InvoiceItemOut,
    InvoiceOut,
    InvoiceStatus,
    InvoiceStatusUpdate,
    SendInvoiceRequest,
)
from timebill.models.task import TaskCreate, TaskDetailOut, TaskOut, TaskStatus, TaskUpdate
from timebill.models.time_entry import (
    ApprovalEntryOut,
    BillableSummaryOut,
    TimeEntryCreate,
    TimeEntryOut,
    TimeEntryStatus,
    TimeEntryUpdate,
    UnbilledEntryOut,
)
from timebill.models.timesheet import (
    TimeEntryIdsRequest,
    TimesheetCreate,
    TimesheetDetailOut,
    TimesheetNotes,
    TimesheetOut,
    TimesheetReject,
    TimesheetStatus,
)
from timebill.models.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserOut,
    UserRole,
)

__all__ = [
    # Base
    "BaseDataModel",
    "ResponseModel",
    "Money",
    "Page",
    "Pagination",
    "MessageResponse",
    # Users
    "UserRole",
    "RegisterRequest",
    "LoginRequest",
    "UserOut",
    "AuthResponse",
    # Tasks
    "TaskStatus",
    "TaskCreate",
    "TaskUpdate",
    "TaskOut",
    "TaskDetailOut",
    # Time entries
    "TimeEntryStatus",
    "TimeEntryCreate",
    "TimeEntryUpdate",
    "TimeEntryOut",
    "ApprovalEntryOut",
    "UnbilledEntryOut",
    "BillableSummaryOut",
    # Timesheets
    "TimesheetStatus",
    "TimesheetCreate",
    "TimesheetNotes",
    "TimesheetReject",
    "TimeEntryIdsRequest",
    "TimesheetOut",
    "TimesheetDetailOut",
    # Invoices
    "InvoiceStatus",
    "InvoiceItemInput",
    "InvoiceCreate",
    "InvoiceStatusUpdate",
    "SendInvoiceRequest",
    "InvoiceItemOut",
    "InvoiceClientOut",
    "InvoiceOut",
    "InvoiceDetailOut",
]
