"""ORM models for all tables."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from timebill.calculators.time_utils import utc_now
from timebill.db.database import Base

invoice_item_time_entries = Table(
    "invoice_item_time_entries",
    Base.metadata,
    Column(
        "invoice_item_id",
        Integer,
        ForeignKey("invoice_items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    # A time entry can be billed on one invoice item only
    Column(
        "time_entry_id",
        Integer,
        ForeignKey("time_entries.id"),
        primary_key=True,
        unique=True,
    ),
)


class TimestampMixin:
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False)  # "admin", "user", "client"

    client_profile = relationship(
        "Client", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    projects = relationship("Project", back_populates="client")

    @property
    def company_name(self):
        return self.client_profile.company_name if self.client_profile else None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Client(Base):
    __tablename__ = "clients"

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    company_name = Column(String(255))
    billing_address = Column(Text)
    tax_id = Column(String(100))
    payment_terms = Column(String(100))

    user = relationship("User", back_populates="client_profile")


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(50), nullable=False, default="active")
    hourly_rate = Column(Numeric(10, 2), nullable=False)

    client = relationship("User", back_populates="projects")
    tasks = relationship(
        "Task", back_populates="project", cascade="all, delete-orphan"
    )


class Task(TimestampMixin, Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), index=True, nullable=False
    )
    name = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(50), nullable=False, default="pending")
    due_date = Column(Date)

    project = relationship("Project", back_populates="tasks")
    time_entries = relationship(
        "TimeEntry",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TimeEntry.start_time.desc()",
    )


class Timesheet(TimestampMixin, Base):
    __tablename__ = "timesheets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(50), nullable=False, default="draft")
    notes = Column(Text)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)

    user = relationship("User", foreign_keys=[user_id])
    approver = relationship("User", foreign_keys=[approved_by])
    time_entries = relationship(
        "TimeEntry", back_populates="timesheet", order_by="TimeEntry.start_time"
    )

    @property
    def entry_count(self) -> int:
        return len(self.time_entries)

    @property
    def total_minutes(self) -> int:
        return sum(entry.duration_minutes or 0 for entry in self.time_entries)


class TimeEntry(TimestampMixin, Base):
    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    task_id = Column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), index=True, nullable=False
    )
    timesheet_id = Column(
        Integer, ForeignKey("timesheets.id", ondelete="SET NULL"), index=True, nullable=True
    )
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime)
    duration_minutes = Column(Integer)
    description = Column(Text)
    is_billable = Column(Boolean, nullable=False, default=True)
    # draft, submitted, approved, rejected, billed
    status = Column(String(50), nullable=False, default="draft")

    user = relationship("User")
    task = relationship("Task", back_populates="time_entries")
    timesheet = relationship("Timesheet", back_populates="time_entries")
    invoice_items = relationship(
        "InvoiceItem", secondary=invoice_item_time_entries, viewonly=True
    )


class Invoice(TimestampMixin, Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    invoice_number = Column(String(100), unique=True, nullable=False)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    # draft, sent, paid, overdue, cancelled
    status = Column(String(50), nullable=False, default="draft")
    subtotal = Column(Numeric(10, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text)
    paid_at = Column(DateTime)

    client = relationship("User")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )

    @property
    def item_count(self) -> int:
        return len(self.items)


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(
        Integer, ForeignKey("invoices.id", ondelete="CASCADE"), index=True, nullable=False
    )
    description = Column(Text, nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)  # hours
    rate = Column(Numeric(10, 2), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    invoice = relationship("Invoice", back_populates="items")
    time_entries = relationship(
        "TimeEntry", secondary=invoice_item_time_entries, order_by="TimeEntry.id"
    )

    @property
    def time_entry_ids(self):
        return [entry.id for entry in self.time_entries]
