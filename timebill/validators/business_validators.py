"""Business rule validators.

This module provides validators for rules that span more than one field,
such as time ranges, invoice due dates and status transitions.
"""

import datetime as dt
from typing import Dict, FrozenSet, Optional

from timebill.calculators.time_utils import day_after, start_of_day, to_naive_utc
from timebill.validators.validation_report import ValidationReport

# Status changes that are refused, keyed by current status.
INVOICE_FORBIDDEN_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "paid": frozenset({"draft"}),
    "cancelled": frozenset({"draft"}),
}


class BusinessRuleValidators:
    """Collection of business rule validation methods."""

    @staticmethod
    def validate_time_range(
        start: Optional[dt.datetime],
        end: Optional[dt.datetime],
        report: ValidationReport,
        field_name: str = "endTime",
        message: str = "End time must be after start time",
    ) -> None:
        """Validate that ``end`` is not before ``start``.

        Open ranges (either side missing) pass. Equal values are allowed.
        """
        if start is None or end is None:
            return
        if to_naive_utc(end) < to_naive_utc(start):
            report.add_error(field_name, message, end)

    @staticmethod
    def validate_date_range(
        start: Optional[dt.date],
        end: Optional[dt.date],
        report: ValidationReport,
        field_name: str = "endDate",
        message: str = "End date must be after start date",
    ) -> None:
        if start is None or end is None:
            return
        if end < start:
            report.add_error(field_name, message, end)

    @staticmethod
    def validate_due_date(
        issue_date: dt.date,
        due_date: dt.date,
        report: ValidationReport,
    ) -> None:
        """Validate that an invoice is due on or after its issue date."""
        if due_date < issue_date:
            report.add_error("dueDate", "Due date must be after issue date", due_date)

    @staticmethod
    def validate_entry_in_period(
        entry_id: int,
        entry_start: dt.datetime,
        period_start: dt.date,
        period_end: dt.date,
        report: ValidationReport,
        field_name: str = "timeEntryIds",
    ) -> None:
        """Validate that a time entry starts inside a timesheet period.

        The period includes both boundary days.

        Example:
            >>> report = ValidationReport()
            >>> BusinessRuleValidators.validate_entry_in_period(
            ...     7, dt.datetime(2024, 3, 8, 9), dt.date(2024, 3, 4), dt.date(2024, 3, 10), report
            ... )
            >>> report.is_valid()
            True
        """
        if not (start_of_day(period_start) <= entry_start < day_after(period_end)):
            report.add_error(
                field_name,
                f"Time entry {entry_id} is outside the timesheet period",
                entry_id,
            )

    @staticmethod
    def validate_status_transition(
        current: str,
        new: str,
        forbidden: Dict[str, FrozenSet[str]],
        report: ValidationReport,
        field_name: str = "status",
    ) -> None:
        """Validate a status change against a table of forbidden moves."""
        if new in forbidden.get(current, frozenset()):
            report.add_error(
                field_name,
                f"Cannot change status from '{current}' to '{new}'",
                new,
            )
