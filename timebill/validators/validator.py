"""Main validator orchestrator for API payloads.

This module provides the PayloadValidator class that coordinates field
validation and business rule validation for every write operation of the
API. Pydantic has already checked types, enums and numeric bounds by the
time a payload gets here; the rules below cover text lengths, dates
relative to "now" and rules that span several fields.
"""

import datetime as dt
from typing import Optional

from timebill.models.invoice import InvoiceCreate
from timebill.models.task import TaskCreate, TaskUpdate
from timebill.models.time_entry import TimeEntryCreate, TimeEntryUpdate
from timebill.models.timesheet import TimeEntryIdsRequest, TimesheetCreate
from timebill.models.user import LoginRequest, RegisterRequest
from timebill.validators.business_validators import (
    INVOICE_FORBIDDEN_TRANSITIONS,
    BusinessRuleValidators,
)
from timebill.validators.field_validators import FieldValidators
from timebill.validators.validation_report import ValidationReport

MAX_NOTES_LENGTH = 1000
MAX_DESCRIPTION_LENGTH = 1000
MAX_ITEM_DESCRIPTION_LENGTH = 500

NOTES_TOO_LONG = "Notes cannot exceed 1000 characters"
DESCRIPTION_TOO_LONG = "Description cannot exceed 1000 characters"
TASK_NAME_LENGTH = "Task name must be between 3 and 255 characters"


class PayloadValidator:
    """Validator for request payloads.

    Each ``validate_*`` method returns a ValidationReport; callers raise
    ValidationFailedError when the report has errors.

    Example:
        >>> validator = PayloadValidator()
        >>> report = validator.validate_login(LoginRequest(email="nope", password="x"))
        >>> report.is_valid()
        False
    """

    def validate_registration(self, payload: RegisterRequest) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_email(payload.email, "email", report)
        FieldValidators.validate_password(payload.password, "password", report)
        FieldValidators.validate_non_empty_string(
            payload.first_name, "firstName", report, "First name is required"
        )
        FieldValidators.validate_non_empty_string(
            payload.last_name, "lastName", report, "Last name is required"
        )
        if payload.role == "client":
            FieldValidators.validate_non_empty_string(
                payload.company_name,
                "companyName",
                report,
                "Company name is required for client accounts",
            )
        return report

    def validate_login(self, payload: LoginRequest) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_email(payload.email, "email", report)
        FieldValidators.validate_non_empty_string(
            payload.password, "password", report, "Password is required"
        )
        return report

    def validate_task_create(self, payload: TaskCreate) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_non_empty_string(
            payload.name, "name", report, TASK_NAME_LENGTH
        )
        if payload.name:
            FieldValidators.validate_length(
                payload.name, "name", report, TASK_NAME_LENGTH, 3, 255
            )
        FieldValidators.validate_length(
            payload.description,
            "description",
            report,
            DESCRIPTION_TOO_LONG,
            max_length=MAX_DESCRIPTION_LENGTH,
        )
        FieldValidators.validate_not_in_past(
            payload.due_date, "dueDate", report, "Due date cannot be in the past"
        )
        return report

    def validate_task_update(self, payload: TaskUpdate) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_length(
            payload.name, "name", report, TASK_NAME_LENGTH, 3, 255
        )
        FieldValidators.validate_length(
            payload.description,
            "description",
            report,
            DESCRIPTION_TOO_LONG,
            max_length=MAX_DESCRIPTION_LENGTH,
        )
        return report

    def validate_time_entry_create(self, payload: TimeEntryCreate) -> ValidationReport:
        report = ValidationReport()
        self._validate_entry_times(payload.start_time, payload.end_time, report)
        FieldValidators.validate_length(
            payload.description,
            "description",
            report,
            DESCRIPTION_TOO_LONG,
            max_length=MAX_DESCRIPTION_LENGTH,
        )
        return report

    def validate_time_entry_update(
        self,
        payload: TimeEntryUpdate,
        current_start: dt.datetime,
        current_end: Optional[dt.datetime],
    ) -> ValidationReport:
        """Validate a partial time entry update.

        The end-after-start rule is checked against the values the entry
        will have after the update, so changing only one side still
        validates the pair.
        """
        report = ValidationReport()
        FieldValidators.validate_not_in_future(
            payload.start_time, "startTime", report, "Start time cannot be in the future"
        )
        FieldValidators.validate_not_in_future(
            payload.end_time, "endTime", report, "End time cannot be in the future"
        )
        BusinessRuleValidators.validate_time_range(
            payload.start_time or current_start,
            payload.end_time or current_end,
            report,
        )
        FieldValidators.validate_length(
            payload.description,
            "description",
            report,
            DESCRIPTION_TOO_LONG,
            max_length=MAX_DESCRIPTION_LENGTH,
        )
        return report

    def validate_timesheet_create(self, payload: TimesheetCreate) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_not_in_future(
            payload.start_date, "startDate", report, "Start date cannot be in the future"
        )
        BusinessRuleValidators.validate_date_range(
            payload.start_date, payload.end_date, report
        )
        FieldValidators.validate_length(
            payload.notes, "notes", report, NOTES_TOO_LONG, max_length=MAX_NOTES_LENGTH
        )
        FieldValidators.validate_id_list(payload.time_entry_ids, "timeEntryIds", report)
        return report

    def validate_time_entry_ids(self, payload: TimeEntryIdsRequest) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_id_list(
            payload.time_entry_ids, "timeEntryIds", report, required=True
        )
        return report

    def validate_review_notes(
        self, notes: Optional[str], required: bool = False
    ) -> ValidationReport:
        """Validate reviewer notes; a rejection must carry a reason."""
        report = ValidationReport()
        if required:
            FieldValidators.validate_non_empty_string(
                notes, "notes", report, "Rejection reason is required"
            )
        FieldValidators.validate_length(
            notes, "notes", report, NOTES_TOO_LONG, max_length=MAX_NOTES_LENGTH
        )
        return report

    def validate_invoice_create(self, payload: InvoiceCreate) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_not_in_future(
            payload.issue_date, "issueDate", report, "Issue date cannot be in the future"
        )
        if payload.due_date is not None:
            BusinessRuleValidators.validate_due_date(
                payload.issue_date, payload.due_date, report
            )
        FieldValidators.validate_length(
            payload.notes, "notes", report, NOTES_TOO_LONG, max_length=MAX_NOTES_LENGTH
        )

        for index, item in enumerate(payload.items):
            prefix = f"items[{index}]"
            FieldValidators.validate_length(
                item.description,
                f"{prefix}.description",
                report,
                "Item description is required and cannot exceed 500 characters",
                min_length=1,
                max_length=MAX_ITEM_DESCRIPTION_LENGTH,
            )
            FieldValidators.validate_id_list(
                item.time_entry_ids, f"{prefix}.timeEntryIds", report
            )
        return report

    def validate_invoice_status_change(
        self, current: str, new: str, notes: Optional[str]
    ) -> ValidationReport:
        report = ValidationReport()
        BusinessRuleValidators.validate_status_transition(
            current, new, INVOICE_FORBIDDEN_TRANSITIONS, report
        )
        FieldValidators.validate_length(
            notes, "notes", report, NOTES_TOO_LONG, max_length=MAX_NOTES_LENGTH
        )
        return report

    def validate_recipient_email(self, email: Optional[str]) -> ValidationReport:
        report = ValidationReport()
        FieldValidators.validate_email(
            email, "recipientEmail", report, "Please provide a valid email address"
        )
        return report

    def validate_date_filter(
        self, start_date: Optional[dt.date], end_date: Optional[dt.date]
    ) -> ValidationReport:
        report = ValidationReport()
        BusinessRuleValidators.validate_date_range(start_date, end_date, report)
        return report

    def _validate_entry_times(
        self,
        start_time: dt.datetime,
        end_time: Optional[dt.datetime],
        report: ValidationReport,
    ) -> None:
        FieldValidators.validate_not_in_future(
            start_time, "startTime", report, "Start time cannot be in the future"
        )
        FieldValidators.validate_not_in_future(
            end_time, "endTime", report, "End time cannot be in the future"
        )
        BusinessRuleValidators.validate_time_range(start_time, end_time, report)
