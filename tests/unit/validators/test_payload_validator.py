"""Tests for the PayloadValidator orchestrator."""

import datetime as dt
from decimal import Decimal

import pytest

from timebill.calculators import utc_now, utc_today
from timebill.models import (
    InvoiceCreate,
    LoginRequest,
    RegisterRequest,
    TaskCreate,
    TaskUpdate,
    TimeEntryCreate,
    TimeEntryIdsRequest,
    TimeEntryUpdate,
    TimesheetCreate,
)
from timebill.validators import PayloadValidator


@pytest.fixture
def validator():
    return PayloadValidator()


def _messages(report):
    return [issue.message for issue in report.get_errors()]


class TestRegistrationAndLogin:
    """Test account payload validation."""

    def test_valid_registration(self, validator):
        payload = RegisterRequest(
            email="new@example.com", password="Secret123!", first_name="New", last_name="User"
        )

        assert validator.validate_registration(payload).is_valid()

    def test_missing_names(self, validator):
        payload = RegisterRequest(email="new@example.com", password="Secret123!")

        assert _messages(validator.validate_registration(payload)) == [
            "First name is required",
            "Last name is required",
        ]

    def test_client_requires_company(self, validator):
        payload = RegisterRequest(
            email="c@example.com",
            password="Secret123!",
            first_name="C",
            last_name="D",
            role="client",
        )

        report = validator.validate_registration(payload)

        assert report.get_errors()[0].field == "companyName"

    def test_login_requires_password(self, validator):
        report = validator.validate_login(LoginRequest(email="a@example.com", password=""))

        assert _messages(report) == ["Password is required"]


class TestTaskPayloads:
    def test_valid_task(self, validator):
        payload = TaskCreate(project_id=1, name="Design", due_date=utc_today())

        assert validator.validate_task_create(payload).is_valid()

    def test_blank_name_reported_once(self, validator):
        """Test that an empty name yields a single error."""
        report = validator.validate_task_create(TaskCreate(project_id=1, name="   "))

        assert _messages(report) == ["Task name must be between 3 and 255 characters"]

    def test_long_description_and_past_due_date(self, validator):
        payload = TaskCreate(
            project_id=1,
            name="Design",
            description="x" * 1001,
            due_date=utc_today() - dt.timedelta(days=1),
        )

        assert _messages(validator.validate_task_create(payload)) == [
            "Description cannot exceed 1000 characters",
            "Due date cannot be in the past",
        ]

    def test_update_allows_partial_payload(self, validator):
        assert validator.validate_task_update(TaskUpdate(status="completed")).is_valid()

    def test_update_checks_name_length(self, validator):
        assert validator.validate_task_update(TaskUpdate(name="ab")).has_errors()


class TestTimeEntryPayloads:
    def test_valid_entry(self, validator):
        start = utc_now() - dt.timedelta(hours=2)
        payload = TimeEntryCreate(task_id=1, start_time=start, end_time=start + dt.timedelta(hours=1))

        assert validator.validate_time_entry_create(payload).is_valid()

    def test_future_times(self, validator):
        start = utc_now() + dt.timedelta(hours=1)
        payload = TimeEntryCreate(task_id=1, start_time=start, end_time=start + dt.timedelta(hours=1))

        assert _messages(validator.validate_time_entry_create(payload)) == [
            "Start time cannot be in the future",
            "End time cannot be in the future",
        ]

    def test_update_checks_new_end_against_current_start(self, validator):
        """Test that changing one side still validates the pair."""
        current_start = dt.datetime(2024, 3, 1, 9)
        payload = TimeEntryUpdate(end_time=dt.datetime(2024, 3, 1, 8))

        report = validator.validate_time_entry_update(payload, current_start, None)

        assert _messages(report) == ["End time must be after start time"]

    def test_update_checks_new_start_against_current_end(self, validator):
        payload = TimeEntryUpdate(start_time=dt.datetime(2024, 3, 1, 18))

        report = validator.validate_time_entry_update(
            payload, dt.datetime(2024, 3, 1, 9), dt.datetime(2024, 3, 1, 17)
        )

        assert report.has_errors()


class TestTimesheetPayloads:
    def test_valid_timesheet(self, validator):
        today = utc_today()
        payload = TimesheetCreate(start_date=today - dt.timedelta(days=6), end_date=today, time_entry_ids=[1, 2])

        assert validator.validate_timesheet_create(payload).is_valid()

    def test_invalid_timesheet(self, validator):
        today = utc_today()
        payload = TimesheetCreate(
            start_date=today + dt.timedelta(days=1),
            end_date=today,
            notes="n" * 1001,
            time_entry_ids=[0],
        )

        assert _messages(validator.validate_timesheet_create(payload)) == [
            "Start date cannot be in the future",
            "End date must be after start date",
            "Notes cannot exceed 1000 characters",
            "Time entry IDs must be an array of positive integers",
        ]

    def test_entry_ids_required(self, validator):
        report = validator.validate_time_entry_ids(TimeEntryIdsRequest())

        assert _messages(report) == ["At least one time entry ID is required"]

    @pytest.mark.parametrize("notes", [None, "", "  "])
    def test_rejection_needs_reason(self, validator, notes):
        assert _messages(validator.validate_review_notes(notes, required=True)) == [
            "Rejection reason is required"
        ]

    def test_approval_notes_optional(self, validator):
        assert validator.validate_review_notes(None).is_valid()


class TestInvoicePayloads:
    def _payload(self, **overrides):
        today = utc_today()
        data = {
            "client_id": 1,
            "issue_date": today,
            "due_date": today + dt.timedelta(days=30),
            "tax_rate": Decimal("10"),
            "items": [{"description": "Design", "quantity": "8", "unit_price": "100"}],
        }
        data.update(overrides)
        return InvoiceCreate.model_validate(data)

    def test_valid_invoice(self, validator):
        assert validator.validate_invoice_create(self._payload()).is_valid()

    def test_due_date_may_be_omitted(self, validator):
        assert validator.validate_invoice_create(self._payload(due_date=None)).is_valid()

    def test_future_issue_date(self, validator):
        tomorrow = utc_today() + dt.timedelta(days=1)
        payload = self._payload(issue_date=tomorrow, due_date=tomorrow)

        assert _messages(validator.validate_invoice_create(payload)) == [
            "Issue date cannot be in the future"
        ]

    def test_item_errors_are_indexed(self, validator):
        payload = self._payload(
            items=[
                {"description": "Ok", "quantity": "1", "unit_price": "1"},
                {"description": "x" * 501, "quantity": "1", "unit_price": "1", "time_entry_ids": [-4]},
            ]
        )

        fields = [issue.field for issue in validator.validate_invoice_create(payload).get_errors()]

        assert fields == ["items[1].description", "items[1].timeEntryIds"]

    def test_status_change(self, validator):
        assert validator.validate_invoice_status_change("paid", "draft", None).has_errors()
        assert validator.validate_invoice_status_change("draft", "sent", None).is_valid()

    def test_recipient_email(self, validator):
        assert _messages(validator.validate_recipient_email("nope")) == [
            "Please provide a valid email address"
        ]

    def test_date_filter(self, validator):
        assert validator.validate_date_filter(dt.date(2024, 2, 1), dt.date(2024, 1, 1)).has_errors()
        assert validator.validate_date_filter(None, dt.date(2024, 1, 1)).is_valid()
