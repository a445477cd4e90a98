"""Timesheet lifecycle: draft -> submitted -> approved | rejected.

Approval and rejection cascade to every time entry on the timesheet in the
same transaction as the timesheet status change.
"""

import datetime as dt
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timebill.calculators import utc_now
from timebill.db import Project, Task, TimeEntry, Timesheet, User, transaction
from timebill.errors import (
    BadRequestError,
    NotFoundError,
    PermissionDeniedError,
    TimebillError,
    raise_for_report,
)
from timebill.models.time_entry import ApprovalEntryOut, TimeEntryOut
from timebill.models.timesheet import TimeEntryIdsRequest, TimesheetCreate
from timebill.services.security import CurrentUser
from timebill.services.time_entry_service import apply_date_bounds
from timebill.utils.logging_utils import log_function_call
from timebill.validators import BusinessRuleValidators, PayloadValidator, ValidationReport

logger = logging.getLogger(__name__)

# Entry statuses that may be put on a timesheet. Entries rejected with their
# timesheet stay attached to it, so "rejected" only matches entries an admin
# marked rejected through a direct status update.
ATTACHABLE_STATUSES = ("draft", "rejected")


class TimesheetService:
    """Timesheet creation, review and entry management."""

    def __init__(self, db: Session):
        self.db = db
        self.validator = PayloadValidator()

    def _get_timesheet(self, timesheet_id: int) -> Timesheet:
        timesheet = self.db.get(Timesheet, timesheet_id)
        if timesheet is None:
            raise NotFoundError("Timesheet not found")
        return timesheet

    def _get_own_draft(self, timesheet_id: int, user: CurrentUser) -> Timesheet:
        timesheet = self._get_timesheet(timesheet_id)
        if timesheet.user_id != user.id:
            raise PermissionDeniedError("Not authorized to modify this timesheet")
        if timesheet.status != "draft":
            raise BadRequestError("Only draft timesheets can be modified")
        return timesheet

    def _get_submitted(self, timesheet_id: int) -> Timesheet:
        timesheet = self._get_timesheet(timesheet_id)
        if timesheet.status != "submitted":
            raise BadRequestError(
                f"Only submitted timesheets can be reviewed (status is '{timesheet.status}')"
            )
        return timesheet

    def _attachable_entries(
        self, ids: Iterable[int], owner_id: int
    ) -> List[TimeEntry]:
        return list(
            self.db.scalars(
                select(TimeEntry).where(
                    TimeEntry.id.in_(list(ids)),
                    TimeEntry.user_id == owner_id,
                    TimeEntry.timesheet_id.is_(None),
                    TimeEntry.status.in_(ATTACHABLE_STATUSES),
                )
            )
        )

    @staticmethod
    def _attach(timesheet: Timesheet, entries: Iterable[TimeEntry]) -> None:
        for entry in entries:
            entry.timesheet = timesheet
            entry.status = "submitted"

    @log_function_call(level="INFO", expected=(TimebillError,))
    def create_timesheet(self, payload: TimesheetCreate, user: CurrentUser) -> Timesheet:
        """Create a draft timesheet, optionally with entries attached.

        Every listed entry must be the caller's own, not on another
        timesheet, in ``draft`` or ``rejected`` status and start inside the
        period. Attached entries become ``submitted``.
        """
        raise_for_report(self.validator.validate_timesheet_create(payload))

        requested = list(dict.fromkeys(payload.time_entry_ids))
        entries = self._attachable_entries(requested, user.id) if requested else []

        report = ValidationReport()
        found = {entry.id for entry in entries}
        for entry_id in requested:
            if entry_id not in found:
                report.add_error(
                    "timeEntryIds",
                    f"Time entry {entry_id} cannot be added to a timesheet",
                    entry_id,
                )
        for entry in entries:
            BusinessRuleValidators.validate_entry_in_period(
                entry.id, entry.start_time, payload.start_date, payload.end_date, report
            )
        raise_for_report(report)

        timesheet = Timesheet(
            user_id=user.id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            notes=payload.notes,
            status="draft",
        )
        with transaction(self.db):
            self.db.add(timesheet)
            self._attach(timesheet, entries)

        logger.info(
            f"User {user.id} created timesheet {timesheet.id} with {len(entries)} entries"
        )
        return timesheet

    def get_timesheet(self, timesheet_id: int, user: CurrentUser) -> Timesheet:
        timesheet = self._get_timesheet(timesheet_id)
        if not user.is_admin and timesheet.user_id != user.id:
            raise PermissionDeniedError("Not authorized to view this timesheet")
        return timesheet

    def list_timesheets(
        self,
        user: CurrentUser,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Timesheet], int]:
        """Admins see every timesheet (optionally one user's); others their own.

        The date filters select timesheets lying completely inside the range.
        """
        raise_for_report(self.validator.validate_date_filter(start_date, end_date))

        owner_id = (user_id if user.is_admin else user.id)
        query = select(Timesheet)
        if owner_id is not None:
            query = query.where(Timesheet.user_id == owner_id)
        if status is not None:
            query = query.where(Timesheet.status == status)
        if start_date is not None:
            query = query.where(Timesheet.start_date >= start_date)
        if end_date is not None:
            query = query.where(Timesheet.end_date <= end_date)

        total = self.db.scalar(select(func.count()).select_from(query.subquery()))
        timesheets = self.db.scalars(
            query.order_by(Timesheet.updated_at.desc(), Timesheet.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(timesheets), total or 0

    @log_function_call(level="INFO", expected=(TimebillError,))
    def submit_timesheet(self, timesheet_id: int, user: CurrentUser) -> Timesheet:
        timesheet = self._get_timesheet(timesheet_id)
        if timesheet.user_id != user.id:
            raise PermissionDeniedError("Not authorized to submit this timesheet")
        if timesheet.status != "draft":
            raise BadRequestError("Only draft timesheets can be submitted")
        if not timesheet.time_entries:
            raise BadRequestError("Cannot submit an empty timesheet")

        with transaction(self.db):
            timesheet.status = "submitted"

        logger.info(f"Timesheet {timesheet.id} submitted by user {user.id}")
        return timesheet

    @log_function_call(level="INFO", expected=(TimebillError,))
    def approve_timesheet(
        self, timesheet_id: int, reviewer: CurrentUser, notes: Optional[str] = None
    ) -> Timesheet:
        if not reviewer.is_admin:
            raise PermissionDeniedError("Only administrators can approve timesheets")
        raise_for_report(self.validator.validate_review_notes(notes))

        timesheet = self._get_submitted(timesheet_id)
        with transaction(self.db):
            timesheet.status = "approved"
            timesheet.approved_by = reviewer.id
            timesheet.approved_at = utc_now()
            if notes is not None:
                timesheet.notes = notes
            for entry in timesheet.time_entries:
                entry.status = "approved"

        logger.info(
            f"Timesheet {timesheet.id} approved by {reviewer.id} "
            f"({timesheet.entry_count} entries)"
        )
        return timesheet

    @log_function_call(level="INFO", expected=(TimebillError,))
    def reject_timesheet(
        self, timesheet_id: int, reviewer: CurrentUser, notes: Optional[str]
    ) -> Timesheet:
        if not reviewer.is_admin:
            raise PermissionDeniedError("Only administrators can reject timesheets")
        raise_for_report(self.validator.validate_review_notes(notes, required=True))

        timesheet = self._get_submitted(timesheet_id)
        with transaction(self.db):
            timesheet.status = "rejected"
            timesheet.notes = notes
            for entry in timesheet.time_entries:
                entry.status = "rejected"

        logger.info(f"Timesheet {timesheet.id} rejected by {reviewer.id}")
        return timesheet

    @log_function_call(expected=(TimebillError,))
    def add_entries(
        self, timesheet_id: int, payload: TimeEntryIdsRequest, user: CurrentUser
    ) -> Timesheet:
        """Attach more of the owner's entries to a draft timesheet.

        Entries that are not eligible (someone else's, already on a
        timesheet, wrong status or outside the period) are skipped.

        Raises:
            BadRequestError: If none of the entries could be added
        """
        raise_for_report(self.validator.validate_time_entry_ids(payload))
        timesheet = self._get_own_draft(timesheet_id, user)

        candidates = self._attachable_entries(payload.time_entry_ids, user.id)
        entries = []
        for entry in candidates:
            report = ValidationReport()
            BusinessRuleValidators.validate_entry_in_period(
                entry.id, entry.start_time, timesheet.start_date, timesheet.end_date, report
            )
            if report.is_valid():
                entries.append(entry)

        if not entries:
            raise BadRequestError("Failed to add time entries to timesheet")

        with transaction(self.db):
            self._attach(timesheet, entries)

        logger.info(f"Added {len(entries)} entries to timesheet {timesheet.id}")
        return timesheet

    @log_function_call(expected=(TimebillError,))
    def remove_entries(
        self, timesheet_id: int, payload: TimeEntryIdsRequest, user: CurrentUser
    ) -> Timesheet:
        """Detach entries from a draft timesheet; they go back to ``draft``."""
        raise_for_report(self.validator.validate_time_entry_ids(payload))
        timesheet = self._get_own_draft(timesheet_id, user)

        requested = set(payload.time_entry_ids)
        entries = [entry for entry in timesheet.time_entries if entry.id in requested]
        if not entries:
            raise BadRequestError("Failed to remove time entries from timesheet")

        with transaction(self.db):
            for entry in entries:
                entry.timesheet = None
                entry.status = "draft"

        logger.info(f"Removed {len(entries)} entries from timesheet {timesheet.id}")
        return timesheet

    def entries_for_approval(
        self,
        reviewer: CurrentUser,
        user_id: Optional[int] = None,
        project_id: Optional[int] = None,
        client_id: Optional[int] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        status: str = "submitted",
    ) -> List[ApprovalEntryOut]:
        """Time entries awaiting review, joined with user/task/project details."""
        if not reviewer.is_admin:
            raise PermissionDeniedError("Only administrators can view entries for approval")
        raise_for_report(self.validator.validate_date_filter(start_date, end_date))

        query = (
            select(
                TimeEntry,
                User.first_name,
                User.last_name,
                Task.name,
                Project.name,
                Project.hourly_rate,
            )
            .join(User, TimeEntry.user_id == User.id)
            .join(Task, TimeEntry.task_id == Task.id)
            .join(Project, Task.project_id == Project.id)
            .where(TimeEntry.status == status)
        )
        if user_id is not None:
            query = query.where(TimeEntry.user_id == user_id)
        if project_id is not None:
            query = query.where(Task.project_id == project_id)
        if client_id is not None:
            query = query.where(Project.client_id == client_id)
        query = apply_date_bounds(query, TimeEntry.start_time, start_date, end_date)

        rows = self.db.execute(query.order_by(TimeEntry.start_time.desc()))
        return [
            ApprovalEntryOut(
                **TimeEntryOut.model_validate(entry).model_dump(),
                user_first_name=first_name,
                user_last_name=last_name,
                task_name=task_name,
                project_name=project_name,
                hourly_rate=hourly_rate,
            )
            for entry, first_name, last_name, task_name, project_name, hourly_rate in rows
        ]
