"""Time entry logging for the current user."""

import datetime as dt
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timebill.calculators import (
    BillableSummary,
    calculate_entry_minutes,
    day_after,
    start_of_day,
    summarize_billable_hours,
    to_naive_utc,
)
from timebill.db import Project, Task, TimeEntry, transaction
from timebill.errors import (
    BadRequestError,
    NotFoundError,
    PermissionDeniedError,
    TimebillError,
    raise_for_report,
)
from timebill.models.time_entry import TimeEntryCreate, TimeEntryUpdate
from timebill.services.security import CurrentUser
from timebill.utils.logging_utils import log_function_call
from timebill.validators import PayloadValidator

logger = logging.getLogger(__name__)


def apply_date_bounds(query, column, start_date: Optional[dt.date], end_date: Optional[dt.date]):
    """Restrict a timestamp column to [start_date, end_date], both days included."""
    if start_date is not None:
        query = query.where(column >= start_of_day(start_date))
    if end_date is not None:
        query = query.where(column < day_after(end_date))
    return query


class TimeEntryService:
    """Create, read, update and delete time entries.

    Entries belong to the user who logged them; admins may act on any entry.
    Billed entries are frozen.
    """

    def __init__(self, db: Session):
        self.db = db
        self.validator = PayloadValidator()

    def _get_owned_entry(self, entry_id: int, user: CurrentUser, action: str) -> TimeEntry:
        entry = self.db.get(TimeEntry, entry_id)
        if entry is None:
            raise NotFoundError("Time entry not found")
        if not user.is_admin and entry.user_id != user.id:
            raise PermissionDeniedError(f"Not authorized to {action} this time entry")
        return entry

    @log_function_call(level="INFO", expected=(TimebillError,))
    def create_entry(self, payload: TimeEntryCreate, user: CurrentUser) -> TimeEntry:
        """Log time against a task. New entries always start as ``draft``."""
        raise_for_report(self.validator.validate_time_entry_create(payload))

        if self.db.get(Task, payload.task_id) is None:
            raise NotFoundError("Task not found")

        start_time = to_naive_utc(payload.start_time)
        end_time = to_naive_utc(payload.end_time)
        entry = TimeEntry(
            user_id=user.id,
            task_id=payload.task_id,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=calculate_entry_minutes(
                start_time, end_time, payload.duration_minutes
            ),
            description=payload.description,
            is_billable=payload.is_billable,
            status="draft",
        )
        with transaction(self.db):
            self.db.add(entry)

        logger.info(f"User {user.id} logged time entry {entry.id} on task {entry.task_id}")
        return entry

    def get_entry(self, entry_id: int, user: CurrentUser) -> TimeEntry:
        return self._get_owned_entry(entry_id, user, "view")

    @log_function_call(expected=(TimebillError,))
    def update_entry(
        self, entry_id: int, payload: TimeEntryUpdate, user: CurrentUser
    ) -> TimeEntry:
        """Apply a partial update.

        The duration is recomputed from start/end when either changes, no
        explicit duration is sent and the entry has an end time.

        Raises:
            BadRequestError: If the entry is already billed
            PermissionDeniedError: If a non-admin sets a status other than draft
        """
        entry = self._get_owned_entry(entry_id, user, "update")
        if entry.status == "billed":
            raise BadRequestError("Cannot update a billed time entry")
        if payload.status is not None and payload.status != "draft" and not user.is_admin:
            raise PermissionDeniedError(
                "Only administrators can change the status of a time entry"
            )

        raise_for_report(
            self.validator.validate_time_entry_update(
                payload, entry.start_time, entry.end_time
            )
        )

        changes = payload.model_dump(exclude_none=True)
        for field in ("start_time", "end_time"):
            if field in changes:
                changes[field] = to_naive_utc(changes[field])

        with transaction(self.db):
            for field, value in changes.items():
                setattr(entry, field, value)
            # Without an end there is no span to measure; the stored duration stays
            if (
                payload.duration_minutes is None
                and (payload.start_time is not None or payload.end_time is not None)
                and entry.end_time is not None
            ):
                entry.duration_minutes = calculate_entry_minutes(
                    entry.start_time, entry.end_time, None
                )

        logger.info(f"Updated time entry {entry.id}: {sorted(changes)}")
        return entry

    @log_function_call(level="INFO", expected=(TimebillError,))
    def delete_entry(self, entry_id: int, user: CurrentUser) -> None:
        entry = self._get_owned_entry(entry_id, user, "delete")
        if entry.status == "billed":
            raise BadRequestError("Cannot delete a billed time entry")

        with transaction(self.db):
            self.db.delete(entry)

        logger.info(f"Deleted time entry {entry_id}")

    def list_entries(
        self,
        user: CurrentUser,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[TimeEntry], int]:
        """The caller's own entries, newest first, with the total match count."""
        raise_for_report(self.validator.validate_date_filter(start_date, end_date))

        query = select(TimeEntry).where(TimeEntry.user_id == user.id)
        query = apply_date_bounds(query, TimeEntry.start_time, start_date, end_date)
        if status is not None:
            query = query.where(TimeEntry.status == status)

        total = self.db.scalar(select(func.count()).select_from(query.subquery()))
        entries = self.db.scalars(
            query.order_by(TimeEntry.start_time.desc(), TimeEntry.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(entries), total or 0

    def billable_summary(
        self,
        user: CurrentUser,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
    ) -> BillableSummary:
        """Hours and amount over the caller's approved, billable entries.

        Each entry is priced at the hourly rate of its own project.
        """
        raise_for_report(self.validator.validate_date_filter(start_date, end_date))

        query = (
            select(TimeEntry.duration_minutes, Project.hourly_rate)
            .join(Task, TimeEntry.task_id == Task.id)
            .join(Project, Task.project_id == Project.id)
            .where(
                TimeEntry.user_id == user.id,
                TimeEntry.is_billable.is_(True),
                TimeEntry.status == "approved",
            )
        )
        query = apply_date_bounds(query, TimeEntry.start_time, start_date, end_date)
        return summarize_billable_hours(self.db.execute(query).all())
