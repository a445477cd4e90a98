"""Timesheet payloads and responses."""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import Field

from timebill.models.base import BaseDataModel, ResponseModel
from timebill.models.time_entry import TimeEntryOut

TimesheetStatus = Literal["draft", "submitted", "approved", "rejected"]


class TimesheetCreate(BaseDataModel):
    start_date: dt.date
    end_date: dt.date
    notes: Optional[str] = None
    time_entry_ids: List[int] = Field(default_factory=list)


class TimesheetNotes(BaseDataModel):
    """Optional reviewer notes sent with an approval."""

    notes: Optional[str] = None


class TimesheetReject(BaseDataModel):
    notes: Optional[str] = None


class TimeEntryIdsRequest(BaseDataModel):
    time_entry_ids: List[int] = Field(default_factory=list)


class TimesheetOut(ResponseModel):
    id: int
    user_id: int
    start_date: dt.date
    end_date: dt.date
    status: TimesheetStatus
    notes: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[dt.datetime] = None
    entry_count: int = 0
    total_minutes: int = 0
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class TimesheetDetailOut(TimesheetOut):
    time_entries: List[TimeEntryOut] = Field(default_factory=list)
