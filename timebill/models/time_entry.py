"""Time entry payloads and responses."""

import datetime as dt
from typing import Literal, Optional

from pydantic import Field

from timebill.models.base import BaseDataModel, Money, ResponseModel

TimeEntryStatus = Literal["draft", "submitted", "approved", "rejected", "billed"]


class TimeEntryCreate(BaseDataModel):
    task_id: int = Field(..., ge=1)
    start_time: dt.datetime
    end_time: Optional[dt.datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    is_billable: bool = True


class TimeEntryUpdate(BaseDataModel):
    """Partial update; omitted fields keep their stored value."""

    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    is_billable: Optional[bool] = None
    status: Optional[TimeEntryStatus] = None


class TimeEntryOut(ResponseModel):
    id: int
    user_id: int
    task_id: int
    timesheet_id: Optional[int] = None
    start_time: dt.datetime
    end_time: Optional[dt.datetime] = None
    duration_minutes: Optional[int] = None
    description: Optional[str] = None
    is_billable: bool
    status: TimeEntryStatus
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class ApprovalEntryOut(TimeEntryOut):
    """Entry row for the approval queue, joined with who/what/rate."""

    user_first_name: str
    user_last_name: str
    task_name: str
    project_name: str
    hourly_rate: Money


class UnbilledEntryOut(ResponseModel):
    id: int
    start_time: dt.datetime
    end_time: Optional[dt.datetime] = None
    duration_minutes: Optional[int] = None
    description: Optional[str] = None
    is_billable: bool
    status: TimeEntryStatus
    task_name: str
    project_name: str
    hourly_rate: Money
    first_name: str
    last_name: str


class BillableSummaryOut(ResponseModel):
    total_hours: Money = Field(serialization_alias="totalHours")
    billable_amount: Money = Field(serialization_alias="billableAmount")
