"""Task payloads and responses."""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import Field

from timebill.models.base import BaseDataModel, ResponseModel
from timebill.models.time_entry import TimeEntryOut

TaskStatus = Literal["pending", "in_progress", "completed", "blocked"]


class TaskCreate(BaseDataModel):
    project_id: int = Field(..., ge=1)
    name: str
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[dt.date] = None


class TaskUpdate(BaseDataModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[dt.date] = None


class TaskOut(ResponseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str] = None
    status: TaskStatus
    due_date: Optional[dt.date] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class TaskDetailOut(TaskOut):
    time_entries: List[TimeEntryOut] = Field(default_factory=list)
