"""Time entry routes."""

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from timebill.api.dependencies import get_current_user, get_time_entry_service
from timebill.models.base import MessageResponse, Page
from timebill.models.time_entry import (
    BillableSummaryOut,
    TimeEntryCreate,
    TimeEntryOut,
    TimeEntryStatus,
    TimeEntryUpdate,
)
from timebill.services import CurrentUser, TimeEntryService

router = APIRouter(prefix="/time-entries", tags=["time entries"])


@router.post("", response_model=TimeEntryOut, status_code=status.HTTP_201_CREATED)
def create_time_entry(
    payload: TimeEntryCreate,
    user: CurrentUser = Depends(get_current_user),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    return service.create_entry(payload, user)


@router.get("", response_model=Page[TimeEntryOut])
def list_time_entries(
    start_date: Optional[dt.date] = Query(None, alias="startDate"),
    end_date: Optional[dt.date] = Query(None, alias="endDate"),
    entry_status: Optional[TimeEntryStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    entries, total = service.list_entries(
        user, start_date, end_date, entry_status, page, limit
    )
    return Page[TimeEntryOut].build(
        [TimeEntryOut.model_validate(entry) for entry in entries], total, page, limit
    )


@router.get("/billable/summary", response_model=BillableSummaryOut)
def billable_summary(
    start_date: Optional[dt.date] = Query(None, alias="startDate"),
    end_date: Optional[dt.date] = Query(None, alias="endDate"),
    user: CurrentUser = Depends(get_current_user),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    summary = service.billable_summary(user, start_date, end_date)
    return BillableSummaryOut(
        total_hours=summary.total_hours, billable_amount=summary.billable_amount
    )


@router.get("/{entry_id}", response_model=TimeEntryOut)
def get_time_entry(
    entry_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    return service.get_entry(entry_id, user)


@router.put("/{entry_id}", response_model=TimeEntryOut)
def update_time_entry(
    payload: TimeEntryUpdate,
    entry_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    return service.update_entry(entry_id, payload, user)


@router.delete("/{entry_id}", response_model=MessageResponse)
def delete_time_entry(
    entry_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    service.delete_entry(entry_id, user)
    return MessageResponse(message="Time entry deleted successfully")
