"""Timesheet routes, including the approval workflow."""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from timebill.api.dependencies import get_current_user, get_timesheet_service
from timebill.models.base import Page
from timebill.models.time_entry import ApprovalEntryOut, TimeEntryStatus
from timebill.models.timesheet import (
    TimeEntryIdsRequest,
    TimesheetCreate,
    TimesheetDetailOut,
    TimesheetNotes,
    TimesheetOut,
    TimesheetReject,
    TimesheetStatus,
)
from timebill.services import CurrentUser, TimesheetService

router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@router.post("", response_model=TimesheetDetailOut, status_code=status.HTTP_201_CREATED)
def create_timesheet(
    payload: TimesheetCreate,
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    return service.create_timesheet(payload, user)


@router.get("", response_model=Page[TimesheetOut])
def list_timesheets(
    user_id: Optional[int] = Query(None, alias="userId", ge=1),
    timesheet_status: Optional[TimesheetStatus] = Query(None, alias="status"),
    start_date: Optional[dt.date] = Query(None, alias="startDate"),
    end_date: Optional[dt.date] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    timesheets, total = service.list_timesheets(
        user, user_id, timesheet_status, start_date, end_date, page, limit
    )
    return Page[TimesheetOut].build(
        [TimesheetOut.model_validate(timesheet) for timesheet in timesheets],
        total,
        page,
        limit,
    )


@router.get("/entries", response_model=List[ApprovalEntryOut])
def entries_for_approval(
    user_id: Optional[int] = Query(None, alias="userId", ge=1),
    project_id: Optional[int] = Query(None, alias="projectId", ge=1),
    client_id: Optional[int] = Query(None, alias="clientId", ge=1),
    start_date: Optional[dt.date] = Query(None, alias="startDate"),
    end_date: Optional[dt.date] = Query(None, alias="endDate"),
    entry_status: TimeEntryStatus = Query("submitted", alias="status"),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    return service.entries_for_approval(
        user, user_id, project_id, client_id, start_date, end_date, entry_status
    )


@router.get("/{timesheet_id}", response_model=TimesheetDetailOut)
def get_timesheet(
    timesheet_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    return service.get_timesheet(timesheet_id, user)


@router.post("/{timesheet_id}/submit", response_model=TimesheetDetailOut)
def submit_timesheet(
    timesheet_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    return service.submit_timesheet(timesheet_id, user)


@router.post("/{timesheet_id}/approve", response_model=TimesheetDetailOut)
def approve_timesheet(
    timesheet_id: int = Path(..., ge=1),
    payload: Optional[TimesheetNotes] = Body(None),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    notes = payload.notes if payload is not None else None
    return service.approve_timesheet(timesheet_id, user, notes)


@router.post("/{timesheet_id}/reject", response_model=TimesheetDetailOut)
def reject_timesheet(
    payload: TimesheetReject,
    timesheet_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    return service.reject_timesheet(timesheet_id, user, payload.notes)


@router.post("/{timesheet_id}/entries", response_model=TimesheetDetailOut)
def add_time_entries(
    payload: TimeEntryIdsRequest,
    timesheet_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    return service.add_entries(timesheet_id, payload, user)


@router.delete("/{timesheet_id}/entries", response_model=TimesheetDetailOut)
def remove_time_entries(
    payload: TimeEntryIdsRequest,
    timesheet_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TimesheetService = Depends(get_timesheet_service),
):
    return service.remove_entries(timesheet_id, payload, user)
