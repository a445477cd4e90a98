"""Task routes."""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from timebill.api.dependencies import get_current_user, get_task_service
from timebill.models.base import MessageResponse
from timebill.models.task import TaskCreate, TaskDetailOut, TaskOut, TaskUpdate
from timebill.services import CurrentUser, TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return service.create_task(payload, user)


@router.get("/project/{project_id}", response_model=List[TaskOut])
def list_project_tasks(
    project_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return service.list_project_tasks(project_id, user)


@router.get("/{task_id}", response_model=TaskDetailOut)
def get_task(
    task_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return service.get_task(task_id, user)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    payload: TaskUpdate,
    task_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    return service.update_task(task_id, payload, user)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    service.delete_task(task_id, user)
    return MessageResponse(message="Task deleted successfully")
