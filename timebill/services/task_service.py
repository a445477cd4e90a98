"""Task management with project-based access control."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from timebill.db import Project, Task, TimeEntry, transaction
from timebill.errors import (
    BadRequestError,
    NotFoundError,
    PermissionDeniedError,
    TimebillError,
    raise_for_report,
)
from timebill.models.task import TaskCreate, TaskUpdate
from timebill.services.security import CurrentUser
from timebill.utils.logging_utils import log_function_call
from timebill.validators import PayloadValidator

logger = logging.getLogger(__name__)


class TaskService:
    """CRUD operations on tasks.

    Admins see and change everything. Clients see and change the tasks of
    their own projects. Regular users may read every task, so they can log
    time against it, but cannot change tasks.
    """

    def __init__(self, db: Session):
        self.db = db
        self.validator = PayloadValidator()

    def _get_project(self, project_id: int) -> Project:
        project = self.db.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    def _get_task(self, task_id: int) -> Task:
        task = self.db.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    @staticmethod
    def can_read(user: CurrentUser, project: Project) -> bool:
        if user.is_admin or user.role == "user":
            return True
        return user.is_client and project.client_id == user.id

    @staticmethod
    def can_modify(user: CurrentUser, project: Project) -> bool:
        return user.is_admin or (user.is_client and project.client_id == user.id)

    @log_function_call(level="INFO", expected=(TimebillError,))
    def create_task(self, payload: TaskCreate, user: CurrentUser) -> Task:
        raise_for_report(self.validator.validate_task_create(payload))

        project = self._get_project(payload.project_id)
        if not self.can_modify(user, project):
            raise PermissionDeniedError(
                "Not authorized to create tasks for this project"
            )

        task = Task(
            project_id=project.id,
            name=payload.name,
            description=payload.description,
            status=payload.status or "pending",
            due_date=payload.due_date,
        )
        with transaction(self.db):
            self.db.add(task)

        logger.info(f"Created task {task.id} in project {project.id}")
        return task

    def get_task(self, task_id: int, user: CurrentUser) -> Task:
        task = self._get_task(task_id)
        if not self.can_read(user, task.project):
            raise PermissionDeniedError("Not authorized to view this task")
        return task

    @log_function_call(expected=(TimebillError,))
    def update_task(self, task_id: int, payload: TaskUpdate, user: CurrentUser) -> Task:
        """Apply a partial update; fields left out keep their value."""
        raise_for_report(self.validator.validate_task_update(payload))

        task = self._get_task(task_id)
        if not self.can_modify(user, task.project):
            raise PermissionDeniedError("Not authorized to update this task")

        changes = payload.model_dump(exclude_none=True)
        with transaction(self.db):
            for field, value in changes.items():
                setattr(task, field, value)

        logger.info(f"Updated task {task.id}: {sorted(changes)}")
        return task

    @log_function_call(level="INFO", expected=(TimebillError,))
    def delete_task(self, task_id: int, user: CurrentUser) -> None:
        """Delete a task together with its time entries.

        Raises:
            BadRequestError: If any of its time entries is on an invoice
        """
        task = self._get_task(task_id)
        if not self.can_modify(user, task.project):
            raise PermissionDeniedError("Not authorized to delete this task")

        invoiced = self.db.scalar(
            select(TimeEntry.id)
            .where(TimeEntry.task_id == task.id, TimeEntry.invoice_items.any())
            .limit(1)
        )
        if invoiced is not None:
            raise BadRequestError("Cannot delete a task with invoiced time entries")

        with transaction(self.db):
            self.db.delete(task)

        logger.info(f"Deleted task {task_id}")

    def list_project_tasks(self, project_id: int, user: CurrentUser) -> List[Task]:
        project = self._get_project(project_id)
        if not self.can_read(user, project):
            raise PermissionDeniedError("Not authorized to view tasks for this project")

        return list(
            self.db.scalars(
                select(Task)
                .where(Task.project_id == project.id)
                .order_by(Task.created_at.desc(), Task.id.desc())
            )
        )
