"""FastAPI dependencies: configuration, authentication and services."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from timebill.config import TimebillConfig
from timebill.db import get_db
from timebill.errors import AuthenticationError
from timebill.services import (
    AuthService,
    CurrentUser,
    InvoiceService,
    TaskService,
    TimeEntryService,
    TimesheetService,
    TokenSigner,
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_config(request: Request) -> TimebillConfig:
    return request.app.state.config


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    config: TimebillConfig = Depends(get_app_config),
) -> CurrentUser:
    """Resolve the caller from the ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token, authorization denied")
    return TokenSigner(config).verify(credentials.credentials)


def get_auth_service(
    db: Session = Depends(get_db), config: TimebillConfig = Depends(get_app_config)
) -> AuthService:
    return AuthService(db, config)


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


def get_time_entry_service(db: Session = Depends(get_db)) -> TimeEntryService:
    return TimeEntryService(db)


def get_timesheet_service(db: Session = Depends(get_db)) -> TimesheetService:
    return TimesheetService(db)


def get_invoice_service(
    db: Session = Depends(get_db), config: TimebillConfig = Depends(get_app_config)
) -> InvoiceService:
    return InvoiceService(db, config)
