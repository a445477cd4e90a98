"""User and authentication payloads."""

import datetime as dt
from typing import Literal, Optional

from pydantic import Field

from timebill.models.base import BaseDataModel, ResponseModel

UserRole = Literal["admin", "user", "client"]


class RegisterRequest(BaseDataModel):
    email: str
    password: str = Field(..., repr=False)
    first_name: str = ""
    last_name: str = ""
    role: Optional[UserRole] = None
    company_name: Optional[str] = None


class LoginRequest(BaseDataModel):
    email: str
    password: str = Field(..., repr=False)


class UserOut(ResponseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class AuthResponse(ResponseModel):
    user: UserOut
    token: str
