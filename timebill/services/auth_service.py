"""User registration, login and profile lookup."""

import logging
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timebill.config import TimebillConfig
from timebill.db import Client, User, transaction
from timebill.errors import BadRequestError, NotFoundError, TimebillError, raise_for_report
from timebill.models.user import LoginRequest, RegisterRequest
from timebill.services.security import (
    CurrentUser,
    TokenSigner,
    hash_password,
    verify_password,
)
from timebill.utils.logging_utils import log_function_call
from timebill.validators import PayloadValidator

logger = logging.getLogger(__name__)


class AuthService:
    """Account management on top of the users/clients tables."""

    def __init__(self, db: Session, config: TimebillConfig):
        self.db = db
        self.config = config
        self.signer = TokenSigner(config)
        self.validator = PayloadValidator()

    def find_by_email(self, email: str):
        return self.db.scalar(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )

    def issue_token(self, user: User) -> str:
        return self.signer.issue(
            CurrentUser(
                id=user.id,
                email=user.email,
                role=user.role,
                first_name=user.first_name,
                last_name=user.last_name,
            )
        )

    @log_function_call(level="INFO", expected=(TimebillError,))
    def register(self, payload: RegisterRequest) -> Tuple[User, str]:
        """Create an account and return it with a fresh token.

        A ``client`` account also gets its row in the clients table.

        Raises:
            ValidationFailedError: If the payload breaks a field rule
            BadRequestError: If the email is already registered
        """
        raise_for_report(self.validator.validate_registration(payload))

        if self.find_by_email(payload.email) is not None:
            raise BadRequestError("User already exists")

        role = payload.role or "user"
        user = User(
            email=payload.email.lower(),
            password_hash=hash_password(payload.password, self.config.bcrypt_rounds),
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=role,
        )
        if role == "client":
            user.client_profile = Client(company_name=payload.company_name)

        with transaction(self.db):
            self.db.add(user)

        logger.info(f"Registered user {user.id} with role {role}")
        return user, self.issue_token(user)

    @log_function_call(expected=(TimebillError,))
    def login(self, payload: LoginRequest) -> Tuple[User, str]:
        """Check credentials and return the user with a fresh token.

        Unknown email and wrong password give the same answer.
        """
        raise_for_report(self.validator.validate_login(payload))

        user = self.find_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise BadRequestError("Invalid credentials")

        return user, self.issue_token(user)

    def get_profile(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_user(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: str = "user",
        company_name: Optional[str] = None,
    ) -> User:
        """Create an account without issuing a token (CLI and seeding)."""
        user, _ = self.register(
            RegisterRequest(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role=role,
                company_name=company_name,
            )
        )
        return user
