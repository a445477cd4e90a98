"""
API test fixtures.

Every test gets a fresh in-memory database with a small, known data set:
an admin, two workers, two clients with projects and tasks. Tokens are
issued directly so tests do not depend on the login route.
"""

import datetime as dt
from decimal import Decimal
from types import SimpleNamespace
from typing import Callable, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from timebill.api import create_app
from timebill.calculators import utc_now
from timebill.db import Client, Project, Task, TimeEntry, User
from timebill.services import CurrentUser, TokenSigner, hash_password

TEST_PASSWORD = "Secret123!"


@pytest.fixture
def app(test_config, session_factory):
    return create_app(config=test_config, session_factory=session_factory)


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


def _user(email: str, role: str, first: str, last: str, company: Optional[str] = None) -> User:
    user = User(
        email=email,
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
        first_name=first,
        last_name=last,
        role=role,
    )
    if company:
        user.client_profile = Client(company_name=company, payment_terms="Net 30")
    return user


@pytest.fixture
def seed(db_session) -> SimpleNamespace:
    """Users, projects and tasks shared by the API tests."""
    admin = _user("admin@example.com", "admin", "Ada", "Admin")
    worker = _user("worker@example.com", "user", "Wes", "Worker")
    other_worker = _user("other@example.com", "user", "Olga", "Other")
    acme = _user("acme@example.com", "client", "Cleo", "Client", company="Acme Corp")
    globex = _user("globex@example.com", "client", "Gus", "Globex", company="Globex")

    website = Project(client=acme, name="Website", hourly_rate=Decimal("100.00"))
    support = Project(client=acme, name="Support", hourly_rate=Decimal("60.00"))
    migration = Project(client=globex, name="Migration", hourly_rate=Decimal("120.00"))

    design = Task(project=website, name="Design")
    build = Task(project=website, name="Build")
    hotline = Task(project=support, name="Hotline")
    cutover = Task(project=migration, name="Cutover")

    db_session.add_all([admin, worker, other_worker, acme, globex])
    db_session.add_all([website, support, migration, design, build, hotline, cutover])
    db_session.commit()

    return SimpleNamespace(
        admin=admin,
        worker=worker,
        other_worker=other_worker,
        acme=acme,
        globex=globex,
        website=website,
        support=support,
        migration=migration,
        design=design,
        build=build,
        hotline=hotline,
        cutover=cutover,
    )


@pytest.fixture
def auth_headers(test_config) -> Callable[[User], Dict[str, str]]:
    """Build an Authorization header for a user."""
    signer = TokenSigner(test_config)

    def build(user: User) -> Dict[str, str]:
        token = signer.issue(
            CurrentUser(
                id=user.id,
                email=user.email,
                role=user.role,
                first_name=user.first_name,
                last_name=user.last_name,
            )
        )
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
def headers(seed, auth_headers) -> SimpleNamespace:
    return SimpleNamespace(
        admin=auth_headers(seed.admin),
        worker=auth_headers(seed.worker),
        other_worker=auth_headers(seed.other_worker),
        acme=auth_headers(seed.acme),
        globex=auth_headers(seed.globex),
    )


@pytest.fixture
def make_entry(db_session, seed) -> Callable[..., TimeEntry]:
    """Insert a time entry directly, bypassing the API."""

    def make(
        user: Optional[User] = None,
        task: Optional[Task] = None,
        minutes: int = 60,
        status: str = "draft",
        is_billable: bool = True,
        days_ago: int = 1,
    ) -> TimeEntry:
        start = (utc_now() - dt.timedelta(days=days_ago)).replace(
            hour=9, minute=0, second=0, microsecond=0
        )
        entry = TimeEntry(
            user=user or seed.worker,
            task=task or seed.design,
            start_time=start,
            end_time=start + dt.timedelta(minutes=minutes),
            duration_minutes=minutes,
            description="Work",
            is_billable=is_billable,
            status=status,
        )
        db_session.add(entry)
        db_session.commit()
        return entry

    return make
