"""Demo data for local development."""

import datetime as dt
import logging
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timebill.calculators import utc_now
from timebill.config import TimebillConfig
from timebill.db import Project, Task, TimeEntry, User, transaction
from timebill.services.auth_service import AuthService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "Passw0rd!"

DEMO_USERS = [
    {"email": "admin@example.com", "first_name": "Ada", "last_name": "Admin", "role": "admin"},
    {"email": "worker@example.com", "first_name": "Wes", "last_name": "Worker", "role": "user"},
    {
        "email": "client@example.com",
        "first_name": "Cleo",
        "last_name": "Client",
        "role": "client",
        "company_name": "Acme Corp",
    },
]


def seed_demo_data(db: Session, config: TimebillConfig) -> Optional[Dict[str, int]]:
    """Create demo users, a project with tasks and some time entries.

    Returns:
        Counts of created rows, or None if the database already has users
    """
    if db.scalar(select(func.count()).select_from(User)):
        logger.info("Database already contains users, skipping seed")
        return None

    auth = AuthService(db, config)
    users = {
        account["role"]: auth.create_user(password=DEMO_PASSWORD, **account) for account in DEMO_USERS
    }

    project = Project(
        client_id=users["client"].id,
        name="Website Relaunch",
        description="Redesign and rebuild of the corporate website",
        hourly_rate=Decimal("95.00"),
    )
    tasks = [
        Task(name="Discovery workshop", status="completed", project=project),
        Task(name="Frontend implementation", status="in_progress", project=project),
        Task(
            name="Content migration",
            due_date=(utc_now() + dt.timedelta(days=14)).date(),
            project=project,
        ),
    ]

    start = (utc_now() - dt.timedelta(days=3)).replace(hour=9, minute=0, second=0, microsecond=0)
    entries = [
        TimeEntry(
            user_id=users["user"].id,
            task=tasks[0],
            start_time=start,
            end_time=start + dt.timedelta(hours=3),
            duration_minutes=180,
            description="Stakeholder workshop",
            status="approved",
        ),
        TimeEntry(
            user_id=users["user"].id,
            task=tasks[1],
            start_time=start + dt.timedelta(days=1),
            end_time=start + dt.timedelta(days=1, hours=4, minutes=30),
            duration_minutes=270,
            description="Navigation and layout",
        ),
    ]

    with transaction(db):
        db.add(project)
        db.add_all(tasks)
        db.add_all(entries)

    counts = {"users": len(users), "projects": 1, "tasks": len(tasks), "time_entries": len(entries)}
    logger.info(f"Seeded demo data: {counts}")
    return counts
