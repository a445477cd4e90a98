"""API routers, mounted under ``/api``."""

from timebill.api.routers import auth, invoices, tasks, time_entries, timesheets

ALL_ROUTERS = [
    auth.router,
    tasks.router,
    time_entries.router,
    timesheets.router,
    invoices.router,
]

__all__ = ["ALL_ROUTERS"]
