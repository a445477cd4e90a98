"""REST API for tasks, time entries, timesheets and invoices."""

from timebill.api.app import create_app

__all__ = ["create_app"]
