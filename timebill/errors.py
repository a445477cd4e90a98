"""Domain exceptions raised by services and mapped to HTTP responses."""

from typing import Any, Dict, List, Optional

from timebill.validators.validation_report import ValidationReport


class TimebillError(Exception):
    """Base exception with a user-facing message and an HTTP status code."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class BadRequestError(TimebillError):
    """The request is well-formed but not allowed in the current state."""

    status_code = 400


class ValidationFailedError(BadRequestError):
    """One or more payload fields broke a validation rule."""

    def __init__(self, report: ValidationReport, message: str = "Validation failed"):
        self.report = report
        super().__init__(message)

    @property
    def errors(self) -> List[Dict[str, Any]]:
        return [
            {"field": issue.field, "message": issue.message, "value": issue.value}
            for issue in self.report.get_errors()
        ]

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class AuthenticationError(TimebillError):
    status_code = 401


class PermissionDeniedError(TimebillError):
    status_code = 403


class NotFoundError(TimebillError):
    status_code = 404


class ConflictError(TimebillError):
    status_code = 409


def raise_for_report(report: ValidationReport) -> None:
    """Raise ValidationFailedError if the report contains errors."""
    if report.has_errors():
        raise ValidationFailedError(report)
