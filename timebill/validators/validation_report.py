"""Collected validation findings for one request payload."""

from dataclasses import dataclass, field as dc_field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """One finding against a payload field.

    ``field`` uses the client's spelling (``dueDate``, ``items[2].rate``) so
    it can be echoed back in the error body unchanged.
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        text = f"[{self.severity.name}] {self.field}: {self.message}"
        if self.context:
            text += " (" + ", ".join(f"{k}={v}" for k, v in self.context.items()) + ")"
        return text


@dataclass
class ValidationReport:
    """Findings for a payload; any ERROR makes it invalid.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("dueDate", "Due date must be after issue date", "2024-01-01")
        >>> report.is_valid()
        False
    """

    issues: List[ValidationIssue] = dc_field(default_factory=list)

    def issues_of(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity is severity]

    @property
    def error_count(self) -> int:
        return len(self.issues_of(ValidationSeverity.ERROR))

    @property
    def warning_count(self) -> int:
        return len(self.issues_of(ValidationSeverity.WARNING))

    @property
    def info_count(self) -> int:
        return len(self.issues_of(ValidationSeverity.INFO))

    def has_errors(self) -> bool:
        return any(issue.severity is ValidationSeverity.ERROR for issue in self.issues)

    def is_valid(self) -> bool:
        return not self.has_errors()

    def add(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.issues.append(ValidationIssue(severity, field, message, value, context))

    def add_error(self, field: str, message: str, value: Any = None, context=None) -> None:
        self.add(ValidationSeverity.ERROR, field, message, value, context)

    def add_warning(self, field: str, message: str, value: Any = None, context=None) -> None:
        self.add(ValidationSeverity.WARNING, field, message, value, context)

    def add_info(self, field: str, message: str, value: Any = None, context=None) -> None:
        self.add(ValidationSeverity.INFO, field, message, value, context)

    def get_errors(self) -> List[ValidationIssue]:
        return self.issues_of(ValidationSeverity.ERROR)

    def get_warnings(self) -> List[ValidationIssue]:
        return self.issues_of(ValidationSeverity.WARNING)

    def merge(self, other: "ValidationReport") -> None:
        self.issues.extend(other.issues)

    def summary(self) -> str:
        counts = [
            (self.error_count, "error(s)"),
            (self.warning_count, "warning(s)"),
            (self.info_count, "info message(s)"),
        ]
        parts = [f"{count} {label}" for count, label in counts if count]
        return ", ".join(parts) if parts else "No issues found"

    def format(self) -> str:
        """One line per issue, most severe first."""
        if not self.issues:
            return "Validation successful - no issues found"
        ordered = sorted(self.issues, key=lambda issue: issue.severity, reverse=True)
        return "\n".join(
            [f"Validation Report - {self.summary()}"] + [f"  - {issue}" for issue in ordered]
        )
