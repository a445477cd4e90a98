"""Validation layer for request payloads and business rules."""

from timebill.validators.business_validators import BusinessRuleValidators
from timebill.validators.field_validators import FieldValidators
from timebill.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)
from timebill.validators.validator import PayloadValidator

__all__ = [
    "PayloadValidator",
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
    "FieldValidators",
    "BusinessRuleValidators",
]
