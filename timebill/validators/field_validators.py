"""Field-level validators for API payloads.

This module provides validators for individual fields such as email
addresses, passwords, free-text fields, dates and id lists.
"""

import datetime as dt
import re
from typing import Iterable, Optional, Union

from timebill.calculators.time_utils import to_naive_utc, utc_now, utc_today
from timebill.validators.validation_report import ValidationReport

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
SPECIAL_CHARACTERS = re.compile(r"[^A-Za-z0-9]")

MIN_PASSWORD_LENGTH = 8


class FieldValidators:
    """Collection of field-level validation methods.

    Every method appends issues to the given report and never raises, so a
    single pass reports all problems of a payload at once.
    """

    @staticmethod
    def validate_email(
        value: Optional[str],
        field_name: str,
        report: ValidationReport,
        message: str = "Please provide a valid email",
    ) -> None:
        """Validate an email address.

        Args:
            value: The email address to validate
            field_name: Name of the field being validated
            report: ValidationReport to collect issues
            message: Error message used for an invalid address
        """
        if not value or not EMAIL_PATTERN.match(value):
            report.add_error(field_name, message, value)

    @staticmethod
    def validate_password(
        value: Optional[str],
        field_name: str,
        report: ValidationReport,
    ) -> None:
        """Validate password strength.

        A password needs at least 8 characters with an uppercase letter,
        a lowercase letter, a number and a special character. Each missing
        property is reported separately. The value itself is never stored
        in the report.
        """
        password = value or ""

        if len(password) < MIN_PASSWORD_LENGTH:
            report.add_error(
                field_name, "Password must be at least 8 characters long", None
            )
        if not re.search(r"[A-Z]", password):
            report.add_error(
                field_name, "Password must contain at least one uppercase letter", None
            )
        if not re.search(r"[a-z]", password):
            report.add_error(
                field_name, "Password must contain at least one lowercase letter", None
            )
        if not re.search(r"[0-9]", password):
            report.add_error(
                field_name, "Password must contain at least one number", None
            )
        if not SPECIAL_CHARACTERS.search(password):
            report.add_error(
                field_name, "Password must contain at least one special character", None
            )

    @staticmethod
    def validate_non_empty_string(
        value: Optional[str],
        field_name: str,
        report: ValidationReport,
        message: str = "Value is required",
    ) -> None:
        """Validate that a string is not empty or whitespace."""
        if value is None or not value.strip():
            report.add_error(field_name, message, value)

    @staticmethod
    def validate_length(
        value: Optional[str],
        field_name: str,
        report: ValidationReport,
        message: str,
        min_length: int = 0,
        max_length: Optional[int] = None,
    ) -> None:
        """Validate the length of an optional string.

        ``None`` passes; use validate_non_empty_string for required fields.

        Example:
            >>> report = ValidationReport()
            >>> FieldValidators.validate_length(
            ...     "ab", "name", report, "Task name must be between 3 and 255 characters",
            ...     min_length=3, max_length=255,
            ... )
            >>> report.is_valid()
            False
        """
        if value is None:
            return
        if len(value) < min_length or (max_length is not None and len(value) > max_length):
            report.add_error(field_name, message, value)

    @staticmethod
    def validate_not_in_future(
        value: Optional[Union[dt.date, dt.datetime]],
        field_name: str,
        report: ValidationReport,
        message: str,
    ) -> None:
        """Validate that a date or timestamp is not in the future.

        Timestamps are compared against the current UTC time, dates against
        the current UTC date.
        """
        if value is None:
            return
        if isinstance(value, dt.datetime):
            if to_naive_utc(value) > utc_now():
                report.add_error(field_name, message, value)
        elif value > utc_today():
            report.add_error(field_name, message, value)

    @staticmethod
    def validate_not_in_past(
        value: Optional[dt.date],
        field_name: str,
        report: ValidationReport,
        message: str,
    ) -> None:
        if value is not None and value < utc_today():
            report.add_error(field_name, message, value)

    @staticmethod
    def validate_id_list(
        values: Optional[Iterable[int]],
        field_name: str,
        report: ValidationReport,
        required: bool = False,
        required_message: str = "At least one time entry ID is required",
        message: str = "Time entry IDs must be an array of positive integers",
    ) -> None:
        """Validate a list of database ids.

        Args:
            values: The ids to validate
            field_name: Name of the field being validated
            report: ValidationReport to collect issues
            required: Whether an empty list is an error
            required_message: Error message for a missing/empty list
            message: Error message for non-positive ids
        """
        ids = list(values or [])
        if required and not ids:
            report.add_error(field_name, required_message, ids)
            return

        invalid = [value for value in ids if value < 1]
        if invalid:
            report.add_error(field_name, message, invalid)
