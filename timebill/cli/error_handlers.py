"""Error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from timebill.cli.utils.formatters import format_error, format_warning
from timebill.errors import TimebillError, ValidationFailedError


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""


class DataValidationError(CLIError):
    """Error related to command input."""


def _hint(message: Optional[str]) -> None:
    if message:
        click.echo(format_warning(f"Hint: {message}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Report an error to the user and choose the exit code.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code: 1 configuration, 2 input, 3 refused by business rules,
        4 database, 130 cancelled, 255 unexpected
    """
    if isinstance(error, ConfigurationError):
        click.echo(format_error(f"Configuration Error: {error.message}"))
        _hint(error.recovery_hint)
        return 1

    elif isinstance(error, PydanticValidationError):
        click.echo(format_error("Configuration Error: invalid settings"))
        for issue in error.errors():
            location = ".".join(str(part) for part in issue["loc"])
            click.echo(f"  - {location}: {issue['msg']}")
        _hint("Check your environment variables and .env file")
        return 1

    elif isinstance(error, DataValidationError):
        click.echo(format_error(f"Invalid Input: {error.message}"))
        _hint(error.recovery_hint)
        return 2

    elif isinstance(error, TimebillError):
        click.echo(format_error(error.message))
        if isinstance(error, ValidationFailedError):
            for issue in error.report.get_errors():
                click.echo(f"  - {issue.field}: {issue.message}")
        return 3

    elif isinstance(error, OperationalError):
        click.echo(format_error("Database Error: the database could not be used"))
        click.echo(str(error.orig))
        _hint("Check DATABASE_URL and run 'timebill init-db' to create the tables")
        return 4

    elif isinstance(error, SQLAlchemyError):
        click.echo(format_error(f"Database Error: {type(error).__name__}"))
        click.echo(str(error))
        return 4

    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(traceback.format_exc())
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


class ErrorHandler:
    """Context manager that reports an error and exits with its exit code.

    Example:
        with ErrorHandler(debug):
            ...
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is not None and not isinstance(exc_val, (SystemExit, click.exceptions.Exit)):
            sys.exit(handle_cli_error(exc_val, self.debug))
        return False
