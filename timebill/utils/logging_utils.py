"""Structured logging utilities with request context support."""

import contextvars
import functools
import logging
import uuid
from typing import Any, Callable, Dict, Optional, Tuple, Type, cast

# Fields copied onto every log record. Must follow a request from the event
# loop into the threadpool where synchronous endpoints run.
_log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "timebill_log_context", default={}
)

# Matched as substrings of the lowercased key
SENSITIVE_FIELDS = ("password", "token", "secret", "api_key", "private_key", "credentials", "auth")

REDACTED = "***REDACTED***"


def generate_correlation_id() -> str:
    """New id for a request that arrived without an X-Request-ID header."""
    return str(uuid.uuid4())


def get_correlation_id() -> Optional[str]:
    return _log_context.get().get("correlation_id")


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently attached to log records."""
    return dict(_log_context.get())


class LogContext:
    """
    Context manager for adding structured fields to log records.

    Fields are merged into the current context on enter and the previous
    context is restored on exit, so nested contexts behave like a stack.

    Example:
        with LogContext(correlation_id=request_id, user_id=user.id):
            logger.info("Creating invoice")
            # Record carries correlation_id and user_id
    """

    def __init__(self, **kwargs):
        self.fields = kwargs
        self._token: Optional[contextvars.Token] = None

    def __enter__(self):
        merged = dict(_log_context.get())
        merged.update(self.fields)
        self._token = _log_context.set(merged)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


class ContextFilter(logging.Filter):
    """Logging filter that adds context fields to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            setattr(record, key, value)
        return True


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_FIELDS)


def sanitize_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of ``data`` safe to write to the log.

    Keys containing a SENSITIVE_FIELDS marker (case-insensitive, so
    ``Authorization`` and ``newPassword`` match) have their value replaced
    by REDACTED. Nested dicts and lists of dicts are handled too.
    """
    if not isinstance(data, dict):
        return data

    def clean(key: str, value: Any) -> Any:
        if _is_sensitive(key):
            return None if value is None else REDACTED
        if isinstance(value, dict):
            return sanitize_sensitive_data(cast(Dict[str, Any], value))
        if isinstance(value, list):
            return [sanitize_sensitive_data(item) for item in value]
        return value

    return {key: clean(key, value) for key, value in data.items()}


def _describe_call(name: str, args: tuple, kwargs: Dict[str, Any]) -> str:
    shown = [repr(arg) for arg in args]
    shown += [f"{key}={value!r}" for key, value in sanitize_sensitive_data(kwargs).items()]
    return f"Entering {name} with args: {', '.join(shown)}"


def log_function_call(
    func: Optional[Callable] = None,
    *,
    include_args: bool = False,
    level: str = "DEBUG",
    expected: Tuple[Type[BaseException], ...] = (),
) -> Callable:
    """
    Log entry to and exit from a service operation.

    Usable bare (``@log_function_call``) or with options. Exceptions listed
    in ``expected`` are the operation saying no (not found, not allowed,
    invalid payload) and get one WARNING line. Anything else is logged at
    ERROR with its traceback. Both are re-raised.

    Example:
        @log_function_call(level="INFO", expected=(TimebillError,))
        def create_invoice(self, payload, admin):
            ...
    """

    def decorator(f: Callable) -> Callable:
        logger = logging.getLogger(f.__module__)
        log_level = getattr(logging, level.upper())

        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            if include_args:
                logger.log(log_level, _describe_call(f.__name__, args, kwargs))
            else:
                logger.log(log_level, f"Entering {f.__name__}")

            try:
                result = f(*args, **kwargs)
            except expected as e:
                logger.warning(f"{f.__name__} refused: {type(e).__name__}: {e}")
                raise
            except Exception as e:
                logger.error(
                    f"Exception in {f.__name__}: {type(e).__name__}: {e}", exc_info=True
                )
                raise

            logger.log(log_level, f"Exiting {f.__name__}")
            return result

        return wrapper

    return decorator if func is None else decorator(func)
