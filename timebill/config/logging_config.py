"""Logging setup shared by the API server and the CLI.

Both entry points call :func:`configure_logging` once at startup. Records
leave either as one human-readable line or as one JSON object per line, and
every handler copies the current request context (correlation id, user id)
onto the record first.
"""

import json
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any, Dict, Optional

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
FORMATS = ("standard", "json")

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUPS = 5

LINE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LINE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers; the request middleware writes its own access line
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")

# Attribute names present on every record, so anything else is caller context
_BUILTIN_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() == "true"


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object, including request context fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _BUILTIN_ATTRS and not key.startswith("_")
        )
        # Decimal amounts and datetimes are passed through extra={}
        return json.dumps(payload, default=str)


class LoggingConfig:
    """
    Where log records go and how they look.

    Attributes:
        log_level: Root level, one of LEVELS
        log_format: ``standard`` (one text line) or ``json``
        log_file: Path of the rotating log file
        enable_console: Write to stderr
        enable_file: Write to ``log_file``
        max_file_size: Bytes before the file rotates
        backup_count: Rotated files to keep
    """

    def __init__(
        self,
        log_level: str = "INFO",
        log_format: str = "standard",
        log_file: Optional[str] = None,
        enable_console: bool = True,
        enable_file: bool = False,
        max_file_size: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUPS,
    ):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Invalid log level: {log_level}. Must be one of {', '.join(LEVELS)}")
        if log_format not in FORMATS:
            raise ValueError(
                f"Invalid log format: {log_format}. Must be one of {', '.join(FORMATS)}"
            )
        if enable_file and not log_file:
            raise ValueError("log_file must be specified when enable_file is True")

        self.log_level = level
        self.log_format = log_format
        self.log_file = log_file
        self.enable_console = enable_console
        self.enable_file = enable_file
        self.max_file_size = max_file_size
        self.backup_count = backup_count

    @classmethod
    def from_env(cls, default_level: str = "INFO") -> "LoggingConfig":
        """
        Read LOG_LEVEL, LOG_FORMAT, LOG_FILE, LOG_CONSOLE, LOG_FILE_ENABLED,
        LOG_MAX_FILE_SIZE and LOG_BACKUP_COUNT.

        File output switches on by itself when LOG_FILE is set. The CLI
        passes ``default_level="WARNING"`` so commands stay quiet unless
        LOG_LEVEL says otherwise.
        """
        log_file = os.getenv("LOG_FILE") or None
        return cls(
            log_level=os.getenv("LOG_LEVEL", default_level),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            log_file=log_file,
            enable_console=_env_flag("LOG_CONSOLE", True),
            enable_file=_env_flag("LOG_FILE_ENABLED", log_file is not None),
            max_file_size=int(os.getenv("LOG_MAX_FILE_SIZE", str(DEFAULT_MAX_BYTES))),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", str(DEFAULT_BACKUPS))),
        )

    def formatter(self) -> logging.Formatter:
        if self.log_format == "json":
            return JSONFormatter()
        return logging.Formatter(fmt=LINE_FORMAT, datefmt=LINE_DATE_FORMAT)


def _clear_root_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def configure_logging(config: LoggingConfig) -> None:
    """
    Install console and/or file handlers on the root logger.

    Previously installed root handlers are removed first, so the CLI group
    and ``serve`` can both call this without doubling every line.
    """
    from timebill.utils.logging_utils import ContextFilter

    root = logging.getLogger()
    _clear_root_handlers(root)

    level = getattr(logging, config.log_level)
    root.setLevel(level)

    handlers = []
    if config.enable_console:
        handlers.append(logging.StreamHandler())
    if config.enable_file and config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.log_file,
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
            )
        )

    formatter = config.formatter()
    context_filter = ContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop all root handlers and go back to WARNING. Used by tests."""
    root = logging.getLogger()
    _clear_root_handlers(root)
    root.setLevel(logging.WARNING)
