"""Tests for centralized logging configuration."""

import json
import logging
import os
from unittest.mock import patch

import pytest

from timebill.config.logging_config import (
    JSONFormatter,
    LoggingConfig,
    configure_logging,
    get_logger,
    reset_logging,
)
from timebill.utils.logging_utils import ContextFilter, LogContext


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_configuration(self):
        """Test default logging configuration."""
        config = LoggingConfig()

        assert config.log_level == "INFO"
        assert config.log_format == "standard"
        assert config.log_file is None
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.max_file_size == 10 * 1024 * 1024
        assert config.backup_count == 5

    def test_environment_variable_override(self):
        """Test configuration from environment variables."""
        with patch.dict(
            os.environ,
            {
                "LOG_LEVEL": "DEBUG",
                "LOG_FORMAT": "json",
                "LOG_FILE": "/tmp/timebill-test.log",
                "LOG_MAX_FILE_SIZE": "5242880",
                "LOG_BACKUP_COUNT": "3",
            },
        ):
            config = LoggingConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.enable_file is True
        assert config.max_file_size == 5242880
        assert config.backup_count == 3

    def test_from_env_default_level(self):
        """Test that the caller's default applies when LOG_LEVEL is unset."""
        with patch.dict(os.environ, {}, clear=True):
            config = LoggingConfig.from_env(default_level="WARNING")

        assert config.log_level == "WARNING"
        assert config.enable_file is False

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(log_level="INVALID")

    def test_invalid_log_format(self):
        with pytest.raises(ValueError, match="Invalid log format"):
            LoggingConfig(log_format="xml")

    def test_file_logging_enabled_without_path(self):
        with pytest.raises(ValueError, match="log_file must be specified"):
            LoggingConfig(enable_file=True, log_file=None)


class TestConfigureLogging:
    """Test configure_logging function."""

    def teardown_method(self):
        """Reset logging after each test."""
        reset_logging()

    def test_console_handler_configuration(self):
        configure_logging(LoggingConfig(log_level="DEBUG"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert any(isinstance(f, ContextFilter) for f in root.handlers[0].filters)

    def test_configure_twice_does_not_duplicate_handlers(self):
        configure_logging(LoggingConfig())
        configure_logging(LoggingConfig())

        assert len(logging.getLogger().handlers) == 1

    def test_file_handler_creates_directory(self, tmp_path):
        """Test file logging writes to a nested path."""
        log_file = tmp_path / "logs" / "timebill.log"
        configure_logging(
            LoggingConfig(enable_console=False, enable_file=True, log_file=str(log_file))
        )

        get_logger("timebill.test").warning("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "written to file" in log_file.read_text()

    def test_noisy_loggers_quieted(self):
        configure_logging(LoggingConfig(log_level="DEBUG"))

        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_reset_logging(self):
        configure_logging(LoggingConfig(log_level="DEBUG"))

        reset_logging()

        assert logging.getLogger().handlers == []
        assert logging.getLogger().level == logging.WARNING


class TestJSONFormatter:
    """Test JSON log formatting."""

    def _record(self, message="Created invoice", **extra):
        record = logging.LogRecord(
            name="timebill.services",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg=message,
            args=(),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "timebill.services"
        assert data["message"] == "Created invoice"

    def test_extra_fields_included(self):
        """Test that fields from extra={} and LogContext are kept."""
        data = json.loads(JSONFormatter().format(self._record(correlation_id="abc", status_code=201)))

        assert data["correlation_id"] == "abc"
        assert data["status_code"] == 201

    def test_non_json_values_stringified(self):
        from decimal import Decimal

        data = json.loads(JSONFormatter().format(self._record(total=Decimal("10.50"))))

        assert data["total"] == "10.50"

    def test_context_filter_adds_fields(self):
        record = self._record()

        with LogContext(correlation_id="req-9"):
            ContextFilter().filter(record)

        assert record.correlation_id == "req-9"
