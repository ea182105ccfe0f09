"""Tests for structured logging."""

import json
import logging
import sys

from artshelf.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self) -> None:
        """Test setting and getting correlation ID."""
        test_id = "scan-123-abc"
        result = set_correlation_id(test_id)
        assert result == test_id
        assert get_correlation_id() == test_id

    def test_set_correlation_id_generates_uuid_when_none(self) -> None:
        """Test that setting None generates a UUID."""
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_stamps_records(self) -> None:
        """Test that the filter copies the current id onto log records."""
        set_correlation_id("scan-456")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "scan-456"


class TestFormatters:
    """Test the JSON and compact formatters."""

    def test_json_formatter_includes_correlation_id(self) -> None:
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = logging.LogRecord(
            "artshelf.test", logging.WARNING, __file__, 10, "Artist %s failed", ("B",), None
        )
        record.correlation_id = "scan-789"

        data = json.loads(formatter.format(record))

        assert data["message"] == "Artist B failed"
        assert data["level"] == "WARNING"
        assert data["logger"] == "artshelf.test"
        assert data["correlation_id"] == "scan-789"

    def test_compact_formatter_shows_root_cause_chain(self) -> None:
        try:
            try:
                raise OSError("disk gone")
            except OSError as e:
                raise RuntimeError("artist failed") from e
        except RuntimeError:
            exc_info = sys.exc_info()

        text = CompactExceptionFormatter().formatException(exc_info)

        lines = [line for line in text.splitlines() if line.startswith("╰─►")]
        assert lines == ["╰─► OSError: disk gone", "╰─► RuntimeError: artist failed"]


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self) -> None:
        """Test configuring logging with DEBUG level."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        logger = logging.getLogger("test")
        assert logger.getEffectiveLevel() <= logging.DEBUG

    def test_configure_logging_info_level(self) -> None:
        """Test configuring logging with INFO level."""
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        logger = logging.getLogger("test")
        assert logger.getEffectiveLevel() == logging.INFO

    def test_configure_logging_json_format(self) -> None:
        """Test configuring logging with JSON format."""
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")
        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CustomJsonFormatter)

    def test_reconfigure_does_not_duplicate_handlers(self) -> None:
        """Test that repeated configuration replaces the handler."""
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        assert len(logging.getLogger().handlers) == 1

    def test_quiets_third_party_loggers(self) -> None:
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("aiosqlite").level == logging.WARNING
