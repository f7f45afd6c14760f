"""
Unit tests for logging configuration and formatters.
"""

import io
import json
import logging

import pytest

from tablesnap.core.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
    parse_level,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord("tablesnap.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logging.getLogger("tablesnap").handlers.clear()


class TestFormatters:
    """Tests for the log formatters."""

    def test_human_readable_context_suffix(self):
        """Test that table and run_id are appended."""
        line = HumanReadableFormatter(include_timestamp=False).format(
            make_record(table="users", run_id="r1")
        )
        assert line == "tablesnap.test - INFO - hello [table=users run_id=r1]"

    def test_human_readable_without_context(self):
        """Test that no suffix is added without context."""
        line = HumanReadableFormatter(include_timestamp=False).format(make_record())
        assert line == "tablesnap.test - INFO - hello"

    def test_structured_output(self):
        """Test the JSON log line."""
        entry = json.loads(StructuredFormatter().format(make_record(table="users")))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["table"] == "users"
        assert "timestamp" in entry
        assert "run_id" not in entry


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_single_handler(self):
        """Test that reconfiguring replaces the handler."""
        configure_logging()
        logger = configure_logging(level=logging.DEBUG)

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_structured_stream(self):
        """Test JSON output to a custom stream."""
        stream = io.StringIO()
        configure_logging(structured=True, stream=stream)

        logging.getLogger("tablesnap.snapshot").info("done", extra={"table": "t"})

        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "done"
        assert entry["table"] == "t"


class TestParseLevel:
    """Tests for parse_level."""

    @pytest.mark.parametrize(
        "name,expected",
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (None, logging.INFO), ("bogus", logging.INFO)],
    )
    def test_levels(self, name, expected):
        assert parse_level(name) == expected
