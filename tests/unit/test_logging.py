"""Unit tests for structured logging setup."""

import json
import os

import pytest
import structlog

from code_commenter.core.logging import configure_logging, get_logger, get_null_logger


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults after a test configures it."""
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging and get_logger."""

    def test_events_written_to_log_file(self, temp_dir, reset_structlog):
        """Test events are appended to the log file as JSON with the logger name."""
        path = os.path.join(temp_dir, "commenter.log")
        configure_logging("info", path)

        logger = get_logger("processor")
        logger.info("file_processing_started", file_path="a.js")
        logger.debug("function_params_extracted")

        with open(path, encoding="utf-8") as f:
            events = [json.loads(line) for line in f if line.strip()]
        assert len(events) == 1
        assert events[0]["event"] == "file_processing_started"
        assert events[0]["logger"] == "processor"
        assert events[0]["file_path"] == "a.js"
        assert events[0]["level"] == "info"
        assert "timestamp" in events[0]

    def test_unknown_level_uses_default(self, temp_dir, reset_structlog):
        """Test an unknown level name falls back to INFO."""
        path = os.path.join(temp_dir, "commenter.log")
        configure_logging("verbose", path)

        logger = get_logger("cli")
        logger.debug("hidden")
        logger.warning("shown")

        with open(path, encoding="utf-8") as f:
            events = [json.loads(line)["event"] for line in f if line.strip()]
        assert events == ["shown"]


class TestNullLogger:
    """Tests for get_null_logger."""

    def test_discards_events(self, capsys):
        """Test the null logger writes nothing."""
        result = get_null_logger().warning("render_failed", function="f")
        assert result["event"] == "render_failed"
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
