"""Unit tests for logger configuration."""

import io

import pytest
from loguru import logger as _logger

from feed_aggregation.logger import get_logger, level_for_verbosity, setup_logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Leave loguru with its default stderr handler after each test."""
    yield
    _logger.remove()
    setup_logger()


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_adds_handlers(self):
        """Test that setup_logger leaves a working logger."""
        _logger.remove()

        setup_logger()

        output = io.StringIO()
        handler_id = _logger.add(output, format="{message}")
        _logger.info("Test")
        assert "Test" in output.getvalue()
        _logger.remove(handler_id)

    def test_setup_logger_with_log_file(self, tmp_path):
        """Test that passing a log file enables file logging."""
        log_file = tmp_path / "logs" / "test.log"

        setup_logger(
            level="DEBUG",
            log_file=str(log_file),
            rotation="10 MB",
            retention="1 day",
        )

        _logger.debug("Test message")
        _logger.remove()  # Flushes the enqueued file sink

        content = log_file.read_text()
        assert "Test message" in content
        assert "DEBUG" in content

    def test_level_filters_messages(self, tmp_path):
        """Test messages below the configured level are dropped."""
        log_file = tmp_path / "level.log"

        setup_logger(level="WARNING", log_file=str(log_file))

        _logger.info("Quiet message")
        _logger.warning("Loud message")
        _logger.remove()

        content = log_file.read_text()
        assert "Loud message" in content
        assert "Quiet message" not in content


class TestLevelForVerbosity:
    """Tests for level_for_verbosity."""

    @pytest.mark.parametrize(
        "verbose,level",
        [(0, "INFO"), (1, "DEBUG"), (2, "TRACE"), (5, "TRACE"), (-1, "INFO")],
    )
    def test_levels(self, verbose, level):
        assert level_for_verbosity(verbose) == level


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_logger(self):
        """Test that get_logger returns a logger."""
        assert get_logger() is _logger

    def test_get_logger_binds_name(self):
        """Test that get_logger binds the module name."""
        output = io.StringIO()
        handler_id = _logger.add(output, format="{extra[name]} {message}")

        get_logger("feed_aggregation.test").info("Bound")

        _logger.remove(handler_id)
        assert "feed_aggregation.test Bound" in output.getvalue()
