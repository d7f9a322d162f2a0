"""
Unit tests for structured JSON logging.
"""

import json
import logging
import sys

import pytest

from context_compactor.observability import PACKAGE_LOGGER, JSONFormatter, setup_logging


def make_record(message: str = "optimized", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="context_compactor.token_optimization.optimizer",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test JSON log formatting."""

    def test_base_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "context_compactor.token_optimization.optimizer"
        assert data["message"] == "optimized"
        assert data["line"] == 42
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        """Test that extra fields are included and reserved attributes are not."""
        data = json.loads(JSONFormatter().format(make_record(tier="aggressive", token_budget=500)))

        assert data["tier"] == "aggressive"
        assert data["token_budget"] == 500
        assert "args" not in data
        assert "msg" not in data

    def test_non_serializable_extra(self):
        """Test that values json cannot encode are stringified."""
        data = json.loads(JSONFormatter().format(make_record(path=object())))
        assert data["path"].startswith("<object object")

    def test_exception(self):
        try:
            raise ValueError("bad ratio")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad ratio" in data["exception"]


class TestSetupLogging:
    """Test package logger setup."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger(PACKAGE_LOGGER)
        handlers, level = list(logger.handlers), logger.level
        yield
        logger.handlers = handlers
        logger.setLevel(level)

    def test_installs_json_handler(self):
        logger = setup_logging("debug")

        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_idempotent(self):
        """Test that repeated setup does not stack handlers."""
        setup_logging(logging.INFO)
        logger = setup_logging(logging.WARNING)

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_level_from_settings(self, monkeypatch):
        """Test that the level defaults to COMPACTOR_LOG_LEVEL."""
        monkeypatch.setenv("COMPACTOR_LOG_LEVEL", "warning")

        logger = setup_logging()

        assert logger.level == logging.WARNING
