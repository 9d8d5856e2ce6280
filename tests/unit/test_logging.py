"""Unit tests for logging setup."""

import logging

import structlog

from e2e_sandbox.config import settings
from e2e_sandbox.utils.logging import get_logger, setup_logging


class TestSetupLogging:
    """Test renderer and level selection."""

    def teardown_method(self):
        setup_logging()

    def test_json_renderer(self, monkeypatch):
        monkeypatch.setattr(settings, "log_format", "json")

        setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self, monkeypatch):
        monkeypatch.setattr(settings, "log_format", "console")

        setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_events_reach_stdlib_logging(self, monkeypatch, caplog):
        monkeypatch.setattr(settings, "log_format", "json")
        monkeypatch.setattr(settings, "log_level", "INFO")
        setup_logging()

        with caplog.at_level(logging.INFO):
            get_logger("e2e_sandbox.test").info("Sandbox reset", context="/tmp/x")

        assert "Sandbox reset" in caplog.text
        assert "/tmp/x" in caplog.text
