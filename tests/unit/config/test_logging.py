"""Unit tests for logging processors."""

import logging

import pytest
import structlog

from bizdesk.config import get_settings
from bizdesk.config.logging import (
    QUIET_LOGGERS,
    REDACTED,
    add_app_context,
    build_processors,
    configure_logging,
    redact_secrets,
)


class TestProcessors:
    def test_app_context(self):
        event = add_app_context(None, "info", {"event": "sweep_complete"})

        assert event["app"] == get_settings().app_name
        assert event["env"] == get_settings().environment

    def test_app_context_keeps_explicit_values(self):
        event = add_app_context(None, "info", {"event": "x", "app": "worker"})

        assert event["app"] == "worker"

    def test_redacts_credentials(self):
        event = redact_secrets(
            None,
            "info",
            {"event": "smtp_login", "smtp_user": "mailer", "smtp_password": "hunter2", "host": "mx"},
        )

        assert event["smtp_user"] == REDACTED
        assert event["smtp_password"] == REDACTED
        assert event["host"] == "mx"

    def test_leaves_empty_secrets_alone(self):
        event = redact_secrets(None, "info", {"event": "smtp_login", "smtp_password": None})

        assert event["smtp_password"] is None

    def test_redacts_headers(self):
        event = redact_secrets(
            None,
            "info",
            {"event": "request", "headers": {"Authorization": "Bearer abc", "X-User-Id": "7"}},
        )

        assert event["headers"] == {"Authorization": REDACTED, "X-User-Id": "7"}

    @pytest.mark.parametrize(
        ("environment", "renderer"),
        [
            ("development", structlog.dev.ConsoleRenderer),
            ("production", structlog.processors.JSONRenderer),
        ],
    )
    def test_renderer_by_environment(self, environment, renderer):
        processors = build_processors(environment)

        assert processors[0] is structlog.contextvars.merge_contextvars
        assert isinstance(processors[-1], renderer)


class TestConfigureLogging:
    def test_level_override(self):
        configure_logging("debug")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == QUIET_LOGGERS["httpx"]

    def test_quiet_loggers_follow_a_stricter_level(self):
        configure_logging("ERROR")

        assert logging.getLogger().level == logging.ERROR
        assert logging.getLogger("httpx").level == logging.ERROR

        configure_logging()
