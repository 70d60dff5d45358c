"""Tests for structured logging configuration."""

import json
import logging

import pytest
import structlog

from unifi_api.config import UnifiSettings
from unifi_api.logging import MASK, configure_from_settings, configure_logging, redact_secrets


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_json_output(self, capsys):
        """JSON format renders one object per event."""
        configure_logging(log_format="json", log_level="INFO")

        structlog.get_logger("unifi_api.test").info("login_successful", host="test.local")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "login_successful"
        assert record["host"] == "test.local"
        assert record["level"] == "info"

    def test_level_filters(self, capsys):
        """Events below the configured level are dropped."""
        configure_logging(log_format="json", log_level="WARNING")

        structlog.get_logger().debug("websocket_connecting")

        assert capsys.readouterr().out == ""

    def test_text_output(self, capsys):
        """Text format renders the event name."""
        configure_logging(log_format="text", log_level="DEBUG")

        structlog.get_logger().debug("websocket_connecting", endpoint="wss://x")

        assert "websocket_connecting" in capsys.readouterr().out

    def test_unknown_level_falls_back_to_info(self):
        """Unknown level names fall back to INFO."""
        configure_logging(log_format="json", log_level="LOUD")

        assert structlog.get_config()["wrapper_class"] is structlog.make_filtering_bound_logger(
            logging.INFO
        )

    def test_configure_from_settings(self, capsys):
        """Settings select format and level."""
        settings = UnifiSettings(
            host="test.local",
            username="admin",
            password="secret",
            log_format="json",
            log_level="ERROR",
        )
        configure_from_settings(settings)

        structlog.get_logger().warning("api_error")
        structlog.get_logger().error("websocket_error")

        out = capsys.readouterr().out
        assert "api_error" not in out
        assert "websocket_error" in out

    def test_secrets_masked(self, capsys):
        """Credential fields are masked in rendered output."""
        configure_logging(log_format="json", log_level="DEBUG")

        structlog.get_logger().debug("login_attempt", password="secret", cookies="unifises=abc")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["password"] == MASK
        assert record["cookies"] == MASK
        assert "secret" not in json.dumps(record)

    def test_transport_loggers_quietened(self):
        """httpx and websockets request chatter is raised to the transport level."""
        configure_logging(log_format="json", log_level="DEBUG", transport_level="ERROR")

        assert logging.getLogger("httpx").level == logging.ERROR
        assert logging.getLogger("websockets").level == logging.ERROR


class TestRedactSecrets:
    """Tests for the redact_secrets processor."""

    def test_leaves_other_keys(self):
        """Non-secret keys and empty secrets pass through unchanged."""
        event_dict = {"event": "login_successful", "host": "test.local", "csrf_token": ""}

        assert redact_secrets(None, "info", event_dict) == {
            "event": "login_successful",
            "host": "test.local",
            "csrf_token": "",
        }

    def test_key_match_ignores_case(self):
        """Header-style keys are matched regardless of case."""
        event_dict = {"X-CSRF-Token": "tok"}

        assert redact_secrets(None, "debug", event_dict) == {"X-CSRF-Token": MASK}
