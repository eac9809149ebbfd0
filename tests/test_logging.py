"""Tests for logging and monitoring setup."""

import json

import pytest

from athena_tool.core.logging import get_logger, setup_logging
from athena_tool.core.monitoring import SENTRY_DSN_ENV, setup_sentry


@pytest.mark.unit
class TestSetupLogging:
    def test_setup_verbose(self):
        setup_logging(verbose=True)

    def test_setup_not_verbose(self):
        setup_logging(verbose=False)

    def test_get_logger_with_name(self):
        setup_logging()
        log = get_logger("poller")
        assert log is not None


@pytest.mark.unit
class TestLogOutput:
    def test_log_to_stderr(self, capsys):
        """Log output goes to stderr, not stdout."""
        setup_logging(verbose=True)
        get_logger().info("query submitted", handle="exec-1")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "query submitted" in captured.err

    def test_debug_filtered_when_not_verbose(self, capsys):
        setup_logging(verbose=False)
        get_logger().debug("execution polled")

        assert "execution polled" not in capsys.readouterr().err


@pytest.mark.unit
class TestSetupSentry:
    def test_disabled_without_dsn(self, monkeypatch):
        monkeypatch.delenv(SENTRY_DSN_ENV, raising=False)
        assert setup_sentry() is False

    def test_initializes_with_dsn(self, monkeypatch):
        monkeypatch.setenv(SENTRY_DSN_ENV, "https://public@example.invalid/1")
        calls = []
        monkeypatch.setattr(
            "athena_tool.core.monitoring.sentry_sdk.init",
            lambda **kwargs: calls.append(kwargs),
        )

        assert setup_sentry(environment="test") is True
        assert calls[0]["environment"] == "test"
        assert calls[0]["release"] == "0.1.0"


@pytest.mark.unit
def test_json_logs_are_json_lines(capsys):
    setup_logging(json_logs=True)
    get_logger("poller").info("execution polled", attempt=2)

    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["event"] == "execution polled"
    assert record["logger"] == "poller"
    assert record["attempt"] == 2
    setup_logging()
