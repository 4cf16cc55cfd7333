"""
Tests for the structlog configuration.

Tests verify:
- JSON output uses ECS-style keys and the service name
- DEBUG logs are suppressed at INFO level
- Bound context is merged into events
"""

import json

import structlog

from bugsheet.core.logging import LogContext, configure_logging, get_logger


def _events(capsys) -> list[dict]:
    err = capsys.readouterr().err
    return [json.loads(line) for line in err.splitlines() if line.startswith("{")]


class TestJsonOutput:
    def test_ecs_fields(self, capsys):
        configure_logging(level="INFO", json_format=True, service="bugsheet-test")
        get_logger("bugsheet.test").info("reconcile.completed", bugs=3)

        (event,) = _events(capsys)
        assert event["event"] == "reconcile.completed"
        assert event["bugs"] == 3
        assert event["log.level"] == "info"
        assert event["service.name"] == "bugsheet-test"
        assert event["log.logger"] == "bugsheet.test"
        assert "@timestamp" in event

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger(__name__)
        logger.debug("hidden")
        logger.info("shown")

        assert [e["event"] for e in _events(capsys)] == ["shown"]


class TestLogContext:
    def test_context_bound_and_removed(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = get_logger(__name__)
        with LogContext(cycle=7):
            logger.info("inside")
        logger.info("outside")

        inside, outside = _events(capsys)
        assert inside["cycle"] == 7
        assert "cycle" not in outside


class TestGetLogger:
    def test_named_logger_binds_name(self):
        with structlog.testing.capture_logs() as logs:
            get_logger("bugsheet.teams.directory").info("teams.loaded", teams=2)

        assert logs == [
            {"event": "teams.loaded", "teams": 2, "logger_name": "bugsheet.teams.directory", "log_level": "info"}
        ]

    def test_unnamed_logger(self):
        with structlog.testing.capture_logs() as logs:
            get_logger().warning("plain")

        assert logs == [{"event": "plain", "log_level": "warning"}]
