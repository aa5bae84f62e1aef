"""Tests for the Logger front-end."""

import json
from unittest.mock import MagicMock

import pytest

from gcplog import (
    LEVEL_CRITICAL,
    LEVEL_DEBUG,
    LEVEL_EMERGENCY,
    LEVEL_INFO,
    TRACE_KEY,
    GCPLogHandler,
    HandlerOptions,
    Logger,
    new,
)


def parse(buf) -> list[dict]:
    return [json.loads(line) for line in buf.getvalue().splitlines()]


class TestLogger:
    def test_level_methods(self, buf):
        log = new(buf, HandlerOptions(level=-100))
        log.default("a")
        log.debug("b")
        log.info("c")
        log.notice("d")
        log.warning("e")
        log.error("f")
        log.critical("g")
        log.alert("h")
        log.emergency("i")
        assert [e["severity"] for e in parse(buf)] == [
            "DEFAULT",
            "DEBUG",
            "INFO",
            "NOTICE",
            "WARNING",
            "ERROR",
            "CRITICAL",
            "ALERT",
            "EMERGENCY",
        ]

    def test_disabled_level_skips_handler(self):
        handler = MagicMock()
        handler.enabled.return_value = False
        Logger(handler).debug("quiet")
        handler.enabled.assert_called_once_with(LEVEL_DEBUG)
        handler.handle.assert_not_called()

    def test_default_minimum_is_info(self, buf):
        log = new(buf)
        log.debug("hidden")
        log.info("shown")
        assert [e["message"] for e in parse(buf)] == ["shown"]

    def test_attributes(self, buf):
        new(buf).info("Failed to connect", "host", "localhost", port=8765)
        entry = parse(buf)[0]
        assert entry["host"] == "localhost"
        assert entry["port"] == 8765
        assert entry["time"].endswith("Z") or entry["time"][-6] in "+-"

    def test_keywords_may_use_parameter_names(self, buf):
        log = new(buf)
        log.info("m", message="x", level=3)
        log.log(LEVEL_INFO, "n", message="y")
        first, second = parse(buf)
        assert first["severity"] == "INFO"
        assert first["level"] == 3
        assert second["severity"] == "INFO"

    def test_context_is_passed(self, buf, sampled_context):
        log = new(buf, HandlerOptions(project_id="my-project"))
        log.critical("This is a critical log.", context=sampled_context)
        entry = parse(buf)[0]
        assert entry["severity"] == "CRITICAL"
        assert entry[TRACE_KEY].startswith("projects/my-project/traces/")

    def test_with_and_group(self, buf):
        log = new(buf).with_(service="api").with_group("req")
        log.info("m", method="GET")
        entry = parse(buf)[0]
        assert entry["service"] == "api"
        assert entry["req"] == {"method": "GET"}

    def test_with_nothing_returns_same_logger(self):
        log = new(MagicMock())
        assert log.with_() is log
        assert log.with_group("") is log

    def test_handler_errors_propagate(self):
        writer = MagicMock()
        writer.write.side_effect = BrokenPipeError()
        with pytest.raises(BrokenPipeError):
            new(writer).emergency("This is an emergency log!")

    def test_enabled(self):
        log = Logger(GCPLogHandler(MagicMock(), HandlerOptions(level=LEVEL_CRITICAL)))
        assert log.enabled(LEVEL_EMERGENCY)
        assert not log.enabled(LEVEL_INFO)
