"""Tests for the standard logging bridge."""

import json
import logging

import pytest
from opentelemetry import context as otel_context

from gcplog import TRACE_KEY, GCPLogHandler, HandlerOptions
from gcplog.severity import (
    LEVEL_CRITICAL,
    LEVEL_DEBUG,
    LEVEL_DEFAULT,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_NOTICE,
    LEVEL_WARNING,
)
from gcplog.stdlib import CloudLoggingHandler, configure_logging, level_from_stdlib


@pytest.fixture
def std_logger(buf):
    logger = logging.getLogger("gcplog.tests.stdlib")
    logger.propagate = False
    logger.handlers = [CloudLoggingHandler(GCPLogHandler(buf, HandlerOptions(project_id="p")))]
    logger.setLevel(logging.DEBUG)
    yield logger
    logger.handlers = []


def entries(buf) -> list[dict]:
    return [json.loads(line) for line in buf.getvalue().splitlines()]


@pytest.mark.parametrize(
    "levelno,want",
    [
        (logging.NOTSET, LEVEL_DEFAULT),
        (5, LEVEL_DEFAULT),
        (logging.DEBUG, LEVEL_DEBUG),
        (logging.INFO, LEVEL_INFO),
        (25, LEVEL_INFO),
        (logging.WARNING, LEVEL_WARNING),
        (logging.ERROR, LEVEL_ERROR),
        (logging.CRITICAL, LEVEL_CRITICAL),
        (99, LEVEL_CRITICAL),
    ],
)
def test_level_from_stdlib(levelno, want):
    assert level_from_stdlib(levelno) == want


class TestCloudLoggingHandler:
    def test_basic_fields(self, buf, std_logger):
        std_logger.warning("disk at %d%%", 91, extra={"volume": "/data"})
        entry = entries(buf)[0]
        assert entry["severity"] == "WARNING"
        assert entry["message"] == "disk at 91%"
        assert entry["logger"] == "gcplog.tests.stdlib"
        assert entry["volume"] == "/data"
        assert "levelname" not in entry

    def test_exception_attached(self, buf, std_logger):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            std_logger.exception("failed")
        entry = entries(buf)[0]
        assert entry["severity"] == "ERROR"
        assert "RuntimeError: boom" in entry["exception"]

    def test_trace_from_current_context(self, buf, std_logger, sampled_context):
        token = otel_context.attach(sampled_context)
        try:
            std_logger.info("traced")
        finally:
            otel_context.detach(token)
        std_logger.info("untraced")
        traced, untraced = entries(buf)
        assert traced[TRACE_KEY] == "projects/p/traces/01000000000000000000000000000000"
        assert TRACE_KEY not in untraced

    def test_write_errors_go_to_handle_error(self, monkeypatch):
        class Broken:
            def write(self, s):
                raise OSError("closed")

        handler = CloudLoggingHandler(GCPLogHandler(Broken()))
        calls = []
        monkeypatch.setattr(handler, "handleError", calls.append)
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        handler.emit(record)
        assert calls == [record]


class TestConfigureLogging:
    def test_root_logger_setup(self, buf):
        logger = logging.getLogger("gcplog.tests.configure")
        logger.propagate = False
        try:
            handler = configure_logging(HandlerOptions(level=LEVEL_NOTICE), buf, logger)
            assert logger.handlers == [handler]
            assert logger.level == logging.WARNING
            logger.info("dropped")
            logger.warning("kept")
        finally:
            logger.handlers = []
        assert [e["message"] for e in entries(buf)] == ["kept"]
