"""Bridge from the standard :mod:`logging` module.

:class:`CloudLoggingHandler` turns ``logging.LogRecord`` objects into
:class:`~gcplog.record.Record` objects and writes them through a
:class:`~gcplog.handler.GCPLogHandler`, so existing ``logging.getLogger()``
call sites produce Cloud Logging JSON with trace correlation.

Usage:
    from gcplog.stdlib import configure_logging
    configure_logging(HandlerOptions(project_id="my-project"))
"""

import logging
from datetime import datetime
from typing import TextIO

from .config import HandlerOptions
from .handler import GCPLogHandler
from .record import Attr, Record
from .severity import (
    LEVEL_CRITICAL,
    LEVEL_DEBUG,
    LEVEL_DEFAULT,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_WARNING,
)

# Ascending: the highest stdlib level not above the record's level wins.
_STDLIB_LEVELS: tuple[tuple[int, int], ...] = (
    (logging.NOTSET, LEVEL_DEFAULT),
    (logging.DEBUG, LEVEL_DEBUG),
    (logging.INFO, LEVEL_INFO),
    (logging.WARNING, LEVEL_WARNING),
    (logging.ERROR, LEVEL_ERROR),
    (logging.CRITICAL, LEVEL_CRITICAL),
)

# LogRecord attributes that are not user-supplied ``extra`` fields.
_RESERVED_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)


def level_from_stdlib(levelno: int) -> int:
    """Map a :mod:`logging` level number onto a gcplog level."""
    level = LEVEL_DEFAULT
    for stdlib_level, mapped in _STDLIB_LEVELS:
        if levelno < stdlib_level:
            break
        level = mapped
    return level


class CloudLoggingHandler(logging.Handler):
    """``logging.Handler`` writing Cloud Logging structured JSON.

    The logger name becomes a ``logger`` attribute, ``extra={...}`` fields
    become attributes, and exception info is attached as ``exception``. The
    trace ids come from the OpenTelemetry context current at emit time.
    """

    def __init__(self, handler: GCPLogHandler, level: int = logging.NOTSET):
        super().__init__(level)
        self.gcp_handler = handler

    def to_record(self, record: logging.LogRecord) -> Record:
        rec = Record(
            datetime.fromtimestamp(record.created).astimezone(),
            level_from_stdlib(record.levelno),
            record.getMessage(),
        )
        rec.add_attrs(Attr.of("logger", record.name))
        for key, value in record.__dict__.items():
            if key in _RESERVED_FIELDS or key.startswith("_"):
                continue
            rec.add_attrs(Attr.of(key, value))
        if record.exc_info and record.exc_info[0] is not None:
            formatter = self.formatter or logging.Formatter()
            rec.add_attrs(Attr.of("exception", formatter.formatException(record.exc_info)))
        if record.stack_info:
            rec.add_attrs(Attr.of("stack", record.stack_info))
        return rec

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.gcp_handler.handle(self.to_record(record))
        except Exception:
            self.handleError(record)


def configure_logging(
    options: HandlerOptions | None = None,
    stream: TextIO | None = None,
    logger: logging.Logger | None = None,
) -> CloudLoggingHandler:
    """Route ``logger`` (the root logger by default) through Cloud Logging JSON.

    Existing handlers of that logger are replaced and its level is set so
    that records at ``options.level`` and above reach the handler.
    """
    options = options or HandlerOptions()
    target = logger if logger is not None else logging.getLogger()
    handler = CloudLoggingHandler(GCPLogHandler(stream, options))
    target.handlers = [handler]
    target.setLevel(_stdlib_threshold(options.level))
    return handler


def _stdlib_threshold(level: int) -> int:
    """Lowest stdlib level whose mapped level is at least ``level``."""
    for stdlib_level, mapped in _STDLIB_LEVELS:
        if mapped >= level:
            return stdlib_level
    return logging.CRITICAL + 1