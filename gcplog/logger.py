"""Logger front-end over :class:`~gcplog.handler.GCPLogHandler`.

Provides :class:`Logger`, a thin wrapper with one method per Cloud Logging
severity, and :func:`new`, which builds a logger writing to stdout.
"""

from datetime import datetime
from typing import Any, TextIO

from opentelemetry.context import Context

from .config import HandlerOptions
from .handler import GCPLogHandler
from .record import Record, args_to_attrs
from .severity import (
    LEVEL_ALERT,
    LEVEL_CRITICAL,
    LEVEL_DEBUG,
    LEVEL_DEFAULT,
    LEVEL_EMERGENCY,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_NOTICE,
    LEVEL_WARNING,
)


class Logger:
    """Convenience emitter for a :class:`GCPLogHandler`.

    Each call checks ``handler.enabled`` first, so disabled levels cost no
    record construction. Attributes are given slog-style (``"key", value``
    pairs or :class:`~gcplog.record.Attr` objects) and/or as keywords.

    Example:
        >>> log = Logger(GCPLogHandler(sys.stdout, HandlerOptions(project_id="p")))
        >>> log.info("Connection established", peer_id="abc123")
        >>> log.error("Failed to connect", "host", "localhost", port=8765)
        >>>
        >>> # trace ids are taken from the given (or current) OTel context
        >>> log.critical("Payment backend down", context=request_ctx)
        >>>
        >>> child = log.with_(request_id="r-42").with_group("db")
    """

    def __init__(self, handler: GCPLogHandler):
        self._handler = handler

    @property
    def handler(self) -> GCPLogHandler:
        return self._handler

    def enabled(self, level: int) -> bool:
        return self._handler.enabled(level)

    def log(
        self,
        level: int,
        message: str,
        /,
        *args: Any,
        context: Context | None = None,
        **attrs: Any,
    ) -> None:
        """Emit a record at ``level``.

        Errors from the handler (i.e. the output writer) propagate.
        """
        if not self._handler.enabled(level):
            return
        record = Record(datetime.now().astimezone(), level, message, *args, **attrs)
        self._handler.handle(record, context)

    def default(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_DEFAULT, message, *args, context=context, **attrs)

    def debug(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_DEBUG, message, *args, context=context, **attrs)

    def info(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_INFO, message, *args, context=context, **attrs)

    def notice(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_NOTICE, message, *args, context=context, **attrs)

    def warning(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_WARNING, message, *args, context=context, **attrs)

    def error(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_ERROR, message, *args, context=context, **attrs)

    def critical(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_CRITICAL, message, *args, context=context, **attrs)

    def alert(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_ALERT, message, *args, context=context, **attrs)

    def emergency(self, message: str, /, *args: Any, context: Context | None = None, **attrs: Any) -> None:
        self.log(LEVEL_EMERGENCY, message, *args, context=context, **attrs)

    def with_(self, *args: Any, **attrs: Any) -> "Logger":
        """Derive a logger that adds the given attributes to every record."""
        bound = args_to_attrs(args, attrs)
        if not bound:
            return self
        return Logger(self._handler.with_attrs(bound))

    def with_group(self, name: str) -> "Logger":
        """Derive a logger that nests all later attributes under ``name``."""
        if not name:
            return self
        return Logger(self._handler.with_group(name))


def new(writer: TextIO | None = None, options: HandlerOptions | None = None) -> Logger:
    """Return a :class:`Logger` writing Cloud Logging JSON to ``writer`` (stdout by default)."""
    return Logger(GCPLogHandler(writer, options))
