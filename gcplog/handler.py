"""Record handler producing Cloud Logging structured JSON.

See https://cloud.google.com/logging/docs/structured-logging for the
fields Cloud Logging picks out of a JSON log line.
"""

import sys
from typing import Iterable, TextIO

from opentelemetry.context import Context

from .config import HandlerOptions
from .encoder import JSONEncoder
from .record import Attr, Record
from .rewrite import RewriteChain
from .trace import enrich


class GCPLogHandler:
    """
    JSON handler whose output is suitable for Cloud Logging.

    The built-in rewrite (``severity``, ``message``, RFC 3339 ``time``) runs
    before ``options.replace_attr``; with a non-empty ``options.project_id``
    each record also gets the trace attributes of the active span.

    Example:
        >>> import sys
        >>> from datetime import datetime, timezone
        >>> from gcplog import LEVEL_INFO, HandlerOptions, Record
        >>> handler = GCPLogHandler(sys.stdout, HandlerOptions(project_id="my-project"))
        >>> t = datetime(2024, 1, 2, tzinfo=timezone.utc)
        >>> handler.handle(Record(t, LEVEL_INFO, "ready", port=8080))
        {"time":"2024-01-02T00:00:00Z","severity":"INFO","message":"ready","port":8080}
    """

    def __init__(self, writer: TextIO | None = None, options: HandlerOptions | None = None):
        if options is None:
            options = HandlerOptions()
        self._options = options
        self._chain = RewriteChain.build(options.replace_attr)
        self._encoder = JSONEncoder(
            writer if writer is not None else sys.stdout,
            level=options.level,
            replace_attr=self._chain,
        )

    @property
    def options(self) -> HandlerOptions:
        return self._options

    @property
    def project_id(self) -> str:
        return self._options.project_id

    def enabled(self, level: int) -> bool:
        return self._encoder.enabled(level)

    def handle(self, record: Record, context: Context | None = None) -> None:
        """Write ``record`` as one JSON line.

        ``context`` is the OpenTelemetry context the trace is read from;
        ``None`` means the current context. Errors from the underlying
        writer propagate unchanged.
        """
        # the caller's record is left untouched
        record = record.clone()
        enrich(record, context, self._options.project_id)
        self._encoder.handle(record)

    def _derive(self, encoder: JSONEncoder) -> "GCPLogHandler":
        h = GCPLogHandler.__new__(GCPLogHandler)
        h._options = self._options
        h._chain = self._chain
        h._encoder = encoder
        return h

    def with_attrs(self, attrs: Iterable[Attr]) -> "GCPLogHandler":
        return self._derive(self._encoder.with_attrs(attrs))

    def with_group(self, name: str) -> "GCPLogHandler":
        return self._derive(self._encoder.with_group(name))
