"""OTel log-record exporter writing Cloud Logging structured JSON.

Provides :class:`CloudLoggingExporter`, which plugs a
:class:`~gcplog.handler.GCPLogHandler` into an OpenTelemetry
``LoggerProvider`` pipeline.
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from opentelemetry import trace
from opentelemetry._logs import SeverityNumber
from opentelemetry.context import Context
from opentelemetry.sdk._logs._internal import ReadableLogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

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

# OTel severity numbers come in blocks of four: TRACE 1-4, DEBUG 5-8, ...
_SEVERITY_BLOCKS = (
    LEVEL_DEFAULT,  # TRACE
    LEVEL_DEBUG,
    LEVEL_INFO,
    LEVEL_WARNING,
    LEVEL_ERROR,
    LEVEL_CRITICAL,  # FATAL
)


def level_from_severity_number(severity_number: SeverityNumber | None) -> int:
    """Map an OTel ``SeverityNumber`` onto a gcplog level."""
    if severity_number is None or severity_number.value <= 0:
        return LEVEL_DEFAULT
    block = min((severity_number.value - 1) // 4, len(_SEVERITY_BLOCKS) - 1)
    return _SEVERITY_BLOCKS[block]


def _record_context(log_record) -> Context:
    """Build the context carrying the log record's own trace ids.

    Export may run on a background thread, so the exporting thread's current
    context says nothing about the record.
    """
    trace_id = getattr(log_record, "trace_id", None)
    if trace_id:
        span_context = SpanContext(
            trace_id=trace_id,
            span_id=getattr(log_record, "span_id", None) or 0,
            is_remote=False,
            trace_flags=TraceFlags(getattr(log_record, "trace_flags", None) or 0),
        )
        return trace.set_span_in_context(NonRecordingSpan(span_context), Context())
    return getattr(log_record, "context", None) or Context()


class CloudLoggingExporter(LogRecordExporter):
    """OTel LogRecordExporter producing Cloud Logging structured JSON.

    The record body becomes ``message``, its attributes become top-level
    fields, and its trace/span ids become the ``logging.googleapis.com/*``
    trace fields (when the handler has a project id).

    Example:
        >>> from opentelemetry.sdk._logs import LoggerProvider
        >>> from opentelemetry.sdk._logs.export import SimpleLogRecordProcessor
        >>>
        >>> handler = GCPLogHandler(sys.stdout, HandlerOptions(project_id="my-project"))
        >>> provider = LoggerProvider()
        >>> provider.add_log_record_processor(
        ...     SimpleLogRecordProcessor(CloudLoggingExporter(handler))
        ... )
    """

    def __init__(self, handler: GCPLogHandler):
        self._handler = handler
        self._shutdown = False

    def to_record(self, log_record) -> Record:
        timestamp_ns = log_record.timestamp or getattr(log_record, "observed_timestamp", None) or 0
        if timestamp_ns:
            time = datetime.fromtimestamp(timestamp_ns / 1e9, tz=UTC)
        else:
            time = None
        body = log_record.body
        rec = Record(
            time,
            level_from_severity_number(log_record.severity_number),
            body if isinstance(body, str) else ("" if body is None else str(body)),
        )
        for key, value in (log_record.attributes or {}).items():
            rec.add_attrs(Attr.of(key, value))
        return rec

    def export(self, batch: Sequence[ReadableLogRecord]) -> LogRecordExportResult:
        """Write each record of the batch as one JSON line.

        Args:
            batch: Sequence of ReadableLogRecord objects to export.

        Returns:
            LogRecordExportResult.SUCCESS on success,
            LogRecordExportResult.FAILURE on a write error or after shutdown.
        """
        if self._shutdown:
            return LogRecordExportResult.FAILURE
        try:
            for readable_record in batch:
                log_record = readable_record.log_record
                self._handler.handle(self.to_record(log_record), _record_context(log_record))
            return LogRecordExportResult.SUCCESS
        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        self._shutdown = True

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Records are written as they are exported; nothing is buffered."""
        return True
