"""OpenTelemetry trace correlation for Cloud Logging.

When a project id is configured and the execution context carries an active
span, three attributes are appended to the record so that Cloud Logging can
link the entry to its trace:

* ``logging.googleapis.com/trace``: ``projects/<project>/traces/<trace id>``
* ``logging.googleapis.com/spanId``: the span id as 16 hex characters
* ``logging.googleapis.com/trace_sampled``: the sampled flag

See https://cloud.google.com/logging/docs/structured-logging.
"""

from dataclasses import dataclass

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import format_span_id, format_trace_id

from .record import Attr, Record, Value

TRACE_KEY = "logging.googleapis.com/trace"
SPAN_ID_KEY = "logging.googleapis.com/spanId"
TRACE_SAMPLED_KEY = "logging.googleapis.com/trace_sampled"

# Trace attributes pass through the rewrite chain like any other attribute,
# so none of them may be a key the built-in step renames.
TRACE_KEYS = (TRACE_KEY, SPAN_ID_KEY, TRACE_SAMPLED_KEY)


@dataclass(frozen=True)
class TraceContext:
    """Trace and span identifiers of the active span."""

    trace_id: int
    span_id: int
    sampled: bool = False

    @property
    def trace_id_hex(self) -> str:
        return format_trace_id(self.trace_id)

    @property
    def span_id_hex(self) -> str:
        return format_span_id(self.span_id)

    def resource_name(self, project_id: str) -> str:
        return f"projects/{project_id}/traces/{self.trace_id_hex}"


def trace_context_from(context: Context | None = None) -> TraceContext | None:
    """Return the active trace in ``context``, or ``None`` if there is none.

    ``None`` means the current context.
    """
    span_context = trace.get_current_span(context).get_span_context()
    if span_context.trace_id == trace.INVALID_TRACE_ID:
        return None
    return TraceContext(
        trace_id=span_context.trace_id,
        span_id=span_context.span_id,
        sampled=span_context.trace_flags.sampled,
    )


def enrich(record: Record, context: Context | None, project_id: str) -> None:
    """Append the trace attributes to ``record`` if there is anything to add.

    Nothing is added when ``project_id`` is empty or no trace is active.
    Existing attributes are never touched.
    """
    if not project_id:
        return
    tc = trace_context_from(context)
    if tc is None:
        return
    record.add_attrs(
        Attr(TRACE_KEY, Value.string(tc.resource_name(project_id))),
        Attr(SPAN_ID_KEY, Value.string(tc.span_id_hex)),
        Attr.of(TRACE_SAMPLED_KEY, tc.sampled),
    )
