"""Convenience exports for the :mod:`gcplog` package."""

from .config import HandlerOptions, configure_tracing, options_from_env  # noqa: F401
from .encoder import JSONEncoder  # noqa: F401
from .exporters import CloudLoggingExporter  # noqa: F401
from .handler import GCPLogHandler  # noqa: F401
from .logger import Logger, new  # noqa: F401
from .mechanism import GCPLogException  # noqa: F401
from .record import (  # noqa: F401
    LEVEL_KEY,
    MESSAGE_KEY,
    TIME_KEY,
    Attr,
    Kind,
    Record,
    Value,
)
from .rewrite import (  # noqa: F401
    ReplaceAttr,
    RewriteChain,
    format_timestamp,
    rewrite_attr,
)
from .rx import RecordSink, records_to  # noqa: F401
from .severity import (  # noqa: F401
    DEFAULT_SEVERITY_TABLE,
    LEVEL_ALERT,
    LEVEL_CRITICAL,
    LEVEL_DEBUG,
    LEVEL_DEFAULT,
    LEVEL_EMERGENCY,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_NOTICE,
    LEVEL_WARNING,
    SeverityTable,
    default_level_name,
    level_from_name,
    map_severity,
)
from .stdlib import CloudLoggingHandler, configure_logging  # noqa: F401
from .trace import (  # noqa: F401
    SPAN_ID_KEY,
    TRACE_KEY,
    TRACE_SAMPLED_KEY,
    TraceContext,
    enrich,
    trace_context_from,
)

__all__ = [
    # severity
    "LEVEL_DEFAULT",
    "LEVEL_DEBUG",
    "LEVEL_INFO",
    "LEVEL_NOTICE",
    "LEVEL_WARNING",
    "LEVEL_ERROR",
    "LEVEL_CRITICAL",
    "LEVEL_ALERT",
    "LEVEL_EMERGENCY",
    "SeverityTable",
    "DEFAULT_SEVERITY_TABLE",
    "map_severity",
    "default_level_name",
    "level_from_name",

    # records
    "Kind",
    "Value",
    "Attr",
    "Record",
    "TIME_KEY",
    "LEVEL_KEY",
    "MESSAGE_KEY",

    # rewrite
    "ReplaceAttr",
    "RewriteChain",
    "rewrite_attr",
    "format_timestamp",

    # trace
    "TRACE_KEY",
    "SPAN_ID_KEY",
    "TRACE_SAMPLED_KEY",
    "TraceContext",
    "trace_context_from",
    "enrich",

    # handler
    "HandlerOptions",
    "options_from_env",
    "configure_tracing",
    "JSONEncoder",
    "GCPLogHandler",
    "GCPLogException",
    "Logger",
    "new",

    # integrations
    "CloudLoggingHandler",
    "configure_logging",
    "CloudLoggingExporter",
    "RecordSink",
    "records_to",
]
