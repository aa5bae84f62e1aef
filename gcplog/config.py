"""Handler options and OpenTelemetry tracing setup.

Provides :class:`HandlerOptions` (the configuration a
:class:`~gcplog.handler.GCPLogHandler` is built from),
:func:`options_from_env` (reads it from the process environment) and
:func:`configure_tracing` (a tracer provider for the trace ids that end up
in the log lines).
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

from .rewrite import ReplaceAttr
from .severity import LEVEL_INFO, level_from_name

logger = logging.getLogger("gcplog.config")

PROJECT_ENV_VARS = ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT")
LEVEL_ENV_VAR = "LOG_LEVEL"


@dataclass(frozen=True)
class HandlerOptions:
    """Configuration of a :class:`~gcplog.handler.GCPLogHandler`.

    Attributes:
        level: Minimum level that is written.
        replace_attr: Optional rewrite step that runs after the built-in
            Cloud Logging rewrite and sees its output.
        project_id: Google Cloud project id. Trace attributes are only added
            when this is non-empty.
    """

    level: int = LEVEL_INFO
    replace_attr: ReplaceAttr | None = None
    project_id: str = ""


def options_from_env(
    environ: Mapping[str, str] | None = None,
    **overrides,
) -> HandlerOptions:
    """Build options from environment variables.

    The project id is read from ``GOOGLE_CLOUD_PROJECT`` and then
    ``GCLOUD_PROJECT``; the minimum level from ``LOG_LEVEL`` (a severity or
    level name such as ``"notice"`` or ``"warn"``). Keyword ``overrides``
    replace any field afterwards.

    Raises:
        ValueError: if ``LOG_LEVEL`` names an unknown level.
    """
    env = os.environ if environ is None else environ

    project_id = ""
    for var in PROJECT_ENV_VARS:
        project_id = env.get(var, "")
        if project_id:
            break

    level = LEVEL_INFO
    level_name = env.get(LEVEL_ENV_VAR, "")
    if level_name:
        level = level_from_name(level_name)

    options = replace(HandlerOptions(level=level, project_id=project_id), **overrides)
    if not options.project_id:
        logger.warning(
            "No Google Cloud project id found in %s; trace correlation is disabled",
            " or ".join(PROJECT_ENV_VARS),
        )
    return options


def configure_tracing(
    options: HandlerOptions,
    service_name: str = "gcplog",
    span_exporter: SpanExporter | None = None,
    sample_ratio: float = 1.0,
) -> TracerProvider:
    """
    Create a TracerProvider for the project the handler writes logs to.

    The resource names the Google Cloud project (``cloud.account.id``), so
    exported spans land in the project that the ``logging.googleapis.com/trace``
    field of each log line points at. Root spans are sampled with
    ``sample_ratio`` and child spans follow their parent; that decision is what
    the handler writes as ``logging.googleapis.com/trace_sampled``.

    The provider is returned for explicit use and is NOT installed as the
    global provider.

    Args:
        options: Handler options; only ``project_id`` is used.
        service_name: Service identifier for resource attributes.
        span_exporter: Optional span exporter (e.g. a Cloud Trace or console
            exporter), attached through a BatchSpanProcessor.
        sample_ratio: Fraction of root spans that are sampled.

    Raises:
        ValueError: if ``sample_ratio`` is outside ``[0, 1]``.

    Example:
        >>> options = options_from_env()
        >>> tracer = configure_tracing(options, "checkout").get_tracer(__name__)
        >>> log = new(options=options)
        >>> with tracer.start_as_current_span("request"):
        ...     log.info("handled")  # carries logging.googleapis.com/trace
    """
    attributes = {"service.name": service_name, "cloud.provider": "gcp"}
    if options.project_id:
        attributes["cloud.account.id"] = options.project_id
    else:
        logger.warning("Tracing configured without a project id; log lines will not reference its traces")

    provider = TracerProvider(
        resource=Resource.create(attributes),
        sampler=ParentBased(TraceIdRatioBased(sample_ratio)),
    )
    if span_exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(span_exporter))
    return provider
