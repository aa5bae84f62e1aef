"""Shared test fixtures for gcplog tests."""

import io

import pytest
from opentelemetry import trace
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

# trace id {1, 0, ...} and span id {2, 0, ...} read as big-endian bytes
TRACE_ID = 0x01 << 120
SPAN_ID = 0x02 << 56


@pytest.fixture
def buf():
    return io.StringIO()


@pytest.fixture
def make_context():
    """Factory for OTel contexts whose current span has the given ids."""

    def _make_context(sampled: bool = True, trace_id: int = TRACE_ID, span_id: int = SPAN_ID):
        span_context = SpanContext(
            trace_id=trace_id,
            span_id=span_id,
            is_remote=False,
            trace_flags=TraceFlags(TraceFlags.SAMPLED if sampled else TraceFlags.DEFAULT),
        )
        return trace.set_span_in_context(NonRecordingSpan(span_context))

    return _make_context


@pytest.fixture
def sampled_context(make_context):
    return make_context(sampled=True)


@pytest.fixture
def unsampled_context(make_context):
    return make_context(sampled=False)
