"""Tests for gcplog.config - options from the environment and tracing setup."""

import json
import logging

import pytest
from opentelemetry.sdk.trace import TracerProvider

from gcplog import (
    LEVEL_INFO,
    LEVEL_NOTICE,
    SPAN_ID_KEY,
    TRACE_KEY,
    TRACE_SAMPLED_KEY,
    HandlerOptions,
    configure_tracing,
    new,
    options_from_env,
)


class TestOptionsFromEnv:
    def test_project_and_level(self):
        opts = options_from_env({"GOOGLE_CLOUD_PROJECT": "proj", "LOG_LEVEL": "notice"})
        assert opts == HandlerOptions(level=LEVEL_NOTICE, project_id="proj")

    def test_fallback_project_variable(self):
        assert options_from_env({"GCLOUD_PROJECT": "other"}).project_id == "other"

    def test_defaults_and_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="gcplog.config"):
            opts = options_from_env({})
        assert opts.level == LEVEL_INFO
        assert opts.project_id == ""
        assert "trace correlation is disabled" in caplog.text

    def test_overrides(self):
        hook = lambda groups, attr: attr  # noqa: E731
        opts = options_from_env({"GOOGLE_CLOUD_PROJECT": "proj"}, replace_attr=hook, project_id="x")
        assert opts.replace_attr is hook
        assert opts.project_id == "x"

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            options_from_env({"LOG_LEVEL": "chatty"})


class TestConfigureTracing:
    def test_resource_names_the_project(self):
        provider = configure_tracing(HandlerOptions(project_id="my-project"), service_name="test-app")
        assert isinstance(provider, TracerProvider)
        attributes = provider.resource.attributes
        assert attributes["service.name"] == "test-app"
        assert attributes["cloud.provider"] == "gcp"
        assert attributes["cloud.account.id"] == "my-project"

    def test_without_project_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="gcplog.config"):
            provider = configure_tracing(HandlerOptions())
        assert "cloud.account.id" not in provider.resource.attributes
        assert "without a project id" in caplog.text

    def test_invalid_sample_ratio(self):
        with pytest.raises(ValueError):
            configure_tracing(HandlerOptions(project_id="p"), sample_ratio=1.5)

    def test_unsampled_root_span(self, buf):
        options = HandlerOptions(project_id="my-project")
        tracer = configure_tracing(options, sample_ratio=0.0).get_tracer("gcplog.tests")
        log = new(buf, options)

        with tracer.start_as_current_span("request"):
            log.info("inside")

        entry = json.loads(buf.getvalue())
        assert entry[TRACE_KEY].startswith("projects/my-project/traces/")
        assert entry[TRACE_SAMPLED_KEY] is False

    def test_real_span_is_correlated(self, buf):
        """Flow: SDK span -> current context -> log line trace fields."""
        options = HandlerOptions(project_id="my-project")
        tracer = configure_tracing(options, "test-app").get_tracer("gcplog.tests")
        log = new(buf, options)

        with tracer.start_as_current_span("request") as span:
            log.info("inside")
            span_context = span.get_span_context()
        log.info("outside")

        inside, outside = [json.loads(line) for line in buf.getvalue().splitlines()]
        assert inside[TRACE_KEY] == f"projects/my-project/traces/{span_context.trace_id:032x}"
        assert inside[SPAN_ID_KEY] == f"{span_context.span_id:016x}"
        assert inside[TRACE_SAMPLED_KEY] is True
        assert TRACE_KEY not in outside
