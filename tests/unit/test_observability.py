"""Unit tests for observability module."""

import json
import logging

from opentelemetry import metrics as otel_metrics, trace as trace_api
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
from prometheus_client import REGISTRY
import pytest

from match_sorter import match_sorter
from match_sorter.observability import (
    ITEMS_MATCHED,
    ITEMS_RANKED,
    SORT_CALLS,
    SORT_LATENCY,
    JsonFormatter,
    configure_logging,
    create_span,
    get_metrics,
    get_metrics_content_type,
    get_trace_context,
    init_metrics,
    init_tracing,
    metrics_enabled,
    set_metrics_enabled,
    set_trace_context,
    track_latency,
)
from match_sorter.observability import metrics as metrics_module, tracing as tracing_module
from match_sorter.observability.context import update_span_id
from match_sorter.observability.metrics import MetricBridge


def _record(msg="test message", level=logging.INFO, name="match_sorter.service_layer.sorter"):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def _sample(name, mode):
    return REGISTRY.get_sample_value(name, {"mode": mode}) or 0.0


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_trace_context(self):
        data = json.loads(JsonFormatter().format(_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["component"] == "sorter"
        assert "timestamp" in data
        assert "trace_id" in data
        assert "span_id" in data

    def test_format_includes_extra_fields(self):
        record = _record()
        record.item_count = 12
        data = json.loads(JsonFormatter().format(record))
        assert data["item_count"] == 12

    def test_format_truncates_and_redacts(self):
        record = _record("x" * 5000)
        record.api_key = "secret"
        data = json.loads(JsonFormatter().format(record))

        assert data["message"].endswith("...")
        assert data["api_key"] == "[REDACTED]"

    def test_json_default_handles_set_and_bytes(self):
        formatter = JsonFormatter()
        assert formatter._json_default({3, 1, 2}) == [1, 2, 3]
        assert formatter._json_default(b"ok") == "ok"

    def test_json_default_handles_unorderable_set(self):
        value = JsonFormatter()._json_default({1, "a"})
        assert isinstance(value, list)
        assert len(value) == 2


@pytest.mark.unit
class TestTraceContext:
    """Tests for trace context propagation."""

    def test_get_trace_context_generates_ids(self):
        ctx = get_trace_context()
        assert len(ctx["trace_id"]) == 32
        assert len(ctx["span_id"]) == 16

    def test_update_span_id_preserves_trace_id(self):
        set_trace_context("aa" * 16, "bb" * 8, caller="alpha")
        update_span_id("cc" * 8)
        ctx = get_trace_context()
        assert ctx["trace_id"] == "aa" * 16
        assert ctx["span_id"] == "cc" * 8
        assert ctx["caller"] == "alpha"


@pytest.mark.unit
class TestTracing:
    """Tests for OpenTelemetry tracing."""

    @staticmethod
    def _setup_exporter() -> InMemorySpanExporter:
        exporter = InMemorySpanExporter()
        provider = trace_api.get_tracer_provider()
        if not isinstance(provider, TracerProvider):
            provider = init_tracing("test-service")
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return exporter

    def test_init_tracing_applies_resource_attributes(self):
        provider = init_tracing("test-service", resource_attributes={"service.version": "2.0.0"})
        assert provider.resource.attributes["service.version"] == "2.0.0"

    def test_get_tracer_initializes_when_missing(self):
        tracing_module._tracer_holder["tracer"] = None
        assert tracing_module.get_tracer() is not None

    def test_match_sorter_records_span(self):
        exporter = self._setup_exporter()

        match_sorter(["hi", "hey", "yo"], "h")

        spans = [span for span in exporter.get_finished_spans() if span.name == "match_sorter"]
        assert spans
        attributes = spans[-1].attributes
        assert attributes["match_sorter.mode"] == "ranked"
        assert attributes["match_sorter.item_count"] == 3
        assert attributes["match_sorter.match_count"] == 2

    def test_create_span_records_errors(self):
        exporter = self._setup_exporter()

        with pytest.raises(RuntimeError), create_span("failing.operation"):
            raise RuntimeError("boom")

        spans = [span for span in exporter.get_finished_spans() if span.name == "failing.operation"]
        assert spans[-1].status.status_code == StatusCode.ERROR


@pytest.mark.unit
class TestMetrics:
    """Tests for Prometheus metrics."""

    def test_match_sorter_counts_calls_and_items(self):
        calls = _sample("match_sorter_calls_total", "ranked")
        ranked = _sample("match_sorter_items_ranked_total", "ranked")
        matched = _sample("match_sorter_items_matched_total", "ranked")

        match_sorter(["apple", "grape", "kiwi"], "ap")

        assert _sample("match_sorter_calls_total", "ranked") == calls + 1
        assert _sample("match_sorter_items_ranked_total", "ranked") == ranked + 3
        assert _sample("match_sorter_items_matched_total", "ranked") == matched + 2

    def test_empty_query_uses_unranked_mode(self):
        calls = _sample("match_sorter_calls_total", "unranked")
        match_sorter(["b", "a"], "")
        assert _sample("match_sorter_calls_total", "unranked") == calls + 1

    def test_disabled_metrics_record_nothing(self):
        set_metrics_enabled(False)
        calls = _sample("match_sorter_calls_total", "ranked")

        result = match_sorter(["apple"], "ap")

        assert result == ["apple"]
        assert not metrics_enabled()
        assert _sample("match_sorter_calls_total", "ranked") == calls

    def test_track_latency_records_histogram(self):
        before = _sample("match_sorter_latency_seconds_count", "test")
        with track_latency(SORT_LATENCY, mode="test"):
            pass
        assert _sample("match_sorter_latency_seconds_count", "test") == before + 1

    def test_get_metrics_returns_bytes(self):
        output = get_metrics()
        assert isinstance(output, bytes)
        assert b"match_sorter_latency_seconds" in output
        assert get_metrics_content_type().startswith("text/plain")

    def test_init_metrics_reuses_provider(self, monkeypatch):
        monkeypatch.setattr(metrics_module.otel_metrics, "set_meter_provider", lambda provider: None)
        monkeypatch.setitem(metrics_module._meter_holder, "provider", None)
        monkeypatch.setitem(metrics_module._meter_holder, "meter", None)
        assert init_metrics() is init_metrics()

    def test_recording_never_installs_a_meter_provider(self, monkeypatch):
        installed = []
        monkeypatch.setattr(metrics_module.otel_metrics, "set_meter_provider", installed.append)
        monkeypatch.setitem(metrics_module._meter_holder, "meter", None)
        for bridge in (SORT_CALLS, ITEMS_RANKED, ITEMS_MATCHED, SORT_LATENCY):
            monkeypatch.setattr(bridge, "_otel_instrument", None)
        before = otel_metrics.get_meter_provider()

        match_sorter(["apple"], "ap")

        assert installed == []
        assert otel_metrics.get_meter_provider() is before
        assert metrics_module._meter_holder["meter"] is not None

    def test_init_metrics_installs_provider(self, monkeypatch):
        installed = []
        monkeypatch.setattr(metrics_module.otel_metrics, "set_meter_provider", installed.append)
        monkeypatch.setitem(metrics_module._meter_holder, "provider", None)
        monkeypatch.setitem(metrics_module._meter_holder, "meter", None)

        provider = init_metrics("test-service")

        assert installed == [provider]

    def test_metric_bridge_unknown_kind_raises(self):
        bridge = MetricBridge(
            metrics_module._SORT_CALLS_PROM,
            otel_name="bogus",
            otel_description="bogus",
            otel_kind="gauge",
        )
        with pytest.raises(ValueError, match="Unknown metric kind"):
            bridge.labels(mode="ranked").inc()


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_configure_logging_sets_level(self):
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_uses_json_formatter(self):
        configure_logging(level="INFO")
        assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)

    def test_configure_logging_non_json_formatter(self):
        configure_logging(level="INFO", json_output=False)
        formatter = logging.getLogger().handlers[0].formatter
        assert "%(asctime)s" in formatter._style._fmt

    def test_configure_logging_overrides(self):
        configure_logging(level="INFO", logger_levels={"match_sorter.search": "ERROR"})
        assert logging.getLogger("match_sorter.search").level == logging.ERROR
