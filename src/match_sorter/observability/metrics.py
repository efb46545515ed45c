"""Prometheus metrics for sort calls, bridged to OpenTelemetry instruments.

Instruments are created from the global OpenTelemetry meter. Only
``init_metrics`` (called by ``bootstrap.configure_observability``) installs
a meter provider, so a host application keeps control of its own.

Hosts exposing a scrape endpoint serve ``get_metrics()`` with
``get_metrics_content_type()`` as the response content type.
"""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


_meter_holder: dict[str, Any] = {"meter": None, "provider": None, "enabled": True}


def init_metrics(
    service_name: str = "match-sorter",
    resource_attributes: dict[str, str] | None = None,
    metric_readers: list[MetricReader] | None = None,
) -> MeterProvider:
    """Initialize OpenTelemetry metrics."""
    provider = _meter_holder.get("provider")
    if isinstance(provider, MeterProvider):
        return provider

    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    resource = Resource.create(attributes)
    provider = MeterProvider(resource=resource, metric_readers=metric_readers or [])
    otel_metrics.set_meter_provider(provider)
    _meter_holder["provider"] = provider
    _meter_holder["meter"] = otel_metrics.get_meter(__name__)
    return provider


def set_metrics_enabled(enabled: bool) -> None:
    """Turn recording on or off for every bridged metric."""
    _meter_holder["enabled"] = enabled


def metrics_enabled() -> bool:
    return bool(_meter_holder["enabled"])


def _get_meter():
    # Never installs a provider; the proxy meter delegates once one is set.
    meter = _meter_holder.get("meter")
    if meter is None:
        meter = otel_metrics.get_meter(__name__)
        _meter_holder["meter"] = meter
    return meter


class _BoundMetric:
    def __init__(self, wrapper: MetricBridge, labels: dict[str, str]) -> None:
        self._wrapper = wrapper
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._wrapper.inc(self._labels, amount)

    def observe(self, value: float) -> None:
        self._wrapper.observe(self._labels, value)


class MetricBridge:
    """Bridge a Prometheus metric to a lazily created OTel instrument."""

    def __init__(
        self,
        prom_metric: Counter | Histogram,
        *,
        otel_name: str,
        otel_description: str,
        otel_kind: str,
    ) -> None:
        self._prom_metric = prom_metric
        self._otel_name = otel_name
        self._otel_description = otel_description
        self._otel_kind = otel_kind
        self._otel_instrument = None

    def labels(self, **labels: str) -> _BoundMetric:
        return _BoundMetric(self, labels)

    def _ensure_otel_instrument(self):
        if self._otel_instrument is not None:
            return self._otel_instrument
        meter = _get_meter()
        if self._otel_kind == "counter":
            self._otel_instrument = meter.create_counter(self._otel_name, description=self._otel_description)
        elif self._otel_kind == "histogram":
            self._otel_instrument = meter.create_histogram(self._otel_name, description=self._otel_description)
        else:
            raise ValueError(f"Unknown metric kind: {self._otel_kind}")
        return self._otel_instrument

    def inc(self, labels: dict[str, str], amount: float) -> None:
        if not metrics_enabled():
            return
        self._prom_metric.labels(**labels).inc(amount)
        self._ensure_otel_instrument().add(amount, labels)

    def observe(self, labels: dict[str, str], value: float) -> None:
        if not metrics_enabled():
            return
        self._prom_metric.labels(**labels).observe(value)
        self._ensure_otel_instrument().record(value, labels)


_SORT_CALLS_PROM = Counter(
    "match_sorter_calls_total",
    "Total match_sorter calls",
    ["mode"],
)

_ITEMS_RANKED_PROM = Counter(
    "match_sorter_items_ranked_total",
    "Items evaluated against a query",
    ["mode"],
)

_ITEMS_MATCHED_PROM = Counter(
    "match_sorter_items_matched_total",
    "Items that met their threshold",
    ["mode"],
)

_SORT_LATENCY_PROM = Histogram(
    "match_sorter_latency_seconds",
    "Time spent ranking and sorting one collection",
    ["mode"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

SORT_CALLS = MetricBridge(
    _SORT_CALLS_PROM,
    otel_name="match_sorter_calls_total",
    otel_description="Total match_sorter calls",
    otel_kind="counter",
)

ITEMS_RANKED = MetricBridge(
    _ITEMS_RANKED_PROM,
    otel_name="match_sorter_items_ranked_total",
    otel_description="Items evaluated against a query",
    otel_kind="counter",
)

ITEMS_MATCHED = MetricBridge(
    _ITEMS_MATCHED_PROM,
    otel_name="match_sorter_items_matched_total",
    otel_description="Items that met their threshold",
    otel_kind="counter",
)

SORT_LATENCY = MetricBridge(
    _SORT_LATENCY_PROM,
    otel_name="match_sorter_latency_seconds",
    otel_description="Time spent ranking and sorting one collection",
    otel_kind="histogram",
)


@contextmanager
def track_latency(histogram: MetricBridge, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for a metrics endpoint."""
    return CONTENT_TYPE_LATEST
