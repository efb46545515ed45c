"""Observability module: structured logging, metrics and tracing."""

from match_sorter.observability.context import get_trace_context, set_trace_context, trace_context
from match_sorter.observability.logging import JsonFormatter, configure_logging
from match_sorter.observability.metrics import (
    ITEMS_MATCHED,
    ITEMS_RANKED,
    SORT_CALLS,
    SORT_LATENCY,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    metrics_enabled,
    set_metrics_enabled,
    track_latency,
)
from match_sorter.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "ITEMS_MATCHED",
    "ITEMS_RANKED",
    "SORT_CALLS",
    "SORT_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "metrics_enabled",
    "set_metrics_enabled",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
