"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from mcpdict_search.observability.context import bind_search_context, get_trace_context, search_context
from mcpdict_search.observability.logging import JsonFormatter, configure_logging
from mcpdict_search.observability.metrics import (
    KEYWORD_COUNT,
    SEARCH_COUNT,
    SEARCH_ERRORS,
    SEARCH_LATENCY,
    get_metrics,
    init_metrics,
    track_latency,
)
from mcpdict_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "KEYWORD_COUNT",
    "SEARCH_COUNT",
    "SEARCH_ERRORS",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "bind_search_context",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "search_context",
    "track_latency",
]
