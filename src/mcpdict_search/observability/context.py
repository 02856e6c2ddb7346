"""Context propagation so log lines can be correlated with the search that emitted them."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from opentelemetry.trace import Span

# Per-thread / per-task context; each search binds its own copy
search_context: ContextVar[dict | None] = ContextVar("search_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Get current context, creating trace and span ids on first use."""
    ctx = search_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        search_context.set(ctx)
    return ctx


def update_span_id(span_id: str) -> None:
    """Update span_id while preserving the rest of the context."""
    ctx = search_context.get() or {}
    search_context.set({**ctx, "span_id": span_id})


@contextmanager
def bind_search_context(**fields: object) -> Iterator[dict]:
    """Attach fields (search mode, query length...) to every log line in the block."""
    base = get_trace_context()
    token = search_context.set({**base, **fields})
    try:
        yield search_context.get() or {}
    finally:
        search_context.reset(token)


def with_otel_span(span: Span) -> dict:
    """Extract trace context from an OpenTelemetry span."""
    ctx = span.get_span_context()
    return {
        "trace_id": format(ctx.trace_id, "032x"),
        "span_id": format(ctx.span_id, "016x"),
    }
