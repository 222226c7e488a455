"""Per-query log correlation.

Each ``search()`` call runs inside :func:`query_scope`, which binds a fresh
query id (and the current span id, once tracing opens a span) so every log
line emitted while serving that query can be grouped together.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


query_context: ContextVar[dict | None] = ContextVar("query_context", default=None)


def generate_query_id() -> str:
    """Generate a 32-char hex query ID."""
    return uuid4().hex


def get_query_context() -> dict:
    """Current correlation fields; empty outside a query scope."""
    return dict(query_context.get() or {})


def update_span_id(span_id: str) -> None:
    """Attach the active span id while preserving the query id."""
    ctx = query_context.get() or {}
    query_context.set({**ctx, "span_id": span_id})


@contextmanager
def query_scope(**extra: object) -> Iterator[dict]:
    """Bind a new query id (plus ``extra`` fields) for the duration of the block."""
    ctx = {"query_id": generate_query_id(), **extra}
    token = query_context.set(ctx)
    try:
        yield ctx
    finally:
        query_context.reset(token)
