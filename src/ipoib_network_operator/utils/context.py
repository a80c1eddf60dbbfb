"""Per-attempt log context: correlation IDs and trace IDs."""

from __future__ import annotations

import contextvars
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

from ..tracing import current_trace_ids

# One ID per reconciliation attempt, set by the controller worker
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


def get_correlation_id() -> str | None:
    return correlation_id.get()


@contextmanager
def with_correlation_id(corr_id: str | None = None) -> Iterator[str]:
    """Tag everything logged inside the block with a correlation ID.

    ``asyncio.to_thread`` copies the context, so the ID also reaches the
    worker thread running the reconciler.

    Args:
        corr_id: ID to use, a fresh one when omitted
    """
    token = correlation_id.set(corr_id or new_correlation_id())
    try:
        yield correlation_id.get()
    finally:
        correlation_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Fields describing the current context, merged with ``additional``.

    Includes ``correlation_id`` when set and ``trace_id``/``span_id`` inside a
    recording span.
    """
    ctx: dict[str, Any] = dict(current_trace_ids())

    corr_id = get_correlation_id()
    if corr_id:
        ctx["correlation_id"] = corr_id

    if additional:
        ctx.update(additional)
    return ctx
