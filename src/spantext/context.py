"""In-process current-span tracking.

The current span is held in a :class:`~contextvars.ContextVar`, so every
thread and every asyncio task sees its own value.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TypeAlias

from spantext.model import SpanView
from spantext.otel import current_otel_span

SpanProvider: TypeAlias = "Callable[[], SpanView | None]"

_current_span: ContextVar[SpanView | None] = ContextVar("spantext_current_span", default=None)


def current_span() -> SpanView | None:
    """Return the span bound with :func:`use_span`, if any."""
    return _current_span.get()


@contextmanager
def use_span(span: SpanView | None) -> Iterator[SpanView | None]:
    """Make *span* the current span for the duration of a ``with`` block."""
    token = _current_span.set(span)
    try:
        yield span
    finally:
        _current_span.reset(token)


def default_provider() -> SpanView | None:
    """Return the bound span, falling back to the active OpenTelemetry span."""
    span = _current_span.get()
    if span is not None:
        return span
    return current_otel_span()
