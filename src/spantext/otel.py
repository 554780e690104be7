"""OpenTelemetry span adapter.

Exposes the current OpenTelemetry span as a :class:`~spantext.model.SpanView`
so every renderer property works against spans produced by
``opentelemetry-sdk``.  Degrades to ``None`` when ``opentelemetry-api`` is not
installed or no valid span is active.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from spantext.enums import SpanKind, StatusCode, TraceFlags
from spantext.identifiers import format_w3c_id
from spantext.model import Span, SpanEvent, SpanSource


def _from_ns(value: int | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromtimestamp(value / 1e9, tz=timezone.utc)


def _recorded_bit(ctx: Any) -> int:
    # Newer SDKs also set the W3C "random" bit (0x02); only "sampled" maps
    # onto TraceFlags.
    return int(ctx.trace_flags) & TraceFlags.RECORDED


def _enum_value(value: Any, default: int) -> int:
    if value is None:
        return default
    return int(getattr(value, "value", value))


class OtelSpanView:
    """Read-only view over an OpenTelemetry span.

    SDK spans expose timing, attributes, events and status; API-only spans
    (``NonRecordingSpan``) expose just their context, and the other fields
    read as empty.
    """

    def __init__(self, span: Any, baggage: Sequence[tuple[str, Any]] = ()) -> None:
        self._span = span
        self._ctx = span.get_span_context()
        self.baggage = baggage

    @property
    def id(self) -> str:
        ctx = self._ctx
        return format_w3c_id(ctx.trace_id, ctx.span_id, ctx.trace_flags)

    @property
    def parent_id(self) -> str | None:
        parent = getattr(self._span, "parent", None)
        if parent is None or not parent.is_valid:
            return None
        return format_w3c_id(parent.trace_id, parent.span_id, parent.trace_flags)

    @property
    def parent(self) -> Span | None:
        parent = getattr(self._span, "parent", None)
        if parent is None or not parent.is_valid:
            return None
        return Span(
            id=self.parent_id,
            trace_flags=_recorded_bit(parent),
            trace_state=_trace_state_header(parent),
        )

    @property
    def operation_name(self) -> str | None:
        return getattr(self._span, "name", None)

    @property
    def display_name(self) -> str | None:
        return self.operation_name

    @property
    def start_time(self) -> datetime | None:
        return _from_ns(getattr(self._span, "start_time", None))

    @property
    def duration(self) -> timedelta:
        start = getattr(self._span, "start_time", None)
        end = getattr(self._span, "end_time", None)
        if not start or not end:
            return timedelta(0)
        return timedelta(microseconds=(end - start) / 1000)

    @property
    def trace_state(self) -> str | None:
        return _trace_state_header(self._ctx)

    @property
    def trace_flags(self) -> int:
        return _recorded_bit(self._ctx)

    @property
    def kind(self) -> int:
        return _enum_value(getattr(self._span, "kind", None), SpanKind.INTERNAL)

    @property
    def status(self) -> int:
        status = getattr(self._span, "status", None)
        return _enum_value(getattr(status, "status_code", None), StatusCode.UNSET)

    @property
    def status_description(self) -> str | None:
        status = getattr(self._span, "status", None)
        return getattr(status, "description", None)

    @property
    def source(self) -> SpanSource | None:
        scope = getattr(self._span, "instrumentation_scope", None)
        if scope is None:
            return None
        return SpanSource(scope.name, scope.version)

    @property
    def is_all_data_requested(self) -> bool:
        return bool(self._span.is_recording())

    @property
    def tags(self) -> list[tuple[str, Any]]:
        attributes = getattr(self._span, "attributes", None)
        return list(attributes.items()) if attributes else []

    @property
    def events(self) -> list[SpanEvent]:
        return [
            SpanEvent(
                event.name,
                _from_ns(event.timestamp) or datetime.min.replace(tzinfo=timezone.utc),
                list(event.attributes.items()) if event.attributes else [],
            )
            for event in getattr(self._span, "events", ())
        ]

    def get_custom_property(self, name: str) -> Any:
        return None


def _trace_state_header(ctx: Any) -> str | None:
    trace_state = getattr(ctx, "trace_state", None)
    if not trace_state:
        return None
    return trace_state.to_header() or None


def current_otel_span() -> OtelSpanView | None:
    """Return the active OpenTelemetry span, or ``None``."""
    try:
        from opentelemetry import baggage, trace
    except ImportError:
        return None

    span = trace.get_current_span()
    ctx = span.get_span_context()
    if not ctx or not ctx.is_valid:
        return None
    return OtelSpanView(span, list(baggage.get_all().items()))
