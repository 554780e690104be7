"""Structlog processors that add span fields to log events.

Adds rendered span fields (``trace_id``, ``span_id``, durations, tags, ...)
from the current span to every event dict, connecting logs to distributed
traces.  Fields that render empty are left out.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeAlias

from spantext.properties import SpanProperty
from spantext.renderer import SpanRenderer

FieldSpec: TypeAlias = "SpanRenderer | SpanProperty | str | Mapping[str, Any]"


def build_renderer(spec: FieldSpec) -> SpanRenderer:
    """Create a :class:`SpanRenderer` from a renderer, property or option dict."""
    if isinstance(spec, SpanRenderer):
        return spec
    if isinstance(spec, Mapping):
        return SpanRenderer.from_options(**spec)
    return SpanRenderer.from_options(property=spec)


class SpanFieldsProcessor:
    """Add rendered span fields to the event dict.

    Parameters
    ----------
    fields:
        Event-dict key to field spec: a :class:`SpanRenderer`, a property
        name, or a dict of renderer options.

    Example::

        SpanFieldsProcessor({
            "trace_id": "TraceId",
            "elapsed_ms": {"property": "DurationMs"},
            "tenant": {"property": "Baggage", "item": "tenant.id"},
        })
    """

    def __init__(self, fields: Mapping[str, FieldSpec]) -> None:
        self._renderers: tuple[tuple[str, SpanRenderer], ...] = tuple(
            (key, build_renderer(spec)) for key, spec in fields.items()
        )

    @property
    def renderers(self) -> dict[str, SpanRenderer]:
        return dict(self._renderers)

    def __call__(
        self,
        _logger: Any,
        _method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        for key, renderer in self._renderers:
            if key in event_dict:
                continue
            text = renderer.render()
            if text:
                event_dict[key] = text
        return event_dict


_TRACE_CONTEXT = SpanFieldsProcessor(
    {
        "trace_id": SpanProperty.TRACE_ID,
        "span_id": SpanProperty.SPAN_ID,
        "trace_flags": {"property": SpanProperty.TRACE_FLAGS, "format": "d"},
    }
)


def add_trace_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add ``trace_id``, ``span_id`` and ``trace_flags`` of the current span."""
    return _TRACE_CONTEXT(logger, method_name, event_dict)
