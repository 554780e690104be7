"""Render one field of the current span as text.

A :class:`SpanRenderer` is configured once and then called for every log
event.  It resolves the effective span (current, parent or root), selects a
field, and appends its text to a ``list[str]`` sink::

    renderer = SpanRenderer(SpanProperty.DURATION_MS)
    renderer.render()        # "12.345"

    SpanRenderer.from_options(property="Tags", format="@").render()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from spantext.context import SpanProvider, default_provider
from spantext.convert import to_text
from spantext.culture import INVARIANT, Culture, get_culture
from spantext.duration import (
    Clock,
    ensure_duration_cache,
    get_duration,
    get_duration_ms,
    is_unset,
    render_duration_ms,
    utcnow,
)
from spantext.enums import SpanKind, StatusCode, TraceFlags, format_enum
from spantext.exceptions import SpanRenderConfigError
from spantext.identifiers import parent_span_id_of, root_id_of, span_id_of, trace_id_of
from spantext.model import SpanView
from spantext.properties import ITEM_PROPERTIES, SpanProperty, parse_property
from spantext.serializers import (
    get_collection_item,
    render_events_flat,
    render_events_json,
    render_pairs_flat,
    render_pairs_json,
)

log = logging.getLogger(__name__)

JSON_FORMAT = "@"

# Upper bound on parent hops when walking to the root span.
MAX_ANCESTRY_DEPTH = 1024

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    msg = f"Option {name!r} expects a boolean, got {value!r}"
    raise SpanRenderConfigError(msg)


def resolve_span(span: SpanView | None, *, parent: bool = False, root: bool = False) -> SpanView | None:
    """Apply the ``parent`` and ``root`` options to *span*."""
    if parent:
        span = span.parent if span is not None else None
    if root and span is not None:
        ancestor = span.parent
        hops = 0
        while ancestor is not None and hops < MAX_ANCESTRY_DEPTH:
            span = ancestor
            ancestor = span.parent
            hops += 1
    return span


def get_custom_property(span: SpanView, item: str | None) -> str:
    """Look up *item* on *span*, then on its parent."""
    if not item:
        return ""
    text = to_text(span.get_custom_property(item))
    if text is None:
        parent = span.parent
        if parent is not None:
            text = to_text(parent.get_custom_property(item))
    return text or ""


@dataclass
class SpanRenderer:
    """Render a selected field of the current span.

    Parameters
    ----------
    property:
        Field to render.
    item:
        Key looked up by ``BAGGAGE``, ``TAGS`` and ``CUSTOM_PROPERTY``.
    format:
        Format string for numbers, timestamps, time spans and enums.  ``"@"``
        renders collections and events JSON-like; ``"d"`` renders enums as
        integers.
    culture:
        Culture used for number and date formatting.
    parent:
        Read from the current span's parent.
    root:
        After applying *parent*, walk up to the top-most ancestor.
    provider:
        Callable returning the current span.
    clock:
        Callable returning the current UTC time, for spans still running.
    """

    property: SpanProperty = SpanProperty.TRACE_ID
    item: str | None = None
    format: str | None = None
    culture: Culture = INVARIANT
    parent: bool = False
    root: bool = False
    provider: SpanProvider = field(default=default_provider, repr=False)
    clock: Clock = field(default=utcnow, repr=False)

    def __post_init__(self) -> None:
        self.property = parse_property(self.property)
        if self.item and self.property not in ITEM_PROPERTIES:
            log.warning("item=%r is ignored for property %s", self.item, self.property.value)
        if self.property is SpanProperty.DURATION_MS:
            ensure_duration_cache()

    @classmethod
    def from_options(cls, **options: Any) -> SpanRenderer:
        """Build a renderer from loosely typed options (e.g. parsed config).

        Accepts ``property``, ``item``, ``format``, ``culture``, ``parent``,
        ``root`` with string values, plus ``provider`` and ``clock``.
        """
        known = {"property", "item", "format", "culture", "parent", "root", "provider", "clock"}
        unknown = sorted(set(options) - known)
        if unknown:
            msg = f"Unknown renderer options: {', '.join(unknown)}"
            raise SpanRenderConfigError(msg)
        kwargs: dict[str, Any] = dict(options)
        if "property" in kwargs:
            kwargs["property"] = parse_property(kwargs["property"])
        if "culture" in kwargs:
            kwargs["culture"] = get_culture(kwargs["culture"])
        for flag in ("parent", "root"):
            if flag in kwargs:
                kwargs[flag] = _to_bool(flag, kwargs[flag])
        for text_option in ("item", "format"):
            if kwargs.get(text_option) == "":
                kwargs[text_option] = None
        return cls(**kwargs)

    # -- rendering ------------------------------------------------------------

    def render(self, span: SpanView | None = None) -> str:
        """Render for *span*, or for the provider's current span."""
        out: list[str] = []
        self.append(out, span)
        return "".join(out)

    def append(self, out: list[str], span: SpanView | None = None) -> None:
        """Append the rendered field to *out*."""
        if span is None:
            span = self.provider()
        span = resolve_span(span, parent=self.parent, root=self.root)
        if span is None:
            return

        prop = self.property
        json_like = self.format == JSON_FORMAT
        if prop is SpanProperty.BAGGAGE and not self.item:
            if json_like:
                render_pairs_json(out, span.baggage)
            else:
                render_pairs_flat(out, span.baggage)
        elif prop is SpanProperty.TAGS and not self.item:
            if json_like:
                render_pairs_json(out, span.tags)
            else:
                render_pairs_flat(out, span.tags)
        elif prop is SpanProperty.EVENTS:
            if json_like:
                render_events_json(out, span.events)
            else:
                render_events_flat(out, span.events)
        elif prop is SpanProperty.DURATION_MS:
            duration_ms = get_duration_ms(span, self.clock)
            if duration_ms is not None:
                render_duration_ms(out, duration_ms, self.format, self.culture)
        else:
            value = self.get_value(span)
            if value:
                out.append(value)

    def get_value(self, span: SpanView) -> str | None:
        """Return the text of a scalar property."""
        prop = self.property
        if prop is SpanProperty.ID:
            return span.id
        if prop is SpanProperty.TRACE_ID:
            return trace_id_of(span.id)
        if prop is SpanProperty.SPAN_ID:
            return span_id_of(span.id)
        if prop is SpanProperty.OPERATION_NAME:
            return span.operation_name
        if prop is SpanProperty.DISPLAY_NAME:
            return span.display_name
        if prop is SpanProperty.START_TIME_UTC:
            start_time = span.start_time
            if is_unset(start_time):
                return ""
            return self.culture.format_datetime(start_time, self.format)  # type: ignore[arg-type]
        if prop is SpanProperty.DURATION:
            duration = get_duration(span, self.clock)
            if duration is None:
                return ""
            return self.culture.format_timespan(duration, self.format)
        if prop is SpanProperty.PARENT_ID:
            return span.parent_id
        if prop is SpanProperty.PARENT_SPAN_ID:
            return parent_span_id_of(span.parent_id)
        if prop is SpanProperty.ROOT_ID:
            return root_id_of(span.id)
        if prop in (SpanProperty.TRACE_STATE, SpanProperty.TRACE_STATE_STRING):
            return span.trace_state
        if prop is SpanProperty.TRACE_FLAGS:
            return format_enum(TraceFlags, span.trace_flags, self.format)
        if prop is SpanProperty.BAGGAGE:
            return get_collection_item(self.item, span.baggage)
        if prop is SpanProperty.TAGS:
            return get_collection_item(self.item, span.tags)
        if prop is SpanProperty.CUSTOM_PROPERTY:
            return get_custom_property(span, self.item)
        if prop is SpanProperty.SOURCE_NAME:
            return span.source.name if span.source is not None else None
        if prop is SpanProperty.SOURCE_VERSION:
            return span.source.version if span.source is not None else None
        if prop is SpanProperty.KIND:
            return format_enum(SpanKind, span.kind, self.format)
        if prop is SpanProperty.STATUS:
            return format_enum(StatusCode, span.status, self.format)
        if prop is SpanProperty.STATUS_DESCRIPTION:
            return span.status_description or ""
        if prop is SpanProperty.IS_ALL_DATA_REQUESTED:
            return "1" if span.is_all_data_requested else "0"
        return ""
