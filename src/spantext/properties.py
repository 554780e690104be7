"""The span fields a renderer can select."""

from __future__ import annotations

from enum import Enum

from spantext.exceptions import SpanRenderConfigError


class SpanProperty(Enum):
    """Span field selected by :class:`~spantext.renderer.SpanRenderer`."""

    ID = "Id"
    TRACE_ID = "TraceId"
    SPAN_ID = "SpanId"
    OPERATION_NAME = "OperationName"
    DISPLAY_NAME = "DisplayName"
    START_TIME_UTC = "StartTimeUtc"
    DURATION = "Duration"
    DURATION_MS = "DurationMs"
    BAGGAGE = "Baggage"
    TAGS = "Tags"
    PARENT_ID = "ParentId"
    PARENT_SPAN_ID = "ParentSpanId"
    ROOT_ID = "RootId"
    TRACE_STATE = "TraceState"
    TRACE_STATE_STRING = "TraceStateString"
    TRACE_FLAGS = "TraceFlags"
    EVENTS = "Events"
    CUSTOM_PROPERTY = "CustomProperty"
    SOURCE_NAME = "SourceName"
    SOURCE_VERSION = "SourceVersion"
    KIND = "Kind"
    STATUS = "Status"
    STATUS_DESCRIPTION = "StatusDescription"
    IS_ALL_DATA_REQUESTED = "IsAllDataRequested"


# Properties that read Item; it is ignored for everything else.
ITEM_PROPERTIES = frozenset(
    {SpanProperty.BAGGAGE, SpanProperty.TAGS, SpanProperty.CUSTOM_PROPERTY},
)


def _normalize(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


_ALIASES: dict[str, SpanProperty] = {
    **{_normalize(p.value): p for p in SpanProperty},
    "activitytraceflags": SpanProperty.TRACE_FLAGS,
    "activitykind": SpanProperty.KIND,
    "spankind": SpanProperty.KIND,
    "name": SpanProperty.OPERATION_NAME,
}


def parse_property(value: str | SpanProperty) -> SpanProperty:
    """Resolve a property name such as ``"DurationMs"`` or ``"duration_ms"``."""
    if isinstance(value, SpanProperty):
        return value
    prop = _ALIASES.get(_normalize(value))
    if prop is None:
        msg = f"Unknown span property {value!r}"
        raise SpanRenderConfigError(msg)
    return prop
