"""Read-only span views consumed by the renderer.

:class:`SpanView` is the protocol every trace-context provider satisfies.
:class:`Span` is a plain in-process implementation; the renderer never
mutates it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Protocol, TypeAlias

from spantext.enums import SpanKind, StatusCode, TraceFlags

Pairs: TypeAlias = "Sequence[tuple[str, Any]] | Mapping[str, Any]"


@dataclass(frozen=True)
class SpanSource:
    """Name and version of the library that produced a span."""

    name: str
    version: str | None = None


@dataclass(frozen=True)
class SpanEvent:
    """A named, timestamped record attached to a span."""

    name: str | None
    timestamp: datetime
    tags: Pairs = ()


class SpanView(Protocol):
    """What the renderer reads from a span."""

    id: str | None
    parent_id: str | None
    operation_name: str | None
    display_name: str | None
    start_time: datetime | None
    duration: timedelta
    trace_state: str | None
    trace_flags: Any
    kind: Any
    status: Any
    status_description: str | None
    source: SpanSource | None
    is_all_data_requested: bool
    baggage: Pairs
    tags: Pairs
    events: Sequence[SpanEvent]

    @property
    def parent(self) -> SpanView | None: ...

    def get_custom_property(self, name: str) -> Any: ...


@dataclass(eq=False)
class Span:
    """In-process span record.

    ``start_time=None`` means the span was never started; ``duration`` of
    zero means it has not ended yet.  ``parent`` is a back-reference only:
    a span never owns its parent.
    """

    operation_name: str | None = None
    id: str | None = None
    parent_id: str | None = None
    display_name: str | None = None
    start_time: datetime | None = None
    duration: timedelta = timedelta(0)
    trace_state: str | None = None
    trace_flags: TraceFlags | int = TraceFlags.NONE
    kind: SpanKind | int = SpanKind.INTERNAL
    status: StatusCode | int = StatusCode.UNSET
    status_description: str | None = None
    source: SpanSource | None = None
    is_all_data_requested: bool = False
    baggage: list[tuple[str, str | None]] = field(default_factory=list)
    tags: list[tuple[str, Any]] = field(default_factory=list)
    events: list[SpanEvent] = field(default_factory=list)
    parent: Span | None = field(default=None, repr=False)
    _custom_properties: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.display_name is None:
            self.display_name = self.operation_name
        if self.parent is not None and self.parent_id is None:
            self.parent_id = self.parent.id

    def get_custom_property(self, name: str) -> Any:
        return self._custom_properties.get(name)

    def set_custom_property(self, name: str, value: Any) -> None:
        if value is None:
            self._custom_properties.pop(name, None)
        else:
            self._custom_properties[name] = value
