"""Trace-flags, span-kind and status enumerations and their text forms.

Every enumeration is described by one row in :data:`_ENUM_TABLES`: its
members in declaration order together with their display names.  The first
member is the "unset" default, which renders as an empty string unless the
integer format (``"d"``) is requested.
"""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag
from typing import Any


class TraceFlags(IntFlag):
    """W3C trace-context flags."""

    NONE = 0
    RECORDED = 1


class SpanKind(IntEnum):
    """Role of a span relative to its parent and children."""

    INTERNAL = 0
    SERVER = 1
    CLIENT = 2
    PRODUCER = 3
    CONSUMER = 4


class StatusCode(IntEnum):
    """Completion outcome of a span."""

    UNSET = 0
    OK = 1
    ERROR = 2


_ENUM_TABLES: dict[type[Enum], tuple[tuple[Enum, str], ...]] = {
    TraceFlags: (
        (TraceFlags.NONE, "None"),
        (TraceFlags.RECORDED, "Recorded"),
    ),
    SpanKind: (
        (SpanKind.INTERNAL, "Internal"),
        (SpanKind.SERVER, "Server"),
        (SpanKind.CLIENT, "Client"),
        (SpanKind.PRODUCER, "Producer"),
        (SpanKind.CONSUMER, "Consumer"),
    ),
    StatusCode: (
        (StatusCode.UNSET, "Unset"),
        (StatusCode.OK, "Ok"),
        (StatusCode.ERROR, "Error"),
    ),
}

# int value -> (display name, ordinal), per enumeration
_LOOKUP: dict[type[Enum], dict[int, tuple[str, int]]] = {
    enum_type: {int(member.value): (name, ordinal) for ordinal, (member, name) in enumerate(rows)}
    for enum_type, rows in _ENUM_TABLES.items()
}


def _as_int(value: Any) -> int:
    """Coerce *value* to its integer value.

    Accepts this module's enums, plain ints, and foreign :class:`~enum.Enum`
    members with an int ``value`` (e.g. OpenTelemetry's ``SpanKind``).
    ``None`` is the default member, ``0``.
    """
    if value is None:
        return 0
    if isinstance(value, Enum) and not isinstance(value, int):
        return int(value.value)
    return int(value)


def format_as_integer(fmt: str | None) -> bool:
    """Return ``True`` when *fmt* selects the integer form (``"d"`` or ``"D"``)."""
    return fmt is not None and len(fmt) == 1 and fmt in "dD"


def _generic_text(number: int, known: tuple[str, int] | None, fmt: str) -> str:
    if fmt in ("G", "g", "F", "f"):
        return known[0] if known is not None else str(number)
    if fmt in ("D", "d"):
        return str(number)
    if fmt == "X":
        return f"{number:08X}"
    if fmt == "x":
        return f"{number:08x}"
    msg = f"Format string {fmt!r} is not valid for an enumeration value"
    raise ValueError(msg)


def format_enum(enum_type: type[Enum], value: Any, fmt: str | None = None) -> str:
    """Render *value* of *enum_type* as text.

    With no *fmt* the default member renders as ``""`` and other members as
    their display name.  With ``"d"``/``"D"`` members render as their ordinal
    (the default member as ``"0"``).  Other patterns go through the generic
    conversion (``G``, ``F``, ``D``, ``X``); an unrecognized pattern raises
    :class:`ValueError`.
    """
    number = _as_int(value)
    known = _LOOKUP[enum_type].get(number)
    if known is not None:
        name, ordinal = known
        if not fmt:
            return "" if ordinal == 0 else name
        if format_as_integer(fmt):
            return str(ordinal)
    return _generic_text(number, known, fmt or "G")
