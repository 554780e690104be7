"""Derivation of trace, span and root ids from a span's ``id``.

Two id formats are understood:

* W3C ``traceparent``: ``00-<32 hex trace id>-<16 hex span id>-<2 hex flags>``
* hierarchical: ``|<root id>.<child>.<child>.``
"""

from __future__ import annotations

_ZERO_SPAN_ID = "0" * 16


def _w3c_parts(value: str) -> list[str] | None:
    parts = value.split("-")
    if len(parts) == 4 and len(parts[1]) == 32 and len(parts[2]) == 16:
        return parts
    return None


def _hierarchical_root(value: str) -> str:
    start = 1 if value.startswith("|") else 0
    end = value.find(".", start)
    return value[start:end] if end >= 0 else value[start:]


def format_w3c_id(trace_id: int | str, span_id: int | str, flags: int = 0) -> str:
    """Build a W3C id from integer or hex-string parts."""
    trace_hex = format(trace_id, "032x") if isinstance(trace_id, int) else trace_id
    span_hex = format(span_id, "016x") if isinstance(span_id, int) else span_id
    return f"00-{trace_hex}-{span_hex}-{int(flags) & 0xFF:02x}"


def trace_id_of(span_id_text: str | None) -> str:
    """Return the trace id part of an id (the root id for hierarchical ids)."""
    if not span_id_text:
        return ""
    parts = _w3c_parts(span_id_text)
    if parts is not None:
        return parts[1]
    return _hierarchical_root(span_id_text)


def span_id_of(span_id_text: str | None) -> str:
    """Return the span id part of an id (the whole id for hierarchical ids)."""
    if not span_id_text:
        return ""
    parts = _w3c_parts(span_id_text)
    if parts is not None:
        return "" if parts[2] == _ZERO_SPAN_ID else parts[2]
    return span_id_text


def root_id_of(span_id_text: str | None) -> str:
    """Return the id shared by every span of the trace."""
    return trace_id_of(span_id_text)


parent_span_id_of = span_id_of
