"""Flat and JSON-like rendering of key/value collections and span events.

Flat output is ``key=value,key2`` with nothing quoted.  JSON-like output is
``{ "key": "value", "key2": null }`` with embedded quotes escaped.  Empty
collections write nothing at all.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sized
from datetime import datetime, timezone
from typing import Any

from spantext.convert import escape_quotes, to_text
from spantext.model import Pairs, SpanEvent

DICTIONARY_PREFIX = "{ "
EVENT_TAGS_PREFIX = ', "tags"={ '


def _is_empty(collection: Any) -> bool:
    return isinstance(collection, Sized) and len(collection) == 0


def _iter_pairs(collection: Pairs) -> Iterable[tuple[str, Any]]:
    if isinstance(collection, Mapping):
        return collection.items()
    return collection


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


def get_collection_item(item: str | None, collection: Pairs) -> str:
    """Return the text of the first pair whose key equals *item* exactly."""
    if _is_empty(collection):
        return ""
    for key, value in _iter_pairs(collection):
        if key == item:
            text = to_text(value)
            return "" if text is None else text
    return ""


def render_pairs_flat(out: list[str], collection: Pairs) -> None:
    if _is_empty(collection):
        return
    first = True
    for key, value in _iter_pairs(collection):
        if not first:
            out.append(",")
        first = False
        if key is not None:
            out.append(key)
        text = to_text(value)
        if text is None:
            continue
        out.append("=")
        out.append(text)


def render_pairs_json(
    out: list[str],
    collection: Pairs,
    prefix: str = DICTIONARY_PREFIX,
) -> None:
    if _is_empty(collection):
        return
    first = True
    for key, value in _iter_pairs(collection):
        if _is_blank(key):
            continue
        out.append(prefix if first else ", ")
        first = False
        out.append('"')
        out.append(escape_quotes(key))
        text = to_text(value)
        if text is None:
            out.append('": null')
        else:
            out.append('": "')
            out.append(escape_quotes(text))
            out.append('"')
    if not first:
        out.append(" }")


def format_event_timestamp(timestamp: datetime) -> str:
    """Format as ``YYYY-MM-DD HH:MM:SS +hh:mm`` (naive values count as UTC)."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    offset = timestamp.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{timestamp:%Y-%m-%d %H:%M:%S} {sign}{hours:02d}:{minutes:02d}"


def render_events_flat(out: list[str], events: Iterable[SpanEvent]) -> None:
    if _is_empty(events):
        return
    first = True
    for event in events:
        if not first:
            out.append(", ")
        first = False
        if event.name is not None:
            out.append(event.name)


def render_events_json(out: list[str], events: Iterable[SpanEvent]) -> None:
    """Render events as a JSON-like list.

    The event tags are written with :data:`EVENT_TAGS_PREFIX` and the event
    is then closed with ``" }``, so an event with tags is not valid JSON.
    """
    if _is_empty(events):
        return
    first = True
    for event in events:
        if _is_blank(event.name):
            continue
        out.append("[ " if first else ", ")
        first = False
        out.append('{ "name": "')
        out.append(escape_quotes(event.name))  # type: ignore[arg-type]
        out.append('", "timestamp": "')
        out.append(format_event_timestamp(event.timestamp))
        render_pairs_json(out, event.tags, EVENT_TAGS_PREFIX)
        out.append('" }')
    if not first:
        out.append(" ]")
