"""Span duration computation and millisecond rendering.

``render_duration_ms`` has a fast path for the invariant culture with no
format string: whole and fractional milliseconds are looked up in a shared
table of pre-rendered ``"0"`` .. ``"999"`` strings instead of going through
float formatting on every log call.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from spantext.culture import INVARIANT, Culture
from spantext.model import SpanView

DURATION_CACHE_SIZE = 1000
MIN_DURATION = timedelta(microseconds=1)

_duration_ms_text: tuple[str, ...] | None = None
_publish_lock = threading.Lock()

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _build_duration_cache() -> tuple[str, ...]:
    return tuple(str(i) for i in range(DURATION_CACHE_SIZE))


def ensure_duration_cache() -> tuple[str, ...]:
    """Publish the shared duration table if absent and return it.

    The table is built outside the lock; only the first publisher's tuple is
    kept, a concurrently built duplicate is dropped.
    """
    global _duration_ms_text
    cache = _duration_ms_text
    if cache is not None:
        return cache
    candidate = _build_duration_cache()
    with _publish_lock:
        if _duration_ms_text is None:
            _duration_ms_text = candidate
        return _duration_ms_text


def get_duration_cache() -> tuple[str, ...] | None:
    """Return the published table, or ``None`` before the first publish."""
    return _duration_ms_text


def is_unset(start_time: datetime | None) -> bool:
    return start_time is None or start_time.replace(tzinfo=None) == datetime.min


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def get_duration(span: SpanView, clock: Clock = utcnow) -> timedelta | None:
    """Return the span's duration, measuring open spans against *clock*.

    ``None`` when the span has no start time.  A zero recorded duration means
    the span is still open; negative elapsed time is clamped to
    :data:`MIN_DURATION`.
    """
    start_time = span.start_time
    if is_unset(start_time):
        return None
    duration = span.duration
    if duration == timedelta(0):
        duration = _as_utc(clock()) - _as_utc(start_time)  # type: ignore[arg-type]
        if duration < timedelta(0):
            duration = MIN_DURATION
    return duration


def get_duration_ms(span: SpanView, clock: Clock = utcnow) -> float | None:
    duration = get_duration(span, clock)
    if duration is None:
        return None
    return duration / timedelta(milliseconds=1)


def render_duration_ms(
    out: list[str],
    duration_ms: float,
    fmt: str | None = None,
    culture: Culture = INVARIANT,
) -> None:
    """Append *duration_ms* to *out*.

    Fast path output is ``<whole>.<fraction>`` where the fraction is the
    truncated microsecond remainder padded to three digits, or ``.0`` when
    there is none.  Other cultures and explicit formats use
    :meth:`Culture.format_number`; a format it rejects falls back to the fast
    path text.
    """
    if culture is not INVARIANT or fmt:
        try:
            text = culture.format_number(duration_ms, fmt)
        except ValueError:
            pass
        else:
            out.append(text)
            return
    _render_invariant_ms(out, duration_ms)


def _render_invariant_ms(out: list[str], duration_ms: float) -> None:
    cache = _duration_ms_text
    whole = int(duration_ms)
    if cache is not None and 0 <= whole < len(cache):
        out.append(cache[whole])
    else:
        out.append(str(whole))

    fraction = int((duration_ms - whole) * 1000.0)
    if fraction > 0:
        out.append(".")
        if fraction < 100:
            out.append("0")
        if fraction < 10:
            out.append("0")
        if cache is not None and fraction < len(cache):
            out.append(cache[fraction])
        else:
            out.append(str(fraction))
    else:
        out.append(".0")
