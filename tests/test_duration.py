"""Tests for spantext.duration."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest
from span_ids import START

from spantext import duration
from spantext.culture import INVARIANT, get_culture
from spantext.duration import (
    MIN_DURATION,
    ensure_duration_cache,
    get_duration,
    get_duration_cache,
    get_duration_ms,
    render_duration_ms,
)
from spantext.model import Span


@pytest.fixture()
def no_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(duration, "_duration_ms_text", None)


def _render(value: float, fmt: str | None = None, culture=INVARIANT) -> str:  # type: ignore[no-untyped-def]
    out: list[str] = []
    render_duration_ms(out, value, fmt, culture)
    return "".join(out)


class TestGetDuration:
    def test_unset_start_time(self) -> None:
        assert get_duration(Span("op")) is None
        assert get_duration(Span("op", start_time=datetime.min)) is None

    def test_recorded_duration(self) -> None:
        span = Span("op", start_time=START, duration=timedelta(seconds=2))
        assert get_duration(span, lambda: START + timedelta(hours=1)) == timedelta(seconds=2)

    def test_open_span_uses_clock(self) -> None:
        span = Span("op", start_time=START)
        now = START + timedelta(milliseconds=1500.25)
        assert get_duration(span, lambda: now) == timedelta(milliseconds=1500.25)

    def test_negative_elapsed_is_clamped(self) -> None:
        span = Span("op", start_time=START)
        assert get_duration(span, lambda: START - timedelta(seconds=1)) == MIN_DURATION

    def test_naive_start_time_treated_as_utc(self) -> None:
        span = Span("op", start_time=START.replace(tzinfo=None))
        assert get_duration(span, lambda: START + timedelta(seconds=1)) == timedelta(seconds=1)

    def test_duration_ms(self) -> None:
        span = Span("op", start_time=START)
        now = START + timedelta(milliseconds=1500.25)
        assert get_duration_ms(span, lambda: now) == 1500.25


class TestRenderDurationMsFastPath:
    def test_fraction_padded_to_three_digits(self) -> None:
        ensure_duration_cache()
        assert _render(1500.25) == "1500.250"
        assert _render(3.125) == "3.125"
        assert _render(2.0625) == "2.062"
        assert _render(1.0078125) == "1.007"

    def test_whole_milliseconds_get_dot_zero(self) -> None:
        ensure_duration_cache()
        assert _render(12.0) == "12.0"
        assert _render(0.0) == "0.0"

    def test_sub_microsecond_remainder_is_dropped(self) -> None:
        assert _render(5.0001) == "5.0"

    def test_works_without_cache(self, no_cache: None) -> None:
        assert get_duration_cache() is None
        assert _render(1500.25) == "1500.250"
        assert _render(7.0) == "7.0"


class TestRenderDurationMsFallback:
    def test_explicit_format(self) -> None:
        assert _render(1500.25, ".1f") == "1500.2"
        assert _render(1500.25, ".3f") == "1500.250"

    def test_culture_without_format(self) -> None:
        assert _render(1500.25, None, get_culture("de-DE")) == "1500,25"

    def test_culture_with_grouping(self) -> None:
        assert _render(1234567.5, ",.2f", get_culture("de-DE")) == "1.234.567,50"

    def test_standard_formats(self) -> None:
        assert _render(1500.25, "F3") == "1500.250"
        assert _render(1500.25, "N2") == "1,500.25"
        assert _render(1500.25, "n") == "1,500.25"
        assert _render(1500.25, "N2", get_culture("de-DE")) == "1.500,25"

    def test_custom_patterns(self) -> None:
        assert _render(1500.25, "0.00") == "1500.25"
        assert _render(1234567.5, "#,##0.0", get_culture("de-DE")) == "1.234.567,5"

    def test_unsupported_format_uses_fast_path(self) -> None:
        assert _render(1500.25, "not-a-spec") == "1500.250"
        assert _render(1500.25, "@") == "1500.250"
        assert _render(12.0, "D") == "12.0"


class TestDurationCache:
    def test_published_once(self, no_cache: None) -> None:
        first = ensure_duration_cache()
        second = ensure_duration_cache()
        assert first is second
        assert get_duration_cache() is first

    def test_contents(self, no_cache: None) -> None:
        cache = ensure_duration_cache()
        assert len(cache) == 1000
        assert cache[0] == "0"
        assert cache[7] == "7"
        assert cache[999] == "999"

    def test_concurrent_initialization(self, no_cache: None) -> None:
        barrier = threading.Barrier(8)
        results: list[tuple[str, ...]] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            cache = ensure_duration_cache()
            with lock:
                results.append(cache)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        published = get_duration_cache()
        assert published is not None
        assert len(published) == 1000
        assert len(results) == 8
        assert all(r is published for r in results)
