"""Tests for spantext.context."""

from __future__ import annotations

import threading
from unittest.mock import patch

from spantext.context import current_span, default_provider, use_span
from spantext.model import Span


class TestUseSpan:
    def test_binds_and_resets(self) -> None:
        span = Span("op")
        assert current_span() is None
        with use_span(span) as bound:
            assert bound is span
            assert current_span() is span
        assert current_span() is None

    def test_nesting(self) -> None:
        outer, inner = Span("outer"), Span("inner")
        with use_span(outer):
            with use_span(inner):
                assert current_span() is inner
            assert current_span() is outer

    def test_reset_on_error(self) -> None:
        span = Span("op")
        try:
            with use_span(span):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert current_span() is None

    def test_other_threads_do_not_see_span(self) -> None:
        seen: list[object] = []
        with use_span(Span("op")):
            thread = threading.Thread(target=lambda: seen.append(current_span()))
            thread.start()
            thread.join()
        assert seen == [None]


class TestDefaultProvider:
    def test_prefers_bound_span(self) -> None:
        span = Span("op")
        with use_span(span):
            assert default_provider() is span

    def test_none_without_span_or_otel(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry": None}):
            assert default_provider() is None
