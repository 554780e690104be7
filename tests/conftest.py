"""Shared fixtures for spantext tests."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest
import structlog
from span_ids import PARENT_SPAN_ID, ROOT_SPAN_ID, START, TRACE_ID, W3C_ID

from spantext.enums import SpanKind, StatusCode, TraceFlags
from spantext.model import Span, SpanEvent, SpanSource


@pytest.fixture(autouse=True)
def _reset_logging() -> None:  # type: ignore[misc]
    """Reset root logger handlers and level after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level

    yield  # type: ignore[misc]

    root.handlers[:] = original_handlers
    root.setLevel(original_level)


@pytest.fixture(autouse=True)
def _reset_structlog() -> None:  # type: ignore[misc]
    """Reset structlog configuration after each test."""
    yield  # type: ignore[misc]
    structlog.reset_defaults()


@pytest.fixture()
def root_span() -> Span:
    return Span(
        "checkout",
        id=f"00-{TRACE_ID}-{ROOT_SPAN_ID}-01",
        start_time=START - timedelta(seconds=5),
        duration=timedelta(seconds=10),
    )


@pytest.fixture()
def parent_span(root_span: Span) -> Span:
    span = Span(
        "load-cart",
        id=f"00-{TRACE_ID}-{PARENT_SPAN_ID}-01",
        start_time=START - timedelta(seconds=1),
        parent=root_span,
    )
    span.set_custom_property("tenant", "acme")
    return span


@pytest.fixture()
def span(parent_span: Span) -> Span:
    return Span(
        "GET /cart",
        id=W3C_ID,
        display_name="Get cart",
        start_time=START,
        duration=timedelta(milliseconds=1500.25),
        trace_state="congo=t61rcWkgMzE",
        trace_flags=TraceFlags.RECORDED,
        kind=SpanKind.SERVER,
        status=StatusCode.ERROR,
        status_description="cart service unavailable",
        source=SpanSource("shop.http", "2.1.0"),
        is_all_data_requested=True,
        baggage=[("user", "42"), ("region", "eu-west"), ("user", "43")],
        tags=[("http.method", "GET"), ("http.status_code", 503), ("cached", None)],
        events=[
            SpanEvent("cache.miss", START, [("key", "cart:42")]),
            SpanEvent("retry", START + timedelta(milliseconds=5)),
        ],
        parent=parent_span,
    )
