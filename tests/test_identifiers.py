"""Tests for spantext.identifiers."""

from __future__ import annotations

from span_ids import SPAN_ID, TRACE_ID, W3C_ID

from spantext.identifiers import (
    format_w3c_id,
    parent_span_id_of,
    root_id_of,
    span_id_of,
    trace_id_of,
)


class TestW3C:
    def test_trace_id(self) -> None:
        assert trace_id_of(W3C_ID) == TRACE_ID

    def test_span_id(self) -> None:
        assert span_id_of(W3C_ID) == SPAN_ID

    def test_root_id_is_trace_id(self) -> None:
        assert root_id_of(W3C_ID) == TRACE_ID

    def test_zero_parent_span_id_is_empty(self) -> None:
        assert parent_span_id_of(f"00-{TRACE_ID}-0000000000000000-00") == ""

    def test_format(self) -> None:
        assert format_w3c_id(0x0AF7651916CD43DD8448EB211C80319C, 0xB7AD6B7169203331, 1) == W3C_ID
        assert format_w3c_id(TRACE_ID, SPAN_ID, 1) == W3C_ID


class TestHierarchical:
    def test_root(self) -> None:
        assert trace_id_of("|a000b421-5d183ab6.1.8e2d4c28_1.") == "a000b421-5d183ab6"
        assert root_id_of("|abc.1.") == "abc"

    def test_span_id_is_whole_id(self) -> None:
        assert span_id_of("|abc.1.") == "|abc.1."

    def test_without_dots(self) -> None:
        assert trace_id_of("plain-id") == "plain-id"


class TestMissing:
    def test_none_and_empty(self) -> None:
        for fn in (trace_id_of, span_id_of, root_id_of, parent_span_id_of):
            assert fn(None) == ""
            assert fn("") == ""
