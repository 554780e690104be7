"""Tests for spantext.enums."""

from __future__ import annotations

from enum import Enum

import pytest

from spantext.enums import SpanKind, StatusCode, TraceFlags, format_as_integer, format_enum


class _ForeignKind(Enum):
    INTERNAL = 0
    CLIENT = 2


class TestFormatAsInteger:
    def test_single_d(self) -> None:
        assert format_as_integer("d") is True
        assert format_as_integer("D") is True

    def test_other_patterns(self) -> None:
        assert format_as_integer(None) is False
        assert format_as_integer("") is False
        assert format_as_integer("dd") is False
        assert format_as_integer("G") is False


class TestTraceFlags:
    def test_default_is_empty_in_name_mode(self) -> None:
        assert format_enum(TraceFlags, TraceFlags.NONE) == ""

    def test_default_is_zero_in_integer_mode(self) -> None:
        assert format_enum(TraceFlags, TraceFlags.NONE, "d") == "0"

    def test_recorded(self) -> None:
        assert format_enum(TraceFlags, TraceFlags.RECORDED) == "Recorded"
        assert format_enum(TraceFlags, TraceFlags.RECORDED, "D") == "1"

    def test_plain_int(self) -> None:
        assert format_enum(TraceFlags, 1) == "Recorded"

    def test_unknown_value_renders_number(self) -> None:
        assert format_enum(TraceFlags, 3) == "3"
        assert format_enum(TraceFlags, 3, "d") == "3"


class TestSpanKind:
    def test_internal_is_default(self) -> None:
        assert format_enum(SpanKind, SpanKind.INTERNAL) == ""
        assert format_enum(SpanKind, SpanKind.INTERNAL, "d") == "0"

    @pytest.mark.parametrize(
        ("kind", "name", "ordinal"),
        [
            (SpanKind.SERVER, "Server", "1"),
            (SpanKind.CLIENT, "Client", "2"),
            (SpanKind.PRODUCER, "Producer", "3"),
            (SpanKind.CONSUMER, "Consumer", "4"),
        ],
    )
    def test_members(self, kind: SpanKind, name: str, ordinal: str) -> None:
        assert format_enum(SpanKind, kind) == name
        assert format_enum(SpanKind, kind, "d") == ordinal

    def test_foreign_enum_value(self) -> None:
        assert format_enum(SpanKind, _ForeignKind.CLIENT) == "Client"
        assert format_enum(SpanKind, _ForeignKind.INTERNAL) == ""


class TestStatusCode:
    def test_members(self) -> None:
        assert format_enum(StatusCode, StatusCode.UNSET) == ""
        assert format_enum(StatusCode, StatusCode.OK) == "Ok"
        assert format_enum(StatusCode, StatusCode.ERROR) == "Error"
        assert format_enum(StatusCode, StatusCode.ERROR, "d") == "2"


class TestGenericFormats:
    def test_general_format_does_not_blank_default(self) -> None:
        assert format_enum(StatusCode, StatusCode.UNSET, "G") == "Unset"
        assert format_enum(TraceFlags, TraceFlags.NONE, "g") == "None"

    def test_hex(self) -> None:
        assert format_enum(SpanKind, SpanKind.CONSUMER, "X") == "00000004"
        assert format_enum(TraceFlags, 255, "x") == "000000ff"

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(ValueError, match="not valid for an enumeration"):
            format_enum(SpanKind, SpanKind.SERVER, "yyyy")


class TestMissingValue:
    @pytest.mark.parametrize("enum_type", [TraceFlags, SpanKind, StatusCode])
    def test_none_is_default_member(self, enum_type: type[Enum]) -> None:
        assert format_enum(enum_type, None) == ""
        assert format_enum(enum_type, None, "d") == "0"

    def test_none_with_generic_format(self) -> None:
        assert format_enum(StatusCode, None, "G") == "Unset"
