"""Value-to-text conversion and quote escaping."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from spantext.culture import INVARIANT


def _scalar_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, datetime):
        return INVARIANT.format_datetime(value)
    if isinstance(value, (bytes, bytearray)):
        return value.hex()
    return str(value)


def to_text(value: Any) -> str | None:
    """Convert a tag or baggage value to invariant display text.

    ``None`` stays ``None`` ("no value").  Sequences (other than strings and
    bytes) are joined with ``","``.  If the conversion raises, the result is
    ``""``; a single bad value never aborts a render.
    """
    if value is None:
        return None
    try:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            return ",".join("" if item is None else _scalar_text(item) for item in value)
        if isinstance(value, Mapping):
            return str(dict(value))
        return _scalar_text(value)
    except Exception:
        return ""


def escape_quotes(text: str) -> str:
    """Escape embedded double quotes as ``\\"``."""
    return text.replace('"', '\\"')
