"""Culture-aware formatting of numbers, timestamps and time spans.

The :mod:`locale` module changes process-wide state and is not safe to switch
per call from concurrent logging threads, so a culture here is a small frozen
record of the separators and default date pattern it needs.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from spantext.exceptions import SpanRenderConfigError

log = logging.getLogger(__name__)

_PLACEHOLDER = "\x00"

_STANDARD_FORMAT = re.compile(r"^([DdEeFfGgNnPpRrXx])(\d{0,2})$")
_CUSTOM_FORMAT = re.compile(r"^[#0,]*(?:\.[#0]*)?$")


def _pad_exponent(text: str, letter: str, digits: int) -> str:
    mantissa, _, exponent = text.partition(letter)
    if not exponent:
        return text
    sign = "-" if exponent.startswith("-") else "+"
    return f"{mantissa}{letter}{sign}{exponent.lstrip('+-').zfill(digits)}"


def _shortest(value: float | int, letter: str) -> str:
    if isinstance(value, int):
        return str(value)
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text.replace("e", letter)


def _standard_number(value: float | int, letter: str, digits: str) -> str:
    """Render a standard numeric format: a letter plus optional precision."""
    precision = int(digits) if digits else None
    kind = letter.upper()
    if kind in "DX":
        if not isinstance(value, int):
            msg = f"Format string {letter + digits!r} is only valid for integers"
            raise ValueError(msg)
        if kind == "D":
            sign = "-" if value < 0 else ""
            return sign + str(abs(value)).zfill(precision or 0)
        return format(value, f"0{precision}{letter}" if precision else letter)
    if kind == "F":
        return f"{value:.{2 if precision is None else precision}f}"
    if kind == "N":
        return f"{value:,.{2 if precision is None else precision}f}"
    if kind == "P":
        return f"{value * 100:,.{2 if precision is None else precision}f} %"
    if kind == "E":
        text = format(value, f".{6 if precision is None else precision}{letter}")
        return _pad_exponent(text, letter, 3)
    exponent_letter = "E" if letter in "GR" else "e"
    if kind == "G" and precision:
        text = format(value, f".{precision}{'G' if letter == 'G' else 'g'}")
        return _pad_exponent(text, exponent_letter, 2)
    return _shortest(value, exponent_letter)


def _group(digits: str) -> str:
    head = len(digits) % 3 or 3
    return ",".join([digits[:head]] + [digits[i : i + 3] for i in range(head, len(digits), 3)])


def _custom_number(value: float | int, fmt: str) -> str:
    """Render a custom pattern of ``0`` (digit), ``#`` (optional digit),
    ``,`` (grouping, or divide by 1000 when trailing) and ``.``."""
    integer_part, _, fraction_part = fmt.partition(".")
    stripped = integer_part.rstrip(",")
    scale = len(integer_part) - len(stripped)
    if scale:
        value = value / 1000**scale
    min_integer = stripped.count("0")
    min_fraction = fraction_part.rfind("0") + 1

    text = f"{abs(value):.{len(fraction_part)}f}"
    whole, _, fraction = text.partition(".")
    while len(fraction) > min_fraction and fraction.endswith("0"):
        fraction = fraction[:-1]
    if whole == "0" and min_integer == 0:
        whole = ""
    whole = whole.zfill(min_integer)
    if "," in stripped and whole:
        whole = _group(whole)

    sign = "-" if value < 0 and any(ch in "123456789" for ch in whole + fraction) else ""
    return sign + whole + ("." + fraction if fraction else "")


@dataclass(frozen=True)
class Culture:
    """Formatting conventions for one culture.

    Parameters
    ----------
    name:
        Culture name (``""`` for the invariant culture).
    decimal_separator:
        Character placed between integer and fractional digits.
    group_separator:
        Character placed between digit groups when grouping is requested.
    datetime_pattern:
        :meth:`~datetime.datetime.strftime` pattern used when no explicit
        format is given.
    """

    name: str
    decimal_separator: str = "."
    group_separator: str = ","
    datetime_pattern: str = "%m/%d/%Y %H:%M:%S"

    def _localize(self, text: str) -> str:
        if self.decimal_separator == "." and self.group_separator == ",":
            return text
        return (
            text.replace(",", _PLACEHOLDER)
            .replace(".", self.decimal_separator)
            .replace(_PLACEHOLDER, self.group_separator)
        )

    def format_number(self, value: float | int, fmt: str | None = None) -> str:
        """Format *value*, then apply the culture's separators.

        *fmt* may be a standard numeric format (``F2``, ``N0``, ``E``, ``G4``,
        ``P1``, ``R``, and ``D``/``X`` for integers), a custom pattern built
        from ``0``, ``#``, ``,`` and ``.`` (``"0.00"``, ``"#,##0.0"``), or a
        Python format spec (``".2f"``, ``",.1f"``).  An unsupported *fmt*
        raises :class:`ValueError`.
        """
        if not fmt:
            return self._localize(format(value, ""))
        match = _STANDARD_FORMAT.match(fmt)
        if match is not None:
            text = _standard_number(value, match.group(1), match.group(2))
        elif _CUSTOM_FORMAT.match(fmt) and any(ch in "0#" for ch in fmt):
            text = _custom_number(value, fmt)
        elif fmt[-1:] in "nN" or fmt[-1:].isdigit():
            # Python's "n" reads the process locale, and a spec without a
            # type letter falls back to general format ("2e+03").
            msg = f"Format string {fmt!r} is not valid for a number"
            raise ValueError(msg)
        else:
            text = format(value, fmt)
        return self._localize(text)

    def format_datetime(self, value: datetime, fmt: str | None = None) -> str:
        """Format *value*.

        ``None`` uses :attr:`datetime_pattern`; ``"o"`` is ISO 8601, ``"s"``
        sortable local, ``"u"`` universal sortable; anything else is handed to
        :meth:`~datetime.datetime.strftime`.
        """
        if not fmt:
            return value.strftime(self.datetime_pattern)
        if fmt in ("o", "O"):
            return value.isoformat()
        if fmt == "s":
            return value.strftime("%Y-%m-%dT%H:%M:%S")
        if fmt == "u":
            return value.strftime("%Y-%m-%d %H:%M:%SZ")
        return value.strftime(fmt)

    def format_timespan(self, value: timedelta, fmt: str | None = None) -> str:
        """Format a :class:`~datetime.timedelta`.

        * ``None`` or ``"c"``: ``[-][d.]hh:mm:ss[.ffffff]``
        * ``"g"``: ``[-][d:]h:mm:ss[<sep>FFFFFF]`` with trailing zeros trimmed
        * ``"G"``: ``[-]d:hh:mm:ss<sep>ffffff``

        Any other pattern raises :class:`ValueError`.
        """
        sign = "-" if value < timedelta(0) else ""
        value = abs(value)
        days = value.days
        hours, remainder = divmod(value.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        micros = value.microseconds

        if not fmt or fmt == "c":
            text = f"{sign}{days}." if days else sign
            text += f"{hours:02d}:{minutes:02d}:{seconds:02d}"
            if micros:
                text += f".{micros:06d}"
            return text
        if fmt == "g":
            text = f"{sign}{days}:" if days else sign
            text += f"{hours}:{minutes:02d}:{seconds:02d}"
            if micros:
                text += self.decimal_separator + f"{micros:06d}".rstrip("0")
            return text
        if fmt == "G":
            return (
                f"{sign}{days}:{hours:02d}:{minutes:02d}:{seconds:02d}"
                f"{self.decimal_separator}{micros:06d}"
            )
        msg = f"Format string {fmt!r} is not valid for a time span"
        raise ValueError(msg)


INVARIANT = Culture("")

_CULTURES: dict[str, Culture] = {
    c.name.lower(): c
    for c in (
        Culture("en-US", ".", ",", "%m/%d/%Y %I:%M:%S %p"),
        Culture("en-GB", ".", ",", "%d/%m/%Y %H:%M:%S"),
        Culture("de-DE", ",", ".", "%d.%m.%Y %H:%M:%S"),
        Culture("fr-FR", ",", "\u202f", "%d/%m/%Y %H:%M:%S"),
        Culture("nl-NL", ",", ".", "%d-%m-%Y %H:%M:%S"),
        Culture("sv-SE", ",", "\u00a0", "%Y-%m-%d %H:%M:%S"),
        Culture("ja-JP", ".", ",", "%Y/%m/%d %H:%M:%S"),
    )
}


def get_culture(name: str | Culture | None) -> Culture:
    """Look up a culture by name (case-insensitive, ``_`` or ``-`` separated).

    ``None``, ``""`` and ``"invariant"`` return :data:`INVARIANT`.
    """
    if isinstance(name, Culture):
        return name
    if not name or name.lower() == "invariant":
        return INVARIANT
    key = name.replace("_", "-").lower()
    culture = _CULTURES.get(key)
    if culture is None:
        msg = f"Unknown culture {name!r}; known: {sorted(c.name for c in _CULTURES.values())}"
        raise SpanRenderConfigError(msg)
    return culture


def register_culture(culture: Culture) -> None:
    """Make *culture* available to :func:`get_culture`."""
    key = culture.name.lower()
    if key in _CULTURES:
        log.debug("Replacing registered culture %s", culture.name)
    _CULTURES[key] = culture
