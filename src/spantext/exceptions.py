"""Exceptions raised by spantext."""

from __future__ import annotations


class SpanRenderConfigError(ValueError):
    """Raised when renderer options cannot be interpreted.

    Subclasses :class:`ValueError` so callers validating plain configuration
    values can catch either.
    """
