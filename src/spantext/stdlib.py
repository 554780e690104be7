"""Stdlib :mod:`logging` integration.

:class:`SpanFieldsFilter` copies rendered span fields onto each
:class:`logging.LogRecord`, so plain format strings can refer to them::

    handler.addFilter(SpanFieldsFilter({"trace_id": "TraceId"}))
    handler.setFormatter(logging.Formatter("%(trace_id)s %(message)s"))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from spantext.processors import FieldSpec, build_renderer


class SpanFieldsFilter(logging.Filter):
    """Set span fields as record attributes; never filters records out.

    Missing values are set to ``""`` so format strings never fail.
    """

    def __init__(self, fields: Mapping[str, FieldSpec], name: str = "") -> None:
        super().__init__(name)
        self._renderers = [(key, build_renderer(spec)) for key, spec in fields.items()]

    def filter(self, record: logging.LogRecord) -> bool:
        for key, renderer in self._renderers:
            if not hasattr(record, key):
                setattr(record, key, renderer.render())
        return True
