"""Structlog configuration with span fields.

Configures structlog to render every log record with the selected span
fields next to the standard ones:

- ``timestamp``: ISO 8601 in UTC.
- ``service``: application name.
- ``level``: log level name.
- ``message``: the log message.
- span fields such as ``trace_id`` and ``span_id`` when a span is active.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import Any

import orjson
import structlog
from structlog.contextvars import merge_contextvars

from spantext.exceptions import SpanRenderConfigError
from spantext.processors import FieldSpec, SpanFieldsProcessor

DEFAULT_SPAN_FIELDS: dict[str, FieldSpec] = {
    "trace_id": "TraceId",
    "span_id": "SpanId",
}


def _orjson_serializer(obj: object, **_kw: object) -> str:
    """Serialize *obj* to a JSON string using orjson."""
    return orjson.dumps(obj, default=str).decode()


def _to_logging_level(level_name: str) -> int:
    upper_level = level_name.upper()
    if upper_level == "WARN":
        return logging.WARNING
    result: int = getattr(logging, upper_level, logging.INFO)
    return result


def _add_service(service: str) -> structlog.types.Processor:
    def _processor(
        _logger: Any,
        _method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict.setdefault("service", service)
        return event_dict

    return _processor  # type: ignore[return-value]


def parse_span_fields(text: str) -> dict[str, dict[str, str]]:
    """Parse ``key=Property[:option=value...]`` entries separated by commas.

    Example: ``"trace_id=TraceId,elapsed=DurationMs:culture=de-DE"``.
    """
    fields: dict[str, dict[str, str]] = {}
    for entry in text.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, rest = entry.partition("=")
        if not sep or not key.strip() or not rest.strip():
            msg = f"Invalid span field {entry!r}; expected key=Property[:option=value]"
            raise SpanRenderConfigError(msg)
        prop, *options = rest.split(":")
        spec = {"property": prop.strip()}
        for option in options:
            name, sep, value = option.partition("=")
            if not sep:
                msg = f"Invalid option {option!r} in span field {entry!r}"
                raise SpanRenderConfigError(msg)
            spec[name.strip()] = value.strip()
        fields[key.strip()] = spec
    return fields


def _build_shared_processors(
    service: str,
    span_fields: Mapping[str, FieldSpec],
) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _add_service(service),
    ]
    if span_fields:
        processors.append(SpanFieldsProcessor(span_fields))  # type: ignore[arg-type]
    processors += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.EventRenamer("message"),
    ]
    return processors


def configure_structlog(
    *,
    service: str = "app",
    level: str = "INFO",
    json_logs: bool = True,
    stream: Any = None,
    span_fields: Mapping[str, FieldSpec] | None = None,
    clear_handlers: bool = True,
) -> None:
    """Configure structlog and the root logger to emit span fields.

    Parameters
    ----------
    service:
        Application/service name added to every log record.
    level:
        Minimum log level (e.g. ``"DEBUG"``, ``"INFO"``).
    json_logs:
        ``True`` for JSON output, ``False`` for console output.
    stream:
        Output stream.  Defaults to ``sys.stdout``.
    span_fields:
        Event-dict key to span field spec (see
        :class:`~spantext.processors.SpanFieldsProcessor`).  Defaults to
        :data:`DEFAULT_SPAN_FIELDS`; pass ``{}`` to disable.
    clear_handlers:
        Remove existing root logger handlers first.
    """
    if stream is None:
        stream = sys.stdout
    if span_fields is None:
        span_fields = DEFAULT_SPAN_FIELDS

    shared_processors = _build_shared_processors(service, span_fields)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(_to_logging_level(level)),
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer(serializer=_orjson_serializer)
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False, event_key="message")
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root = logging.getLogger()
    if clear_handlers:
        root.handlers.clear()
    root.setLevel(_to_logging_level(level))

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_structlog(*, service: str = "app", stream: Any = None) -> None:
    """Application-level setup driven by environment variables.

    - ``LOG_LEVEL`` (default: ``"INFO"``)
    - ``JSON_LOGS`` (``"0"`` = console, default: ``"1"`` = JSON)
    - ``LOG_SPAN_FIELDS`` (see :func:`parse_span_fields`; default:
      ``trace_id`` and ``span_id``)
    """
    level = os.environ.get("LOG_LEVEL", "INFO")
    json_logs = os.environ.get("JSON_LOGS", "1") != "0"
    raw_fields = os.environ.get("LOG_SPAN_FIELDS")
    span_fields = parse_span_fields(raw_fields) if raw_fields is not None else None

    configure_structlog(
        service=service,
        level=level,
        json_logs=json_logs,
        stream=stream,
        span_fields=span_fields,
    )
