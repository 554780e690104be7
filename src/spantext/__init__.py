"""spantext: render fields of the current tracing span as log text."""

from spantext.config import configure_structlog, setup_structlog
from spantext.context import current_span, default_provider, use_span
from spantext.culture import INVARIANT, Culture, get_culture, register_culture
from spantext.enums import SpanKind, StatusCode, TraceFlags
from spantext.exceptions import SpanRenderConfigError
from spantext.model import Span, SpanEvent, SpanSource, SpanView
from spantext.otel import current_otel_span
from spantext.processors import SpanFieldsProcessor, add_trace_context
from spantext.properties import SpanProperty
from spantext.renderer import SpanRenderer
from spantext.stdlib import SpanFieldsFilter

__version__ = "0.1.0"

__all__ = [
    "INVARIANT",
    "Culture",
    "Span",
    "SpanEvent",
    "SpanFieldsFilter",
    "SpanFieldsProcessor",
    "SpanKind",
    "SpanProperty",
    "SpanRenderConfigError",
    "SpanRenderer",
    "SpanSource",
    "SpanView",
    "StatusCode",
    "TraceFlags",
    "add_trace_context",
    "configure_structlog",
    "current_otel_span",
    "current_span",
    "default_provider",
    "get_culture",
    "register_culture",
    "setup_structlog",
    "use_span",
]
