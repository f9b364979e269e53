"""Tracing primitives: identifiers, span context and the logger-owned span."""

from .ids import new_span_id, new_trace_id, random_id_bytes
from .span import Span, SpanContext, SpanKind

__all__ = [
    "Span",
    "SpanContext",
    "SpanKind",
    "new_span_id",
    "new_trace_id",
    "random_id_bytes",
]
