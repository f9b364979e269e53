"""Span identity and lifecycle.

Each logger owns exactly one span. The span is created when the logger is
constructed (start and end time equal) and closed once by ``Span.end()``.

Nesting is expressed through ``SpanContext``: a child shares its parent's
trace id and records the parent's span id. Only the identifier snapshot is
kept, never a reference to the parent logger.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum

from ..errors import LoggerEndedError
from .ids import new_span_id, new_trace_id


class SpanKind(IntEnum):
    """OTLP span kinds. spanlog only emits INTERNAL."""

    UNSPECIFIED = 0
    INTERNAL = 1
    SERVER = 2
    CLIENT = 3
    PRODUCER = 4
    CONSUMER = 5


@dataclass(frozen=True, slots=True)
class SpanContext:
    """Immutable trace/span identity.

    Attributes:
        span_id: 16 hex chars, unique per span
        trace_id: 32 hex chars, shared by every span of one trace
        parent_id: span id of the parent span, if any
    """

    span_id: str
    trace_id: str
    parent_id: str | None = None

    @classmethod
    def new(cls) -> SpanContext:
        """Fresh root identity with a new trace."""
        return cls(span_id=new_span_id(), trace_id=new_trace_id())

    def child(self) -> SpanContext:
        """New span in the same trace, parented to this one."""
        return SpanContext(span_id=new_span_id(), trace_id=self.trace_id, parent_id=self.span_id)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(slots=True)
class Span:
    """The single span owned by a logger.

    Times are nanoseconds since the epoch. ``end_time_ns`` equals
    ``start_time_ns`` until ``end()`` is called.

    Example:
        >>> span = Span(name="import-job", context=SpanContext.new())
        >>> span.end()
        >>> span.duration_ms >= 0
        True
    """

    name: str
    context: SpanContext
    kind: SpanKind = SpanKind.INTERNAL
    start_time_ns: int = field(default_factory=time.time_ns)
    end_time_ns: int = 0
    _ended: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        if not self.end_time_ns:
            self.end_time_ns = self.start_time_ns

    @property
    def is_active(self) -> bool:
        return not self._ended

    @property
    def duration_ms(self) -> float:
        return (self.end_time_ns - self.start_time_ns) / 1_000_000

    def end(self, end_time_ns: int | None = None) -> Span:
        """Set the real end time. A span can only be ended once."""
        if self._ended:
            raise LoggerEndedError(f"Span {self.context.span_id} has already ended")
        self.end_time_ns = max(end_time_ns or time.time_ns(), self.start_time_ns)
        self._ended = True
        return self
