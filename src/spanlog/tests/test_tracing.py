"""Tests for identifier generation and span lifecycle."""

from __future__ import annotations

import logging
import re

import pytest

from spanlog import Log, LoggerEndedError, Span, SpanContext, SpanKind, new_span_id, new_trace_id
from spanlog.tracing import ids

_SPAN_ID = re.compile(r"^[0-9a-f]{16}$")
_TRACE_ID = re.compile(r"^[0-9a-f]{32}$")


# ═════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═════════════════════════════════════════════════════════════════════════════


def test_identifier_shape() -> None:
    for _ in range(200):
        span_id, trace_id = new_span_id(), new_trace_id()
        assert _SPAN_ID.match(span_id)
        assert _TRACE_ID.match(trace_id)
        assert int(span_id[:2], 16) & 0x01
        assert int(trace_id[:2], 16) & 0x01


def test_span_ids_do_not_collide() -> None:
    """Probabilistic: 10,000 loggers, 10,000 distinct span ids."""
    assert len({Log(stdout=lambda _: None).span_id for _ in range(10_000)}) == 10_000


def test_insecure_fallback_warns(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    """Without an OS randomness source ids still work, but never silently."""
    def no_entropy(size: int) -> bytes:
        raise NotImplementedError

    monkeypatch.setattr(ids.secrets, "token_bytes", no_entropy)
    with caplog.at_level(logging.WARNING, logger="spanlog.tracing"):
        span_id = new_span_id()

    assert _SPAN_ID.match(span_id)
    assert int(span_id[:2], 16) & 0x01
    assert any("non-cryptographic" in r.message for r in caplog.records)


# ═════════════════════════════════════════════════════════════════════════════
# SpanContext & Span
# ═════════════════════════════════════════════════════════════════════════════


def test_child_context_shares_trace() -> None:
    root = SpanContext.new()
    child = root.child()
    assert root.is_root and not child.is_root
    assert child.trace_id == root.trace_id
    assert child.parent_id == root.span_id
    assert child.span_id != root.span_id


def test_span_starts_with_equal_times_and_ends_once() -> None:
    span = Span(name="job", context=SpanContext.new())
    assert span.kind is SpanKind.INTERNAL
    assert span.start_time_ns == span.end_time_ns
    assert span.is_active

    span.end()
    assert not span.is_active
    assert span.end_time_ns >= span.start_time_ns
    assert span.duration_ms >= 0

    with pytest.raises(LoggerEndedError):
        span.end()


def test_span_end_never_precedes_start() -> None:
    span = Span(name="job", context=SpanContext.new())
    span.end(end_time_ns=1)
    assert span.end_time_ns == span.start_time_ns


# ═════════════════════════════════════════════════════════════════════════════
# Logger correlation
# ═════════════════════════════════════════════════════════════════════════════


def test_parent_inheritance() -> None:
    parent = Log()
    child = Log(parent_logger=parent)
    assert child.trace_id == parent.trace_id
    assert child.parent_span_id == parent.span_id
    assert child.span_id != parent.span_id


def test_root_loggers_get_fresh_traces() -> None:
    first, second = Log(), Log()
    assert first.parent_span_id is None
    assert first.trace_id != second.trace_id


def test_parent_link_is_a_snapshot() -> None:
    """The child keeps the parent's ids, not the parent logger."""
    parent = Log()
    child = Log(parent_logger=parent)
    assert child.conf.parent_logger == parent.span_context
    assert not isinstance(child.conf.parent_logger, Log)


def test_child_helper_nests_span() -> None:
    parent = Log(context={"job": "import"})
    child = parent.child(span_name="fetch")
    assert child.trace_id == parent.trace_id
    assert child.parent_span_id == parent.span_id
    assert child.span.name == "fetch"
    assert child.context == {"job": "import"}


def test_span_name_defaults_to_span_id() -> None:
    log = Log()
    assert log.span.name == log.span_id


def test_identity_is_immutable() -> None:
    log = Log()
    with pytest.raises(AttributeError):
        log.span_id = "0" * 16  # type: ignore[misc]
    with pytest.raises(AttributeError):
        log.span_context.trace_id = "0" * 32  # type: ignore[misc]
