"""The ``Log`` facade: leveled logging with span correlation and OTLP export.

Each ``Log`` owns one span. Every accepted call is formatted to a local sink
and, when a collector is configured, exported as an OTLP log record tagged
with the logger's trace/span ids. ``end()`` closes the span and exports it
after all of the logger's log records have been delivered (or failed).

Quick Start:
    >>> from spanlog import Log
    >>> log = Log("debug", context={"service.name": "billing"})
    >>> log.info("invoice created", {"invoice": "A-17"})
    2024-01-03T10:30:45Z [inf] invoice created {"invoice":"A-17","service.name":"billing"}

Nested spans:
    >>> job = Log(remote_base_uri="http://otel-collector:4318", span_name="nightly-import")
    >>> step = job.child(span_name="fetch")     # same trace, parented to job's span
    >>> step.verbose("fetched 120 rows")
    >>> step.end()
    >>> job.end()

Scoped lifetime:
    >>> with Log(remote_base_uri="http://otel-collector:4318") as log:
    ...     log.warn("disk almost full", {"mount": "/var"})
    # span exported on exit
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import ValidationError

from . import __version__
from .config import LogConf, get_settings
from .errors import DeliveryReport, LogConfigError, LoggerEndedError
from .exporters import OTLPHttpExporter, build_log_payload, build_span_payload
from .formatting import Metadata, get_formatter, merge_metadata, stderr_sink, stdout_sink
from .levels import ERROR_SINK_LEVELS, LogLevel, MinLevel, should_skip
from .tracing import Span, SpanContext

if TYPE_CHECKING:
    from types import TracebackType


@runtime_checkable
class LeveledLogger(Protocol):
    """Protocol for anything exposing spanlog's six level methods."""

    def error(self, msg: str, metadata: Metadata | None = None) -> None: ...
    def warn(self, msg: str, metadata: Metadata | None = None) -> None: ...
    def info(self, msg: str, metadata: Metadata | None = None) -> None: ...
    def verbose(self, msg: str, metadata: Metadata | None = None) -> None: ...
    def debug(self, msg: str, metadata: Metadata | None = None) -> None: ...
    def silly(self, msg: str, metadata: Metadata | None = None) -> None: ...


class Log:
    """Structured logger owning one span.

    Args:
        conf: A ``LogConf``, an options mapping, a bare level name, or None
        **overrides: Individual ``LogConf`` fields, applied on top of ``conf``

    Raises:
        LogConfigError: On any invalid option (unknown level, bad URI, ...)
    """

    __slots__ = (
        "_conf", "_context", "_formatter", "_stdout", "_stderr",
        "_span", "_record_context", "_exporter", "_ended",
    )

    def __init__(self, conf: LogConf | Mapping[str, Any] | str | None = None, /, **overrides: Any) -> None:
        try:
            self._conf = LogConf.coerce(conf, **overrides)
        except ValidationError as e:
            raise LogConfigError.from_validation(e) from None
        c = self._conf
        self._context: Metadata = dict(c.context)
        self._formatter = c.entry_formatter or get_formatter(c.format)
        self._stdout = c.stdout or stdout_sink
        self._stderr = c.stderr or stderr_sink

        parent = c.parent_logger
        span_context = parent.child() if parent else SpanContext.new()
        self._span = Span(name=c.span_name or span_context.span_id, context=span_context)
        self._record_context = parent if parent and c.log_as_parent else span_context

        self._exporter: OTLPHttpExporter | None = None
        if c.remote_enabled:
            self._exporter = OTLPHttpExporter(
                base_uri=c.remote_base_uri,
                headers=dict(c.remote_additional_headers),
                timeout_millis=c.remote_export_timeout_millis,
                max_queue_size=c.remote_max_queue_size,
                on_failure=self._report_failure,
                transport=c.transport,
            )
        self._ended = False

    @classmethod
    def from_env(cls, **overrides: Any) -> Log:
        """Logger configured from ``SPANLOG_*`` environment variables."""
        try:
            conf = get_settings().to_conf(**overrides)
        except ValidationError as e:
            raise LogConfigError.from_validation(e) from None
        return cls(conf)

    # ─────────────────────────────────────────────────────────────────────
    # Identity & state
    # ─────────────────────────────────────────────────────────────────────

    @property
    def span_id(self) -> str:
        return self._span.context.span_id

    @property
    def trace_id(self) -> str:
        return self._span.context.trace_id

    @property
    def parent_span_id(self) -> str | None:
        return self._span.context.parent_id

    @property
    def span_context(self) -> SpanContext:
        return self._span.context

    @property
    def span(self) -> Span:
        return self._span

    @property
    def context(self) -> Metadata:
        """Copy of the bound context."""
        return dict(self._context)

    @property
    def min_level(self) -> MinLevel:
        return self._conf.min_level

    @property
    def conf(self) -> LogConf:
        return self._conf

    @property
    def ended(self) -> bool:
        return self._ended

    def __repr__(self) -> str:
        state = "ended" if self._ended else "active"
        return f"Log(span={self._span.name!r}, trace_id={self.trace_id}, min_level={self.min_level}, {state})"

    # ─────────────────────────────────────────────────────────────────────
    # Level methods
    # ─────────────────────────────────────────────────────────────────────

    def error(self, msg: str, metadata: Metadata | None = None) -> None: self._log(LogLevel.ERROR, msg, metadata)
    def warn(self, msg: str, metadata: Metadata | None = None) -> None: self._log(LogLevel.WARN, msg, metadata)
    def info(self, msg: str, metadata: Metadata | None = None) -> None: self._log(LogLevel.INFO, msg, metadata)
    def verbose(self, msg: str, metadata: Metadata | None = None) -> None: self._log(LogLevel.VERBOSE, msg, metadata)
    def debug(self, msg: str, metadata: Metadata | None = None) -> None: self._log(LogLevel.DEBUG, msg, metadata)
    def silly(self, msg: str, metadata: Metadata | None = None) -> None: self._log(LogLevel.SILLY, msg, metadata)

    def _log(self, level: LogLevel, msg: str, metadata: Metadata | None) -> None:
        if self._ended:
            raise LoggerEndedError(f"Cannot log {level} after end() on span {self.span_id}")
        if should_skip(self._conf.min_level, level):
            return
        ts = time.time_ns() / 1_000_000
        merged = merge_metadata(metadata, self._context)
        sink = self._stderr if level in ERROR_SINK_LEVELS else self._stdout
        sink(self._formatter(level, msg, dict(merged), ts))
        if self._exporter is not None:
            self._exporter.send_log(build_log_payload(
                level, msg, merged, self._context, self._record_context, ts, __version__,
            ))

    def _report_failure(self, report: DeliveryReport) -> None:
        """Write a failed delivery to the local error sink only, never remotely."""
        if should_skip(self._conf.min_level, LogLevel.ERROR):
            return
        self._stderr(self._formatter(
            LogLevel.ERROR, f"OTLP export to {report.url} failed", report.as_metadata(), time.time_ns() / 1_000_000,
        ))

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def end(self) -> bool:
        """Close the span and, with a collector configured, export it.

        Blocks until every queued log delivery has settled, then sends the span.
        Returns whether the span was delivered (True when export is disabled).

        Raises:
            LoggerEndedError: If the logger has already ended
        """
        if self._ended:
            raise LoggerEndedError(f"end() called twice on span {self.span_id}")
        self._ended = True
        self._span.end()
        if self._exporter is None:
            return True
        try:
            return self._exporter.send_span(build_span_payload(self._span, self._context, __version__))
        finally:
            self._exporter.shutdown()

    def flush(self) -> bool:
        """Wait for queued log deliveries without closing the span."""
        return True if self._exporter is None else self._exporter.flush()

    def __enter__(self) -> Log:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        if not self._ended:
            self.end()

    # ─────────────────────────────────────────────────────────────────────
    # Derivation
    # ─────────────────────────────────────────────────────────────────────

    def clone(self, **overrides: Any) -> Log:
        """Copy of this logger's configuration with a fresh, independent span.

        ``context`` is merged into the current context (override wins); other
        options replace the current value. The clone is not a span child:
        ``parent_logger`` and ``span_name`` are only set when passed explicitly.

        Example:
            >>> log = Log(context={"foo": "bar"})
            >>> log.clone(context={"baz": "fu"}, min_level="error").context
            {'foo': 'bar', 'baz': 'fu'}
        """
        data = self._conf.options()
        data.pop("parent_logger")
        data.pop("span_name")
        data["context"] = {**self._context, **(overrides.pop("context", None) or {})}
        return type(self)(data, **overrides)

    def child(self, span_name: str | None = None, **overrides: Any) -> Log:
        """Clone whose span is nested under this logger's span (same trace)."""
        return self.clone(parent_logger=self._span.context, span_name=span_name, **overrides)
