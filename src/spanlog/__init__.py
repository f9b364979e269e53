"""spanlog - structured logging with span correlation and OTLP export.

A small logging facade for services:
- Six severities (error, warn, info, verbose, debug, silly) with level filtering
- Text or JSON output to pluggable stdout/stderr sinks
- One span per logger, with parent/child nesting across loggers
- Optional best-effort export of logs and the closing span to an
  OpenTelemetry collector over OTLP/HTTP JSON

Quick Start:
    >>> from spanlog import Log
    >>>
    >>> log = Log("debug", context={"service.name": "billing"})
    >>> log.info("invoice created", {"invoice": "A-17"})
    >>> log.end()

Export to a collector:
    >>> log = Log(
    ...     remote_base_uri="http://otel-collector:4318",
    ...     context={"service.name": "billing"},
    ... )
    >>> log.error("payment declined", {"order": "981"})
    >>> log.end()  # waits for the log record, then sends the span

Configuration from the environment:
    >>> log = Log.from_env()  # SPANLOG_LEVEL, SPANLOG_OTLP_ENDPOINT, ...
"""

from __future__ import annotations

__version__ = "1.0.0"

from .config import LogConf, LogSettings, get_settings
from .errors import (
    DeliveryError,
    DeliveryReport,
    ErrorCode,
    LogConfigError,
    LoggerEndedError,
    ProtocolError,
    SpanlogError,
)
from .formatting import EntryFormatter, Metadata, Sink, json_formatter, text_formatter
from .levels import LEVELS, NONE, LogLevel, should_skip
from .logger import LeveledLogger, Log
from .tracing import Span, SpanContext, SpanKind, new_span_id, new_trace_id

__all__ = [
    "__version__",
    # Facade
    "Log",
    "LeveledLogger",
    # Config
    "LogConf",
    "LogSettings",
    "get_settings",
    # Levels
    "LEVELS",
    "NONE",
    "LogLevel",
    "should_skip",
    # Formatting
    "EntryFormatter",
    "Metadata",
    "Sink",
    "json_formatter",
    "text_formatter",
    # Tracing
    "Span",
    "SpanContext",
    "SpanKind",
    "new_span_id",
    "new_trace_id",
    # Errors
    "DeliveryError",
    "DeliveryReport",
    "ErrorCode",
    "LogConfigError",
    "LoggerEndedError",
    "ProtocolError",
    "SpanlogError",
]
