"""OTLP/JSON payload construction for log records and spans.

Payloads follow the OTLP/HTTP JSON encoding: ids are lowercase hex strings,
nanosecond timestamps are decimal strings, and attributes are lists of
``{"key": ..., "value": {"stringValue": ...}}``.

Each export request carries exactly one resource, one scope and one record:

    {"resourceLogs": [{"resource": {...}, "scopeLogs": [{"scope": {...}, "logRecords": [record]}]}]}
    {"resourceSpans": [{"resource": {...}, "scopeSpans": [{"scope": {...}, "spans": [span]}]}]}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final, NamedTuple

from ..errors import JsonDict
from ..levels import LogLevel
from ..tracing import Span, SpanContext

SDK_NAME: Final = "spanlog"
SDK_LANGUAGE: Final = "python"
SERVICE_NAME_KEY: Final = "service.name"
DEFAULT_SERVICE_NAME: Final = "unknown_service"


class Severity(NamedTuple):
    number: int
    text: str


# OpenTelemetry severity numbers: TRACE=1, DEBUG=5, DEBUG4=8, INFO=9, WARN=13, ERROR=17
SEVERITY: Final[dict[LogLevel, Severity]] = {
    LogLevel.ERROR: Severity(17, "ERROR"),
    LogLevel.WARN: Severity(13, "WARN"),
    LogLevel.INFO: Severity(9, "INFO"),
    LogLevel.VERBOSE: Severity(8, "DEBUG4"),
    LogLevel.DEBUG: Severity(5, "DEBUG"),
    LogLevel.SILLY: Severity(1, "TRACE"),
}


def to_unix_nano(millis: float) -> str:
    """Convert an epoch timestamp in milliseconds to epoch nanoseconds.

    The whole-millisecond part is converted exactly; any fractional
    millisecond left in ``millis`` is kept as extra nanoseconds.
    """
    whole = int(millis)
    nanos = (whole // 1000) * 1_000_000_000 + (whole % 1000) * 1_000_000
    nanos += int((millis - whole) * 1_000_000)
    return str(nanos)


def attributes(values: Mapping[str, object]) -> list[JsonDict]:
    return [{"key": k, "value": {"stringValue": str(v)}} for k, v in values.items()]


def resource_attributes(context: Mapping[str, str], sdk_version: str) -> list[JsonDict]:
    """Resource attributes: service.name plus telemetry SDK identifiers."""
    return attributes({
        SERVICE_NAME_KEY: context.get(SERVICE_NAME_KEY, DEFAULT_SERVICE_NAME),
        "telemetry.sdk.language": SDK_LANGUAGE,
        "telemetry.sdk.name": SDK_NAME,
        "telemetry.sdk.version": sdk_version,
    })


def _scope(sdk_version: str) -> JsonDict:
    return {"name": SDK_NAME, "version": sdk_version}


def build_log_record(
    level: LogLevel,
    message: str,
    merged: Mapping[str, str],
    span_context: SpanContext,
    timestamp_ms: float,
) -> JsonDict:
    """One OTLP LogRecord. ``merged`` is call metadata already merged with context."""
    severity = SEVERITY[level]
    ts = to_unix_nano(timestamp_ms)
    record: JsonDict = {
        "timeUnixNano": ts,
        "observedTimeUnixNano": ts,
        "severityNumber": severity.number,
        "severityText": severity.text,
        "body": {"stringValue": message},
        "traceId": span_context.trace_id,
        "spanId": span_context.span_id,
    }
    if merged:
        record["attributes"] = attributes(merged)
    return record


def build_log_payload(
    level: LogLevel,
    message: str,
    merged: Mapping[str, str],
    context: Mapping[str, str],
    span_context: SpanContext,
    timestamp_ms: float,
    sdk_version: str,
) -> JsonDict:
    """Full ``/v1/logs`` request body holding a single log record."""
    return {"resourceLogs": [{
        "resource": {"attributes": resource_attributes(context, sdk_version)},
        "scopeLogs": [{
            "scope": _scope(sdk_version),
            "logRecords": [build_log_record(level, message, merged, span_context, timestamp_ms)],
        }],
    }]}


def build_span(span: Span, context: Mapping[str, str]) -> JsonDict:
    """One OTLP Span. service.name lives on the resource, so it is not repeated here."""
    out: JsonDict = {
        "traceId": span.context.trace_id,
        "spanId": span.context.span_id,
        "name": span.name,
        "kind": int(span.kind),
        "startTimeUnixNano": str(span.start_time_ns),
        "endTimeUnixNano": str(span.end_time_ns),
        "attributes": attributes({k: v for k, v in context.items() if k != SERVICE_NAME_KEY}),
        "status": {},
    }
    if span.context.parent_id:
        out["parentSpanId"] = span.context.parent_id
    return out


def build_span_payload(span: Span, context: Mapping[str, str], sdk_version: str) -> JsonDict:
    """Full ``/v1/traces`` request body holding a single span."""
    return {"resourceSpans": [{
        "resource": {"attributes": resource_attributes(context, sdk_version)},
        "scopeSpans": [{"scope": _scope(sdk_version), "spans": [build_span(span, context)]}],
    }]}
