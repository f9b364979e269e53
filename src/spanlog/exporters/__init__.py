"""OTLP payload construction and HTTP export."""

from .http import LOGS_PATH, TRACES_PATH, OTLPHttpExporter, display_url, parse_base_uri
from .otlp import (
    SEVERITY,
    Severity,
    build_log_payload,
    build_log_record,
    build_span,
    build_span_payload,
    resource_attributes,
    to_unix_nano,
)

__all__ = [
    # Payloads
    "SEVERITY",
    "Severity",
    "build_log_payload",
    "build_log_record",
    "build_span",
    "build_span_payload",
    "resource_attributes",
    "to_unix_nano",
    # Export
    "LOGS_PATH",
    "TRACES_PATH",
    "OTLPHttpExporter",
    "display_url",
    "parse_base_uri",
]
