"""Entry formatters and output sinks for local log output.

A formatter turns one accepted log call into a single line:

    formatter(level, message, metadata, timestamp_ms) -> str

Two formatters ship with spanlog:

- ``text_formatter``: human-readable, colored level tag
  ``2024-01-03T10:30:45Z [inf] request received {"path":"/users"}``
- ``json_formatter``: one JSON object per line for log aggregation
  ``{"path":"/users","logLevel":"info","msg":"request received","time":"..."}``

Sinks are plain callables receiving the formatted line. Defaults print to
the process' current stdout/stderr.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Callable, TypeAlias

import orjson

from .errors import LogConfigError
from .levels import LogLevel

Metadata: TypeAlias = dict[str, str]
EntryFormatter: TypeAlias = Callable[[LogLevel, str, Metadata, float], str]
Sink: TypeAlias = Callable[[str], None]

_RESET = "\033[0m"
_LEVEL_TAGS: dict[LogLevel, str] = {
    LogLevel.ERROR: f"\033[1;31merr{_RESET}",
    LogLevel.WARN: f"\033[1;33mwar{_RESET}",
    LogLevel.INFO: f"\033[1;32minf{_RESET}",
    LogLevel.VERBOSE: f"\033[1;34mver{_RESET}",
    LogLevel.DEBUG: f"\033[1;35mdeb{_RESET}",
    LogLevel.SILLY: f"\033[1;37msil{_RESET}",
}


# ─────────────────────────────────────────────────────────────────────────────
# Formatters
# ─────────────────────────────────────────────────────────────────────────────


def _utc(timestamp_ms: float) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)


def _dumps(obj: Mapping[str, object]) -> str:
    return orjson.dumps(obj, default=str).decode()


def text_formatter(level: LogLevel, message: str, metadata: Metadata, timestamp_ms: float) -> str:
    """Format as ``<iso-seconds>Z [<tag>] <message> [<metadata json>]``."""
    line = f"{_utc(timestamp_ms).strftime('%Y-%m-%dT%H:%M:%S')}Z [{_LEVEL_TAGS[level]}] {message}"
    if metadata:
        line += f" {_dumps(metadata)}"
    return line


def json_formatter(level: LogLevel, message: str, metadata: Metadata, timestamp_ms: float) -> str:
    """Format as a JSON object: metadata fields plus logLevel, msg and time."""
    ts = _utc(timestamp_ms).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return _dumps({**metadata, "logLevel": level.value, "msg": message, "time": ts})


FORMATTERS: dict[str, EntryFormatter] = {"text": text_formatter, "json": json_formatter}


def get_formatter(name: str) -> EntryFormatter:
    """Look up a built-in formatter by name ("text" or "json")."""
    try:
        return FORMATTERS[name]
    except KeyError:
        raise LogConfigError(f"Unknown format: {name!r}. Use 'text' or 'json'") from None


# ─────────────────────────────────────────────────────────────────────────────
# Sinks
# ─────────────────────────────────────────────────────────────────────────────


def stdout_sink(line: str) -> None:
    print(line, file=sys.stdout)


def stderr_sink(line: str) -> None:
    print(line, file=sys.stderr)


def merge_metadata(metadata: Mapping[str, str] | None, context: Mapping[str, str]) -> Metadata:
    """Merge call metadata with logger context.

    Call metadata keys come first and win on collision; context keys the call
    did not set are appended after them.
    """
    merged: Metadata = dict(metadata or {})
    for key, value in context.items():
        merged.setdefault(key, value)
    return merged
