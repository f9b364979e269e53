"""Severity scale and level filtering.

The scale is fixed and total. From most to least severe:

    error > warn > info > verbose > debug > silly

Filtering compares positions in this list, never names. ``"none"`` is a
sentinel minimum that disables all output.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final, Literal

from .errors import LogConfigError


class LogLevel(StrEnum):
    """Log severities, most severe first."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    VERBOSE = "verbose"
    DEBUG = "debug"
    SILLY = "silly"


NONE: Final = "none"
MinLevel = LogLevel | Literal["none"]

LEVELS: Final[tuple[LogLevel, ...]] = tuple(LogLevel)
_INDEX: Final[dict[LogLevel, int]] = {lvl: i for i, lvl in enumerate(LEVELS)}

# error/warn go to the error sink, everything else to the standard sink
ERROR_SINK_LEVELS: Final = frozenset({LogLevel.ERROR, LogLevel.WARN})


def parse_level(value: str | LogLevel) -> MinLevel:
    """Validate a configured minimum level. Unknown names raise LogConfigError."""
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, str):
        name = value.strip().lower()
        if name == NONE:
            return NONE
        try:
            return LogLevel(name)
        except ValueError:
            pass
    valid = ", ".join([*LEVELS, NONE])
    raise LogConfigError(f"Invalid log level {value!r}. Use one of: {valid}")


def should_skip(min_level: MinLevel, level: LogLevel) -> bool:
    """True when a call at ``level`` must not be emitted under ``min_level``."""
    if min_level == NONE:
        return True
    return _INDEX[min_level] < _INDEX[level]  # type: ignore[index]
