"""Logger configuration model.

``LogConf`` validates every option once, at logger construction. Invalid
values (unknown level, malformed collector URI, unknown option) surface as
``LogConfigError`` before any log call can happen.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, InstanceOf, PositiveInt, field_validator

from ..formatting import EntryFormatter, Sink
from ..levels import MinLevel, parse_level
from ..tracing import SpanContext


class LogConf(BaseModel):
    """Options for a ``Log`` instance.

    Attributes:
        min_level: Least severe level still emitted, or "none" to disable output
        context: Key/values attached to every entry and OTLP payload
        format: Built-in formatter used when ``entry_formatter`` is not set
        entry_formatter: Custom ``(level, message, metadata, timestamp_ms) -> str``
        stdout: Sink for info/verbose/debug/silly (default: print to stdout)
        stderr: Sink for error/warn and delivery failures (default: print to stderr)
        remote_base_uri: OTLP/HTTP collector base; remote export is off when unset
        remote_additional_headers: Extra headers for every export request
        remote_export_timeout_millis: Timeout of each export request
        remote_max_batch_size: Advisory; records are exported one per request
        remote_max_queue_size: Max unsettled log deliveries before records are dropped
        remote_flush_interval_millis: Advisory; deliveries start immediately
        parent_logger: Logger (or SpanContext) whose span becomes this span's parent
        span_name: Name of the logger's span (default: its span id)
        log_as_parent: Tag log records with the parent's trace/span ids
        transport: httpx transport used for export requests
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        validate_default=True,
    )

    min_level: MinLevel = "info"
    context: dict[str, str] = Field(default_factory=dict)
    format: Literal["text", "json"] = "text"
    entry_formatter: EntryFormatter | None = Field(default=None, repr=False)
    stdout: Sink | None = Field(default=None, repr=False)
    stderr: Sink | None = Field(default=None, repr=False)

    remote_base_uri: str | None = None
    remote_additional_headers: dict[str, str] = Field(default_factory=dict, repr=False)
    remote_export_timeout_millis: PositiveInt = 3000
    remote_max_batch_size: PositiveInt = 512
    remote_max_queue_size: PositiveInt = 2048
    remote_flush_interval_millis: PositiveInt = 100

    parent_logger: InstanceOf[SpanContext] | None = None
    span_name: Annotated[str, Field(min_length=1)] | None = None
    log_as_parent: bool = False
    transport: httpx.BaseTransport | None = Field(default=None, repr=False)

    @field_validator("min_level", mode="before")
    @classmethod
    def _check_level(cls, v: object) -> object:
        return parse_level(v) if isinstance(v, str) else v

    @field_validator("remote_base_uri")
    @classmethod
    def _check_base_uri(cls, v: str | None) -> str | None:
        from ..exporters.http import parse_base_uri

        if v is not None:
            parse_base_uri(v)
        return v

    @field_validator("parent_logger", mode="before")
    @classmethod
    def _snapshot_parent(cls, v: object) -> object:
        """Keep only the parent's identity, never the logger itself."""
        return getattr(v, "span_context", v)

    @classmethod
    def coerce(cls, conf: LogConf | Mapping[str, Any] | str | None = None, **overrides: Any) -> LogConf:
        """Build a LogConf from any accepted constructor argument.

        Accepts an existing LogConf, a mapping of options, a bare level name
        (``"debug"``) or None, plus keyword overrides.
        """
        match conf:
            case None: data: dict[str, Any] = {}
            case str(): data = {"min_level": conf}
            case LogConf(): data = conf.options()
            case Mapping(): data = dict(conf)
            case _: raise TypeError(f"Unsupported logger configuration: {type(conf).__name__}")
        return cls(**{**data, **overrides})

    def options(self) -> dict[str, Any]:
        """Field values as a shallow dict (callables and transports untouched)."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    @property
    def remote_enabled(self) -> bool:
        return self.remote_base_uri is not None
