"""Environment-based configuration using pydantic-settings.

Lets a service configure its loggers without code changes:

    SPANLOG_LEVEL=debug
    SPANLOG_FORMAT=json
    SPANLOG_SERVICE_NAME=billing-api
    SPANLOG_OTLP_ENDPOINT=http://otel-collector:4318
    SPANLOG_OTLP_HEADERS='{"x-api-key": "..."}'

Example:
    >>> from spanlog import Log
    >>> log = Log.from_env(context={"component": "worker"})
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..levels import parse_level
from .conf import LogConf


class LogSettings(BaseSettings):
    """Logger defaults loaded from ``SPANLOG_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="SPANLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "info"
    format: Literal["text", "json"] = "text"
    service_name: str | None = None
    otlp_endpoint: str | None = Field(default=None, description="OTLP/HTTP collector base URI")
    otlp_headers: dict[str, str] = Field(default_factory=dict, description="Extra export headers (JSON)")
    otlp_timeout_millis: PositiveInt = 3000
    otlp_max_queue_size: PositiveInt = 2048

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return str(parse_level(v))

    def to_conf(self, **overrides: Any) -> LogConf:
        """Translate into a LogConf; explicit overrides win over the environment."""
        context = {"service.name": self.service_name} if self.service_name else {}
        data: dict[str, Any] = {
            "min_level": self.level,
            "format": self.format,
            "remote_base_uri": self.otlp_endpoint,
            "remote_additional_headers": self.otlp_headers,
            "remote_export_timeout_millis": self.otlp_timeout_millis,
            "remote_max_queue_size": self.otlp_max_queue_size,
        }
        data["context"] = {**context, **(overrides.pop("context", None) or {})}
        return LogConf(**{**data, **overrides})


@lru_cache(maxsize=1)
def get_settings() -> LogSettings:
    """Cached settings instance. Call ``get_settings.cache_clear()`` after changing the environment."""
    return LogSettings()
