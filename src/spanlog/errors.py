"""Error taxonomy for spanlog.

Two kinds of failure exist and they are handled very differently:

- Programmer errors (bad configuration, using a logger after ``end()``) are
  raised immediately and must stop execution.
- Delivery errors (network failure, non-2xx status, unexpected collector
  response, timeout) are operational. They are raised only inside the export
  pipeline, caught there, and reported through the local error sink.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Self

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

JsonDict = dict[str, Any]


class ErrorCode(StrEnum):
    """Machine-readable failure classification."""

    INVALID_CONFIG = "INVALID_CONFIG"
    LOGGER_ENDED = "LOGGER_ENDED"
    HTTP_STATUS = "HTTP_STATUS"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    QUEUE_FULL = "QUEUE_FULL"
    UNKNOWN = "UNKNOWN"


class SpanlogError(Exception):
    """Base class for every error raised by spanlog."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class LogConfigError(SpanlogError, ValueError):
    """Invalid logger configuration. Raised at construction time."""

    code = ErrorCode.INVALID_CONFIG

    @classmethod
    def from_validation(cls, exc: ValidationError) -> Self:
        """Flatten a pydantic ValidationError into a single readable message."""
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'conf'}: {err['msg']}" for err in exc.errors()
        )
        return cls(f"Invalid logger configuration: {problems}")


class LoggerEndedError(SpanlogError, RuntimeError):
    """A log call or a second ``end()`` on a logger that has already ended."""

    code = ErrorCode.LOGGER_ENDED


class DeliveryError(SpanlogError):
    """An OTLP payload could not be delivered to the collector."""

    code = ErrorCode.NETWORK_ERROR

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.url = url
        self.status_code = status_code


class ProtocolError(DeliveryError):
    """The collector answered 2xx with a body outside the accepted shapes."""

    code = ErrorCode.PROTOCOL_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map a delivery exception to an error code."""
    match exc:
        case DeliveryError(): return exc.code
        case httpx.TimeoutException(): return ErrorCode.TIMEOUT
        case httpx.TransportError(): return ErrorCode.NETWORK_ERROR
        case _: return ErrorCode.UNKNOWN


class DeliveryReport(BaseModel):
    """Outcome of a single OTLP delivery attempt.

    Attributes:
        url: Target URL of the request
        ok: Whether the collector accepted the payload
        code: Failure classification (None on success)
        status_code: HTTP status, when a response was received
        message: Human-readable failure description
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    url: Annotated[str, Field(min_length=1)]
    ok: bool = True
    code: ErrorCode | None = None
    status_code: int | None = None
    message: str | None = None

    @classmethod
    def failure(cls, url: str, exc: BaseException) -> Self:
        """Build a failed report from the exception that ended the attempt."""
        return cls(
            url=url,
            ok=False,
            code=classify_exception(exc),
            status_code=getattr(exc, "status_code", None),
            message=str(exc) or type(exc).__name__,
        )

    def as_metadata(self) -> dict[str, str]:
        """Render as string metadata for a local log entry."""
        meta = {"url": self.url, "code": str(self.code or ""), "error": self.message or ""}
        if self.status_code is not None:
            meta["status"] = str(self.status_code)
        return meta
