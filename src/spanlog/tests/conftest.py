"""Shared test fixtures: a fake OTLP collector and settings isolation."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable

import httpx
import orjson
import pytest

from spanlog.config import get_settings


@dataclass
class Received:
    """One request seen by the fake collector."""

    path: str
    body: dict
    request: httpx.Request
    arrived: float
    settled: float = 0.0


@dataclass
class FakeCollector:
    """In-process OTLP/HTTP collector backed by ``httpx.MockTransport``.

    ``respond`` decides the response per request; the default accepts
    everything with ``{"partialSuccess": {}}``.
    """

    respond: Callable[[httpx.Request], httpx.Response] | None = None
    received: list[Received] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def handler(self, request: httpx.Request) -> httpx.Response:
        entry = Received(request.url.path, orjson.loads(request.content), request, time.monotonic())
        with self._lock:
            self.received.append(entry)
        try:
            if self.respond is None:
                return httpx.Response(200, json={"partialSuccess": {}})
            return self.respond(request)
        finally:
            entry.settled = time.monotonic()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.path for r in self.received]

    def logs(self) -> list[dict]:
        """All received log records, in arrival order."""
        return [r.body["resourceLogs"][0]["scopeLogs"][0]["logRecords"][0]
                for r in self.received if r.path == "/v1/logs"]

    def spans(self) -> list[dict]:
        return [r.body["resourceSpans"][0]["scopeSpans"][0]["spans"][0]
                for r in self.received if r.path == "/v1/traces"]


@pytest.fixture
def collector() -> FakeCollector:
    return FakeCollector()


@pytest.fixture
def remote(collector: FakeCollector) -> dict[str, object]:
    """Logger options pointing at the fake collector."""
    return {
        "remote_base_uri": "http://127.0.0.1:4318",
        "remote_export_timeout_millis": 50,
        "transport": collector.transport,
    }


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: object) -> object:
    """Keep cached settings and stray .env files out of every test."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
