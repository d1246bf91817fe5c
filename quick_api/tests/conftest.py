"""
quick_api test configuration.

No test touches the network: HTTP is served by ``httpx.MockTransport``
handed to the client as its adapter.
"""
from __future__ import annotations

import json
import os
from collections.abc import Callable

import httpx
import pytest

# ── Force test defaults ────────────────────────────────────────────────────
# These must be set before any quick_api modules are imported.

os.environ.setdefault("QUICK_API_LOG_LEVEL", "WARNING")
os.environ.setdefault("QUICK_API_LOG_FORMAT", "console")
os.environ.pop("QUICK_API_HOST", None)

API_HOST = "http://api.test"


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_config():
    """Each test reads env vars fresh."""
    from quick_api.tier0_core.config import _reset_config

    _reset_config()
    yield
    _reset_config()


class FakeServer:
    """
    Records every request and answers with a canned response.

    Usage:
        server.respond(200, {"item": 1})
        client.get("/endpoint")
        assert server.last.url.path == "/endpoint"
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._status = 200
        self._content = b"{}"
        self._headers: dict[str, str] = {}
        self._error: Exception | None = None
        self.transport = httpx.MockTransport(self._handle)

    def respond(
        self,
        status: int,
        body: object = None,
        *,
        raw: str | bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._status = status
        self._headers = dict(headers or {})
        self._error = None
        if raw is not None:
            self._content = raw.encode() if isinstance(raw, str) else raw
        elif body is None:
            self._content = b""
        else:
            self._content = json.dumps(body).encode()

    def fail(self, error: Exception) -> None:
        self._error = error

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> object:
        return json.loads(self.last.content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        # Streamed so Content-Encoding is decoded by the client, as on the wire.
        return httpx.Response(
            self._status, headers=self._headers, stream=httpx.ByteStream(self._content)
        )


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def make_client(server: FakeServer) -> Callable[..., object]:
    """Build a Client that talks to the fake server with a bearer token header."""
    from quick_api.client import Client

    def _make(**kwargs: object) -> Client:
        kwargs.setdefault("default_headers", lambda: [("Authorization", "Bearer FAKETOKEN")])
        transport_options = dict(kwargs.pop("transport_options", {}) or {})
        transport_options.setdefault("transport", server.transport)
        return Client(API_HOST, transport_options=transport_options, **kwargs)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
