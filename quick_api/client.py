"""
quick_api.client
────────────────
Sync HTTP client that owns every piece of request plumbing: base URL,
default headers, JSON body encoding, query encoding, the middleware chain
and the transport. Resources call into it; nothing else talks to httpx.

Each call builds a fresh ``httpx.Client``, sends exactly one request and
closes it again, so a Client holds no connection state and is safe to
share between threads.

Backed by: httpx (sync HTTP).

Usage::

    client = Client(
        "https://example.com",
        default_headers=lambda: [("Authorization", "Bearer MYTOKEN")],
    )
    client.get("/path", {"query_param": "value"})
    client.post("/path", {"param1": "value"})
    client.delete("/path")

Subclassing works too, when headers depend on runtime state::

    class MyClient(Client):
        def api_host(self) -> str:
            return "https://example.com"

        def default_headers(self) -> list[tuple[str, str]]:
            return [("Authorization", f"Bearer {current_token()}")]
"""
from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

from quick_api.tier0_core.config import get_config
from quick_api.tier0_core.errors import ConfigurationError
from quick_api.tier0_core.http import TransportFailure
from quick_api.tier0_core.logging import get_logger
from quick_api.tier1_runtime.middleware import Middleware, ResponseMiddleware, run_chain
from quick_api.tier1_runtime.serialize import canonical_params, encode

log = get_logger(__name__)

Header = tuple[str, str]
HeadersProvider = Callable[[], Sequence[Header]]

METHODS = frozenset({"GET", "POST", "PATCH", "PUT", "DELETE"})
_BODY_METHODS = frozenset({"POST", "PATCH", "PUT"})


def _no_headers() -> list[Header]:
    return []


# ── Per-call options ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class CallOptions:
    """
    Per-call overrides merged over the client defaults.

    api_host:           replaces the client's base URL
    additional_headers: appended after the default headers (no dedup)
    middleware:         replaces the client's step list
    adapter:            httpx transport used instead of the default one
    """
    api_host: str | None = None
    additional_headers: tuple[Header, ...] = ()
    middleware: tuple[Middleware, ...] | None = None
    adapter: httpx.BaseTransport | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "additional_headers", tuple(self.additional_headers))
        if self.middleware is not None:
            object.__setattr__(self, "middleware", tuple(self.middleware))


_DEFAULT_OPTIONS = CallOptions()


# ── Client ─────────────────────────────────────────────────────────────────

class Client:
    """Request builder for one API host."""

    def __init__(
        self,
        api_host: str | Callable[[], str] | None = None,
        *,
        default_headers: HeadersProvider | Sequence[Header] | None = None,
        middleware: Sequence[Middleware] | None = None,
        transport_options: Mapping[str, Any] | None = None,
    ) -> None:
        if api_host is None and type(self).api_host is Client.api_host:
            api_host = get_config().api_host
            if not api_host:
                raise ConfigurationError(
                    user_message="Client needs an api_host.",
                    detail="Pass api_host=... or set QUICK_API_HOST.",
                )
        self._api_host = api_host
        if default_headers is not None and not callable(default_headers):
            static_headers = [tuple(h) for h in default_headers]
            default_headers = lambda: static_headers  # noqa: E731
        self._headers_provider = default_headers or _no_headers
        self._middleware: tuple[Middleware, ...] = (
            tuple(middleware) if middleware is not None else (ResponseMiddleware(),)
        )
        self._transport_options = {
            **get_config().transport_options(),
            **(transport_options or {}),
        }

    # ── Overridable hooks ─────────────────────────────────────────────────

    def api_host(self) -> str:
        """Base URL every path is resolved against."""
        if callable(self._api_host):
            return self._api_host()
        return self._api_host  # type: ignore[return-value]

    def default_headers(self) -> list[Header]:
        """Headers sent on every request. Empty unless a provider was injected."""
        return list(self._headers_provider())

    # ── Verbs ─────────────────────────────────────────────────────────────

    def get(
        self,
        path: str,
        params: Mapping[Any, Any] | None = None,
        opts: CallOptions | None = None,
    ) -> Any:
        """Issue a GET; ``params`` become the query string."""
        return self.request("GET", path, params, opts)

    def post(
        self,
        path: str,
        params: Any = None,
        opts: CallOptions | None = None,
    ) -> Any:
        """Issue a POST; ``params`` become the JSON body."""
        return self.request("POST", path, params, opts)

    def patch(
        self,
        path: str,
        params: Any = None,
        opts: CallOptions | None = None,
    ) -> Any:
        """Issue a PATCH; ``params`` become the JSON body."""
        return self.request("PATCH", path, params, opts)

    def put(
        self,
        path: str,
        params: Any = None,
        opts: CallOptions | None = None,
    ) -> Any:
        """Issue a PUT; ``params`` become the JSON body."""
        return self.request("PUT", path, params, opts)

    def delete(self, path: str, opts: CallOptions | None = None) -> Any:
        """Issue a DELETE. No body and no query."""
        return self.request("DELETE", path, None, opts)

    def request(
        self,
        method: str,
        path: str,
        params: Any = None,
        opts: CallOptions | None = None,
    ) -> Any:
        """
        Build and send one request through the middleware chain.

        With the default middleware the return value is one of Ok,
        NoContent, HttpError or TransportFailure.
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method {method!r}. Supported: {sorted(METHODS)}")
        opts = opts or _DEFAULT_OPTIONS

        base_url = opts.api_host or self.api_host()
        headers = self.default_headers() + list(opts.additional_headers)
        middleware = opts.middleware if opts.middleware is not None else self._middleware

        client_kwargs = dict(self._transport_options)
        if opts.adapter is not None:
            client_kwargs["transport"] = opts.adapter

        with httpx.Client(base_url=base_url, **client_kwargs) as http:
            request = self._build_request(http, method, path, params, headers)
            return run_chain(middleware, request, lambda req: _send(http, req))

    @staticmethod
    def _build_request(
        http: httpx.Client,
        method: str,
        path: str,
        params: Any,
        headers: list[Header],
    ) -> httpx.Request:
        if method == "GET":
            return http.build_request(
                method, path, params=canonical_params(params), headers=headers
            )
        if method in _BODY_METHODS:
            body = encode(params if params is not None else {})
            headers = headers + [("Content-Type", "application/json")]
            return http.build_request(method, path, content=body, headers=headers)
        return http.build_request(method, path, headers=headers)


def _send(http: httpx.Client, request: httpx.Request) -> httpx.Response | TransportFailure:
    """
    Adapter step: the only place a request leaves the process.

    Any ``httpx.RequestError`` (connect, timeout, TLS, protocol, redirect
    loops, undecodable Content-Encoding) becomes a TransportFailure value.
    """
    start = time.perf_counter()
    try:
        response = http.send(request)
    except httpx.RequestError as exc:
        log.warning(
            "request.transport_failure",
            method=request.method,
            url=str(request.url),
            reason=type(exc).__name__,
            error=str(exc),
        )
        return TransportFailure(reason=type(exc).__name__, message=str(exc), exception=exc)

    log.debug(
        "request.completed",
        method=request.method,
        url=str(request.url),
        status=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response


__all__ = ["Client", "CallOptions", "METHODS"]
