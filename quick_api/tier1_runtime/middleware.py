"""
quick_api.tier1_runtime.middleware
───────────────────────────────────────
Processing steps wrapped around the transport for every outbound request,
and the response classifier that turns a raw HTTP response into one of the
normalized result values.

A step is any callable ``step(request, call_next)``. It receives the built
``httpx.Request``, may call ``call_next(request)`` to continue down the
chain, and returns whatever it wants the caller to see. The innermost step
is the adapter, which returns either an ``httpx.Response`` or a
``TransportFailure``.

Usage::

    def add_trace(request, call_next):
        request.headers["x-trace-id"] = new_trace_id()
        return call_next(request)

    client = Client("https://example.com",
                    middleware=[add_trace, ResponseMiddleware()])
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

import httpx

from quick_api.tier0_core.http import (
    HTTP,
    HttpError,
    NoContent,
    Ok,
    Result,
    is_error,
    is_success,
)
from quick_api.tier1_runtime.serialize import DecodeError, decode

CallNext = Callable[[httpx.Request], Any]


class Middleware(Protocol):
    def __call__(self, request: httpx.Request, call_next: CallNext) -> Any:
        ...


# ── Response classifier ────────────────────────────────────────────────────

def classify(status: int, raw_body: bytes | str) -> Result:
    """
    Map a status code and body to a result value. Pure; never raises.

        204            → NoContent()
        200..299       → Ok(decoded)        | HttpError(None, raw) if not JSON
        400..599       → HttpError(status, decoded) | HttpError(status, raw)
        anything else  → HttpError(status, raw)
    """
    if status == HTTP.NO_CONTENT:
        return NoContent()

    if is_success(status):
        try:
            return Ok(decode(raw_body))
        except DecodeError:
            return HttpError(status=None, body=raw_body)

    if is_error(status):
        try:
            return HttpError(status=status, body=decode(raw_body))
        except DecodeError:
            return HttpError(status=status, body=raw_body)

    # 1xx, 3xx that were not followed, and out-of-range codes.
    return HttpError(status=status, body=raw_body)


def _raw_body(response: httpx.Response) -> bytes | str:
    """
    Body as text when it decodes cleanly in the declared charset (UTF-8 if
    none), otherwise the untouched bytes. Nothing is ever replaced.
    """
    content = response.content
    try:
        return content.decode(response.charset_encoding or "utf-8")
    except (UnicodeDecodeError, LookupError):
        return content


class ResponseMiddleware:
    """
    Classifies the response produced further down the chain. Anything that
    is not an ``httpx.Response`` (a TransportFailure) passes through as is.
    Must sit last in the step list so it wraps the adapter directly.
    """

    def __call__(self, request: httpx.Request, call_next: CallNext) -> Any:
        response = call_next(request)
        if not isinstance(response, httpx.Response):
            return response
        return classify(response.status_code, _raw_body(response))

    def __repr__(self) -> str:
        return "ResponseMiddleware()"


# ── Chain ──────────────────────────────────────────────────────────────────

def run_chain(
    steps: Sequence[Middleware],
    request: httpx.Request,
    adapter: CallNext,
) -> Any:
    """Run ``request`` through ``steps`` (first is outermost) and then ``adapter``."""

    def dispatch(index: int) -> CallNext:
        if index == len(steps):
            return adapter
        step = steps[index]
        return lambda req: step(req, dispatch(index + 1))

    return dispatch(0)(request)


__all__ = ["Middleware", "CallNext", "classify", "ResponseMiddleware", "run_chain"]
