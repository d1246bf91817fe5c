"""
quick_api.tier0_core.http
──────────────────────────
HTTP status constants and the normalized result values every call returns.

    Ok(data)                 2xx with a JSON body
    NoContent()              204
    HttpError(status, body)  error status, or a 2xx whose body is not JSON
    TransportFailure(...)    no usable HTTP response was received

Callers branch on ``result.ok`` or match on the variant type.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Type, TypeVar, Union

T = TypeVar("T")


# ── Status code constants ──────────────────────────────────────────────────

class HTTP:
    """Standard HTTP status codes the classifier cares about."""

    # 2xx
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # 3xx
    MOVED_PERMANENTLY = 301
    FOUND = 302
    NOT_MODIFIED = 304

    # 4xx
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # 5xx
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504


def is_success(status: int) -> bool:
    return 200 <= status <= 299


def is_error(status: int) -> bool:
    return 400 <= status <= 599


# ── Result values ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful call carrying the decoded JSON payload."""
    data: T

    @property
    def ok(self) -> bool:
        return True

    def parse(self, model: Type[Any]) -> Any:
        """
        Validate the payload into a Pydantic model.
        Raises quick_api ValidationError if the payload does not fit.

        Usage:
            user = Users.get("u_1").parse(User)
        """
        from quick_api.tier1_runtime.validate import validate_input

        return validate_input(model, self.data)


@dataclass(frozen=True)
class NoContent:
    """Successful call with an empty body (204). There is nothing to decode."""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class HttpError:
    """
    The server answered, but not with a usable success.

    ``status`` is None when a 2xx body could not be decoded; ``body`` is the
    decoded JSON when possible, otherwise the raw text, or the raw bytes when
    the body does not decode in its declared charset.
    """
    status: int | None
    body: Any

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class TransportFailure:
    """The request never produced an HTTP response (connect, DNS, TLS, timeout)."""
    reason: str
    message: str
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[Any], NoContent, HttpError, TransportFailure]


__all__ = [
    "HTTP",
    "Ok",
    "NoContent",
    "HttpError",
    "TransportFailure",
    "Result",
    "is_success",
    "is_error",
]
