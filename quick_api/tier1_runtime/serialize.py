"""
quick_api.tier1_runtime.serialize
───────────────────────────────────
JSON codec for request bodies and response payloads, plus the canonical key
form used for query parameters.

Keys are always ``str`` at the wire boundary. ``Enum`` members are accepted
and normalized to their string value, so ``{Field.NAME: "x", "name": "y"}``
yields one ``name`` parameter, never two.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel


class DecodeError(ValueError):
    """Raised when a body is not valid JSON."""


def encode(obj: Any) -> bytes:
    """
    Serialize a Pydantic model, dict, list or scalar to JSON bytes.

    Usage:
        data = encode({"name": "x"})    # → b'{"name": "x"}'
        data = encode(my_model)
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump_json().encode()
    return json.dumps(obj, default=str).encode()


def decode(data: bytes | str) -> Any:
    """Parse JSON bytes/str. Raises DecodeError on malformed input."""
    if isinstance(data, bytes):
        try:
            data = data.decode()
        except UnicodeDecodeError as exc:
            raise DecodeError(str(exc)) from exc
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise DecodeError(str(exc)) from exc


def canonical_key(key: Any) -> str:
    if isinstance(key, Enum):
        key = key.value
    if not isinstance(key, str):
        raise TypeError(
            f"Parameter keys must be str or a str-valued Enum, got {type(key).__name__}: {key!r}"
        )
    return key


def canonical_params(params: Mapping[Any, Any] | None) -> list[tuple[str, Any]]:
    """
    Canonicalize parameter keys, keeping first-seen order. When two keys
    collapse to the same string the later value wins. List and tuple values
    expand into repeated pairs (``?tag=a&tag=b``).
    """
    if not params:
        return []
    merged: dict[str, Any] = {}
    for key, value in params.items():
        merged[canonical_key(key)] = value

    pairs: list[tuple[str, Any]] = []
    for key, value in merged.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, item) for item in value)
        else:
            pairs.append((key, value))
    return pairs
