"""Deterministic cache keys derived from operation name and request parameters."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import quote


class TTL:
    """Entry lifetimes in seconds."""

    FIVE_MINUTES = 300
    FIFTEEN_MINUTES = 900
    HOUR = 3600


def create_cache_key(operation: str, params: Mapping[str, object] | None = None) -> str:
    """Build ``operation`` or ``operation:name=value&...`` with sorted names.

    ``None`` values and empty sequences are dropped, so omitting a parameter
    and passing ``None`` give the same key. Sequence items are percent-encoded
    before joining with ``,`` so ``["a,b"]`` and ``["a", "b"]`` differ.
    """

    if not operation or ":" in operation:
        raise ValueError(f"Invalid cache operation name: {operation!r}")

    parts: list[str] = []
    for name in sorted(params or {}):
        encoded = _encode_value((params or {})[name])
        if encoded is None:
            continue
        parts.append(f"{quote(name, safe='')}={encoded}")
    if not parts:
        return operation
    return f"{operation}:{'&'.join(parts)}"


def operation_of(key: str) -> str:
    """Return the operation a key was derived from."""

    return key.split(":", 1)[0]


def _encode_value(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        if not items:
            return None
        return ",".join(_encode_scalar(item) for item in items)
    return _encode_scalar(value)


def _encode_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return quote(str(value), safe="")
