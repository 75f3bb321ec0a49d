"""Byte-string conversions."""

from __future__ import annotations

import re

_INT_PATTERN = re.compile(rb"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def btoi(b: bytes | bytearray | memoryview) -> int:
    """Parse a signed base-10 64-bit integer from bytes."""
    data = bytes(b)
    if not _INT_PATTERN.fullmatch(data):
        raise ValueError(f"invalid syntax: {data!r}")
    value = int(data)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"value out of range: {data!r}")
    return value


def update_to_lower(src: bytearray) -> None:
    """Lower-case ASCII letters of ``src`` in place."""
    src[:] = src.lower()


def update_to_upper(src: bytearray) -> None:
    """Upper-case ASCII letters of ``src`` in place."""
    src[:] = src.upper()