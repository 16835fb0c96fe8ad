"""Solana "compact-u16" (shortvec) length encoding."""
from __future__ import annotations

from typing import Tuple

from .errors import InvalidLength

MAX_VALUE = 0xFFFF
MAX_ENCODED_LEN = 3


def encode(value: int) -> bytes:
    if not isinstance(value, int) or value < 0 or value > MAX_VALUE:
        raise InvalidLength(f"compact-u16 value out of range: {value!r}")
    if value < 0x80:
        return bytes([value])
    if value < 0x4000:
        return bytes([(value & 0x7F) | 0x80, value >> 7])
    return bytes([(value & 0x7F) | 0x80, ((value >> 7) & 0x7F) | 0x80, value >> 14])


def decode(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Read one compact-u16 starting at ``offset``.

    Returns ``(value, bytes_consumed)``. Raises InvalidLength when the input ends
    before the terminating byte, the value would need more than three bytes, or
    the encoding is not the shortest one (e.g. ``80 00`` for zero).
    """
    result = 0
    shift = 0
    for consumed in range(1, MAX_ENCODED_LEN + 1):
        pos = offset + consumed - 1
        if pos >= len(data):
            raise InvalidLength("truncated compact-u16")
        byte = data[pos]
        if consumed == MAX_ENCODED_LEN and byte & 0x80:
            raise InvalidLength("compact-u16 longer than three bytes")
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            if consumed > 1 and byte == 0:
                raise InvalidLength("alias encoding")
            if result > MAX_VALUE:
                raise InvalidLength(f"compact-u16 value out of range: {result}")
            return result, consumed
        shift += 7
    raise InvalidLength("compact-u16 longer than three bytes")  # pragma: no cover
