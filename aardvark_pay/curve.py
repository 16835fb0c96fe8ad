"""Ed25519 point-membership check for 32-byte compressed points.

A program-derived address is only valid when it does *not* decode to a point on
the curve, so this is the accept/reject test used by ``pda``. Only the
existence of ``x`` is decided (Euler's criterion); the square root itself is
never extracted.
"""
from __future__ import annotations

from .keys import KeyLike, to_key_bytes

P = 2**255 - 19
D = (-121665 * pow(121666, -1, P)) % P
_EULER_EXPONENT = (P - 1) // 2


def decode_y(candidate: KeyLike) -> int:
    """Return the y coordinate of a compressed point, sign bit cleared."""
    raw = bytearray(to_key_bytes(candidate, "curve candidate"))
    raw[31] &= 0x7F
    return int.from_bytes(raw, "little")


def is_on_curve(candidate: KeyLike) -> bool:
    y = decode_y(candidate)
    if y >= P:
        return False

    y2 = y * y % P
    u = (y2 - 1) % P
    v = (D * y2 + 1) % P
    x2 = u * pow(v, -1, P) % P
    if x2 == 0:
        return True
    return pow(x2, _EULER_EXPONENT, P) == 1
