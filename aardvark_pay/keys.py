"""Public key helpers and well-known program ids."""
from __future__ import annotations

from typing import Union

from solders.hash import Hash
from solders.pubkey import Pubkey

from .errors import InvalidKeyLength

KEY_LENGTH = 32

KeyLike = Union[bytes, bytearray, memoryview, Pubkey, Hash]


def to_key_bytes(value: KeyLike, name: str = "public key") -> bytes:
    """Return ``value`` as 32 raw bytes, or raise InvalidKeyLength."""
    if isinstance(value, (Pubkey, Hash)):
        return bytes(value)
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidKeyLength(f"{name} must be bytes, got {type(value).__name__}")
    raw = bytes(value)
    if len(raw) != KEY_LENGTH:
        raise InvalidKeyLength(f"{name} must be {KEY_LENGTH} bytes, got {len(raw)}")
    return raw


def key_from_string(value: str) -> bytes:
    return bytes(Pubkey.from_string(value))


def key_to_string(value: KeyLike) -> str:
    return str(Pubkey.from_bytes(to_key_bytes(value)))


SYS_PROGRAM_ID = key_from_string("11111111111111111111111111111111")
TOKEN_PROGRAM_ID = key_from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = key_from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")
