"""Unsigned transaction envelopes handed to the wallet for signing."""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import List, Union

from . import compact_u16
from .errors import InvalidLength
from .keys import KeyLike
from .message import Message, build_sol_transfer_message, build_token_transfer_message

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 64
EMPTY_SIGNATURE = bytes(SIGNATURE_LENGTH)
MAX_SIGNATURES = 0x7F


def wrap(message: Union[bytes, Message], required_signatures: int) -> bytes:
    """Prefix ``message`` with a zeroed 64-byte slot per required signature.

    The wallet overwrites each slot in place, in the order of the message's
    signer accounts.
    """
    if not isinstance(required_signatures, int) or not 0 <= required_signatures <= MAX_SIGNATURES:
        raise InvalidLength(f"signature count must be in 0..{MAX_SIGNATURES}, got {required_signatures!r}")
    body = bytes(message)
    return bytes([required_signatures]) + EMPTY_SIGNATURE * required_signatures + body


@dataclass(frozen=True)
class TransactionEnvelope:
    signatures: List[bytes]
    message: bytes

    @classmethod
    def for_message(cls, message: Message) -> "TransactionEnvelope":
        count = message.header.num_required_signatures
        return cls(signatures=[EMPTY_SIGNATURE] * count, message=message.serialize())

    @classmethod
    def from_bytes(cls, raw: bytes) -> "TransactionEnvelope":
        raw = bytes(raw)
        count, offset = compact_u16.decode(raw)
        end = offset + count * SIGNATURE_LENGTH
        if end > len(raw):
            raise InvalidLength(f"envelope truncated: {count} signatures need {end} bytes, got {len(raw)}")
        signatures = [raw[pos:pos + SIGNATURE_LENGTH] for pos in range(offset, end, SIGNATURE_LENGTH)]
        return cls(signatures=signatures, message=raw[end:])

    def to_bytes(self) -> bytes:
        if any(len(sig) != SIGNATURE_LENGTH for sig in self.signatures):
            raise InvalidLength("every signature slot must be 64 bytes")
        return compact_u16.encode(len(self.signatures)) + b"".join(self.signatures) + self.message

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode()

    def decode_message(self) -> Message:
        return Message.from_bytes(self.message)

    @property
    def is_signed(self) -> bool:
        return bool(self.signatures) and all(sig != EMPTY_SIGNATURE for sig in self.signatures)


def build_sol_transfer_transaction(
    sender: KeyLike,
    recipient: KeyLike,
    lamports: int,
    recent_blockhash: KeyLike,
) -> bytes:
    message = build_sol_transfer_message(sender, recipient, lamports, recent_blockhash)
    envelope = wrap(message, message.header.num_required_signatures)
    logger.info("sol_transfer_built lamports=%s size=%s", lamports, len(envelope))
    return envelope


def build_token_transfer_transaction(
    sender: KeyLike,
    recipient: KeyLike,
    mint: KeyLike,
    amount: int,
    decimals: int,
    recent_blockhash: KeyLike,
    *,
    create_recipient_account: bool = False,
) -> bytes:
    message = build_token_transfer_message(
        sender,
        recipient,
        mint,
        amount,
        decimals,
        recent_blockhash,
        create_recipient_account=create_recipient_account,
    )
    envelope = wrap(message, message.header.num_required_signatures)
    logger.info(
        "token_transfer_built amount=%s decimals=%s create_ata=%s size=%s",
        amount,
        decimals,
        create_recipient_account,
        len(envelope),
    )
    return envelope
