"""Legacy Solana message layout for the supported payment flows.

Wire layout::

    header (3 bytes) | compact-u16 key count | keys (32 bytes each)
    | recent blockhash (32 bytes) | compact-u16 instruction count | instructions

Each instruction is ``program index (1 byte) | compact-u16 account count |
account indices | compact-u16 data length | data``.

The key table must be ordered signer-writable, signer-readonly, writable,
readonly; the header counts are derived from that order and the network
rejects any message where the two disagree.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from . import compact_u16
from .errors import InvalidKeyLength, InvalidLength, PaymentEngineError
from .instructions import (
    Instruction,
    build_create_associated_token_account_ix,
    build_system_transfer_ix,
    build_transfer_checked_ix,
)
from .keys import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    KEY_LENGTH,
    SYS_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    KeyLike,
    to_key_bytes,
)
from .pda import get_associated_token_address

logger = logging.getLogger(__name__)

HEADER_LEN = 3
MAX_ACCOUNT_INDEX = 0xFF


class AccountRole(enum.IntEnum):
    # Values give the required position order in the key table.
    SIGNER_WRITABLE = 0
    SIGNER_READONLY = 1
    WRITABLE = 2
    READONLY = 3

    @property
    def is_signer(self) -> bool:
        return self in (AccountRole.SIGNER_WRITABLE, AccountRole.SIGNER_READONLY)

    @property
    def is_writable(self) -> bool:
        return self in (AccountRole.SIGNER_WRITABLE, AccountRole.WRITABLE)


@dataclass(frozen=True)
class MessageHeader:
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int

    @classmethod
    def from_roles(cls, roles: Sequence[AccountRole]) -> "MessageHeader":
        return cls(
            num_required_signatures=sum(1 for role in roles if role.is_signer),
            num_readonly_signed_accounts=sum(1 for role in roles if role is AccountRole.SIGNER_READONLY),
            num_readonly_unsigned_accounts=sum(1 for role in roles if role is AccountRole.READONLY),
        )

    def to_bytes(self) -> bytes:
        return bytes(
            [
                self.num_required_signatures,
                self.num_readonly_signed_accounts,
                self.num_readonly_unsigned_accounts,
            ]
        )


@dataclass(frozen=True)
class CompiledInstruction:
    program_id_index: int
    accounts: List[int]
    data: bytes


@dataclass(frozen=True)
class Message:
    header: MessageHeader
    account_keys: List[bytes]
    recent_blockhash: bytes
    instructions: List[CompiledInstruction]

    def account_roles(self) -> List[AccountRole]:
        """Recover each key's role from the header counts."""
        total = len(self.account_keys)
        signers = self.header.num_required_signatures
        writable_signers = signers - self.header.num_readonly_signed_accounts
        writable_unsigned = total - signers - self.header.num_readonly_unsigned_accounts
        roles = []
        for idx in range(total):
            if idx < signers:
                roles.append(AccountRole.SIGNER_WRITABLE if idx < writable_signers else AccountRole.SIGNER_READONLY)
            elif idx - signers < writable_unsigned:
                roles.append(AccountRole.WRITABLE)
            else:
                roles.append(AccountRole.READONLY)
        return roles

    def serialize(self) -> bytes:
        buf = bytearray(self.header.to_bytes())
        buf += compact_u16.encode(len(self.account_keys))
        for key in self.account_keys:
            buf += key
        buf += self.recent_blockhash
        buf += compact_u16.encode(len(self.instructions))
        for ix in self.instructions:
            buf.append(ix.program_id_index)
            buf += compact_u16.encode(len(ix.accounts))
            buf += bytes(ix.accounts)
            buf += compact_u16.encode(len(ix.data))
            buf += ix.data
        return bytes(buf)

    def __bytes__(self) -> bytes:
        return self.serialize()

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Message":
        reader = _Reader(raw)
        header = MessageHeader(*reader.take(HEADER_LEN))
        if header.num_required_signatures & 0x80:
            raise InvalidLength("versioned messages are not supported")
        keys = [reader.take(KEY_LENGTH) for _ in range(reader.length())]
        if header.num_required_signatures + header.num_readonly_unsigned_accounts > len(keys):
            raise InvalidLength(f"header counts exceed the {len(keys)} account keys")
        if header.num_readonly_signed_accounts > header.num_required_signatures:
            raise InvalidLength("more read-only signers than required signatures")
        blockhash = reader.take(KEY_LENGTH)
        instructions = []
        for _ in range(reader.length()):
            program_index = reader.take(1)[0]
            accounts = list(reader.take(reader.length()))
            data = reader.take(reader.length())
            instructions.append(CompiledInstruction(program_index, accounts, data))
        if reader.remaining():
            raise InvalidLength(f"{reader.remaining()} trailing bytes after message")
        return cls(header=header, account_keys=keys, recent_blockhash=blockhash, instructions=instructions)


class _Reader:
    def __init__(self, raw: bytes) -> None:
        self.raw = bytes(raw)
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.raw):
            raise InvalidLength(f"message truncated at offset {self.offset} (wanted {size} bytes)")
        chunk = self.raw[self.offset:end]
        self.offset = end
        return chunk

    def length(self) -> int:
        value, consumed = compact_u16.decode(self.raw, self.offset)
        self.offset += consumed
        return value

    def remaining(self) -> int:
        return len(self.raw) - self.offset


def compile_message(
    account_table: Sequence[Tuple[bytes, AccountRole]],
    instructions: Sequence[Instruction],
    recent_blockhash: KeyLike,
) -> Message:
    """Lay out ``instructions`` against a fixed, caller-ordered key table.

    Raises PaymentEngineError if the table is out of role order, repeats a key,
    or is missing a key (or a privilege) that an instruction needs.
    """
    blockhash = to_key_bytes(recent_blockhash, "recent blockhash")
    if not account_table:
        raise PaymentEngineError("message needs at least the fee payer")
    if len(account_table) > MAX_ACCOUNT_INDEX + 1:
        raise InvalidLength(f"too many accounts: {len(account_table)}")

    roles = [role for _, role in account_table]
    if roles[0] is not AccountRole.SIGNER_WRITABLE:
        raise PaymentEngineError("fee payer must be the first, writable signer")
    if any(later < earlier for earlier, later in zip(roles, roles[1:])):
        raise PaymentEngineError("account table is not in signer/writable order")

    index: Dict[bytes, int] = {}
    for position, (key, _) in enumerate(account_table):
        if len(key) != KEY_LENGTH:
            raise InvalidKeyLength(f"account {position} must be {KEY_LENGTH} bytes, got {len(key)}")
        if key in index:
            raise PaymentEngineError(f"account key repeated at positions {index[key]} and {position}")
        index[key] = position

    compiled = []
    for ix in instructions:
        program_index = _lookup(index, bytes(ix.program_id), "program id")
        account_indices = []
        for meta in ix.accounts:
            position = _lookup(index, bytes(meta.pubkey), "instruction account")
            role = roles[position]
            if meta.is_signer and not role.is_signer:
                raise PaymentEngineError(f"account at position {position} must be a signer")
            if meta.is_writable and not role.is_writable:
                raise PaymentEngineError(f"account at position {position} must be writable")
            account_indices.append(position)
        compiled.append(CompiledInstruction(program_index, account_indices, bytes(ix.data)))

    return Message(
        header=MessageHeader.from_roles(roles),
        account_keys=[key for key, _ in account_table],
        recent_blockhash=blockhash,
        instructions=compiled,
    )


def _lookup(index: Dict[bytes, int], key: bytes, what: str) -> int:
    try:
        return index[key]
    except KeyError:
        raise PaymentEngineError(f"{what} {key.hex()} is not in the account table") from None


def build_sol_transfer_message(
    sender: KeyLike,
    recipient: KeyLike,
    lamports: int,
    recent_blockhash: KeyLike,
) -> Message:
    from_key = to_key_bytes(sender, "sender")
    to_key = to_key_bytes(recipient, "recipient")
    blockhash = to_key_bytes(recent_blockhash, "recent blockhash")
    table = [
        (from_key, AccountRole.SIGNER_WRITABLE),
        (to_key, AccountRole.WRITABLE),
        (SYS_PROGRAM_ID, AccountRole.READONLY),
    ]
    message = compile_message(table, [build_system_transfer_ix(from_key, to_key, lamports)], blockhash)
    logger.debug("sol_transfer_message lamports=%s accounts=%s", lamports, len(table))
    return message


def build_token_transfer_message(
    sender: KeyLike,
    recipient: KeyLike,
    mint: KeyLike,
    amount: int,
    decimals: int,
    recent_blockhash: KeyLike,
    *,
    create_recipient_account: bool = False,
) -> Message:
    """SPL ``TransferChecked`` between the sender's and recipient's associated accounts.

    With ``create_recipient_account`` the recipient's associated token account is
    created first, paid for by the sender.
    """
    payer = to_key_bytes(sender, "sender")
    recipient_wallet = to_key_bytes(recipient, "recipient")
    mint_key = to_key_bytes(mint, "mint")
    blockhash = to_key_bytes(recent_blockhash, "recent blockhash")
    sender_ata = get_associated_token_address(payer, mint_key)
    recipient_ata = get_associated_token_address(recipient_wallet, mint_key)

    transfer_ix = build_transfer_checked_ix(sender_ata, mint_key, recipient_ata, payer, amount, decimals)
    if create_recipient_account:
        table = [
            (payer, AccountRole.SIGNER_WRITABLE),
            (sender_ata, AccountRole.WRITABLE),
            (recipient_ata, AccountRole.WRITABLE),
            (mint_key, AccountRole.READONLY),
            (recipient_wallet, AccountRole.READONLY),
            (SYS_PROGRAM_ID, AccountRole.READONLY),
            (TOKEN_PROGRAM_ID, AccountRole.READONLY),
            (ASSOCIATED_TOKEN_PROGRAM_ID, AccountRole.READONLY),
        ]
        create_ix = build_create_associated_token_account_ix(payer, recipient_wallet, mint_key, recipient_ata)
        instructions = [create_ix, transfer_ix]
    else:
        table = [
            (payer, AccountRole.SIGNER_WRITABLE),
            (sender_ata, AccountRole.WRITABLE),
            (recipient_ata, AccountRole.WRITABLE),
            (mint_key, AccountRole.READONLY),
            (TOKEN_PROGRAM_ID, AccountRole.READONLY),
        ]
        instructions = [transfer_ix]

    message = compile_message(table, instructions, blockhash)
    logger.debug(
        "token_transfer_message amount=%s decimals=%s create_ata=%s accounts=%s",
        amount,
        decimals,
        create_recipient_account,
        len(table),
    )
    return message
