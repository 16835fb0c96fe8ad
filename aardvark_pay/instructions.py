"""System and SPL Token instruction builders used by payment flows."""
from __future__ import annotations

from typing import Optional

from borsh_construct import CStruct, U8, U32, U64
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from .errors import InvalidAmount
from .keys import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYS_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    KeyLike,
    to_key_bytes,
)
from .pda import get_associated_token_address

SYSTEM_TRANSFER = 2
TOKEN_TRANSFER_CHECKED = 12

U64_MAX = 2**64 - 1
U8_MAX = 2**8 - 1

SystemTransferLayout = CStruct("instruction" / U32, "lamports" / U64)
TransferCheckedLayout = CStruct("instruction" / U8, "amount" / U64, "decimals" / U8)


def _pubkey(value: KeyLike, name: str) -> Pubkey:
    return Pubkey.from_bytes(to_key_bytes(value, name))


def _check_u64(value: int, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0 or value > U64_MAX:
        raise InvalidAmount(f"{name} must be an unsigned 64-bit integer, got {value!r}")
    return value


def _check_u8(value: int, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0 or value > U8_MAX:
        raise InvalidAmount(f"{name} must be an unsigned 8-bit integer, got {value!r}")
    return value


def encode_system_transfer(lamports: int) -> bytes:
    return SystemTransferLayout.build(
        {"instruction": SYSTEM_TRANSFER, "lamports": _check_u64(lamports, "lamports")}
    )


def encode_transfer_checked(amount: int, decimals: int) -> bytes:
    return TransferCheckedLayout.build(
        {
            "instruction": TOKEN_TRANSFER_CHECKED,
            "amount": _check_u64(amount, "amount"),
            "decimals": _check_u8(decimals, "decimals"),
        }
    )


def encode_create_associated_token_account() -> bytes:
    # The associated token program treats empty data as its "Create" instruction.
    return b""


def build_system_transfer_ix(sender: KeyLike, recipient: KeyLike, lamports: int) -> Instruction:
    accounts = [
        AccountMeta(pubkey=_pubkey(sender, "sender"), is_signer=True, is_writable=True),
        AccountMeta(pubkey=_pubkey(recipient, "recipient"), is_signer=False, is_writable=True),
    ]
    data = encode_system_transfer(lamports)
    return Instruction(Pubkey.from_bytes(SYS_PROGRAM_ID), data, accounts)


def build_create_associated_token_account_ix(
    payer: KeyLike,
    owner: KeyLike,
    mint: KeyLike,
    associated_account: Optional[KeyLike] = None,
) -> Instruction:
    owner_key = to_key_bytes(owner, "owner")
    mint_key = to_key_bytes(mint, "mint")
    if associated_account is None:
        ata = get_associated_token_address(owner_key, mint_key)
    else:
        ata = associated_account
    accounts = [
        AccountMeta(pubkey=_pubkey(payer, "payer"), is_signer=True, is_writable=True),
        AccountMeta(pubkey=_pubkey(ata, "associated account"), is_signer=False, is_writable=True),
        AccountMeta(pubkey=Pubkey.from_bytes(owner_key), is_signer=False, is_writable=False),
        AccountMeta(pubkey=Pubkey.from_bytes(mint_key), is_signer=False, is_writable=False),
        AccountMeta(pubkey=Pubkey.from_bytes(SYS_PROGRAM_ID), is_signer=False, is_writable=False),
        AccountMeta(pubkey=Pubkey.from_bytes(TOKEN_PROGRAM_ID), is_signer=False, is_writable=False),
    ]
    data = encode_create_associated_token_account()
    return Instruction(Pubkey.from_bytes(ASSOCIATED_TOKEN_PROGRAM_ID), data, accounts)


def build_transfer_checked_ix(
    source: KeyLike,
    mint: KeyLike,
    destination: KeyLike,
    owner: KeyLike,
    amount: int,
    decimals: int,
) -> Instruction:
    """SPL Token ``TransferChecked``.

    ``amount`` is in base units; the caller scales it by ``decimals`` beforehand.
    """
    accounts = [
        AccountMeta(pubkey=_pubkey(source, "source"), is_signer=False, is_writable=True),
        AccountMeta(pubkey=_pubkey(mint, "mint"), is_signer=False, is_writable=False),
        AccountMeta(pubkey=_pubkey(destination, "destination"), is_signer=False, is_writable=True),
        AccountMeta(pubkey=_pubkey(owner, "owner"), is_signer=True, is_writable=False),
    ]
    data = encode_transfer_checked(amount, decimals)
    return Instruction(Pubkey.from_bytes(TOKEN_PROGRAM_ID), data, accounts)
