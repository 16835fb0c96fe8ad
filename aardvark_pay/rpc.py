"""Read-only RPC adapter: recent blockhash, signature status and token lookups.

Sending transactions stays with the wallet, and so does any retry policy.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from solana.rpc.api import Client
from solana.rpc.commitment import Commitment, Finalized
from solana.rpc.types import TokenAccountOpts
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from .errors import RpcError
from .keys import KeyLike, to_key_bytes
from .settings import Settings

logger = logging.getLogger(__name__)


class TransactionStatus(enum.Enum):
    NOT_FOUND = "not_found"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"
    FAILED = "failed"

    @property
    def is_settled(self) -> bool:
        return self in (TransactionStatus.CONFIRMED, TransactionStatus.FINALIZED)


@dataclass(frozen=True)
class LatestBlockhash:
    blockhash: bytes
    last_valid_block_height: int


class PaymentRpc:
    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "PaymentRpc":
        return cls(Client(settings.solana_rpc, timeout=settings.rpc_timeout_seconds))

    def latest_blockhash(self, commitment: Commitment = Finalized) -> LatestBlockhash:
        try:
            resp = self.client.get_latest_blockhash(commitment=commitment)
        except Exception as exc:  # noqa: BLE001
            logger.warning("latest_blockhash_failed error=%s", exc, exc_info=True)
            raise RpcError(f"Failed to fetch blockhash: {exc}") from exc
        value = getattr(resp, "value", None)
        if value is None:
            raise RpcError("getLatestBlockhash returned no value")
        return LatestBlockhash(
            blockhash=bytes(value.blockhash),
            last_valid_block_height=int(value.last_valid_block_height),
        )

    def signature_status(self, signature: str) -> TransactionStatus:
        try:
            sig = Signature.from_string(signature)
        except ValueError as exc:
            raise RpcError(f"Invalid transaction signature: {signature}") from exc
        try:
            resp = self.client.get_signature_statuses([sig], search_transaction_history=True)
        except Exception as exc:  # noqa: BLE001
            logger.warning("signature_status_failed sig=%s error=%s", signature, exc, exc_info=True)
            raise RpcError(f"Failed to fetch signature status: {exc}") from exc
        return _to_status(resp.value[0] if resp.value else None)

    def token_decimals(self, mint: KeyLike) -> int:
        mint_key = Pubkey.from_bytes(to_key_bytes(mint, "mint"))
        try:
            resp = self.client.get_token_supply(mint_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("token_supply_failed mint=%s error=%s", mint_key, exc, exc_info=True)
            raise RpcError(f"Failed to fetch token supply: {exc}") from exc
        value = getattr(resp, "value", None)
        if value is None:
            raise RpcError(f"getTokenSupply returned no value for {mint_key}")
        return int(value.decimals)

    def token_account_exists(self, owner: KeyLike, mint: KeyLike) -> bool:
        """True when ``owner`` already holds at least one token account for ``mint``."""
        owner_key = Pubkey.from_bytes(to_key_bytes(owner, "owner"))
        mint_key = Pubkey.from_bytes(to_key_bytes(mint, "mint"))
        try:
            resp = self.client.get_token_accounts_by_owner(owner_key, TokenAccountOpts(mint=mint_key))
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "token_accounts_failed owner=%s mint=%s error=%s", owner_key, mint_key, exc, exc_info=True
            )
            raise RpcError(f"Failed to fetch token accounts: {exc}") from exc
        return bool(getattr(resp, "value", None))


def _to_status(status) -> TransactionStatus:
    if status is None:
        return TransactionStatus.NOT_FOUND
    if status.err is not None:
        return TransactionStatus.FAILED
    confirmation: Optional[TransactionConfirmationStatus] = status.confirmation_status
    if confirmation == TransactionConfirmationStatus.Finalized:
        return TransactionStatus.FINALIZED
    if confirmation == TransactionConfirmationStatus.Confirmed:
        return TransactionStatus.CONFIRMED
    return TransactionStatus.PROCESSING
