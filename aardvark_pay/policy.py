"""Operation pricing and payment links.

Up to ``free_tier_limit`` apps per bulk operation are free; larger operations
pay a flat ``operation_fee_sol`` to the receiving wallet.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Optional, Union

from pydantic import BaseModel

from .errors import InvalidAmount
from .keys import KeyLike
from .rpc import PaymentRpc
from .settings import Settings
from .transaction import build_sol_transfer_transaction, build_token_transfer_transaction

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000

Number = Union[int, str, Decimal]


class PaymentQuote(BaseModel):
    app_count: int
    lamports: int
    is_free: bool


def scale_token_amount(amount: Number, decimals: int) -> int:
    """Convert a whole-token amount into base units, e.g. 1 at 6 decimals -> 1_000_000."""
    if isinstance(amount, float):
        raise InvalidAmount("pass token amounts as int, str or Decimal, not float")
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidAmount(f"not a number: {amount!r}") from exc
    if not value.is_finite():
        raise InvalidAmount(f"amount must be finite: {amount}")
    if value < 0:
        raise InvalidAmount(f"amount must not be negative: {amount}")
    return int((value * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN))


def sol_to_lamports(sol: Number) -> int:
    return scale_token_amount(sol, 9)


def quote_operation(app_count: int, settings: Settings) -> PaymentQuote:
    if app_count < 0:
        raise InvalidAmount(f"app count must not be negative: {app_count}")
    if app_count <= settings.free_tier_limit:
        return PaymentQuote(app_count=app_count, lamports=0, is_free=True)
    return PaymentQuote(app_count=app_count, lamports=sol_to_lamports(settings.operation_fee_sol), is_free=False)


def operation_fee_lamports(app_count: int, settings: Settings) -> int:
    return quote_operation(app_count, settings).lamports


def build_operation_payment(
    payer: KeyLike,
    app_count: int,
    recent_blockhash: KeyLike,
    settings: Settings,
) -> Optional[bytes]:
    """Unsigned SOL fee transaction for a bulk operation, or None when it is free."""
    quote = quote_operation(app_count, settings)
    if quote.is_free:
        return None
    return build_sol_transfer_transaction(payer, settings.receiving_pubkey(), quote.lamports, recent_blockhash)


def build_skr_payment(
    payer: KeyLike,
    tokens: Number,
    recent_blockhash: KeyLike,
    settings: Settings,
    *,
    rpc: Optional[PaymentRpc] = None,
    recipient_account_exists: Optional[bool] = None,
) -> bytes:
    """Unsigned SKR transfer to the receiving wallet.

    With ``rpc`` the mint's decimals and whether the receiving wallet already has
    a token account come from the cluster; otherwise ``settings.skr_decimals`` is
    used and the account is assumed to exist. An explicit
    ``recipient_account_exists`` always wins.
    """
    receiver = settings.receiving_pubkey()
    mint = settings.skr_mint_pubkey()
    decimals = settings.skr_decimals
    if rpc is not None:
        decimals = rpc.token_decimals(mint)
        if recipient_account_exists is None:
            recipient_account_exists = rpc.token_account_exists(receiver, mint)
    if recipient_account_exists is None:
        recipient_account_exists = True
    amount = scale_token_amount(tokens, decimals)
    logger.info(
        "skr_payment amount=%s decimals=%s create_recipient_account=%s",
        amount,
        decimals,
        not recipient_account_exists,
    )
    return build_token_transfer_transaction(
        payer,
        receiver,
        mint,
        amount,
        decimals,
        recent_blockhash,
        create_recipient_account=not recipient_account_exists,
    )


def _cluster_param(settings: Settings) -> str:
    return "" if settings.is_mainnet else f"?cluster={settings.cluster}"


def solscan_tx_url(signature: str, settings: Settings) -> str:
    return f"https://solscan.io/tx/{signature}{_cluster_param(settings)}"


def explorer_tx_url(signature: str, settings: Settings) -> str:
    return f"https://explorer.solana.com/tx/{signature}{_cluster_param(settings)}"


def solscan_token_url(settings: Settings) -> str:
    return f"https://solscan.io/token/{settings.skr_mint}{_cluster_param(settings)}"


def short_signature(signature: str) -> str:
    if len(signature) >= 16:
        return f"{signature[:8]}...{signature[-8:]}"
    return signature
