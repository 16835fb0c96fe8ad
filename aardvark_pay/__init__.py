"""Unsigned Solana payment transactions and program-derived addresses."""
from .curve import is_on_curve
from .errors import (
    ConfigurationError,
    InvalidAmount,
    InvalidKeyLength,
    InvalidLength,
    InvalidSeeds,
    NoValidBump,
    PaymentEngineError,
    RpcError,
)
from .keys import ASSOCIATED_TOKEN_PROGRAM_ID, SYS_PROGRAM_ID, TOKEN_PROGRAM_ID
from .message import AccountRole, Message, MessageHeader, build_sol_transfer_message, build_token_transfer_message
from .pda import create_program_address, find_program_address, get_associated_token_address
from .transaction import (
    TransactionEnvelope,
    build_sol_transfer_transaction,
    build_token_transfer_transaction,
    wrap,
)

__all__ = [
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "AccountRole",
    "ConfigurationError",
    "InvalidAmount",
    "InvalidKeyLength",
    "InvalidLength",
    "InvalidSeeds",
    "Message",
    "MessageHeader",
    "NoValidBump",
    "PaymentEngineError",
    "RpcError",
    "SYS_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "TransactionEnvelope",
    "build_sol_transfer_message",
    "build_sol_transfer_transaction",
    "build_token_transfer_message",
    "build_token_transfer_transaction",
    "create_program_address",
    "find_program_address",
    "get_associated_token_address",
    "is_on_curve",
    "wrap",
]
