"""Exception hierarchy for payment transaction construction."""
from __future__ import annotations


class PaymentEngineError(ValueError):
    """Base class for every error raised while building a payment transaction."""


class InvalidKeyLength(PaymentEngineError):
    """A public key or blockhash was not exactly 32 bytes."""


class InvalidLength(PaymentEngineError):
    """A length field is outside its encodable range, or encoded bytes are malformed."""


class InvalidSeeds(PaymentEngineError):
    """Seeds exceed runtime limits, or the derived candidate lies on the curve."""


class NoValidBump(PaymentEngineError):
    """Every bump from 255 down to 0 produced an on-curve candidate."""


class InvalidAmount(PaymentEngineError):
    """An amount or decimals value does not fit its unsigned field."""


class ConfigurationError(PaymentEngineError):
    """Settings reference a missing or malformed address."""


class RpcError(PaymentEngineError):
    """The RPC node returned no usable result."""
