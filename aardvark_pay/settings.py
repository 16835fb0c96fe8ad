"""Engine configuration read from the environment or a ``.env`` file."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings

from .errors import ConfigurationError
from .keys import key_from_string


class Settings(BaseSettings):
    solana_rpc: str = "https://api.mainnet-beta.solana.com"
    cluster: str = "mainnet-beta"
    receiving_wallet: Optional[str] = None
    skr_mint: str = "SKRbvo6Gf7GondiT3BbTfuRDPqLWei4j2Qy2NPGZhW3"
    skr_decimals: int = 6
    operation_fee_sol: Decimal = Decimal("0.01")  # flat fee per bulk operation (5+ apps)
    free_tier_limit: int = 4  # operations up to this many apps are free
    rpc_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def receiving_pubkey(self) -> bytes:
        if not self.receiving_wallet:
            raise ConfigurationError("RECEIVING_WALLET is not configured")
        return _parse_address("RECEIVING_WALLET", self.receiving_wallet)

    def skr_mint_pubkey(self) -> bytes:
        if not self.skr_mint:
            raise ConfigurationError("SKR_MINT is not configured")
        return _parse_address("SKR_MINT", self.skr_mint)

    @property
    def is_mainnet(self) -> bool:
        return self.cluster == "mainnet-beta"


def _parse_address(name: str, value: str) -> bytes:
    try:
        return key_from_string(value.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} is not a valid pubkey: {exc}") from exc


def load_settings(**overrides) -> Settings:
    return Settings(**overrides)
