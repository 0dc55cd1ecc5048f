"""
Settings loaded from environment variables (prefix ``FEE_ESTIMATOR_``) and ``.env``.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

ETH_TOKEN_ADDRESS = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "FEE_ESTIMATOR_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "frozen": True,
        "extra": "ignore",
    }

    account_store_path: str = "accounts.json"
    default_network_id: str = "sepolia-alpha"
    # Labels the response only; estimation itself is token-agnostic.
    default_fee_token_address: str = ETH_TOKEN_ADDRESS

    # Max-fee headroom over the raw estimate
    amount_overhead: float = Field(default=1.5, ge=1.0)
    price_overhead: float = Field(default=1.5, ge=1.0)

    # Offline provider pricing
    dry_run_gas_price: int = Field(default=1_000_000_000, ge=0)
    dry_run_data_gas_price: int = Field(default=100_000, ge=0)

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


def load_settings() -> Settings:
    return Settings()
