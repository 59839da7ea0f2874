"""Application configuration via pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.payment import UpiConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "upilink"
    app_version: str = "1.0.0"
    app_env: str = "development"

    rate_limit_per_minute: int = 30

    api_key: Optional[str] = None
    log_level: str = "INFO"
    log_json: bool = True

    upi_min_amount: float = 1
    upi_max_amount: float = 100000
    upi_max_daily_amount: float = 1000000
    upi_currency: str = "INR"
    upi_reference_prefix: str = "TXN"
    upi_merchant_code: Optional[str] = None

    def upi_config(self) -> UpiConfig:
        return UpiConfig(
            min_amount=self.upi_min_amount,
            max_amount=self.upi_max_amount,
            max_daily_amount=self.upi_max_daily_amount,
            currency=self.upi_currency,
            reference_prefix=self.upi_reference_prefix,
            merchant_code=self.upi_merchant_code,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
