"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class FeeSettings(BaseSettings):
    """Default trading fee rates, in percent of notional."""

    model_config = SettingsConfigDict(env_prefix="FEES_")

    taker_fee: Decimal = Decimal("0.05")  # 0.05%
    maker_fee: Decimal = Decimal("0.02")  # 0.02%


class MarginSettings(BaseSettings):
    """Default margin parameters used when a request omits them."""

    model_config = SettingsConfigDict(env_prefix="MARGIN_")

    maintenance_margin_rate: Decimal = Decimal("0.5")  # percent


class ApiSettings(BaseSettings):
    """JSON API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8080
    enabled: bool = True


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    fees: FeeSettings = FeeSettings()
    margin: MarginSettings = MarginSettings()
    api: ApiSettings = ApiSettings()
