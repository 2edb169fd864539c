"""
Configuration for the DEX console order input.

Settings are read from environment variables prefixed with ``DEX_CONSOLE_``
(or a ``.env`` file) using Pydantic Settings.

Example:
    >>> from apps.dex_console.config import get_settings
    >>> get_settings().quote_debounce_seconds
    0.3
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.order_input.percentage import PercentagePolicy

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    DEX console configuration settings.

    Attributes:
        gateway_url: Base URL of the DEX gateway (balances, quotes, orders)
        request_timeout_seconds: Per-request timeout for gateway calls
        quote_debounce_seconds: Quiescence window before a quote refresh
        slider_debounce_seconds: Quiescence window for the percentage slider
        fee_asset_symbol: Token that pays network fees
        fee_allowance: Fee asset kept back when using 100% of the balance
        percentage_truncate_decimals: Decimals kept in percentage amounts
            (-1 disables truncation)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        service_name: Service name in structured logs

    Example:
        export DEX_CONSOLE_GATEWAY_URL="https://gateway.example.com"
        export DEX_CONSOLE_QUOTE_DEBOUNCE_SECONDS=0.5
    """

    # ========================================================================
    # Gateway
    # ========================================================================

    gateway_url: str = "http://localhost:8010"
    """DEX gateway base URL."""

    request_timeout_seconds: float = 5.0

    # ========================================================================
    # Order input behaviour
    # ========================================================================

    quote_debounce_seconds: float = 0.3
    """0 fires on the next loop iteration but keeps last-write-wins."""

    slider_debounce_seconds: float = 0.35

    fee_asset_symbol: str = "XRD"

    fee_allowance: Decimal = Decimal("3")

    percentage_truncate_decimals: int = 8
    """
    Fractional digits kept in percentage-of-balance amounts.

    Works around the transaction builder rejecting amounts with more
    precision than it supports. Set to -1 to commit exact amounts.
    """

    # ========================================================================
    # Logging
    # ========================================================================

    log_level: str = "INFO"

    service_name: str = "dex_console"

    model_config = SettingsConfigDict(
        env_prefix="DEX_CONSOLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("quote_debounce_seconds", "slider_debounce_seconds")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("debounce delays must be >= 0")
        return value

    @field_validator("request_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        return value

    @field_validator("fee_allowance")
    @classmethod
    def _non_negative_allowance(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError("fee_allowance must be >= 0")
        return value

    @field_validator("percentage_truncate_decimals")
    @classmethod
    def _truncate_decimals(cls, value: int) -> int:
        if value < -1:
            raise ValueError("percentage_truncate_decimals must be >= 0, or -1 to disable")
        return value

    @field_validator("log_level")
    @classmethod
    def _log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}")
        return normalized

    def percentage_policy(self) -> PercentagePolicy:
        return PercentagePolicy(
            fee_asset_symbol=self.fee_asset_symbol,
            fee_allowance=self.fee_allowance,
            truncate_decimals=(
                None if self.percentage_truncate_decimals < 0 else self.percentage_truncate_decimals
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (loaded once; tests call ``cache_clear``)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
