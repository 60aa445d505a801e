"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arbcycle.config.constants import (
    COINMARKETCAP_API_URL,
    DEFAULT_HOP_BUDGET,
    DEFAULT_NOTIONAL_USD,
    DEFAULT_QUOTE_API_URL,
    DEFAULT_RATE_FETCH_RETRIES,
    DEFAULT_RATE_FETCH_TIMEOUT,
    DEFAULT_REQUESTS_PER_SECOND,
    DEFAULT_TOKENS_FILENAME,
    DISPLAY_DECIMALS,
    MAX_HOP_BUDGET,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Sensitive values use SecretStr for safe handling.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Data Sources
    # =========================================================================

    tokens_file: Path = Field(
        default=Path(DEFAULT_TOKENS_FILENAME),
        description="CSV file with one 'symbol,address[,decimals]' entry per line",
    )

    quote_api_url: str = Field(
        default=DEFAULT_QUOTE_API_URL,
        description="Base URL of the expected-rate quote gateway",
    )

    price_api_url: str = Field(
        default=COINMARKETCAP_API_URL,
        description="Base URL of the USD price listing API",
    )

    cmc_api_key: SecretStr | None = Field(
        default=None,
        description="CoinMarketCap API key; prices from the tokens file are used without it",
    )

    demo_mode: bool = Field(
        default=False,
        description="Use simulated quotes and built-in assets instead of live services",
    )

    # =========================================================================
    # Search Configuration
    # =========================================================================

    hop_budget: int = Field(
        default=DEFAULT_HOP_BUDGET,
        ge=1,
        le=MAX_HOP_BUDGET,
        description="Intermediate hops allowed before a route must close",
    )

    notional_usd: float = Field(
        default=DEFAULT_NOTIONAL_USD,
        gt=0.0,
        description="USD value each origin asset starts its cycle with",
    )

    # =========================================================================
    # Scan Loop
    # =========================================================================

    scan_count: int = Field(
        default=3,
        ge=0,
        description="Number of scan passes to run (0 = until interrupted)",
    )

    scan_interval_s: float = Field(
        default=2.0,
        ge=0.0,
        le=3600.0,
        description="Pause between passes, lets lazy rate fetches land",
    )

    # =========================================================================
    # Rate Fetching
    # =========================================================================

    rate_fetch_timeout_s: float = Field(
        default=DEFAULT_RATE_FETCH_TIMEOUT,
        gt=0.0,
        le=60.0,
        description="Timeout for a single quote request in seconds",
    )

    rate_fetch_retries: int = Field(
        default=DEFAULT_RATE_FETCH_RETRIES,
        ge=0,
        le=10,
        description="Retries after a failed quote request",
    )

    requests_per_second: int = Field(
        default=DEFAULT_REQUESTS_PER_SECOND,
        ge=1,
        le=100,
        description="Quote gateway request rate limit",
    )

    # =========================================================================
    # Output
    # =========================================================================

    export_path: Path | None = Field(
        default=None,
        description="Write each scan report as JSON to this file",
    )

    display_decimals: int = Field(
        default=DISPLAY_DECIMALS,
        ge=0,
        le=18,
        description="Fractional digits shown for amounts and rates",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("quote_api_url", "price_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so endpoints can be appended."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got {v!r}")
        return v.rstrip("/")

    @field_validator("notional_usd", mode="after")
    @classmethod
    def validate_notional(cls, v: float) -> float:
        """Warn if the notional is too small to survive integer rounding."""
        if v < 1.0:
            import warnings

            warnings.warn(
                f"Notional ${v} is very small, low-decimal assets may round to zero",
                stacklevel=2,
            )
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_route_length(self) -> int:
        """Maximum number of trades in a closing route."""
        return self.hop_budget + 1

    @property
    def uses_live_prices(self) -> bool:
        """Whether USD prices come from the price listing API."""
        return not self.demo_mode and self.cmc_api_key is not None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
