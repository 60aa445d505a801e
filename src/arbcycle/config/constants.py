"""
Scanner constants and configuration values.

This module contains all hardcoded values used throughout the cycle scanner.
Values are organized by category for easy maintenance and auditing.
"""

from typing import Final


# =============================================================================
# Fixed-Point Arithmetic
# =============================================================================

# Exchange rates are stored as integers scaled by 10**RATE_PRECISION
RATE_PRECISION: Final[int] = 18
RATE_SCALE: Final[int] = 10**RATE_PRECISION

# Conversions behave like uint256 arithmetic and must not wrap
MAX_UINT256: Final[int] = 2**256 - 1


# =============================================================================
# Cycle Search
# =============================================================================

# Hop budget 2 permits closing routes of up to 3 trades (origin -> a -> b -> origin)
DEFAULT_HOP_BUDGET: Final[int] = 2

# Upper bound on the recursion depth of a single search
MAX_HOP_BUDGET: Final[int] = 4

# USD value of the amount each origin asset starts its cycle with
DEFAULT_NOTIONAL_USD: Final[float] = 100.0


# =============================================================================
# Assets
# =============================================================================

# Sentinel address used by on-chain reserves for the native currency
ETH_ADDRESS: Final[str] = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
ETH_SYMBOL: Final[str] = "ETH"
ETH_DECIMALS: Final[int] = 18

DEFAULT_TOKEN_DECIMALS: Final[int] = 18
DEFAULT_TOKENS_FILENAME: Final[str] = "tokens.csv"


# =============================================================================
# External Services
# =============================================================================

DEFAULT_QUOTE_API_URL: Final[str] = "http://localhost:8080"
ENDPOINT_EXPECTED_RATE: Final[str] = "/expectedRate"

COINMARKETCAP_API_URL: Final[str] = "https://pro-api.coinmarketcap.com"
ENDPOINT_LISTINGS_LATEST: Final[str] = "/v1/cryptocurrency/listings/latest"
COINMARKETCAP_KEY_HEADER: Final[str] = "X-CMC_PRO_API_KEY"


# =============================================================================
# Rate Fetching
# =============================================================================

DEFAULT_RATE_FETCH_TIMEOUT: Final[float] = 5.0  # seconds
DEFAULT_RATE_FETCH_RETRIES: Final[int] = 2
RATE_FETCH_RETRY_DELAY: Final[float] = 0.25  # seconds, doubled per attempt

DEFAULT_REQUESTS_PER_SECOND: Final[int] = 10


# =============================================================================
# Display
# =============================================================================

DISPLAY_DECIMALS: Final[int] = 6
DISPLAY_PADDING: Final[int] = 20

CONSOLE_GREEN: Final[str] = "\033[32m"
CONSOLE_RED: Final[str] = "\033[31m"
CONSOLE_RESET: Final[str] = "\033[0m"


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000
