"""
Unit tests for Settings.

Tests defaults, environment overrides, and validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from arbcycle.config.constants import DEFAULT_HOP_BUDGET, DEFAULT_NOTIONAL_USD, MAX_HOP_BUDGET
from arbcycle.config.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.hop_budget == DEFAULT_HOP_BUDGET
        assert settings.notional_usd == DEFAULT_NOTIONAL_USD
        assert settings.max_route_length == DEFAULT_HOP_BUDGET + 1
        assert settings.tokens_file == Path("tokens.csv")
        assert not settings.demo_mode
        assert not settings.uses_live_prices

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Fields are read from upper-case environment variables."""
        monkeypatch.setenv("HOP_BUDGET", "3")
        monkeypatch.setenv("DEMO_MODE", "true")
        monkeypatch.setenv("QUOTE_API_URL", "https://quotes.example.com/")

        settings = Settings(_env_file=None)

        assert settings.hop_budget == 3
        assert settings.demo_mode
        assert settings.quote_api_url == "https://quotes.example.com"

    def test_live_prices_need_key(self) -> None:
        settings = Settings(_env_file=None, cmc_api_key="abc")

        assert settings.uses_live_prices
        assert settings.cmc_api_key is not None
        assert settings.cmc_api_key.get_secret_value() == "abc"
        assert "abc" not in repr(settings)

        assert not Settings(_env_file=None, cmc_api_key="abc", demo_mode=True).uses_live_prices

    @pytest.mark.parametrize("hop_budget", [0, MAX_HOP_BUDGET + 1])
    def test_hop_budget_range(self, hop_budget: int) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, hop_budget=hop_budget)

    def test_invalid_url(self) -> None:
        """Base URLs must be http(s)."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, quote_api_url="localhost:8080")

    def test_non_positive_notional(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, notional_usd=0)

    def test_small_notional_warns(self) -> None:
        """Tiny notionals are allowed but flagged."""
        with pytest.warns(UserWarning):
            settings = Settings(_env_file=None, notional_usd=0.5)

        assert settings.notional_usd == 0.5
