"""Mock implementations for testing."""

from tests.mocks.quotes import MockQuoteSource


__all__ = [
    "MockQuoteSource",
]
