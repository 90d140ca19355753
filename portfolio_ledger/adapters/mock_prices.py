"""Offline price provider returning randomized quotes around fixed base prices."""

from __future__ import annotations

import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Final, Mapping

from portfolio_ledger.domain import Price, StockPrice, Symbol

from .base import BasePriceProvider
from .price_errors import PriceNotAvailableError

DEFAULT_BASE_PRICES: Final[Mapping[str, str]] = {
    "AAPL": "201.45",
    "MSFT": "472.75",
    "GOOGL": "177.63",
    "AMZN": "216.98",
    "TSLA": "308.58",
    "NVDA": "142.63",
    "META": "694.06",
    "JPM": "266.74",
    "BAC": "44.87",
    "WFC": "61.16",
    "GS": "460.67",
    "GRFS": "8.83",
}


class MockPriceProvider(BasePriceProvider):
    """Price provider for development and tests without network access.

    Each quote is the base price moved by a uniform variation of at most
    `variation_ratio` in either direction, rounded half-up to cents.
    """

    _SOURCE_NAME: Final[str] = "mock"

    def __init__(
        self,
        base_prices: Mapping[str, str | Decimal] | None = None,
        variation_ratio: Decimal = Decimal("0.01"),
        random_unit_interval_provider: Callable[[], float] | None = None,
    ):
        """Initialize mock provider.

        Args:
            base_prices: Optional base price table keyed by symbol text.
            variation_ratio: Maximum relative deviation from the base price.
            random_unit_interval_provider: Optional provider returning random values in [0.0, 1.0].

        Raises:
            ValueError: Raised when variation_ratio is outside [0, 1).
            InvalidSymbolError: Raised when a base price key is not a valid symbol.
        """

        if variation_ratio < 0 or variation_ratio >= 1:
            raise ValueError("variation_ratio must be in [0, 1)")

        self._base_prices = {
            Symbol(symbol_text): Decimal(str(base_price))
            for symbol_text, base_price in (base_prices if base_prices is not None else DEFAULT_BASE_PRICES).items()
        }
        self._variation_ratio = variation_ratio
        self._random_unit_interval_provider = random_unit_interval_provider or random.random

    def adapter_source_name(self) -> str:
        return self._SOURCE_NAME

    def adapter_fetch_price(self, symbol: Symbol) -> StockPrice:
        """Return a randomized quote for a known symbol.

        Args:
            symbol: Instrument symbol.

        Returns:
            StockPrice: Quote within the configured variation of the base price.

        Raises:
            PriceNotAvailableError: Raised when symbol has no base price.
            RuntimeError: Raised when the random provider leaves [0.0, 1.0].
        """

        base_price = self._base_prices.get(symbol)
        if base_price is None:
            raise PriceNotAvailableError(f"no mock price for symbol {symbol}", source_name=self._SOURCE_NAME)

        random_value = self._random_unit_interval_provider()
        if random_value < 0.0 or random_value > 1.0:
            raise RuntimeError("random_unit_interval_provider must return a value in [0.0, 1.0]")

        variation = (Decimal(str(random_value)) * 2 - 1) * self._variation_ratio
        quoted_value = (base_price * (1 + variation)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return StockPrice.now(symbol=symbol, price=Price(quoted_value))


__all__ = ["DEFAULT_BASE_PRICES", "MockPriceProvider"]
