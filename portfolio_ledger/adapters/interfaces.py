"""Typed interfaces for adapter-layer responsibilities."""

from __future__ import annotations

from typing import Iterable, Protocol

from portfolio_ledger.domain import StockPrice, Symbol


class PriceProviderPort(Protocol):
    """Port definition for fetching live instrument prices."""

    def adapter_source_name(self) -> str:
        """Return adapter source identifier for diagnostics.

        Returns:
            str: Human-readable upstream source identifier.

        Raises:
            RuntimeError: Raised when source metadata is unavailable.
        """

    def adapter_fetch_price(self, symbol: Symbol) -> StockPrice:
        """Fetch the current quote of one instrument.

        Args:
            symbol: Instrument symbol.

        Returns:
            StockPrice: Current quote.

        Raises:
            PriceNotAvailableError: Raised when the provider has no quote for symbol.
            PriceProviderError: Raised when the upstream call fails.
        """

    def adapter_fetch_prices(self, symbols: Iterable[Symbol]) -> dict[Symbol, StockPrice]:
        """Fetch current quotes for several instruments.

        Symbols without a quote are omitted from the result.

        Args:
            symbols: Instrument symbols.

        Returns:
            dict[Symbol, StockPrice]: Quotes keyed by symbol.

        Raises:
            PriceProviderError: Raised when the upstream call fails.
        """


__all__ = ["PriceProviderPort"]
