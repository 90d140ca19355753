"""Live quote lookup use case."""

from __future__ import annotations

from portfolio_ledger.adapters import PriceProviderPort
from portfolio_ledger.domain import StockPrice, Symbol


class PriceLookupService:
    """Expose the configured price provider to callers outside the trade path."""

    def __init__(self, price_provider: PriceProviderPort):
        if price_provider is None:
            raise ValueError("price_provider must not be None")
        self._price_provider = price_provider

    def services_get_price(self, symbol: Symbol) -> StockPrice:
        return self._price_provider.adapter_fetch_price(symbol)

    def services_source_name(self) -> str:
        return self._price_provider.adapter_source_name()


__all__ = ["PriceLookupService"]
