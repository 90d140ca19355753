"""Shared behavior for price provider adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

import httpx

from portfolio_ledger.domain import StockPrice, Symbol

from .interfaces import PriceProviderPort
from .price_errors import PriceNotAvailableError, PriceProviderError, PriceProviderTimeoutError

logger = logging.getLogger(__name__)


class BasePriceProvider(PriceProviderPort, ABC):
    """Price provider base that derives batch lookups from single lookups."""

    @abstractmethod
    def adapter_source_name(self) -> str:
        """Return adapter source identifier for diagnostics."""

    @abstractmethod
    def adapter_fetch_price(self, symbol: Symbol) -> StockPrice:
        """Fetch the current quote of one instrument."""

    def adapter_fetch_prices(self, symbols: Iterable[Symbol]) -> dict[Symbol, StockPrice]:
        """Fetch quotes one symbol at a time, skipping symbols without a quote.

        Args:
            symbols: Instrument symbols, duplicates are fetched once.

        Returns:
            dict[Symbol, StockPrice]: Quotes keyed by symbol.

        Raises:
            PriceProviderError: Raised when an upstream call fails for a reason
                other than a missing quote.
        """

        prices: dict[Symbol, StockPrice] = {}
        for symbol in dict.fromkeys(symbols):
            try:
                prices[symbol] = self.adapter_fetch_price(symbol)
            except PriceNotAvailableError as error:
                logger.warning("no quote from %s for %s: %s", self.adapter_source_name(), symbol, error)
        return prices


def adapter_http_get_json(
    url: str,
    query_parameters: dict[str, str],
    timeout_seconds: float,
    source_name: str,
) -> Any:
    """Execute one HTTP GET and decode the JSON response body.

    Args:
        url: Endpoint URL.
        query_parameters: Query string parameters.
        timeout_seconds: Request timeout in seconds.
        source_name: Provider label used in error messages.

    Returns:
        Any: Decoded JSON document.

    Raises:
        PriceProviderTimeoutError: Raised when the request times out.
        PriceProviderError: Raised for transport failures, non-success HTTP status
            and undecodable bodies.
    """

    try:
        with httpx.Client(timeout=timeout_seconds) as client:
            response = client.get(url, params=query_parameters)
    except httpx.TimeoutException as error:
        raise PriceProviderTimeoutError(f"{source_name} request timed out", source_name=source_name) from error
    except httpx.HTTPError as error:
        raise PriceProviderError(f"{source_name} request failed", source_name=source_name) from error

    if response.status_code >= 400:
        raise PriceProviderError(
            f"{source_name} upstream returned HTTP {response.status_code}",
            source_name=source_name,
        )

    try:
        return response.json()
    except ValueError as error:
        raise PriceProviderError(f"{source_name} returned a non-JSON body", source_name=source_name) from error


__all__ = ["BasePriceProvider", "adapter_http_get_json"]
