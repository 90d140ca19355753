"""Finnhub REST quote adapter."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Final

from portfolio_ledger.domain import InvalidAmountError, Price, StockPrice, Symbol

from .base import BasePriceProvider, adapter_http_get_json
from .price_errors import PriceNotAvailableError, PriceProviderError

logger = logging.getLogger(__name__)


class FinnhubPriceProvider(BasePriceProvider):
    """Adapter implementation for the Finnhub `/quote` endpoint.

    The current price is read from field `c`. Finnhub answers unknown symbols
    with a zero price instead of an error status.
    """

    _SOURCE_NAME: Final[str] = "finnhub"
    _CURRENT_PRICE_FIELD: Final[str] = "c"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://finnhub.io/api/v1",
        request_timeout_seconds: float = 10.0,
    ):
        """Initialize Finnhub adapter.

        Args:
            api_key: Finnhub API token.
            base_url: Base REST URL.
            request_timeout_seconds: HTTP request timeout in seconds.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_api_key = api_key.strip()
        normalized_base_url = base_url.strip()
        if not normalized_api_key:
            raise ValueError("api_key must not be blank")
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._api_key = normalized_api_key
        self._base_url = normalized_base_url.rstrip("/")
        self._request_timeout_seconds = request_timeout_seconds

    def adapter_source_name(self) -> str:
        return self._SOURCE_NAME

    def adapter_fetch_price(self, symbol: Symbol) -> StockPrice:
        """Fetch one quote from Finnhub.

        Args:
            symbol: Instrument symbol.

        Returns:
            StockPrice: Current quote.

        Raises:
            PriceNotAvailableError: Raised when Finnhub reports no price for symbol.
            PriceProviderError: Raised for transport and payload failures.
        """

        logger.debug("fetching finnhub quote for %s", symbol)
        payload = adapter_http_get_json(
            url=f"{self._base_url}/quote",
            query_parameters={"symbol": symbol.value, "token": self._api_key},
            timeout_seconds=self._request_timeout_seconds,
            source_name=self._SOURCE_NAME,
        )
        if not isinstance(payload, dict) or self._CURRENT_PRICE_FIELD not in payload:
            raise PriceProviderError(
                f"finnhub quote for {symbol} is missing field '{self._CURRENT_PRICE_FIELD}'",
                source_name=self._SOURCE_NAME,
            )

        raw_price = payload[self._CURRENT_PRICE_FIELD]
        try:
            price_value = Decimal(str(raw_price))
        except InvalidOperation as error:
            raise PriceProviderError(
                f"finnhub returned a non-numeric price for {symbol}: {raw_price!r}",
                source_name=self._SOURCE_NAME,
            ) from error

        try:
            price = Price(price_value)
        except InvalidAmountError as error:
            raise PriceNotAvailableError(
                f"finnhub has no price for {symbol}",
                source_name=self._SOURCE_NAME,
            ) from error
        return StockPrice.now(symbol=symbol, price=price)


__all__ = ["FinnhubPriceProvider"]
