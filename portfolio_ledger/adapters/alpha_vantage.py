"""Alpha Vantage GLOBAL_QUOTE adapter with request throttling and quote caching."""

from __future__ import annotations

import logging
import threading
import time
from decimal import Decimal, InvalidOperation
from typing import Callable, Final

from portfolio_ledger.domain import InvalidAmountError, Price, StockPrice, Symbol

from .base import BasePriceProvider, adapter_http_get_json
from .price_errors import PriceNotAvailableError, PriceProviderError

logger = logging.getLogger(__name__)


class AlphaVantagePriceProvider(BasePriceProvider):
    """Adapter implementation for the Alpha Vantage `GLOBAL_QUOTE` function.

    Consecutive upstream calls are spaced by at least `throttle_seconds`.
    Quotes are served from cache while younger than `cache_ttl_seconds`.
    """

    _SOURCE_NAME: Final[str] = "alpha_vantage"
    _QUOTE_FIELD: Final[str] = "Global Quote"
    _PRICE_FIELD: Final[str] = "05. price"
    _RATE_LIMIT_FIELDS: Final[tuple[str, ...]] = ("Note", "Information", "Error Message")

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.alphavantage.co/query",
        request_timeout_seconds: float = 10.0,
        throttle_seconds: float = 0.5,
        cache_ttl_seconds: float = 300.0,
        monotonic_provider: Callable[[], float] | None = None,
        sleep_provider: Callable[[float], None] | None = None,
    ):
        """Initialize Alpha Vantage adapter.

        Args:
            api_key: Alpha Vantage API key.
            base_url: Query endpoint URL.
            request_timeout_seconds: HTTP request timeout in seconds.
            throttle_seconds: Minimum spacing between upstream requests.
            cache_ttl_seconds: Quote cache lifetime, zero disables caching.
            monotonic_provider: Optional monotonic clock used for throttle and cache.
            sleep_provider: Optional sleep function used for throttling.

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
        if throttle_seconds < 0:
            raise ValueError("throttle_seconds must be >= 0")
        if cache_ttl_seconds < 0:
            raise ValueError("cache_ttl_seconds must be >= 0")

        self._api_key = normalized_api_key
        self._base_url = normalized_base_url
        self._request_timeout_seconds = request_timeout_seconds
        self._throttle_seconds = throttle_seconds
        self._cache_ttl_seconds = cache_ttl_seconds
        self._monotonic = monotonic_provider or time.monotonic
        self._sleep = sleep_provider or time.sleep
        self._cache: dict[Symbol, tuple[float, StockPrice]] = {}
        self._last_request_at: float | None = None
        self._lock = threading.Lock()

    def adapter_source_name(self) -> str:
        return self._SOURCE_NAME

    def adapter_fetch_price(self, symbol: Symbol) -> StockPrice:
        """Return a cached quote or fetch a fresh one from Alpha Vantage.

        Args:
            symbol: Instrument symbol.

        Returns:
            StockPrice: Current quote.

        Raises:
            PriceNotAvailableError: Raised when Alpha Vantage has no quote for symbol.
            PriceProviderError: Raised for transport failures, rate limiting and bad payloads.
        """

        with self._lock:
            self._adapter_evict_expired_quotes()
            cached_entry = self._cache.get(symbol)
            if cached_entry is not None:
                logger.debug("alpha vantage cache hit for %s", symbol)
                return cached_entry[1]

            self._adapter_wait_for_throttle()
            try:
                payload = adapter_http_get_json(
                    url=self._base_url,
                    query_parameters={"function": "GLOBAL_QUOTE", "symbol": symbol.value, "apikey": self._api_key},
                    timeout_seconds=self._request_timeout_seconds,
                    source_name=self._SOURCE_NAME,
                )
            finally:
                self._last_request_at = self._monotonic()

            stock_price = self._adapter_parse_quote(symbol=symbol, payload=payload)
            if self._cache_ttl_seconds > 0:
                self._cache[symbol] = (self._monotonic(), stock_price)
            return stock_price

    def _adapter_evict_expired_quotes(self) -> None:
        """Drop cached quotes older than `cache_ttl_seconds`."""

        now = self._monotonic()
        expired_symbols = [
            cached_symbol
            for cached_symbol, (cached_at, _) in self._cache.items()
            if now - cached_at >= self._cache_ttl_seconds
        ]
        for cached_symbol in expired_symbols:
            del self._cache[cached_symbol]

    def _adapter_wait_for_throttle(self) -> None:
        """Sleep until `throttle_seconds` passed since the previous upstream request."""

        if self._last_request_at is None or self._throttle_seconds == 0:
            return
        wait_seconds = self._throttle_seconds - (self._monotonic() - self._last_request_at)
        if wait_seconds > 0:
            self._sleep(wait_seconds)

    def _adapter_parse_quote(self, symbol: Symbol, payload: object) -> StockPrice:
        """Extract the quote price from a GLOBAL_QUOTE response document.

        Args:
            symbol: Requested instrument symbol.
            payload: Decoded JSON document.

        Returns:
            StockPrice: Parsed quote.

        Raises:
            PriceNotAvailableError: Raised when the quote object is empty.
            PriceProviderError: Raised for rate limit notices and malformed payloads.
        """

        if not isinstance(payload, dict):
            raise PriceProviderError("alpha vantage returned an unexpected payload", source_name=self._SOURCE_NAME)
        for notice_field in self._RATE_LIMIT_FIELDS:
            if notice_field in payload:
                raise PriceProviderError(
                    f"alpha vantage rejected the request: {payload[notice_field]}",
                    source_name=self._SOURCE_NAME,
                )

        quote = payload.get(self._QUOTE_FIELD)
        if not isinstance(quote, dict) or not quote:
            raise PriceNotAvailableError(f"alpha vantage has no quote for {symbol}", source_name=self._SOURCE_NAME)
        if self._PRICE_FIELD not in quote:
            raise PriceProviderError(
                f"alpha vantage quote for {symbol} is missing field '{self._PRICE_FIELD}'",
                source_name=self._SOURCE_NAME,
            )

        try:
            price = Price(Decimal(str(quote[self._PRICE_FIELD])))
        except (InvalidOperation, InvalidAmountError) as error:
            raise PriceProviderError(
                f"alpha vantage returned an invalid price for {symbol}: {quote[self._PRICE_FIELD]!r}",
                source_name=self._SOURCE_NAME,
            ) from error
        return StockPrice.now(symbol=symbol, price=price)


__all__ = ["AlphaVantagePriceProvider"]
