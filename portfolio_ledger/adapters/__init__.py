"""Adapter layer package for live price provider boundaries."""

from .alpha_vantage import AlphaVantagePriceProvider
from .base import BasePriceProvider, adapter_http_get_json
from .finnhub import FinnhubPriceProvider
from .interfaces import PriceProviderPort
from .mock_prices import DEFAULT_BASE_PRICES, MockPriceProvider
from .price_errors import PriceNotAvailableError, PriceProviderError, PriceProviderTimeoutError

__all__ = [
	"AlphaVantagePriceProvider",
	"BasePriceProvider",
	"DEFAULT_BASE_PRICES",
	"FinnhubPriceProvider",
	"MockPriceProvider",
	"PriceNotAvailableError",
	"PriceProviderError",
	"PriceProviderPort",
	"PriceProviderTimeoutError",
	"adapter_http_get_json",
]
