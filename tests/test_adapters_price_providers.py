"""Regression tests for price provider adapters and their error mapping."""

from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

import portfolio_ledger.adapters.base as base_module
from portfolio_ledger.adapters import (
    AlphaVantagePriceProvider,
    BasePriceProvider,
    FinnhubPriceProvider,
    MockPriceProvider,
    PriceNotAvailableError,
    PriceProviderError,
    PriceProviderTimeoutError,
)
from portfolio_ledger.domain import Price, StockPrice, Symbol


def _json_response(url: str, payload: object, status_code: int = 200) -> httpx.Response:
    """Build an httpx response carrying a JSON body.

    Args:
        url: Request URL attached to the response.
        payload: JSON-serializable body.
        status_code: HTTP status code.

    Returns:
        httpx.Response: Response object bound to a GET request.

    Raises:
        TypeError: Raised when payload is not JSON-serializable.
    """

    return httpx.Response(status_code, json=payload, request=httpx.Request("GET", url))


class _FakeClock:
    """Manually advanced monotonic clock with a recording sleep."""

    def __init__(self):
        self.now = 100.0
        self.sleep_calls: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleep_calls.append(seconds)
        self.now += seconds


def test_adapters_mock_provider_quotes_within_variation() -> None:
    """Quote the base price moved by the drawn variation.

    Returns:
        None: Assertions validate mock quote math.

    Raises:
        AssertionError: Raised when quotes are outside the expected values.
    """

    provider = MockPriceProvider(random_unit_interval_provider=lambda: 0.5)
    low_provider = MockPriceProvider(random_unit_interval_provider=lambda: 0.0)
    high_provider = MockPriceProvider(random_unit_interval_provider=lambda: 1.0)

    assert provider.adapter_fetch_price(Symbol("AAPL")).price.value == Decimal("201.45")
    assert low_provider.adapter_fetch_price(Symbol("AAPL")).price.value == Decimal("199.44")
    assert high_provider.adapter_fetch_price(Symbol("AAPL")).price.value == Decimal("203.46")
    assert provider.adapter_source_name() == "mock"


def test_adapters_mock_provider_unknown_symbol_and_batch_skip() -> None:
    """Raise for unknown symbols and skip them in batch lookups.

    Returns:
        None: Assertions validate missing-quote handling.

    Raises:
        AssertionError: Raised when unknown symbols are quoted.
    """

    provider = MockPriceProvider(base_prices={"AAPL": "10.00"}, random_unit_interval_provider=lambda: 0.5)

    with pytest.raises(PriceNotAvailableError):
        provider.adapter_fetch_price(Symbol("ZZZZ"))

    prices = provider.adapter_fetch_prices([Symbol("AAPL"), Symbol("ZZZZ"), Symbol("AAPL")])

    assert list(prices) == [Symbol("AAPL")]
    assert prices[Symbol("AAPL")].price.value == Decimal("10.00")


def test_adapters_mock_provider_rejects_out_of_range_random_values() -> None:
    """Fail fast when the random provider leaves the unit interval.

    Returns:
        None: Assertions validate random provider checks.

    Raises:
        AssertionError: Raised when invalid random values are accepted.
    """

    provider = MockPriceProvider(random_unit_interval_provider=lambda: 1.5)

    with pytest.raises(RuntimeError):
        provider.adapter_fetch_price(Symbol("AAPL"))
    with pytest.raises(ValueError):
        MockPriceProvider(variation_ratio=Decimal("1"))


def test_adapters_finnhub_parses_current_price(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read field `c` from the quote endpoint and send the token.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate request and parsing.

    Raises:
        AssertionError: Raised when request or parsing is wrong.
    """

    captured_requests: list[tuple[str, dict[str, str]]] = []

    def _fake_get(_self: object, url: str, params: dict[str, str]) -> httpx.Response:
        captured_requests.append((url, params))
        return _json_response(url, {"c": 187.456, "h": 190.0, "l": 185.0})

    monkeypatch.setattr(base_module.httpx.Client, "get", _fake_get)
    provider = FinnhubPriceProvider(api_key="secret", base_url="https://finnhub.test/api/v1")

    stock_price = provider.adapter_fetch_price(Symbol("AAPL"))

    assert stock_price.price.value == Decimal("187.46")
    assert stock_price.symbol == Symbol("AAPL")
    assert captured_requests == [("https://finnhub.test/api/v1/quote", {"symbol": "AAPL", "token": "secret"})]


@pytest.mark.parametrize(
    ("payload", "expected_error"),
    [
        ({"c": 0}, PriceNotAvailableError),
        ({"h": 1.0}, PriceProviderError),
        ({"c": "n/a"}, PriceProviderError),
    ],
)
def test_adapters_finnhub_payload_errors(
    monkeypatch: pytest.MonkeyPatch,
    payload: dict[str, object],
    expected_error: type[Exception],
) -> None:
    """Map zero, missing and malformed prices to provider errors.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        payload: Upstream JSON body.
        expected_error: Expected exception type.

    Returns:
        None: Assertions validate payload error mapping.

    Raises:
        AssertionError: Raised when the mapping is wrong.
    """

    def _fake_get(_self: object, url: str, params: dict[str, str]) -> httpx.Response:
        _ = params
        return _json_response(url, payload)

    monkeypatch.setattr(base_module.httpx.Client, "get", _fake_get)
    provider = FinnhubPriceProvider(api_key="secret")

    with pytest.raises(expected_error):
        provider.adapter_fetch_price(Symbol("AAPL"))


def test_adapters_http_timeout_and_status_mapping(monkeypatch: pytest.MonkeyPatch) -> None:
    """Map transport timeouts and HTTP error statuses to provider errors.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate transport error mapping.

    Raises:
        AssertionError: Raised when transport errors leak.
    """

    def _raise_timeout(_self: object, url: str, params: dict[str, str]) -> httpx.Response:
        _ = (url, params)
        raise httpx.TimeoutException("timed out")

    monkeypatch.setattr(base_module.httpx.Client, "get", _raise_timeout)
    provider = FinnhubPriceProvider(api_key="secret")

    with pytest.raises(PriceProviderTimeoutError, match="timed out"):
        provider.adapter_fetch_price(Symbol("AAPL"))

    def _server_error(_self: object, url: str, params: dict[str, str]) -> httpx.Response:
        _ = params
        return _json_response(url, {"error": "boom"}, status_code=502)

    monkeypatch.setattr(base_module.httpx.Client, "get", _server_error)

    with pytest.raises(PriceProviderError, match="HTTP 502"):
        provider.adapter_fetch_price(Symbol("AAPL"))


def test_adapters_alpha_vantage_throttles_and_caches(monkeypatch: pytest.MonkeyPatch) -> None:
    """Space upstream calls by the throttle and serve repeats from cache.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate throttle and cache behavior.

    Raises:
        AssertionError: Raised when throttle or cache behavior is wrong.
    """

    clock = _FakeClock()
    captured_symbols: list[str] = []

    def _fake_get(_self: object, url: str, params: dict[str, str]) -> httpx.Response:
        captured_symbols.append(params["symbol"])
        assert params["function"] == "GLOBAL_QUOTE"
        assert params["apikey"] == "key"
        return _json_response(url, {"Global Quote": {"01. symbol": params["symbol"], "05. price": "123.4500"}})

    monkeypatch.setattr(base_module.httpx.Client, "get", _fake_get)
    provider = AlphaVantagePriceProvider(
        api_key="key",
        throttle_seconds=0.5,
        cache_ttl_seconds=60,
        monotonic_provider=clock.monotonic,
        sleep_provider=clock.sleep,
    )

    first_quote = provider.adapter_fetch_price(Symbol("IBM"))
    provider.adapter_fetch_price(Symbol("MSFT"))
    cached_quote = provider.adapter_fetch_price(Symbol("IBM"))
    clock.now += 61
    provider.adapter_fetch_price(Symbol("IBM"))

    assert first_quote.price.value == Decimal("123.45")
    assert cached_quote is first_quote
    assert captured_symbols == ["IBM", "MSFT", "IBM"]
    assert clock.sleep_calls == [0.5]


def test_adapters_alpha_vantage_evicts_expired_quotes(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop cached quotes once they outlive the cache lifetime.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate cache eviction.

    Raises:
        AssertionError: Raised when expired quotes stay cached.
    """

    clock = _FakeClock()

    def _fake_get(_self: object, url: str, params: dict[str, str]) -> httpx.Response:
        return _json_response(url, {"Global Quote": {"01. symbol": params["symbol"], "05. price": "10.00"}})

    monkeypatch.setattr(base_module.httpx.Client, "get", _fake_get)
    provider = AlphaVantagePriceProvider(
        api_key="key",
        throttle_seconds=0,
        cache_ttl_seconds=60,
        monotonic_provider=clock.monotonic,
        sleep_provider=clock.sleep,
    )

    provider.adapter_fetch_price(Symbol("IBM"))
    provider.adapter_fetch_price(Symbol("MSFT"))
    clock.now += 61
    provider.adapter_fetch_price(Symbol("AAPL"))

    assert list(provider._cache) == [Symbol("AAPL")]


def test_adapters_base_provider_requires_single_quote_methods() -> None:
    """Refuse to instantiate a provider that lacks the single-quote methods.

    Returns:
        None: Assertions validate abstract method enforcement.

    Raises:
        AssertionError: Raised when an incomplete provider can be built.
    """

    class _NameOnlyProvider(BasePriceProvider):
        def adapter_source_name(self) -> str:
            return "name_only"

    class _FixedPriceProvider(_NameOnlyProvider):
        def adapter_fetch_price(self, symbol: Symbol) -> StockPrice:
            return StockPrice.now(symbol=symbol, price=Price.of("1.00"))

    with pytest.raises(TypeError):
        _NameOnlyProvider()
    assert set(_FixedPriceProvider().adapter_fetch_prices([Symbol("IBM"), Symbol("IBM")])) == {Symbol("IBM")}


@pytest.mark.parametrize(
    ("payload", "expected_error"),
    [
        ({"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute."}, PriceProviderError),
        ({"Global Quote": {}}, PriceNotAvailableError),
        ({"Global Quote": {"01. symbol": "IBM"}}, PriceProviderError),
        ({"Global Quote": {"05. price": "abc"}}, PriceProviderError),
    ],
)
def test_adapters_alpha_vantage_payload_errors(
    monkeypatch: pytest.MonkeyPatch,
    payload: dict[str, object],
    expected_error: type[Exception],
) -> None:
    """Map rate-limit notices, empty quotes and malformed prices to errors.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        payload: Upstream JSON body.
        expected_error: Expected exception type.

    Returns:
        None: Assertions validate payload error mapping.

    Raises:
        AssertionError: Raised when the mapping is wrong.
    """

    def _fake_get(_self: object, url: str, params: dict[str, str]) -> httpx.Response:
        _ = params
        return _json_response(url, payload)

    monkeypatch.setattr(base_module.httpx.Client, "get", _fake_get)
    provider = AlphaVantagePriceProvider(api_key="key", throttle_seconds=0)

    with pytest.raises(expected_error):
        provider.adapter_fetch_price(Symbol("IBM"))
