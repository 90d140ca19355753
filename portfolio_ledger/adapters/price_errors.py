"""Project-native typed exceptions for price provider failures."""

from __future__ import annotations


class PriceProviderError(ConnectionError):
    """Base exception for live price lookup failures.

    Attributes:
        error_code: Stable machine-readable error code.
        source_name: Provider that raised the failure.
    """

    error_code = "PRICE_PROVIDER_ERROR"

    def __init__(self, message: str, source_name: str | None = None):
        super().__init__(message)
        self.source_name = source_name


class PriceProviderTimeoutError(PriceProviderError, TimeoutError):
    """Transport timeout while waiting for a provider response."""

    error_code = "PRICE_PROVIDER_TIMEOUT"


class PriceNotAvailableError(PriceProviderError):
    """Provider answered but has no usable quote for the requested symbol."""

    error_code = "PRICE_NOT_AVAILABLE"


__all__ = ["PriceNotAvailableError", "PriceProviderError", "PriceProviderTimeoutError"]
