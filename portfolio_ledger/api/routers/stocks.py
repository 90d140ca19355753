"""Stock quote router composition."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from portfolio_ledger.domain import Symbol
from portfolio_ledger.services import PriceLookupService

from ..serialization import api_serialize_stock_price


def api_create_stock_router(price_lookup_service: PriceLookupService) -> APIRouter:
    """Create router exposing live quotes.

    Args:
        price_lookup_service: Live quote lookup service.

    Returns:
        APIRouter: Router exposing `/api/stocks/{symbol}`.

    Raises:
        ValueError: Raised when price_lookup_service is invalid.
    """

    if price_lookup_service is None:
        raise ValueError("price_lookup_service must not be None")

    router = APIRouter(prefix="/api/stocks", tags=["stocks"])

    @router.get("/{symbol}")
    def api_stock_price(symbol: str) -> JSONResponse:
        """Return the current quote of one instrument.

        Args:
            symbol: Instrument ticker.

        Returns:
            JSONResponse: Quote payload.

        Raises:
            InvalidSymbolError: Raised when the ticker is malformed.
            PriceProviderError: Raised when the provider cannot quote the ticker.
        """

        stock_price = price_lookup_service.services_get_price(Symbol(symbol))
        return JSONResponse(
            content=api_serialize_stock_price(stock_price, source_name=price_lookup_service.services_source_name()),
            status_code=status.HTTP_200_OK,
        )

    return router
