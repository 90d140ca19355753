"""FastAPI application factory for the portfolio ledger service."""

from fastapi import FastAPI

from portfolio_ledger.config import AppSettings
from portfolio_ledger.db import DatabaseHealthPort
from portfolio_ledger.services import (
    PortfolioManagementService,
    PriceLookupService,
    ReportingService,
    StockOperationsService,
    TransactionService,
)

from .errors import api_register_exception_handlers
from .routers import api_create_health_router, api_create_portfolio_router, api_create_stock_router


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    portfolio_service: PortfolioManagementService,
    stock_operations_service: StockOperationsService,
    reporting_service: ReportingService,
    transaction_service: TransactionService,
    price_lookup_service: PriceLookupService,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Storage health service used by health endpoints.
        portfolio_service: Account lifecycle and cash movement service.
        stock_operations_service: Buy and sell service.
        reporting_service: Holdings performance service.
        transaction_service: Ledger history service.
        price_lookup_service: Live quote lookup service.

    Returns:
        FastAPI: Framework application instance with all routers attached.

    Raises:
        ValueError: Raised when a router dependency is invalid.
    """
    application = FastAPI(title="Portfolio Ledger")
    api_register_exception_handlers(application)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal foundation response for bootstrap verification.

        Returns:
            dict[str, str]: Minimal response for API framework verification.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "portfolio-ledger",
            "status": "foundation-ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(
        api_create_portfolio_router(
            settings=settings,
            portfolio_service=portfolio_service,
            stock_operations_service=stock_operations_service,
            reporting_service=reporting_service,
            transaction_service=transaction_service,
        )
    )
    application.include_router(api_create_stock_router(price_lookup_service=price_lookup_service))

    return application
