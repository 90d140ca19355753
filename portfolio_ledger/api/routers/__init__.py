"""API router package for endpoint composition."""

from .health import api_create_health_router
from .portfolios import api_create_portfolio_router
from .stocks import api_create_stock_router

__all__ = ["api_create_health_router", "api_create_portfolio_router", "api_create_stock_router"]
