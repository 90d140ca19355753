"""Request body models for mutating endpoints."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CreatePortfolioRequest(BaseModel):
    """Body of `POST /api/portfolios`."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_name: str = Field(min_length=1)


class CashMovementRequest(BaseModel):
    """Body of deposit and withdrawal requests.

    Sign and scale rules are enforced by the domain, not here.
    """

    amount: Decimal


class TradeRequest(BaseModel):
    """Body of purchase and sale requests."""

    model_config = ConfigDict(str_strip_whitespace=True)

    symbol: str
    quantity: int


__all__ = ["CashMovementRequest", "CreatePortfolioRequest", "TradeRequest"]
