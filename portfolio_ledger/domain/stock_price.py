"""Live quote value returned by price providers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .identity import domain_require_utc_timestamp, domain_utc_now
from .values import Price, Symbol


@dataclass(frozen=True)
class StockPrice:
    """Quote for one instrument at one point in time.

    Attributes:
        symbol: Quoted instrument.
        price: Quoted unit price.
        fetched_at_utc: Quote timestamp in UTC.
        currency: Quote currency code.
    """

    symbol: Symbol
    price: Price
    fetched_at_utc: datetime
    currency: str = "USD"

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "fetched_at_utc",
            domain_require_utc_timestamp(self.fetched_at_utc, "fetched_at_utc"),
        )

    @classmethod
    def now(cls, symbol: Symbol, price: Price, currency: str = "USD") -> StockPrice:
        return cls(symbol=symbol, price=price, fetched_at_utc=domain_utc_now(), currency=currency)


__all__ = ["StockPrice"]
