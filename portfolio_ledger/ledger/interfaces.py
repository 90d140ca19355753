"""Typed interfaces for ledger-layer computations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from portfolio_ledger.domain import Account, LedgerEntry, Money, ShareQuantity, StockPrice, Symbol


@dataclass(frozen=True)
class HoldingPerformance:
    """Per-instrument performance row derived from the ledger and live prices.

    Attributes:
        symbol: Instrument symbol.
        quantity: Total units ever bought.
        remaining: Units currently held by the account.
        average_purchase_price: Weighted average purchase price over all buys.
        current_price: Live price, zero when no quote was available.
        unrealized_gain: Paper gain on open lots, zero when no quote was available.
        realized_gain: Sum of profits locked in by sales.
    """

    symbol: Symbol
    quantity: ShareQuantity
    remaining: ShareQuantity
    average_purchase_price: Money
    current_price: Money
    unrealized_gain: Money
    realized_gain: Money


class PerformanceCalculatorPort(Protocol):
    """Port definition for holdings performance aggregation."""

    def __call__(
        self,
        account: Account,
        entries: Sequence[LedgerEntry],
        prices: Mapping[Symbol, StockPrice],
    ) -> tuple[HoldingPerformance, ...]:
        """Fold ledger entries and live prices into performance rows.

        Args:
            account: Account snapshot providing live lots.
            entries: Ledger entries of the account.
            prices: Live quotes keyed by symbol.

        Returns:
            tuple[HoldingPerformance, ...]: Immutable performance rows.

        Raises:
            HoldingNotFoundError: Raised when the ledger and account diverged.
        """


__all__ = ["HoldingPerformance", "PerformanceCalculatorPort"]
