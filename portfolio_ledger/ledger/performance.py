"""Holdings performance aggregation over the ledger and live prices."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Sequence

from portfolio_ledger.domain import (
    Account,
    HoldingNotFoundError,
    LedgerEntry,
    LedgerEntryKind,
    Money,
    ShareQuantity,
    StockPrice,
    Symbol,
)

from .interfaces import HoldingPerformance


@dataclass
class _SymbolAccumulator:
    """Mutable per-symbol running totals used during the ledger fold."""

    total_bought: int = 0
    total_cost: Decimal = field(default_factory=Decimal)
    realized_gain: Money = field(default_factory=Money.zero)


def ledger_compute_holdings_performance(
    account: Account,
    entries: Sequence[LedgerEntry],
    prices: Mapping[Symbol, StockPrice],
) -> tuple[HoldingPerformance, ...]:
    """Compute per-instrument performance rows for one account.

    Remaining shares and unrealized gain come from the account's live lots,
    bought totals and realized gain come from the ledger.

    Args:
        account: Account whose holdings provide live lot state.
        entries: Ledger entries of the account in chronological order.
        prices: Live quotes keyed by symbol; missing symbols read as zero.

    Returns:
        tuple[HoldingPerformance, ...]: One row per symbol seen in the ledger.

    Raises:
        ValueError: Raised when an entry belongs to another account.
        HoldingNotFoundError: Raised when the ledger references a symbol the account never held.
    """

    if account is None:
        raise ValueError("account must not be None")

    accumulators: dict[Symbol, _SymbolAccumulator] = {}
    for entry in entries:
        if entry.account_id != account.account_id:
            raise ValueError(f"ledger entry {entry.entry_id} belongs to account {entry.account_id}")
        if entry.symbol is None:
            continue

        accumulator = accumulators.setdefault(entry.symbol, _SymbolAccumulator())
        if entry.kind is LedgerEntryKind.PURCHASE:
            accumulator.total_bought += entry.quantity.value
            accumulator.total_cost += entry.unit_price.value * entry.quantity.value
        elif entry.kind is LedgerEntryKind.SALE:
            accumulator.realized_gain = accumulator.realized_gain + entry.profit

    performance_rows: list[HoldingPerformance] = []
    for symbol, accumulator in accumulators.items():
        if not account.has_holding(symbol):
            raise HoldingNotFoundError(
                f"ledger references symbol {symbol} without a holding in account {account.account_id}"
            )
        holding = account.holding(symbol)
        stock_price = prices.get(symbol)

        if accumulator.total_bought > 0:
            average_purchase_price = Money(accumulator.total_cost / accumulator.total_bought)
        else:
            average_purchase_price = Money.zero()

        if stock_price is None:
            current_price = Money.zero()
            unrealized_gain = Money.zero()
        else:
            current_price = stock_price.price.to_money()
            unrealized_gain = holding.unrealized_gain(stock_price.price)

        performance_rows.append(
            HoldingPerformance(
                symbol=symbol,
                quantity=ShareQuantity(accumulator.total_bought),
                remaining=holding.total_shares(),
                average_purchase_price=average_purchase_price,
                current_price=current_price,
                unrealized_gain=unrealized_gain,
                realized_gain=accumulator.realized_gain,
            )
        )

    return tuple(performance_rows)


__all__ = ["ledger_compute_holdings_performance"]
