"""Tests for holdings performance aggregation over ledger entries and quotes."""

from __future__ import annotations

from decimal import Decimal

import pytest

from portfolio_ledger.domain import (
    Account,
    HoldingNotFoundError,
    LedgerEntry,
    Money,
    Price,
    ShareQuantity,
    StockPrice,
    Symbol,
)
from portfolio_ledger.ledger import ledger_compute_holdings_performance


def _trade(account: Account, entries: list[LedgerEntry], side: str, symbol: str, quantity: int, price: str) -> None:
    """Apply one trade to the account and record its ledger entry.

    Args:
        account: Account to mutate.
        entries: Ledger list receiving the entry.
        side: `buy` or `sell`.
        symbol: Ticker text.
        quantity: Units traded.
        price: Unit price text.

    Returns:
        None: Mutates account and entries.

    Raises:
        DomainError: Raised when the trade violates account rules.
    """

    trade_symbol = Symbol(symbol)
    trade_quantity = ShareQuantity(quantity)
    trade_price = Price.of(price)
    if side == "buy":
        account.buy(trade_symbol, trade_quantity, trade_price)
        entries.append(LedgerEntry.purchase(account.account_id, trade_symbol, trade_quantity, trade_price))
    else:
        sell_result = account.sell(trade_symbol, trade_quantity, trade_price)
        entries.append(LedgerEntry.sale(account.account_id, trade_symbol, trade_quantity, trade_price, sell_result))


def _funded_account() -> tuple[Account, list[LedgerEntry]]:
    account = Account.create("Carol")
    account.deposit(Money.of("100000"))
    return account, [LedgerEntry.deposit(account.account_id, Money.of("100000"))]


def test_ledger_performance_weighted_average_and_unrealized_gain() -> None:
    """Average purchase price over all buys, gain over remaining lots.

    Returns:
        None: Assertions validate aggregated row.

    Raises:
        AssertionError: Raised when aggregation deviates from expected totals.
    """

    account, entries = _funded_account()
    _trade(account, entries, "buy", "AAPL", 10, "100")
    _trade(account, entries, "buy", "AAPL", 5, "120")
    prices = {Symbol("AAPL"): StockPrice.now(Symbol("AAPL"), Price.of("130"))}

    (row,) = ledger_compute_holdings_performance(account, entries, prices)

    assert row.symbol == Symbol("AAPL")
    assert row.quantity == ShareQuantity(15)
    assert row.remaining == ShareQuantity(15)
    assert row.average_purchase_price.amount == Decimal("106.67")
    assert row.current_price == Money.of("130.00")
    assert row.unrealized_gain == Money.of("350.00")
    assert row.realized_gain == Money.zero()


def test_ledger_performance_after_partial_sale() -> None:
    """Use live lots for remaining and ledger sales for realized gain.

    Returns:
        None: Assertions validate post-sale aggregation.

    Raises:
        AssertionError: Raised when remaining or gains are wrong.
    """

    account, entries = _funded_account()
    _trade(account, entries, "buy", "AAPL", 10, "100")
    _trade(account, entries, "buy", "AAPL", 15, "120")
    _trade(account, entries, "buy", "AAPL", 5, "140")
    _trade(account, entries, "sell", "AAPL", 22, "150")
    prices = {Symbol("AAPL"): StockPrice.now(Symbol("AAPL"), Price.of("150"))}

    (row,) = ledger_compute_holdings_performance(account, entries, prices)

    assert row.quantity == ShareQuantity(30)
    assert row.remaining == ShareQuantity(8)
    assert row.average_purchase_price == Money.of("116.67")
    assert row.realized_gain == Money.of("860.00")
    assert row.unrealized_gain == Money.of("140.00")


def test_ledger_performance_missing_quote_reads_as_zero() -> None:
    """Report zero current price and zero unrealized gain without a quote.

    Returns:
        None: Assertions validate missing-quote defaults.

    Raises:
        AssertionError: Raised when missing quotes are not zeroed.
    """

    account, entries = _funded_account()
    _trade(account, entries, "buy", "MSFT", 4, "250")

    (row,) = ledger_compute_holdings_performance(account, entries, {})

    assert str(row.current_price) == "0.00"
    assert str(row.unrealized_gain) == "0.00"
    assert row.average_purchase_price == Money.of("250.00")


def test_ledger_performance_emits_one_row_per_traded_symbol() -> None:
    """Emit rows only for symbols with trade entries, including fully sold ones.

    Returns:
        None: Assertions validate row set.

    Raises:
        AssertionError: Raised when rows are missing or extra.
    """

    account, entries = _funded_account()
    _trade(account, entries, "buy", "AAPL", 1, "100")
    _trade(account, entries, "buy", "GS", 2, "400")
    _trade(account, entries, "sell", "GS", 2, "390")

    rows = {row.symbol.value: row for row in ledger_compute_holdings_performance(account, entries, {})}

    assert set(rows) == {"AAPL", "GS"}
    assert rows["GS"].remaining.is_zero()
    assert rows["GS"].realized_gain == Money.of("-20.00")


def test_ledger_performance_symbol_without_holding_raises() -> None:
    """Fail when the ledger references a symbol the account never held.

    Returns:
        None: Assertions validate divergence detection.

    Raises:
        AssertionError: Raised when divergence is ignored.
    """

    account, entries = _funded_account()
    entries.append(LedgerEntry.purchase(account.account_id, Symbol("TSLA"), ShareQuantity(1), Price.of("300")))

    with pytest.raises(HoldingNotFoundError):
        ledger_compute_holdings_performance(account, entries, {})


def test_ledger_performance_rejects_foreign_entries() -> None:
    """Fail when an entry belongs to another account.

    Returns:
        None: Assertions validate account scoping.

    Raises:
        AssertionError: Raised when foreign entries are folded in.
    """

    account, entries = _funded_account()
    entries.append(LedgerEntry.deposit("another-account", Money.of("1")))

    with pytest.raises(ValueError):
        ledger_compute_holdings_performance(account, entries, {})
