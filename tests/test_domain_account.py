"""Tests for account cash movements, trades and failure atomicity."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from portfolio_ledger.domain import (
    Account,
    ConflictQuantityError,
    DuplicateEntityError,
    HoldingNotFoundError,
    HoldingSnapshot,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidQuantityError,
    LotSnapshot,
    Money,
    Price,
    ShareQuantity,
    Symbol,
)


def _funded_account(amount: str = "10000.00") -> Account:
    """Build a new account with one deposit.

    Args:
        amount: Deposit amount.

    Returns:
        Account: Funded account.

    Raises:
        InvalidAmountError: Raised when amount is not positive.
    """

    account = Account.create("Alice")
    account.deposit(Money.of(amount))
    return account


def test_domain_account_starts_empty() -> None:
    """Open accounts with zero balance and no holdings.

    Returns:
        None: Assertions validate initial state.

    Raises:
        AssertionError: Raised when initial state is wrong.
    """

    account = Account.create("  Alice  ")

    assert account.owner_name == "Alice"
    assert account.balance == Money.zero()
    assert account.holdings() == ()
    assert account.version == 0
    assert account.account_id


def test_domain_account_deposit_and_withdraw() -> None:
    """Move cash in and out while keeping the balance non-negative.

    Returns:
        None: Assertions validate balances and errors.

    Raises:
        AssertionError: Raised when cash rules are violated.
    """

    account = _funded_account("100.00")
    account.withdraw(Money.of("40.25"))
    assert account.balance == Money.of("59.75")

    with pytest.raises(InvalidAmountError):
        account.deposit(Money.zero())
    with pytest.raises(InvalidAmountError):
        account.withdraw(Money.of("-1.00"))
    with pytest.raises(InsufficientFundsError):
        account.withdraw(Money.of("59.76"))

    assert account.balance == Money.of("59.75")
    account.withdraw(Money.of("59.75"))
    assert account.balance.is_zero()


def test_domain_account_buy_deducts_cost_and_opens_lot() -> None:
    """Deduct the total cost and append a lot on the symbol's holding.

    Returns:
        None: Assertions validate buy outcome.

    Raises:
        AssertionError: Raised when buy state is wrong.
    """

    account = _funded_account("2000.00")

    total_cost = account.buy(Symbol("AAPL"), ShareQuantity(10), Price.of("100"))
    account.buy(Symbol("AAPL"), ShareQuantity(5), Price.of("120"))

    assert total_cost == Money.of("1000.00")
    assert account.balance == Money.of("400.00")
    holding = account.holding(Symbol("AAPL"))
    assert holding.total_shares() == ShareQuantity(15)
    assert len(holding.lots) == 2


def test_domain_account_buy_with_insufficient_funds_changes_nothing() -> None:
    """Leave balance and holdings untouched when the purchase is unaffordable.

    Returns:
        None: Assertions validate atomic failure.

    Raises:
        AssertionError: Raised when state changes on failure.
    """

    account = _funded_account("999.99")

    with pytest.raises(InsufficientFundsError):
        account.buy(Symbol("AAPL"), ShareQuantity(10), Price.of("100"))

    assert account.balance == Money.of("999.99")
    assert not account.has_holding(Symbol("AAPL"))


def test_domain_account_rejects_zero_quantity_trades() -> None:
    """Reject buys and sells of zero shares.

    Returns:
        None: Assertions validate quantity checks.

    Raises:
        AssertionError: Raised when zero quantity is accepted.
    """

    account = _funded_account()

    with pytest.raises(InvalidQuantityError):
        account.buy(Symbol("AAPL"), ShareQuantity.zero(), Price.of("100"))
    with pytest.raises(InvalidQuantityError):
        account.sell(Symbol("AAPL"), ShareQuantity.zero(), Price.of("100"))


def test_domain_account_sell_credits_proceeds() -> None:
    """Credit sale proceeds and report FIFO profit.

    Returns:
        None: Assertions validate sell outcome.

    Raises:
        AssertionError: Raised when sell state is wrong.
    """

    account = _funded_account("5000.00")
    account.buy(Symbol("MSFT"), ShareQuantity(10), Price.of("100"))
    account.buy(Symbol("MSFT"), ShareQuantity(5), Price.of("120"))

    sell_result = account.sell(Symbol("MSFT"), ShareQuantity(12), Price.of("110"))

    assert sell_result.proceeds == Money.of("1320.00")
    assert sell_result.cost_basis == Money.of("1240.00")
    assert sell_result.profit == Money.of("80.00")
    assert account.balance == Money.of("4720.00")
    assert account.holding(Symbol("MSFT")).total_shares() == ShareQuantity(3)


def test_domain_account_sell_failures_change_nothing() -> None:
    """Leave state untouched for unknown holdings and oversells.

    Returns:
        None: Assertions validate atomic failure.

    Raises:
        AssertionError: Raised when state changes on failure.
    """

    account = _funded_account("1000.00")
    account.buy(Symbol("MSFT"), ShareQuantity(5), Price.of("100"))
    holding_before = account.holding(Symbol("MSFT"))

    with pytest.raises(HoldingNotFoundError):
        account.sell(Symbol("AAPL"), ShareQuantity(1), Price.of("100"))
    with pytest.raises(ConflictQuantityError):
        account.sell(Symbol("MSFT"), ShareQuantity(6), Price.of("100"))

    assert account.balance == Money.of("500.00")
    assert account.holding(Symbol("MSFT")) == holding_before


def test_domain_account_keeps_fully_sold_holding() -> None:
    """Keep an emptied holding so later lookups and reports still find it.

    Returns:
        None: Assertions validate empty holding retention.

    Raises:
        AssertionError: Raised when the holding disappears.
    """

    account = _funded_account("1000.00")
    account.buy(Symbol("NVDA"), ShareQuantity(2), Price.of("100"))
    account.sell(Symbol("NVDA"), ShareQuantity(2), Price.of("100"))

    assert account.has_holding(Symbol("NVDA"))
    assert account.holding(Symbol("NVDA")).is_empty()
    with pytest.raises(ConflictQuantityError):
        account.sell(Symbol("NVDA"), ShareQuantity(1), Price.of("100"))


def test_domain_account_rejects_blank_owner_and_negative_balance() -> None:
    """Validate constructor invariants.

    Returns:
        None: Assertions validate constructor errors.

    Raises:
        AssertionError: Raised when invalid accounts are created.
    """

    with pytest.raises(ValueError):
        Account.create("   ")
    with pytest.raises(InvalidAmountError):
        Account(
            account_id="account-1",
            owner_name="Bob",
            balance=Money.of("-0.01"),
            created_at_utc=Account.create("Bob").created_at_utc,
        )


def _stored_holding(symbol: str = "AAPL") -> HoldingSnapshot:
    """Build stored holding data with one open lot.

    Args:
        symbol: Instrument symbol.

    Returns:
        HoldingSnapshot: Holding data as loaded from storage.
    """

    return HoldingSnapshot(
        holding_id=f"holding-{symbol.lower()}",
        symbol=Symbol(symbol),
        lots=(
            LotSnapshot(
                lot_id=f"lot-{symbol.lower()}",
                initial_quantity=ShareQuantity(5),
                remaining_quantity=ShareQuantity(5),
                unit_price=Price.of("100"),
                purchased_at_utc=datetime(2026, 1, 2, tzinfo=timezone.utc),
            ),
        ),
    )


def test_domain_account_restore_builds_private_holdings() -> None:
    """Rebuild accounts from stored data without sharing holdings between them.

    Returns:
        None: Assertions validate that a sale on one account leaves the other intact.

    Raises:
        AssertionError: Raised when restored accounts share mutable state.
    """

    stored_holdings = (_stored_holding(),)
    created_at_utc = datetime(2026, 1, 1, tzinfo=timezone.utc)
    first = Account.restore("account-1", "Bob", Money.of("500.00"), created_at_utc, 3, stored_holdings)
    second = Account.restore("account-1", "Bob", Money.of("500.00"), created_at_utc, 3, stored_holdings)

    first.sell(Symbol("AAPL"), ShareQuantity(5), Price.of("100"))

    assert first.version == 3
    assert first.balance == Money.of("1000.00")
    assert first.holding(Symbol("AAPL")).total_shares() == ShareQuantity(0)
    assert second.balance == Money.of("500.00")
    assert second.holding(Symbol("AAPL")).total_shares() == ShareQuantity(5)
    assert stored_holdings[0].total_shares() == ShareQuantity(5)


def test_domain_account_restore_rejects_invalid_stored_state() -> None:
    """Reject stored data that repeats a symbol or carries a negative balance.

    Returns:
        None: Assertions validate reconstruction errors.

    Raises:
        AssertionError: Raised when invalid stored state is accepted.
    """

    created_at_utc = datetime(2026, 1, 1, tzinfo=timezone.utc)
    with pytest.raises(DuplicateEntityError):
        Account.restore(
            "account-1",
            "Bob",
            Money.zero(),
            created_at_utc,
            0,
            (_stored_holding(), _stored_holding()),
        )
    with pytest.raises(InvalidAmountError):
        Account.restore("account-1", "Bob", Money.of("-1.00"), created_at_utc, 0)
