"""Tests for the in-memory repositories backing the memory storage mode."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from portfolio_ledger.db import (
    ConcurrentModificationError,
    InMemoryAccountRepository,
    InMemoryDatabaseHealthService,
    InMemoryLedgerEntryRepository,
    db_memory_clone_account,
)
from portfolio_ledger.domain import (
    Account,
    AccountNotFoundError,
    DuplicateEntityError,
    LedgerEntry,
    LedgerEntryKind,
    Money,
    Price,
    ShareQuantity,
    Symbol,
)


def test_db_memory_reads_are_isolated_from_stored_state() -> None:
    """Mutating a loaded account must not change storage until saved.

    Returns:
        None: Assertions validate copy-on-read behavior.

    Raises:
        AssertionError: Raised when stored state leaks to callers.
    """

    repository = InMemoryAccountRepository()
    account = Account.create("Alice")
    repository.db_account_create(account)

    loaded_account = repository.db_account_get_by_id(account.account_id)
    loaded_account.deposit(Money.of("50"))

    assert repository.db_account_get_by_id(account.account_id).balance == Money.zero()

    repository.db_account_save(loaded_account)

    assert repository.db_account_get_by_id(account.account_id).balance == Money.of("50.00")
    assert loaded_account.version == 1


def test_db_memory_save_with_stale_version_raises_conflict() -> None:
    """Reject a save based on an outdated version.

    Returns:
        None: Assertions validate optimistic versioning.

    Raises:
        AssertionError: Raised when a stale save is accepted.
    """

    repository = InMemoryAccountRepository()
    account = Account.create("Alice")
    repository.db_account_create(account)
    first_copy = repository.db_account_get_by_id(account.account_id)
    second_copy = repository.db_account_get_by_id(account.account_id)
    first_copy.deposit(Money.of("10"))
    repository.db_account_save(first_copy)
    second_copy.deposit(Money.of("20"))

    with pytest.raises(ConcurrentModificationError):
        repository.db_account_save(second_copy)

    assert repository.db_account_get_by_id(account.account_id).balance == Money.of("10.00")


def test_db_memory_save_unknown_and_duplicate_accounts() -> None:
    """Raise typed errors for unknown saves and duplicate creates.

    Returns:
        None: Assertions validate identity handling.

    Raises:
        AssertionError: Raised when errors are not raised.
    """

    repository = InMemoryAccountRepository()
    account = Account.create("Alice")
    repository.db_account_create(account)

    with pytest.raises(DuplicateEntityError):
        repository.db_account_create(account)
    with pytest.raises(AccountNotFoundError):
        repository.db_account_save(Account.create("Ghost"))
    assert repository.db_account_get_by_id("missing") is None


def test_db_memory_list_orders_by_creation() -> None:
    """List accounts oldest first with paging.

    Returns:
        None: Assertions validate ordering.

    Raises:
        AssertionError: Raised when ordering is wrong.
    """

    repository = InMemoryAccountRepository()
    base_time = datetime(2026, 3, 1, tzinfo=timezone.utc)
    for index, owner_name in enumerate(["Zed", "Amy", "Kim"]):
        repository.db_account_create(
            Account(
                account_id=f"id-{index}",
                owner_name=owner_name,
                balance=Money.zero(),
                created_at_utc=base_time + timedelta(seconds=index),
            )
        )

    assert [account.owner_name for account in repository.db_account_list(limit=10, offset=0)] == ["Zed", "Amy", "Kim"]
    assert [account.owner_name for account in repository.db_account_list(limit=1, offset=1)] == ["Amy"]


def test_db_memory_clone_account_copies_lots() -> None:
    """Clone an account so that selling on the clone leaves the source intact.

    Returns:
        None: Assertions validate deep copy semantics.

    Raises:
        AssertionError: Raised when lots are shared.
    """

    account = Account.create("Alice")
    account.deposit(Money.of("1000"))
    account.buy(Symbol("AAPL"), ShareQuantity(5), Price.of("100"))

    clone = db_memory_clone_account(account)
    clone.sell(Symbol("AAPL"), ShareQuantity(2), Price.of("110"))

    assert account.holding(Symbol("AAPL")).total_shares() == ShareQuantity(5)
    assert clone.holding(Symbol("AAPL")).total_shares() == ShareQuantity(3)
    assert clone.version == account.version


def test_db_memory_ledger_lists_per_account_in_append_order() -> None:
    """Keep append order and reject duplicate entry ids.

    Returns:
        None: Assertions validate ledger repository behavior.

    Raises:
        AssertionError: Raised when listing or uniqueness is wrong.
    """

    repository = InMemoryLedgerEntryRepository()
    deposit_entry = LedgerEntry.deposit("account-a", Money.of("100"))
    withdrawal_entry = LedgerEntry.withdrawal("account-a", Money.of("40"))
    repository.db_ledger_entry_append(deposit_entry)
    repository.db_ledger_entry_append(LedgerEntry.deposit("account-b", Money.of("1")))
    repository.db_ledger_entry_append(withdrawal_entry)

    entries = repository.db_ledger_entry_list_for_account("account-a")

    assert [entry.kind for entry in entries] == [LedgerEntryKind.DEPOSIT, LedgerEntryKind.WITHDRAWAL]
    with pytest.raises(DuplicateEntityError):
        repository.db_ledger_entry_append(deposit_entry)


def test_db_memory_health_service_is_always_ok() -> None:
    """Report healthy status for the memory backend.

    Returns:
        None: Assertions validate health payload.

    Raises:
        AssertionError: Raised when status is not ok.
    """

    health_service = InMemoryDatabaseHealthService()

    assert health_service.db_check_health().status == "ok"
    assert health_service.db_connection_label() == "memory://"
