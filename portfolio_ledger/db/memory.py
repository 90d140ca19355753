"""In-process repositories used for the memory storage backend and tests.

Stored aggregates are never handed out directly: every read and write goes
through a fresh reconstruction so callers cannot mutate stored state without
saving it.
"""

from __future__ import annotations

import threading

from portfolio_ledger.domain import (
    Account,
    AccountNotFoundError,
    DuplicateEntityError,
    LedgerEntry,
)

from .interfaces import (
    AccountRepositoryPort,
    ConcurrentModificationError,
    DatabaseHealthPort,
    HealthStatus,
    LedgerEntryRepositoryPort,
)


def db_memory_clone_account(account: Account) -> Account:
    """Reconstruct an independent copy of one account aggregate.

    Args:
        account: Source aggregate.

    Returns:
        Account: Deep copy sharing no mutable state with the source.

    Raises:
        DuplicateEntityError: Raised when the source holds duplicate identities.
    """

    return Account.restore(
        account_id=account.account_id,
        owner_name=account.owner_name,
        balance=account.balance,
        created_at_utc=account.created_at_utc,
        version=account.version,
        holdings=account.holdings(),
    )


class InMemoryAccountRepository(AccountRepositoryPort):
    """Dictionary-backed account repository with the same versioning contract as SQL storage."""

    def __init__(self):
        self._accounts: dict[str, Account] = {}
        self._lock = threading.Lock()

    def db_account_create(self, account: Account) -> None:
        with self._lock:
            if account.account_id in self._accounts:
                raise DuplicateEntityError(f"account {account.account_id} already exists")
            self._accounts[account.account_id] = db_memory_clone_account(account)

    def db_account_get_by_id(self, account_id: str) -> Account | None:
        if not account_id.strip():
            raise ValueError("account_id must not be blank")
        with self._lock:
            stored_account = self._accounts.get(account_id.strip())
            if stored_account is None:
                return None
            return db_memory_clone_account(stored_account)

    def db_account_list(self, limit: int, offset: int) -> list[Account]:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")
        with self._lock:
            ordered_accounts = sorted(
                self._accounts.values(),
                key=lambda stored_account: (stored_account.created_at_utc, stored_account.account_id),
            )
            return [db_memory_clone_account(stored_account) for stored_account in ordered_accounts[offset : offset + limit]]

    def db_account_save(self, account: Account) -> None:
        """Replace the stored aggregate when the loaded version is current.

        Args:
            account: Loaded and mutated account aggregate.

        Returns:
            None: Stored as side effect; `account.version` is advanced.

        Raises:
            AccountNotFoundError: Raised when the account was never created.
            ConcurrentModificationError: Raised when another writer saved first.
        """

        with self._lock:
            stored_account = self._accounts.get(account.account_id)
            if stored_account is None:
                raise AccountNotFoundError(account.account_id)
            if stored_account.version != account.version:
                raise ConcurrentModificationError(
                    f"account {account.account_id} was modified concurrently: "
                    f"expected version {account.version}, stored version {stored_account.version}"
                )
            account.version += 1
            self._accounts[account.account_id] = db_memory_clone_account(account)


class InMemoryLedgerEntryRepository(LedgerEntryRepositoryPort):
    """List-backed append-only ledger repository."""

    def __init__(self):
        self._entries: list[LedgerEntry] = []
        self._entry_ids: set[str] = set()
        self._lock = threading.Lock()

    def db_ledger_entry_append(self, entry: LedgerEntry) -> None:
        with self._lock:
            if entry.entry_id in self._entry_ids:
                raise DuplicateEntityError(f"ledger entry {entry.entry_id} already exists")
            self._entries.append(entry)
            self._entry_ids.add(entry.entry_id)

    def db_ledger_entry_list_for_account(self, account_id: str) -> list[LedgerEntry]:
        if not account_id.strip():
            raise ValueError("account_id must not be blank")
        with self._lock:
            account_entries = [entry for entry in self._entries if entry.account_id == account_id.strip()]
        # sorted() is stable, so equal timestamps keep append order
        return sorted(account_entries, key=lambda entry: entry.created_at_utc)


class InMemoryDatabaseHealthService(DatabaseHealthPort):
    """Health service for the memory backend, which is always reachable."""

    def db_connection_label(self) -> str:
        return "memory://"

    def db_check_health(self) -> HealthStatus:
        return HealthStatus(status="ok", detail="in-memory storage active")


__all__ = [
    "InMemoryAccountRepository",
    "InMemoryDatabaseHealthService",
    "InMemoryLedgerEntryRepository",
    "db_memory_clone_account",
]
