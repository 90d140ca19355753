"""Typed interfaces for database-layer services.

All SQL and storage access must remain in the db package and its submodules.
Stores hand back freshly reconstructed aggregates on every read so callers
never share mutable state with the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from portfolio_ledger.domain import Account, LedgerEntry


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


class ConcurrentModificationError(RuntimeError):
    """Raised when a save is rejected because the stored account version moved on."""

    error_code = "CONCURRENT_MODIFICATION"


class DatabaseHealthPort(Protocol):
    """Port definition for storage connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active storage target.

        Returns:
            str: Storage target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check storage connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Storage health status payload.

        Raises:
            ConnectionError: Raised when storage cannot be reached.
        """


class AccountRepositoryPort(Protocol):
    """Port definition for account aggregate persistence."""

    def db_account_create(self, account: Account) -> None:
        """Persist a newly created account.

        Args:
            account: New account aggregate.

        Returns:
            None: Persisted as side effect.

        Raises:
            DuplicateEntityError: Raised when the account id already exists.
            RuntimeError: Raised when persistence fails.
        """

    def db_account_get_by_id(self, account_id: str) -> Account | None:
        """Load one account aggregate with its holdings and lots.

        Args:
            account_id: Account identifier.

        Returns:
            Account | None: Reconstructed aggregate, or None when absent.

        Raises:
            ValueError: Raised when account_id is blank.
            RuntimeError: Raised when the read fails.
        """

    def db_account_list(self, limit: int, offset: int) -> list[Account]:
        """List accounts ordered by creation timestamp and id.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            list[Account]: Reconstructed aggregates.

        Raises:
            ValueError: Raised when pagination arguments are invalid.
        """

    def db_account_save(self, account: Account) -> None:
        """Persist the full state of a loaded account.

        The save succeeds only when the stored version equals `account.version`;
        on success `account.version` is advanced.

        Args:
            account: Loaded and mutated account aggregate.

        Returns:
            None: Persisted as side effect.

        Raises:
            AccountNotFoundError: Raised when the account was never created.
            ConcurrentModificationError: Raised when another writer saved first.
            RuntimeError: Raised when persistence fails.
        """


class LedgerEntryRepositoryPort(Protocol):
    """Port definition for the append-only ledger entry log."""

    def db_ledger_entry_append(self, entry: LedgerEntry) -> None:
        """Append one immutable ledger entry.

        Args:
            entry: Completed operation record.

        Returns:
            None: Persisted as side effect.

        Raises:
            DuplicateEntityError: Raised when the entry id already exists.
            RuntimeError: Raised when persistence fails.
        """

    def db_ledger_entry_list_for_account(self, account_id: str) -> list[LedgerEntry]:
        """List the full ledger history of one account in chronological order.

        Args:
            account_id: Account identifier.

        Returns:
            list[LedgerEntry]: Entries ordered by creation timestamp then append order.

        Raises:
            ValueError: Raised when account_id is blank.
            RuntimeError: Raised when the read fails.
        """


__all__ = [
    "AccountRepositoryPort",
    "ConcurrentModificationError",
    "DatabaseHealthPort",
    "HealthStatus",
    "LedgerEntryRepositoryPort",
]
