"""Ledger history queries."""

from __future__ import annotations

from portfolio_ledger.db import AccountRepositoryPort, LedgerEntryRepositoryPort
from portfolio_ledger.domain import AccountNotFoundError, LedgerEntry, LedgerEntryKind


class TransactionService:
    """Read the ledger history of one account."""

    def __init__(self, account_repository: AccountRepositoryPort, ledger_repository: LedgerEntryRepositoryPort):
        if account_repository is None:
            raise ValueError("account_repository must not be None")
        if ledger_repository is None:
            raise ValueError("ledger_repository must not be None")
        self._account_repository = account_repository
        self._ledger_repository = ledger_repository

    def services_list_transactions(
        self,
        account_id: str,
        kind: LedgerEntryKind | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LedgerEntry]:
        """List ledger entries of one account in chronological order.

        Args:
            account_id: Account identifier.
            kind: Optional entry kind filter, None returns every kind.
            limit: Optional maximum number of entries.
            offset: Entries to skip after filtering.

        Returns:
            list[LedgerEntry]: Matching entries.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
            ValueError: Raised when pagination arguments are invalid.
        """

        if limit is not None and limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if self._account_repository.db_account_get_by_id(account_id) is None:
            raise AccountNotFoundError(account_id)

        entries = self._ledger_repository.db_ledger_entry_list_for_account(account_id)
        if kind is not None:
            entries = [entry for entry in entries if entry.kind is kind]
        if limit is None:
            return entries[offset:]
        return entries[offset : offset + limit]


__all__ = ["TransactionService"]
