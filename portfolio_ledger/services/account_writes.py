"""Serialized, version-checked write path for account aggregates."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from portfolio_ledger.db import AccountRepositoryPort, ConcurrentModificationError, LedgerEntryRepositoryPort
from portfolio_ledger.domain import Account, AccountNotFoundError, LedgerEntry

logger = logging.getLogger(__name__)

OperationResultT = TypeVar("OperationResultT")


class AccountLockRegistry:
    """Registry of one in-process lock per account identifier."""

    def __init__(self):
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def services_lock_for(self, account_id: str) -> threading.Lock:
        with self._registry_lock:
            account_lock = self._locks.get(account_id)
            if account_lock is None:
                account_lock = threading.Lock()
                self._locks[account_id] = account_lock
            return account_lock

    @contextmanager
    def services_account_lock(self, account_id: str) -> Iterator[None]:
        """Hold the lock of one account for the duration of the block.

        Args:
            account_id: Account identifier.

        Returns:
            Iterator[None]: Context manager body runs while the lock is held.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        account_lock = self.services_lock_for(account_id)
        with account_lock:
            yield


class AccountWriteCoordinator:
    """Run one account mutation as load, mutate, save and ledger append.

    Writers of the same account are serialized in-process by the lock
    registry. Writers in other processes are detected by the repository
    version check and the whole load-mutate-save cycle is retried.
    """

    def __init__(
        self,
        account_repository: AccountRepositoryPort,
        ledger_repository: LedgerEntryRepositoryPort,
        lock_registry: AccountLockRegistry | None = None,
        retry_attempts: int = 3,
    ):
        """Initialize write coordinator dependencies.

        Args:
            account_repository: DB-layer account repository.
            ledger_repository: DB-layer ledger entry repository.
            lock_registry: Optional shared lock registry.
            retry_attempts: Attempts for a cycle that loses a version race.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if account_repository is None:
            raise ValueError("account_repository must not be None")
        if ledger_repository is None:
            raise ValueError("ledger_repository must not be None")
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be >= 1")

        self._account_repository = account_repository
        self._ledger_repository = ledger_repository
        self._lock_registry = lock_registry or AccountLockRegistry()
        self._retry_attempts = retry_attempts

    @property
    def lock_registry(self) -> AccountLockRegistry:
        return self._lock_registry

    def services_apply(
        self,
        account_id: str,
        operation: Callable[[Account], tuple[OperationResultT, LedgerEntry]],
    ) -> tuple[Account, OperationResultT]:
        """Apply one mutation to the latest stored state of an account.

        A failing `operation` leaves storage untouched because the mutated
        aggregate is discarded before any save.

        Args:
            account_id: Account identifier.
            operation: Mutation returning its result and the ledger entry to append.

        Returns:
            tuple[Account, OperationResultT]: Saved account and operation result.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
            DomainError: Raised when the mutation violates an account rule.
            ConcurrentModificationError: Raised when every attempt lost a version race.
        """

        with self._lock_registry.services_account_lock(account_id):
            for attempt_number in range(1, self._retry_attempts + 1):
                account = self._account_repository.db_account_get_by_id(account_id)
                if account is None:
                    raise AccountNotFoundError(account_id)

                operation_result, ledger_entry = operation(account)
                try:
                    self._account_repository.db_account_save(account)
                except ConcurrentModificationError:
                    if attempt_number == self._retry_attempts:
                        raise
                    logger.warning(
                        "account %s changed during write, retrying (attempt %d of %d)",
                        account_id,
                        attempt_number,
                        self._retry_attempts,
                    )
                    continue

                self._ledger_repository.db_ledger_entry_append(ledger_entry)
                return account, operation_result

        raise RuntimeError("account write loop exited without a result")


__all__ = ["AccountLockRegistry", "AccountWriteCoordinator"]
