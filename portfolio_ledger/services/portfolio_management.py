"""Account lifecycle and cash movement use cases."""

from __future__ import annotations

import logging

from portfolio_ledger.db import AccountRepositoryPort
from portfolio_ledger.domain import Account, AccountNotFoundError, LedgerEntry, Money

from .account_writes import AccountWriteCoordinator

logger = logging.getLogger(__name__)


class PortfolioManagementService:
    """Create and inspect accounts, and move cash in and out of them."""

    def __init__(self, account_repository: AccountRepositoryPort, write_coordinator: AccountWriteCoordinator):
        """Initialize portfolio management dependencies.

        Args:
            account_repository: DB-layer account repository.
            write_coordinator: Serialized account write path.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if account_repository is None:
            raise ValueError("account_repository must not be None")
        if write_coordinator is None:
            raise ValueError("write_coordinator must not be None")
        self._account_repository = account_repository
        self._write_coordinator = write_coordinator

    def services_create_account(self, owner_name: str) -> Account:
        """Open and persist a new empty account.

        Args:
            owner_name: Human-readable owner label.

        Returns:
            Account: Persisted account with zero balance.

        Raises:
            ValueError: Raised when owner_name is blank.
            RuntimeError: Raised when persistence fails.
        """

        account = Account.create(owner_name)
        self._account_repository.db_account_create(account)
        logger.info("created account %s for owner %s", account.account_id, account.owner_name)
        return account

    def services_get_account(self, account_id: str) -> Account:
        """Load one account.

        Args:
            account_id: Account identifier.

        Returns:
            Account: Stored account.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
        """

        account = self._account_repository.db_account_get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def services_list_accounts(self, limit: int, offset: int = 0) -> list[Account]:
        return self._account_repository.db_account_list(limit=limit, offset=offset)

    def services_deposit(self, account_id: str, amount: Money) -> Account:
        """Deposit cash and record a DEPOSIT ledger entry.

        Args:
            account_id: Account identifier.
            amount: Strictly positive amount.

        Returns:
            Account: Account state after the deposit.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
            InvalidAmountError: Raised when amount is not strictly positive.
        """

        def _deposit(account: Account) -> tuple[None, LedgerEntry]:
            account.deposit(amount)
            return None, LedgerEntry.deposit(account_id=account.account_id, amount=amount)

        account, _ = self._write_coordinator.services_apply(account_id, _deposit)
        logger.info("deposited %s into account %s", amount, account_id)
        return account

    def services_withdraw(self, account_id: str, amount: Money) -> Account:
        """Withdraw cash and record a WITHDRAWAL ledger entry.

        Args:
            account_id: Account identifier.
            amount: Strictly positive amount not above the balance.

        Returns:
            Account: Account state after the withdrawal.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
            InvalidAmountError: Raised when amount is not strictly positive.
            InsufficientFundsError: Raised when amount exceeds the balance.
        """

        def _withdraw(account: Account) -> tuple[None, LedgerEntry]:
            account.withdraw(amount)
            return None, LedgerEntry.withdrawal(account_id=account.account_id, amount=amount)

        account, _ = self._write_coordinator.services_apply(account_id, _withdraw)
        logger.info("withdrew %s from account %s", amount, account_id)
        return account


__all__ = ["PortfolioManagementService"]
