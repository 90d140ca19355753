"""Holdings performance reporting use case."""

from __future__ import annotations

import logging

from portfolio_ledger.adapters import PriceProviderError, PriceProviderPort
from portfolio_ledger.db import AccountRepositoryPort, LedgerEntryRepositoryPort
from portfolio_ledger.domain import AccountNotFoundError, StockPrice, Symbol
from portfolio_ledger.ledger import HoldingPerformance, PerformanceCalculatorPort, ledger_compute_holdings_performance

from .account_writes import AccountLockRegistry

logger = logging.getLogger(__name__)


class ReportingService:
    """Combine account state, ledger history and live prices into performance rows."""

    def __init__(
        self,
        account_repository: AccountRepositoryPort,
        ledger_repository: LedgerEntryRepositoryPort,
        price_provider: PriceProviderPort,
        lock_registry: AccountLockRegistry,
        performance_calculator: PerformanceCalculatorPort = ledger_compute_holdings_performance,
    ):
        """Initialize reporting dependencies.

        Args:
            account_repository: DB-layer account repository.
            ledger_repository: DB-layer ledger entry repository.
            price_provider: Live price adapter.
            lock_registry: Lock registry shared with the write path.
            performance_calculator: Ledger fold producing performance rows.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if account_repository is None:
            raise ValueError("account_repository must not be None")
        if ledger_repository is None:
            raise ValueError("ledger_repository must not be None")
        if price_provider is None:
            raise ValueError("price_provider must not be None")
        if lock_registry is None:
            raise ValueError("lock_registry must not be None")
        self._account_repository = account_repository
        self._ledger_repository = ledger_repository
        self._price_provider = price_provider
        self._lock_registry = lock_registry
        self._performance_calculator = performance_calculator

    def services_holdings_performance(self, account_id: str) -> tuple[HoldingPerformance, ...]:
        """Return per-symbol performance rows ordered by symbol.

        Account and ledger are read under the account lock so both reflect
        the same completed operations. Prices that cannot be fetched read as
        zero.

        Args:
            account_id: Account identifier.

        Returns:
            tuple[HoldingPerformance, ...]: Performance rows sorted by symbol.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
            HoldingNotFoundError: Raised when the ledger and account state diverged.
        """

        with self._lock_registry.services_account_lock(account_id):
            account = self._account_repository.db_account_get_by_id(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            entries = self._ledger_repository.db_ledger_entry_list_for_account(account_id)

        symbols = [holding.symbol for holding in account.holdings()]
        prices = self._services_fetch_prices(symbols)
        performance_rows = self._performance_calculator(account, entries, prices)
        return tuple(sorted(performance_rows, key=lambda row: row.symbol.value))

    def _services_fetch_prices(self, symbols: list[Symbol]) -> dict[Symbol, StockPrice]:
        if not symbols:
            return {}
        try:
            return self._price_provider.adapter_fetch_prices(symbols)
        except PriceProviderError as error:
            logger.warning(
                "price lookup via %s failed, reporting without live prices: %s",
                self._price_provider.adapter_source_name(),
                error,
            )
            return {}


__all__ = ["ReportingService"]
