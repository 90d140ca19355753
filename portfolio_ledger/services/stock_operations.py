"""Stock purchase and sale use cases priced by the live price provider."""

from __future__ import annotations

import logging

from portfolio_ledger.adapters import PriceProviderPort
from portfolio_ledger.domain import Account, LedgerEntry, SellResult, ShareQuantity, Symbol

from .account_writes import AccountWriteCoordinator

logger = logging.getLogger(__name__)


class StockOperationsService:
    """Buy and sell instruments at the current provider price."""

    def __init__(self, price_provider: PriceProviderPort, write_coordinator: AccountWriteCoordinator):
        """Initialize stock operation dependencies.

        Args:
            price_provider: Live price adapter.
            write_coordinator: Serialized account write path.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if price_provider is None:
            raise ValueError("price_provider must not be None")
        if write_coordinator is None:
            raise ValueError("write_coordinator must not be None")
        self._price_provider = price_provider
        self._write_coordinator = write_coordinator

    def services_buy_stock(self, account_id: str, symbol: Symbol, quantity: ShareQuantity) -> LedgerEntry:
        """Buy units at the live price and record a PURCHASE ledger entry.

        The price is fetched once before the account lock is taken, so a
        retried write reuses the same quote.

        Args:
            account_id: Account identifier.
            symbol: Instrument to buy.
            quantity: Strictly positive units.

        Returns:
            LedgerEntry: Recorded purchase entry.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
            InvalidQuantityError: Raised when quantity is not strictly positive.
            InsufficientFundsError: Raised when the cost exceeds the balance.
            PriceProviderError: Raised when no live price can be obtained.
        """

        stock_price = self._price_provider.adapter_fetch_price(symbol)

        def _buy(account: Account) -> tuple[LedgerEntry, LedgerEntry]:
            account.buy(symbol=symbol, quantity=quantity, price=stock_price.price)
            purchase_entry = LedgerEntry.purchase(
                account_id=account.account_id,
                symbol=symbol,
                quantity=quantity,
                unit_price=stock_price.price,
            )
            return purchase_entry, purchase_entry

        _, purchase_entry = self._write_coordinator.services_apply(account_id, _buy)
        logger.info(
            "account %s bought %s %s at %s for %s",
            account_id,
            quantity,
            symbol,
            stock_price.price,
            purchase_entry.total_amount,
        )
        return purchase_entry

    def services_sell_stock(self, account_id: str, symbol: Symbol, quantity: ShareQuantity) -> SellResult:
        """Sell units FIFO at the live price and record a SALE ledger entry.

        Args:
            account_id: Account identifier.
            symbol: Instrument to sell.
            quantity: Strictly positive units.

        Returns:
            SellResult: Proceeds, cost basis and profit of the sale.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
            InvalidQuantityError: Raised when quantity is not strictly positive.
            HoldingNotFoundError: Raised when the symbol was never bought.
            ConflictQuantityError: Raised when quantity exceeds the shares held.
            PriceProviderError: Raised when no live price can be obtained.
        """

        stock_price = self._price_provider.adapter_fetch_price(symbol)

        def _sell(account: Account) -> tuple[SellResult, LedgerEntry]:
            sell_result = account.sell(symbol=symbol, quantity=quantity, price=stock_price.price)
            sale_entry = LedgerEntry.sale(
                account_id=account.account_id,
                symbol=symbol,
                quantity=quantity,
                unit_price=stock_price.price,
                sell_result=sell_result,
            )
            return sell_result, sale_entry

        _, sell_result = self._write_coordinator.services_apply(account_id, _sell)
        logger.info(
            "account %s sold %s %s at %s with profit %s",
            account_id,
            quantity,
            symbol,
            stock_price.price,
            sell_result.profit,
        )
        return sell_result


__all__ = ["StockOperationsService"]
