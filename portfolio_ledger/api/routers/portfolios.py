"""Portfolio API router composition for account, cash, trade and reporting endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from portfolio_ledger.config import AppSettings
from portfolio_ledger.domain import LedgerEntryKind, Money, ShareQuantity, Symbol
from portfolio_ledger.services import (
    PortfolioManagementService,
    ReportingService,
    StockOperationsService,
    TransactionService,
)

from ..schemas import CashMovementRequest, CreatePortfolioRequest, TradeRequest
from ..serialization import (
    api_error_payload,
    api_serialize_account,
    api_serialize_holding_performance,
    api_serialize_ledger_entry,
    api_serialize_sell_result,
)


def api_create_portfolio_router(
    settings: AppSettings,
    portfolio_service: PortfolioManagementService,
    stock_operations_service: StockOperationsService,
    reporting_service: ReportingService,
    transaction_service: TransactionService,
) -> APIRouter:
    """Create portfolio router.

    Domain and provider failures propagate to the application exception
    handlers, which render them as error payloads.

    Args:
        settings: Runtime settings used for pagination defaults.
        portfolio_service: Account lifecycle and cash movement service.
        stock_operations_service: Buy and sell service.
        reporting_service: Holdings performance service.
        transaction_service: Ledger history service.

    Returns:
        APIRouter: Router exposing `/api/portfolios` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if portfolio_service is None:
        raise ValueError("portfolio_service must not be None")
    if stock_operations_service is None:
        raise ValueError("stock_operations_service must not be None")
    if reporting_service is None:
        raise ValueError("reporting_service must not be None")
    if transaction_service is None:
        raise ValueError("transaction_service must not be None")

    router = APIRouter(prefix="/api/portfolios", tags=["portfolios"])

    @router.post("")
    def api_portfolio_create(request: CreatePortfolioRequest) -> JSONResponse:
        """Open a new account.

        Args:
            request: Owner details.

        Returns:
            JSONResponse: Created account payload with status 201.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        account = portfolio_service.services_create_account(owner_name=request.owner_name)
        return JSONResponse(content=api_serialize_account(account), status_code=status.HTTP_201_CREATED)

    @router.get("")
    def api_portfolio_list(
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """Return accounts ordered by creation time.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            JSONResponse: Accounts list payload.

        Raises:
            RuntimeError: Raised when repository read fails.
        """

        applied_limit = min(limit, settings.api_max_limit)
        accounts = portfolio_service.services_list_accounts(limit=applied_limit, offset=offset)
        payload = {
            "items": [api_serialize_account(account) for account in accounts],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(accounts),
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/{account_id}")
    def api_portfolio_detail(account_id: str) -> JSONResponse:
        account = portfolio_service.services_get_account(account_id)
        return JSONResponse(content=api_serialize_account(account), status_code=status.HTTP_200_OK)

    @router.post("/{account_id}/deposits")
    def api_portfolio_deposit(account_id: str, request: CashMovementRequest) -> JSONResponse:
        """Deposit cash into one account.

        Args:
            account_id: Account identifier.
            request: Amount to deposit.

        Returns:
            JSONResponse: Account payload after the deposit.

        Raises:
            InvalidAmountError: Raised when amount is not strictly positive.
            AccountNotFoundError: Raised when the account does not exist.
        """

        account = portfolio_service.services_deposit(account_id=account_id, amount=Money.of(request.amount))
        return JSONResponse(content=api_serialize_account(account), status_code=status.HTTP_200_OK)

    @router.post("/{account_id}/withdrawals")
    def api_portfolio_withdraw(account_id: str, request: CashMovementRequest) -> JSONResponse:
        """Withdraw cash from one account.

        Args:
            account_id: Account identifier.
            request: Amount to withdraw.

        Returns:
            JSONResponse: Account payload after the withdrawal.

        Raises:
            InvalidAmountError: Raised when amount is not strictly positive.
            InsufficientFundsError: Raised when amount exceeds the balance.
            AccountNotFoundError: Raised when the account does not exist.
        """

        account = portfolio_service.services_withdraw(account_id=account_id, amount=Money.of(request.amount))
        return JSONResponse(content=api_serialize_account(account), status_code=status.HTTP_200_OK)

    @router.post("/{account_id}/purchases")
    def api_portfolio_purchase(account_id: str, request: TradeRequest) -> JSONResponse:
        """Buy shares at the live price.

        Args:
            account_id: Account identifier.
            request: Symbol and quantity to buy.

        Returns:
            JSONResponse: Purchase transaction payload.

        Raises:
            InvalidSymbolError: Raised when the ticker is malformed.
            InvalidQuantityError: Raised when quantity is not strictly positive.
            InsufficientFundsError: Raised when cost exceeds the balance.
            PriceProviderError: Raised when no live price is available.
        """

        purchase_entry = stock_operations_service.services_buy_stock(
            account_id=account_id,
            symbol=Symbol(request.symbol),
            quantity=ShareQuantity.positive(request.quantity),
        )
        return JSONResponse(content=api_serialize_ledger_entry(purchase_entry), status_code=status.HTTP_200_OK)

    @router.post("/{account_id}/sales")
    def api_portfolio_sale(account_id: str, request: TradeRequest) -> JSONResponse:
        """Sell shares FIFO at the live price.

        Args:
            account_id: Account identifier.
            request: Symbol and quantity to sell.

        Returns:
            JSONResponse: Sale result payload.

        Raises:
            InvalidSymbolError: Raised when the ticker is malformed.
            InvalidQuantityError: Raised when quantity is not strictly positive.
            HoldingNotFoundError: Raised when the symbol was never bought.
            ConflictQuantityError: Raised when quantity exceeds the shares held.
            PriceProviderError: Raised when no live price is available.
        """

        symbol = Symbol(request.symbol)
        quantity = ShareQuantity.positive(request.quantity)
        sell_result = stock_operations_service.services_sell_stock(
            account_id=account_id,
            symbol=symbol,
            quantity=quantity,
        )
        return JSONResponse(
            content=api_serialize_sell_result(
                account_id=account_id,
                symbol=symbol,
                quantity=quantity,
                sell_result=sell_result,
            ),
            status_code=status.HTTP_200_OK,
        )

    @router.get("/{account_id}/transactions")
    def api_portfolio_transactions(
        account_id: str,
        kind: str | None = Query(default=None),
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """Return the ledger history of one account.

        Args:
            account_id: Account identifier.
            kind: Optional entry kind filter.
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            JSONResponse: Transaction list payload.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
        """

        entry_kind = None
        if kind is not None and kind.strip():
            normalized_kind = kind.strip().upper()
            try:
                entry_kind = LedgerEntryKind(normalized_kind)
            except ValueError:
                return JSONResponse(
                    content=api_error_payload(code="INVALID_KIND", message=f"unsupported kind={normalized_kind}"),
                    status_code=status.HTTP_400_BAD_REQUEST,
                )

        applied_limit = min(limit, settings.api_max_limit)
        entries = transaction_service.services_list_transactions(
            account_id=account_id,
            kind=entry_kind,
            limit=applied_limit,
            offset=offset,
        )
        payload = {
            "items": [api_serialize_ledger_entry(entry) for entry in entries],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(entries),
            },
            "filters": {"kind": entry_kind.value if entry_kind is not None else None},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/{account_id}/holdings")
    def api_portfolio_holdings(account_id: str) -> JSONResponse:
        """Return per-symbol performance of one account.

        Args:
            account_id: Account identifier.

        Returns:
            JSONResponse: Performance rows sorted by symbol.

        Raises:
            AccountNotFoundError: Raised when the account does not exist.
        """

        performance_rows = reporting_service.services_holdings_performance(account_id)
        payload = {
            "account_id": account_id,
            "items": [api_serialize_holding_performance(row) for row in performance_rows],
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


__all__ = ["api_create_portfolio_router"]
