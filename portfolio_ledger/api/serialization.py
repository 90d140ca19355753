"""JSON payload builders for API responses.

Money and prices are rendered as two-decimal strings so clients never see
binary floating point values.
"""

from __future__ import annotations

from portfolio_ledger.domain import Account, LedgerEntry, SellResult, ShareQuantity, StockPrice, Symbol
from portfolio_ledger.ledger import HoldingPerformance


def api_error_payload(code: str, message: str) -> dict[str, str]:
    return {
        "status": "error",
        "code": code,
        "message": message,
    }


def api_serialize_account(account: Account) -> dict[str, object]:
    """Serialize one account to JSON response payload.

    Args:
        account: Account aggregate.

    Returns:
        dict[str, object]: JSON-serializable account payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "id": account.account_id,
        "owner_name": account.owner_name,
        "balance": str(account.balance),
        "created_at_utc": account.created_at_utc.isoformat(),
        "holding_count": len(account.holdings()),
    }


def api_serialize_ledger_entry(entry: LedgerEntry) -> dict[str, object]:
    """Serialize one ledger entry to JSON response payload.

    Args:
        entry: Ledger entry.

    Returns:
        dict[str, object]: JSON-serializable transaction payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "id": entry.entry_id,
        "account_id": entry.account_id,
        "kind": entry.kind.value,
        "symbol": entry.symbol.value if entry.symbol is not None else None,
        "quantity": entry.quantity.value,
        "unit_price": str(entry.unit_price) if entry.unit_price is not None else None,
        "total_amount": str(entry.total_amount),
        "profit": str(entry.profit),
        "created_at_utc": entry.created_at_utc.isoformat(),
    }


def api_serialize_holding_performance(row: HoldingPerformance) -> dict[str, object]:
    return {
        "symbol": row.symbol.value,
        "quantity": row.quantity.value,
        "remaining": row.remaining.value,
        "average_purchase_price": str(row.average_purchase_price),
        "current_price": str(row.current_price),
        "unrealized_gain": str(row.unrealized_gain),
        "realized_gain": str(row.realized_gain),
    }


def api_serialize_sell_result(
    account_id: str,
    symbol: Symbol,
    quantity: ShareQuantity,
    sell_result: SellResult,
) -> dict[str, object]:
    return {
        "account_id": account_id,
        "symbol": symbol.value,
        "quantity": quantity.value,
        "proceeds": str(sell_result.proceeds),
        "cost_basis": str(sell_result.cost_basis),
        "profit": str(sell_result.profit),
        "is_profitable": sell_result.is_profitable(),
        "is_loss": sell_result.is_loss(),
    }


def api_serialize_stock_price(stock_price: StockPrice, source_name: str) -> dict[str, object]:
    return {
        "symbol": stock_price.symbol.value,
        "price": str(stock_price.price),
        "currency": stock_price.currency,
        "fetched_at_utc": stock_price.fetched_at_utc.isoformat(),
        "source": source_name,
    }


__all__ = [
    "api_error_payload",
    "api_serialize_account",
    "api_serialize_holding_performance",
    "api_serialize_ledger_entry",
    "api_serialize_sell_result",
    "api_serialize_stock_price",
]
