"""Immutable ledger entries recording completed account operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .holding import SellResult
from .identity import (
    domain_generate_identifier,
    domain_require_identifier,
    domain_require_utc_timestamp,
    domain_utc_now,
)
from .values import Money, Price, ShareQuantity, Symbol


class LedgerEntryKind(str, Enum):
    """Kind of completed account operation."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    PURCHASE = "PURCHASE"
    SALE = "SALE"

    def is_cash_movement(self) -> bool:
        return self in (LedgerEntryKind.DEPOSIT, LedgerEntryKind.WITHDRAWAL)


@dataclass(frozen=True)
class LedgerEntry:
    """Append-only record of one completed account operation.

    Cash movements carry no symbol, no unit price and a zero quantity. Only
    sales carry a non-zero profit.

    Attributes:
        entry_id: Unique entry identifier.
        account_id: Identifier of the account the operation applied to.
        kind: Operation kind.
        symbol: Instrument symbol, None for cash movements.
        quantity: Units traded, zero for cash movements.
        unit_price: Trade price per unit, None for cash movements.
        total_amount: Cash amount moved by the operation.
        profit: Realized profit, zero unless the entry is a sale.
        created_at_utc: Operation timestamp in UTC.
    """

    entry_id: str
    account_id: str
    kind: LedgerEntryKind
    symbol: Symbol | None
    quantity: ShareQuantity
    unit_price: Price | None
    total_amount: Money
    profit: Money
    created_at_utc: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "entry_id", domain_require_identifier(self.entry_id, "entry_id"))
        object.__setattr__(self, "account_id", domain_require_identifier(self.account_id, "account_id"))
        object.__setattr__(self, "kind", LedgerEntryKind(self.kind))
        object.__setattr__(
            self,
            "created_at_utc",
            domain_require_utc_timestamp(self.created_at_utc, "created_at_utc"),
        )

        if self.kind.is_cash_movement():
            if self.symbol is not None or self.unit_price is not None or not self.quantity.is_zero():
                raise ValueError(f"{self.kind.value} entry must not carry symbol, unit price or quantity")
        else:
            if self.symbol is None or self.unit_price is None:
                raise ValueError(f"{self.kind.value} entry requires symbol and unit price")
            if not self.quantity.is_positive():
                raise ValueError(f"{self.kind.value} entry requires a positive quantity")
        if self.kind is not LedgerEntryKind.SALE and not self.profit.is_zero():
            raise ValueError(f"{self.kind.value} entry must not carry profit")

    @classmethod
    def deposit(cls, account_id: str, amount: Money) -> LedgerEntry:
        return cls._cash_movement(account_id=account_id, kind=LedgerEntryKind.DEPOSIT, amount=amount)

    @classmethod
    def withdrawal(cls, account_id: str, amount: Money) -> LedgerEntry:
        return cls._cash_movement(account_id=account_id, kind=LedgerEntryKind.WITHDRAWAL, amount=amount)

    @classmethod
    def purchase(cls, account_id: str, symbol: Symbol, quantity: ShareQuantity, unit_price: Price) -> LedgerEntry:
        """Build the entry for a completed purchase.

        Args:
            account_id: Account identifier.
            symbol: Instrument bought.
            quantity: Units bought.
            unit_price: Purchase price per unit.

        Returns:
            LedgerEntry: Purchase entry whose total is `unit_price × quantity`.

        Raises:
            ValueError: Raised when entry fields are inconsistent.
        """

        return cls(
            entry_id=domain_generate_identifier(),
            account_id=account_id,
            kind=LedgerEntryKind.PURCHASE,
            symbol=symbol,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=unit_price.multiply(quantity),
            profit=Money.zero(),
            created_at_utc=domain_utc_now(),
        )

    @classmethod
    def sale(
        cls,
        account_id: str,
        symbol: Symbol,
        quantity: ShareQuantity,
        unit_price: Price,
        sell_result: SellResult,
    ) -> LedgerEntry:
        """Build the entry for a completed sale.

        Args:
            account_id: Account identifier.
            symbol: Instrument sold.
            quantity: Units sold.
            unit_price: Sell price per unit.
            sell_result: Outcome of the FIFO match.

        Returns:
            LedgerEntry: Sale entry carrying proceeds and realized profit.

        Raises:
            ValueError: Raised when entry fields are inconsistent.
        """

        return cls(
            entry_id=domain_generate_identifier(),
            account_id=account_id,
            kind=LedgerEntryKind.SALE,
            symbol=symbol,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=sell_result.proceeds,
            profit=sell_result.profit,
            created_at_utc=domain_utc_now(),
        )

    @classmethod
    def _cash_movement(cls, account_id: str, kind: LedgerEntryKind, amount: Money) -> LedgerEntry:
        return cls(
            entry_id=domain_generate_identifier(),
            account_id=account_id,
            kind=kind,
            symbol=None,
            quantity=ShareQuantity.zero(),
            unit_price=None,
            total_amount=amount,
            profit=Money.zero(),
            created_at_utc=domain_utc_now(),
        )


__all__ = ["LedgerEntry", "LedgerEntryKind"]
