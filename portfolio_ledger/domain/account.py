"""Account aggregate root owning cash balance and instrument holdings.

The account is the only object allowed to mutate its holdings and lots. Its
invariants hold only while callers guarantee at most one in-flight mutating
operation per account identity; serialization is the job of the service and
persistence boundary, not of this module.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .errors import (
    DuplicateEntityError,
    HoldingNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidQuantityError,
)
from .holding import Holding, HoldingSnapshot, SellResult
from .identity import (
    domain_generate_identifier,
    domain_require_identifier,
    domain_require_utc_timestamp,
    domain_utc_now,
)
from .values import Money, Price, ShareQuantity, Symbol


class Account:
    """Investor account holding cash and per-symbol stock holdings."""

    def __init__(
        self,
        account_id: str,
        owner_name: str,
        balance: Money,
        created_at_utc: datetime,
        version: int = 0,
    ):
        """Initialize account state after validating its invariants.

        Args:
            account_id: Unique account identifier.
            owner_name: Human-readable owner label.
            balance: Cash balance, must not be negative.
            created_at_utc: Offset-aware creation timestamp.
            version: Persistence concurrency token of the loaded state.

        Raises:
            ValueError: Raised when identifiers, owner name or timestamp are invalid.
            InvalidAmountError: Raised when balance is negative.
        """

        if not isinstance(balance, Money):
            raise TypeError("balance must be Money")
        if balance.is_negative():
            raise InvalidAmountError(f"account balance cannot be negative: {balance}")
        if not isinstance(owner_name, str) or not owner_name.strip():
            raise ValueError("owner_name must not be blank")
        if version < 0:
            raise ValueError("version must be >= 0")

        self._account_id = domain_require_identifier(account_id, "account_id")
        self._owner_name = owner_name.strip()
        self._balance = balance
        self._created_at_utc = domain_require_utc_timestamp(created_at_utc, "created_at_utc")
        self._holdings: dict[Symbol, Holding] = {}
        self.version = version

    @classmethod
    def create(cls, owner_name: str) -> Account:
        """Open a new account with zero cash and no holdings.

        Args:
            owner_name: Human-readable owner label.

        Returns:
            Account: New account with a generated identifier.

        Raises:
            ValueError: Raised when owner_name is blank.
        """

        return cls(
            account_id=domain_generate_identifier(),
            owner_name=owner_name,
            balance=Money.zero(),
            created_at_utc=domain_utc_now(),
        )

    @property
    def account_id(self) -> str:
        return self._account_id

    @property
    def owner_name(self) -> str:
        return self._owner_name

    @property
    def balance(self) -> Money:
        return self._balance

    @property
    def created_at_utc(self) -> datetime:
        return self._created_at_utc

    def deposit(self, amount: Money) -> None:
        """Add cash to the balance.

        Args:
            amount: Strictly positive amount.

        Raises:
            InvalidAmountError: Raised when amount is not strictly positive.
        """

        if not amount.is_positive():
            raise InvalidAmountError(f"deposit amount must be positive: {amount}")
        self._balance = self._balance + amount

    def withdraw(self, amount: Money) -> None:
        """Remove cash from the balance.

        Args:
            amount: Strictly positive amount.

        Raises:
            InvalidAmountError: Raised when amount is not strictly positive.
            InsufficientFundsError: Raised when amount exceeds the balance.
        """

        if not amount.is_positive():
            raise InvalidAmountError(f"withdrawal amount must be positive: {amount}")
        if self._balance < amount:
            raise InsufficientFundsError(f"insufficient funds for withdrawal: balance={self._balance}, requested={amount}")
        self._balance = self._balance - amount

    def buy(
        self,
        symbol: Symbol,
        quantity: ShareQuantity,
        price: Price,
        purchased_at_utc: datetime | None = None,
    ) -> Money:
        """Buy units of an instrument, opening a new lot.

        Args:
            symbol: Instrument symbol.
            quantity: Strictly positive units to buy.
            price: Purchase price per unit.
            purchased_at_utc: Optional purchase timestamp.

        Returns:
            Money: Total cost deducted from the balance.

        Raises:
            InvalidQuantityError: Raised when quantity is not strictly positive.
            InsufficientFundsError: Raised when total cost exceeds the balance.
        """

        if not quantity.is_positive():
            raise InvalidQuantityError(f"quantity must be positive: {quantity}")

        total_cost = price.multiply(quantity)
        if self._balance < total_cost:
            raise InsufficientFundsError(
                f"insufficient funds to buy {quantity} shares of {symbol}: balance={self._balance}, cost={total_cost}"
            )

        holding = self._holdings.get(symbol)
        if holding is None:
            holding = Holding.create(symbol)
            self._holdings[symbol] = holding
        holding.buy(quantity=quantity, unit_price=price, purchased_at_utc=purchased_at_utc)
        self._balance = self._balance - total_cost
        return total_cost

    def sell(self, symbol: Symbol, quantity: ShareQuantity, price: Price) -> SellResult:
        """Sell units of an instrument using FIFO lot matching.

        Args:
            symbol: Instrument symbol.
            quantity: Strictly positive units to sell.
            price: Sell price per unit.

        Returns:
            SellResult: Proceeds, cost basis and profit of the sale.

        Raises:
            InvalidQuantityError: Raised when quantity is not strictly positive.
            HoldingNotFoundError: Raised when the symbol was never bought in this account.
            ConflictQuantityError: Raised when quantity exceeds the shares held.
        """

        if not quantity.is_positive():
            raise InvalidQuantityError(f"quantity must be positive: {quantity}")

        holding = self._holdings.get(symbol)
        if holding is None:
            raise HoldingNotFoundError(f"holding not found for symbol {symbol} in account {self._account_id}")

        sell_result = holding.sell(quantity=quantity, price=price)
        self._balance = self._balance + sell_result.proceeds
        return sell_result

    def has_holding(self, symbol: Symbol) -> bool:
        return symbol in self._holdings

    def holding(self, symbol: Symbol) -> HoldingSnapshot:
        """Return a read-only snapshot of the holding for `symbol`.

        Args:
            symbol: Instrument symbol.

        Returns:
            HoldingSnapshot: Holding snapshot, possibly with zero lots.

        Raises:
            HoldingNotFoundError: Raised when the account has no holding for symbol.
        """

        holding = self._holdings.get(symbol)
        if holding is None:
            raise HoldingNotFoundError(f"holding not found for symbol {symbol} in account {self._account_id}")
        return holding.snapshot()

    def holdings(self) -> tuple[HoldingSnapshot, ...]:
        return tuple(holding.snapshot() for holding in self._holdings.values())

    @classmethod
    def restore(
        cls,
        account_id: str,
        owner_name: str,
        balance: Money,
        created_at_utc: datetime,
        version: int,
        holdings: Iterable[HoldingSnapshot] = (),
    ) -> Account:
        """Rebuild an account from stored data.

        Holdings and lots are constructed by the account itself from plain
        snapshot values, so no caller keeps a reference into the aggregate.

        Args:
            account_id: Unique account identifier.
            owner_name: Human-readable owner label.
            balance: Stored cash balance.
            created_at_utc: Offset-aware creation timestamp.
            version: Persistence concurrency token of the stored state.
            holdings: Stored holdings with their lots in FIFO order.

        Returns:
            Account: Reconstructed aggregate.

        Raises:
            DuplicateEntityError: Raised when a symbol or lot id repeats.
            InvalidAmountError: Raised when balance is negative.
        """

        account = cls(
            account_id=account_id,
            owner_name=owner_name,
            balance=balance,
            created_at_utc=created_at_utc,
            version=version,
        )
        for holding_snapshot in holdings:
            if holding_snapshot.symbol in account._holdings:
                raise DuplicateEntityError(
                    f"holding {holding_snapshot.symbol} already exists in account {account._account_id}"
                )
            account._holdings[holding_snapshot.symbol] = Holding.restore(holding_snapshot)
        return account

    def __repr__(self) -> str:
        return (
            f"Account(account_id={self._account_id!r}, owner_name={self._owner_name!r}, "
            f"balance={self._balance}, holdings={len(self._holdings)})"
        )


__all__ = ["Account"]
