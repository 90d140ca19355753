"""Holding entity implementing FIFO lot matching for one instrument."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .errors import ConflictQuantityError, DuplicateEntityError
from .identity import domain_generate_identifier, domain_require_identifier
from .lot import Lot, LotSnapshot
from .values import Money, Price, ShareQuantity, Symbol


@dataclass(frozen=True)
class SellResult:
    """Monetary outcome of one sell operation.

    Attributes:
        proceeds: Sell price multiplied by sold quantity.
        cost_basis: Purchase cost of the lots consumed by the sale.
        profit: Proceeds minus cost basis.
    """

    proceeds: Money
    cost_basis: Money
    profit: Money

    @classmethod
    def of(cls, proceeds: Money, cost_basis: Money) -> SellResult:
        return cls(proceeds=proceeds, cost_basis=cost_basis, profit=proceeds - cost_basis)

    def is_profitable(self) -> bool:
        return self.profit.is_positive()

    def is_loss(self) -> bool:
        return self.profit.is_negative()


@dataclass(frozen=True)
class HoldingSnapshot:
    """Read-only copy of one holding and its open lots.

    Attributes:
        holding_id: Unique holding identifier.
        symbol: Instrument symbol.
        lots: Open lots in FIFO order.
    """

    holding_id: str
    symbol: Symbol
    lots: tuple[LotSnapshot, ...]

    def total_shares(self) -> ShareQuantity:
        return ShareQuantity(sum(lot.remaining_quantity.value for lot in self.lots))

    def is_empty(self) -> bool:
        return self.total_shares().is_zero()

    def unrealized_gain(self, current_price: Price) -> Money:
        """Return paper gain over all open lots at `current_price`."""

        total_gain = Money.zero()
        for lot in self.lots:
            total_gain = total_gain + lot.unrealized_gain(current_price)
        return total_gain


class Holding:
    """Stock holding composed of purchase lots in chronological order.

    Lot order is the FIFO contract: lots are only ever appended and never
    re-sorted. Lots are handed out as tuple snapshots, mutation is reserved to
    the owning account.
    """

    def __init__(self, holding_id: str, symbol: Symbol):
        """Initialize an empty holding.

        Args:
            holding_id: Unique holding identifier.
            symbol: Instrument symbol this holding tracks.

        Raises:
            ValueError: Raised when holding_id is blank.
            TypeError: Raised when symbol is not a Symbol.
        """

        if not isinstance(symbol, Symbol):
            raise TypeError("symbol must be a Symbol")
        self._holding_id = domain_require_identifier(holding_id, "holding_id")
        self._symbol = symbol
        self._lots: list[Lot] = []

    @classmethod
    def create(cls, symbol: Symbol) -> Holding:
        return cls(holding_id=domain_generate_identifier(), symbol=symbol)

    @property
    def holding_id(self) -> str:
        return self._holding_id

    @property
    def symbol(self) -> Symbol:
        return self._symbol

    @property
    def lots(self) -> tuple[LotSnapshot, ...]:
        return tuple(lot.snapshot() for lot in self._lots)

    def total_shares(self) -> ShareQuantity:
        total = ShareQuantity.zero()
        for lot in self._lots:
            total = total + lot.remaining_quantity
        return total

    def is_empty(self) -> bool:
        return self.total_shares().is_zero()

    def unrealized_gain(self, current_price: Price) -> Money:
        return self.snapshot().unrealized_gain(current_price)

    def buy(self, quantity: ShareQuantity, unit_price: Price, purchased_at_utc: datetime | None = None) -> LotSnapshot:
        """Append a new purchase lot at the end of the lot list.

        Args:
            quantity: Positive units bought.
            unit_price: Purchase price per unit.
            purchased_at_utc: Optional purchase timestamp.

        Returns:
            LotSnapshot: Snapshot of the newly appended lot.

        Raises:
            InvalidQuantityError: Raised when quantity is not positive.
        """

        lot = Lot.open(quantity=quantity, unit_price=unit_price, purchased_at_utc=purchased_at_utc)
        self._lots.append(lot)
        return lot.snapshot()

    def sell(self, quantity: ShareQuantity, price: Price) -> SellResult:
        """Sell units by depleting the oldest open lots first.

        Args:
            quantity: Units to sell.
            price: Sell price per unit.

        Returns:
            SellResult: Proceeds, matched cost basis and profit.

        Raises:
            ConflictQuantityError: Raised when quantity exceeds the total remaining shares.
        """

        available_shares = self.total_shares()
        if quantity > available_shares:
            raise ConflictQuantityError(
                f"not enough shares of {self._symbol} to sell: available={available_shares}, requested={quantity}"
            )

        remaining_to_sell = quantity
        cost_basis = Money.zero()
        for lot in self._lots:
            if remaining_to_sell.is_zero():
                break
            if lot.is_empty():
                continue
            taken_quantity = remaining_to_sell.min(lot.remaining_quantity)
            cost_basis = cost_basis + lot.cost_of(taken_quantity)
            lot.reduce(taken_quantity)
            remaining_to_sell = remaining_to_sell - taken_quantity

        self._lots = [lot for lot in self._lots if not lot.is_empty()]

        return SellResult.of(proceeds=price.multiply(quantity), cost_basis=cost_basis)

    def snapshot(self) -> HoldingSnapshot:
        return HoldingSnapshot(holding_id=self._holding_id, symbol=self._symbol, lots=self.lots)

    @classmethod
    def restore(cls, snapshot: HoldingSnapshot) -> Holding:
        """Rebuild a holding from stored snapshot data, preserving lot order.

        Every lot is constructed afresh, so the result shares no mutable state
        with the caller.

        Args:
            snapshot: Stored holding data with lots in FIFO order.

        Returns:
            Holding: Reconstructed holding.

        Raises:
            DuplicateEntityError: Raised when two lots share an identifier.
            InvalidQuantityError: Raised when stored quantities violate lot invariants.
        """

        holding = cls(holding_id=snapshot.holding_id, symbol=snapshot.symbol)
        seen_lot_ids: set[str] = set()
        for lot_snapshot in snapshot.lots:
            if lot_snapshot.lot_id in seen_lot_ids:
                raise DuplicateEntityError(f"lot {lot_snapshot.lot_id} already exists in holding {snapshot.symbol}")
            seen_lot_ids.add(lot_snapshot.lot_id)
            holding._lots.append(
                Lot(
                    lot_id=lot_snapshot.lot_id,
                    initial_quantity=lot_snapshot.initial_quantity,
                    remaining_quantity=lot_snapshot.remaining_quantity,
                    unit_price=lot_snapshot.unit_price,
                    purchased_at_utc=lot_snapshot.purchased_at_utc,
                )
            )
        return holding

    def __repr__(self) -> str:
        return f"Holding(holding_id={self._holding_id!r}, symbol={self._symbol.value!r}, lots={len(self._lots)})"


__all__ = ["Holding", "HoldingSnapshot", "SellResult"]
