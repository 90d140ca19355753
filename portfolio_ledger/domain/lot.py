"""Purchase-lot entity tracking one buy batch and its unsold remainder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .errors import ConflictQuantityError, InvalidQuantityError
from .identity import (
    domain_generate_identifier,
    domain_require_identifier,
    domain_require_utc_timestamp,
    domain_utc_now,
)
from .values import Money, Price, ShareQuantity


@dataclass(frozen=True)
class LotSnapshot:
    """Read-only copy of one lot handed out beyond the account boundary.

    Attributes:
        lot_id: Unique lot identifier.
        initial_quantity: Units bought in the purchase batch.
        remaining_quantity: Units not yet sold when the snapshot was taken.
        unit_price: Purchase price per unit.
        purchased_at_utc: Purchase timestamp in UTC.
    """

    lot_id: str
    initial_quantity: ShareQuantity
    remaining_quantity: ShareQuantity
    unit_price: Price
    purchased_at_utc: datetime

    def unrealized_gain(self, current_price: Price) -> Money:
        """Return paper gain of the remaining units at `current_price`."""

        return (current_price.to_money() - self.unit_price.to_money()) * self.remaining_quantity


class Lot:
    """One purchase batch of an instrument.

    The initial quantity, unit price and purchase timestamp never change after
    creation. The remaining quantity only shrinks, and `0 <= remaining <= initial`
    holds at all times.
    """

    __slots__ = ("_lot_id", "_initial_quantity", "_remaining_quantity", "_unit_price", "_purchased_at_utc")

    def __init__(
        self,
        lot_id: str,
        initial_quantity: ShareQuantity,
        remaining_quantity: ShareQuantity,
        unit_price: Price,
        purchased_at_utc: datetime,
    ):
        """Initialize lot state after validating its invariants.

        Args:
            lot_id: Unique lot identifier.
            initial_quantity: Units bought in the purchase batch.
            remaining_quantity: Units not yet sold.
            unit_price: Purchase price per unit.
            purchased_at_utc: Offset-aware purchase timestamp.

        Raises:
            ValueError: Raised when identifier or timestamp are invalid.
            InvalidQuantityError: Raised when quantities violate lot invariants.
        """

        if not isinstance(initial_quantity, ShareQuantity) or not isinstance(remaining_quantity, ShareQuantity):
            raise InvalidQuantityError("lot quantities must be ShareQuantity values")
        if not isinstance(unit_price, Price):
            raise TypeError("unit_price must be a Price")
        if not initial_quantity.is_positive():
            raise InvalidQuantityError("lot initial quantity must be positive")
        if remaining_quantity > initial_quantity:
            raise InvalidQuantityError(
                f"lot remaining quantity {remaining_quantity} exceeds initial quantity {initial_quantity}"
            )

        self._lot_id = domain_require_identifier(lot_id, "lot_id")
        self._initial_quantity = initial_quantity
        self._remaining_quantity = remaining_quantity
        self._unit_price = unit_price
        self._purchased_at_utc = domain_require_utc_timestamp(purchased_at_utc, "purchased_at_utc")

    @classmethod
    def open(
        cls,
        quantity: ShareQuantity,
        unit_price: Price,
        purchased_at_utc: datetime | None = None,
    ) -> Lot:
        """Create a fresh lot whose remaining quantity equals its initial quantity.

        Args:
            quantity: Units bought.
            unit_price: Purchase price per unit.
            purchased_at_utc: Optional purchase timestamp, defaults to now.

        Returns:
            Lot: New lot with a generated identifier.

        Raises:
            InvalidQuantityError: Raised when quantity is not positive.
        """

        return cls(
            lot_id=domain_generate_identifier(),
            initial_quantity=quantity,
            remaining_quantity=quantity,
            unit_price=unit_price,
            purchased_at_utc=purchased_at_utc or domain_utc_now(),
        )

    @property
    def lot_id(self) -> str:
        return self._lot_id

    @property
    def initial_quantity(self) -> ShareQuantity:
        return self._initial_quantity

    @property
    def remaining_quantity(self) -> ShareQuantity:
        return self._remaining_quantity

    @property
    def unit_price(self) -> Price:
        return self._unit_price

    @property
    def purchased_at_utc(self) -> datetime:
        return self._purchased_at_utc

    def is_empty(self) -> bool:
        return self._remaining_quantity.is_zero()

    def cost_of(self, quantity: ShareQuantity) -> Money:
        """Return the purchase cost attributed to `quantity` units of this lot."""

        return self._unit_price.multiply(quantity)

    def reduce(self, quantity: ShareQuantity) -> None:
        """Consume units from the remaining quantity.

        Args:
            quantity: Units taken from this lot.

        Raises:
            ConflictQuantityError: Raised when quantity exceeds the remaining units.
        """

        if quantity > self._remaining_quantity:
            raise ConflictQuantityError(
                f"cannot reduce lot {self._lot_id} by {quantity}, remaining {self._remaining_quantity}"
            )
        self._remaining_quantity = self._remaining_quantity - quantity

    def snapshot(self) -> LotSnapshot:
        return LotSnapshot(
            lot_id=self._lot_id,
            initial_quantity=self._initial_quantity,
            remaining_quantity=self._remaining_quantity,
            unit_price=self._unit_price,
            purchased_at_utc=self._purchased_at_utc,
        )

    def __repr__(self) -> str:
        return (
            f"Lot(lot_id={self._lot_id!r}, initial={self._initial_quantity}, "
            f"remaining={self._remaining_quantity}, unit_price={self._unit_price})"
        )


__all__ = ["Lot", "LotSnapshot"]
