"""Monetary and share-count value types for the accounting core.

All money-like values are exact decimals normalized to two fractional digits
with round-half-up on every construction and arithmetic result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final

from .errors import InvalidAmountError, InvalidQuantityError, InvalidSymbolError

MONEY_SCALE: Final[int] = 2
_MONEY_QUANTUM: Final[Decimal] = Decimal(1).scaleb(-MONEY_SCALE)
_SYMBOL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z]{1,5}$")

DecimalInput = Decimal | int | float | str


def values_normalize_decimal(value: DecimalInput, field_name: str) -> Decimal:
    """Convert a primitive decimal input into a scale-2 decimal.

    Args:
        value: Decimal, integer, float, or decimal string input.
        field_name: Field label used in error messages.

    Returns:
        Decimal: Value quantized to two fractional digits with round-half-up.

    Raises:
        InvalidAmountError: Raised when value is not a finite decimal number or is
            too large to hold two fractional digits.
    """

    if isinstance(value, bool):
        raise InvalidAmountError(f"{field_name} must be a decimal number, got bool")
    if isinstance(value, Decimal):
        decimal_value = value
    elif isinstance(value, int):
        decimal_value = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the shortest repr so 0.1 becomes Decimal("0.1")
        decimal_value = Decimal(str(value))
    elif isinstance(value, str):
        try:
            decimal_value = Decimal(value.strip())
        except InvalidOperation as error:
            raise InvalidAmountError(f"{field_name} is not a decimal number: {value!r}") from error
    else:
        raise InvalidAmountError(f"{field_name} has unsupported type {type(value).__name__}")

    if not decimal_value.is_finite():
        raise InvalidAmountError(f"{field_name} must be finite: {value!r}")
    try:
        return decimal_value.quantize(_MONEY_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as error:
        raise InvalidAmountError(f"{field_name} is out of range: {value!r}") from error


@dataclass(frozen=True, order=True)
class Money:
    """Fixed-scale monetary amount in the single implicit account currency.

    Attributes:
        amount: Decimal amount, always scale 2.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", values_normalize_decimal(self.amount, "amount"))

    @classmethod
    def of(cls, value: DecimalInput) -> Money:
        """Build money from a primitive decimal input."""

        return cls(value)

    @classmethod
    def of_parts(cls, dollars: int, cents: int) -> Money:
        """Build money from whole units and hundredths."""

        return cls(Decimal(dollars) + Decimal(cents).scaleb(-MONEY_SCALE))

    @classmethod
    def zero(cls) -> Money:
        """Return the zero amount."""

        return cls(Decimal(0))

    def __add__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount + other.amount)

    def __sub__(self, other: object) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.amount - other.amount)

    def __mul__(self, multiplier: object) -> Money:
        if isinstance(multiplier, ShareQuantity):
            return Money(self.amount * multiplier.value)
        if isinstance(multiplier, int) and not isinstance(multiplier, bool):
            return Money(self.amount * multiplier)
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> Money:
        return Money(-self.amount)

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return format(self.amount, "f")


@dataclass(frozen=True, order=True)
class Price:
    """Strictly positive per-unit instrument price.

    Attributes:
        value: Decimal unit price, always scale 2 and greater than zero.
    """

    value: Decimal

    def __post_init__(self) -> None:
        normalized_value = values_normalize_decimal(self.value, "price")
        if normalized_value <= 0:
            raise InvalidAmountError(f"price must be positive: {self.value}")
        object.__setattr__(self, "value", normalized_value)

    @classmethod
    def of(cls, value: DecimalInput) -> Price:
        """Build a price from a primitive decimal input."""

        return cls(value)

    def multiply(self, quantity: ShareQuantity) -> Money:
        """Return the total amount for `quantity` units at this price.

        Args:
            quantity: Number of units.

        Returns:
            Money: Rounded total amount.

        Raises:
            TypeError: Raised when quantity is not a ShareQuantity.
        """

        if not isinstance(quantity, ShareQuantity):
            raise TypeError("quantity must be a ShareQuantity")
        return Money(self.value * quantity.value)

    def __mul__(self, quantity: object) -> Money:
        if not isinstance(quantity, ShareQuantity):
            return NotImplemented
        return self.multiply(quantity)

    def to_money(self) -> Money:
        return Money(self.value)

    def __str__(self) -> str:
        return format(self.value, "f")


@dataclass(frozen=True, order=True)
class ShareQuantity:
    """Non-negative integer count of instrument units.

    Subtraction underflow is a programming error (`ValueError`), callers are
    expected to clamp with `min` before subtracting.

    Attributes:
        value: Unit count.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidQuantityError(f"share quantity must be an integer: {self.value!r}")
        if self.value < 0:
            raise InvalidQuantityError(f"share quantity cannot be negative: {self.value}")

    @classmethod
    def of(cls, value: int) -> ShareQuantity:
        return cls(value)

    @classmethod
    def positive(cls, value: int) -> ShareQuantity:
        """Build a quantity that must hold at least one unit.

        Args:
            value: Unit count.

        Returns:
            ShareQuantity: Validated positive quantity.

        Raises:
            InvalidQuantityError: Raised when value is not strictly positive.
        """

        quantity = cls(value)
        if quantity.value == 0:
            raise InvalidQuantityError(f"quantity must be positive: {value}")
        return quantity

    @classmethod
    def zero(cls) -> ShareQuantity:
        return cls(0)

    def __add__(self, other: object) -> ShareQuantity:
        if not isinstance(other, ShareQuantity):
            return NotImplemented
        return ShareQuantity(self.value + other.value)

    def __sub__(self, other: object) -> ShareQuantity:
        if not isinstance(other, ShareQuantity):
            return NotImplemented
        if other.value > self.value:
            raise ValueError(f"share quantity underflow: {self.value} - {other.value}")
        return ShareQuantity(self.value - other.value)

    def min(self, other: ShareQuantity) -> ShareQuantity:
        return self if self.value <= other.value else other

    def is_zero(self) -> bool:
        return self.value == 0

    def is_positive(self) -> bool:
        return self.value > 0

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Symbol:
    """Instrument ticker symbol made of one to five uppercase letters.

    Attributes:
        value: Validated ticker text.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidSymbolError("symbol must not be blank")
        if not _SYMBOL_PATTERN.fullmatch(self.value):
            raise InvalidSymbolError(f"invalid symbol: {self.value}")

    @classmethod
    def of(cls, value: str) -> Symbol:
        return cls(value)

    def __str__(self) -> str:
        return self.value


__all__ = [
    "DecimalInput",
    "MONEY_SCALE",
    "Money",
    "Price",
    "ShareQuantity",
    "Symbol",
    "values_normalize_decimal",
]
