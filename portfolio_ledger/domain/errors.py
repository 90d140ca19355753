"""Project-native typed exceptions for accounting-core failures."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for accounting-core rule violations.

    Attributes:
        error_code: Stable machine-readable error code.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code


class InvalidAmountError(DomainError, ValueError):
    """Monetary input was not strictly positive where positivity is required."""

    error_code = "INVALID_AMOUNT"


class InvalidQuantityError(DomainError, ValueError):
    """Share quantity was negative, or not positive where positivity is required."""

    error_code = "INVALID_QUANTITY"


class InvalidSymbolError(DomainError, ValueError):
    """Instrument symbol failed format validation."""

    error_code = "INVALID_SYMBOL"


class InsufficientFundsError(DomainError):
    """Withdrawal or purchase exceeds the available cash balance."""

    error_code = "INSUFFICIENT_FUNDS"


class ConflictQuantityError(DomainError):
    """Sell or lot reduction exceeds the available shares."""

    error_code = "CONFLICT_QUANTITY"


class HoldingNotFoundError(DomainError, LookupError):
    """Operation referenced a holding that does not exist for the account."""

    error_code = "HOLDING_NOT_FOUND"


class DuplicateEntityError(DomainError):
    """Reconstruction tried to insert a holding or lot whose identity already exists."""

    error_code = "DUPLICATE_ENTITY"


class AccountNotFoundError(DomainError, LookupError):
    """Requested account identity is not known to the account store."""

    error_code = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: str):
        super().__init__(f"account not found: {account_id}")
        self.account_id = account_id


__all__ = [
    "AccountNotFoundError",
    "ConflictQuantityError",
    "DomainError",
    "DuplicateEntityError",
    "HoldingNotFoundError",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidQuantityError",
    "InvalidSymbolError",
]
