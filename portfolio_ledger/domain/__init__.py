"""Accounting-core domain model: value types, entities and the account aggregate."""

from .account import Account
from .errors import (
	AccountNotFoundError,
	ConflictQuantityError,
	DomainError,
	DuplicateEntityError,
	HoldingNotFoundError,
	InsufficientFundsError,
	InvalidAmountError,
	InvalidQuantityError,
	InvalidSymbolError,
)
from .holding import Holding, HoldingSnapshot, SellResult
from .identity import domain_generate_identifier, domain_utc_now
from .ledger_entry import LedgerEntry, LedgerEntryKind
from .lot import Lot, LotSnapshot
from .stock_price import StockPrice
from .values import Money, Price, ShareQuantity, Symbol

__all__ = [
	"Account",
	"AccountNotFoundError",
	"ConflictQuantityError",
	"DomainError",
	"DuplicateEntityError",
	"Holding",
	"HoldingNotFoundError",
	"HoldingSnapshot",
	"InsufficientFundsError",
	"InvalidAmountError",
	"InvalidQuantityError",
	"InvalidSymbolError",
	"LedgerEntry",
	"LedgerEntryKind",
	"Lot",
	"LotSnapshot",
	"Money",
	"Price",
	"SellResult",
	"ShareQuantity",
	"StockPrice",
	"Symbol",
	"domain_generate_identifier",
	"domain_utc_now",
]
