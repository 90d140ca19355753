"""Application service layer orchestrating domain, storage and price adapters."""

from .account_writes import AccountLockRegistry, AccountWriteCoordinator
from .portfolio_management import PortfolioManagementService
from .price_lookup import PriceLookupService
from .reporting import ReportingService
from .stock_operations import StockOperationsService
from .transactions import TransactionService

__all__ = [
	"AccountLockRegistry",
	"AccountWriteCoordinator",
	"PortfolioManagementService",
	"PriceLookupService",
	"ReportingService",
	"StockOperationsService",
	"TransactionService",
]
