"""Database layer package for all SQL and persistence boundaries."""

from .account_store import SQLAlchemyAccountRepository
from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
	AccountRepositoryPort,
	ConcurrentModificationError,
	DatabaseHealthPort,
	HealthStatus,
	LedgerEntryRepositoryPort,
)
from .ledger_store import SQLAlchemyLedgerEntryRepository
from .memory import (
	InMemoryAccountRepository,
	InMemoryDatabaseHealthService,
	InMemoryLedgerEntryRepository,
	db_memory_clone_account,
)
from .schema import db_create_schema, db_metadata
from .session import db_create_engine

__all__ = [
	"AccountRepositoryPort",
	"ConcurrentModificationError",
	"DatabaseHealthPort",
	"HealthStatus",
	"InMemoryAccountRepository",
	"InMemoryDatabaseHealthService",
	"InMemoryLedgerEntryRepository",
	"LedgerEntryRepositoryPort",
	"SQLAlchemyAccountRepository",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyLedgerEntryRepository",
	"db_create_engine",
	"db_create_schema",
	"db_memory_clone_account",
	"db_metadata",
]
