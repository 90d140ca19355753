"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import FastAPI

from portfolio_ledger.adapters import (
    AlphaVantagePriceProvider,
    FinnhubPriceProvider,
    MockPriceProvider,
    PriceProviderPort,
)
from portfolio_ledger.api import create_api_application
from portfolio_ledger.config import AppSettings, config_load_settings
from portfolio_ledger.db import (
    AccountRepositoryPort,
    DatabaseHealthPort,
    InMemoryAccountRepository,
    InMemoryDatabaseHealthService,
    InMemoryLedgerEntryRepository,
    LedgerEntryRepositoryPort,
    SQLAlchemyAccountRepository,
    SQLAlchemyDatabaseHealthService,
    SQLAlchemyLedgerEntryRepository,
    db_create_engine,
)
from portfolio_ledger.services import (
    AccountLockRegistry,
    AccountWriteCoordinator,
    PortfolioManagementService,
    PriceLookupService,
    ReportingService,
    StockOperationsService,
    TransactionService,
)

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class StorageComponents:
    """Repositories and health service of one storage backend.

    Attributes:
        account_repository: Account aggregate repository.
        ledger_repository: Ledger entry repository.
        db_health_service: Storage health service.
    """

    account_repository: AccountRepositoryPort
    ledger_repository: LedgerEntryRepositoryPort
    db_health_service: DatabaseHealthPort


def bootstrap_configure_logging(settings: AppSettings) -> None:
    """Configure root logging from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        None: Logging is configured as side effect.

    Raises:
        ValueError: Raised when log level is unknown.
    """

    logging.basicConfig(level=settings.log_level, format=_LOG_FORMAT)


def bootstrap_create_storage(settings: AppSettings) -> StorageComponents:
    """Build repositories for the configured storage backend.

    Args:
        settings: Validated runtime settings.

    Returns:
        StorageComponents: Repositories and health service.

    Raises:
        ValueError: Raised when the database URL is blank.
    """

    if settings.storage_backend == "memory":
        return StorageComponents(
            account_repository=InMemoryAccountRepository(),
            ledger_repository=InMemoryLedgerEntryRepository(),
            db_health_service=InMemoryDatabaseHealthService(),
        )

    engine = db_create_engine(database_url=settings.database_url)
    return StorageComponents(
        account_repository=SQLAlchemyAccountRepository(engine=engine),
        ledger_repository=SQLAlchemyLedgerEntryRepository(engine=engine),
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
    )


def bootstrap_create_price_provider(settings: AppSettings) -> PriceProviderPort:
    """Build the configured live price adapter.

    Args:
        settings: Validated runtime settings.

    Returns:
        PriceProviderPort: Price adapter instance.

    Raises:
        ValueError: Raised when provider configuration is invalid.
    """

    if settings.price_provider == "finnhub":
        return FinnhubPriceProvider(
            api_key=settings.finnhub_api_key or "",
            base_url=settings.finnhub_base_url,
            request_timeout_seconds=settings.price_request_timeout_seconds,
        )
    if settings.price_provider == "alpha_vantage":
        return AlphaVantagePriceProvider(
            api_key=settings.alpha_vantage_api_key or "",
            base_url=settings.alpha_vantage_base_url,
            request_timeout_seconds=settings.price_request_timeout_seconds,
            throttle_seconds=settings.price_throttle_seconds,
            cache_ttl_seconds=settings.price_cache_ttl_seconds,
        )
    return MockPriceProvider()


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings, loaded from environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    storage = bootstrap_create_storage(resolved_settings)
    price_provider = bootstrap_create_price_provider(resolved_settings)
    lock_registry = AccountLockRegistry()
    write_coordinator = AccountWriteCoordinator(
        account_repository=storage.account_repository,
        ledger_repository=storage.ledger_repository,
        lock_registry=lock_registry,
        retry_attempts=resolved_settings.account_write_retry_attempts,
    )
    logger.info(
        "assembling application: environment=%s storage=%s price_provider=%s",
        resolved_settings.environment_name,
        resolved_settings.storage_backend,
        price_provider.adapter_source_name(),
    )
    return create_api_application(
        settings=resolved_settings,
        db_health_service=storage.db_health_service,
        portfolio_service=PortfolioManagementService(
            account_repository=storage.account_repository,
            write_coordinator=write_coordinator,
        ),
        stock_operations_service=StockOperationsService(
            price_provider=price_provider,
            write_coordinator=write_coordinator,
        ),
        reporting_service=ReportingService(
            account_repository=storage.account_repository,
            ledger_repository=storage.ledger_repository,
            price_provider=price_provider,
            lock_registry=lock_registry,
        ),
        transaction_service=TransactionService(
            account_repository=storage.account_repository,
            ledger_repository=storage.ledger_repository,
        ),
        price_lookup_service=PriceLookupService(price_provider=price_provider),
    )


__all__ = [
    "StorageComponents",
    "bootstrap_configure_logging",
    "bootstrap_create_application",
    "bootstrap_create_price_provider",
    "bootstrap_create_storage",
]
