"""Database service for the append-only ledger entry log."""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Engine, Text, bindparam, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from portfolio_ledger.domain import (
    DuplicateEntityError,
    LedgerEntry,
    LedgerEntryKind,
    Money,
    Price,
    ShareQuantity,
    Symbol,
)

from .interfaces import LedgerEntryRepositoryPort
from .schema import MONEY_TYPE, TIMESTAMP_TYPE, db_read_utc_timestamp

_INSERT_LEDGER_ENTRY_SQL = text(
    "INSERT INTO ledger_entry ("
    "entry_id, account_id, kind, symbol, quantity, unit_price, total_amount, profit, created_at_utc"
    ") VALUES ("
    ":entry_id, :account_id, :kind, :symbol, :quantity, :unit_price, :total_amount, :profit, :created_at_utc"
    ")"
).bindparams(
    bindparam("unit_price", type_=MONEY_TYPE),
    bindparam("total_amount", type_=MONEY_TYPE),
    bindparam("profit", type_=MONEY_TYPE),
    bindparam("created_at_utc", type_=TIMESTAMP_TYPE),
)

_SELECT_LEDGER_ENTRIES_SQL = text(
    "SELECT entry_id, account_id, kind, symbol, quantity, unit_price, total_amount, profit, created_at_utc "
    "FROM ledger_entry "
    "WHERE account_id = :account_id "
    "ORDER BY created_at_utc ASC, sequence ASC"
).columns(
    entry_id=Text(),
    account_id=Text(),
    kind=Text(),
    symbol=Text(),
    quantity=BigInteger(),
    unit_price=MONEY_TYPE,
    total_amount=MONEY_TYPE,
    profit=MONEY_TYPE,
    created_at_utc=TIMESTAMP_TYPE,
)


class SQLAlchemyLedgerEntryRepository(LedgerEntryRepositoryPort):
    """SQLAlchemy-backed ledger entry repository.

    Entries are insert-only; no update or delete statement exists for the
    `ledger_entry` table.
    """

    def __init__(self, engine: Engine):
        """Initialize ledger persistence service.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_ledger_entry_append(self, entry: LedgerEntry) -> None:
        """Insert one ledger entry.

        Args:
            entry: Completed operation record.

        Returns:
            None: Persisted as side effect.

        Raises:
            DuplicateEntityError: Raised when the entry id already exists.
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    _INSERT_LEDGER_ENTRY_SQL,
                    {
                        "entry_id": entry.entry_id,
                        "account_id": entry.account_id,
                        "kind": entry.kind.value,
                        "symbol": entry.symbol.value if entry.symbol is not None else None,
                        "quantity": entry.quantity.value,
                        "unit_price": entry.unit_price.value if entry.unit_price is not None else None,
                        "total_amount": entry.total_amount.amount,
                        "profit": entry.profit.amount,
                        "created_at_utc": entry.created_at_utc,
                    },
                )
        except IntegrityError as error:
            raise DuplicateEntityError(f"ledger entry {entry.entry_id} already exists") from error
        except SQLAlchemyError as error:
            raise RuntimeError("failed to append ledger entry") from error

    def db_ledger_entry_list_for_account(self, account_id: str) -> list[LedgerEntry]:
        """List all ledger entries of one account in chronological order.

        Args:
            account_id: Account identifier.

        Returns:
            list[LedgerEntry]: Entries ordered by timestamp then insertion order.

        Raises:
            ValueError: Raised when account_id is blank.
            RuntimeError: Raised when database read fails.
        """

        if not account_id.strip():
            raise ValueError("account_id must not be blank")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    _SELECT_LEDGER_ENTRIES_SQL,
                    {"account_id": account_id.strip()},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("failed to list ledger entries") from error

        return [self._map_ledger_entry(row) for row in rows]

    def _map_ledger_entry(self, row: Any) -> LedgerEntry:
        """Map SQLAlchemy row mapping to an immutable ledger entry.

        Args:
            row: SQLAlchemy mapping row.

        Returns:
            LedgerEntry: Reconstructed entry.

        Raises:
            ValueError: Raised when stored fields are inconsistent.
        """

        symbol_value = row["symbol"]
        unit_price_value = row["unit_price"]
        return LedgerEntry(
            entry_id=row["entry_id"],
            account_id=row["account_id"],
            kind=LedgerEntryKind(row["kind"]),
            symbol=Symbol(symbol_value) if symbol_value is not None else None,
            quantity=ShareQuantity(int(row["quantity"])),
            unit_price=Price.of(unit_price_value) if unit_price_value is not None else None,
            total_amount=Money.of(row["total_amount"]),
            profit=Money.of(row["profit"]),
            created_at_utc=db_read_utc_timestamp(row["created_at_utc"]),
        )


__all__ = ["SQLAlchemyLedgerEntryRepository"]
