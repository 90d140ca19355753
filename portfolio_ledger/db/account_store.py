"""Database service for account aggregate persistence with optimistic versioning."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from sqlalchemy import BigInteger, Engine, Integer, Text, bindparam, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from portfolio_ledger.domain import (
    Account,
    AccountNotFoundError,
    DuplicateEntityError,
    HoldingSnapshot,
    LotSnapshot,
    Money,
    Price,
    ShareQuantity,
    Symbol,
)

from .interfaces import AccountRepositoryPort, ConcurrentModificationError
from .schema import MONEY_TYPE, TIMESTAMP_TYPE, db_read_utc_timestamp

_ACCOUNT_COLUMNS = {
    "account_id": Text(),
    "owner_name": Text(),
    "balance": MONEY_TYPE,
    "created_at_utc": TIMESTAMP_TYPE,
    "version": Integer(),
}

_LOT_COLUMNS = {
    "holding_id": Text(),
    "lot_id": Text(),
    "initial_quantity": BigInteger(),
    "remaining_quantity": BigInteger(),
    "unit_price": MONEY_TYPE,
    "purchased_at_utc": TIMESTAMP_TYPE,
}

_INSERT_ACCOUNT_SQL = text(
    "INSERT INTO account (account_id, owner_name, balance, created_at_utc, version) "
    "VALUES (:account_id, :owner_name, :balance, :created_at_utc, :version)"
).bindparams(
    bindparam("balance", type_=MONEY_TYPE),
    bindparam("created_at_utc", type_=TIMESTAMP_TYPE),
)

_UPDATE_ACCOUNT_SQL = text(
    "UPDATE account SET balance = :balance, version = version + 1 "
    "WHERE account_id = :account_id AND version = :expected_version"
).bindparams(bindparam("balance", type_=MONEY_TYPE))

_INSERT_HOLDING_SQL = text(
    "INSERT INTO holding (holding_id, account_id, symbol) VALUES (:holding_id, :account_id, :symbol)"
)

_INSERT_LOT_SQL = text(
    "INSERT INTO lot ("
    "lot_id, holding_id, position_index, initial_quantity, remaining_quantity, unit_price, purchased_at_utc"
    ") VALUES ("
    ":lot_id, :holding_id, :position_index, :initial_quantity, :remaining_quantity, :unit_price, :purchased_at_utc"
    ")"
).bindparams(
    bindparam("unit_price", type_=MONEY_TYPE),
    bindparam("purchased_at_utc", type_=TIMESTAMP_TYPE),
)

_SELECT_ACCOUNT_SQL = text(
    "SELECT account_id, owner_name, balance, created_at_utc, version "
    "FROM account "
    "WHERE account_id = :account_id"
).columns(**_ACCOUNT_COLUMNS)

_LIST_ACCOUNTS_SQL = text(
    "SELECT account_id, owner_name, balance, created_at_utc, version "
    "FROM account "
    "ORDER BY created_at_utc ASC, account_id ASC "
    "LIMIT :limit OFFSET :offset"
).columns(**_ACCOUNT_COLUMNS)

_SELECT_HOLDINGS_SQL = text(
    "SELECT holding_id, symbol "
    "FROM holding "
    "WHERE account_id = :account_id "
    "ORDER BY symbol ASC"
).columns(holding_id=Text(), symbol=Text())

_SELECT_LOTS_SQL = text(
    "SELECT lot.holding_id, lot.lot_id, lot.initial_quantity, lot.remaining_quantity, "
    "lot.unit_price, lot.purchased_at_utc "
    "FROM lot "
    "JOIN holding ON holding.holding_id = lot.holding_id "
    "WHERE holding.account_id = :account_id "
    "ORDER BY lot.holding_id ASC, lot.position_index ASC"
).columns(**_LOT_COLUMNS)


class SQLAlchemyAccountRepository(AccountRepositoryPort):
    """SQLAlchemy-backed account repository.

    An account is stored as one `account` row plus its `holding` and `lot`
    rows. Saving rewrites the holding and lot rows inside the same transaction
    that advances the account version, so a stale writer never overwrites
    newer state.
    """

    def __init__(self, engine: Engine):
        """Initialize account persistence service.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.

        Returns:
            None: This initializer does not return a value.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_account_create(self, account: Account) -> None:
        """Insert a new account together with any holdings it already carries.

        Args:
            account: New account aggregate.

        Returns:
            None: Persisted as side effect.

        Raises:
            DuplicateEntityError: Raised when the account id already exists.
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    _INSERT_ACCOUNT_SQL,
                    {
                        "account_id": account.account_id,
                        "owner_name": account.owner_name,
                        "balance": account.balance.amount,
                        "created_at_utc": account.created_at_utc,
                        "version": account.version,
                    },
                )
                self._db_insert_holdings_and_lots(connection=connection, account=account)
        except IntegrityError as error:
            raise DuplicateEntityError(f"account {account.account_id} already exists") from error
        except SQLAlchemyError as error:
            raise RuntimeError("failed to create account") from error

    def db_account_get_by_id(self, account_id: str) -> Account | None:
        """Load one account with its holdings and lots in FIFO order.

        Args:
            account_id: Account identifier.

        Returns:
            Account | None: Reconstructed aggregate, or None when absent.

        Raises:
            ValueError: Raised when account_id is blank.
            RuntimeError: Raised when database read fails.
        """

        normalized_account_id = self._validate_non_empty_text(account_id, "account_id")

        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    _SELECT_ACCOUNT_SQL,
                    {"account_id": normalized_account_id},
                ).mappings().first()
                if row is None:
                    return None
                return self._db_load_account(connection=connection, account_row=row)
        except SQLAlchemyError as error:
            raise RuntimeError("failed to fetch account by id") from error

    def db_account_list(self, limit: int, offset: int) -> list[Account]:
        """List accounts with deterministic ordering.

        Args:
            limit: Maximum number of accounts.
            offset: Number of accounts to skip.

        Returns:
            list[Account]: Ordered reconstructed aggregates.

        Raises:
            ValueError: Raised when limit or offset are invalid.
            RuntimeError: Raised when database read fails.
        """

        if limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    _LIST_ACCOUNTS_SQL,
                    {"limit": limit, "offset": offset},
                ).mappings().all()
                return [self._db_load_account(connection=connection, account_row=row) for row in rows]
        except SQLAlchemyError as error:
            raise RuntimeError("failed to list accounts") from error

    def db_account_save(self, account: Account) -> None:
        """Persist balance, holdings and lots guarded by the loaded version.

        Args:
            account: Loaded and mutated account aggregate.

        Returns:
            None: Persisted as side effect; `account.version` is advanced.

        Raises:
            AccountNotFoundError: Raised when the account was never created.
            ConcurrentModificationError: Raised when another writer saved first.
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                update_result = connection.execute(
                    _UPDATE_ACCOUNT_SQL,
                    {
                        "balance": account.balance.amount,
                        "account_id": account.account_id,
                        "expected_version": account.version,
                    },
                )
                if update_result.rowcount != 1:
                    existing_row = connection.execute(
                        text("SELECT version FROM account WHERE account_id = :account_id"),
                        {"account_id": account.account_id},
                    ).first()
                    if existing_row is None:
                        raise AccountNotFoundError(account.account_id)
                    raise ConcurrentModificationError(
                        f"account {account.account_id} was modified concurrently: "
                        f"expected version {account.version}, stored version {existing_row[0]}"
                    )

                connection.execute(
                    text(
                        "DELETE FROM lot WHERE holding_id IN ("
                        "SELECT holding_id FROM holding WHERE account_id = :account_id"
                        ")"
                    ),
                    {"account_id": account.account_id},
                )
                connection.execute(
                    text("DELETE FROM holding WHERE account_id = :account_id"),
                    {"account_id": account.account_id},
                )
                self._db_insert_holdings_and_lots(connection=connection, account=account)
        except SQLAlchemyError as error:
            raise RuntimeError("failed to save account") from error

        account.version += 1

    def _db_insert_holdings_and_lots(self, connection, account: Account) -> None:
        """Insert holding and lot rows for every holding of the account.

        Args:
            connection: Active SQLAlchemy connection inside a transaction.
            account: Account whose holdings are written.

        Returns:
            None: Rows are written as side effect.

        Raises:
            SQLAlchemyError: Raised when an insert fails.
        """

        holding_rows: list[dict[str, Any]] = []
        lot_rows: list[dict[str, Any]] = []
        for holding in account.holdings():
            holding_rows.append(
                {
                    "holding_id": holding.holding_id,
                    "account_id": account.account_id,
                    "symbol": holding.symbol.value,
                }
            )
            for position_index, lot in enumerate(holding.lots):
                lot_rows.append(
                    {
                        "lot_id": lot.lot_id,
                        "holding_id": holding.holding_id,
                        "position_index": position_index,
                        "initial_quantity": lot.initial_quantity.value,
                        "remaining_quantity": lot.remaining_quantity.value,
                        "unit_price": lot.unit_price.value,
                        "purchased_at_utc": lot.purchased_at_utc,
                    }
                )

        if holding_rows:
            connection.execute(_INSERT_HOLDING_SQL, holding_rows)
        if lot_rows:
            connection.execute(_INSERT_LOT_SQL, lot_rows)

    def _db_load_account(self, connection, account_row: Any) -> Account:
        """Reconstruct one account aggregate from its row and child rows.

        Args:
            connection: Active SQLAlchemy connection.
            account_row: Mapping row from the `account` table.

        Returns:
            Account: Reconstructed aggregate.

        Raises:
            DuplicateEntityError: Raised when stored rows repeat a holding or lot.
        """

        account_id = account_row["account_id"]
        lots_by_holding: dict[str, list[LotSnapshot]] = defaultdict(list)
        lot_rows = connection.execute(
            _SELECT_LOTS_SQL,
            {"account_id": account_id},
        ).mappings().all()
        for lot_row in lot_rows:
            lots_by_holding[lot_row["holding_id"]].append(self._map_lot(lot_row))

        holding_rows = connection.execute(
            _SELECT_HOLDINGS_SQL,
            {"account_id": account_id},
        ).mappings().all()
        holdings = [
            HoldingSnapshot(
                holding_id=holding_row["holding_id"],
                symbol=Symbol(holding_row["symbol"]),
                lots=tuple(lots_by_holding.get(holding_row["holding_id"], [])),
            )
            for holding_row in holding_rows
        ]

        return Account.restore(
            account_id=account_id,
            owner_name=account_row["owner_name"],
            balance=Money.of(account_row["balance"]),
            created_at_utc=db_read_utc_timestamp(account_row["created_at_utc"]),
            version=int(account_row["version"]),
            holdings=holdings,
        )

    def _map_lot(self, row: Any) -> LotSnapshot:
        """Map SQLAlchemy row mapping to lot snapshot data.

        Args:
            row: SQLAlchemy mapping row.

        Returns:
            LotSnapshot: Stored lot values.
        """

        return LotSnapshot(
            lot_id=row["lot_id"],
            initial_quantity=ShareQuantity(int(row["initial_quantity"])),
            remaining_quantity=ShareQuantity(int(row["remaining_quantity"])),
            unit_price=Price.of(row["unit_price"]),
            purchased_at_utc=db_read_utc_timestamp(row["purchased_at_utc"]),
        )

    def _validate_non_empty_text(self, value: str, field_name: str) -> str:
        """Validate required text input and return stripped value.

        Args:
            value: Candidate string value.
            field_name: Field name for error reporting.

        Returns:
            str: Stripped non-empty value.

        Raises:
            ValueError: Raised when value is blank.
        """

        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError(f"{field_name} must not be blank")
        return stripped_value


__all__ = ["SQLAlchemyAccountRepository"]
