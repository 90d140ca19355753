"""Relational schema for accounts, holdings, lots and the ledger.

The metadata backs the alembic migration environment and lets tests create
the schema directly on SQLite.
"""

from __future__ import annotations

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

MONEY_TYPE = sa.Numeric(precision=19, scale=2, asdecimal=True)
TIMESTAMP_TYPE = sa.DateTime(timezone=True)

db_metadata = sa.MetaData()

account_table = sa.Table(
    "account",
    db_metadata,
    sa.Column("account_id", sa.Text(), primary_key=True),
    sa.Column("owner_name", sa.Text(), nullable=False),
    sa.Column("balance", MONEY_TYPE, nullable=False),
    sa.Column("created_at_utc", TIMESTAMP_TYPE, nullable=False),
    sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
    sa.CheckConstraint("balance >= 0", name="ck_account_balance_non_negative"),
)
sa.Index("ix_account_created_at_utc", account_table.c.created_at_utc)

holding_table = sa.Table(
    "holding",
    db_metadata,
    sa.Column("holding_id", sa.Text(), primary_key=True),
    sa.Column("account_id", sa.Text(), sa.ForeignKey("account.account_id", ondelete="CASCADE"), nullable=False),
    sa.Column("symbol", sa.Text(), nullable=False),
    sa.UniqueConstraint("account_id", "symbol", name="uq_holding_account_symbol"),
)

lot_table = sa.Table(
    "lot",
    db_metadata,
    sa.Column("lot_id", sa.Text(), primary_key=True),
    sa.Column("holding_id", sa.Text(), sa.ForeignKey("holding.holding_id", ondelete="CASCADE"), nullable=False),
    sa.Column("position_index", sa.Integer(), nullable=False),
    sa.Column("initial_quantity", sa.BigInteger(), nullable=False),
    sa.Column("remaining_quantity", sa.BigInteger(), nullable=False),
    sa.Column("unit_price", MONEY_TYPE, nullable=False),
    sa.Column("purchased_at_utc", TIMESTAMP_TYPE, nullable=False),
    sa.UniqueConstraint("holding_id", "position_index", name="uq_lot_holding_position"),
    sa.CheckConstraint("initial_quantity > 0", name="ck_lot_initial_quantity_positive"),
    sa.CheckConstraint(
        "remaining_quantity >= 0 AND remaining_quantity <= initial_quantity",
        name="ck_lot_remaining_quantity_range",
    ),
    sa.CheckConstraint("unit_price > 0", name="ck_lot_unit_price_positive"),
)

ledger_entry_table = sa.Table(
    "ledger_entry",
    db_metadata,
    sa.Column("sequence", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("entry_id", sa.Text(), nullable=False),
    sa.Column("account_id", sa.Text(), sa.ForeignKey("account.account_id", ondelete="CASCADE"), nullable=False),
    sa.Column("kind", sa.Text(), nullable=False),
    sa.Column("symbol", sa.Text(), nullable=True),
    sa.Column("quantity", sa.BigInteger(), nullable=False),
    sa.Column("unit_price", MONEY_TYPE, nullable=True),
    sa.Column("total_amount", MONEY_TYPE, nullable=False),
    sa.Column("profit", MONEY_TYPE, nullable=False),
    sa.Column("created_at_utc", TIMESTAMP_TYPE, nullable=False),
    sa.UniqueConstraint("entry_id", name="uq_ledger_entry_entry_id"),
    sa.CheckConstraint(
        "kind in ('DEPOSIT', 'WITHDRAWAL', 'PURCHASE', 'SALE')",
        name="ck_ledger_entry_kind",
    ),
)
sa.Index("ix_ledger_entry_account_created", ledger_entry_table.c.account_id, ledger_entry_table.c.created_at_utc)


def db_create_schema(engine: sa.Engine) -> None:
    """Create all tables that do not exist yet.

    Args:
        engine: Target SQLAlchemy engine.

    Returns:
        None: Schema is created as side effect.

    Raises:
        ValueError: Raised when engine is None.
        RuntimeError: Raised when DDL execution fails.
    """

    if engine is None:
        raise ValueError("engine must not be None")
    try:
        db_metadata.create_all(engine)
    except SQLAlchemyError as error:
        raise RuntimeError("failed to create database schema") from error


def db_read_utc_timestamp(value: datetime | str) -> datetime:
    """Normalize one stored timestamp into an offset-aware UTC datetime.

    Backends without timezone support hand back naive values that were
    written in UTC.

    Args:
        value: Timestamp as returned by the driver.

    Returns:
        datetime: Offset-aware UTC timestamp.

    Raises:
        TypeError: Raised when the value is not a timestamp.
    """

    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if not isinstance(value, datetime):
        raise TypeError("stored timestamp must be a datetime")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = [
    "MONEY_TYPE",
    "TIMESTAMP_TYPE",
    "account_table",
    "db_create_schema",
    "db_metadata",
    "db_read_utc_timestamp",
    "holding_table",
    "ledger_entry_table",
    "lot_table",
]
