"""Portfolio ledger schema baseline

Revision ID: 20261018_01
Revises: None
Create Date: 2026-10-18
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "account",
        sa.Column("account_id", sa.Text(), primary_key=True),
        sa.Column("owner_name", sa.Text(), nullable=False),
        sa.Column("balance", sa.Numeric(precision=19, scale=2), nullable=False),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("balance >= 0", name="ck_account_balance_non_negative"),
    )
    op.create_index("ix_account_created_at_utc", "account", ["created_at_utc"])

    op.create_table(
        "holding",
        sa.Column("holding_id", sa.Text(), primary_key=True),
        sa.Column(
            "account_id",
            sa.Text(),
            sa.ForeignKey("account.account_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("symbol", sa.Text(), nullable=False),
        sa.UniqueConstraint("account_id", "symbol", name="uq_holding_account_symbol"),
    )

    op.create_table(
        "lot",
        sa.Column("lot_id", sa.Text(), primary_key=True),
        sa.Column(
            "holding_id",
            sa.Text(),
            sa.ForeignKey("holding.holding_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position_index", sa.Integer(), nullable=False),
        sa.Column("initial_quantity", sa.BigInteger(), nullable=False),
        sa.Column("remaining_quantity", sa.BigInteger(), nullable=False),
        sa.Column("unit_price", sa.Numeric(precision=19, scale=2), nullable=False),
        sa.Column("purchased_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("holding_id", "position_index", name="uq_lot_holding_position"),
        sa.CheckConstraint("initial_quantity > 0", name="ck_lot_initial_quantity_positive"),
        sa.CheckConstraint(
            "remaining_quantity >= 0 AND remaining_quantity <= initial_quantity",
            name="ck_lot_remaining_quantity_range",
        ),
        sa.CheckConstraint("unit_price > 0", name="ck_lot_unit_price_positive"),
    )

    op.create_table(
        "ledger_entry",
        sa.Column("sequence", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("entry_id", sa.Text(), nullable=False),
        sa.Column(
            "account_id",
            sa.Text(),
            sa.ForeignKey("account.account_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("symbol", sa.Text(), nullable=True),
        sa.Column("quantity", sa.BigInteger(), nullable=False),
        sa.Column("unit_price", sa.Numeric(precision=19, scale=2), nullable=True),
        sa.Column("total_amount", sa.Numeric(precision=19, scale=2), nullable=False),
        sa.Column("profit", sa.Numeric(precision=19, scale=2), nullable=False),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("entry_id", name="uq_ledger_entry_entry_id"),
        sa.CheckConstraint(
            "kind in ('DEPOSIT', 'WITHDRAWAL', 'PURCHASE', 'SALE')",
            name="ck_ledger_entry_kind",
        ),
    )
    op.create_index("ix_ledger_entry_account_created", "ledger_entry", ["account_id", "created_at_utc"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_ledger_entry_account_created", table_name="ledger_entry")
    op.drop_table("ledger_entry")
    op.drop_table("lot")
    op.drop_table("holding")
    op.drop_index("ix_account_created_at_utc", table_name="account")
    op.drop_table("account")
