"""create_sync_tables

Revision ID: a7c1e9d2b4f0
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "a7c1e9d2b4f0"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # ── QuickBooks ledger ──────────────────────────────────────────────────
    op.create_table(
        "qbo_accounts",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("account_type", sa.String(length=100), nullable=True),
        sa.Column("account_subtype", sa.String(length=100), nullable=True),
        sa.Column("fully_qualified_name", sa.String(length=500), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=True),
        sa.Column("current_balance", sa.Numeric(precision=14, scale=2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "qbo_journal_entries",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("txn_date", sa.Date(), nullable=True),
        sa.Column("doc_number", sa.String(length=50), nullable=True),
        sa.Column("private_note", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_qbo_journal_entries_txn_date"), "qbo_journal_entries", ["txn_date"], unique=False)
    op.create_table(
        "qbo_journal_entry_lines",
        sa.Column("journal_entry_id", sa.String(length=64), nullable=False),
        sa.Column("line_id", sa.String(length=64), nullable=False),
        sa.Column("account_id", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("posting_type", sa.String(length=10), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["journal_entry_id"], ["qbo_journal_entries.id"]),
        sa.PrimaryKeyConstraint("journal_entry_id", "line_id"),
    )
    op.create_index(op.f("ix_qbo_journal_entry_lines_account_id"), "qbo_journal_entry_lines", ["account_id"], unique=False)

    # ── Plaid ──────────────────────────────────────────────────────────────
    op.create_table(
        "plaid_accounts",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("mask", sa.String(length=10), nullable=True),
        sa.Column("official_name", sa.String(length=255), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=True),
        sa.Column("subtype", sa.String(length=50), nullable=True),
        sa.Column("current_balance", sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column("available_balance", sa.Numeric(precision=14, scale=2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "plaid_transactions",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=500), nullable=True),
        sa.Column("merchant_name", sa.String(length=255), nullable=True),
        sa.Column("payment_channel", sa.String(length=50), nullable=True),
        sa.Column("pending", sa.Boolean(), nullable=False),
        sa.Column("category", postgresql.ARRAY(sa.String()), nullable=True),
        sa.Column("category_id", sa.String(length=50), nullable=True),
        sa.Column("personal_finance_category", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_plaid_transactions_account_id"), "plaid_transactions", ["account_id"], unique=False)
    op.create_index(op.f("ix_plaid_transactions_date"), "plaid_transactions", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_plaid_transactions_date"), table_name="plaid_transactions")
    op.drop_index(op.f("ix_plaid_transactions_account_id"), table_name="plaid_transactions")
    op.drop_table("plaid_transactions")
    op.drop_table("plaid_accounts")
    op.drop_index(op.f("ix_qbo_journal_entry_lines_account_id"), table_name="qbo_journal_entry_lines")
    op.drop_table("qbo_journal_entry_lines")
    op.drop_index(op.f("ix_qbo_journal_entries_txn_date"), table_name="qbo_journal_entries")
    op.drop_table("qbo_journal_entries")
    op.drop_table("qbo_accounts")
