from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from finsync.core.database import Base


class QboAccount(Base):
    """A chart-of-accounts entry mirrored from QuickBooks Online."""
    __tablename__ = "qbo_accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)   # QBO Account.Id
    name: Mapped[str | None] = mapped_column(String(255))
    account_type: Mapped[str | None] = mapped_column(String(100))
    account_subtype: Mapped[str | None] = mapped_column(String(100))
    fully_qualified_name: Mapped[str | None] = mapped_column(String(500))
    active: Mapped[bool | None] = mapped_column(Boolean)
    current_balance: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class QboJournalEntry(Base):
    __tablename__ = "qbo_journal_entries"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    txn_date: Mapped[date | None] = mapped_column(Date, index=True)
    doc_number: Mapped[str | None] = mapped_column(String(50))
    private_note: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class QboJournalEntryLine(Base):
    """One debit/credit line of a journal entry, keyed by (entry id, line id)."""
    __tablename__ = "qbo_journal_entry_lines"

    journal_entry_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("qbo_journal_entries.id"), primary_key=True
    )
    line_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    account_id: Mapped[str | None] = mapped_column(String(64), index=True)
    description: Mapped[str | None] = mapped_column(Text)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    posting_type: Mapped[str | None] = mapped_column(String(10))   # Debit / Credit
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
