import datetime as dt
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Numeric, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from finsync.core.database import Base


class PlaidAccount(Base):
    """A bank account linked through Plaid."""
    __tablename__ = "plaid_accounts"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)   # Plaid account_id
    name: Mapped[str | None] = mapped_column(String(255))
    mask: Mapped[str | None] = mapped_column(String(10))              # last 4 digits
    official_name: Mapped[str | None] = mapped_column(String(255))
    type: Mapped[str | None] = mapped_column(String(50))              # depository, credit, loan, investment
    subtype: Mapped[str | None] = mapped_column(String(50))
    current_balance: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    available_balance: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True))


class PlaidTransaction(Base):
    __tablename__ = "plaid_transactions"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)   # Plaid transaction_id
    account_id: Mapped[str] = mapped_column(String(255), index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    name: Mapped[str | None] = mapped_column(String(500))
    merchant_name: Mapped[str | None] = mapped_column(String(255))
    payment_channel: Mapped[str | None] = mapped_column(String(50))
    pending: Mapped[bool] = mapped_column(Boolean, default=False)
    category: Mapped[list[str] | None] = mapped_column(ARRAY(String))
    category_id: Mapped[str | None] = mapped_column(String(50))
    personal_finance_category: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True))
