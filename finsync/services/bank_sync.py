"""Plaid bank account + transaction sync, all-or-nothing."""

import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from plaid.api import plaid_api
from plaid.model.accounts_get_request import AccountsGetRequest
from plaid.model.transactions_get_request import TransactionsGetRequest
from plaid.model.transactions_get_request_options import TransactionsGetRequestOptions

from finsync.models.bank import PlaidAccount, PlaidTransaction
from finsync.schemas.sync import BankSyncResult
from finsync.services.store import Store

logger = logging.getLogger(__name__)

LOOKBACK_DAYS = 30
PAGE_SIZE = 500


def _value(v):
    """Plaid enum models carry their string in ``.value``."""
    if v is None:
        return None
    return v.value if hasattr(v, "value") else str(v)


def _decimal(value) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def account_row(pa, now: datetime) -> dict:
    return {
        "id": pa.account_id,
        "name": pa.name,
        "mask": getattr(pa, "mask", None),
        "official_name": getattr(pa, "official_name", None),
        "type": _value(pa.type),
        "subtype": _value(getattr(pa, "subtype", None)),
        "current_balance": _decimal(pa.balances.current),
        "available_balance": _decimal(pa.balances.available),
        "created_at": now,
        "updated_at": now,
    }


def transaction_row(pt, now: datetime) -> dict:
    pfc = getattr(pt, "personal_finance_category", None)
    return {
        "id": pt.transaction_id,
        "account_id": pt.account_id,
        "amount": _decimal(pt.amount),
        "date": pt.date,
        "name": pt.name,
        "merchant_name": getattr(pt, "merchant_name", None),
        "payment_channel": _value(getattr(pt, "payment_channel", None)),
        "pending": pt.pending,
        "category": getattr(pt, "category", None),
        "category_id": getattr(pt, "category_id", None),
        "personal_finance_category": pfc.primary if pfc else None,
        "created_at": now,
        "updated_at": now,
    }


async def _fetch_transactions(client: plaid_api.PlaidApi, access_token: str, start: date, end: date) -> list:
    """Page through /transactions/get until total_transactions is reached."""
    transactions: list = []
    while True:
        request = TransactionsGetRequest(
            access_token=access_token,
            start_date=start,
            end_date=end,
            options=TransactionsGetRequestOptions(
                count=PAGE_SIZE,
                offset=len(transactions),
                include_personal_finance_category=True,
            ),
        )
        resp = await asyncio.to_thread(client.transactions_get, request)
        transactions.extend(resp.transactions)
        if not resp.transactions or len(transactions) >= resp.total_transactions:
            return transactions


async def sync_bank_transactions(
    client: plaid_api.PlaidApi, access_token: str, store: Store
) -> BankSyncResult:
    """Upsert linked accounts and the last 30 days of transactions."""
    try:
        # ── 1. Accounts ──────────────────────────────────────────────
        accts_resp = await asyncio.to_thread(
            client.accounts_get, AccountsGetRequest(access_token=access_token)
        )
        accounts = accts_resp.accounts
        now = datetime.now(timezone.utc)
        await store.upsert(PlaidAccount, [account_row(pa, now) for pa in accounts])
        logger.info("Stored %d Plaid accounts", len(accounts))

        # ── 2. Transactions ──────────────────────────────────────────
        end = datetime.now(timezone.utc).date()
        start = end - timedelta(days=LOOKBACK_DAYS)
        transactions = await _fetch_transactions(client, access_token, start, end)
        now = datetime.now(timezone.utc)
        await store.upsert(PlaidTransaction, [transaction_row(pt, now) for pt in transactions])
        logger.info("Stored %d Plaid transactions (%s → %s)", len(transactions), start, end)
    except Exception:
        logger.exception("Error syncing bank transactions")
        raise

    return BankSyncResult(accounts=len(accounts), transactions=len(transactions))
