"""QuickBooks general ledger sync.

Accounts are written as one batch; journal entries one at a time so a bad
entry only costs that entry. Fetch failures abort the whole run.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from finsync.models.ledger import QboAccount, QboJournalEntry, QboJournalEntryLine
from finsync.schemas.sync import LedgerSyncResult
from finsync.services.quickbooks import QuickBooksClient
from finsync.services.store import Store

logger = logging.getLogger(__name__)

LOOKBACK_DAYS = 90


def _decimal(value) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def _date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def account_row(account: dict, now: datetime) -> dict:
    return {
        "id": account["Id"],
        "name": account.get("Name"),
        "account_type": account.get("AccountType"),
        "account_subtype": account.get("AccountSubType"),
        "fully_qualified_name": account.get("FullyQualifiedName"),
        "active": account.get("Active"),
        "current_balance": _decimal(account.get("CurrentBalance")),
        "created_at": now,
        "updated_at": now,
    }


def journal_entry_row(entry: dict, now: datetime) -> dict:
    return {
        "id": entry["Id"],
        "txn_date": _date(entry.get("TxnDate")),
        "doc_number": entry.get("DocNumber"),
        "private_note": entry.get("PrivateNote"),
        "created_at": now,
        "updated_at": now,
    }


def journal_line_rows(entry: dict, now: datetime) -> list[dict]:
    rows = []
    for line in entry.get("Line") or []:
        detail = line.get("JournalEntryLineDetail") or {}
        rows.append({
            "journal_entry_id": entry["Id"],
            "line_id": line.get("Id"),
            "account_id": (detail.get("AccountRef") or {}).get("value"),
            "description": line.get("Description"),
            "amount": _decimal(line.get("Amount")),
            "posting_type": detail.get("PostingType"),
            "created_at": now,
            "updated_at": now,
        })
    return rows


async def sync_general_ledger(qbo: QuickBooksClient, store: Store) -> LedgerSyncResult:
    """Mirror the chart of accounts and the last 90 days of journal entries."""
    # ── 1. Accounts ──────────────────────────────────────────────────
    accounts = await qbo.find_accounts()
    now = datetime.now(timezone.utc)
    await store.upsert(QboAccount, [account_row(a, now) for a in accounts])
    logger.info("Stored %d QuickBooks accounts", len(accounts))

    # ── 2. Journal entries ───────────────────────────────────────────
    since = datetime.now(timezone.utc).date() - timedelta(days=LOOKBACK_DAYS)
    entries = await qbo.find_journal_entries(since)
    logger.info("Fetched %d journal entries since %s", len(entries), since.isoformat())

    for entry in entries:
        now = datetime.now(timezone.utc)
        try:
            await store.upsert(QboJournalEntry, [journal_entry_row(entry, now)])
        except Exception:
            logger.exception("Error storing journal entry %s", entry.get("Id"))
            continue

        try:
            lines = journal_line_rows(entry, now)
            if lines:
                await store.upsert(QboJournalEntryLine, lines, conflict=("journal_entry_id", "line_id"))
        except Exception:
            logger.exception("Error storing lines for journal entry %s", entry.get("Id"))

    return LedgerSyncResult(accounts=len(accounts), journal_entries=len(entries))
