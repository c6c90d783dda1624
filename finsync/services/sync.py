"""Full finance sync: ledger → bank → anomalies → P&L view → Slack summary.

Steps run strictly in order. A failure in any of the first three aborts the
run and no summary is posted; the reporting view is best effort.
"""

import asyncio
import logging

from finsync.core import config
from finsync.core.clients import SyncClients, get_notifier, open_clients
from finsync.core.config import Settings
from finsync.schemas.sync import FullSyncResult
from finsync.services.anomalies import check_anomalies
from finsync.services.bank_sync import sync_bank_transactions
from finsync.services.ledger_sync import sync_general_ledger
from finsync.services.reporting import refresh_reporting_view
from finsync.worker import celery_app

logger = logging.getLogger(__name__)


def summary_text(result: FullSyncResult) -> str:
    return (
        "✅ Finance sync completed successfully:\n"
        f"• {result.general_ledger.accounts} accounts\n"
        f"• {result.general_ledger.journal_entries} journal entries\n"
        f"• {result.bank_transactions.accounts} bank accounts\n"
        f"• {result.bank_transactions.transactions} bank transactions\n"
        f"• {result.anomalies.anomalies_detected} anomalies detected"
    )


async def run_full_sync(clients: SyncClients) -> FullSyncResult:
    logger.info("Syncing QuickBooks general ledger...")
    gl_result = await sync_general_ledger(clients.quickbooks, clients.store)
    logger.info("General ledger sync complete: %s", gl_result)

    logger.info("Syncing bank transactions...")
    bank_result = await sync_bank_transactions(clients.plaid, clients.plaid_access_token, clients.store)
    logger.info("Bank transactions sync complete: %s", bank_result)

    logger.info("Checking for anomalies...")
    anomaly_result = await check_anomalies(clients.store, clients.notifier)
    logger.info("Anomaly check complete: %s", anomaly_result)

    logger.info("Generating monthly P&L view...")
    await refresh_reporting_view(clients.store)

    result = FullSyncResult(
        general_ledger=gl_result,
        bank_transactions=bank_result,
        anomalies=anomaly_result,
    )
    await clients.notifier.send(summary_text(result))
    return result


async def sync_finance_data(settings: Settings) -> FullSyncResult:
    """Build fresh clients for this invocation and run the full sync."""
    async with open_clients(settings) as clients:
        return await run_full_sync(clients)


async def run_scheduled_sync(settings: Settings) -> FullSyncResult | None:
    """Scheduled entry point: never raises, reports failure to Slack instead."""
    logger.info("Starting scheduled finance sync job")
    try:
        result = await sync_finance_data(settings)
    except Exception as exc:
        logger.exception("Error in finance sync job")
        await get_notifier(settings).send(
            f"❌ Finance sync job failed: {str(exc) or 'Unknown error occurred'}"
        )
        return None

    logger.info("Finance sync completed successfully: %s", result)
    return result


@celery_app.task(name="finsync.services.sync.scheduled_sync")
def scheduled_sync():
    """Celery beat hook: runs the async sync on a fresh event loop."""
    result = asyncio.run(run_scheduled_sync(config.settings))
    return result.model_dump(by_alias=True) if result else None
