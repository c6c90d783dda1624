"""
On-demand sync endpoints (bearer protected).
  POST /sync             full ledger → bank → anomalies run
  POST /sync/quickbooks  ledger only
  POST /sync/plaid       bank only
  POST /sync/anomalies   anomaly check only
"""
import logging

from fastapi import APIRouter, Depends

from finsync.core.clients import get_notifier, get_plaid_client, get_quickbooks_client, get_store
from finsync.core.config import settings
from finsync.core.deps import require_bearer
from finsync.core.errors import error_response
from finsync.schemas.sync import AnomalyCheckResult, BankSyncResult, FullSyncResult, LedgerSyncResult
from finsync.services.anomalies import check_anomalies
from finsync.services.bank_sync import sync_bank_transactions
from finsync.services.ledger_sync import sync_general_ledger
from finsync.services.sync import sync_finance_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"], dependencies=[Depends(require_bearer)])


@router.post("", response_model=FullSyncResult)
async def sync_all():
    try:
        return await sync_finance_data(settings)
    except Exception as exc:
        logger.error("Full sync failed: %s", exc)
        return error_response(exc)


@router.post("/quickbooks", response_model=LedgerSyncResult)
async def sync_quickbooks():
    store = None
    qbo = None
    try:
        qbo = await get_quickbooks_client(settings)
        store = get_store(settings)
        return await sync_general_ledger(qbo, store)
    except Exception as exc:
        logger.error("QuickBooks sync failed: %s", exc)
        return error_response(exc)
    finally:
        if qbo is not None:
            await qbo.close()
        if store is not None:
            await store.close()


@router.post("/plaid", response_model=BankSyncResult)
async def sync_plaid():
    store = None
    try:
        plaid_client = get_plaid_client(settings)
        store = get_store(settings)
        return await sync_bank_transactions(plaid_client, settings.plaid_access_token, store)
    except Exception as exc:
        logger.error("Plaid sync failed: %s", exc)
        return error_response(exc)
    finally:
        if store is not None:
            await store.close()


@router.post("/anomalies", response_model=AnomalyCheckResult)
async def sync_anomalies():
    store = None
    try:
        store = get_store(settings)
        return await check_anomalies(store, get_notifier(settings))
    except Exception as exc:
        logger.error("Anomaly check failed: %s", exc)
        return error_response(exc)
    finally:
        if store is not None:
            await store.close()
