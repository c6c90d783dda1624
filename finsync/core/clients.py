"""Per-invocation client construction.

Nothing here is cached at module level: every sync run or request builds its
own handles and closes them when it is done.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

import plaid
from plaid.api import plaid_api

from finsync.core.config import Settings
from finsync.services.notifications import SlackNotifier
from finsync.services.quickbooks import QuickBooksClient
from finsync.services.store import Store

logger = logging.getLogger(__name__)


@dataclass
class SyncClients:
    quickbooks: QuickBooksClient
    plaid: plaid_api.PlaidApi
    plaid_access_token: str
    store: Store
    notifier: SlackNotifier

    async def close(self) -> None:
        await self.quickbooks.close()
        await self.store.close()


async def get_quickbooks_client(settings: Settings) -> QuickBooksClient:
    """Build a QBO client and refresh its access token before handing it out."""
    qbo = QuickBooksClient(
        client_id=settings.qbo_client_id,
        client_secret=settings.qbo_client_secret,
        refresh_token=settings.qbo_refresh_token,
        realm_id=settings.qbo_realm_id,
        environment=settings.qbo_environment,
    )
    try:
        await qbo.refresh_access_token()
    except Exception:
        await qbo.close()
        raise
    logger.info("QuickBooks access token refreshed for realm %s", settings.qbo_realm_id)
    return qbo


def get_plaid_client(settings: Settings) -> plaid_api.PlaidApi:
    host = plaid.Environment.Sandbox if settings.plaid_env == "sandbox" else plaid.Environment.Production
    configuration = plaid.Configuration(
        host=host,
        api_key={
            "clientId": settings.plaid_client_id,
            "secret": settings.plaid_secret,
        },
    )
    return plaid_api.PlaidApi(plaid.ApiClient(configuration))


def get_store(settings: Settings) -> Store:
    return Store.from_url(settings.database_url)


def get_notifier(settings: Settings) -> SlackNotifier:
    return SlackNotifier(settings.slack_webhook_url)


@asynccontextmanager
async def open_clients(settings: Settings):
    """Yield a fully built :class:`SyncClients` and close it afterwards."""
    qbo = await get_quickbooks_client(settings)
    try:
        clients = SyncClients(
            quickbooks=qbo,
            plaid=get_plaid_client(settings),
            plaid_access_token=settings.plaid_access_token,
            store=get_store(settings),
            notifier=get_notifier(settings),
        )
    except Exception:
        await qbo.close()
        raise
    try:
        yield clients
    finally:
        await clients.close()
