import logging

from finsync.services.store import Store

logger = logging.getLogger(__name__)


async def refresh_reporting_view(store: Store) -> bool:
    """Regenerate the monthly P&L view. Never raises; returns False on failure."""
    try:
        await store.rpc("generate_monthly_pl_view")
    except Exception as exc:
        logger.error("Error generating P&L view: %s", exc)
        return False
    logger.info("Monthly P&L view generated successfully")
    return True
