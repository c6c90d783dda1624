import logging

from fastapi import APIRouter, Form
from fastapi.responses import JSONResponse, PlainTextResponse

from finsync.core.clients import get_store
from finsync.core.config import settings
from finsync.core.deps import verify_slack_token
from finsync.services.slack_bot import process_slack_command

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slack", tags=["slack"])


@router.post("/command")
async def slack_command(
    token: str | None = Form(default=None),
    text: str = Form(default=""),
):
    """Slash-command entry; authenticated by Slack's verification token."""
    if not verify_slack_token(token):
        return PlainTextResponse("Unauthorized", status_code=401)

    store = None
    try:
        store = get_store(settings)
        return await process_slack_command(text, store, tz_name=settings.timezone)
    except Exception as exc:
        logger.exception("Error handling Slack slash command")
        return JSONResponse(
            status_code=500,
            content={
                "response_type": "ephemeral",
                "text": f"Error processing your request: {str(exc) or 'Unknown error occurred'}",
            },
        )
    finally:
        if store is not None:
            await store.close()
