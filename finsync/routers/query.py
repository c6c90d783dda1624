import logging

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from finsync.core.clients import get_store
from finsync.core.config import settings
from finsync.core.deps import require_bearer
from finsync.core.errors import error_response
from finsync.schemas.sync import QueryRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["query"], dependencies=[Depends(require_bearer)])


@router.post("/query")
async def query(body: QueryRequest | None = None):
    """Forward free text to query_financial_data and return its raw rows."""
    if body is None or not body.text:
        return JSONResponse(status_code=400, content={"error": "Missing query text"})

    store = get_store(settings)
    try:
        rows = await store.rpc("query_financial_data", query_text=body.text)
        return JSONResponse(content=jsonable_encoder(rows))
    except Exception as exc:
        logger.error("Query failed: %s", exc)
        return error_response(exc)
    finally:
        await store.close()
