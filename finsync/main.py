"""
finsync HTTP entry point.

Endpoints:
  GET  /health
  POST /sync, /sync/quickbooks, /sync/plaid, /sync/anomalies   (bearer)
  POST /query                                                  (bearer)
  POST /slack/command                                          (Slack token)

The daily scheduled run lives in finsync.worker (Celery beat).
"""
import logging

from fastapi import FastAPI

from finsync.core.config import settings
from finsync.routers import health, query, slack, sync

logging.basicConfig(
    level=getattr(logging, settings.api_log_level.upper()),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

app = FastAPI(
    title="finsync",
    version="0.1.0",
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
)

# ─── Routers ──────────────────────────────────
app.include_router(health.router)
app.include_router(sync.router)
app.include_router(query.router)
app.include_router(slack.router)


def serve() -> None:
    import uvicorn

    uvicorn.run("finsync.main:app", host=settings.api_host, port=settings.api_port)
