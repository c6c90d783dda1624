from celery import Celery
from celery.schedules import crontab

from finsync.core.config import settings

celery_app = Celery(
    "finsync",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    worker_prefetch_multiplier=1,
)

# ─── Scheduled tasks ──────────────────────────
celery_app.conf.beat_schedule = {
    "finance-sync-daily": {
        "task": "finsync.services.sync.scheduled_sync",
        "schedule": crontab(hour=6, minute=0),
    },
}

# Task modules are listed explicitly; autodiscover_tasks() only finds "tasks.py".
celery_app.conf.include = [
    "finsync.services.sync",
]
