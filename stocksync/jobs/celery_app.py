"""Celery configuration for the scheduled stock sync."""

from __future__ import annotations

import os

from celery import Celery
from celery.schedules import crontab

from stocksync.utils.dates import timezone_name

redis_url = os.environ.get("REDIS_URL", "redis://redis:6379/0")

celery_app = Celery("stocksync", broker=redis_url, backend=redis_url, include=["stocksync.jobs.sync"])
celery_app.conf.timezone = timezone_name()
celery_app.conf.beat_schedule = {
    "stock-sync": {
        "task": "stocksync.jobs.sync.run_sync",
        "schedule": crontab(
            hour=os.environ.get("SYNC_HOUR", "6"),
            minute=os.environ.get("SYNC_MINUTE", "0"),
        ),
    },
}


@celery_app.task(name="stocksync.jobs.sync.run_sync")
def run_sync_task() -> dict[str, int]:  # pragma: no cover - executed by worker
    import asyncio

    from stocksync.jobs.sync import run_sync

    return asyncio.run(run_sync()).as_dict()
