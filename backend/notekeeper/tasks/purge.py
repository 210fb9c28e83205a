"""
Daily purge of expired trash.

``TrashPurger`` owns an APScheduler ``AsyncIOScheduler`` with a single cron
job that calls ``NotesStore.purge_expired_trash`` in a worker thread. The
scheduler is started and shut down by the application lifespan. A failed
run is logged and the job waits for its next tick; nothing is retried.

Cron Format:
    "0 0 * * *"     - Daily at midnight (default, same as PURGE_AT=00:00)
    "30 3 * * *"    - Daily at 03:30

Usage:
    purger = TrashPurger(store, cron="0 0 * * *", tz="UTC")
    purger.start()          # inside a running event loop
    ...
    purger.stop()
"""
from __future__ import annotations

import asyncio
from datetime import datetime, tzinfo
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from notekeeper.core.logging import get_logger
from notekeeper.core.utils import utc_now
from notekeeper.storage.notes_store import Clock, NotesStore

logger = get_logger(__name__)

JOB_ID = "purge-expired-trash"


class TrashPurger:
    def __init__(
        self,
        store: NotesStore,
        cron: str = "0 0 * * *",
        tz: str | tzinfo = "UTC",
        clock: Clock = utc_now,
        misfire_grace_seconds: int = 3600,
    ):
        self.store = store
        self.cron = cron
        self.clock = clock
        self.trigger = CronTrigger.from_crontab(cron, timezone=tz)
        self.scheduler = AsyncIOScheduler(timezone=tz)
        # missed ticks (suspended host, long pause) collapse into a single run
        self.scheduler.add_job(
            self.run_once,
            trigger=self.trigger,
            id=JOB_ID,
            name="Purge expired trash",
            coalesce=True,
            max_instances=1,
            misfire_grace_time=misfire_grace_seconds,
            replace_existing=True,
        )

    def next_run_after(self, moment: datetime, previous: Optional[datetime] = None) -> datetime:
        """Next tick of the cron trigger at or after ``moment``, or strictly after ``previous``."""
        return self.trigger.get_next_fire_time(previous, moment)

    async def run_once(self) -> Optional[int]:
        try:
            return await asyncio.to_thread(self.store.purge_expired_trash, self.clock())
        except Exception:
            logger.exception("trash_purge_failed")
            return None

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        if self.running:
            return
        self.scheduler.start()
        logger.info("trash_purger_started", cron=self.cron, tz=str(self.trigger.timezone))

    def stop(self) -> None:
        if not self.running:
            return
        self.scheduler.shutdown(wait=False)
        logger.info("trash_purger_stopped")
