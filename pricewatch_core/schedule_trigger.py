#!/usr/bin/env python3
"""
Schedule Trigger - cron-style invocation of the update orchestrator.

The configured days of week plus hour and minute become one APScheduler
cron job in the scheduler timezone. An empty day list means every day.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .scheduler_config import ScheduleSpec
from .update_orchestrator import UpdateAlreadyRunningError, UpdateOrchestrator

logger = logging.getLogger(__name__)

JOB_ID = "price_update"

DAY_ABBREVIATIONS = {
    "sunday": "sun",
    "monday": "mon",
    "tuesday": "tue",
    "wednesday": "wed",
    "thursday": "thu",
    "friday": "fri",
    "saturday": "sat",
}


def build_cron_trigger(schedule: ScheduleSpec, timezone: str = "Asia/Tehran") -> CronTrigger:
    """Cron trigger for ``schedule``; no days means daily."""
    days = ",".join(DAY_ABBREVIATIONS[d] for d in schedule.days) or "*"
    return CronTrigger(
        day_of_week=days,
        hour=schedule.hour,
        minute=schedule.minute,
        timezone=timezone,
    )


class ScheduleTrigger:
    """
    Periodic runner for scheduled price updates.

    Usage:
        trigger = ScheduleTrigger(orchestrator, config_store)
        if await trigger.arm():
            print(trigger.next_fire_time())
    """

    def __init__(self, orchestrator: UpdateOrchestrator, config_store, timezone: str = "Asia/Tehran"):
        self.orchestrator = orchestrator
        self.config_store = config_store
        self.timezone = timezone
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def armed(self) -> bool:
        return self._scheduler is not None

    async def arm(self) -> bool:
        """Register the cron job from the current config; False when scheduling is disabled."""
        cfg = await asyncio.to_thread(self.config_store.load_config)
        if not cfg.enabled:
            logger.info("Price update scheduling is disabled")
            return False

        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler(timezone=self.timezone)
            self._scheduler.start()

        trigger = build_cron_trigger(cfg.schedule, self.timezone)
        self._scheduler.add_job(
            self._fire,
            trigger=trigger,
            id=JOB_ID,
            name="Scheduled price update",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        days = ", ".join(cfg.schedule.days) or "daily"
        logger.info(
            f"Price update scheduled ({days} at {cfg.schedule.hour:02d}:{cfg.schedule.minute:02d} "
            f"{self.timezone}), next run {self.next_fire_time()}"
        )
        return True

    def disarm(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Price update schedule stopped")

    async def reload(self) -> bool:
        self.disarm()
        return await self.arm()

    def next_fire_time(self) -> Optional[datetime]:
        if self._scheduler is None:
            return None
        job = self._scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None

    async def _fire(self) -> None:
        logger.info("Scheduled price update triggered")
        try:
            session = await self.orchestrator.run()
        except UpdateAlreadyRunningError:
            logger.warning("Scheduled price update skipped: a run is already in progress")
            return
        logger.info(f"Scheduled price update finished: {session.session_id} ({session.status.value})")
