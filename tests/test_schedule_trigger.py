"""Tests for the cron-style schedule trigger."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from pricewatch_core.schedule_trigger import ScheduleTrigger, build_cron_trigger
from pricewatch_core.scheduler_config import ScheduleSpec, SchedulerConfig
from pricewatch_core.update_orchestrator import SessionStatus, UpdateAlreadyRunningError

# Sunday 2026-10-18 15:30 in Tehran
SUNDAY_AFTERNOON = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def config_store(enabled=True, days=(), hour=6, minute=0):
    store = MagicMock()
    store.load_config.return_value = SchedulerConfig(
        enabled=enabled, schedule=ScheduleSpec(list(days), hour, minute)
    )
    return store


@pytest.fixture
def orchestrator():
    orchestrator = MagicMock()
    orchestrator.run = AsyncMock(
        return_value=SimpleNamespace(session_id="price_update_1", status=SessionStatus.COMPLETED)
    )
    return orchestrator


class TestBuildCronTrigger:

    def test_selected_days(self):
        trigger = build_cron_trigger(ScheduleSpec(["monday"], 6, 30), "Asia/Tehran")
        fire = trigger.get_next_fire_time(None, SUNDAY_AFTERNOON)
        assert fire.weekday() == 0
        assert (fire.hour, fire.minute) == (6, 30)

    def test_empty_days_means_daily(self):
        trigger = build_cron_trigger(ScheduleSpec([], 20, 0), "Asia/Tehran")
        fire = trigger.get_next_fire_time(None, SUNDAY_AFTERNOON)
        assert fire.weekday() == 6
        assert (fire.hour, fire.minute) == (20, 0)

    def test_several_days(self):
        trigger = build_cron_trigger(ScheduleSpec(["wednesday", "saturday"], 9, 0), "Asia/Tehran")
        fire = trigger.get_next_fire_time(None, SUNDAY_AFTERNOON)
        assert fire.weekday() == 2


class TestScheduleTrigger:

    async def test_disabled_config_stays_disarmed(self, orchestrator):
        trigger = ScheduleTrigger(orchestrator, config_store(enabled=False))
        assert await trigger.arm() is False
        assert trigger.armed is False
        assert trigger.next_fire_time() is None

    async def test_arm_registers_job(self, orchestrator):
        trigger = ScheduleTrigger(orchestrator, config_store(days=["friday"], hour=7))
        try:
            assert await trigger.arm() is True
            assert trigger.armed is True
            fire = trigger.next_fire_time()
            assert fire is not None
            assert fire.weekday() == 4
            assert fire.hour == 7
        finally:
            trigger.disarm()
        assert trigger.armed is False

    async def test_reload_uses_fresh_config(self, orchestrator):
        store = config_store(hour=6)
        trigger = ScheduleTrigger(orchestrator, store)
        try:
            await trigger.arm()
            store.load_config.return_value = SchedulerConfig(enabled=True, schedule=ScheduleSpec([], 18, 45))
            assert await trigger.reload() is True
            fire = trigger.next_fire_time()
            assert (fire.hour, fire.minute) == (18, 45)
        finally:
            trigger.disarm()

    async def test_reload_to_disabled_disarms(self, orchestrator):
        store = config_store()
        trigger = ScheduleTrigger(orchestrator, store)
        await trigger.arm()
        store.load_config.return_value = SchedulerConfig(enabled=False)
        assert await trigger.reload() is False
        assert trigger.armed is False

    async def test_fire_runs_full_update(self, orchestrator):
        trigger = ScheduleTrigger(orchestrator, config_store())
        await trigger._fire()
        orchestrator.run.assert_awaited_once_with()

    async def test_fire_while_running_is_skipped(self, orchestrator, caplog):
        orchestrator.run.side_effect = UpdateAlreadyRunningError("busy")
        trigger = ScheduleTrigger(orchestrator, config_store())
        await trigger._fire()
        assert "already in progress" in caplog.text
