"""Tests for the batch price update orchestrator."""

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from pricewatch_core.extraction import MenuCategory, MenuItem, VendorMenu, VendorRef
from pricewatch_core.scheduler_config import BatchSettings, SchedulerConfig
from pricewatch_core.update_orchestrator import (
    SessionStatus,
    UpdateAlreadyRunningError,
    UpdateOrchestrator,
)


def menu_with(count):
    items = [MenuItem(name=f"item-{i}", final_price=1000 + i, original_price=1000 + i) for i in range(count)]
    return VendorMenu(restaurant_name="R", url="u", categories=[MenuCategory(id="1", name="Main", items=items)])


class FakeExtractor:
    """Menus per vendor id; an exception instance is raised instead."""

    def __init__(self, outcomes=None, gate=None):
        self.outcomes = outcomes or {}
        self.gate = gate
        self.calls = []

    async def extract(self, vendor, retry_attempts=3):
        self.calls.append(vendor.vendor_id)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.get(vendor.vendor_id, menu_with(2))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class GatedExtractor:
    """Holds each vendor at its own gate; ids in `failing` raise once released."""

    def __init__(self, vendor_ids, failing=()):
        self.gates = {vendor_id: asyncio.Event() for vendor_id in vendor_ids}
        self.failing = set(failing)
        self.entered = asyncio.Queue()

    async def extract(self, vendor, retry_attempts=3):
        await self.entered.put(vendor.vendor_id)
        await self.gates[vendor.vendor_id].wait()
        if vendor.vendor_id in self.failing:
            raise RuntimeError("menu unavailable")
        return menu_with(1)


class FakeStore:

    def __init__(self, vendors=(), healthy=True):
        self.vendors = list(vendors)
        self.healthy = healthy
        self.upserts = []

    def ping(self):
        return self.healthy

    def list_vendors(self):
        return list(self.vendors)

    def upsert_items(self, vendor_id, items):
        self.upserts.append((vendor_id, list(items)))
        return len(self.upserts[-1][1])


class RecordingSleep:

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


def config_store(**batch):
    store = MagicMock()
    store.load_config.return_value = SchedulerConfig(batch=BatchSettings(**batch))
    return store


VENDORS = [VendorRef(v, f"Vendor {v}") for v in "ABCDE"]


@pytest.fixture
def sleep():
    return RecordingSleep()


class TestRun:

    async def test_one_failure_does_not_stop_the_run(self, sleep):
        extractor = FakeExtractor({"B": TimeoutError()})
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS[:3]), config_store(), sleep=sleep)

        session = await orchestrator.run()

        assert session.status == SessionStatus.COMPLETED
        assert session.total_vendors == 3
        assert session.successful_vendors == 2
        assert session.failed_vendors == 1
        failed = session.results[1]
        assert (failed.vendor_id, failed.success, failed.items_updated, failed.error) == ("B", False, 0, "TimeoutError")
        assert session.total_items_updated == 4
        assert session.end_time is not None
        assert session.current_vendor is None

    async def test_error_message_is_kept(self, sleep):
        extractor = FakeExtractor({"A": RuntimeError("Browser not initialized")})
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS[:1]), config_store(), sleep=sleep)
        session = await orchestrator.run()
        assert session.results[0].error == "Browser not initialized"

    async def test_cap_limits_processed_vendors(self, sleep):
        extractor = FakeExtractor()
        orchestrator = UpdateOrchestrator(
            extractor, FakeStore(VENDORS), config_store(max_vendors_per_run=2), sleep=sleep
        )
        session = await orchestrator.run()
        assert extractor.calls == ["A", "B"]
        assert session.total_vendors == 2
        assert len(session.results) == 2

    async def test_every_vendor_once_and_counts_add_up(self, sleep):
        extractor = FakeExtractor({"C": RuntimeError("x"), "E": ValueError("y")})
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS), config_store(), sleep=sleep)
        session = await orchestrator.run()
        assert [r.vendor_id for r in session.results] == list("ABCDE")
        assert session.successful_vendors + session.failed_vendors == len(session.results) == 5
        assert all(r.items_updated == 0 for r in session.results if not r.success)

    async def test_all_vendors_ordered_by_name(self, sleep):
        vendors = [VendorRef("2", "Zeta"), VendorRef("1", "Alpha")]
        extractor = FakeExtractor()
        await UpdateOrchestrator(extractor, FakeStore(vendors), config_store(), sleep=sleep).run()
        assert extractor.calls == ["1", "2"]

    async def test_explicit_subset_keeps_order_and_dedupes(self, sleep):
        extractor = FakeExtractor()
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS), config_store(), sleep=sleep)
        session = await orchestrator.run(["C", "A", "C", "https://snappfood.ir/restaurant/menu/new/"])
        assert extractor.calls == ["C", "A", "https://snappfood.ir/restaurant/menu/new/"]
        names = [r.vendor_name for r in session.results]
        assert names == ["Vendor C", "Vendor A", "https://snappfood.ir/restaurant/menu/new/"]

    async def test_unknown_vendor_id_is_logged(self, sleep, caplog):
        orchestrator = UpdateOrchestrator(FakeExtractor(), FakeStore(VENDORS), config_store(), sleep=sleep)
        with caplog.at_level(logging.WARNING, logger="pricewatch_core.update_orchestrator"):
            await orchestrator.run(["A", "ghost"])
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "ghost" in warnings[0]

    async def test_delay_between_vendors_not_after_last(self, sleep):
        orchestrator = UpdateOrchestrator(
            FakeExtractor(), FakeStore(VENDORS[:3]), config_store(delay_between_vendors=1500), sleep=sleep
        )
        await orchestrator.run()
        assert sleep.calls == [1.5, 1.5]

    async def test_records_are_persisted_per_vendor(self, sleep):
        store = FakeStore(VENDORS[:1])
        await UpdateOrchestrator(FakeExtractor({"A": menu_with(3)}), store, config_store(), sleep=sleep).run()
        vendor_id, records = store.upserts[0]
        assert vendor_id == "A"
        assert [r.vendor_name for r in records] == ["Vendor A"] * 3

    async def test_slow_vendor_times_out(self, sleep):
        never = asyncio.Event()
        extractor = FakeExtractor(gate=never)
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS[:1]), config_store(timeout=10), sleep=sleep)
        session = await orchestrator.run()
        assert session.results[0].success is False
        assert session.results[0].error == "TimeoutError"

    async def test_no_vendors(self, sleep):
        session = await UpdateOrchestrator(FakeExtractor(), FakeStore(), config_store(), sleep=sleep).run()
        assert session.status == SessionStatus.COMPLETED
        assert session.total_vendors == 0
        assert session.results == []


class TestPreLoopFailure:

    async def test_database_down_fails_session(self, sleep):
        extractor = FakeExtractor()
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS, healthy=False), config_store(), sleep=sleep)
        session = await orchestrator.run()
        assert session.status == SessionStatus.FAILED
        assert session.error == "Database connection failed"
        assert session.end_time is not None
        assert extractor.calls == []
        assert not orchestrator.is_running()

    async def test_config_failure_fails_session(self, sleep):
        store = MagicMock()
        store.load_config.side_effect = OSError("disk gone")
        session = await UpdateOrchestrator(FakeExtractor(), FakeStore(VENDORS), store, sleep=sleep).run()
        assert session.status == SessionStatus.FAILED
        assert session.error == "disk gone"


class TestConcurrency:

    async def test_second_run_rejected_without_mutation(self, sleep):
        gate = asyncio.Event()
        extractor = FakeExtractor(gate=gate)
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS[:2]), config_store(), sleep=sleep)

        first = asyncio.create_task(orchestrator.run())
        while not extractor.calls:
            await asyncio.sleep(0)
        assert orchestrator.is_running()
        before = orchestrator.get_session()

        with pytest.raises(UpdateAlreadyRunningError):
            await orchestrator.run()

        after = orchestrator.get_session()
        assert after.session_id == before.session_id
        assert after.results == before.results

        gate.set()
        session = await first
        assert session.status == SessionStatus.COMPLETED
        assert not orchestrator.is_running()

    async def test_rejected_when_flag_set_synchronously(self, sleep):
        orchestrator = UpdateOrchestrator(FakeExtractor(), FakeStore(VENDORS[:1]), config_store(), sleep=sleep)
        first = asyncio.create_task(orchestrator.run())
        second = asyncio.create_task(orchestrator.run())
        results = await asyncio.gather(first, second, return_exceptions=True)
        assert results[0].status == SessionStatus.COMPLETED
        assert isinstance(results[1], UpdateAlreadyRunningError)


class TestInspection:

    async def test_no_session_before_first_run(self):
        orchestrator = UpdateOrchestrator(FakeExtractor(), FakeStore(), config_store())
        assert orchestrator.get_session() is None
        assert orchestrator.is_running() is False

    async def test_snapshot_is_a_copy(self, sleep):
        orchestrator = UpdateOrchestrator(FakeExtractor(), FakeStore(VENDORS[:1]), config_store(), sleep=sleep)
        await orchestrator.run()
        snapshot = orchestrator.get_session()
        snapshot.results.clear()
        assert len(orchestrator.get_session().results) == 1

    async def test_session_ids_are_unique(self, sleep):
        orchestrator = UpdateOrchestrator(FakeExtractor(), FakeStore(), config_store(), sleep=sleep)
        first = await orchestrator.run()
        second = await orchestrator.run()
        assert first.session_id != second.session_id
        assert first.session_id.startswith("price_update_")

    async def test_report_written(self, sleep):
        writer = MagicMock()
        writer.write.return_value = "logs/report.md"
        orchestrator = UpdateOrchestrator(
            FakeExtractor(), FakeStore(VENDORS[:1]), config_store(), report_writer=writer, sleep=sleep
        )
        session = await orchestrator.run()
        payload = writer.write.call_args.args[0]
        assert payload["sessionId"] == session.session_id
        assert payload["status"] == "completed"

    async def test_progress_visible_while_each_vendor_runs(self, sleep):
        vendors = VENDORS[:4]
        extractor = GatedExtractor([v.vendor_id for v in vendors], failing={"B"})
        orchestrator = UpdateOrchestrator(extractor, FakeStore(vendors), config_store(), sleep=sleep)

        task = asyncio.create_task(orchestrator.run())
        previous = (0, 0)
        for index, vendor in enumerate(vendors):
            entered = await asyncio.wait_for(extractor.entered.get(), timeout=1)
            assert entered == vendor.vendor_id

            snapshot = orchestrator.get_session()
            assert snapshot.status == SessionStatus.RUNNING
            assert snapshot.current_vendor == vendor.vendor_name
            assert len(snapshot.results) == index
            assert snapshot.successful_vendors + snapshot.failed_vendors == len(snapshot.results)
            counts = (snapshot.successful_vendors, snapshot.failed_vendors)
            assert counts[0] >= previous[0] and counts[1] >= previous[1]
            previous = counts

            extractor.gates[vendor.vendor_id].set()

        session = await task
        assert (session.successful_vendors, session.failed_vendors) == (3, 1)
        assert session.current_vendor is None


class TestCancellation:

    async def test_cancelled_run_finalizes_session(self, sleep):
        writer = MagicMock()
        writer.write.return_value = "logs/report.md"
        extractor = FakeExtractor(gate=asyncio.Event())
        orchestrator = UpdateOrchestrator(
            extractor, FakeStore(VENDORS[:3]), config_store(), report_writer=writer, sleep=sleep
        )

        task = asyncio.create_task(orchestrator.run())
        while not extractor.calls:
            await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        session = orchestrator.get_session()
        assert session.status == SessionStatus.FAILED
        assert session.end_time is not None
        assert session.error == "CancelledError"
        assert session.current_vendor is None
        assert session.results == []
        assert not orchestrator.is_running()
        assert writer.write.call_args.args[0]["status"] == "failed"

    async def test_new_run_allowed_after_cancel(self, sleep):
        gate = asyncio.Event()
        extractor = FakeExtractor(gate=gate)
        orchestrator = UpdateOrchestrator(extractor, FakeStore(VENDORS[:1]), config_store(), sleep=sleep)

        task = asyncio.create_task(orchestrator.run())
        while not extractor.calls:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        gate.set()
        session = await orchestrator.run()
        assert session.status == SessionStatus.COMPLETED
