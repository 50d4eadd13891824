#!/usr/bin/env python3
"""
Update Orchestrator - one price update run over a set of vendors.

Vendors are processed one at a time because they share a single browser.
A vendor that fails is recorded and the run moves on; only a failure
before the first vendor (config, database, vendor lookup) fails the run.

Usage:
    orchestrator = UpdateOrchestrator(extractor, price_store, config_store)
    session = await orchestrator.run()
    print(session.successful_vendors, session.failed_vendors)
"""

import asyncio
import copy
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from .extraction import VendorRef

logger = logging.getLogger(__name__)


class UpdateAlreadyRunningError(Exception):
    """A run was requested while another one is in flight"""
    pass


class SessionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PriceUpdateResult:
    vendor_id: str
    vendor_name: str
    success: bool
    items_updated: int = 0
    error: Optional[str] = None
    duration: int = 0  # ms
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.success:
            self.items_updated = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendorId": self.vendor_id,
            "vendorName": self.vendor_name,
            "success": self.success,
            "itemsUpdated": self.items_updated,
            "error": self.error,
            "duration": self.duration,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class PriceUpdateSession:
    session_id: str
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    total_vendors: int = 0
    successful_vendors: int = 0
    failed_vendors: int = 0
    total_items_updated: int = 0
    results: List[PriceUpdateResult] = field(default_factory=list)
    status: SessionStatus = SessionStatus.RUNNING
    current_vendor: Optional[str] = None
    error: Optional[str] = None

    def record(self, result: PriceUpdateResult) -> None:
        self.results.append(result)
        if result.success:
            self.successful_vendors += 1
            self.total_items_updated += result.items_updated
        else:
            self.failed_vendors += 1

    def finish(self, status: SessionStatus, error: Optional[str] = None) -> None:
        if self.status is not SessionStatus.RUNNING:
            raise ValueError(f"Session {self.session_id} already {self.status.value}")
        self.status = status
        self.error = error
        self.end_time = datetime.now()
        self.current_vendor = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat() if self.end_time else None,
            "totalVendors": self.total_vendors,
            "successfulVendors": self.successful_vendors,
            "failedVendors": self.failed_vendors,
            "totalItemsUpdated": self.total_items_updated,
            "results": [r.to_dict() for r in self.results],
            "status": self.status.value,
            "currentVendor": self.current_vendor,
            "error": self.error,
        }


def new_session_id() -> str:
    return f"price_update_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class UpdateOrchestrator:
    """
    Session-tracked batch price updater.

    At most one run is active per instance; ``get_session()`` returns a
    snapshot that callers may keep or mutate freely.
    """

    def __init__(
        self,
        extractor,
        store,
        config_store,
        report_writer=None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            extractor: Provides ``async extract(vendor, retry_attempts)``
            store: Price store (``ping``, ``list_vendors``, ``upsert_items``)
            config_store: Provides ``load_config()``
            report_writer: Optional ``SessionReportWriter``
            sleep: Coroutine used for the pause between vendors
        """
        self.extractor = extractor
        self.store = store
        self.config_store = config_store
        self.report_writer = report_writer
        self._sleep = sleep
        self._session: Optional[PriceUpdateSession] = None
        self._running = False

    def is_running(self) -> bool:
        return self._running

    def get_session(self) -> Optional[PriceUpdateSession]:
        return copy.deepcopy(self._session)

    async def run(self, vendor_ids: Optional[Sequence[str]] = None) -> PriceUpdateSession:
        if self._running:
            raise UpdateAlreadyRunningError("Price update already in progress")
        self._running = True

        try:
            session = PriceUpdateSession(session_id=new_session_id())
            self._session = session
            logger.info(f"Starting price update session: {session.session_id}")

            try:
                cfg = await asyncio.to_thread(self.config_store.load_config)
                if not await asyncio.to_thread(self.store.ping):
                    raise ConnectionError("Database connection failed")
                vendors = await self._resolve_vendors(vendor_ids)
            except Exception as e:
                logger.error(f"Price update session {session.session_id} failed: {e}")
                session.finish(SessionStatus.FAILED, error_message(e))
                await self._write_report(session)
                return self.get_session()
            except BaseException as e:
                session.finish(SessionStatus.FAILED, error_message(e))
                self._write_report_now(session)
                raise

            vendors = vendors[:max(0, cfg.max_vendors_per_run)]
            session.total_vendors = len(vendors)
            logger.info(f"Found {len(vendors)} vendors to update")

            try:
                for index, vendor in enumerate(vendors):
                    session.current_vendor = vendor.vendor_name
                    result = await self._update_vendor(vendor, cfg)
                    session.record(result)

                    if index < len(vendors) - 1 and cfg.delay_between_vendors > 0:
                        await self._sleep(cfg.delay_between_vendors / 1000)
            except BaseException as e:
                # Cancelled mid-run
                session.finish(SessionStatus.FAILED, error_message(e))
                logger.error(f"Price update session {session.session_id} aborted: {session.error}")
                self._write_report_now(session)
                raise

            session.finish(SessionStatus.COMPLETED)
            logger.info(
                f"Price update session completed: {session.successful_vendors} successful, "
                f"{session.failed_vendors} failed, {session.total_items_updated} items updated"
            )
            await self._write_report(session)
            return self.get_session()
        finally:
            self._running = False

    async def _resolve_vendors(self, vendor_ids: Optional[Sequence[str]]) -> List[VendorRef]:
        known = await asyncio.to_thread(self.store.list_vendors)
        if not vendor_ids:
            return sorted(known, key=lambda v: (v.vendor_name, v.vendor_id))

        names = {v.vendor_id: v.vendor_name for v in known}
        vendors = []
        seen = set()
        for vendor_id in vendor_ids:
            if vendor_id in seen:
                continue
            seen.add(vendor_id)
            if vendor_id not in names:
                logger.warning(f"Vendor {vendor_id} has no stored prices yet; using the id as its name")
            vendors.append(VendorRef(vendor_id, names.get(vendor_id) or vendor_id))
        return vendors

    async def _update_vendor(self, vendor: VendorRef, cfg) -> PriceUpdateResult:
        started = time.monotonic()
        timestamp = datetime.now()
        logger.info(f"Processing vendor: {vendor.vendor_name} ({vendor.vendor_id})")

        try:
            menu = await asyncio.wait_for(
                self.extractor.extract(vendor, retry_attempts=cfg.retry_attempts),
                timeout=cfg.timeout / 1000,
            )
            records = menu.to_price_records(vendor)
            inserted = await asyncio.to_thread(self.store.upsert_items, vendor.vendor_id, records)
        except Exception as e:
            message = error_message(e)
            logger.error(f"Failed to update vendor {vendor.vendor_name}: {message}")
            return PriceUpdateResult(
                vendor_id=vendor.vendor_id,
                vendor_name=vendor.vendor_name,
                success=False,
                error=message,
                duration=int((time.monotonic() - started) * 1000),
                timestamp=timestamp,
            )

        duration = int((time.monotonic() - started) * 1000)
        logger.info(f"Updated {inserted} items for {vendor.vendor_name} in {duration}ms")
        return PriceUpdateResult(
            vendor_id=vendor.vendor_id,
            vendor_name=vendor.vendor_name,
            success=True,
            items_updated=inserted,
            duration=duration,
            timestamp=timestamp,
        )

    async def _write_report(self, session: PriceUpdateSession) -> None:
        if self.report_writer is None:
            return
        try:
            path = await asyncio.to_thread(self.report_writer.write, session.to_dict())
            logger.info(f"Session report written to {path}")
        except OSError as e:
            logger.warning(f"Could not write session report: {e}")

    def _write_report_now(self, session: PriceUpdateSession) -> None:
        """Blocking variant for paths that must not await again."""
        if self.report_writer is None:
            return
        try:
            path = self.report_writer.write(session.to_dict())
            logger.info(f"Session report written to {path}")
        except OSError as e:
            logger.warning(f"Could not write session report: {e}")
