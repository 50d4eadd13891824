#!/usr/bin/env python3
"""Explicit wiring of the price update services."""

from dataclasses import dataclass
from typing import Optional

from pricewatch_logs import SessionReportWriter

from .browser_session import BrowserSession
from .config import Config, config as default_config
from .dom_survey import ElementClassifier
from .extraction import VendorExtractor
from .schedule_trigger import ScheduleTrigger
from .scheduler_config import ConfigStore
from .storage import PriceStore
from .update_orchestrator import UpdateOrchestrator


@dataclass
class Services:
    settings: Config
    browser: BrowserSession
    classifier: ElementClassifier
    extractor: VendorExtractor
    price_store: PriceStore
    config_store: ConfigStore
    orchestrator: UpdateOrchestrator
    trigger: ScheduleTrigger

    async def close(self) -> None:
        self.trigger.disarm()
        await self.browser.close()


def build_services(settings: Optional[Config] = None) -> Services:
    settings = settings or default_config

    browser = BrowserSession(settings)
    classifier = ElementClassifier()
    extractor = VendorExtractor(browser, classifier, settings)
    price_store = PriceStore(str(settings.db_path))
    config_store = ConfigStore(str(settings.config_dir))
    report_writer = SessionReportWriter(str(settings.log_dir)) if settings.write_session_reports else None

    orchestrator = UpdateOrchestrator(extractor, price_store, config_store, report_writer=report_writer)
    trigger = ScheduleTrigger(orchestrator, config_store, timezone=settings.scheduler_timezone)

    return Services(
        settings=settings,
        browser=browser,
        classifier=classifier,
        extractor=extractor,
        price_store=price_store,
        config_store=config_store,
        orchestrator=orchestrator,
        trigger=trigger,
    )
