#!/usr/bin/env python3
import asyncio
import logging
from typing import Optional

from ..browser_session import BrowserSession
from ..config import Config, config as default_config
from ..dom_survey import ElementClassifier
from ..retry import navigate_with_retry
from .menu_parser import parse_menu
from .menu_selectors import MENU_JS, MENU_SELECTORS, READINESS_SELECTORS
from .models import VendorMenu, VendorRef

logger = logging.getLogger(__name__)

# Per-selector wait after the primary one has timed out
FALLBACK_SELECTOR_TIMEOUT_MS = 5000


class ExtractionError(Exception):
    """A vendor page could not be turned into a menu"""
    pass


class MenuStructureError(ExtractionError):
    """Neither the known storefront structure nor a survey found any menu"""
    pass


class VendorExtractor:
    """
    Navigate to a vendor storefront and read its menu.

    Usage:
        extractor = VendorExtractor(browser_session)
        menu = await extractor.extract(VendorRef("abc123", "Some Pizza"))
    """

    def __init__(
        self,
        browser: BrowserSession,
        classifier: Optional[ElementClassifier] = None,
        settings: Optional[Config] = None,
    ):
        self.browser = browser
        self.classifier = classifier or ElementClassifier()
        self.settings = settings or default_config

    async def extract(self, vendor: VendorRef, retry_attempts: int = 3) -> VendorMenu:
        live = await self.browser.acquire()
        page = live.page
        url = self.settings.vendor_url(vendor.vendor_id)

        logger.info(f"Extracting vendor menu for {vendor.vendor_name} from {url}")
        await navigate_with_retry(
            page,
            url,
            timeout=self.settings.navigation_timeout_ms,
            wait_until="domcontentloaded",
            max_attempts=retry_attempts,
        )
        await asyncio.sleep(self.settings.settle_delay_ms / 1000)

        if not await self.wait_until_ready(page):
            await self._confirm_with_survey(page, url)

        try:
            raw = await page.evaluate(MENU_JS, MENU_SELECTORS)
        except Exception as e:
            raise ExtractionError(f"Menu extraction failed for {url}: {e}") from e

        return parse_menu(raw or {})

    async def wait_until_ready(self, page) -> bool:
        """Wait for the storefront's main content; True once any marker appears."""
        primary, *fallbacks = READINESS_SELECTORS
        try:
            await page.wait_for_selector(primary, timeout=self.settings.readiness_timeout_ms)
            return True
        except Exception:
            logger.warning("Main selector not found, trying alternative selectors...")

        for selector in fallbacks:
            try:
                await page.wait_for_selector(selector, timeout=FALLBACK_SELECTOR_TIMEOUT_MS)
                logger.info(f"Found alternative selector: {selector}")
                return True
            except Exception:
                continue
        return False

    async def _confirm_with_survey(self, page, url: str) -> None:
        logger.warning(f"Known storefront structure missing on {url}, surveying page")
        result = await self.classifier.classify(page)
        cards = result.recommendations.result_cards
        if not cards:
            raise MenuStructureError(f"No menu structure found on {url}")
        logger.info(f"Survey found {len(cards)} result cards, extracting anyway")
