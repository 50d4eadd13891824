#!/usr/bin/env python3
"""
Browser Session - the one live browser shared by every extraction.

``acquire()`` hands out the live session, creating it on first use. A
session that died is reinitialized in place once; if that fails it is
disposed and replaced. A healthy session is never replaced.
"""

import asyncio
import base64
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from .config import Config, config as default_config
from .retry import RetryExhaustedError, execute_with_retry

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-blink-features=AutomationControlled",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
]


class BrowserSessionError(Exception):
    """The browser could not be brought into a usable state"""
    pass


@dataclass
class LiveSession:
    """Browser/page pair handed to callers"""
    session_id: str
    browser: Any
    context: Any
    page: Any


class BrowserSession:
    """
    Owner of a single Playwright browser.

    Usage:
        browser = BrowserSession()
        live = await browser.acquire()
        await live.page.goto(url)
        ...
        await browser.close()
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        launcher: Optional[Callable[[], Awaitable[Any]]] = None,
        max_create_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        """
        Args:
            settings: Process configuration (defaults to the global config)
            launcher: Async factory returning a connected browser; defaults
                to launching Chromium through Playwright
            max_create_attempts: Bounded attempts for creating a session
            retry_delay: Fixed delay between creation attempts, in seconds
        """
        self.settings = settings or default_config
        self._launcher = launcher
        self.max_create_attempts = max_create_attempts or self.settings.browser_launch_attempts
        self.retry_delay = self.settings.browser_retry_delay if retry_delay is None else retry_delay

        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._session_id: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    def has_session(self) -> bool:
        return any(h is not None for h in (self._browser, self._context, self._page))

    def is_open(self) -> bool:
        """Browser present and connected, page present and not closed."""
        browser_exists = self._browser is not None
        browser_connected = browser_exists and bool(self._browser.is_connected())
        page_exists = self._page is not None
        page_closed = page_exists and bool(self._page.is_closed())
        return browser_exists and browser_connected and page_exists and not page_closed

    async def acquire(self) -> LiveSession:
        async with self._lock:
            if not self.has_session():
                logger.info("No browser session, creating one")
                await self._create()
            elif self.is_open():
                logger.debug("Reusing healthy browser session")
            else:
                logger.warning("Browser session is not usable, reinitializing")
                try:
                    await self._reinitialize()
                except Exception as e:
                    logger.warning(f"Reinitialize failed ({e}), recreating browser session")
                    await self._dispose()
                    await self._create()
            return self._live()

    async def close(self) -> None:
        async with self._lock:
            await self._dispose()
            logger.info("Browser session closed")

    async def screenshot(self) -> str:
        if not self.is_open():
            raise BrowserSessionError("Browser not initialized")
        data = await self._page.screenshot()
        return base64.b64encode(data).decode("ascii")

    def info(self) -> Dict[str, Any]:
        return {
            "sessionId": self._session_id,
            "browserExists": self._browser is not None,
            "browserConnected": bool(self._browser and self._browser.is_connected()),
            "pageExists": self._page is not None,
            "isOpen": self.is_open(),
            "url": self._page.url if self._page is not None else None,
        }

    # internals

    def _live(self) -> LiveSession:
        return LiveSession(
            session_id=self._session_id or "",
            browser=self._browser,
            context=self._context,
            page=self._page,
        )

    async def _create(self) -> None:
        try:
            await execute_with_retry(
                self._create_once,
                max_attempts=self.max_create_attempts,
                initial_delay=self.retry_delay,
                backoff=1.0,
                on_failure=self._discard_failed_attempt,
            )
        except RetryExhaustedError as e:
            raise BrowserSessionError(f"Failed to start browser: {e}") from e
        self._session_id = f"session_{uuid.uuid4().hex[:12]}"
        logger.info(f"Browser session {self._session_id} ready")

    async def _create_once(self) -> None:
        self._browser = await self._launch()
        await self._open_page()

    async def _discard_failed_attempt(self, error: Exception) -> None:
        logger.warning(f"Browser launch attempt failed: {error}")
        await self._dispose()

    async def _reinitialize(self) -> None:
        if self._browser is None or not self._browser.is_connected():
            raise BrowserSessionError("browser process is gone")
        await self._close_context()
        await self._open_page()
        logger.info(f"Browser session {self._session_id} reinitialized")

    async def _launch(self):
        if self._launcher is not None:
            return await self._launcher()

        from playwright.async_api import async_playwright

        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(
            headless=bool(self.settings.headless),
            args=list(LAUNCH_ARGS),
        )

    async def _open_page(self) -> None:
        s = self.settings
        self._context = await self._browser.new_context(
            viewport={"width": s.viewport_width, "height": s.viewport_height},
            user_agent=s.user_agent,
            locale=s.locale,
            timezone_id=s.timezone_id,
            extra_http_headers={
                "Accept-Language": s.accept_language,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            },
        )
        self._page = await self._context.new_page()
        await self._page.goto(s.start_url, wait_until="domcontentloaded", timeout=s.navigation_timeout_ms)

    async def _close_context(self) -> None:
        context, self._context, self._page = self._context, None, None
        if context is None:
            return
        try:
            await context.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing context: {e}")

    async def _dispose(self) -> None:
        """Tear everything down; never raises."""
        await self._close_context()
        browser, self._browser = self._browser, None
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.debug(f"Ignoring error while closing browser: {e}")
        playwright, self._playwright = self._playwright, None
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.debug(f"Ignoring error while stopping playwright: {e}")
        self._session_id = None
