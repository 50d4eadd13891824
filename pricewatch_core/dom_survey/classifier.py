"""
Element Classifier - rank page elements by role without site-specific selectors.

Every strategy runs independently; a strategy that raises contributes
nothing and the survey carries on with the rest.
"""

import asyncio
import base64
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from .models import ClassifiedElement, SurveyResult
from .probe import DOMProbe
from .ranking import deduplicate, rank, recommend
from .strategies import SurveyStrategy, default_strategies

logger = logging.getLogger(__name__)


class ElementClassifier:
    """
    Multi-strategy element discovery.

    Usage:
        classifier = ElementClassifier()
        result = await classifier.classify(page)
        box = result.recommendations.search_input
    """

    def __init__(self, strategies: Optional[Sequence[SurveyStrategy]] = None):
        self.strategies: List[SurveyStrategy] = list(strategies) if strategies is not None else default_strategies()

    async def collect(self, page) -> List[ClassifiedElement]:
        """Run every strategy and return the weighted, unmerged candidates."""
        candidates: List[ClassifiedElement] = []
        for strategy in self.strategies:
            try:
                found = await strategy.analyze(page)
            except Exception as e:
                logger.error(f"Strategy {strategy.name} failed: {e}")
                continue
            logger.debug(f"Strategy {strategy.name}: {len(found)} candidates")
            candidates.extend(element.weighted(strategy.weight) for element in found)
        return candidates

    async def classify(self, page, capture_screenshot: bool = False) -> SurveyResult:
        try:
            meta = await DOMProbe.metadata(page)
        except Exception as e:
            logger.warning(f"Could not read page metadata: {e}")
            meta = {"title": "", "description": ""}

        ranked = rank(deduplicate(await self.collect(page)))
        screenshot = await self._screenshot(page) if capture_screenshot else None

        result = SurveyResult(
            url=getattr(page, "url", "") or "",
            timestamp=datetime.now(),
            elements=tuple(ranked),
            page_title=meta["title"],
            page_description=meta["description"],
            recommendations=recommend(ranked),
            screenshot=screenshot,
        )
        logger.info(f"Survey completed. Found {len(ranked)} elements")
        return result

    async def survey(
        self,
        page,
        url: str,
        settle_ms: int = 5000,
        timeout_ms: int = 30000,
        capture_screenshot: bool = True,
    ) -> SurveyResult:
        """Navigate to ``url``, let dynamic content settle, then classify."""
        logger.info(f"Surveying page: {url}")
        await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        await asyncio.sleep(settle_ms / 1000)
        return await self.classify(page, capture_screenshot=capture_screenshot)

    @staticmethod
    async def _screenshot(page) -> Optional[str]:
        try:
            data = await page.screenshot()
        except Exception as e:
            logger.warning(f"Could not take screenshot: {e}")
            return None
        return base64.b64encode(data).decode("ascii")
