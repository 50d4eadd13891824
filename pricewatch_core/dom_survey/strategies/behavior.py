"""
Behavioral Analysis - focus each input and watch for a suggestion list.

This performs real interaction with the page, so it is the slowest
strategy and runs last.
"""

import asyncio
import logging
from typing import List

from ..models import ClassifiedElement, ElementRole
from ..probe import DOMProbe

logger = logging.getLogger(__name__)

SUGGESTION_SELECTOR = (
    '.suggestions, .dropdown, .autocomplete, [role="listbox"], [class*="suggest"]'
)
FOCUS_SETTLE_SECONDS = 0.1


class BehavioralAnalyzer:

    @staticmethod
    async def analyze(page) -> List[ClassifiedElement]:
        elements: List[ClassifiedElement] = []

        inputs = await DOMProbe.describe(page, "input")
        for index, raw in enumerate(inputs):
            try:
                already_open = await DOMProbe.exists(page, SUGGESTION_SELECTOR)
                focused = await DOMProbe.focus(page, "input", index)
                await asyncio.sleep(FOCUS_SETTLE_SECONDS)
                appeared = focused and not already_open and await DOMProbe.exists(page, SUGGESTION_SELECTOR)
                await DOMProbe.blur(page)
            except Exception as e:
                logger.debug(f"Focus probe failed for {raw.get('selector')}: {e}")
                continue

            if appeared:
                elements.append(ClassifiedElement.from_probe(raw, ElementRole.SEARCH_INPUT, 0.9))

        return elements
