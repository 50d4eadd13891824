"""
Attribute Pattern Matching - ordered structural selectors per role.

Every pattern is tried in order; each non-empty match set is accepted and
a failing selector only skips that pattern.
"""

import logging
from typing import List, Tuple

from ..keywords import input_signature, is_non_search_input
from ..models import ClassifiedElement, ElementRole
from ..probe import DOMProbe

logger = logging.getLogger(__name__)

SEARCH_INPUT_PATTERNS = (
    'input[placeholder*="search"]',
    'input[placeholder*="جستجو"]',
    'input[placeholder*="food"]',
    'input[placeholder*="غذا"]',
    'input[placeholder*="restaurant"]',
    'input[placeholder*="رستوران"]',
    'input[placeholder*="what"]',
    'input[placeholder*="چی"]',
    'input[placeholder*="menu"]',
    'input[placeholder*="منو"]',
    'input[type="search"]',
    'input[name*="search"]',
    'input[name*="food"]',
    'input[name*="restaurant"]',
    'input[id*="search"]',
    'input[id*="food"]',
    'input[id*="restaurant"]',
    'input[class*="search"]',
    'input[class*="food"]',
    'input[class*="restaurant"]',
    '[data-testid*="search"]',
    '[data-testid*="food"]',
    '[data-testid*="restaurant"]',
    # generic fallbacks
    'input[class*="input"]',
    'input[class*="text"]',
    '[data-testid*="input"]',
    'input[type="text"]',
)

LOCATION_INPUT_PATTERNS = (
    'input[placeholder*="address"]',
    'input[placeholder*="آدرس"]',
    'input[placeholder*="location"]',
    'input[placeholder*="مکان"]',
    'input[placeholder*="select"]',
    'input[placeholder*="انتخاب"]',
    'input[placeholder*="city"]',
    'input[placeholder*="شهر"]',
    'input[placeholder*="area"]',
    'input[placeholder*="منطقه"]',
    'input[placeholder*="delivery"]',
    'input[placeholder*="تحویل"]',
    'input[name*="location"]',
    'input[name*="address"]',
    'input[name*="city"]',
    'input[id*="location"]',
    'input[id*="address"]',
    'input[id*="city"]',
    'input[class*="location"]',
    'input[class*="address"]',
    'input[class*="city"]',
    '[data-testid*="location"]',
    '[data-testid*="address"]',
    '[data-testid*="city"]',
)

SEARCH_BUTTON_PATTERNS = (
    'button[type="submit"]',
    'button[class*="search"]',
    'button[id*="search"]',
    '[data-testid*="search-button"]',
    'button:has(svg)',
    'button[class*="primary"]',
)

PATTERN_TABLE: Tuple[Tuple[ElementRole, Tuple[str, ...], float], ...] = (
    (ElementRole.SEARCH_INPUT, SEARCH_INPUT_PATTERNS, 0.8),
    (ElementRole.LOCATION_INPUT, LOCATION_INPUT_PATTERNS, 0.8),
    (ElementRole.SEARCH_BUTTON, SEARCH_BUTTON_PATTERNS, 0.7),
)


class AttributePatternMatcher:

    @staticmethod
    async def analyze(page) -> List[ClassifiedElement]:
        elements: List[ClassifiedElement] = []

        for role, patterns, score in PATTERN_TABLE:
            for pattern in patterns:
                try:
                    matches = await DOMProbe.describe(page, pattern)
                except Exception as e:
                    logger.debug(f"Pattern {pattern!r} skipped: {e}")
                    continue
                for raw in matches:
                    if role == ElementRole.SEARCH_INPUT and is_non_search_input(
                        input_signature(raw.get("attributes") or {})
                    ):
                        continue
                    elements.append(ClassifiedElement.from_probe(raw, role, score))

        return elements
