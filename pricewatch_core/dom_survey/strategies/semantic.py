"""
Semantic Analysis - classify by what elements say about themselves.

Inputs are matched on placeholder/class/id/name/type keywords; when that
is inconclusive, visible text inputs fall back to position and size.
"""

import logging
from typing import Any, Dict, List, Optional

from ..keywords import (
    LIKELY_LOCATION_CLASS_HINTS,
    LIKELY_SEARCH_CLASS_HINTS,
    contains_any,
    input_signature,
    is_location_input,
    is_non_search_input,
    is_result_card,
    is_search_button,
    is_search_input,
)
from ..models import BoundingBox, ClassifiedElement, ElementRole
from ..probe import DOMProbe

logger = logging.getLogger(__name__)

CARD_SELECTOR = '[class*="card"], [class*="item"], [class*="result"]'

KEYWORD_MATCH_SCORE = 0.9
FALLBACK_SCORE = 0.6
BUTTON_SCORE = 0.8
CARD_SCORE = 0.7


def is_likely_search_input(box: Optional[BoundingBox], class_name: str) -> bool:
    if box and box.y < 300 and box.width > 200:
        return True
    return contains_any(class_name, LIKELY_SEARCH_CLASS_HINTS)


def is_likely_location_input(box: Optional[BoundingBox], class_name: str) -> bool:
    if box and box.y < 200:
        return True
    return contains_any(class_name, LIKELY_LOCATION_CLASS_HINTS)


def classify_input(raw: Dict[str, Any]) -> Optional[ClassifiedElement]:
    attributes = raw.get("attributes") or {}
    signature = input_signature(attributes)

    if is_search_input(signature):
        return ClassifiedElement.from_probe(raw, ElementRole.SEARCH_INPUT, KEYWORD_MATCH_SCORE)
    if is_location_input(signature):
        return ClassifiedElement.from_probe(raw, ElementRole.LOCATION_INPUT, KEYWORD_MATCH_SCORE)

    input_type = (attributes.get("type") or "").lower()
    if input_type != "text" or not raw.get("visible"):
        return None
    if is_non_search_input(signature):
        logger.debug(f"Excluded non-search input: {raw.get('selector')}")
        return None

    box = BoundingBox.from_dict(raw.get("box"))
    class_name = (attributes.get("class") or "").lower()
    if is_likely_search_input(box, class_name):
        return ClassifiedElement.from_probe(raw, ElementRole.SEARCH_INPUT, FALLBACK_SCORE)
    if is_likely_location_input(box, class_name):
        return ClassifiedElement.from_probe(raw, ElementRole.LOCATION_INPUT, FALLBACK_SCORE)
    return None


class SemanticAnalyzer:

    @staticmethod
    async def analyze(page) -> List[ClassifiedElement]:
        elements: List[ClassifiedElement] = []

        inputs = await DOMProbe.describe(page, "input")
        logger.debug(f"Semantic analysis: {len(inputs)} input elements")
        for raw in inputs:
            element = classify_input(raw)
            if element is not None:
                elements.append(element)

        for raw in await DOMProbe.describe(page, "button"):
            attributes = raw.get("attributes") or {}
            if is_search_button(
                (raw.get("text") or "").lower(),
                (attributes.get("class") or "").lower(),
                (attributes.get("id") or "").lower(),
            ):
                elements.append(ClassifiedElement.from_probe(raw, ElementRole.SEARCH_BUTTON, BUTTON_SCORE))

        for raw in await DOMProbe.describe(page, CARD_SELECTOR):
            attributes = raw.get("attributes") or {}
            if is_result_card(attributes.get("class") or "", attributes.get("id") or ""):
                elements.append(ClassifiedElement.from_probe(raw, ElementRole.RESULT_CARD, CARD_SCORE))

        return elements
