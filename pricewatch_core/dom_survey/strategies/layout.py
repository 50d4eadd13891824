"""
Visual Layout Analysis - classify purely by bounding box.
"""

from typing import List

from ..models import BoundingBox, ClassifiedElement, ElementRole
from ..probe import DOMProbe

LAYOUT_SELECTOR = 'input, button, [class*="card"], [class*="item"]'

# Anything starting below this line counts as below the search area
SEARCH_AREA_BOTTOM = 200


class VisualLayoutAnalyzer:

    @staticmethod
    async def analyze(page) -> List[ClassifiedElement]:
        elements: List[ClassifiedElement] = []

        for raw in await DOMProbe.describe(page, LAYOUT_SELECTOR):
            box = BoundingBox.from_dict(raw.get("box"))
            if box is None or not raw.get("visible"):
                continue
            tag = (raw.get("tag") or "").lower()

            if tag == "input" and box.width > 200 and box.height > 30 and box.y < SEARCH_AREA_BOTTOM:
                elements.append(ClassifiedElement.from_probe(raw, ElementRole.SEARCH_INPUT, 0.6))

            if tag == "button" and box.width > 50 and box.height > 30:
                elements.append(ClassifiedElement.from_probe(raw, ElementRole.SEARCH_BUTTON, 0.5))

            if box.y > SEARCH_AREA_BOTTOM and box.width > 150 and box.height > 100:
                elements.append(ClassifiedElement.from_probe(raw, ElementRole.RESULT_CARD, 0.4))

        return elements
