"""Data models for DOM surveys"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ElementRole(str, Enum):
    """Functional category assigned to a DOM candidate"""
    SEARCH_INPUT = "search-input"
    LOCATION_INPUT = "location-input"
    SEARCH_BUTTON = "search-button"
    RESULT_CARD = "result-card"
    UNKNOWN = "unknown"


# Higher wins the final ranking tie-break
ROLE_PRIORITY: Dict[ElementRole, int] = {
    ElementRole.SEARCH_INPUT: 4,
    ElementRole.LOCATION_INPUT: 3,
    ElementRole.SEARCH_BUTTON: 2,
    ElementRole.RESULT_CARD: 1,
    ElementRole.UNKNOWN: 0,
}


def combine(raw_score: float, strategy_weight: float) -> float:
    """Weighted confidence of a candidate reported by one strategy."""
    return raw_score * strategy_weight


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["BoundingBox"]:
        if not data:
            return None
        return cls(
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            width=float(data.get("width", 0)),
            height=float(data.get("height", 0)),
        )


@dataclass(frozen=True)
class ClassifiedElement:
    """One DOM node candidate.

    Strategies report ``confidence`` as their raw score; the classifier
    replaces it with ``combine(raw, weight)`` exactly once via ``weighted``.
    """
    selector: str
    tag_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text_content: str = ""
    is_visible: bool = False
    bounding_box: Optional[BoundingBox] = None
    confidence: float = 0.0
    role: ElementRole = ElementRole.UNKNOWN

    @classmethod
    def from_probe(cls, raw: Dict[str, Any], role: ElementRole, confidence: float) -> "ClassifiedElement":
        """Build a candidate from one element description returned by the DOM probe."""
        return cls(
            selector=raw.get("selector") or raw.get("tag", "unknown"),
            tag_name=(raw.get("tag") or "").lower(),
            attributes={str(k): str(v) for k, v in (raw.get("attributes") or {}).items()},
            text_content=raw.get("text") or "",
            is_visible=bool(raw.get("visible")),
            bounding_box=BoundingBox.from_dict(raw.get("box")),
            confidence=confidence,
            role=role,
        )

    @property
    def dedupe_key(self) -> Tuple[str, str, str]:
        return (
            self.tag_name,
            self.attributes.get("id", ""),
            self.attributes.get("class", ""),
        )

    def weighted(self, strategy_weight: float) -> "ClassifiedElement":
        return replace(self, confidence=combine(self.confidence, strategy_weight))

    def to_dict(self) -> Dict[str, Any]:
        box = self.bounding_box
        return {
            "selector": self.selector,
            "tagName": self.tag_name,
            "attributes": dict(self.attributes),
            "textContent": self.text_content,
            "isVisible": self.is_visible,
            "boundingBox": (
                {"x": box.x, "y": box.y, "width": box.width, "height": box.height}
                if box else None
            ),
            "confidence": round(self.confidence, 4),
            "role": self.role.value,
        }


@dataclass(frozen=True)
class Recommendations:
    search_input: Optional[ClassifiedElement] = None
    location_input: Optional[ClassifiedElement] = None
    search_button: Optional[ClassifiedElement] = None
    result_cards: Tuple[ClassifiedElement, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        def _one(el: Optional[ClassifiedElement]):
            return el.to_dict() if el else None

        return {
            "searchInput": _one(self.search_input),
            "locationInput": _one(self.location_input),
            "searchButton": _one(self.search_button),
            "resultCards": [el.to_dict() for el in self.result_cards],
        }


@dataclass(frozen=True)
class SurveyResult:
    """Outcome of one classification pass over a loaded page"""
    url: str
    timestamp: datetime
    elements: Tuple[ClassifiedElement, ...]
    page_title: str
    page_description: str
    recommendations: Recommendations
    screenshot: Optional[str] = None

    def to_dict(self, include_elements: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "url": self.url,
            "timestamp": self.timestamp.isoformat(),
            "pageTitle": self.page_title,
            "pageDescription": self.page_description,
            "recommendations": self.recommendations.to_dict(),
            "elementCount": len(self.elements),
        }
        if include_elements:
            data["elements"] = [el.to_dict() for el in self.elements]
        if self.screenshot:
            data["screenshot"] = self.screenshot
        return data
