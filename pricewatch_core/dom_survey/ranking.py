"""
Candidate merging for DOM surveys.

Pure functions over already-weighted candidates; no page access.
"""

from typing import Dict, Iterable, List, Sequence, Tuple

from .models import ROLE_PRIORITY, ClassifiedElement, ElementRole, Recommendations

MAX_RESULT_CARDS = 10


def deduplicate(elements: Iterable[ClassifiedElement]) -> List[ClassifiedElement]:
    """Collapse candidates sharing (tag, id, class); the highest confidence survives.

    On equal confidence the first candidate seen is kept.
    """
    unique: Dict[Tuple[str, str, str], ClassifiedElement] = {}
    for element in elements:
        key = element.dedupe_key
        current = unique.get(key)
        if current is None or current.confidence < element.confidence:
            unique[key] = element
    return list(unique.values())


def _rank_key(element: ClassifiedElement):
    return (
        -element.confidence,
        0 if element.is_visible else 1,
        -ROLE_PRIORITY.get(element.role, 0),
    )


def rank(elements: Iterable[ClassifiedElement]) -> List[ClassifiedElement]:
    """Confidence desc, then visible first, then role priority."""
    return sorted(elements, key=_rank_key)


def recommend(ranked: Sequence[ClassifiedElement], max_cards: int = MAX_RESULT_CARDS) -> Recommendations:
    def _best(role: ElementRole):
        return next((el for el in ranked if el.role == role), None)

    cards = tuple(el for el in ranked if el.role == ElementRole.RESULT_CARD)[:max_cards]
    return Recommendations(
        search_input=_best(ElementRole.SEARCH_INPUT),
        location_input=_best(ElementRole.LOCATION_INPUT),
        search_button=_best(ElementRole.SEARCH_BUTTON),
        result_cards=cards,
    )
