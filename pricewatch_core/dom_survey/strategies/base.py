"""Strategy contract for DOM surveys"""

from dataclasses import dataclass
from typing import Awaitable, Callable, List

from ..models import ClassifiedElement

Analyzer = Callable[..., Awaitable[List[ClassifiedElement]]]


@dataclass(frozen=True)
class SurveyStrategy:
    """An independent heuristic and its relative weight.

    ``analyze(page)`` returns candidates carrying the strategy's raw
    confidence; weighting happens in the classifier.
    """
    name: str
    weight: float
    analyze: Analyzer
