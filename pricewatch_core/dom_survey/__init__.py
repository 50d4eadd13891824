"""
DOM Survey - adaptive element discovery

Architecture:
1. Probe (pure JS) - one in-page program describing elements on request
2. Strategies - independent weighted heuristics over probe answers
3. Ranking - pure dedupe / rank / recommend over weighted candidates
"""

from .classifier import ElementClassifier
from .models import (
    ROLE_PRIORITY,
    BoundingBox,
    ClassifiedElement,
    ElementRole,
    Recommendations,
    SurveyResult,
    combine,
)
from .probe import DOMProbe
from .ranking import deduplicate, rank, recommend
from .strategies import SurveyStrategy, default_strategies

__all__ = [
    'ElementClassifier',
    'ElementRole',
    'ROLE_PRIORITY',
    'BoundingBox',
    'ClassifiedElement',
    'Recommendations',
    'SurveyResult',
    'combine',
    'DOMProbe',
    'deduplicate',
    'rank',
    'recommend',
    'SurveyStrategy',
    'default_strategies',
]
