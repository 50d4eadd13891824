"""Detection strategies, strongest signal first."""

from typing import List

from .base import SurveyStrategy
from .behavior import BehavioralAnalyzer
from .layout import VisualLayoutAnalyzer
from .patterns import AttributePatternMatcher
from .semantic import SemanticAnalyzer


def default_strategies() -> List[SurveyStrategy]:
    return [
        SurveyStrategy("Semantic Analysis", 0.4, SemanticAnalyzer.analyze),
        SurveyStrategy("Attribute Pattern Matching", 0.3, AttributePatternMatcher.analyze),
        SurveyStrategy("Visual Layout Analysis", 0.2, VisualLayoutAnalyzer.analyze),
        SurveyStrategy("Behavioral Analysis", 0.1, BehavioralAnalyzer.analyze),
    ]


__all__ = [
    'SurveyStrategy',
    'SemanticAnalyzer',
    'AttributePatternMatcher',
    'VisualLayoutAnalyzer',
    'BehavioralAnalyzer',
    'default_strategies',
]
