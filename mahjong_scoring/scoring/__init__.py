"""
Hand Scoring
One strategy per rule variant, selected by the RuleProfile
"""

from .base import ScoreBreakdown, ScoreItem, ScoringPattern, ScoringStrategy, WaitType
from .riichi import RiichiScorer
from .chinese_classical import ChineseClassicalScorer
from .hong_kong import HongKongScorer
from .engine import STRATEGIES, collect_candidates, evaluate_hand, get_strategy

__all__ = [
    "ScoreBreakdown",
    "ScoreItem",
    "ScoringPattern",
    "ScoringStrategy",
    "WaitType",
    "RiichiScorer",
    "ChineseClassicalScorer",
    "HongKongScorer",
    "STRATEGIES",
    "collect_candidates",
    "evaluate_hand",
    "get_strategy",
]
