"""
Mahjong Hand Scoring
Decomposition, special hands, shanten and scoring for riichi,
Chinese classical and Hong Kong rules
"""

from .tiles import Tile, TileSuit, WindType, DragonType, TileMultiset
from .melds import SetKind, ExposedSet
from .conditions import Conditions
from .errors import (
    MahjongScoringError,
    StructuralError,
    NoValidDecomposition,
    BelowMinimumBonusError,
    ParseError,
)
from .decomposition import Decomposition, DecomposedSet, find_decompositions, decompose_hand
from .special_hands import SpecialHandType, SpecialMatch, find_special_hands
from .rules import (
    RuleVariant,
    RuleProfile,
    LimitTier,
    RIICHI_RULES,
    RIICHI_NO_LIMIT_RULES,
    CHINESE_CLASSICAL_RULES,
    HONG_KONG_RULES,
    HONG_KONG_FULL_SPICY_RULES,
    get_rule_profile,
)
from .scoring import ScoreBreakdown, ScoreItem, evaluate_hand
from .shanten import ShantenCalculator, ShantenResult, calculate_shanten, get_improvements
from .payments import settle
from .notation import parse_tiles, parse_hand

__version__ = "0.1.0"
__all__ = [
    "Tile",
    "TileSuit",
    "WindType",
    "DragonType",
    "TileMultiset",
    "SetKind",
    "ExposedSet",
    "Conditions",
    "MahjongScoringError",
    "StructuralError",
    "NoValidDecomposition",
    "BelowMinimumBonusError",
    "ParseError",
    "Decomposition",
    "DecomposedSet",
    "find_decompositions",
    "decompose_hand",
    "SpecialHandType",
    "SpecialMatch",
    "find_special_hands",
    "RuleVariant",
    "RuleProfile",
    "LimitTier",
    "RIICHI_RULES",
    "RIICHI_NO_LIMIT_RULES",
    "CHINESE_CLASSICAL_RULES",
    "HONG_KONG_RULES",
    "HONG_KONG_FULL_SPICY_RULES",
    "get_rule_profile",
    "ScoreBreakdown",
    "ScoreItem",
    "evaluate_hand",
    "ShantenCalculator",
    "ShantenResult",
    "calculate_shanten",
    "get_improvements",
    "settle",
    "parse_tiles",
    "parse_hand",
]
