"""
Hand Evaluation

Entry point tying the pieces together: validate the hand, collect every
candidate (admitted special shapes and all decompositions), score each with
the strategy for the profile's variant and keep the best.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence
import numpy as np

from ..conditions import Conditions
from ..decomposition import find_decompositions, required_sets
from ..errors import BelowMinimumBonusError, NoValidDecomposition, StructuralError
from ..melds import ExposedSet, exposed_counts
from ..rules import RIICHI_RULES, RuleProfile, RuleVariant
from ..special_hands import find_special_hands
from ..tiles import Tile, TileMultiset, split_flowers, validate_counts
from .base import Candidate, ScoreBreakdown, ScoringStrategy, rank_key
from .chinese_classical import ChineseClassicalScorer
from .hong_kong import HongKongScorer
from .riichi import RiichiScorer

logger = logging.getLogger(__name__)

STRATEGIES: Dict[RuleVariant, ScoringStrategy] = {
    RuleVariant.RIICHI: RiichiScorer(),
    RuleVariant.CHINESE_CLASSICAL: ChineseClassicalScorer(),
    RuleVariant.HONG_KONG: HongKongScorer(),
}


def get_strategy(variant: RuleVariant) -> ScoringStrategy:
    return STRATEGIES[variant]


def collect_candidates(
    concealed: TileMultiset,
    exposed_sets: Sequence[ExposedSet],
    conditions: Conditions,
    profile: RuleProfile,
) -> List[Candidate]:
    """
    Special shapes admitted by the variant, followed by every decomposition.

    Special shapes are only considered for a hand without declared sets.
    """
    strategy = get_strategy(profile.variant)
    candidates: List[Candidate] = []
    if not exposed_sets:
        for match in find_special_hands(concealed.to_count_array(), conditions.winning_tile):
            if strategy.accepts_special(match, profile):
                candidates.append(match)
            else:
                logger.debug(f"{match} not accepted under {profile.name}")
    candidates.extend(find_decompositions(concealed, required_sets(exposed_sets)))
    return candidates


def evaluate_hand(
    concealed_tiles: Iterable[Tile],
    exposed_sets: Sequence[ExposedSet] = (),
    conditions: Optional[Conditions] = None,
    profile: RuleProfile = RIICHI_RULES,
    enforce_minimum: bool = True,
) -> ScoreBreakdown:
    """
    Score a claimed winning hand.

    Args:
        concealed_tiles: Tiles not in a declared set, winning tile included.
            Flower tiles found here are moved to the conditions.
        exposed_sets: Declared sets (concealed quads included)
        conditions: Situational facts about the win
        profile: Rule profile selecting the variant and its settings
        enforce_minimum: Raise when the hand is under the variant's minimum

    Returns:
        Breakdown of the best-scoring interpretation

    Raises:
        StructuralError: wrong tile count or more than 4 copies of a kind
        NoValidDecomposition: well-formed hand that is not a winning shape
        BelowMinimumBonusError: winning shape under the minimum (enforce_minimum only)
    """
    conditions = conditions or Conditions()
    exposed_sets = tuple(exposed_sets)

    regular, flowers = split_flowers(concealed_tiles)
    if flowers:
        conditions = replace(conditions, flowers=conditions.flowers + tuple(flowers))

    concealed = TileMultiset.from_tiles(regular)
    num_sets = required_sets(exposed_sets)
    validate_counts(concealed.to_count_array().astype(np.int16) + exposed_counts(exposed_sets))

    expected = num_sets * 3 + 2
    if len(concealed) != expected:
        raise StructuralError(
            f"{len(exposed_sets)} declared sets need {expected} concealed tiles, got {len(concealed)}"
        )

    winning = conditions.winning_tile
    if winning is not None and winning not in concealed:
        raise StructuralError(f"Winning tile {winning} is not among the concealed tiles")

    strategy = get_strategy(profile.variant)
    candidates = collect_candidates(concealed, exposed_sets, conditions, profile)
    if not candidates:
        raise NoValidDecomposition(
            f"{concealed} {' '.join(str(s) for s in exposed_sets)} is not a winning hand".strip(),
            tile_count=len(concealed),
        )

    best: Optional[ScoreBreakdown] = None
    for candidate in candidates:
        breakdown = strategy.evaluate(candidate, exposed_sets, conditions, profile)
        if best is None or rank_key(breakdown) > rank_key(best):
            best = breakdown

    logger.debug(
        f"{profile.name}: best of {len(candidates)} candidates is "
        f"{best.bonus_count} bonus / {best.fu} fu / {best.base_points} points"
    )

    if not best.meets_minimum and enforce_minimum:
        raise BelowMinimumBonusError(best, profile.min_bonus)
    return best
