"""
Shared Scoring Records

Breakdown records, the per-candidate HandAnalysis, the ScoringPattern row
type with its exclusion principle, and free helper functions used by every
variant (suit purity, wind values, wait shapes, the doubling formula).

A ScoringStrategy scores one candidate (a decomposition or a special-hand
match) under one RuleProfile. Variants differ only in their pattern tables
and point formulas.
"""

import inspect
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, List, Optional, Sequence, Set, Tuple, Union
import numpy as np

from ..conditions import Conditions
from ..decomposition import DecomposedSet, Decomposition
from ..melds import ExposedSet, SetKind, exposed_counts, is_closed_hand
from ..rules import RuleProfile, RuleVariant
from ..special_hands import SpecialHandType, SpecialMatch
from ..tiles import (
    Tile, TileSuit, WindType, TERMINAL_INDICES, HONOR_INDICES,
    is_suited_index, rank_of, suit_of,
)

logger = logging.getLogger(__name__)

Candidate = Union[Decomposition, SpecialMatch]

WIND_INDICES = [27, 28, 29, 30]
DRAGON_INDICES = [31, 32, 33]


class WaitType(IntEnum):
    """Shape the winning tile completed"""
    RYANMEN = 0   # 两面 - two-sided sequence wait
    KANCHAN = 1   # 嵌张 - closed (middle) wait
    PENCHAN = 2   # 边张 - edge wait
    TANKI = 3     # 单骑 - single wait on the pair
    SHANPON = 4   # 双碰 - wait completing a triplet
    UNKNOWN = 5   # Winning tile not supplied


@dataclass(frozen=True)
class ScoreItem:
    """One contribution to a score: a bonus pattern or a fu component"""
    name: str
    value: int
    rationale: str = ""
    local_name: str = ""

    def __str__(self) -> str:
        label = f"{self.name} ({self.local_name})" if self.local_name else self.name
        return f"{label}: {self.value}"


@dataclass
class ScoreBreakdown:
    """
    Result of scoring one hand.

    Attributes:
        variant: Rule family that produced the score
        items: Bonus contributions (han / fan) in pattern-table order
        fu_items: Base unit contributions for fu-based variants
        bonus_count: Total han / fan
        fu: Base unit used by the doubling formula
        exponent: Power of two applied to the base unit
        base_points: Points handed to the payment formula
        tier: Named tier when a fixed value replaced the formula
        limit_count: Number of stacked limit hands (yakuman multiples)
        meets_minimum: Whether the hand reaches the variant's win threshold
    """
    variant: RuleVariant
    items: List[ScoreItem] = field(default_factory=list)
    fu_items: List[ScoreItem] = field(default_factory=list)
    bonus_count: int = 0
    fu: int = 0
    exponent: int = 0
    base_points: int = 0
    tier: Optional[str] = None
    limit_count: int = 0
    is_self_draw: bool = False
    is_concealed: bool = True
    is_dealer: bool = False
    decomposition: Optional[Decomposition] = None
    special: Optional[SpecialMatch] = None
    wait: Optional[WaitType] = None
    meets_minimum: bool = True

    def add_item(self, name: str, value: int, rationale: str = "", local_name: str = ""):
        """Add a bonus contribution"""
        self.items.append(ScoreItem(name, value, rationale, local_name))
        self.bonus_count += value

    def add_fu(self, name: str, value: int, rationale: str = ""):
        """Add a fu contribution (the total is set separately after rounding)"""
        self.fu_items.append(ScoreItem(name, value, rationale))

    @property
    def item_names(self) -> List[str]:
        return [item.name for item in self.items]

    @property
    def is_limit(self) -> bool:
        return self.tier is not None

    def summary(self) -> str:
        """Multi-line human readable breakdown"""
        lines = [str(item) for item in self.items]
        if self.fu_items:
            lines.append("Fu: " + ", ".join(f"{i.name} {i.value}" for i in self.fu_items))
        lines.append(f"Total: {self.bonus_count} bonus, {self.fu} fu -> {self.base_points} base points")
        if self.tier:
            lines.append(f"Tier: {self.tier}")
        return "\n".join(lines)


@dataclass(frozen=True)
class ScoredSet:
    """A set as seen by the scorer: decomposed from concealed tiles or declared"""
    kind: SetKind
    anchor: int
    is_concealed: bool
    is_declared: bool = False

    @property
    def tile(self) -> Tile:
        return Tile.from_index(self.anchor)

    @property
    def indices(self) -> Tuple[int, ...]:
        if self.kind == SetKind.SEQUENCE:
            return (self.anchor, self.anchor + 1, self.anchor + 2)
        return (self.anchor,)

    @property
    def is_sequence(self) -> bool:
        return self.kind == SetKind.SEQUENCE

    @property
    def is_triplet_like(self) -> bool:
        """Triplet or quad"""
        return self.kind != SetKind.SEQUENCE

    @property
    def is_quad(self) -> bool:
        return self.kind == SetKind.QUAD

    @property
    def has_terminal_or_honor(self) -> bool:
        return any(i in TERMINAL_INDICES or i in HONOR_INDICES for i in self.indices)

    @property
    def has_terminal(self) -> bool:
        return any(i in TERMINAL_INDICES for i in self.indices)


@dataclass
class HandAnalysis:
    """
    One scoring candidate with the winning tile placed.

    A decomposition with an ambiguous winning tile yields one analysis per
    placement; a special-hand match yields exactly one.
    """
    counts: np.ndarray  # Full hand, declared sets included (quads count 4)
    conditions: Conditions
    profile: RuleProfile
    is_closed: bool
    sets: List[ScoredSet] = field(default_factory=list)
    pair: Optional[int] = None
    special: Optional[SpecialMatch] = None
    decomposition: Optional[Decomposition] = None
    wait: WaitType = WaitType.UNKNOWN

    @property
    def is_standard(self) -> bool:
        """Pair plus four sets"""
        return self.special is None

    def is_special(self, hand_type: SpecialHandType) -> bool:
        return self.special is not None and self.special.hand_type == hand_type

    @property
    def is_self_draw(self) -> bool:
        return self.conditions.is_self_draw

    @property
    def sequences(self) -> List[ScoredSet]:
        return [s for s in self.sets if s.is_sequence]

    @property
    def triplets(self) -> List[ScoredSet]:
        """Triplets and quads"""
        return [s for s in self.sets if s.is_triplet_like]

    @property
    def quads(self) -> List[ScoredSet]:
        return [s for s in self.sets if s.is_quad]

    @property
    def concealed_triplets(self) -> List[ScoredSet]:
        return [s for s in self.triplets if s.is_concealed]


# === Free helpers over count vectors ===

def held_indices(counts: np.ndarray) -> List[int]:
    return [int(i) for i in np.flatnonzero(counts)]


def suits_present(counts: np.ndarray) -> Set[TileSuit]:
    """Numbered suits appearing in the hand"""
    return {suit_of(i) for i in held_indices(counts) if is_suited_index(i)}


def has_honors(counts: np.ndarray) -> bool:
    return bool(counts[27:].any())


def is_full_flush(counts: np.ndarray) -> bool:
    """One numbered suit, no honors (清一色)"""
    return len(suits_present(counts)) == 1 and not has_honors(counts)


def is_half_flush(counts: np.ndarray) -> bool:
    """One numbered suit plus honors (混一色)"""
    return len(suits_present(counts)) == 1 and has_honors(counts)


def is_all_honors(counts: np.ndarray) -> bool:
    return int(counts.sum()) > 0 and not counts[:27].any()


def is_all_terminals(counts: np.ndarray) -> bool:
    return all(i in TERMINAL_INDICES for i in held_indices(counts))


def is_all_terminals_and_honors(counts: np.ndarray) -> bool:
    return all(i in TERMINAL_INDICES or i in HONOR_INDICES for i in held_indices(counts))


def is_all_simples(counts: np.ndarray) -> bool:
    return not any(i in TERMINAL_INDICES or i in HONOR_INDICES for i in held_indices(counts))


def is_all_green(counts: np.ndarray) -> bool:
    return all(Tile.from_index(i).is_green for i in held_indices(counts))


def wind_of(idx: int) -> Optional[WindType]:
    if idx in WIND_INDICES:
        return WindType(idx - 26)
    return None


def value_wind_count(idx: int, conditions: Conditions) -> int:
    """How many times a wind kind is valuable: once each as seat and round wind"""
    wind = wind_of(idx)
    if wind is None:
        return 0
    return int(wind == conditions.seat_wind) + int(wind == conditions.round_wind)


def is_value_tile(idx: int, conditions: Conditions) -> bool:
    """Dragon, seat wind or round wind"""
    return idx in DRAGON_INDICES or value_wind_count(idx, conditions) > 0


def dragon_triplets(sets: Sequence[ScoredSet]) -> List[ScoredSet]:
    return [s for s in sets if s.is_triplet_like and s.anchor in DRAGON_INDICES]


def wind_triplets(sets: Sequence[ScoredSet]) -> List[ScoredSet]:
    return [s for s in sets if s.is_triplet_like and s.anchor in WIND_INDICES]


def has_triplet_of(sets: Sequence[ScoredSet], idx: int) -> bool:
    return any(s.is_triplet_like and s.anchor == idx for s in sets)


# === Winning tile placement ===

def classify_wait(s: DecomposedSet, winning_index: int) -> WaitType:
    """Wait shape when the winning tile completed the given set"""
    if s.kind != SetKind.SEQUENCE:
        return WaitType.SHANPON
    position = winning_index - s.anchor
    if position == 1:
        return WaitType.KANCHAN
    rank = rank_of(s.anchor)
    if (position == 0 and rank == 7) or (position == 2 and rank == 1):
        return WaitType.PENCHAN
    return WaitType.RYANMEN


def wait_placements(
    decomposition: Decomposition,
    winning_index: int,
) -> List[Tuple[WaitType, Optional[int]]]:
    """
    Every distinct place the winning tile could have landed.

    Returns:
        (wait type, index of the completed set or None for the pair)
    """
    placements: List[Tuple[WaitType, Optional[int]]] = []
    if decomposition.pair == winning_index:
        placements.append((WaitType.TANKI, None))

    seen = set()
    for i, s in enumerate(decomposition.sets):
        if not s.contains(winning_index):
            continue
        wait = classify_wait(s, winning_index)
        key = (s.kind, s.anchor, wait)
        if key in seen:
            continue
        seen.add(key)
        placements.append((wait, i))

    if not placements:
        placements.append((WaitType.UNKNOWN, None))
    return placements


def build_analyses(
    candidate: Candidate,
    exposed_sets: Sequence[ExposedSet],
    conditions: Conditions,
    profile: RuleProfile,
) -> List[HandAnalysis]:
    """
    Expand a candidate into one HandAnalysis per winning tile placement.

    A triplet completed by a discard is treated as exposed.
    """
    is_closed = is_closed_hand(exposed_sets)
    declared = [ScoredSet(s.kind, s.anchor, s.is_concealed, True) for s in exposed_sets]

    if isinstance(candidate, SpecialMatch):
        wait = WaitType.TANKI if candidate.hand_type == SpecialHandType.SEVEN_PAIRS else WaitType.UNKNOWN
        counts = candidate.to_count_array().astype(np.int16) + exposed_counts(exposed_sets)
        return [HandAnalysis(
            counts=counts,
            conditions=conditions,
            profile=profile,
            is_closed=is_closed,
            sets=declared,
            special=candidate,
            wait=wait,
        )]

    counts = candidate.to_count_array().astype(np.int16) + exposed_counts(exposed_sets)
    winning = conditions.winning_tile
    if winning is None:
        placements = [(WaitType.UNKNOWN, None)]
    else:
        placements = wait_placements(candidate, winning.tile_index)

    analyses = []
    for wait, completed in placements:
        sets = []
        for i, s in enumerate(candidate.sets):
            opened_by_discard = (
                i == completed and wait == WaitType.SHANPON and not conditions.is_self_draw
            )
            sets.append(ScoredSet(s.kind, s.anchor, not opened_by_discard))
        analyses.append(HandAnalysis(
            counts=counts,
            conditions=conditions,
            profile=profile,
            is_closed=is_closed,
            sets=sets + declared,
            pair=candidate.pair,
            decomposition=candidate,
            wait=wait,
        ))
    return analyses


# === Patterns ===

@dataclass
class ScoringPattern:
    """
    A named bonus pattern.

    Attributes:
        name: English name
        local_name: Name in the variant's own language
        value: Han / fan when closed (yakuman multiple for limit patterns)
        check_func: Predicate over a HandAnalysis
        excludes: Patterns this one suppresses when both match
        open_value: Value when the hand is open (None = same, 0 = closed only)
        is_limit: Limit hand that replaces the formula
        tier: Named tier scored outright
    """
    name: str
    local_name: str
    value: int
    check_func: Callable[[HandAnalysis], bool]
    excludes: List[str] = field(default_factory=list)
    open_value: Optional[int] = None
    is_limit: bool = False
    tier: Optional[str] = None

    def value_for(self, is_closed: bool) -> int:
        if is_closed or self.open_value is None:
            return self.value
        return self.open_value

    @property
    def rationale(self) -> str:
        """First docstring line of the check, if it has one"""
        doc = inspect.getdoc(self.check_func)
        return doc.splitlines()[0] if doc else ""


def doubling_points(bonus: int, unit: int, profile: RuleProfile) -> Tuple[int, Optional[str]]:
    """
    basePoints = unit * 2 ** (bonus + offset), replaced by a named tier
    when one is reached and clamped at the profile's cap.

    Returns:
        (base points, tier name or None)
    """
    tier = profile.tier_for(bonus)
    if tier is not None:
        return tier.points, tier.name
    points = unit * 2 ** (bonus + profile.exponent_offset)
    if profile.point_cap is not None and not profile.no_limit and points > profile.point_cap:
        return profile.point_cap, profile.point_cap_name
    return points, None


def round_up(value: int, unit: int) -> int:
    return -(-value // unit) * unit


def rank_key(breakdown: ScoreBreakdown) -> Tuple[int, int, int]:
    """Ordering between candidates: base points, then bonus count, then fu"""
    return (breakdown.base_points, breakdown.bonus_count, breakdown.fu)


class ScoringStrategy:
    """
    Scoring interface shared by every variant.

    Subclasses provide the pattern table and score_analysis; evaluate picks
    the best winning tile placement of one candidate.
    """

    variant: RuleVariant

    def __init__(self):
        self.patterns = self._create_patterns()

    def _create_patterns(self) -> List[ScoringPattern]:
        raise NotImplementedError

    def accepts_special(self, match: SpecialMatch, profile: RuleProfile) -> bool:
        """Whether a special shape is a legal win under this variant"""
        return True

    def score_analysis(self, analysis: HandAnalysis) -> ScoreBreakdown:
        raise NotImplementedError

    def get_matching_patterns(self, analysis: HandAnalysis) -> List[ScoringPattern]:
        """
        Get list of matching patterns after applying exclusion rules.

        Patterns worth nothing in the hand's open/closed state do not match,
        so they never suppress anything.
        """
        matching = []
        for pattern in self.patterns:
            if pattern.value_for(analysis.is_closed) == 0:
                continue
            if pattern.check_func(analysis):
                matching.append(pattern)

        excluded_names: Set[str] = set()
        for pattern in matching:
            excluded_names.update(pattern.excludes)

        return [p for p in matching if p.name not in excluded_names]

    def evaluate(
        self,
        candidate: Candidate,
        exposed_sets: Sequence[ExposedSet],
        conditions: Conditions,
        profile: RuleProfile,
    ) -> ScoreBreakdown:
        """
        Score a decomposition or special match.

        Every placement of the winning tile is scored and the best kept;
        ties go to the first placement.
        """
        if profile.variant != self.variant:
            raise ValueError(f"{type(self).__name__} cannot score {profile.variant.value} rules")

        best = None
        for analysis in build_analyses(candidate, exposed_sets, conditions, profile):
            breakdown = self.score_analysis(analysis)
            logger.debug(
                f"{self.variant.value} {candidate} wait={analysis.wait.name}: "
                f"{breakdown.bonus_count} bonus, {breakdown.fu} fu, {breakdown.base_points} points"
            )
            if best is None or rank_key(breakdown) > rank_key(best):
                best = breakdown
        return best

    def _new_breakdown(self, analysis: HandAnalysis) -> ScoreBreakdown:
        return ScoreBreakdown(
            variant=self.variant,
            is_self_draw=analysis.is_self_draw,
            is_concealed=analysis.is_closed,
            is_dealer=analysis.conditions.is_dealer,
            decomposition=analysis.decomposition,
            special=analysis.special,
            wait=analysis.wait,
        )
