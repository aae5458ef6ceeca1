"""
Special Hand Detectors

Winning shapes that are not one pair plus four sets:
- Thirteen orphans (十三幺 / 国士无双): one of each terminal and honor plus a duplicate
- Seven pairs (七对子): seven distinct kinds, two of each
- Nine gates (九莲宝灯): 1112345678999 in one suit plus any tile of that suit

Detectors are pure predicates over the full 14-tile count vector. Whether a
shape is accepted, and what it combines with, is decided by each scorer.
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Tuple
import numpy as np

from .tiles import Tile, TileSuit, TERMINAL_HONOR_INDICES, NUM_TILE_KINDS


NINE_GATES_PROFILE = [3, 1, 1, 1, 1, 1, 1, 1, 3]


class SpecialHandType(IntEnum):
    """Special winning shapes"""
    THIRTEEN_ORPHANS = 0
    SEVEN_PAIRS = 1
    NINE_GATES = 2


@dataclass(frozen=True)
class SpecialMatch:
    """
    A matched special shape.

    Attributes:
        hand_type: Which shape matched
        is_pure: Thirteen-sided wait for thirteen orphans, nine-sided wait for nine gates
        suit: Suit of a nine gates hand
        counts: Count vector of the matched 14 tiles
    """
    hand_type: SpecialHandType
    is_pure: bool = False
    suit: Optional[TileSuit] = None
    counts: Tuple[int, ...] = ()

    def to_count_array(self) -> np.ndarray:
        return np.array(self.counts, dtype=np.int8)

    def __str__(self) -> str:
        name = self.hand_type.name.replace("_", " ").title()
        return f"{name} (pure)" if self.is_pure else name


def is_thirteen_orphans(counts: np.ndarray) -> bool:
    """One of each of the 13 terminal/honor kinds plus one duplicate"""
    if int(counts.sum()) != 14:
        return False
    for idx in range(NUM_TILE_KINDS):
        if idx in TERMINAL_HONOR_INDICES:
            if counts[idx] == 0 or counts[idx] > 2:
                return False
        elif counts[idx] > 0:
            return False
    return True


def is_thirteen_wait_orphans(counts: np.ndarray, winning_tile: Optional[Tile]) -> bool:
    """Thirteen orphans where the 13 tiles before the win were all distinct"""
    if winning_tile is None or not is_thirteen_orphans(counts):
        return False
    return counts[winning_tile.tile_index] == 2


def is_seven_pairs(counts: np.ndarray) -> bool:
    """Exactly 7 distinct kinds, each held exactly twice"""
    if int(counts.sum()) != 14:
        return False
    held = counts[counts > 0]
    return len(held) == 7 and bool((held == 2).all())


def _single_suit_profile(counts: np.ndarray) -> Optional[TileSuit]:
    """Suit of a hand whose tiles all belong to one numbered suit"""
    suits = {idx // 9 for idx in np.flatnonzero(counts)}
    if len(suits) != 1:
        return None
    suit = suits.pop()
    if suit >= TileSuit.HONOR:
        return None
    return TileSuit(suit)


def is_nine_gates(counts: np.ndarray) -> bool:
    """Base profile 3,1,1,1,1,1,1,1,3 in one suit plus exactly one extra tile"""
    if int(counts.sum()) != 14:
        return False
    suit = _single_suit_profile(counts)
    if suit is None:
        return False
    ranks = counts[suit * 9:suit * 9 + 9]
    return all(int(c) >= need for c, need in zip(ranks, NINE_GATES_PROFILE))


def is_pure_nine_gates(counts: np.ndarray, winning_tile: Optional[Tile]) -> bool:
    """
    Nine gates whose 13 tiles before the win matched the base profile exactly,
    so any rank 1-9 of the suit would have completed it.
    """
    if winning_tile is None or not is_nine_gates(counts):
        return False
    suit = _single_suit_profile(counts)
    if winning_tile.suit != suit:
        return False
    before = counts.copy()
    before[winning_tile.tile_index] -= 1
    return [int(c) for c in before[suit * 9:suit * 9 + 9]] == NINE_GATES_PROFILE


def find_special_hands(counts: np.ndarray, winning_tile: Optional[Tile] = None) -> List[SpecialMatch]:
    """
    Run every detector on a 14-tile count vector.

    Args:
        counts: 34-element count vector of the whole (fully concealed) hand
        winning_tile: Tile that completed the hand, used for the pure forms

    Returns:
        All matching special shapes
    """
    snapshot = tuple(int(c) for c in counts)
    matches = []
    if is_thirteen_orphans(counts):
        matches.append(SpecialMatch(
            SpecialHandType.THIRTEEN_ORPHANS,
            is_pure=is_thirteen_wait_orphans(counts, winning_tile),
            counts=snapshot,
        ))
    if is_seven_pairs(counts):
        matches.append(SpecialMatch(SpecialHandType.SEVEN_PAIRS, counts=snapshot))
    if is_nine_gates(counts):
        matches.append(SpecialMatch(
            SpecialHandType.NINE_GATES,
            is_pure=is_pure_nine_gates(counts, winning_tile),
            suit=_single_suit_profile(counts),
            counts=snapshot,
        ))
    return matches
