"""
Shanten Calculator

Calculates the shanten number (distance to a winning shape) for a hand,
and which draws (or discard + draw pairs) bring it closer.

Shanten values:
- -1: Complete hand (already won)
-  0: Tenpai (one tile away from winning)
-  1: Iishanten (one away from tenpai)
-  2+: Further from tenpai

Calculates shanten for:
- Standard form (4 sets + 1 pair), by depth-bounded search
- Seven pairs
- Thirteen orphans
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple, Union
import numpy as np

from .errors import StructuralError
from .tiles import Tile, TileMultiset, TERMINAL_HONOR_INDICES, NUM_TILE_KINDS, validate_counts

logger = logging.getLogger(__name__)

MAX_HAND_TILES = 14
SETS_PER_HAND = 4

HandCounts = Union[np.ndarray, TileMultiset, Iterable[int]]


@dataclass
class ShantenResult:
    """
    Result of shanten calculation.

    improvements maps draw -> new shanten for a 13-tile hand, or
    discard -> {draw -> new shanten} for a 14-tile hand. Only draws that
    lower the shanten are listed.
    """
    shanten: int  # -1 = complete, 0 = tenpai, 1+ = tiles away
    improvements: Dict = field(default_factory=dict)
    ukeire: int = 0  # Unseen copies of the improving draws

    @property
    def is_complete(self) -> bool:
        return self.shanten == -1

    @property
    def is_tenpai(self) -> bool:
        return self.shanten == 0

    @property
    def waiting_tiles(self) -> List[int]:
        """Improving draws of a 13-tile hand"""
        return sorted(k for k, v in self.improvements.items() if not isinstance(v, dict))


class ShantenCalculator:
    """
    Shanten calculator.

    Stateless between calls; every search works on its own copy of the
    count vector.
    """

    KOKUSHI_TILES = TERMINAL_HONOR_INDICES  # 13 unique tiles for thirteen orphans

    def calculate(
        self,
        hand_counts: HandCounts,
        fixed_sets: int = 0,
        include_special: bool = True,
        with_improvements: bool = True,
    ) -> ShantenResult:
        """
        Calculate shanten for a hand.

        Args:
            hand_counts: 34-element array of concealed tile counts
            fixed_sets: Number of declared sets
            include_special: Also consider seven pairs and thirteen orphans
                (closed hands only)
            with_improvements: Also enumerate improving draws

        Returns:
            ShantenResult with shanten value and improvements

        Raises:
            StructuralError: malformed count vector or impossible tile total
        """
        counts = self._validate(hand_counts, fixed_sets)
        shanten = self.shanten(counts, fixed_sets, include_special)

        result = ShantenResult(shanten=shanten)
        if with_improvements:
            total = int(counts.sum())
            if total % 3 == 1:
                result.improvements = self._draw_improvements(counts, fixed_sets, include_special, shanten)
                result.ukeire = self._ukeire(counts, result.improvements)
            else:
                result.improvements = self._discard_improvements(counts, fixed_sets, include_special)
                result.ukeire = max(
                    (self._ukeire(self._minus(counts, d), draws) for d, draws in result.improvements.items()),
                    default=0,
                )
        logger.debug(f"shanten={result.shanten} with {len(result.improvements)} improvements")
        return result

    def shanten(self, counts: np.ndarray, fixed_sets: int = 0, include_special: bool = True) -> int:
        """Minimum over the standard form and, for closed hands, the special forms"""
        best = self._calculate_standard(counts, fixed_sets)
        if include_special and fixed_sets == 0:
            best = min(best, self._calculate_chiitoitsu(counts), self._calculate_kokushi(counts))
        return best

    def _validate(self, hand_counts: HandCounts, fixed_sets: int) -> np.ndarray:
        if isinstance(hand_counts, TileMultiset):
            counts = hand_counts.to_count_array().astype(np.int16)
        else:
            counts = np.array(hand_counts, dtype=np.int16).reshape(-1)
        validate_counts(counts)

        if not 0 <= fixed_sets <= SETS_PER_HAND:
            raise StructuralError(f"Declared sets must be 0-{SETS_PER_HAND}, got {fixed_sets}")
        total = int(counts.sum())
        if total % 3 == 0:
            raise StructuralError(f"{total} tiles cannot be measured against a pair + sets shape")
        if total + 3 * fixed_sets > MAX_HAND_TILES:
            raise StructuralError(
                f"{total} concealed tiles with {fixed_sets} declared sets exceed a {MAX_HAND_TILES}-tile hand"
            )
        return counts

    def _calculate_standard(self, counts: np.ndarray, fixed_sets: int) -> int:
        """
        Calculate standard form shanten (4 sets + 1 pair).

        Each step consumes the lowest remaining kind as a triplet, sequence,
        pair, adjacent partial, gapped partial, or skips it. At most
        5 - fixed_sets groups are taken; a search that used all of them
        without a pair pays one extra step.
        """
        work = counts.astype(np.int16)
        max_groups = 5 - fixed_sets
        best = [8]

        def search(start: int, completed: int, pairs: int, partials: int, depth: int):
            if depth > max_groups:
                return
            shanten = 8 - 2 * (fixed_sets + completed) - pairs - partials
            if depth == max_groups and pairs == 0:
                shanten += 1
            if shanten < best[0]:
                best[0] = shanten

            i = start
            while i < NUM_TILE_KINDS and work[i] == 0:
                i += 1
            if i >= NUM_TILE_KINDS:
                return

            suited = i < 27
            rank = i % 9

            # Triplet
            if work[i] >= 3:
                work[i] -= 3
                search(i, completed + 1, pairs, partials, depth + 1)
                work[i] += 3

            # Sequence (numbered suits only)
            if suited and rank <= 6 and work[i + 1] > 0 and work[i + 2] > 0:
                work[i] -= 1
                work[i + 1] -= 1
                work[i + 2] -= 1
                search(i, completed + 1, pairs, partials, depth + 1)
                work[i] += 1
                work[i + 1] += 1
                work[i + 2] += 1

            # Pair (head or partial)
            if work[i] >= 2:
                work[i] -= 2
                search(i, completed, pairs + 1, partials, depth + 1)
                work[i] += 2

            # Adjacent partial (ryanmen / penchan)
            if suited and rank <= 7 and work[i + 1] > 0:
                work[i] -= 1
                work[i + 1] -= 1
                search(i, completed, pairs, partials + 1, depth + 1)
                work[i] += 1
                work[i + 1] += 1

            # Gapped partial (kanchan)
            if suited and rank <= 6 and work[i + 2] > 0:
                work[i] -= 1
                work[i + 2] -= 1
                search(i, completed, pairs, partials + 1, depth + 1)
                work[i] += 1
                work[i + 2] += 1

            # Leave the rest of this kind unused
            search(i + 1, completed, pairs, partials, depth)

        search(0, 0, 0, 0, 0)
        return best[0]

    def _calculate_chiitoitsu(self, counts: np.ndarray) -> int:
        """
        Calculate shanten for chiitoitsu (7 pairs).

        Shanten = 6 - pairs + max(0, 7 - distinct_tiles)
        """
        pairs = int((counts >= 2).sum())
        distinct = int((counts >= 1).sum())
        return 6 - pairs + max(0, 7 - distinct)

    def _calculate_kokushi(self, counts: np.ndarray) -> int:
        """
        Calculate shanten for kokushi musou (13 orphans).

        Need one of each terminal/honor + one pair among them.
        """
        unique_count = sum(1 for idx in self.KOKUSHI_TILES if counts[idx] >= 1)
        has_pair = any(counts[idx] >= 2 for idx in self.KOKUSHI_TILES)
        return 13 - unique_count - (1 if has_pair else 0)

    @staticmethod
    def _minus(counts: np.ndarray, idx: int) -> np.ndarray:
        reduced = counts.copy()
        reduced[idx] -= 1
        return reduced

    def _draw_improvements(
        self,
        counts: np.ndarray,
        fixed_sets: int,
        include_special: bool,
        current_shanten: int,
    ) -> Dict[int, int]:
        """Draws that lower the shanten of a 13-tile hand"""
        improvements = {}
        for tile_idx in range(NUM_TILE_KINDS):
            if counts[tile_idx] >= 4:
                continue  # Already have 4
            counts[tile_idx] += 1
            new_shanten = self.shanten(counts, fixed_sets, include_special)
            counts[tile_idx] -= 1
            if new_shanten < current_shanten:
                improvements[tile_idx] = new_shanten
        return improvements

    def _discard_improvements(
        self,
        counts: np.ndarray,
        fixed_sets: int,
        include_special: bool,
    ) -> Dict[int, Dict[int, int]]:
        """For each discard of a 14-tile hand, the draws that improve on the 13 tiles left"""
        improvements = {}
        for discard_idx in range(NUM_TILE_KINDS):
            if counts[discard_idx] == 0:
                continue
            remaining = self._minus(counts, discard_idx)
            after_discard = self.shanten(remaining, fixed_sets, include_special)
            draws = self._draw_improvements(remaining, fixed_sets, include_special, after_discard)
            if draws:
                improvements[discard_idx] = draws
        return improvements

    @staticmethod
    def _ukeire(counts: np.ndarray, draws: Dict[int, int]) -> int:
        """Count how many of the improving tiles are available"""
        return sum(4 - int(counts[idx]) for idx in draws)

    def best_discards(self, hand_counts: HandCounts, fixed_sets: int = 0) -> List[Tuple[int, int, int]]:
        """
        Rank discards of a 14-tile hand.

        Returns:
            (tile_idx, resulting_shanten, resulting_ukeire), lowest shanten first,
            then highest ukeire, then lowest index
        """
        counts = self._validate(hand_counts, fixed_sets)
        if int(counts.sum()) % 3 != 2:
            raise StructuralError("Discards are ranked for a hand holding a drawn tile (3n + 2 tiles)")

        ranked = []
        for tile_idx in range(NUM_TILE_KINDS):
            if counts[tile_idx] == 0:
                continue
            result = self.calculate(self._minus(counts, tile_idx), fixed_sets)
            ranked.append((tile_idx, result.shanten, result.ukeire))

        # Prefer lower shanten, then higher ukeire
        ranked.sort(key=lambda r: (r[1], -r[2], r[0]))
        return ranked

    def get_best_discard(self, hand_counts: HandCounts, fixed_sets: int = 0) -> Tuple[int, int, int]:
        """
        Find the best tile to discard for maximum ukeire.

        Returns: (best_tile_idx, resulting_shanten, resulting_ukeire)
        """
        return self.best_discards(hand_counts, fixed_sets)[0]


def calculate_shanten(hand_counts: HandCounts, fixed_sets: int = 0) -> int:
    """
    Convenience function to calculate shanten.

    Args:
        hand_counts: 34-element array of tile counts
        fixed_sets: Number of declared sets

    Returns:
        Shanten value (-1 to 8)
    """
    calc = ShantenCalculator()
    return calc.calculate(hand_counts, fixed_sets, with_improvements=False).shanten


def get_improvements(hand_counts: HandCounts, fixed_sets: int = 0) -> Dict:
    """
    Get tiles that would improve the hand.

    Returns:
        draw -> shanten for 13 tiles, discard -> {draw -> shanten} for 14 tiles
    """
    calc = ShantenCalculator()
    return calc.calculate(hand_counts, fixed_sets).improvements


def counts_from_tiles(tiles: Iterable[Tile]) -> np.ndarray:
    """Count vector of tiles, flowers ignored"""
    return TileMultiset.from_tiles(t for t in tiles if not t.is_flower).to_count_array()
