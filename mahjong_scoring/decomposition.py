"""
Hand Decomposition Engine

Enumerates every way of splitting the concealed tiles of a hand into
one pair and the required number of sets (sequences and triplets).

All decompositions are returned: which one scores best depends on the
rule variant, so selection happens in the scorer.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union
import numpy as np

from .errors import StructuralError
from .melds import ExposedSet, SetKind, exposed_counts
from .tiles import (
    Tile, TileMultiset, NUM_TILE_KINDS, is_suited_index, rank_of, validate_counts,
)

logger = logging.getLogger(__name__)

SETS_PER_HAND = 4


@dataclass(frozen=True)
class DecomposedSet:
    """A set found inside the concealed tiles"""
    kind: SetKind
    anchor: int  # Kind index of the lowest tile

    @property
    def indices(self) -> Tuple[int, int, int]:
        if self.kind == SetKind.SEQUENCE:
            return (self.anchor, self.anchor + 1, self.anchor + 2)
        return (self.anchor, self.anchor, self.anchor)

    @property
    def tiles(self) -> List[Tile]:
        return [Tile.from_index(i) for i in self.indices]

    @property
    def base_tile(self) -> Tile:
        return Tile.from_index(self.anchor)

    def contains(self, tile_index: int) -> bool:
        return tile_index in self.indices

    def __str__(self) -> str:
        t = self.base_tile
        if self.kind == SetKind.SEQUENCE:
            return f"{t.rank}{t.rank + 1}{t.rank + 2}{str(t)[-1]}"
        return f"{t.rank}{t.rank}{t.rank}{str(t)[-1]}"


@dataclass(frozen=True)
class Decomposition:
    """
    One partition of the concealed tiles.

    Attributes:
        pair: Kind index of the pair (head)
        sets: Sets found, in the order the search extracted them
    """
    pair: int
    sets: Tuple[DecomposedSet, ...]

    @property
    def pair_tile(self) -> Tile:
        return Tile.from_index(self.pair)

    @property
    def sequences(self) -> List[DecomposedSet]:
        return [s for s in self.sets if s.kind == SetKind.SEQUENCE]

    @property
    def triplets(self) -> List[DecomposedSet]:
        return [s for s in self.sets if s.kind == SetKind.TRIPLET]

    def to_count_array(self) -> np.ndarray:
        """Count vector of pair plus sets"""
        counts = np.zeros(NUM_TILE_KINDS, dtype=np.int8)
        counts[self.pair] += 2
        for s in self.sets:
            for idx in s.indices:
                counts[idx] += 1
        return counts

    def __str__(self) -> str:
        pair = self.pair_tile
        parts = [str(s) for s in self.sets] + [f"{pair.rank}{pair.rank}{str(pair)[-1]}"]
        return " ".join(parts)


def required_sets(exposed_sets: Sequence[ExposedSet]) -> int:
    """Number of sets still to be found in the concealed tiles"""
    remaining = SETS_PER_HAND - len(exposed_sets)
    if remaining < 0:
        raise StructuralError(f"A hand holds at most {SETS_PER_HAND} sets, got {len(exposed_sets)} declared")
    return remaining


def _as_counts(tiles: Union[TileMultiset, np.ndarray, Iterable[Tile]]) -> np.ndarray:
    """Writable int16 count vector from any supported tile container"""
    if isinstance(tiles, TileMultiset):
        return tiles.to_count_array().astype(np.int16)
    if isinstance(tiles, np.ndarray):
        counts = tiles.astype(np.int16).reshape(-1)
        validate_counts(counts)
        return counts
    return TileMultiset.from_tiles(tiles).to_count_array().astype(np.int16)


def find_decompositions(
    concealed_tiles: Union[TileMultiset, np.ndarray, Iterable[Tile]],
    num_sets: int,
) -> List[Decomposition]:
    """
    Find every pair + sets partition of the concealed tiles.

    Args:
        concealed_tiles: Tiles not already committed to a declared set
        num_sets: Sets required among them (4 minus declared sets)

    Returns:
        All decompositions, ordered by pair kind and then triplet-before-sequence

    Raises:
        StructuralError: tile count is not num_sets * 3 + 2 or a kind exceeds 4 copies
    """
    counts = _as_counts(concealed_tiles)
    if not 0 <= num_sets <= SETS_PER_HAND:
        raise StructuralError(f"Required sets must be 0-{SETS_PER_HAND}, got {num_sets}")

    expected = num_sets * 3 + 2
    total = int(counts.sum())
    if total != expected:
        raise StructuralError(
            f"{num_sets} sets and a pair need {expected} concealed tiles, got {total}"
        )

    results: List[Decomposition] = []
    for pair_idx in range(NUM_TILE_KINDS):
        if counts[pair_idx] >= 2:
            counts[pair_idx] -= 2
            _extract_sets(counts, 0, pair_idx, [], results)
            counts[pair_idx] += 2

    logger.debug(f"{len(results)} decompositions for {total} tiles / {num_sets} sets")
    return results


def _extract_sets(
    counts: np.ndarray,
    start: int,
    pair_idx: int,
    current: List[DecomposedSet],
    results: List[Decomposition],
) -> None:
    """Consume the lowest remaining kind as a triplet or a sequence, exploring both"""
    first_idx = start
    while first_idx < NUM_TILE_KINDS and counts[first_idx] == 0:
        first_idx += 1

    if first_idx == NUM_TILE_KINDS:
        results.append(Decomposition(pair_idx, tuple(current)))
        return

    # Triplet
    if counts[first_idx] >= 3:
        counts[first_idx] -= 3
        current.append(DecomposedSet(SetKind.TRIPLET, first_idx))
        _extract_sets(counts, first_idx, pair_idx, current, results)
        current.pop()
        counts[first_idx] += 3

    # Sequence (suited tiles, rank 1-7 as the lowest tile)
    if is_suited_index(first_idx) and rank_of(first_idx) <= 7:
        idx2, idx3 = first_idx + 1, first_idx + 2
        if counts[idx2] > 0 and counts[idx3] > 0:
            counts[first_idx] -= 1
            counts[idx2] -= 1
            counts[idx3] -= 1
            current.append(DecomposedSet(SetKind.SEQUENCE, first_idx))
            _extract_sets(counts, first_idx, pair_idx, current, results)
            current.pop()
            counts[first_idx] += 1
            counts[idx2] += 1
            counts[idx3] += 1


def decompose_hand(
    concealed_tiles: Iterable[Tile],
    exposed_sets: Sequence[ExposedSet] = (),
) -> List[Decomposition]:
    """
    Decompose a hand given its concealed tiles and declared sets.

    The concealed tiles include the winning tile. Declared sets are fixed
    and only reduce how many sets must be found.

    Raises:
        StructuralError: wrong tile count or more than 4 copies of a kind overall
    """
    concealed = TileMultiset.from_tiles(concealed_tiles)
    num_sets = required_sets(exposed_sets)
    validate_counts(concealed.to_count_array().astype(np.int16) + exposed_counts(exposed_sets))
    return find_decompositions(concealed, num_sets)
