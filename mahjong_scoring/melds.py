"""
Mahjong Sets

Set kinds shared by the decomposition engine and the scorers, and the
already-committed exposed sets a player declared before winning.
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, Tuple
import numpy as np

from .tiles import Tile, NUM_TILE_KINDS


class SetKind(IntEnum):
    """Kinds of sets (combinations) a hand is built from"""
    SEQUENCE = 0  # 顺子 - 3 consecutive tiles in the same suit
    TRIPLET = 1   # 刻子 - 3 identical tiles
    QUAD = 2      # 杠 - 4 identical tiles


@dataclass(frozen=True)
class ExposedSet:
    """
    A declared set that the decomposition engine never re-partitions.

    Attributes:
        kind: Sequence, triplet or quad
        tiles: Tiles in the set
        is_concealed: True only for a concealed quad (暗杠)
    """
    kind: SetKind
    tiles: Tuple[Tile, ...]
    is_concealed: bool = False

    def __post_init__(self):
        """Validate set"""
        object.__setattr__(self, "tiles", tuple(sorted(self.tiles)))
        if any(t.is_flower for t in self.tiles):
            raise ValueError("Flower tiles cannot form a set")
        if self.kind == SetKind.SEQUENCE:
            if len(self.tiles) != 3:
                raise ValueError("Sequence must have exactly 3 tiles")
            if not self._is_valid_sequence(self.tiles):
                raise ValueError(f"Invalid sequence {self}")
        elif self.kind == SetKind.TRIPLET:
            if len(self.tiles) != 3:
                raise ValueError("Triplet must have exactly 3 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Triplet tiles must be identical")
        elif self.kind == SetKind.QUAD:
            if len(self.tiles) != 4:
                raise ValueError("Quad must have exactly 4 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Quad tiles must be identical")
        if self.is_concealed and self.kind != SetKind.QUAD:
            raise ValueError("Only a quad can be declared concealed")

    @staticmethod
    def _is_valid_sequence(tiles: Tuple[Tile, ...]) -> bool:
        """Check if tiles form a valid sequence"""
        if not tiles[0].is_suited:
            return False
        if not all(t.suit == tiles[0].suit for t in tiles):
            return False
        ranks = [t.rank for t in tiles]
        return ranks[1] == ranks[0] + 1 and ranks[2] == ranks[1] + 1

    @classmethod
    def sequence(cls, first: Tile) -> 'ExposedSet':
        """Open sequence starting at the given tile"""
        return cls(SetKind.SEQUENCE, tuple(
            Tile(first.suit, first.rank + offset) for offset in range(3)
        ))

    @classmethod
    def triplet(cls, tile: Tile) -> 'ExposedSet':
        return cls(SetKind.TRIPLET, (tile,) * 3)

    @classmethod
    def quad(cls, tile: Tile, is_concealed: bool = False) -> 'ExposedSet':
        return cls(SetKind.QUAD, (tile,) * 4, is_concealed)

    @property
    def base_tile(self) -> Tile:
        """Lowest tile of a sequence or the repeated tile"""
        return self.tiles[0]

    @property
    def anchor(self) -> int:
        return self.base_tile.tile_index

    @property
    def is_quad(self) -> bool:
        return self.kind == SetKind.QUAD

    @property
    def opens_hand(self) -> bool:
        """Every declared set except a concealed quad opens the hand"""
        return not self.is_concealed

    def to_count_array(self) -> np.ndarray:
        """Convert set to 34-element count array"""
        counts = np.zeros(NUM_TILE_KINDS, dtype=np.int8)
        for tile in self.tiles:
            counts[tile.tile_index] += 1
        return counts

    def __str__(self) -> str:
        tiles_str = "".join(str(t.rank) for t in self.tiles) + str(self.tiles[0])[-1]
        if self.is_concealed:
            return f"({tiles_str})"
        return f"[{tiles_str}]"


def is_closed_hand(exposed_sets: Iterable[ExposedSet]) -> bool:
    """A hand stays closed when every declared set is a concealed quad"""
    return all(not s.opens_hand for s in exposed_sets)


def exposed_counts(exposed_sets: Iterable[ExposedSet]) -> np.ndarray:
    """Sum of count arrays for all declared sets"""
    counts = np.zeros(NUM_TILE_KINDS, dtype=np.int16)
    for s in exposed_sets:
        counts += s.to_count_array()
    return counts
