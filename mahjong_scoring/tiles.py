"""
Mahjong Tile Model

Defines the tile kinds shared by every rule variant:
- 9 Man (万) / 9 Pin (筒) / 9 Sou (条)       kinds 0-26
- 4 Winds (东南西北) + 3 Dragons (白发中)     kinds 27-33
- 8 Flowers (春夏秋冬 梅兰菊竹), scored separately and never part of a set

A hand is analyzed as a 34-element count vector (TileMultiset).
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple
import numpy as np

from .errors import StructuralError


NUM_TILE_KINDS = 34
COPIES_PER_KIND = 4

TERMINAL_INDICES = [0, 8, 9, 17, 18, 26]  # 1m, 9m, 1p, 9p, 1s, 9s
HONOR_INDICES = [27, 28, 29, 30, 31, 32, 33]  # E, S, W, N, White, Green, Red
TERMINAL_HONOR_INDICES = TERMINAL_INDICES + HONOR_INDICES


class TileSuit(IntEnum):
    """Tile suits"""
    MAN = 0     # 万 - Numbers 1-9
    PIN = 1     # 筒 - Numbers 1-9
    SOU = 2     # 条 - Numbers 1-9
    HONOR = 3   # 字 - Winds 1-4, Dragons 5-7
    FLOWER = 4  # 花 - Seasons 1-4, Plants 5-8


class WindType(IntEnum):
    """Wind tiles, valued by their honor rank"""
    EAST = 1   # 东
    SOUTH = 2  # 南
    WEST = 3   # 西
    NORTH = 4  # 北


class DragonType(IntEnum):
    """Dragon tiles, valued by their honor rank"""
    WHITE = 5  # 白
    GREEN = 6  # 发
    RED = 7    # 中


SUITED = (TileSuit.MAN, TileSuit.PIN, TileSuit.SOU)

_RANK_LIMITS = {
    TileSuit.MAN: 9,
    TileSuit.PIN: 9,
    TileSuit.SOU: 9,
    TileSuit.HONOR: 7,
    TileSuit.FLOWER: 8,
}

_SUIT_LETTERS = {
    TileSuit.MAN: "m",
    TileSuit.PIN: "p",
    TileSuit.SOU: "s",
    TileSuit.HONOR: "z",
    TileSuit.FLOWER: "f",
}


@dataclass(frozen=True)
class Tile:
    """
    A single tile kind.

    Attributes:
        suit: Man, Pin, Sou, Honor or Flower
        rank: 1-9 for suited tiles, 1-7 for honors, 1-8 for flowers
    """
    suit: TileSuit
    rank: int

    def __post_init__(self):
        """Validate rank range for the suit"""
        limit = _RANK_LIMITS[TileSuit(self.suit)]
        if not 1 <= self.rank <= limit:
            raise ValueError(
                f"{TileSuit(self.suit).name} tiles must have rank 1-{limit}, got {self.rank}"
            )

    @property
    def is_suited(self) -> bool:
        return self.suit in SUITED

    @property
    def is_honor(self) -> bool:
        """Check if tile is a wind or dragon"""
        return self.suit == TileSuit.HONOR

    @property
    def is_flower(self) -> bool:
        return self.suit == TileSuit.FLOWER

    @property
    def is_wind(self) -> bool:
        return self.is_honor and self.rank <= 4

    @property
    def is_dragon(self) -> bool:
        return self.is_honor and self.rank >= 5

    @property
    def is_terminal(self) -> bool:
        """Check if tile is a 1 or 9 of a suit"""
        return self.is_suited and self.rank in (1, 9)

    @property
    def is_terminal_or_honor(self) -> bool:
        return self.is_terminal or self.is_honor

    @property
    def is_simple(self) -> bool:
        """Check if tile is a 2-8 of a suit"""
        return self.is_suited and 2 <= self.rank <= 8

    @property
    def is_green(self) -> bool:
        """Check if tile is green (2,3,4,6,8 sou and the green dragon)"""
        if self.suit == TileSuit.SOU:
            return self.rank in (2, 3, 4, 6, 8)
        return self.is_honor and self.rank == DragonType.GREEN

    @property
    def tile_index(self) -> int:
        """
        Get the kind index (0-33) of this tile.
        Flowers have no kind index.
        """
        if self.is_flower:
            raise ValueError("Flower tiles have no kind index")
        return int(self.suit) * 9 + self.rank - 1

    def __lt__(self, other) -> bool:
        """Comparison for sorting"""
        if not isinstance(other, Tile):
            return NotImplemented
        return (self.suit, self.rank) < (other.suit, other.rank)

    def __repr__(self) -> str:
        return f"Tile({TileSuit(self.suit).name}, {self.rank})"

    def __str__(self) -> str:
        return f"{self.rank}{_SUIT_LETTERS[TileSuit(self.suit)]}"

    @classmethod
    def from_index(cls, tile_index: int) -> 'Tile':
        """
        Create a tile from its kind index (0-33).

        Args:
            tile_index: Kind index
        """
        if not 0 <= tile_index < NUM_TILE_KINDS:
            raise ValueError(f"Tile index must be 0-33, got {tile_index}")
        return cls(TileSuit(tile_index // 9), tile_index % 9 + 1)

    @classmethod
    def from_string(cls, s: str) -> 'Tile':
        """
        Create a tile from a two-character code such as "1m", "7z" or "3f".
        """
        s = s.strip()
        if len(s) != 2 or not s[0].isdigit():
            raise ValueError(f"Cannot parse tile string: {s!r}")
        for suit, letter in _SUIT_LETTERS.items():
            if s[1] == letter:
                return cls(suit, int(s[0]))
        raise ValueError(f"Cannot parse tile string: {s!r}")


def index_of(tile_index_or_tile) -> int:
    """Kind index for either a Tile or an int index"""
    if isinstance(tile_index_or_tile, Tile):
        return tile_index_or_tile.tile_index
    return int(tile_index_or_tile)


def is_suited_index(idx: int) -> bool:
    return idx < 27


def rank_of(idx: int) -> int:
    """Rank (1-9, or 1-7 for honors) of a kind index"""
    return idx % 9 + 1


def suit_of(idx: int) -> TileSuit:
    return TileSuit(idx // 9)


def split_flowers(tiles: Iterable[Tile]) -> Tuple[List[Tile], List[Tile]]:
    """
    Separate flower tiles from the rest.

    Returns:
        Tuple of (non-flower tiles, flower tiles)
    """
    regular, flowers = [], []
    for tile in tiles:
        (flowers if tile.is_flower else regular).append(tile)
    return regular, flowers


def validate_counts(counts: np.ndarray) -> None:
    """Raise StructuralError unless counts is a valid 34-kind vector"""
    if counts.shape != (NUM_TILE_KINDS,):
        raise StructuralError(f"Count vector must have {NUM_TILE_KINDS} entries, got {counts.shape}")
    if (counts < 0).any():
        raise StructuralError("Tile counts cannot be negative")
    over = np.flatnonzero(counts > COPIES_PER_KIND)
    if len(over):
        idx = int(over[0])
        raise StructuralError(
            f"{counts[idx]} copies of {Tile.from_index(idx)} exceed the limit of {COPIES_PER_KIND}"
        )


class TileMultiset:
    """
    Immutable counts of the 34 non-flower tile kinds (0-4 each).
    Used to represent hands and partial hands for analysis.
    """

    NUM_TILE_KINDS = NUM_TILE_KINDS
    COPIES_PER_KIND = COPIES_PER_KIND

    __slots__ = ("_counts",)

    def __init__(self, counts: Optional[Iterable[int]] = None):
        """Initialize from an optional 34-element count sequence"""
        if counts is None:
            arr = np.zeros(NUM_TILE_KINDS, dtype=np.int8)
        else:
            arr = np.array(counts, dtype=np.int16).reshape(-1)
            validate_counts(arr)
            arr = arr.astype(np.int8)
        arr.setflags(write=False)
        self._counts = arr

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile]) -> 'TileMultiset':
        """Build a multiset from tiles; flower tiles are rejected"""
        counts = np.zeros(NUM_TILE_KINDS, dtype=np.int16)
        for tile in tiles:
            if tile.is_flower:
                raise StructuralError(f"Flower tile {tile} cannot take part in hand structure")
            counts[tile.tile_index] += 1
        return cls(counts)

    def to_count_array(self) -> np.ndarray:
        """Writable copy of the 34-element count vector"""
        return self._counts.copy()

    def count(self, tile) -> int:
        """Count copies of a tile kind (Tile or index)"""
        return int(self._counts[index_of(tile)])

    def kinds(self) -> List[int]:
        """Kind indices held at least once, ascending"""
        return [int(i) for i in np.flatnonzero(self._counts)]

    def tiles(self) -> List[Tile]:
        """Expanded, sorted list of tiles"""
        return [Tile.from_index(i) for i in self.indices()]

    def indices(self) -> List[int]:
        result = []
        for idx in self.kinds():
            result.extend([idx] * int(self._counts[idx]))
        return result

    def with_added(self, tile) -> 'TileMultiset':
        counts = self._counts.astype(np.int16)
        counts[index_of(tile)] += 1
        return TileMultiset(counts)

    def with_removed(self, tile) -> 'TileMultiset':
        counts = self._counts.astype(np.int16)
        counts[index_of(tile)] -= 1
        return TileMultiset(counts)

    def __add__(self, other: 'TileMultiset') -> 'TileMultiset':
        if not isinstance(other, TileMultiset):
            return NotImplemented
        return TileMultiset(self._counts.astype(np.int16) + other._counts)

    def __len__(self) -> int:
        return int(self._counts.sum())

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles())

    def __contains__(self, tile) -> bool:
        return self.count(tile) > 0

    def __eq__(self, other) -> bool:
        if not isinstance(other, TileMultiset):
            return NotImplemented
        return bool(np.array_equal(self._counts, other._counts))

    def __hash__(self) -> int:
        return hash(self._counts.tobytes())

    def __repr__(self) -> str:
        return f"TileMultiset({len(self)} tiles)"

    def __str__(self) -> str:
        return " ".join(str(t) for t in self.tiles())


# Convenience functions for creating specific tiles
def man(rank: int) -> Tile:
    """Create a Man tile (1-9万)"""
    return Tile(TileSuit.MAN, rank)

def pin(rank: int) -> Tile:
    """Create a Pin tile (1-9筒)"""
    return Tile(TileSuit.PIN, rank)

def sou(rank: int) -> Tile:
    """Create a Sou tile (1-9条)"""
    return Tile(TileSuit.SOU, rank)

def wind(wind_type: WindType) -> Tile:
    """Create a Wind tile (东南西北)"""
    return Tile(TileSuit.HONOR, int(wind_type))

def dragon(dragon_type: DragonType) -> Tile:
    """Create a Dragon tile (白发中)"""
    return Tile(TileSuit.HONOR, int(dragon_type))

def flower(rank: int) -> Tile:
    """Create a Flower tile (1-4 seasons, 5-8 plants)"""
    return Tile(TileSuit.FLOWER, rank)


# Named wind tiles
EAST = wind(WindType.EAST)
SOUTH = wind(WindType.SOUTH)
WEST = wind(WindType.WEST)
NORTH = wind(WindType.NORTH)

# Named dragon tiles
WHITE_DRAGON = dragon(DragonType.WHITE)
GREEN_DRAGON = dragon(DragonType.GREEN)
RED_DRAGON = dragon(DragonType.RED)
