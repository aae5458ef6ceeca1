"""
Winning Conditions

Situational facts about a win, supplied by the surrounding game.
The scoring core only reads them.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .tiles import Tile, WindType


@dataclass(frozen=True)
class Conditions:
    """
    Situational context for scoring one win.

    Attributes:
        is_self_draw: Won on own draw (tsumo / 自摸) rather than a discard
        winning_tile: The tile that completed the hand, if known
        seat_wind: Player's seat wind
        round_wind: Prevailing round wind
        is_dealer: Winner is the dealer
        is_riichi: Riichi declared
        is_double_riichi: Riichi declared on the first turn
        is_ippatsu: Won within one turn of riichi
        is_last_tile: Won on the last wall tile or the last discard
        is_replacement_tile: Won on a kong replacement draw
        is_consecutive_kong_replacement: Replacement win after two or more kongs in a row
        is_robbing_kong: Won on a tile added to another player's kong
        is_heavenly_hand: Dealer won on the initial deal
        is_earthly_hand: Non-dealer won on the first draw / first discard
        is_human_hand: Non-dealer won on a discard before their first draw
        flowers: Flower tiles set aside by the winner
        dora_count: Dora, red-five and ura-dora count supplied by the caller
    """
    is_self_draw: bool = False
    winning_tile: Optional[Tile] = None
    seat_wind: WindType = WindType.EAST
    round_wind: WindType = WindType.EAST
    is_dealer: bool = False
    is_riichi: bool = False
    is_double_riichi: bool = False
    is_ippatsu: bool = False
    is_last_tile: bool = False
    is_replacement_tile: bool = False
    is_consecutive_kong_replacement: bool = False
    is_robbing_kong: bool = False
    is_heavenly_hand: bool = False
    is_earthly_hand: bool = False
    is_human_hand: bool = False
    flowers: Tuple[Tile, ...] = field(default_factory=tuple)
    dora_count: int = 0

    def __post_init__(self):
        """Type and range checks"""
        for name in ("seat_wind", "round_wind"):
            value = getattr(self, name)
            if not isinstance(value, WindType):
                try:
                    value = WindType(value)
                except ValueError:
                    raise ValueError(f"{name} must be a wind (1-4), got {value!r}") from None
                object.__setattr__(self, name, value)
        if self.winning_tile is not None and self.winning_tile.is_flower:
            raise ValueError("A flower tile cannot be the winning tile")
        flowers = tuple(self.flowers)
        if any(not t.is_flower for t in flowers):
            raise ValueError("flowers may only contain flower tiles")
        if len(set(flowers)) != len(flowers):
            raise ValueError("Each flower tile exists only once")
        object.__setattr__(self, "flowers", flowers)
        if self.dora_count < 0:
            raise ValueError(f"dora_count cannot be negative, got {self.dora_count}")
        if self.is_ippatsu and not (self.is_riichi or self.is_double_riichi):
            raise ValueError("Ippatsu requires a riichi declaration")

    @property
    def is_discard_win(self) -> bool:
        return not self.is_self_draw

    @property
    def seat_flowers(self) -> Tuple[int, int]:
        """Flower ranks belonging to the seat wind (season, plant)"""
        return (int(self.seat_wind), int(self.seat_wind) + 4)
