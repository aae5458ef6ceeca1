"""
Mahjong Scoring Errors

Error kinds raised by the scoring core:
- StructuralError: the tiles cannot form a hand of the required size
- NoValidDecomposition: well-formed hand that is not a winning shape
- BelowMinimumBonusError: winning shape under the variant's minimum
- ParseError: unrecognized tile notation
"""

from typing import Optional


class MahjongScoringError(Exception):
    """Base class for all scoring errors"""


class StructuralError(MahjongScoringError, ValueError):
    """
    Tile counts cannot satisfy the pair + sets requirement.

    Raised for a wrong total tile count or more than four copies of a kind.
    """


class NoValidDecomposition(MahjongScoringError):
    """
    The hand is well-formed but is not a winning shape (false win claim).

    Callers typically apply a penalty policy for this case.
    """

    def __init__(self, message: str, tile_count: Optional[int] = None):
        super().__init__(message)
        self.tile_count = tile_count


class BelowMinimumBonusError(MahjongScoringError):
    """
    A winning shape whose bonus count is under the variant's win threshold.

    The computed breakdown is attached so the caller can still inspect it.
    """

    def __init__(self, breakdown, minimum: int):
        super().__init__(
            f"{breakdown.bonus_count} bonus below minimum of {minimum} "
            f"for {breakdown.variant.value}"
        )
        self.breakdown = breakdown
        self.minimum = minimum


class ParseError(MahjongScoringError, ValueError):
    """Unrecognized tile notation"""

    def __init__(self, message: str, text: str = "", position: int = -1):
        super().__init__(message)
        self.text = text
        self.position = position
