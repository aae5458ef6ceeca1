"""
Point Payments

Turns a ScoreBreakdown's base points into per-seat point changes.
Seats are identified by their seat wind; the four changes always sum to zero.
"""

import logging
from typing import Dict, Optional

from .rules import RuleProfile, RuleVariant
from .scoring.base import ScoreBreakdown, round_up
from .tiles import WindType

logger = logging.getLogger(__name__)

SEATS = (WindType.EAST, WindType.SOUTH, WindType.WEST, WindType.NORTH)


def _empty() -> Dict[WindType, int]:
    return {seat: 0 for seat in SEATS}


def _collect(changes: Dict[WindType, int], winner: WindType, payer: WindType, amount: int):
    changes[payer] -= amount
    changes[winner] += amount


def _dealer_weighted(
    base: int,
    winner: WindType,
    discarder: Optional[WindType],
    dealer: WindType,
    unit: int,
) -> Dict[WindType, int]:
    """
    Dealer pays and receives double; a discarder pays for the table.

    Each payment is rounded up to unit (1 = no rounding).
    """
    changes = _empty()
    if discarder is None:
        for seat in SEATS:
            if seat == winner:
                continue
            share = 2 if winner == dealer or seat == dealer else 1
            _collect(changes, winner, seat, round_up(base * share, unit))
    else:
        multiplier = 6 if winner == dealer else 4
        _collect(changes, winner, discarder, round_up(base * multiplier, unit))
    return changes


def settle(
    breakdown: ScoreBreakdown,
    profile: RuleProfile,
    winner: WindType,
    discarder: Optional[WindType] = None,
    dealer: WindType = WindType.EAST,
    full_payment: bool = True,
) -> Dict[WindType, int]:
    """
    Per-seat point changes for one winner.

    Args:
        breakdown: Scored winning hand
        profile: Rule profile the hand was scored under
        winner: Winner's seat
        discarder: Seat that dealt in, None for a self-draw
        dealer: Dealer's seat
        full_payment: Chinese classical only; False settles every win like a self-draw

    Returns:
        Point change for each of the four seats

    Raises:
        ValueError: discarder is the winner, or the breakdown is from another variant
    """
    if breakdown.variant != profile.variant:
        raise ValueError(
            f"Cannot settle a {breakdown.variant.value} score with {profile.name} rules"
        )
    winner, dealer = WindType(winner), WindType(dealer)
    if discarder is not None:
        discarder = WindType(discarder)
        if discarder == winner:
            raise ValueError("The winner cannot also be the discarder")

    base = breakdown.base_points
    if profile.variant == RuleVariant.RIICHI:
        changes = _dealer_weighted(base, winner, discarder, dealer, 100)
    elif profile.variant == RuleVariant.CHINESE_CLASSICAL:
        if not full_payment:
            discarder = None
        changes = _dealer_weighted(base, winner, discarder, dealer, 1)
    else:
        changes = _empty()
        if discarder is None:
            for seat in SEATS:
                if seat != winner:
                    _collect(changes, winner, seat, base)
        else:
            multiplier = 3 if profile.full_spicy else 2
            _collect(changes, winner, discarder, base * multiplier)

    logger.debug(f"{profile.name} settlement for {winner.name}: {changes}")
    return changes
