#!/usr/bin/env python3
"""
Score a Mahjong Hand

Parses a hand in compact notation and prints its score breakdown,
or its shanten and improving tiles when the hand is not complete.

Usage:
    python score_hand.py "234m456p678s22z [555z]" --win 2z --tsumo
    python score_hand.py "19m19p19s1234567z1m" --rules hong_kong --win 1m
    python score_hand.py "123m456p789s1234z" --shanten
"""

import argparse
import logging
import sys
from typing import List

from mahjong_scoring.conditions import Conditions
from mahjong_scoring.errors import MahjongScoringError, NoValidDecomposition
from mahjong_scoring.notation import parse_hand, parse_tiles
from mahjong_scoring.payments import settle
from mahjong_scoring.rules import RULE_PROFILES, get_rule_profile
from mahjong_scoring.scoring import ScoreBreakdown, evaluate_hand
from mahjong_scoring.shanten import ShantenCalculator, counts_from_tiles
from mahjong_scoring.tiles import Tile, WindType

logger = logging.getLogger("score_hand")

WIND_NAMES = {w.name.lower(): w for w in WindType}


def print_breakdown(breakdown: ScoreBreakdown):
    print("=" * 50)
    if breakdown.special is not None:
        print(f"Shape: {breakdown.special}")
    elif breakdown.decomposition is not None:
        print(f"Shape: {breakdown.decomposition}")
    print("-" * 50)
    print(breakdown.summary())
    if not breakdown.meets_minimum:
        print("(below the minimum for a legal win)")
    print("=" * 50)


def print_shanten(tiles: List[Tile], fixed_sets: int):
    result = ShantenCalculator().calculate(counts_from_tiles(tiles), fixed_sets)
    print(f"Shanten: {result.shanten}")
    if not result.improvements:
        return
    if result.waiting_tiles:
        waits = " ".join(str(Tile.from_index(i)) for i in result.waiting_tiles)
        print(f"Improving draws: {waits} ({result.ukeire} tiles)")
    else:
        for discard, draws in sorted(result.improvements.items()):
            waits = " ".join(str(Tile.from_index(i)) for i in sorted(draws))
            print(f"Discard {Tile.from_index(discard)}: {waits}")


def main():
    parser = argparse.ArgumentParser(description="Score a Mahjong hand")
    parser.add_argument("hand", type=str, help='Hand notation, e.g. "123m456p11z [555z] (1111s)"')
    parser.add_argument("--rules", type=str, default="riichi", choices=list(RULE_PROFILES.keys()))
    parser.add_argument("--win", type=str, default=None, help="Winning tile, e.g. 5p")
    parser.add_argument("--tsumo", action="store_true", help="Won by self-draw")
    parser.add_argument("--seat", type=str, default="east", choices=list(WIND_NAMES.keys()))
    parser.add_argument("--round", type=str, default="east", choices=list(WIND_NAMES.keys()))
    parser.add_argument("--riichi", action="store_true")
    parser.add_argument("--dora", type=int, default=0)
    parser.add_argument("--discarder", type=str, default=None, choices=list(WIND_NAMES.keys()))
    parser.add_argument("--shanten", action="store_true", help="Show shanten instead of scoring")
    parser.add_argument("--verbose", action="store_true")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")

    try:
        tiles, exposed = parse_hand(args.hand)
        if args.shanten:
            print_shanten(tiles, len(exposed))
            return 0

        seat = WIND_NAMES[args.seat]
        winning = parse_tiles(args.win)[0] if args.win else None
        conditions = Conditions(
            is_self_draw=args.tsumo,
            winning_tile=winning,
            seat_wind=seat,
            round_wind=WIND_NAMES[args.round],
            is_dealer=seat == WindType.EAST,
            is_riichi=args.riichi,
            dora_count=args.dora,
        )
        profile = get_rule_profile(args.rules)
        logger.info(f"Scoring {args.hand} under {profile.name}")

        breakdown = evaluate_hand(tiles, exposed, conditions, profile, enforce_minimum=False)
    except NoValidDecomposition as e:
        print(f"Not a winning hand: {e}")
        print_shanten(tiles, len(exposed))
        return 1
    except MahjongScoringError as e:
        print(f"Error: {e}")
        return 2

    print_breakdown(breakdown)

    if breakdown.meets_minimum:
        discarder = None if args.tsumo or args.discarder is None else WIND_NAMES[args.discarder]
        changes = settle(breakdown, profile, seat, discarder)
        print("Payments: " + ", ".join(f"{s.name.title()} {v:+d}" for s, v in changes.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
