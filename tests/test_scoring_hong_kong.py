"""
Tests for Hong Kong scoring
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_scoring.tiles import WindType, man, pin, sou, flower, EAST, RED_DRAGON
from mahjong_scoring.melds import ExposedSet
from mahjong_scoring.conditions import Conditions
from mahjong_scoring.rules import (
    HONG_KONG_RULES, HONG_KONG_FULL_SPICY_RULES, hong_kong_points, hong_kong_profile,
)
from mahjong_scoring.scoring import evaluate_hand
from mahjong_scoring.notation import parse_tiles
from mahjong_scoring.errors import BelowMinimumBonusError

RULES = HONG_KONG_RULES


def ron(tile, **kwargs):
    kwargs.setdefault("seat_wind", WindType.SOUTH)
    return Conditions(is_self_draw=False, winning_tile=tile, **kwargs)


class TestHongKongPoints:
    """Test the fan to points progression"""

    @pytest.mark.parametrize("fan,points", [
        (0, 1), (1, 2), (2, 4), (3, 8), (4, 16),
        (5, 24), (6, 32), (7, 48), (8, 64), (9, 96), (10, 128),
    ])
    def test_half_spicy(self, fan, points):
        assert hong_kong_points(fan) == points

    def test_full_spicy(self):
        assert hong_kong_points(5, full_spicy=True) == 32
        assert hong_kong_points(10, full_spicy=True) == 1024

    def test_base_unit(self):
        assert hong_kong_points(5, base_unit=2) == 48


class TestHongKongScoring:
    """Test fan patterns"""

    def test_concealed_all_sequences(self):
        tiles = parse_tiles("234m55m567p345s678s")
        result = evaluate_hand(tiles, conditions=ron(sou(8)), profile=RULES)

        assert result.item_names == ["Concealed Hand", "All Sequences", "No Flowers"]
        assert result.bonus_count == 3
        assert result.base_points == 8

    def test_below_minimum(self):
        tiles = parse_tiles("567p345s678s55m")
        exposed = [ExposedSet.sequence(man(2))]

        with pytest.raises(BelowMinimumBonusError) as exc_info:
            evaluate_hand(tiles, exposed, ron(sou(8)), RULES)
        assert exc_info.value.breakdown.bonus_count == 2
        assert exc_info.value.minimum == 3

        result = evaluate_hand(tiles, exposed, ron(sou(8)), RULES, enforce_minimum=False)
        assert not result.meets_minimum

    def test_custom_minimum(self):
        tiles = parse_tiles("567p345s678s55m")
        exposed = [ExposedSet.sequence(man(2))]
        profile = hong_kong_profile(min_fan=1)
        result = evaluate_hand(tiles, exposed, ron(sou(8)), profile)
        assert result.meets_minimum
        assert result.base_points == 4

    def test_great_three_dragons(self):
        tiles = parse_tiles("555z666z777z123m99p")
        result = evaluate_hand(tiles, conditions=ron(pin(9)), profile=RULES)

        assert "Great Three Dragons" in result.item_names
        assert "Red Dragon" not in result.item_names
        assert result.bonus_count == 10
        assert result.base_points == 128
        assert result.tier == "Limit"

    def test_seven_pairs_self_draw(self):
        tiles = parse_tiles("1155m2288p3399s11z")
        conditions = Conditions(is_self_draw=True, winning_tile=EAST)
        result = evaluate_hand(tiles, conditions=conditions, profile=RULES)

        assert result.item_names == ["Self Draw", "Concealed Hand", "Seven Pairs", "No Flowers"]
        assert result.base_points == 24

    def test_full_flush(self):
        tiles = parse_tiles("12334556778999m")
        result = evaluate_hand(tiles, conditions=ron(man(9)), profile=RULES)

        assert "Full Flush" in result.item_names
        assert "Half Flush" not in result.item_names
        assert result.bonus_count == 10

    def test_half_flush_with_seat_wind(self):
        tiles = parse_tiles("123m345m567m111z99m")
        conditions = ron(man(3), seat_wind=WindType.EAST)
        result = evaluate_hand(tiles, conditions=conditions, profile=RULES)

        assert result.item_names == ["Concealed Hand", "Half Flush", "Seat Wind", "No Flowers"]
        assert result.bonus_count == 6
        assert result.base_points == 32

    def test_round_wind_when_not_seat(self):
        tiles = parse_tiles("123m345m567m111z99m")
        result = evaluate_hand(tiles, conditions=ron(man(3)), profile=RULES)

        assert "Round Wind" in result.item_names
        assert "Seat Wind" not in result.item_names

    def test_seat_and_round_wind_both_count(self):
        """Different seat and round winds each score their own triplet"""
        tiles = parse_tiles("123m345m111z222z99m")
        result = evaluate_hand(tiles, conditions=ron(man(9)), profile=RULES)

        assert "Seat Wind" in result.item_names
        assert "Round Wind" in result.item_names

    def test_full_spicy_profile(self):
        tiles = parse_tiles("123m345m567m111z99m")
        conditions = ron(man(3), seat_wind=WindType.EAST)
        result = evaluate_hand(tiles, conditions=conditions, profile=HONG_KONG_FULL_SPICY_RULES)
        assert result.base_points == 64


class TestHongKongFlowers:
    """Test flower fan"""

    def test_seat_flower_and_set(self):
        tiles = parse_tiles("234m55m567p345s678s") + [flower(r) for r in (1, 2, 3, 4)]
        conditions = ron(sou(8), seat_wind=WindType.EAST)
        result = evaluate_hand(tiles, conditions=conditions, profile=RULES)

        assert "Flower Set" in result.item_names
        assert "Seat Flower" in result.item_names
        assert "No Flowers" not in result.item_names
        assert result.bonus_count == 5

    def test_other_seat_flower(self):
        tiles = parse_tiles("234m55m567p345s678s") + [flower(3)]
        result = evaluate_hand(tiles, conditions=ron(sou(8)), profile=RULES, enforce_minimum=False)
        assert "Seat Flower" not in result.item_names
        assert "No Flowers" not in result.item_names
        assert result.bonus_count == 2

    def test_eight_flowers(self):
        tiles = parse_tiles("234m55m567p345s678s") + [flower(r) for r in range(1, 9)]
        result = evaluate_hand(tiles, conditions=ron(sou(8)), profile=RULES)

        assert "Eight Flowers" in result.item_names
        assert "Flower Set" not in result.item_names
        assert result.bonus_count == 10


class TestHongKongLimitHands:
    """Test limit hands scoring alone"""

    def test_thirteen_orphans(self):
        tiles = parse_tiles("19m19p19s12345677z")
        result = evaluate_hand(tiles, conditions=ron(RED_DRAGON), profile=RULES)

        assert result.item_names == ["Thirteen Orphans"]
        assert result.bonus_count == 13
        assert result.limit_count == 1
        assert result.base_points == 128

    def test_all_honors(self):
        tiles = parse_tiles("111z222z555z777z33z")
        result = evaluate_hand(tiles, conditions=ron(parse_tiles("3z")[0]), profile=RULES)

        assert result.item_names == ["All Honors"]
        assert result.bonus_count == 10

    def test_limit_clamped_by_custom_profile(self):
        tiles = parse_tiles("19m19p19s12345677z")
        profile = hong_kong_profile(max_fan=13)
        result = evaluate_hand(tiles, conditions=ron(RED_DRAGON), profile=profile)
        assert result.base_points == hong_kong_points(13)
        assert result.tier == "Limit"
