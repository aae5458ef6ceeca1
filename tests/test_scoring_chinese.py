"""
Tests for Chinese classical scoring
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_scoring.tiles import WindType, man, pin, sou, flower, RED_DRAGON
from mahjong_scoring.conditions import Conditions
from mahjong_scoring.rules import CHINESE_CLASSICAL_RULES
from mahjong_scoring.scoring import evaluate_hand
from mahjong_scoring.notation import parse_tiles
from mahjong_scoring.errors import NoValidDecomposition

RULES = CHINESE_CLASSICAL_RULES


def ron(tile, **kwargs):
    return Conditions(is_self_draw=False, winning_tile=tile, **kwargs)


class TestChineseClassical:
    """Test fan, fu and the mangan cap"""

    def test_all_triplets_with_dragon(self):
        tiles = parse_tiles("111m222p333s777z55s")
        result = evaluate_hand(tiles, conditions=ron(sou(5)), profile=RULES)

        assert result.item_names == ["All Triplets", "Red Dragon Set"]
        assert result.bonus_count == 2
        # 10 base + 8 + 4 + 4 + 8 concealed triplets + 2 winning pair
        assert result.fu == 36
        assert result.base_points == 144
        assert result.meets_minimum

    def test_flower_fu(self):
        """Seat flower 4 fu, other flower 2 fu"""
        tiles = parse_tiles("111m222p333s777z55s") + [flower(1), flower(2)]
        result = evaluate_hand(tiles, conditions=ron(sou(5)), profile=RULES)

        assert result.fu == 42
        assert result.base_points == 168
        assert "Flower Set" not in result.item_names

    def test_flower_set_adds_fan(self):
        tiles = parse_tiles("111m222p333s777z55s")
        flowers = tuple(flower(r) for r in (1, 2, 3, 4))
        result = evaluate_hand(tiles, conditions=ron(sou(5), flowers=flowers), profile=RULES)

        assert "Flower Set" in result.item_names
        assert result.bonus_count == 3
        assert result.fu == 46
        assert result.base_points == 300
        assert result.tier == "Mangan"

    def test_flowers_ignored_when_disabled(self):
        tiles = parse_tiles("111m222p333s777z55s") + [flower(1), flower(2)]
        profile = RULES.with_overrides(include_flowers=False)
        result = evaluate_hand(tiles, conditions=ron(sou(5)), profile=profile)
        assert result.fu == 36

    def test_mangan_cap(self):
        """Full flush all triplets beats the sequence reading and hits the cap"""
        tiles = parse_tiles("111222333555m99m")
        result = evaluate_hand(tiles, conditions=ron(man(5)), profile=RULES)

        assert "Full Flush" in result.item_names
        assert "All Triplets" in result.item_names
        assert "Half Flush" not in result.item_names
        assert result.bonus_count == 4
        assert result.base_points == 300
        assert result.tier == "Mangan"

    def test_all_sequences_fu(self):
        tiles = parse_tiles("234m55m567p345s678s")
        result = evaluate_hand(tiles, conditions=ron(sou(8)), profile=RULES)

        assert result.bonus_count == 0
        assert result.fu == 20
        assert result.base_points == 20

    def test_seat_and_round_wind_sets(self):
        tiles = parse_tiles("123m456p789s222z11z")
        conditions = ron(man(3), seat_wind=WindType.SOUTH, round_wind=WindType.SOUTH)
        result = evaluate_hand(tiles, conditions=conditions, profile=RULES)
        assert result.item_names == ["Round Wind Set", "Seat Wind Set"]

    def test_self_draw_last_tile(self):
        tiles = parse_tiles("234m55m567p345s678s")
        conditions = Conditions(is_self_draw=True, winning_tile=sou(8), is_last_tile=True)
        result = evaluate_hand(tiles, conditions=conditions, profile=RULES)
        assert result.item_names == ["Last Tile"]

    def test_seven_pairs_rejected(self):
        tiles = parse_tiles("1155m2288p3399s11z")
        with pytest.raises(NoValidDecomposition):
            evaluate_hand(tiles, conditions=ron(man(1)), profile=RULES)

    def test_seven_pairs_when_enabled(self):
        tiles = parse_tiles("1155m2288p3399s11z")
        profile = RULES.with_overrides(allow_seven_pairs=True)
        result = evaluate_hand(tiles, conditions=ron(man(1)), profile=profile)
        assert result.special is not None
        assert result.base_points == 10


class TestChineseLimitHands:
    """Test hands scored at a fixed tier"""

    def test_big_three_dragons(self):
        tiles = parse_tiles("555z666z777z123m99p")
        result = evaluate_hand(tiles, conditions=ron(pin(9)), profile=RULES)

        assert result.item_names == ["Big Three Dragons"]
        assert result.bonus_count == 0
        assert result.base_points == 300
        assert result.tier == "Mangan"

    def test_earthly_hand_half_mangan(self):
        tiles = parse_tiles("234m55m567p345s678s")
        conditions = ron(sou(8), is_earthly_hand=True)
        result = evaluate_hand(tiles, conditions=conditions, profile=RULES)

        assert result.base_points == 150
        assert result.tier == "Half Mangan"

    def test_thirteen_orphans(self):
        tiles = parse_tiles("19m19p19s12345677z")
        result = evaluate_hand(tiles, conditions=ron(RED_DRAGON), profile=RULES)
        assert result.item_names == ["Thirteen Orphans"]
        assert result.base_points == 300

    def test_four_winds_with_dragon_pair(self):
        tiles = parse_tiles("111222333444z55z")
        result = evaluate_hand(tiles, conditions=ron(parse_tiles("5z")[0]), profile=RULES)
        assert "Four Winds" in result.item_names
        assert result.tier == "Mangan"

    def test_impure_nine_gates_scored_normally(self):
        """Nine gates must be waiting on nine tiles to be a limit hand"""
        tiles = parse_tiles("11123455678999m")
        pure = evaluate_hand(tiles, conditions=ron(man(5)), profile=RULES)
        impure = evaluate_hand(tiles, conditions=ron(man(1)), profile=RULES)

        assert pure.item_names == ["Nine Gates"]
        assert "Nine Gates" not in impure.item_names
        assert "Full Flush" in impure.item_names
