"""
Tests for riichi scoring and the shared evaluation entry point
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_scoring.tiles import WindType, man, pin, sou, EAST, WHITE_DRAGON, GREEN_DRAGON, RED_DRAGON
from mahjong_scoring.melds import ExposedSet
from mahjong_scoring.conditions import Conditions
from mahjong_scoring.rules import RIICHI_RULES, RIICHI_NO_LIMIT_RULES
from mahjong_scoring.scoring import evaluate_hand, WaitType
from mahjong_scoring.notation import parse_tiles
from mahjong_scoring.errors import BelowMinimumBonusError, NoValidDecomposition, StructuralError


def ron(tile, **kwargs):
    kwargs.setdefault("seat_wind", WindType.SOUTH)
    return Conditions(is_self_draw=False, winning_tile=tile, **kwargs)


def tsumo(tile, **kwargs):
    kwargs.setdefault("seat_wind", WindType.SOUTH)
    return Conditions(is_self_draw=True, winning_tile=tile, **kwargs)


class TestRiichiYaku:
    """Test yaku detection and han/fu"""

    def test_riichi_pinfu_tanyao(self):
        """Closed all-sequence simples hand won on a two-sided wait"""
        tiles = parse_tiles("234m55m567p345s678s")
        result = evaluate_hand(tiles, conditions=ron(sou(8), is_riichi=True))

        assert result.item_names == ["Riichi", "Tanyao", "Pinfu"]
        assert result.bonus_count == 3
        assert result.fu == 30
        assert result.base_points == 960
        assert result.wait == WaitType.RYANMEN
        assert result.tier is None

    def test_double_riichi_excludes_riichi(self):
        tiles = parse_tiles("234m55m567p345s678s")
        conditions = ron(sou(8), is_riichi=True, is_double_riichi=True)
        result = evaluate_hand(tiles, conditions=conditions)

        assert "Double Riichi" in result.item_names
        assert "Riichi" not in result.item_names
        assert result.bonus_count == 4
        assert result.base_points == 1920

    def test_best_wait_placement(self):
        """3m completes either 123m (edge) or 345m (two-sided); pinfu wins"""
        tiles = parse_tiles("123345m678p234s88s")
        result = evaluate_hand(tiles, conditions=ron(man(3), is_riichi=True))

        assert result.wait == WaitType.RYANMEN
        assert "Pinfu" in result.item_names
        assert result.base_points == 480

    def test_seven_pairs(self):
        tiles = parse_tiles("1155m2288p3399s11z")
        result = evaluate_hand(tiles, conditions=ron(EAST))

        assert result.item_names == ["Chiitoitsu"]
        assert result.fu == 25
        assert result.base_points == 400
        assert result.decomposition is None

    def test_discard_completed_triplet_is_open(self):
        """Ron on a shanpon wait leaves three concealed triplets"""
        tiles = parse_tiles("111m222p333s777z55s")
        result = evaluate_hand(tiles, conditions=ron(man(1)))

        assert "Sanankou" in result.item_names
        assert "Toitoi" in result.item_names
        assert "Yakuhai (Chun)" in result.item_names
        assert "Suuankou" not in result.item_names
        assert result.fu == 50
        assert result.bonus_count == 5
        assert result.base_points == 2000
        assert result.tier == "Mangan"

    def test_dora_not_counted_for_minimum(self):
        """An open hand without yaku stays below the minimum whatever its dora"""
        tiles = parse_tiles("234m567p789p55m")
        exposed = [ExposedSet.sequence(sou(2))]
        conditions = ron(man(5), dora_count=3)

        with pytest.raises(BelowMinimumBonusError) as exc_info:
            evaluate_hand(tiles, exposed, conditions)
        assert exc_info.value.minimum == 1
        assert exc_info.value.breakdown.bonus_count == 0

        result = evaluate_hand(tiles, exposed, conditions, enforce_minimum=False)
        assert not result.meets_minimum
        assert "Dora" not in result.item_names

    def test_dora_added_to_yaku(self):
        tiles = parse_tiles("234m55m567p345s678s")
        result = evaluate_hand(tiles, conditions=ron(sou(8), is_riichi=True, dora_count=2))
        assert result.item_names[-1] == "Dora"
        assert result.bonus_count == 5
        assert result.base_points == 2000

    def test_open_tanyao(self):
        tiles = parse_tiles("567p345s678s55m")
        exposed = [ExposedSet.sequence(man(2))]

        result = evaluate_hand(tiles, exposed, ron(sou(8)))
        assert result.item_names == ["Tanyao"]
        assert not result.is_concealed
        assert result.fu == 30
        assert result.base_points == 240

        strict = RIICHI_RULES.with_overrides(open_tanyao=False)
        with pytest.raises(BelowMinimumBonusError):
            evaluate_hand(tiles, exposed, ron(sou(8)), strict)

    def test_open_hand_reduced_value(self):
        """Honitsu is 3 han closed and 2 han open"""
        tiles = parse_tiles("123m456m789m11z")
        exposed = [ExposedSet.triplet(RED_DRAGON)]
        result = evaluate_hand(tiles, exposed, ron(man(9)))

        assert "Honitsu" in result.item_names
        honitsu = [i for i in result.items if i.name == "Honitsu"][0]
        assert honitsu.value == 2
        ittsu = [i for i in result.items if i.name == "Ittsu"][0]
        assert ittsu.value == 1

    def test_concealed_quad_keeps_hand_closed(self):
        tiles = parse_tiles("234m567p345s55m")
        exposed = [ExposedSet.quad(sou(1), is_concealed=True)]
        result = evaluate_hand(tiles, exposed, tsumo(man(5)))

        assert result.is_concealed
        assert result.item_names == ["Menzen Tsumo"]
        assert result.fu == 60
        assert result.base_points == 480

    def test_renhou_optional(self):
        tiles = parse_tiles("234m55m567p345s678s")
        conditions = ron(sou(8), is_human_hand=True)

        result = evaluate_hand(tiles, conditions=conditions)
        assert "Renhou" not in result.item_names

        profile = RIICHI_RULES.with_overrides(allow_renhou=True)
        result = evaluate_hand(tiles, conditions=conditions, profile=profile)
        assert "Renhou" in result.item_names


class TestRiichiYakuman:
    """Test limit hands"""

    def test_thirteen_sided_kokushi(self):
        tiles = parse_tiles("19m19p19s12345677z")
        conditions = tsumo(RED_DRAGON, seat_wind=WindType.EAST, is_dealer=True)
        result = evaluate_hand(tiles, conditions=conditions)

        assert result.item_names == ["Kokushi Musou Juusanmen"]
        assert result.limit_count == 2
        assert result.base_points == 16000
        assert result.tier == "2x Yakuman"

    def test_single_yakuman_profile(self):
        tiles = parse_tiles("19m19p19s12345677z")
        profile = RIICHI_RULES.with_overrides(double_limit_hands=False)
        result = evaluate_hand(tiles, conditions=tsumo(RED_DRAGON), profile=profile)
        assert result.base_points == 8000
        assert result.tier == "Yakuman"

    def test_suuankou_tanki(self):
        tiles = parse_tiles("111m222p333s777z55s")
        result = evaluate_hand(tiles, conditions=tsumo(sou(5)))

        assert result.item_names == ["Suuankou Tanki"]
        assert result.limit_count == 2
        assert result.base_points == 16000

    def test_pure_nine_gates(self):
        tiles = parse_tiles("11123455678999m")
        result = evaluate_hand(tiles, conditions=ron(man(5)))

        assert "Junsei Chuuren Poutou" in result.item_names
        assert "Chuuren Poutou" not in result.item_names
        assert result.base_points == 16000

    def test_daisangen(self):
        tiles = parse_tiles("123m99p")
        exposed = [ExposedSet.triplet(WHITE_DRAGON),
                   ExposedSet.triplet(GREEN_DRAGON),
                   ExposedSet.triplet(RED_DRAGON)]
        result = evaluate_hand(tiles, exposed, ron(pin(9)))
        assert result.item_names == ["Daisangen"]
        assert result.base_points == 8000

    def test_aotenjou_counts_yakuman_as_han(self):
        tiles = parse_tiles("111m222p333s777z55s")
        result = evaluate_hand(tiles, conditions=tsumo(sou(5)), profile=RIICHI_NO_LIMIT_RULES)

        assert "Suuankou Tanki" in result.item_names
        assert "Toitoi" in result.item_names
        assert "Sanankou" not in result.item_names
        assert result.bonus_count == 30
        assert result.fu == 50
        assert result.base_points == 50 * 2 ** 32
        assert result.tier is None


class TestEvaluateHand:
    """Test validation and candidate selection"""

    def test_not_a_winning_hand(self):
        tiles = parse_tiles("13579m13579p1234z")
        with pytest.raises(NoValidDecomposition) as exc_info:
            evaluate_hand(tiles, conditions=ron(man(1)))
        assert exc_info.value.tile_count == 14

    def test_five_copies(self):
        tiles = parse_tiles("11111m234p567s789s")
        with pytest.raises(StructuralError):
            evaluate_hand(tiles)

    def test_five_copies_across_exposed_set(self):
        tiles = parse_tiles("11m234p567s789s")
        exposed = [ExposedSet.quad(man(1))]
        with pytest.raises(StructuralError):
            evaluate_hand(tiles, exposed)

    def test_wrong_tile_count(self):
        with pytest.raises(StructuralError):
            evaluate_hand(parse_tiles("123m456p789s11z"))

    def test_winning_tile_must_be_held(self):
        tiles = parse_tiles("234m55m567p345s678s")
        with pytest.raises(StructuralError):
            evaluate_hand(tiles, conditions=ron(pin(1)))

    def test_deterministic(self):
        tiles = parse_tiles("11122233344455m")
        conditions = tsumo(man(5))
        first = evaluate_hand(tiles, conditions=conditions)
        second = evaluate_hand(tiles, conditions=conditions)
        assert first == second
        assert str(first.decomposition) == str(second.decomposition)

    def test_rule_set_mismatch(self):
        from mahjong_scoring.scoring import RiichiScorer
        from mahjong_scoring.rules import HONG_KONG_RULES
        from mahjong_scoring.decomposition import decompose_hand

        tiles = parse_tiles("234m55m567p345s678s")
        candidate = decompose_hand(tiles)[0]
        with pytest.raises(ValueError):
            RiichiScorer().evaluate(candidate, (), ron(sou(8)), HONG_KONG_RULES)

    def test_summary(self):
        tiles = parse_tiles("234m55m567p345s678s")
        result = evaluate_hand(tiles, conditions=ron(sou(8), is_riichi=True))
        summary = result.summary()
        assert "Pinfu" in summary
        assert "960 base points" in summary
