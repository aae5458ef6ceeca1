"""
Tests for the tile model, exposed sets and winning conditions
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_scoring.tiles import (
    Tile, TileMultiset, TileSuit, WindType, DragonType,
    man, pin, sou, wind, dragon, flower, split_flowers,
    EAST, SOUTH, RED_DRAGON, GREEN_DRAGON, WHITE_DRAGON,
)
from mahjong_scoring.melds import ExposedSet, SetKind, is_closed_hand, exposed_counts
from mahjong_scoring.conditions import Conditions
from mahjong_scoring.errors import StructuralError


class TestTiles:
    """Test tile kinds and classification"""

    def test_tile_creation(self):
        """Test creating tiles"""
        t1 = man(1)
        assert t1.suit == TileSuit.MAN
        assert t1.rank == 1

        t2 = sou(5)
        assert t2.suit == TileSuit.SOU
        assert t2.rank == 5

    def test_invalid_rank(self):
        with pytest.raises(ValueError):
            man(10)
        with pytest.raises(ValueError):
            Tile(TileSuit.HONOR, 8)
        with pytest.raises(ValueError):
            flower(9)

    def test_honor_tiles(self):
        """Test honor tile properties"""
        east = wind(WindType.EAST)
        assert east.is_honor
        assert east.is_wind
        assert not east.is_terminal
        assert east.is_terminal_or_honor

        red = dragon(DragonType.RED)
        assert red.is_honor
        assert red.is_dragon
        assert not red.is_wind

    def test_terminal_tiles(self):
        """Test terminal tile properties"""
        assert man(1).is_terminal
        assert pin(9).is_terminal
        assert not sou(5).is_terminal
        assert sou(5).is_simple
        assert not man(1).is_simple

    def test_green_tiles(self):
        """Test green tile identification"""
        green_tiles = [sou(2), sou(3), sou(4), sou(6), sou(8), GREEN_DRAGON]
        non_green = [sou(1), sou(5), sou(7), RED_DRAGON, man(3)]

        for t in green_tiles:
            assert t.is_green, f"{t} should be green"
        for t in non_green:
            assert not t.is_green, f"{t} should not be green"

    @pytest.mark.parametrize("tile,index", [
        (man(1), 0), (man(9), 8), (pin(1), 9), (pin(9), 17),
        (sou(1), 18), (sou(9), 26), (EAST, 27), (SOUTH, 28),
        (WHITE_DRAGON, 31), (GREEN_DRAGON, 32), (RED_DRAGON, 33),
    ])
    def test_tile_index(self, tile, index):
        """Kind index layout"""
        assert tile.tile_index == index
        assert Tile.from_index(index) == tile

    def test_flower_has_no_index(self):
        with pytest.raises(ValueError):
            flower(1).tile_index

    def test_tile_from_string(self):
        assert Tile.from_string("5p") == pin(5)
        assert Tile.from_string("7z") == RED_DRAGON
        assert Tile.from_string("3f") == flower(3)
        with pytest.raises(ValueError):
            Tile.from_string("5x")

    def test_sorting(self):
        tiles = [EAST, sou(1), man(9), pin(2)]
        assert sorted(tiles) == [man(9), pin(2), sou(1), EAST]

    def test_split_flowers(self):
        regular, flowers = split_flowers([man(1), flower(2), EAST, flower(6)])
        assert regular == [man(1), EAST]
        assert flowers == [flower(2), flower(6)]


class TestTileMultiset:
    """Test the 34-kind count vector"""

    def test_from_tiles(self):
        ms = TileMultiset.from_tiles([man(1), man(1), EAST])
        assert len(ms) == 3
        assert ms.count(man(1)) == 2
        assert ms.count(27) == 1
        assert EAST in ms
        assert man(2) not in ms

    def test_to_count_array(self):
        ms = TileMultiset.from_tiles([man(1), pin(5), pin(5)])
        counts = ms.to_count_array()
        assert counts.shape == (34,)
        assert counts[0] == 1
        assert counts[13] == 2
        assert counts.sum() == 3

    def test_count_array_is_a_copy(self):
        ms = TileMultiset.from_tiles([man(1)])
        counts = ms.to_count_array()
        counts[0] = 4
        assert ms.count(man(1)) == 1

    def test_five_copies_rejected(self):
        with pytest.raises(StructuralError):
            TileMultiset.from_tiles([man(1)] * 5)

        counts = np.zeros(34, dtype=np.int8)
        counts[5] = 5
        with pytest.raises(StructuralError):
            TileMultiset(counts)

    def test_negative_count_rejected(self):
        counts = np.zeros(34, dtype=np.int8)
        counts[3] = -1
        with pytest.raises(StructuralError):
            TileMultiset(counts)

    def test_wrong_length_rejected(self):
        with pytest.raises(StructuralError):
            TileMultiset([1, 2, 3])

    def test_flower_rejected(self):
        with pytest.raises(StructuralError):
            TileMultiset.from_tiles([man(1), flower(1)])

    def test_union_and_equality(self):
        a = TileMultiset.from_tiles([man(1), man(2)])
        b = TileMultiset.from_tiles([man(3)])
        assert a + b == TileMultiset.from_tiles([man(1), man(2), man(3)])
        assert hash(a + b) == hash(TileMultiset.from_tiles([man(3), man(2), man(1)]))

    def test_add_remove(self):
        ms = TileMultiset.from_tiles([man(1)])
        added = ms.with_added(EAST)
        assert len(added) == 2
        assert len(ms) == 1
        assert added.with_removed(EAST) == ms

    def test_iteration_in_index_order(self):
        ms = TileMultiset.from_tiles([RED_DRAGON, man(3), man(1), man(3)])
        assert list(ms) == [man(1), man(3), man(3), RED_DRAGON]
        assert ms.kinds() == [0, 2, 33]


class TestExposedSet:
    """Test declared sets"""

    def test_sequence_creation(self):
        s = ExposedSet.sequence(man(3))
        assert s.kind == SetKind.SEQUENCE
        assert s.tiles == (man(3), man(4), man(5))
        assert s.opens_hand

    def test_triplet_creation(self):
        s = ExposedSet.triplet(RED_DRAGON)
        assert s.kind == SetKind.TRIPLET
        assert len(s.tiles) == 3
        assert str(s) == "[777z]"

    def test_concealed_quad_keeps_hand_closed(self):
        s = ExposedSet.quad(sou(1), is_concealed=True)
        assert not s.opens_hand
        assert is_closed_hand([s])
        assert not is_closed_hand([s, ExposedSet.triplet(EAST)])
        assert str(s) == "(1111s)"

    def test_invalid_triplet(self):
        with pytest.raises(ValueError):
            ExposedSet(SetKind.TRIPLET, (man(1), man(1), man(2)))

    def test_invalid_sequence(self):
        with pytest.raises(ValueError):
            ExposedSet(SetKind.SEQUENCE, (man(8), man(9), pin(1)))
        with pytest.raises(ValueError):
            ExposedSet(SetKind.SEQUENCE, (EAST, SOUTH, wind(WindType.WEST)))

    def test_only_quads_concealed(self):
        with pytest.raises(ValueError):
            ExposedSet(SetKind.TRIPLET, (man(1),) * 3, is_concealed=True)

    def test_exposed_counts(self):
        counts = exposed_counts([ExposedSet.quad(EAST), ExposedSet.sequence(pin(1))])
        assert counts[27] == 4
        assert counts[9] == counts[10] == counts[11] == 1
        assert counts.sum() == 7


class TestConditions:
    """Test winning conditions validation"""

    def test_defaults(self):
        c = Conditions()
        assert not c.is_self_draw
        assert c.is_discard_win
        assert c.seat_wind == WindType.EAST
        assert c.flowers == ()

    def test_wind_coerced(self):
        c = Conditions(seat_wind=3)
        assert c.seat_wind == WindType.WEST

    def test_invalid_wind(self):
        with pytest.raises(ValueError):
            Conditions(round_wind=9)

    def test_flowers_must_be_flowers(self):
        with pytest.raises(ValueError):
            Conditions(flowers=(man(1),))

    def test_negative_dora(self):
        with pytest.raises(ValueError):
            Conditions(dora_count=-1)

    def test_seat_flowers(self):
        assert Conditions(seat_wind=WindType.SOUTH).seat_flowers == (2, 6)
