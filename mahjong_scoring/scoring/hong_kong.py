"""
Hong Kong Mahjong Scoring (香港麻将)

Fan are summed and converted with the half-spicy (or full-spicy) table.
Limit hands score on their own. Hands under the minimum fan are valid
shapes but not legal wins.
"""

from typing import List

from ..rules import RuleVariant, hong_kong_points
from ..special_hands import SpecialHandType, is_nine_gates
from .base import (
    DRAGON_INDICES, WIND_INDICES, HandAnalysis, ScoreBreakdown, ScoringPattern, ScoringStrategy,
    dragon_triplets, has_honors, has_triplet_of, is_all_honors, is_all_terminals,
    is_all_terminals_and_honors, is_full_flush, is_half_flush, wind_triplets,
)

SEASONS = frozenset([1, 2, 3, 4])
PLANTS = frozenset([5, 6, 7, 8])

DRAGON_ROWS = ["Red Dragon", "Green Dragon", "White Dragon"]
WIND_ROWS = ["Seat Wind", "Round Wind"]
LIMIT_EXCLUDES = ["Self Draw", "Concealed Hand", "All Triplets"]


class HongKongScorer(ScoringStrategy):
    """
    Hong Kong Scorer

    Fan table, flower fan and the half-spicy point progression.
    """

    variant = RuleVariant.HONG_KONG

    def accepts_special(self, match, profile) -> bool:
        if match.hand_type == SpecialHandType.SEVEN_PAIRS:
            return profile.allow_seven_pairs
        return True

    def _create_patterns(self) -> List[ScoringPattern]:
        """Create fan patterns; limit rows score alone"""
        return [
            # Winning method
            ScoringPattern("Self Draw", "自摸", 1, lambda a: a.is_self_draw),
            ScoringPattern("Concealed Hand", "門前清", 1, lambda a: a.is_closed),
            ScoringPattern("Kong on Kong", "連槓開花", 8, self._check_kong_on_kong, ["Win on Kong"]),
            ScoringPattern("Win on Kong", "槓上開花", 2, lambda a: a.conditions.is_replacement_tile),
            ScoringPattern("Robbing the Kong", "搶槓", 1, lambda a: a.conditions.is_robbing_kong),
            ScoringPattern("Last Tile", "海底撈月", 1, lambda a: a.conditions.is_last_tile),

            # Shape
            ScoringPattern("All Sequences", "平和", 1, self._check_all_sequences),
            ScoringPattern("All Triplets", "對對和", 3, self._check_all_triplets),
            ScoringPattern("Four Concealed Triplets", "坎坎胡", 8, self._check_four_concealed_triplets,
                           ["All Triplets", "Self Draw", "Concealed Hand"]),
            ScoringPattern("Seven Pairs", "七對子", 2, lambda a: a.is_special(SpecialHandType.SEVEN_PAIRS)),
            ScoringPattern("Mixed Terminals", "花么九", 4, self._check_mixed_terminals),

            # Suits
            ScoringPattern("Half Flush", "混一色", 3, lambda a: is_half_flush(a.counts)),
            ScoringPattern("Full Flush", "清一色", 7, lambda a: is_full_flush(a.counts), ["Half Flush"]),

            # Dragons
            ScoringPattern("Red Dragon", "紅中", 1, lambda a: has_triplet_of(a.sets, 33)),
            ScoringPattern("Green Dragon", "發財", 1, lambda a: has_triplet_of(a.sets, 32)),
            ScoringPattern("White Dragon", "白板", 1, lambda a: has_triplet_of(a.sets, 31)),
            ScoringPattern("Small Three Dragons", "小三元", 5, self._check_small_dragons, DRAGON_ROWS),
            ScoringPattern("Great Three Dragons", "大三元", 8, self._check_great_dragons, DRAGON_ROWS),

            # Winds
            ScoringPattern("Seat Wind", "門風", 1, self._check_seat_wind),
            ScoringPattern("Round Wind", "圈風", 1, self._check_round_wind),
            ScoringPattern("Small Four Winds", "小四喜", 6, self._check_small_winds, WIND_ROWS),

            # Limit hands
            ScoringPattern("Great Four Winds", "大四喜", 13, self._check_great_winds,
                           WIND_ROWS + LIMIT_EXCLUDES, is_limit=True),
            ScoringPattern("All Honors", "字一色", 10, lambda a: is_all_honors(a.counts),
                           LIMIT_EXCLUDES, is_limit=True),
            ScoringPattern("Pure Terminals", "清么九", 10, self._check_pure_terminals,
                           ["Mixed Terminals"], is_limit=True),
            ScoringPattern("Nine Gates", "九蓮寶燈", 10, self._check_nine_gates, is_limit=True),
            ScoringPattern("Thirteen Orphans", "十三么", 13,
                           lambda a: a.is_special(SpecialHandType.THIRTEEN_ORPHANS), is_limit=True),
            ScoringPattern("Four Kongs", "十八羅漢", 13, lambda a: len(a.quads) == 4, is_limit=True),
            ScoringPattern("Heavenly Hand", "天和", 13, lambda a: a.conditions.is_heavenly_hand, is_limit=True),
            ScoringPattern("Earthly Hand", "地和", 13, lambda a: a.conditions.is_earthly_hand, is_limit=True),
            ScoringPattern("Human Hand", "人和", 13, lambda a: a.conditions.is_human_hand, is_limit=True),
        ]

    def score_analysis(self, a: HandAnalysis) -> ScoreBreakdown:
        """Fan and base points for one placement"""
        profile = a.profile
        result = self._new_breakdown(a)
        result.fu = profile.base_unit
        matched = self.get_matching_patterns(a)

        limits = [p for p in matched if p.is_limit]
        if limits:
            best = max(limits, key=lambda p: p.value)
            result.add_item(best.name, best.value, best.rationale, best.local_name)
            result.limit_count = 1
        else:
            for p in matched:
                result.add_item(p.name, p.value, p.rationale, p.local_name)
            if profile.include_flowers:
                self._score_flowers(a, result)

        result.meets_minimum = result.bonus_count >= profile.min_bonus
        fan = result.bonus_count
        if profile.max_bonus is not None:
            fan = min(fan, profile.max_bonus)
        result.exponent = fan
        result.base_points = hong_kong_points(fan, profile.base_unit, profile.full_spicy)
        tier = profile.tier_for(fan)
        if tier is not None:
            result.tier = tier.name
        return result

    def _score_flowers(self, a: HandAnalysis, result: ScoreBreakdown):
        """No flowers, seven or eight flowers, a complete set, the seat flower"""
        flowers = a.conditions.flowers
        if not flowers:
            result.add_item("No Flowers", 1, "No flower tiles", "無花")
            return
        if len(flowers) == 8:
            result.add_item("Eight Flowers", 8, "All eight flower tiles", "大花和")
            return
        if len(flowers) == 7:
            result.add_item("Seven Flowers", 3, "Seven flower tiles", "花和")
            return

        ranks = {f.rank for f in flowers}
        if SEASONS <= ranks or PLANTS <= ranks:
            result.add_item("Flower Set", 2, "Complete seasons or plants", "一台花")
        if ranks & set(a.conditions.seat_flowers):
            result.add_item("Seat Flower", 1, "Flower matching the seat wind", "正花")

    # === Pattern Checks ===

    def _check_kong_on_kong(self, a: HandAnalysis) -> bool:
        """Won on the replacement draw after consecutive kongs"""
        return a.conditions.is_consecutive_kong_replacement

    def _check_all_sequences(self, a: HandAnalysis) -> bool:
        """Four sequences and a pair"""
        return a.is_standard and len(a.sequences) == 4

    def _check_all_triplets(self, a: HandAnalysis) -> bool:
        """Four triplets or quads and a pair"""
        return a.is_standard and len(a.triplets) == 4

    def _check_four_concealed_triplets(self, a: HandAnalysis) -> bool:
        """Four triplets or quads, none exposed"""
        return a.is_standard and len(a.concealed_triplets) == 4

    def _is_all_triplet_shape(self, a: HandAnalysis) -> bool:
        return a.is_special(SpecialHandType.SEVEN_PAIRS) or self._check_all_triplets(a)

    def _check_mixed_terminals(self, a: HandAnalysis) -> bool:
        """Terminals and honors only, in triplets"""
        if not is_all_terminals_and_honors(a.counts) or not has_honors(a.counts):
            return False
        if is_all_honors(a.counts):
            return False
        return self._is_all_triplet_shape(a)

    def _check_pure_terminals(self, a: HandAnalysis) -> bool:
        """Terminals only, in triplets"""
        return is_all_terminals(a.counts) and self._is_all_triplet_shape(a)

    def _check_small_dragons(self, a: HandAnalysis) -> bool:
        """Two dragon triplets and a dragon pair"""
        return len(dragon_triplets(a.sets)) == 2 and a.pair in DRAGON_INDICES

    def _check_great_dragons(self, a: HandAnalysis) -> bool:
        """Triplets of all three dragons"""
        return len(dragon_triplets(a.sets)) == 3

    def _check_seat_wind(self, a: HandAnalysis) -> bool:
        return has_triplet_of(a.sets, 26 + int(a.conditions.seat_wind))

    def _check_round_wind(self, a: HandAnalysis) -> bool:
        """Round wind triplet, unless it is also the seat wind"""
        if a.conditions.round_wind == a.conditions.seat_wind:
            return False
        return has_triplet_of(a.sets, 26 + int(a.conditions.round_wind))

    def _check_small_winds(self, a: HandAnalysis) -> bool:
        """Three wind triplets and a wind pair"""
        return len(wind_triplets(a.sets)) == 3 and a.pair in WIND_INDICES

    def _check_great_winds(self, a: HandAnalysis) -> bool:
        """Triplets of all four winds"""
        return len(wind_triplets(a.sets)) == 4

    def _check_nine_gates(self, a: HandAnalysis) -> bool:
        """1112345678999 plus any tile of the suit, concealed"""
        return a.is_closed and not a.quads and is_nine_gates(a.counts)
