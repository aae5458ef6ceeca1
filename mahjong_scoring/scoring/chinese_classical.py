"""
Chinese Classical Mahjong Scoring (古典麻将)

Base points are fu * 2^fan, capped at mangan. A handful of limit hands
score a fixed mangan or half mangan outright. Flowers add fu, and a
complete season or plant set adds a fan.
"""

from typing import List

from ..rules import RuleVariant
from ..special_hands import SpecialHandType, SpecialMatch, is_pure_nine_gates
from .base import (
    DRAGON_INDICES, HandAnalysis, ScoreBreakdown, ScoringPattern, ScoringStrategy, WaitType,
    doubling_points, dragon_triplets, has_triplet_of, is_full_flush, is_half_flush, wind_triplets,
)

BASE_FU = 10
ALL_SEQUENCE_FU = 10
SEASONS = frozenset([1, 2, 3, 4])
PLANTS = frozenset([5, 6, 7, 8])


class ChineseClassicalScorer(ScoringStrategy):
    """
    Chinese Classical Scorer

    Fan patterns double the fu total; limit patterns replace it.
    """

    variant = RuleVariant.CHINESE_CLASSICAL

    def accepts_special(self, match: SpecialMatch, profile) -> bool:
        if match.hand_type == SpecialHandType.SEVEN_PAIRS:
            return profile.allow_seven_pairs
        if match.hand_type == SpecialHandType.NINE_GATES:
            return match.is_pure
        return True

    def _create_patterns(self) -> List[ScoringPattern]:
        """Create fan and limit patterns"""
        return [
            # Winning method
            ScoringPattern("Replacement Tile Win", "杠上开花", 1, self._check_replacement_win),
            ScoringPattern("Last Tile", "海底捞月", 1, self._check_last_tile),
            ScoringPattern("Robbing the Kong", "抢杠", 1, self._check_robbing_kong),

            # Suits
            ScoringPattern("Half Flush", "混一色", 1, lambda a: is_half_flush(a.counts)),
            ScoringPattern("Full Flush", "清一色", 3, lambda a: is_full_flush(a.counts), ["Half Flush"]),

            # Sets
            ScoringPattern("All Triplets", "对对和", 1, self._check_all_triplets),
            ScoringPattern("Round Wind Set", "圈风刻", 1, self._check_round_wind),
            ScoringPattern("Seat Wind Set", "门风刻", 1, self._check_seat_wind),
            ScoringPattern("Red Dragon Set", "中", 1, lambda a: has_triplet_of(a.sets, 33)),
            ScoringPattern("Green Dragon Set", "发", 1, lambda a: has_triplet_of(a.sets, 32)),
            ScoringPattern("White Dragon Set", "白", 1, lambda a: has_triplet_of(a.sets, 31)),

            # Limit hands
            ScoringPattern("Heavenly Hand", "天和", 1, lambda a: a.conditions.is_heavenly_hand,
                           is_limit=True, tier="Mangan"),
            ScoringPattern("Earthly Hand", "地和", 1, lambda a: a.conditions.is_earthly_hand,
                           is_limit=True, tier="Half Mangan"),
            ScoringPattern("Big Three Dragons", "大三元", 1, self._check_big_three_dragons,
                           is_limit=True, tier="Mangan"),
            ScoringPattern("Four Winds", "四喜和", 1, self._check_four_winds,
                           is_limit=True, tier="Mangan"),
            ScoringPattern("Thirteen Orphans", "十三幺", 1,
                           lambda a: a.is_special(SpecialHandType.THIRTEEN_ORPHANS),
                           is_limit=True, tier="Mangan"),
            ScoringPattern("Nine Gates", "九莲宝灯", 1, self._check_nine_gates,
                           is_limit=True, tier="Mangan"),
        ]

    def score_analysis(self, a: HandAnalysis) -> ScoreBreakdown:
        """Fan, fu and base points for one placement"""
        profile = a.profile
        result = self._new_breakdown(a)
        matched = self.get_matching_patterns(a)

        limits = [p for p in matched if p.is_limit]
        if limits:
            tiers = [profile.named_tier(p.tier) for p in limits]
            best = max(tiers, key=lambda t: t.points)
            for p in limits:
                result.add_item(p.name, 0, p.tier, p.local_name)
            result.base_points = best.points
            result.tier = best.name
            result.limit_count = 1
            return result

        for p in matched:
            result.add_item(p.name, p.value, p.rationale, p.local_name)

        fu = self._calculate_fu(a, result)
        if profile.include_flowers:
            fu += self._score_flowers(a, result)

        result.fu = fu
        result.exponent = result.bonus_count + profile.exponent_offset
        result.base_points, result.tier = doubling_points(result.bonus_count, fu, profile)
        result.meets_minimum = result.bonus_count >= profile.min_bonus
        return result

    def _calculate_fu(self, a: HandAnalysis, result: ScoreBreakdown) -> int:
        """Base 10, sets, all-sequence bonus and the winning pair"""
        fu = BASE_FU
        result.add_fu("Base", BASE_FU)

        for s in a.triplets:
            value = 8 if s.is_quad else 2
            if s.has_terminal_or_honor:
                value *= 2
            if s.is_concealed:
                value *= 2
            fu += value
            label = "Quad" if s.is_quad else "Triplet"
            state = "concealed" if s.is_concealed else "exposed"
            result.add_fu(f"{label} {s.tile}", value, state)

        if a.is_standard and len(a.sequences) == 4:
            fu += ALL_SEQUENCE_FU
            result.add_fu("All Sequences", ALL_SEQUENCE_FU, "平和")

        # Pair completed by the winning tile
        if a.pair is not None and a.wait == WaitType.TANKI:
            value = 4 if a.is_self_draw else 2
            if a.decomposition.pair_tile.is_terminal_or_honor:
                value *= 2
            fu += value
            result.add_fu("Winning Pair", value, "self-drawn" if a.is_self_draw else "discard")

        return fu

    def _score_flowers(self, a: HandAnalysis, result: ScoreBreakdown) -> int:
        """Flower fu, plus a fan per complete season or plant set"""
        flowers = a.conditions.flowers
        if not flowers:
            return 0

        seat = set(a.conditions.seat_flowers)
        ranks = {f.rank for f in flowers}
        correct = sum(1 for r in ranks if r in seat)
        other = len(ranks) - correct

        fu = correct * 4 + other * 2
        if correct:
            result.add_fu("Seat Flower", correct * 4, "正花")
        if other:
            result.add_fu("Other Flower", other * 2, "偏花")

        complete_sets = int(SEASONS <= ranks) + int(PLANTS <= ranks)
        if complete_sets:
            result.add_item("Flower Set", complete_sets, "Complete seasons or plants", "一台花")
        return fu

    # === Pattern Checks ===

    def _check_replacement_win(self, a: HandAnalysis) -> bool:
        """Won on a kong replacement draw"""
        return a.conditions.is_replacement_tile and a.is_self_draw

    def _check_last_tile(self, a: HandAnalysis) -> bool:
        """Self-drew the last wall tile"""
        return a.conditions.is_last_tile and a.is_self_draw

    def _check_robbing_kong(self, a: HandAnalysis) -> bool:
        return a.conditions.is_robbing_kong

    def _check_all_triplets(self, a: HandAnalysis) -> bool:
        """Four triplets or quads and a pair"""
        return a.is_standard and len(a.triplets) == 4

    def _check_round_wind(self, a: HandAnalysis) -> bool:
        return has_triplet_of(a.sets, 26 + int(a.conditions.round_wind))

    def _check_seat_wind(self, a: HandAnalysis) -> bool:
        return has_triplet_of(a.sets, 26 + int(a.conditions.seat_wind))

    def _check_big_three_dragons(self, a: HandAnalysis) -> bool:
        """Triplets of all three dragons"""
        return len(dragon_triplets(a.sets)) == 3

    def _check_four_winds(self, a: HandAnalysis) -> bool:
        """Triplets of all four winds with a dragon pair"""
        return len(wind_triplets(a.sets)) == 4 and a.pair in DRAGON_INDICES

    def _check_nine_gates(self, a: HandAnalysis) -> bool:
        """1112345678999 held before the win, completed by any tile of the suit"""
        if not a.is_closed or a.quads:
            return False
        return is_pure_nine_gates(a.counts, a.conditions.winning_tile)
