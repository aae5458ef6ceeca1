"""
Riichi Mahjong Scoring

Implements the yaku table and han/fu calculation for Japanese riichi rules.
Yakuman stack up to the profile's multiplier cap; the aotenjou profile
scores them as 13 han each with no cap at all.
"""

from collections import Counter
from typing import List

from ..rules import RuleVariant
from ..special_hands import SpecialHandType, SpecialMatch, is_nine_gates, is_pure_nine_gates
from ..tiles import TileSuit
from .base import (
    DRAGON_INDICES, HandAnalysis, ScoreBreakdown, ScoringPattern, ScoringStrategy, WaitType,
    doubling_points, dragon_triplets, has_honors, has_triplet_of, is_all_green, is_all_honors,
    is_all_simples, is_all_terminals, is_all_terminals_and_honors, is_full_flush,
    is_half_flush, is_value_tile, round_up, value_wind_count, wind_triplets,
)


class RiichiScorer(ScoringStrategy):
    """
    Riichi Mahjong Scorer

    Calculates han, fu, and base points for winning hands.
    """

    variant = RuleVariant.RIICHI

    def accepts_special(self, match: SpecialMatch, profile) -> bool:
        if match.hand_type == SpecialHandType.SEVEN_PAIRS:
            return profile.allow_seven_pairs
        return True

    def _create_patterns(self) -> List[ScoringPattern]:
        """Create list of yaku with their check functions"""
        return [
            # 1 Han
            ScoringPattern("Riichi", "立直", 1, self._check_riichi, open_value=0),
            ScoringPattern("Ippatsu", "一発", 1, self._check_ippatsu, open_value=0),
            ScoringPattern("Menzen Tsumo", "門前清自摸和", 1, self._check_menzen_tsumo, open_value=0),
            ScoringPattern("Tanyao", "断幺九", 1, self._check_tanyao),
            ScoringPattern("Pinfu", "平和", 1, self._check_pinfu, open_value=0),
            ScoringPattern("Iipeikou", "一盃口", 1, self._check_iipeikou, open_value=0),
            ScoringPattern("Yakuhai (Seat Wind)", "役牌 自風", 1, self._check_seat_wind),
            ScoringPattern("Yakuhai (Round Wind)", "役牌 場風", 1, self._check_round_wind),
            ScoringPattern("Yakuhai (Haku)", "役牌 白", 1, lambda a: has_triplet_of(a.sets, 31)),
            ScoringPattern("Yakuhai (Hatsu)", "役牌 發", 1, lambda a: has_triplet_of(a.sets, 32)),
            ScoringPattern("Yakuhai (Chun)", "役牌 中", 1, lambda a: has_triplet_of(a.sets, 33)),
            ScoringPattern("Rinshan Kaihou", "嶺上開花", 1, self._check_rinshan),
            ScoringPattern("Chankan", "槍槓", 1, self._check_chankan),
            ScoringPattern("Haitei", "海底摸月", 1, self._check_haitei),
            ScoringPattern("Houtei", "河底撈魚", 1, self._check_houtei),

            # 2 Han
            ScoringPattern("Double Riichi", "両立直", 2, self._check_double_riichi, ["Riichi"], open_value=0),
            ScoringPattern("Chiitoitsu", "七対子", 2, self._check_chiitoitsu, open_value=0),
            ScoringPattern("Sanshoku Doujun", "三色同順", 2, self._check_sanshoku_doujun, open_value=1),
            ScoringPattern("Ittsu", "一気通貫", 2, self._check_ittsu, open_value=1),
            ScoringPattern("Toitoi", "対々和", 2, self._check_toitoi),
            ScoringPattern("Sanankou", "三暗刻", 2, self._check_sanankou),
            ScoringPattern("Sanshoku Doukou", "三色同刻", 2, self._check_sanshoku_doukou),
            ScoringPattern("Sankantsu", "三槓子", 2, self._check_sankantsu),
            ScoringPattern("Chanta", "混全帯幺九", 2, self._check_chanta, open_value=1),
            ScoringPattern("Honroutou", "混老頭", 2, self._check_honroutou, ["Chanta"]),
            ScoringPattern("Shousangen", "小三元", 2, self._check_shousangen),

            # 3 Han
            ScoringPattern("Honitsu", "混一色", 3, self._check_honitsu, open_value=2),
            ScoringPattern("Junchan", "純全帯幺九", 3, self._check_junchan, ["Chanta"], open_value=2),
            ScoringPattern("Ryanpeikou", "二盃口", 3, self._check_ryanpeikou, ["Iipeikou"], open_value=0),

            # 5 Han
            ScoringPattern("Renhou", "人和", 5, self._check_renhou, open_value=0),

            # 6 Han
            ScoringPattern("Chinitsu", "清一色", 6, self._check_chinitsu, ["Honitsu"], open_value=5),

            # Yakuman (value = multiple)
            ScoringPattern("Tenhou", "天和", 1, self._check_tenhou, is_limit=True),
            ScoringPattern("Chiihou", "地和", 1, self._check_chiihou, is_limit=True),
            ScoringPattern("Kokushi Musou", "国士無双", 1, self._check_kokushi, is_limit=True),
            ScoringPattern("Kokushi Musou Juusanmen", "国士無双十三面", 2, self._check_kokushi_13,
                           ["Kokushi Musou"], is_limit=True),
            ScoringPattern("Suuankou", "四暗刻", 1, self._check_suuankou, ["Sanankou"],
                           open_value=0, is_limit=True),
            ScoringPattern("Suuankou Tanki", "四暗刻単騎", 2, self._check_suuankou_tanki,
                           ["Suuankou", "Sanankou"], open_value=0, is_limit=True),
            ScoringPattern("Daisangen", "大三元", 1, self._check_daisangen, ["Shousangen"], is_limit=True),
            ScoringPattern("Shousuushii", "小四喜", 1, self._check_shousuushii, is_limit=True),
            ScoringPattern("Daisuushii", "大四喜", 2, self._check_daisuushii, ["Shousuushii"], is_limit=True),
            ScoringPattern("Tsuuiisou", "字一色", 1, lambda a: is_all_honors(a.counts), is_limit=True),
            ScoringPattern("Chinroutou", "清老頭", 1, lambda a: is_all_terminals(a.counts),
                           ["Honroutou"], is_limit=True),
            ScoringPattern("Ryuuiisou", "緑一色", 1, lambda a: is_all_green(a.counts), is_limit=True),
            ScoringPattern("Chuuren Poutou", "九蓮宝燈", 1, self._check_chuuren,
                           open_value=0, is_limit=True),
            ScoringPattern("Junsei Chuuren Poutou", "純正九蓮宝燈", 2, self._check_junsei_chuuren,
                           ["Chuuren Poutou"], open_value=0, is_limit=True),
            ScoringPattern("Suukantsu", "四槓子", 1, self._check_suukantsu, ["Sankantsu"], is_limit=True),
        ]

    def score_analysis(self, a: HandAnalysis) -> ScoreBreakdown:
        """Han, fu and base points for one placement"""
        profile = a.profile
        result = self._new_breakdown(a)
        matched = self.get_matching_patterns(a)
        yakuman = [p for p in matched if p.is_limit]
        regular = [p for p in matched if not p.is_limit]
        names = [p.name for p in matched]

        if yakuman and not profile.no_limit:
            count = 0
            for p in yakuman:
                multiple = self._yakuman_multiple(p, profile)
                result.add_item(p.name, 13 * multiple, p.rationale, p.local_name)
                count += multiple
            capped = min(count, profile.max_limit_multiplier)
            result.limit_count = capped
            result.fu = self._calculate_fu(a, result, "Pinfu" in names)
            result.base_points = profile.limit_points * capped
            result.tier = "Yakuman" if capped == 1 else f"{capped}x Yakuman"
            return result

        # Aotenjou: yakuman count as 13 han each, alongside every other yaku
        for p in yakuman:
            multiple = self._yakuman_multiple(p, profile)
            result.add_item(p.name, 13 * multiple, p.rationale, p.local_name)
            result.limit_count += multiple

        for p in regular:
            result.add_item(p.name, p.value_for(a.is_closed), p.rationale, p.local_name)

        yaku_han = result.bonus_count
        dora = a.conditions.dora_count
        if yaku_han > 0 and dora > 0:
            result.add_item("Dora", dora, "Dora, red fives and ura dora", "ドラ")

        result.fu = self._calculate_fu(a, result, "Pinfu" in names)
        result.exponent = result.bonus_count + profile.exponent_offset
        if profile.no_limit:
            result.base_points = result.fu * 2 ** result.exponent
        else:
            result.base_points, result.tier = doubling_points(result.bonus_count, result.fu, profile)
        result.meets_minimum = yaku_han >= profile.min_bonus
        return result

    @staticmethod
    def _yakuman_multiple(pattern: ScoringPattern, profile) -> int:
        if profile.double_limit_hands:
            return pattern.value
        return 1

    def _calculate_fu(self, a: HandAnalysis, result: ScoreBreakdown, is_pinfu: bool) -> int:
        """Calculate fu (minipoints)"""
        if a.is_special(SpecialHandType.SEVEN_PAIRS):
            result.add_fu("Chiitoitsu", 25)
            return 25

        if is_pinfu:
            fu = 20 if a.is_self_draw else 30
            result.add_fu("Pinfu", fu)
            return fu

        fu = 20
        result.add_fu("Base", 20)

        if a.is_closed and not a.is_self_draw:
            fu += 10
            result.add_fu("Closed ron", 10)
        if a.is_self_draw:
            fu += 2
            result.add_fu("Tsumo", 2)

        for s in a.triplets:
            value = 8 if s.is_quad else 2
            if s.has_terminal_or_honor:
                value *= 2
            if s.is_concealed:
                value *= 2
            fu += value
            label = "Quad" if s.is_quad else "Triplet"
            state = "concealed" if s.is_concealed else "open"
            result.add_fu(f"{label} {s.tile}", value, state)

        if a.pair is not None:
            pair_fu = 2 * value_wind_count(a.pair, a.conditions)
            if a.pair in DRAGON_INDICES:
                pair_fu += 2
            if pair_fu:
                fu += pair_fu
                result.add_fu("Value pair", pair_fu)

        if a.wait in (WaitType.KANCHAN, WaitType.PENCHAN, WaitType.TANKI):
            fu += 2
            result.add_fu("Wait", 2, a.wait.name.lower())

        # Round up to nearest 10, minimum 30 (open pinfu shape)
        return max(round_up(fu, 10), 30)

    # === Yaku Check Functions ===

    def _check_riichi(self, a: HandAnalysis) -> bool:
        return a.conditions.is_riichi

    def _check_double_riichi(self, a: HandAnalysis) -> bool:
        return a.conditions.is_double_riichi

    def _check_ippatsu(self, a: HandAnalysis) -> bool:
        return a.conditions.is_ippatsu

    def _check_menzen_tsumo(self, a: HandAnalysis) -> bool:
        return a.is_closed and a.is_self_draw

    def _check_tanyao(self, a: HandAnalysis) -> bool:
        """All simples (no terminals/honors)"""
        if not a.is_closed and not a.profile.open_tanyao:
            return False
        return is_all_simples(a.counts)

    def _check_pinfu(self, a: HandAnalysis) -> bool:
        """All sequences, valueless pair, two-sided wait"""
        if not a.is_closed or not a.is_standard:
            return False
        if len(a.sequences) != 4:
            return False
        if is_value_tile(a.pair, a.conditions):
            return False
        return a.wait == WaitType.RYANMEN

    def _identical_sequence_pairs(self, a: HandAnalysis) -> int:
        counts = Counter(s.anchor for s in a.sequences)
        return sum(c // 2 for c in counts.values())

    def _check_iipeikou(self, a: HandAnalysis) -> bool:
        """Two identical sequences"""
        return a.is_closed and a.is_standard and self._identical_sequence_pairs(a) >= 1

    def _check_ryanpeikou(self, a: HandAnalysis) -> bool:
        """Two sets of identical sequences"""
        return a.is_closed and a.is_standard and self._identical_sequence_pairs(a) >= 2

    def _check_seat_wind(self, a: HandAnalysis) -> bool:
        """Seat wind triplet"""
        return has_triplet_of(a.sets, 26 + int(a.conditions.seat_wind))

    def _check_round_wind(self, a: HandAnalysis) -> bool:
        """Round wind triplet"""
        return has_triplet_of(a.sets, 26 + int(a.conditions.round_wind))

    def _check_rinshan(self, a: HandAnalysis) -> bool:
        return a.conditions.is_replacement_tile and a.is_self_draw

    def _check_chankan(self, a: HandAnalysis) -> bool:
        return a.conditions.is_robbing_kong

    def _check_haitei(self, a: HandAnalysis) -> bool:
        return a.conditions.is_last_tile and a.is_self_draw

    def _check_houtei(self, a: HandAnalysis) -> bool:
        return a.conditions.is_last_tile and not a.is_self_draw

    def _check_renhou(self, a: HandAnalysis) -> bool:
        """Won on a discard before the first draw"""
        return a.profile.allow_renhou and a.conditions.is_human_hand and not a.is_self_draw

    def _check_chiitoitsu(self, a: HandAnalysis) -> bool:
        """Seven pairs"""
        return a.is_special(SpecialHandType.SEVEN_PAIRS)

    def _check_sanshoku_doujun(self, a: HandAnalysis) -> bool:
        """Three suits, same sequence"""
        suits_by_rank = {}
        for s in a.sequences:
            suits_by_rank.setdefault(s.anchor % 9, set()).add(s.anchor // 9)
        return any(len(suits) >= 3 for suits in suits_by_rank.values())

    def _check_ittsu(self, a: HandAnalysis) -> bool:
        """1-2-3, 4-5-6, 7-8-9 in same suit"""
        starts = {s.anchor for s in a.sequences}
        for suit in (TileSuit.MAN, TileSuit.PIN, TileSuit.SOU):
            base = int(suit) * 9
            if {base, base + 3, base + 6}.issubset(starts):
                return True
        return False

    def _check_toitoi(self, a: HandAnalysis) -> bool:
        """All triplets/quads"""
        return a.is_standard and len(a.triplets) == 4

    def _check_sanankou(self, a: HandAnalysis) -> bool:
        """Three concealed triplets"""
        return a.is_standard and len(a.concealed_triplets) >= 3

    def _check_sanshoku_doukou(self, a: HandAnalysis) -> bool:
        """Same triplet in three suits"""
        suits_by_rank = {}
        for s in a.triplets:
            if s.anchor < 27:
                suits_by_rank.setdefault(s.anchor % 9, set()).add(s.anchor // 9)
        return any(len(suits) >= 3 for suits in suits_by_rank.values())

    def _check_sankantsu(self, a: HandAnalysis) -> bool:
        """Three quads"""
        return len(a.quads) == 3

    def _check_chanta(self, a: HandAnalysis) -> bool:
        """All sets contain terminal or honor"""
        if not a.is_standard or not a.sequences:
            return False
        if not all(s.has_terminal_or_honor for s in a.sets):
            return False
        pair_tile = a.decomposition.pair_tile
        return pair_tile.is_terminal_or_honor and has_honors(a.counts)

    def _check_junchan(self, a: HandAnalysis) -> bool:
        """All sets contain terminal (no honors)"""
        if not a.is_standard or not a.sequences or has_honors(a.counts):
            return False
        if not all(s.has_terminal for s in a.sets):
            return False
        return a.decomposition.pair_tile.is_terminal

    def _check_honroutou(self, a: HandAnalysis) -> bool:
        """All terminals and honors"""
        if a.is_special(SpecialHandType.THIRTEEN_ORPHANS):
            return False
        return (
            is_all_terminals_and_honors(a.counts)
            and has_honors(a.counts)
            and not is_all_honors(a.counts)
        )

    def _check_shousangen(self, a: HandAnalysis) -> bool:
        """Small 3 dragons (2 pongs + pair)"""
        return len(dragon_triplets(a.sets)) == 2 and a.pair in DRAGON_INDICES

    def _check_honitsu(self, a: HandAnalysis) -> bool:
        """One suit + honors"""
        return is_half_flush(a.counts)

    def _check_chinitsu(self, a: HandAnalysis) -> bool:
        """Pure one suit (no honors)"""
        return is_full_flush(a.counts)

    # === Yakuman Checks ===

    def _check_tenhou(self, a: HandAnalysis) -> bool:
        """Dealer wins on the initial deal"""
        return a.conditions.is_heavenly_hand

    def _check_chiihou(self, a: HandAnalysis) -> bool:
        """Non-dealer wins on the first draw"""
        return a.conditions.is_earthly_hand

    def _check_kokushi(self, a: HandAnalysis) -> bool:
        """13 orphans"""
        return a.is_special(SpecialHandType.THIRTEEN_ORPHANS)

    def _check_kokushi_13(self, a: HandAnalysis) -> bool:
        """13 orphans on a thirteen-sided wait"""
        return self._check_kokushi(a) and a.special.is_pure

    def _check_suuankou(self, a: HandAnalysis) -> bool:
        """Four concealed triplets"""
        return a.is_closed and a.is_standard and len(a.concealed_triplets) == 4

    def _check_suuankou_tanki(self, a: HandAnalysis) -> bool:
        """Four concealed triplets on a single wait"""
        return self._check_suuankou(a) and a.wait == WaitType.TANKI

    def _check_daisangen(self, a: HandAnalysis) -> bool:
        """Big 3 dragons (3 dragon pongs)"""
        return len(dragon_triplets(a.sets)) == 3

    def _check_shousuushii(self, a: HandAnalysis) -> bool:
        """Small 4 winds (3 wind pongs + wind pair)"""
        return len(wind_triplets(a.sets)) == 3 and a.pair is not None and 27 <= a.pair <= 30

    def _check_daisuushii(self, a: HandAnalysis) -> bool:
        """Big 4 winds (4 wind pongs)"""
        return len(wind_triplets(a.sets)) == 4

    def _check_chuuren(self, a: HandAnalysis) -> bool:
        """Nine gates (1112345678999 + any in same suit)"""
        return a.is_closed and not a.quads and is_nine_gates(a.counts)

    def _check_junsei_chuuren(self, a: HandAnalysis) -> bool:
        """Nine gates on a nine-sided wait"""
        return self._check_chuuren(a) and is_pure_nine_gates(a.counts, a.conditions.winning_tile)

    def _check_suukantsu(self, a: HandAnalysis) -> bool:
        """Four quads"""
        return len(a.quads) == 4
