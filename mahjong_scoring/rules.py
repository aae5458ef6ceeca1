"""
Rule Profiles

Defines rule configurations for the supported variants:
- Riichi (Japanese)
- Chinese classical (古典麻将)
- Hong Kong (香港麻将)

A RuleProfile is passed explicitly into every evaluation; there is no
module-level "active rules" state.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple


class RuleVariant(Enum):
    """Closed set of supported rule families"""
    RIICHI = "riichi"
    CHINESE_CLASSICAL = "chinese_classical"
    HONG_KONG = "hong_kong"


@dataclass(frozen=True)
class LimitTier:
    """
    A named score tier that replaces the doubling formula.

    Attributes:
        name: Tier name (e.g. "Mangan")
        min_bonus: Lowest bonus count reaching the tier
        points: Fixed base points for the tier
    """
    name: str
    min_bonus: int
    points: int


@dataclass(frozen=True)
class RuleProfile:
    """
    Rule configuration for one variant.

    basePoints = base_unit * 2 ** (bonus + exponent_offset), where the
    base unit is the hand's fu for fu-based variants.
    """

    variant: RuleVariant
    name: str = "Default"

    # Base point formula
    uses_fu: bool = True
    base_unit: int = 1
    exponent_offset: int = 0
    point_cap: Optional[int] = None  # Base points never exceed this (None = no cap)
    point_cap_name: str = "Mangan"

    # Named tiers, highest first
    limit_tiers: Tuple[LimitTier, ...] = ()
    limit_points: int = 0  # Points of one limit hand (yakuman / mangan)
    max_limit_multiplier: int = 1  # How many limit hands may stack
    no_limit: bool = False  # Aotenjou: every cap and tier disabled

    # Win threshold
    min_bonus: int = 0
    max_bonus: Optional[int] = None  # Bonus count above this is clamped

    # Pattern switches
    allow_seven_pairs: bool = True
    open_tanyao: bool = True
    allow_renhou: bool = False
    double_limit_hands: bool = True
    include_flowers: bool = False
    full_spicy: bool = False  # Hong Kong: pure doubling instead of half-spicy

    def __post_init__(self):
        if not 1 <= self.max_limit_multiplier <= 6:
            raise ValueError(f"max_limit_multiplier must be 1-6, got {self.max_limit_multiplier}")
        if self.base_unit < 1:
            raise ValueError(f"base_unit must be positive, got {self.base_unit}")
        if self.max_bonus is not None and self.max_bonus < self.min_bonus:
            raise ValueError("max_bonus cannot be below min_bonus")

    def with_overrides(self, **changes) -> 'RuleProfile':
        """Copy of this profile with some settings changed"""
        return replace(self, **changes)

    def tier_for(self, bonus: int) -> Optional[LimitTier]:
        """Highest named tier reached by a bonus count"""
        if self.no_limit:
            return None
        for tier in self.limit_tiers:
            if bonus >= tier.min_bonus:
                return tier
        return None

    def named_tier(self, name: str) -> LimitTier:
        """Tier by name, for limit hands that score a fixed tier outright"""
        for tier in self.limit_tiers:
            if tier.name == name:
                return tier
        raise ValueError(f"{self.name} has no tier named {name!r}")

    def __repr__(self) -> str:
        return f"RuleProfile({self.name})"


RIICHI_TIERS = (
    LimitTier("Kazoe Yakuman", 13, 8000),
    LimitTier("Sanbaiman", 11, 6000),
    LimitTier("Baiman", 8, 4000),
    LimitTier("Haneman", 6, 3000),
    LimitTier("Mangan", 5, 2000),
)


# Riichi rules (Tenhou-style defaults)
RIICHI_RULES = RuleProfile(
    variant=RuleVariant.RIICHI,
    name="Riichi",
    uses_fu=True,
    exponent_offset=2,
    point_cap=2000,  # Mangan
    limit_tiers=RIICHI_TIERS,
    limit_points=8000,  # Yakuman
    max_limit_multiplier=2,
    min_bonus=1,  # One yaku; dora does not count
    allow_seven_pairs=True,
    open_tanyao=True,
    allow_renhou=False,
    double_limit_hands=True,
)


# Riichi without limits (青天井 / aotenjou)
RIICHI_NO_LIMIT_RULES = RIICHI_RULES.with_overrides(
    name="Riichi Aotenjou",
    no_limit=True,
    point_cap=None,
    max_limit_multiplier=6,
)


# Chinese classical rules
CHINESE_CLASSICAL_RULES = RuleProfile(
    variant=RuleVariant.CHINESE_CLASSICAL,
    name="Chinese Classical",
    uses_fu=True,
    exponent_offset=0,
    point_cap=300,  # Mangan points double as the cap
    limit_tiers=(
        LimitTier("Mangan", 100, 300),
        LimitTier("Half Mangan", 50, 150),
    ),
    limit_points=300,
    max_limit_multiplier=1,
    min_bonus=0,
    allow_seven_pairs=False,
    include_flowers=True,
)


def _hong_kong_tier(max_fan: int, base_unit: int, full_spicy: bool) -> LimitTier:
    return LimitTier("Limit", max_fan, hong_kong_points(max_fan, base_unit, full_spicy))


def hong_kong_points(fan: int, base_unit: int = 1, full_spicy: bool = False) -> int:
    """
    Hong Kong base points for a fan count.

    Full spicy doubles every fan. Half spicy doubles up to 4 fan, then an odd
    fan is 1.5x the previous even fan and an even fan doubles the even fan
    two below (5=24, 6=32, 7=48, 8=64 ...).
    """
    if full_spicy or fan <= 4:
        return base_unit * 2 ** fan
    even = fan if fan % 2 == 0 else fan - 1
    even_points = base_unit * 2 ** 4 * 2 ** ((even - 4) // 2)
    if fan % 2 == 1:
        return even_points * 3 // 2
    return even_points


# Hong Kong rules (3 fan minimum, 10 fan limit, half spicy)
HONG_KONG_RULES = RuleProfile(
    variant=RuleVariant.HONG_KONG,
    name="Hong Kong",
    uses_fu=False,
    base_unit=1,
    exponent_offset=0,
    limit_tiers=(_hong_kong_tier(10, 1, False),),
    min_bonus=3,
    max_bonus=10,
    allow_seven_pairs=True,
    include_flowers=True,
    full_spicy=False,
)


# Hong Kong full spicy (辣辣上)
HONG_KONG_FULL_SPICY_RULES = HONG_KONG_RULES.with_overrides(
    name="Hong Kong Full Spicy",
    full_spicy=True,
    limit_tiers=(_hong_kong_tier(10, 1, True),),
)


def hong_kong_profile(
    base_unit: int = 1,
    min_fan: int = 3,
    max_fan: int = 10,
    full_spicy: bool = False,
) -> RuleProfile:
    """Hong Kong profile with custom stakes, keeping the limit tier consistent"""
    return HONG_KONG_RULES.with_overrides(
        name=f"Hong Kong {min_fan}-{max_fan}",
        base_unit=base_unit,
        min_bonus=min_fan,
        max_bonus=max_fan,
        full_spicy=full_spicy,
        limit_tiers=(_hong_kong_tier(max_fan, base_unit, full_spicy),),
    )


RULE_PROFILES: Dict[str, RuleProfile] = {
    "riichi": RIICHI_RULES,
    "riichi_aotenjou": RIICHI_NO_LIMIT_RULES,
    "chinese_classical": CHINESE_CLASSICAL_RULES,
    "hong_kong": HONG_KONG_RULES,
    "hong_kong_full_spicy": HONG_KONG_FULL_SPICY_RULES,
}


def get_rule_profile(name: str) -> RuleProfile:
    """Look up a predefined profile by name"""
    try:
        return RULE_PROFILES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown rule profile: {name}. Choose from {list(RULE_PROFILES.keys())}"
        ) from None
