"""
Default constants for the commission engine.

Contains the default ambassador tier ladder.
"""

from decimal import Decimal

from commission.core.models import Tier
from commission.core.tiers import TierCatalog


DEFAULT_TIERS: list[Tier] = [
    Tier(
        name="Member",
        rank=1,
        min_referrals=0,
        min_sales=Decimal("0"),
        commission_rate=Decimal("0.05"),
        signup_bonus_points=50,
    ),
    Tier(
        name="Promoter",
        rank=2,
        min_referrals=5,
        min_sales=Decimal("500"),
        commission_rate=Decimal("0.075"),
        signup_bonus_points=75,
    ),
    Tier(
        name="Ambassador",
        rank=3,
        min_referrals=15,
        min_sales=Decimal("2000"),
        commission_rate=Decimal("0.10"),
        signup_bonus_points=100,
    ),
    Tier(
        name="Elite",
        rank=4,
        min_referrals=50,
        min_sales=Decimal("10000"),
        commission_rate=Decimal("0.15"),
        signup_bonus_points=150,
    ),
]


def default_catalog() -> TierCatalog:
    """
    Build a catalog from the default tier ladder.

    Returns:
        Validated TierCatalog
    """
    return TierCatalog(DEFAULT_TIERS)


def get_tier_by_name(name: str) -> Tier | None:
    """
    Get default tier by name.

    Args:
        name: Tier name (Member, Promoter, Ambassador, Elite)

    Returns:
        Tier or None if not found
    """
    for tier in DEFAULT_TIERS:
        if tier.name == name:
            return tier
    return None
