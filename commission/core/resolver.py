"""
Tier resolution.

Determines which tier an ambassador currently qualifies for. The result is
derived from lifetime counters on every call and never stored.
"""

from collections.abc import Iterable
from decimal import Decimal

from commission.core.calculator import round2
from commission.core.models import Tier, TierProgress
from commission.core.tiers import TierCatalog
from commission.exceptions import InvalidAmount


HALF = Decimal("50")


def _as_catalog(tiers: TierCatalog | Iterable[Tier]) -> TierCatalog:
    if isinstance(tiers, TierCatalog):
        return tiers
    return TierCatalog(tiers)


def resolve_tier(
    lifetime_referral_count: int,
    lifetime_referred_sales: Decimal,
    tiers: TierCatalog | Iterable[Tier],
) -> Tier:
    """
    Resolve the highest tier whose thresholds are both met.

    Walks active tiers in ascending rank and keeps the last one for which
    ``referrals >= min_referrals AND sales >= min_sales``. Meeting only one
    of the two bars of a higher tier leaves the ambassador where they are.

    Args:
        lifetime_referral_count: Referred accounts ever created
        lifetime_referred_sales: Lifetime subtotal of referred purchases
        tiers: Tier catalog (or a plain list of tiers to validate)

    Returns:
        Qualifying tier, or the lowest active tier if none qualifies

    Example:
        >>> resolve_tier(5, Decimal("500"), DEFAULT_TIERS).name
        'Promoter'
        >>> resolve_tier(10, Decimal("200"), DEFAULT_TIERS).name
        'Member'
    """
    if lifetime_referral_count < 0 or lifetime_referred_sales < 0:
        raise InvalidAmount("Lifetime counters cannot be negative")

    catalog = _as_catalog(tiers)
    qualified = catalog.lowest_tier()
    for tier in catalog.list_active_tiers():
        if tier.qualifies(lifetime_referral_count, lifetime_referred_sales):
            qualified = tier
    return qualified


def _half_progress(value: Decimal, required: Decimal) -> Decimal:
    if required <= 0 or value >= required:
        return HALF
    return value / required * HALF


def tier_progress(
    lifetime_referral_count: int,
    lifetime_referred_sales: Decimal,
    tiers: TierCatalog | Iterable[Tier],
) -> TierProgress:
    """
    Describe progress from the current tier toward the next one.

    Args:
        lifetime_referral_count: Referred accounts ever created
        lifetime_referred_sales: Lifetime subtotal of referred purchases
        tiers: Tier catalog (or a plain list of tiers to validate)

    Returns:
        TierProgress with remaining requirements and a 0-100 percentage
    """
    catalog = _as_catalog(tiers)
    current = resolve_tier(
        lifetime_referral_count, lifetime_referred_sales, catalog
    )
    upcoming = catalog.next_tier(current)

    if upcoming is None:
        return TierProgress(
            current_tier=current,
            next_tier=None,
            referrals=lifetime_referral_count,
            sales=lifetime_referred_sales,
        )

    percent = _half_progress(
        Decimal(lifetime_referral_count), Decimal(upcoming.min_referrals)
    ) + _half_progress(lifetime_referred_sales, upcoming.min_sales)

    return TierProgress(
        current_tier=current,
        next_tier=upcoming,
        referrals=lifetime_referral_count,
        sales=lifetime_referred_sales,
        referrals_needed=max(upcoming.min_referrals - lifetime_referral_count, 0),
        sales_needed=max(upcoming.min_sales - lifetime_referred_sales, Decimal("0")),
        progress_percent=min(round2(percent), Decimal("100")),
    )
