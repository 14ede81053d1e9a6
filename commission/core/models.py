"""Pydantic models for the commission engine."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Tier(BaseModel):
    """Model for an ambassador commission tier.

    Represents one rung of the ambassador ladder. An ambassador qualifies
    for a tier only when BOTH the referral and the sales threshold are met.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique tier name")
    rank: int = Field(..., ge=0, description="Explicit ladder position (higher = stricter)")
    min_referrals: int = Field(default=0, ge=0, description="Lifetime referrals required")
    min_sales: Decimal = Field(
        default=Decimal("0"), ge=0, description="Lifetime referred subtotal required"
    )
    commission_rate: Decimal = Field(
        ..., ge=0, le=1, description="Commission as a fraction (0.05 = 5%)"
    )
    signup_bonus_points: int = Field(default=0, ge=0, description="Points per referral signup")
    is_active: bool = Field(default=True, description="Whether the tier takes part in resolution")

    def qualifies(self, referral_count: int, referred_sales: Decimal) -> bool:
        """Check whether the given lifetime counters meet both thresholds."""
        return (
            referral_count >= self.min_referrals
            and referred_sales >= self.min_sales
        )


class TierProgress(BaseModel):
    """Progress of an ambassador toward the next tier.

    ``progress_percent`` weights referrals and sales equally (50% each),
    capping each half at its share. At the top tier it is always 100.
    """

    model_config = ConfigDict(frozen=True)

    current_tier: Tier
    next_tier: Tier | None = None
    referrals: int = Field(..., ge=0)
    sales: Decimal = Field(..., ge=0)
    referrals_needed: int = Field(default=0, ge=0)
    sales_needed: Decimal = Field(default=Decimal("0"), ge=0)
    progress_percent: Decimal = Field(default=Decimal("100"), ge=0, le=100)
