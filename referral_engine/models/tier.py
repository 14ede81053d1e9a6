"""
AmbassadorTier model.

Persisted, admin-editable commission tier.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from commission import Tier
from referral_engine.models.base import Base
from referral_engine.models.types import MoneyType, RateType
from referral_engine.utils.datetime_utils import utc_now


class AmbassadorTier(Base):
    """
    AmbassadorTier entity.

    Attributes:
        id: Primary key
        name: Unique tier name (Member, Promoter, ...)
        rank: Explicit ladder position, unique
        min_referrals: Lifetime referrals required
        min_sales: Lifetime referred subtotal required
        commission_rate: Commission fraction in [0, 1]
        signup_bonus_points: Points awarded per referral signup
        is_active: Inactive tiers are skipped by resolution
        created_at: Creation timestamp
        updated_at: Last admin edit
    """

    __tablename__ = "ambassador_tiers"
    __table_args__ = (
        CheckConstraint(
            "commission_rate >= 0 AND commission_rate <= 1",
            name="check_tier_commission_rate_range",
        ),
        CheckConstraint(
            "min_referrals >= 0", name="check_tier_min_referrals_non_negative"
        ),
        CheckConstraint(
            "min_sales >= 0", name="check_tier_min_sales_non_negative"
        ),
        CheckConstraint(
            "signup_bonus_points >= 0",
            name="check_tier_signup_bonus_non_negative",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(
        String(50), unique=True, index=True, nullable=False
    )
    rank: Mapped[int] = mapped_column(
        Integer, unique=True, index=True, nullable=False
    )

    # Requirements
    min_referrals: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    min_sales: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Rewards
    commission_rate: Mapped[Decimal] = mapped_column(
        RateType, nullable=False
    )
    signup_bonus_points: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, index=True, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    def to_tier(self) -> Tier:
        """Convert to the pure commission Tier model."""
        return Tier(
            name=self.name,
            rank=self.rank,
            min_referrals=self.min_referrals,
            min_sales=Decimal(self.min_sales),
            commission_rate=Decimal(self.commission_rate),
            signup_bonus_points=self.signup_bonus_points,
            is_active=self.is_active,
        )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AmbassadorTier(id={self.id}, name={self.name}, "
            f"rank={self.rank}, rate={self.commission_rate})>"
        )
