"""
Ambassador model.

One row per POS user enrolled in the referral program. The row doubles as
the balance snapshot that every ledger operation locks.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from referral_engine.models.base import Base
from referral_engine.models.types import MoneyType
from referral_engine.utils.datetime_utils import utc_now


class Ambassador(Base):
    """
    Ambassador entity.

    Attributes:
        id: Primary key
        user_id: POS user owning the referral code (users table is external)
        first_name: Name used for the referral code
        last_name: Name used for the referral code
        referral_code: Unique code, derived from names and id
        lifetime_referral_count: Referred accounts ever created (monotonic)
        lifetime_referred_sales: Lifetime subtotal of referred purchases
        total_earnings: Accruals minus reversals
        available_balance: Redeemable balance, never negative
        bonus_points: Signup bonus points awarded for referrals
        is_active: Inactive ambassadors cannot be found by code
        created_at: Enrollment timestamp
        updated_at: Last balance/counter change

    The current tier is not stored; it is resolved from the lifetime
    counters whenever it is needed.
    """

    __tablename__ = "ambassadors"
    __table_args__ = (
        CheckConstraint(
            "available_balance >= 0",
            name="check_ambassador_available_balance_non_negative",
        ),
        CheckConstraint(
            "lifetime_referral_count >= 0",
            name="check_ambassador_referral_count_non_negative",
        ),
        CheckConstraint(
            "lifetime_referred_sales >= 0",
            name="check_ambassador_referred_sales_non_negative",
        ),
        CheckConstraint(
            "bonus_points >= 0",
            name="check_ambassador_bonus_points_non_negative",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, unique=True, index=True, nullable=False
    )
    first_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default=""
    )
    last_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default=""
    )
    # Issued right after the row gets its id
    referral_code: Mapped[str | None] = mapped_column(
        String(20), unique=True, index=True, nullable=True
    )

    # Lifetime counters (drive tier resolution)
    lifetime_referral_count: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    lifetime_referred_sales: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Balance snapshot (moved only by ledger entries)
    total_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    available_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    bonus_points: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
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

    @property
    def display_name(self) -> str:
        """Full name for dashboards and logs."""
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Ambassador(id={self.id}, user_id={self.user_id}, "
            f"code={self.referral_code}, "
            f"available_balance={self.available_balance})>"
        )
