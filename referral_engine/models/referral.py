"""
Referral model.

Links a referred customer to the ambassador whose code they signed up with.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from referral_engine.models.base import Base
from referral_engine.utils.datetime_utils import utc_now


class ReferralStatus:
    """Referral status constants."""

    INACTIVE = "inactive"  # Signed up, no completed purchase yet
    ACTIVE = "active"  # At least one completed purchase


class Referral(Base):
    """
    Referral entity.

    Attributes:
        id: Primary key
        ambassador_id: Referring ambassador
        customer_id: Referred customer (customers table is external)
        referral_code: Code entered at signup
        status: inactive until the first completed purchase
        first_purchase_at: When the customer first completed a purchase
        created_at: Signup timestamp

    A customer is referred at most once; the link never changes.
    """

    __tablename__ = "referrals"
    __table_args__ = (
        Index("idx_referrals_ambassador_status", "ambassador_id", "status"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    ambassador_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ambassadors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id: Mapped[int] = mapped_column(
        Integer, unique=True, index=True, nullable=False
    )
    referral_code: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default=ReferralStatus.INACTIVE, nullable=False
    )
    first_purchase_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Referral(id={self.id}, ambassador_id={self.ambassador_id}, "
            f"customer_id={self.customer_id}, status={self.status})>"
        )
