"""
PayoutRequest model.

Tracks ambassador redemption requests through admin review.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from referral_engine.models.base import Base
from referral_engine.models.types import MoneyType
from referral_engine.utils.datetime_utils import utc_now


class PayoutStatus:
    """Payout request status constants.

    Allowed transitions: pending -> approved -> paid, pending -> cancelled.
    """

    PENDING = "pending"  # Requested, awaiting admin review
    APPROVED = "approved"  # Approved, not yet paid out
    PAID = "paid"  # Paid out, balance deducted (terminal)
    CANCELLED = "cancelled"  # Withdrawn before approval (terminal)

    TRANSITIONS: dict[str, frozenset[str]] = {
        PENDING: frozenset({APPROVED, CANCELLED}),
        APPROVED: frozenset({PAID}),
        PAID: frozenset(),
        CANCELLED: frozenset(),
    }

    @classmethod
    def can_transition(cls, current: str, target: str) -> bool:
        """Check whether ``current -> target`` is an allowed transition."""
        return target in cls.TRANSITIONS.get(current, frozenset())


class PayoutRequest(Base):
    """
    PayoutRequest entity.

    Attributes:
        id: Primary key
        ambassador_id: Requesting ambassador
        amount: Requested amount (> 0)
        payout_type: store_credit, cash or points
        status: pending, approved, paid or cancelled
        notes: Optional note from the ambassador or admin
        approved_by: Admin user who approved (users table is external)
        approved_at: Approval timestamp
        paid_at: Payout timestamp
        cancelled_at: Cancellation timestamp
        created_at: Request timestamp
    """

    __tablename__ = "ambassador_payout_requests"
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_payout_amount_positive"),
        CheckConstraint(
            "payout_type IN ('store_credit', 'cash', 'points')",
            name="check_payout_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'paid', 'cancelled')",
            name="check_payout_status",
        ),
        Index("idx_payout_requests_ambassador_status", "ambassador_id", "status"),
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
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    payout_type: Mapped[str] = mapped_column(
        String(20), default="store_credit", nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=PayoutStatus.PENDING, index=True, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    approved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancelled_at: Mapped[datetime | None] = mapped_column(
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
            f"<PayoutRequest(id={self.id}, ambassador_id={self.ambassador_id}, "
            f"amount={self.amount}, status={self.status})>"
        )
