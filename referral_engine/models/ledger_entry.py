"""
LedgerEntry model.

Append-only record of every commission accrual, reversal and redemption.
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
from referral_engine.models.types import MoneyType, RateType
from referral_engine.utils.datetime_utils import utc_now


class LedgerEntryType:
    """Ledger entry type constants."""

    ACCRUAL = "accrual"  # Commission earned (positive)
    REVERSAL = "reversal"  # Commission taken back on void/refund (negative)
    REDEMPTION = "redemption"  # Balance paid out (negative)


class LedgerEntry(Base):
    """
    LedgerEntry entity.

    Rows are never updated or deleted. The ambassador's balance snapshot
    is kept in step with the entries inside the same transaction.

    Attributes:
        id: Primary key
        ambassador_id: Ambassador the entry belongs to
        type: accrual, reversal or redemption
        amount: Signed amount (positive accrual, negative otherwise)
        related_transaction_id: POS transaction behind the entry
        payout_request_id: Payout behind a redemption
        subtotal: Sale subtotal (accrual) or refunded portion (reversal)
        tier_name: Tier used for the commission, frozen at accrual time
        commission_rate: Rate used for the commission, frozen at accrual time
        shortfall: Part of a reversal not covered by available balance
        description: Free-form note
        created_at: Entry timestamp
    """

    __tablename__ = "ambassador_ledger_entries"
    __table_args__ = (
        CheckConstraint(
            "type IN ('accrual', 'reversal', 'redemption')",
            name="check_ledger_entry_type",
        ),
        CheckConstraint(
            "(type = 'accrual' AND amount >= 0) OR "
            "(type != 'accrual' AND amount <= 0)",
            name="check_ledger_entry_amount_sign",
        ),
        CheckConstraint(
            "shortfall >= 0", name="check_ledger_entry_shortfall_non_negative"
        ),
        Index("idx_ledger_ambassador_created", "ambassador_id", "created_at"),
        Index(
            "idx_ledger_transaction_type", "related_transaction_id", "type"
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    ambassador_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ambassadors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

    related_transaction_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    payout_request_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("ambassador_payout_requests.id", ondelete="RESTRICT"),
        nullable=True,
    )

    # Commission audit (frozen when the entry is written)
    subtotal: Mapped[Decimal | None] = mapped_column(
        MoneyType, nullable=True
    )
    tier_name: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    commission_rate: Mapped[Decimal | None] = mapped_column(
        RateType, nullable=True
    )

    shortfall: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<LedgerEntry(id={self.id}, ambassador_id={self.ambassador_id}, "
            f"type={self.type}, amount={self.amount})>"
        )
