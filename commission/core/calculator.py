"""
Pure business logic for commission calculations.

This module contains standalone calculation logic without any
dependencies on database, ORM, or app-specific code. All money is
``Decimal`` and is rounded to cents only at the boundary of each stored
amount.
"""

from decimal import ROUND_HALF_UP, Decimal

from commission.core.models import Tier
from commission.exceptions import InvalidAmount


CENT = Decimal("0.01")
ZERO = Decimal("0")


def round2(value: Decimal) -> Decimal:
    """
    Round a money value to cents (half up).

    Example:
        >>> round2(Decimal("4.3765"))
        Decimal('4.38')
    """
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class CommissionCalculator:
    """
    Pure business logic calculator for ambassador commissions.

    Works with plain ``Decimal`` values and ``Tier`` models only, so the
    same numbers come out whether it is driven by the engine services or
    by a test.
    """

    def compute_accrual(self, subtotal: Decimal, tier: Tier) -> Decimal:
        """
        Calculate commission for a referred purchase.

        Formula: round2(subtotal * tier.commission_rate)

        Args:
            subtotal: Pre-tax, pre-loyalty-discount purchase amount
            tier: Referrer's tier at the time of the purchase

        Returns:
            Commission amount in cents precision

        Raises:
            InvalidAmount: If subtotal is negative

        Example:
            >>> calc = CommissionCalculator()
            >>> calc.compute_accrual(Decimal("100.00"), member)
            Decimal('5.00')
        """
        if subtotal < 0:
            raise InvalidAmount(f"Subtotal cannot be negative: {subtotal}")

        return round2(subtotal * tier.commission_rate)

    def reversed_subtotal(
        self, original_subtotal: Decimal, refund_amount: Decimal
    ) -> Decimal:
        """
        Portion of the original sale that a refund takes back.

        Refunds larger than the sale are capped at the sale amount.
        """
        if original_subtotal < 0 or refund_amount < 0:
            raise InvalidAmount("Subtotal and refund amount cannot be negative")

        return min(refund_amount, original_subtotal)

    def compute_reversal(
        self,
        original_subtotal: Decimal,
        original_commission: Decimal,
        refund_amount: Decimal,
    ) -> Decimal:
        """
        Calculate commission to reverse for a refund or void.

        Formula:
            round2(min(refund, subtotal) / subtotal * commission)

        A void is a refund of the full subtotal and reverses the whole
        commission. The result never exceeds ``original_commission``.

        Args:
            original_subtotal: Subtotal of the original sale
            original_commission: Commission accrued on the original sale
            refund_amount: Amount refunded

        Returns:
            Reversal magnitude (non-negative)

        Raises:
            InvalidAmount: If any input is negative

        Example:
            >>> calc = CommissionCalculator()
            >>> calc.compute_reversal(Decimal("100"), Decimal("5"), Decimal("50"))
            Decimal('2.50')
        """
        if original_commission < 0:
            raise InvalidAmount(
                f"Original commission cannot be negative: {original_commission}"
            )

        refunded = self.reversed_subtotal(original_subtotal, refund_amount)

        if original_subtotal == 0:
            return ZERO.quantize(CENT)

        reversal = round2(refunded / original_subtotal * original_commission)
        return min(reversal, original_commission)

    def compute_full_reversal(
        self, original_subtotal: Decimal, original_commission: Decimal
    ) -> Decimal:
        """Reversal for a voided sale: the entire original commission."""
        return self.compute_reversal(
            original_subtotal, original_commission, original_subtotal
        )
