"""
Tests for the standalone commission calculator.

Tests the commission package without database dependencies.
"""

import random
from decimal import Decimal

import pytest

from commission import CommissionCalculator, InvalidAmount, Tier, round2


class TestRound2:
    """Tests for cent rounding."""

    def test_round_half_up(self) -> None:
        """Half a cent rounds away from zero."""
        assert round2(Decimal("2.345")) == Decimal("2.35")
        assert round2(Decimal("2.344")) == Decimal("2.34")

    def test_quantizes_integers(self) -> None:
        """Whole amounts get two decimal places."""
        assert str(round2(Decimal("5"))) == "5.00"


class TestComputeAccrual:
    """Tests for CommissionCalculator.compute_accrual."""

    def test_member_rate(self, calc: CommissionCalculator, member: Tier) -> None:
        """100.00 at Member (5%) earns 5.00."""
        assert calc.compute_accrual(Decimal("100.00"), member) == Decimal("5.00")

    def test_elite_rate(self, calc: CommissionCalculator, elite: Tier) -> None:
        """100.00 at Elite (15%) earns 15.00."""
        assert calc.compute_accrual(Decimal("100.00"), elite) == Decimal("15.00")

    def test_promoter_rate_rounds(
        self, calc: CommissionCalculator, promoter: Tier
    ) -> None:
        """7.5% of 33.33 is 2.49975, rounded half up to 2.50."""
        assert calc.compute_accrual(Decimal("33.33"), promoter) == Decimal("2.50")

    def test_zero_subtotal(self, calc: CommissionCalculator, member: Tier) -> None:
        """Zero subtotal earns zero commission."""
        assert calc.compute_accrual(Decimal("0"), member) == Decimal("0.00")

    def test_negative_subtotal_rejected(
        self, calc: CommissionCalculator, member: Tier
    ) -> None:
        """Negative subtotal raises InvalidAmount."""
        with pytest.raises(InvalidAmount):
            calc.compute_accrual(Decimal("-1"), member)

    def test_monotone_in_subtotal_and_rate(
        self, calc: CommissionCalculator, member: Tier, elite: Tier
    ) -> None:
        """Larger subtotal or higher rate never earns less."""
        rng = random.Random(42)
        for _ in range(200):
            low = Decimal(rng.randint(0, 100_000)) / 100
            high = low + Decimal(rng.randint(0, 100_000)) / 100
            assert calc.compute_accrual(low, member) <= calc.compute_accrual(high, member)
            assert calc.compute_accrual(low, member) <= calc.compute_accrual(low, elite)


class TestComputeReversal:
    """Tests for CommissionCalculator.compute_reversal."""

    def test_half_refund(self, calc: CommissionCalculator) -> None:
        """Refunding half the sale reverses half the commission."""
        result = calc.compute_reversal(Decimal("100"), Decimal("5"), Decimal("50"))
        assert result == Decimal("2.50")

    def test_full_refund_reverses_everything(self, calc: CommissionCalculator) -> None:
        """A void reverses exactly the original commission."""
        result = calc.compute_full_reversal(Decimal("87.45"), Decimal("6.56"))
        assert result == Decimal("6.56")

    def test_refund_above_subtotal_capped(self, calc: CommissionCalculator) -> None:
        """Refund larger than the sale reverses the whole commission, no more."""
        result = calc.compute_reversal(Decimal("100"), Decimal("5"), Decimal("250"))
        assert result == Decimal("5")

    def test_zero_subtotal(self, calc: CommissionCalculator) -> None:
        """Zero-subtotal sale reverses nothing."""
        result = calc.compute_reversal(Decimal("0"), Decimal("0"), Decimal("10"))
        assert result == Decimal("0.00")

    @pytest.mark.parametrize(
        "subtotal,commission,refund",
        [
            (Decimal("-1"), Decimal("5"), Decimal("1")),
            (Decimal("100"), Decimal("-5"), Decimal("1")),
            (Decimal("100"), Decimal("5"), Decimal("-1")),
        ],
    )
    def test_negative_inputs_rejected(
        self,
        calc: CommissionCalculator,
        subtotal: Decimal,
        commission: Decimal,
        refund: Decimal,
    ) -> None:
        """Any negative input raises InvalidAmount."""
        with pytest.raises(InvalidAmount):
            calc.compute_reversal(subtotal, commission, refund)

    def test_never_exceeds_commission(
        self, calc: CommissionCalculator, elite: Tier
    ) -> None:
        """Partial refunds never reverse more than was accrued."""
        rng = random.Random(7)
        for _ in range(300):
            subtotal = Decimal(rng.randint(1, 500_000)) / 100
            commission = calc.compute_accrual(subtotal, elite)
            refund = Decimal(rng.randint(0, 500_000)) / 100
            reversal = calc.compute_reversal(subtotal, commission, refund)
            assert Decimal("0") <= reversal <= commission

    def test_reversed_subtotal(self, calc: CommissionCalculator) -> None:
        """Refunded portion is capped at the original subtotal."""
        assert calc.reversed_subtotal(Decimal("40"), Decimal("10")) == Decimal("10")
        assert calc.reversed_subtotal(Decimal("40"), Decimal("90")) == Decimal("40")
