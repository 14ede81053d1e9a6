"""
Business constants for the ambassador program.

Single source of truth for money precision, ledger and payout vocabularies
and the default tier ladder.
"""

from decimal import Decimal

from commission.constants import DEFAULT_TIERS


# ========================================================================
# MONEY
# ========================================================================

# All stored money amounts are rounded to cents
MONEY_QUANTUM = Decimal("0.01")
ZERO_MONEY = Decimal("0.00")

# ========================================================================
# LEDGER
# ========================================================================

LEDGER_ACCRUAL = "accrual"
LEDGER_REVERSAL = "reversal"
LEDGER_REDEMPTION = "redemption"
LEDGER_ENTRY_TYPES = (LEDGER_ACCRUAL, LEDGER_REVERSAL, LEDGER_REDEMPTION)

# ========================================================================
# PAYOUTS
# ========================================================================

PAYOUT_TYPES = ("store_credit", "cash", "points")

# ========================================================================
# PAGINATION
# ========================================================================

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

__all__ = [
    "DEFAULT_TIERS",
    "MONEY_QUANTUM",
    "ZERO_MONEY",
    "LEDGER_ACCRUAL",
    "LEDGER_REVERSAL",
    "LEDGER_REDEMPTION",
    "LEDGER_ENTRY_TYPES",
    "PAYOUT_TYPES",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
]
