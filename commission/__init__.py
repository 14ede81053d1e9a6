"""
Ambassador commission math.

Standalone package for tier resolution and commission calculations. It has
no database or framework dependencies.

Example:
    >>> from commission import CommissionCalculator, DEFAULT_TIERS, resolve_tier
    >>> from decimal import Decimal
    >>>
    >>> tier = resolve_tier(5, Decimal("500"), DEFAULT_TIERS)
    >>> tier.name
    'Promoter'
    >>> CommissionCalculator().compute_accrual(Decimal("100.00"), tier)
    Decimal('7.50')
"""

from commission.constants import DEFAULT_TIERS, default_catalog, get_tier_by_name
from commission.core.calculator import CommissionCalculator, round2
from commission.core.codes import generate_code, generate_link, normalize_code
from commission.core.models import Tier, TierProgress
from commission.core.resolver import resolve_tier, tier_progress
from commission.core.tiers import TierCatalog
from commission.exceptions import (
    CommissionError,
    InvalidAmount,
    InvalidName,
    InvalidTierCatalog,
    TierNotFound,
)


__version__ = "1.0.0"
__all__ = [
    # Core
    "CommissionCalculator",
    "round2",
    "resolve_tier",
    "tier_progress",
    "generate_code",
    "generate_link",
    "normalize_code",
    # Models
    "Tier",
    "TierProgress",
    "TierCatalog",
    # Constants
    "DEFAULT_TIERS",
    "default_catalog",
    "get_tier_by_name",
    # Errors
    "CommissionError",
    "InvalidAmount",
    "InvalidName",
    "InvalidTierCatalog",
    "TierNotFound",
]
