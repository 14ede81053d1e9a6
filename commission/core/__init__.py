"""
Core commission functionality.

Contains tier models, tier resolution, commission math and referral codes.
"""

from commission.core.calculator import CommissionCalculator, round2
from commission.core.codes import generate_code, generate_link, normalize_code
from commission.core.models import Tier, TierProgress
from commission.core.resolver import resolve_tier, tier_progress
from commission.core.tiers import TierCatalog

__all__ = [
    "CommissionCalculator",
    "round2",
    "Tier",
    "TierProgress",
    "TierCatalog",
    "resolve_tier",
    "tier_progress",
    "generate_code",
    "generate_link",
    "normalize_code",
]
