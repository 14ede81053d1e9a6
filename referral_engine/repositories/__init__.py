"""
Repositories.

Data access layer over the ambassador program tables.
"""

from referral_engine.repositories.ambassador_repository import (
    AmbassadorRepository,
)
from referral_engine.repositories.base import BaseRepository
from referral_engine.repositories.ledger_repository import LedgerRepository
from referral_engine.repositories.payout_repository import (
    PayoutRequestRepository,
)
from referral_engine.repositories.referral_repository import (
    ReferralRepository,
)
from referral_engine.repositories.tier_repository import TierRepository


__all__ = [
    "BaseRepository",
    "TierRepository",
    "AmbassadorRepository",
    "ReferralRepository",
    "LedgerRepository",
    "PayoutRequestRepository",
]
