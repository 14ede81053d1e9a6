"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from referral_engine.models.ambassador import Ambassador
from referral_engine.models.base import Base
from referral_engine.models.ledger_entry import LedgerEntry, LedgerEntryType
from referral_engine.models.payout_request import PayoutRequest, PayoutStatus
from referral_engine.models.referral import Referral, ReferralStatus
from referral_engine.models.tier import AmbassadorTier


__all__ = [
    "Base",
    "AmbassadorTier",
    "Ambassador",
    "Referral",
    "ReferralStatus",
    "LedgerEntry",
    "LedgerEntryType",
    "PayoutRequest",
    "PayoutStatus",
]
