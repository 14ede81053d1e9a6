"""
Ambassador services package.

This package provides the modular ambassador program functionality:
- tier_catalog: Persisted tier ladder and admin edits
- commission_processor: Signup, sale and void/refund events
- ledger_manager: Ledger entries and balance snapshot
- enrollment: Ambassador creation and referral codes
- payout_workflow: Payout requests and admin review
- dashboard: Ambassador-facing views
- analytics: Program-wide admin figures

All components are re-exported for easy importing.
"""

from referral_engine.services.ambassador.analytics import ProgramAnalytics
from referral_engine.services.ambassador.commission_processor import (
    CommissionProcessor,
    CommissionResult,
    ReversalResult,
)
from referral_engine.services.ambassador.dashboard import AmbassadorDashboard
from referral_engine.services.ambassador.enrollment import (
    AmbassadorEnrollment,
)
from referral_engine.services.ambassador.ledger_manager import (
    BalanceSnapshot,
    LedgerBalanceManager,
    ReconciliationReport,
)
from referral_engine.services.ambassador.payout_workflow import PayoutWorkflow
from referral_engine.services.ambassador.tier_catalog import (
    TierCatalogService,
)


__all__ = [
    "TierCatalogService",
    "CommissionProcessor",
    "CommissionResult",
    "ReversalResult",
    "LedgerBalanceManager",
    "BalanceSnapshot",
    "ReconciliationReport",
    "AmbassadorEnrollment",
    "PayoutWorkflow",
    "AmbassadorDashboard",
    "ProgramAnalytics",
]
