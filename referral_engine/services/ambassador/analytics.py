"""
Program analytics.

Admin overview of the whole ambassador program.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from commission import resolve_tier
from referral_engine.models.referral import ReferralStatus
from referral_engine.repositories.ambassador_repository import (
    AmbassadorRepository,
)
from referral_engine.repositories.ledger_repository import LedgerRepository
from referral_engine.repositories.payout_repository import (
    PayoutRequestRepository,
)
from referral_engine.repositories.referral_repository import (
    ReferralRepository,
)
from referral_engine.services.ambassador.tier_catalog import (
    TierCatalogService,
)
from referral_engine.services.base_service import BaseService


class ProgramAnalytics(BaseService):
    """Aggregates program-wide figures for the admin screen."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize analytics service.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.ambassador_repo = AmbassadorRepository(session)
        self.referral_repo = ReferralRepository(session)
        self.ledger_repo = LedgerRepository(session)
        self.payout_repo = PayoutRequestRepository(session)
        self.tiers = TierCatalogService(session)

    async def get_program_analytics(
        self, top: int = 5, recent: int = 10
    ) -> dict[str, Any]:
        """
        Get program overview, top performers, tier distribution and the
        latest commissions.

        Args:
            top: Number of top performers
            recent: Number of recent commissions

        Returns:
            Dict with overview, top_performers, tier_distribution and
            recent_commissions
        """
        catalog = await self.tiers.load_catalog()

        status_counts = await self.referral_repo.get_status_counts()
        pending_amount, pending_count = (
            await self.payout_repo.get_pending_summary()
        )
        overview = {
            "total_ambassadors": await self.ambassador_repo.count(),
            "total_referrals": sum(status_counts.values()),
            "active_referrals": status_counts[ReferralStatus.ACTIVE],
            "total_commissions": (
                await self.ledger_repo.get_program_commission_total()
            ),
            "pending_payouts": pending_amount,
            "pending_payouts_count": pending_count,
        }

        top_performers = []
        for ambassador in await self.ambassador_repo.get_top_earners(limit=top):
            tier = resolve_tier(
                ambassador.lifetime_referral_count,
                ambassador.lifetime_referred_sales,
                catalog,
            )
            top_performers.append(
                {
                    "ambassador_id": ambassador.id,
                    "name": ambassador.display_name,
                    "referral_code": ambassador.referral_code,
                    "tier": tier.name,
                    "total_referrals": ambassador.lifetime_referral_count,
                    "referred_sales": ambassador.lifetime_referred_sales,
                    "total_earnings": ambassador.total_earnings,
                }
            )

        distribution = {tier.name: 0 for tier in catalog.list_active_tiers()}
        for referrals, sales in await self.ambassador_repo.get_tier_counters():
            tier = resolve_tier(referrals, Decimal(sales), catalog)
            distribution[tier.name] += 1
        tier_distribution = [
            {"tier": name, "ambassadors": count}
            for name, count in distribution.items()
        ]

        recent_commissions = [
            {
                "ledger_entry_id": entry.id,
                "ambassador_id": ambassador.id,
                "ambassador_name": ambassador.display_name,
                "transaction_id": entry.related_transaction_id,
                "amount": entry.amount,
                "tier_name": entry.tier_name,
                "created_at": entry.created_at,
            }
            for entry, ambassador in await self.ledger_repo.get_recent_commissions(
                limit=recent
            )
        ]

        return {
            "overview": overview,
            "top_performers": top_performers,
            "tier_distribution": tier_distribution,
            "recent_commissions": recent_commissions,
        }
