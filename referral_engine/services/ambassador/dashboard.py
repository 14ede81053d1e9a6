"""
Ambassador dashboard.

Read-only views an ambassador sees: code and link, tier progress, stats,
referred customers and earnings history.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from commission import Tier, generate_link, tier_progress
from referral_engine.config.settings import Settings, get_settings
from referral_engine.models.ledger_entry import LedgerEntry
from referral_engine.models.referral import Referral, ReferralStatus
from referral_engine.repositories.ambassador_repository import (
    AmbassadorRepository,
)
from referral_engine.repositories.referral_repository import (
    ReferralRepository,
)
from referral_engine.services.ambassador.ledger_manager import (
    LedgerBalanceManager,
)
from referral_engine.services.ambassador.tier_catalog import (
    TierCatalogService,
)
from referral_engine.services.base_service import BaseService
from referral_engine.utils.exceptions import NotFoundError
from referral_engine.utils.validation import normalize_pagination


def tier_to_dict(tier: Tier) -> dict[str, Any]:
    """Serialize a tier for API responses."""
    return {
        "name": tier.name,
        "rank": tier.rank,
        "min_referrals": tier.min_referrals,
        "min_sales": tier.min_sales,
        "commission_rate": tier.commission_rate,
        "signup_bonus_points": tier.signup_bonus_points,
    }


def referral_to_dict(referral: Referral) -> dict[str, Any]:
    return {
        "id": referral.id,
        "customer_id": referral.customer_id,
        "referral_code": referral.referral_code,
        "status": referral.status,
        "first_purchase_at": referral.first_purchase_at,
        "created_at": referral.created_at,
    }


def ledger_entry_to_dict(entry: LedgerEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "type": entry.type,
        "amount": entry.amount,
        "related_transaction_id": entry.related_transaction_id,
        "payout_request_id": entry.payout_request_id,
        "subtotal": entry.subtotal,
        "tier_name": entry.tier_name,
        "commission_rate": entry.commission_rate,
        "shortfall": entry.shortfall,
        "description": entry.description,
        "created_at": entry.created_at,
    }


class AmbassadorDashboard(BaseService):
    """Builds the ambassador-facing views."""

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        """
        Initialize dashboard service.

        Args:
            session: Async database session
            settings: Application settings (loaded from env if omitted)
        """
        super().__init__(session)
        self.settings = settings or get_settings()
        self.ambassador_repo = AmbassadorRepository(session)
        self.referral_repo = ReferralRepository(session)
        self.ledger = LedgerBalanceManager(session)
        self.tiers = TierCatalogService(session)

    async def get_dashboard(self, ambassador_id: int) -> dict[str, Any]:
        """
        Get the ambassador dashboard.

        ``total_referrals`` counts every signup; ``active_referrals`` only
        those who completed a purchase.

        Args:
            ambassador_id: Ambassador ID

        Returns:
            Dict with referral_code, referral_link, current_tier, next_tier,
            tier_progress, stats and bonus_points

        Raises:
            NotFoundError: Unknown ambassador
        """
        ambassador = await self.ambassador_repo.get_by_id(ambassador_id)
        if ambassador is None:
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")

        catalog = await self.tiers.load_catalog()
        progress = tier_progress(
            ambassador.lifetime_referral_count,
            ambassador.lifetime_referred_sales,
            catalog,
        )
        status_counts = await self.referral_repo.get_status_counts(ambassador_id)

        referral_link = None
        if ambassador.referral_code:
            referral_link = generate_link(
                self.settings.referral_base_url, ambassador.referral_code
            )

        return {
            "ambassador_id": ambassador.id,
            "name": ambassador.display_name,
            "referral_code": ambassador.referral_code,
            "referral_link": referral_link,
            "current_tier": tier_to_dict(progress.current_tier),
            "next_tier": (
                tier_to_dict(progress.next_tier) if progress.next_tier else None
            ),
            "tier_progress": {
                "referrals": progress.referrals,
                "sales": progress.sales,
                "referrals_needed": progress.referrals_needed,
                "sales_needed": progress.sales_needed,
                "progress_percent": progress.progress_percent,
            },
            "stats": {
                "total_referrals": ambassador.lifetime_referral_count,
                "active_referrals": status_counts[ReferralStatus.ACTIVE],
                "total_earnings": ambassador.total_earnings,
                "available_balance": ambassador.available_balance,
            },
            "bonus_points": ambassador.bonus_points,
        }

    async def get_network(
        self, ambassador_id: int, page: int = 1, per_page: int = 20
    ) -> dict[str, Any]:
        """
        Get the customers an ambassador referred, newest first.

        Raises:
            NotFoundError: Unknown ambassador
        """
        if not await self.ambassador_repo.exists(id=ambassador_id):
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")

        page, per_page = normalize_pagination(page, per_page)
        referrals, total = await self.referral_repo.get_network(
            ambassador_id, page=page, per_page=per_page
        )
        return {
            "items": [referral_to_dict(referral) for referral in referrals],
            "total": total,
            "page": page,
            "per_page": per_page,
        }

    async def get_earnings(
        self, ambassador_id: int, page: int = 1, per_page: int = 20
    ) -> dict[str, Any]:
        """
        Get an ambassador's earnings history with current balances.

        Raises:
            NotFoundError: Unknown ambassador
        """
        balance = await self.ledger.get_balance(ambassador_id)
        page, per_page = normalize_pagination(page, per_page)
        entries, total = await self.ledger.list_entries(
            ambassador_id, page=page, per_page=per_page
        )
        return {
            "items": [ledger_entry_to_dict(entry) for entry in entries],
            "total": total,
            "page": page,
            "per_page": per_page,
            "total_earnings": balance.total_earnings,
            "available_balance": balance.available_balance,
        }
