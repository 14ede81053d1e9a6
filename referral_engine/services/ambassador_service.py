"""
Ambassador service - Main service facade.

This service is the single entry point the POS HTTP layer calls. It
delegates to the specialized modules in ``services/ambassador``:
- tier_catalog: Tier listing and admin edits
- commission_processor: Signup, sale and void/refund events
- ledger_manager: Balances, history and reconciliation
- enrollment: Ambassador creation and code lookup
- payout_workflow: Payout requests and admin review
- dashboard / analytics: Read-only views
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.config.settings import Settings, get_settings
from referral_engine.models.ambassador import Ambassador
from referral_engine.models.payout_request import PayoutRequest
from referral_engine.models.referral import Referral
from referral_engine.models.tier import AmbassadorTier
from referral_engine.services.ambassador import (
    AmbassadorDashboard,
    AmbassadorEnrollment,
    BalanceSnapshot,
    CommissionProcessor,
    CommissionResult,
    LedgerBalanceManager,
    PayoutWorkflow,
    ProgramAnalytics,
    ReconciliationReport,
    ReversalResult,
    TierCatalogService,
)
from referral_engine.services.base_service import BaseService, log_operation


class AmbassadorService(BaseService):
    """
    Ambassador program service.

    A facade over the ambassador components. Every component shares this
    service's session, so each call below is one database transaction.
    """

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        """Initialize ambassador service and all sub-components."""
        super().__init__(session)
        settings = settings or get_settings()

        # Initialize all specialized components
        self.tier_catalog = TierCatalogService(session)
        self.enrollment = AmbassadorEnrollment(session)
        self.commission_processor = CommissionProcessor(session)
        self.ledger = LedgerBalanceManager(session)
        self.payouts = PayoutWorkflow(session, settings=settings)
        self.dashboard = AmbassadorDashboard(session, settings=settings)
        self.analytics = ProgramAnalytics(session)

    # ========================================================================
    # ENROLLMENT (delegates to AmbassadorEnrollment)
    # ========================================================================

    async def enroll(
        self, user_id: int, first_name: str, last_name: str
    ) -> Ambassador:
        """Enroll a POS user and issue their referral code."""
        return await self.enrollment.enroll(user_id, first_name, last_name)

    async def find_by_code(self, code: str) -> Ambassador:
        """Resolve a typed referral code to an active ambassador."""
        return await self.enrollment.find_by_code(code)

    async def set_ambassador_active(
        self, ambassador_id: int, is_active: bool
    ) -> Ambassador:
        """Activate or deactivate an ambassador."""
        return await self.enrollment.set_active(ambassador_id, is_active)

    # ========================================================================
    # POS EVENTS (delegates to CommissionProcessor)
    # ========================================================================

    @log_operation
    async def on_referral_signup(
        self,
        ambassador_id: int,
        new_customer_id: int,
        referral_code: str | None = None,
    ) -> Referral:
        """
        Record a referred customer signup.

        Args:
            ambassador_id: Referring ambassador
            new_customer_id: Newly created customer
            referral_code: Code the customer typed, if any

        Returns:
            The referral (existing one if the customer was already referred)
        """
        return await self.commission_processor.on_referral_signup(
            ambassador_id, new_customer_id, referral_code=referral_code
        )

    @log_operation
    async def on_purchase_completed(
        self,
        ambassador_id: int,
        transaction_id: int,
        subtotal: Decimal,
        customer_id: int | None = None,
    ) -> CommissionResult:
        """
        Accrue commission for a completed referred purchase.

        Args:
            ambassador_id: Ambassador who referred the buyer
            transaction_id: POS transaction ID
            subtotal: Pre-tax, pre-loyalty-discount amount
            customer_id: Buyer, used to mark the referral active

        Returns:
            CommissionResult
        """
        return await self.commission_processor.on_purchase_completed(
            ambassador_id, transaction_id, subtotal, customer_id=customer_id
        )

    @log_operation
    async def on_purchase_voided_or_refunded(
        self,
        ambassador_id: int,
        original_transaction_id: int,
        original_subtotal: Decimal,
        original_commission: Decimal,
        refund_amount: Decimal,
    ) -> ReversalResult:
        """
        Reverse commission for a voided or refunded referred purchase.

        Returns:
            ReversalResult
        """
        return await self.commission_processor.on_purchase_voided_or_refunded(
            ambassador_id,
            original_transaction_id,
            original_subtotal,
            original_commission,
            refund_amount,
        )

    # ========================================================================
    # DASHBOARD (delegates to AmbassadorDashboard / LedgerBalanceManager)
    # ========================================================================

    async def get_dashboard(self, ambassador_id: int) -> dict[str, Any]:
        """Get the ambassador dashboard."""
        return await self.dashboard.get_dashboard(ambassador_id)

    async def get_network(
        self, ambassador_id: int, page: int = 1, per_page: int = 20
    ) -> dict[str, Any]:
        """Get referred customers, newest first."""
        return await self.dashboard.get_network(
            ambassador_id, page=page, per_page=per_page
        )

    async def get_earnings(
        self, ambassador_id: int, page: int = 1, per_page: int = 20
    ) -> dict[str, Any]:
        """Get earnings history, newest first."""
        return await self.dashboard.get_earnings(
            ambassador_id, page=page, per_page=per_page
        )

    async def get_balance(self, ambassador_id: int) -> BalanceSnapshot:
        """Get the stored balance snapshot."""
        return await self.ledger.get_balance(ambassador_id)

    async def reconcile(self, ambassador_id: int) -> ReconciliationReport:
        """Compare ledger totals with the balance snapshot."""
        return await self.ledger.reconcile(ambassador_id)

    # ========================================================================
    # PAYOUTS (delegates to PayoutWorkflow)
    # ========================================================================

    @log_operation
    async def request_payout(
        self,
        ambassador_id: int,
        amount: Decimal,
        payout_type: str | None = None,
        notes: str | None = None,
    ) -> PayoutRequest:
        """Create a pending payout request."""
        return await self.payouts.request_payout(
            ambassador_id, amount, payout_type=payout_type, notes=notes
        )

    @log_operation
    async def approve_payout(
        self, request_id: int, approved_by: int
    ) -> PayoutRequest:
        """Approve a pending payout request."""
        return await self.payouts.approve(request_id, approved_by)

    @log_operation
    async def mark_payout_paid(self, request_id: int) -> PayoutRequest:
        """Mark an approved payout paid and redeem the balance."""
        return await self.payouts.mark_paid(request_id)

    @log_operation
    async def cancel_payout(self, request_id: int) -> PayoutRequest:
        """Cancel a pending payout request."""
        return await self.payouts.cancel(request_id)

    async def get_payout(self, request_id: int) -> PayoutRequest:
        """Get a payout request."""
        return await self.payouts.get_payout(request_id)

    async def list_payouts(
        self,
        status: str | None = None,
        ambassador_id: int | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[PayoutRequest], int]:
        """List payout requests for the admin queue."""
        return await self.payouts.list_payouts(
            status=status,
            ambassador_id=ambassador_id,
            page=page,
            per_page=per_page,
        )

    # ========================================================================
    # ADMIN (delegates to TierCatalogService / ProgramAnalytics)
    # ========================================================================

    async def list_tiers(self, active_only: bool = False) -> list[AmbassadorTier]:
        """List tiers ascending by rank."""
        return await self.tier_catalog.list_tiers(active_only=active_only)

    @log_operation
    async def update_tier(self, tier_id: int, **changes: Any) -> AmbassadorTier:
        """Apply an admin edit to one tier."""
        return await self.tier_catalog.update_tier(tier_id, **changes)

    async def seed_default_tiers(self) -> int:
        """Insert the default tier ladder where missing."""
        return await self.tier_catalog.seed_default_tiers()

    async def get_program_analytics(
        self, top: int = 5, recent: int = 10
    ) -> dict[str, Any]:
        """Get the admin program overview."""
        return await self.analytics.get_program_analytics(top=top, recent=recent)
