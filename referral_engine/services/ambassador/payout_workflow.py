"""
Payout workflow.

Redemption requests move pending -> approved -> paid, or pending ->
cancelled. The balance is only deducted when a request is marked paid.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.config.business_constants import PAYOUT_TYPES
from referral_engine.config.settings import Settings, get_settings
from referral_engine.models.ambassador import Ambassador
from referral_engine.models.payout_request import PayoutRequest, PayoutStatus
from referral_engine.repositories.ambassador_repository import (
    AmbassadorRepository,
)
from referral_engine.repositories.payout_repository import (
    PayoutRequestRepository,
)
from referral_engine.services.ambassador.ledger_manager import (
    LedgerBalanceManager,
)
from referral_engine.services.base_service import BaseService, transaction
from referral_engine.utils.datetime_utils import utc_now
from referral_engine.utils.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidPayoutTypeError,
    InvalidTransitionError,
    NotFoundError,
)
from referral_engine.utils.validation import normalize_pagination, to_money


class PayoutWorkflow(BaseService):
    """Creates payout requests and moves them through admin review."""

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        """
        Initialize payout workflow.

        Args:
            session: Async database session
            settings: Application settings (loaded from env if omitted)
        """
        super().__init__(session)
        self.settings = settings or get_settings()
        self.ambassador_repo = AmbassadorRepository(session)
        self.payout_repo = PayoutRequestRepository(session)
        self.ledger = LedgerBalanceManager(session)

    async def _lock_ambassador(self, ambassador_id: int) -> Ambassador:
        ambassador = await self.ambassador_repo.get_for_update(ambassador_id)
        if ambassador is None:
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")
        return ambassador

    async def _lock_payout(self, request_id: int) -> PayoutRequest:
        payout = await self.payout_repo.get_for_update(request_id)
        if payout is None:
            raise NotFoundError(f"Payout request not found: {request_id}")
        return payout

    @staticmethod
    def _check_transition(payout: PayoutRequest, target: str) -> None:
        if not PayoutStatus.can_transition(payout.status, target):
            raise InvalidTransitionError(
                f"Payout request {payout.id} cannot go from "
                f"{payout.status} to {target}"
            )

    @transaction
    async def request_payout(
        self,
        ambassador_id: int,
        amount: Decimal,
        payout_type: str | None = None,
        notes: str | None = None,
    ) -> PayoutRequest:
        """
        Create a pending payout request.

        Args:
            ambassador_id: Requesting ambassador
            amount: Amount to redeem
            payout_type: store_credit, cash or points (default from settings)
            notes: Optional note

        Returns:
            Pending payout request

        Raises:
            InvalidAmountError: Amount not positive or below the minimum
            InvalidPayoutTypeError: Unsupported payout type
            NotFoundError: Unknown ambassador
            InsufficientBalanceError: Amount above available balance
        """
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidAmountError(f"Payout amount must be positive: {amount}")
        if amount < self.settings.min_payout_amount:
            raise InvalidAmountError(
                f"Payout amount {amount} is below the minimum "
                f"{self.settings.min_payout_amount}"
            )

        payout_type = payout_type or self.settings.default_payout_type
        if payout_type not in PAYOUT_TYPES:
            raise InvalidPayoutTypeError(
                f"Unsupported payout type: {payout_type}. "
                f"Expected one of: {', '.join(PAYOUT_TYPES)}"
            )

        ambassador = await self._lock_ambassador(ambassador_id)
        if amount > ambassador.available_balance:
            raise InsufficientBalanceError(
                f"Insufficient balance: requested {amount}, "
                f"available {ambassador.available_balance}"
            )

        payout = await self.payout_repo.create(
            ambassador_id=ambassador_id,
            amount=amount,
            payout_type=payout_type,
            status=PayoutStatus.PENDING,
            notes=notes,
        )

        self.logger.info(
            "Payout requested",
            extra={
                "payout_request_id": payout.id,
                "ambassador_id": ambassador_id,
                "amount": str(amount),
                "payout_type": payout_type,
            },
        )
        return payout

    @transaction
    async def approve(self, request_id: int, approved_by: int) -> PayoutRequest:
        """
        Approve a pending request. Nothing is deducted yet.

        Raises:
            NotFoundError: Unknown request
            InvalidTransitionError: Request is not pending
            InsufficientBalanceError: Balance dropped below the amount
        """
        payout = await self._lock_payout(request_id)
        self._check_transition(payout, PayoutStatus.APPROVED)

        ambassador = await self._lock_ambassador(payout.ambassador_id)
        if payout.amount > ambassador.available_balance:
            raise InsufficientBalanceError(
                f"Insufficient balance to approve payout {request_id}: "
                f"requested {payout.amount}, "
                f"available {ambassador.available_balance}"
            )

        payout.status = PayoutStatus.APPROVED
        payout.approved_by = approved_by
        payout.approved_at = utc_now()
        await self.session.flush()

        self.logger.info(
            "Payout approved",
            extra={
                "payout_request_id": request_id,
                "ambassador_id": payout.ambassador_id,
                "approved_by": approved_by,
                "amount": str(payout.amount),
            },
        )
        return payout

    @transaction
    async def mark_paid(self, request_id: int) -> PayoutRequest:
        """
        Mark an approved request paid and redeem the balance.

        The redemption re-checks the balance under the ambassador row lock
        in the same transaction as the status change.

        Raises:
            NotFoundError: Unknown request
            InvalidTransitionError: Request is not approved
            InsufficientBalanceError: Balance dropped below the amount
        """
        payout = await self._lock_payout(request_id)
        self._check_transition(payout, PayoutStatus.PAID)

        await self.ledger.apply_redemption(
            payout.ambassador_id,
            payout.amount,
            payout_request_id=payout.id,
            description=f"Payout #{payout.id} ({payout.payout_type})",
        )

        payout.status = PayoutStatus.PAID
        payout.paid_at = utc_now()
        await self.session.flush()

        self.logger.info(
            "Payout paid",
            extra={
                "payout_request_id": request_id,
                "ambassador_id": payout.ambassador_id,
                "amount": str(payout.amount),
                "payout_type": payout.payout_type,
            },
        )
        return payout

    @transaction
    async def cancel(self, request_id: int) -> PayoutRequest:
        """
        Cancel a pending request. No balance effect.

        Raises:
            NotFoundError: Unknown request
            InvalidTransitionError: Request is not pending
        """
        payout = await self._lock_payout(request_id)
        self._check_transition(payout, PayoutStatus.CANCELLED)

        payout.status = PayoutStatus.CANCELLED
        payout.cancelled_at = utc_now()
        await self.session.flush()

        self.logger.info(
            "Payout cancelled",
            extra={
                "payout_request_id": request_id,
                "ambassador_id": payout.ambassador_id,
            },
        )
        return payout

    async def get_payout(self, request_id: int) -> PayoutRequest:
        """
        Get payout request by ID.

        Raises:
            NotFoundError: Unknown request
        """
        payout = await self.payout_repo.get_by_id(request_id)
        if payout is None:
            raise NotFoundError(f"Payout request not found: {request_id}")
        return payout

    async def list_payouts(
        self,
        status: str | None = None,
        ambassador_id: int | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[PayoutRequest], int]:
        """
        List payout requests for the admin queue, newest first.

        Returns:
            Tuple of (requests, total_count)
        """
        page, per_page = normalize_pagination(page, per_page)
        return await self.payout_repo.get_queue(
            status=status,
            ambassador_id=ambassador_id,
            page=page,
            per_page=per_page,
        )
