"""
Payout request repository.

Data access layer for PayoutRequest model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.models.payout_request import PayoutRequest, PayoutStatus
from referral_engine.repositories.base import BaseRepository


class PayoutRequestRepository(BaseRepository[PayoutRequest]):
    """Payout request repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payout request repository."""
        super().__init__(PayoutRequest, session)

    async def get_queue(
        self,
        status: str | None = None,
        ambassador_id: int | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[PayoutRequest], int]:
        """
        Get payout requests, newest first.

        Args:
            status: Optional status filter
            ambassador_id: Optional ambassador filter
            page: Page number (1-indexed)
            per_page: Items per page

        Returns:
            Tuple of (requests, total_count)
        """
        filters: dict[str, object] = {}
        if status:
            filters["status"] = status
        if ambassador_id is not None:
            filters["ambassador_id"] = ambassador_id
        return await self.find_paginated(page=page, per_page=per_page, **filters)

    async def get_pending_summary(self) -> tuple[Decimal, int]:
        """
        Get total amount and number of pending payout requests.

        Returns:
            Tuple of (pending_amount, pending_count)
        """
        stmt = select(
            func.coalesce(func.sum(PayoutRequest.amount), 0),
            func.count(PayoutRequest.id),
        ).where(PayoutRequest.status == PayoutStatus.PENDING)
        result = await self.session.execute(stmt)
        amount, count = result.one()
        return Decimal(amount), count
