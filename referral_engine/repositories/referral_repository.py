"""
Referral repository.

Data access layer for Referral model.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.models.referral import Referral, ReferralStatus
from referral_engine.repositories.base import BaseRepository


class ReferralRepository(BaseRepository[Referral]):
    """Referral repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral repository."""
        super().__init__(Referral, session)

    async def get_by_customer(self, customer_id: int) -> Referral | None:
        """
        Get the referral that brought a customer in.

        Args:
            customer_id: Referred customer ID

        Returns:
            Referral or None if the customer was not referred
        """
        return await self.get_by(customer_id=customer_id)

    async def get_status_counts(
        self, ambassador_id: int | None = None
    ) -> dict[str, int]:
        """
        Get referral counts per status in a single query.

        Args:
            ambassador_id: Limit to one ambassador (None for the program)

        Returns:
            Dict mapping status to count, both statuses always present
        """
        stmt = select(
            Referral.status, func.count(Referral.id).label("count")
        ).group_by(Referral.status)

        if ambassador_id is not None:
            stmt = stmt.where(Referral.ambassador_id == ambassador_id)

        result = await self.session.execute(stmt)

        counts = {ReferralStatus.ACTIVE: 0, ReferralStatus.INACTIVE: 0}
        for status, count in result.all():
            counts[status] = count
        return counts

    async def get_network(
        self, ambassador_id: int, page: int = 1, per_page: int = 20
    ) -> tuple[list[Referral], int]:
        """
        Get an ambassador's referred customers, newest first.

        Args:
            ambassador_id: Referring ambassador
            page: Page number (1-indexed)
            per_page: Items per page

        Returns:
            Tuple of (referrals, total_count)
        """
        return await self.find_paginated(
            page=page,
            per_page=per_page,
            ambassador_id=ambassador_id,
        )
