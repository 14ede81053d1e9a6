"""
Ambassador repository.

Data access layer for Ambassador model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.models.ambassador import Ambassador
from referral_engine.repositories.base import BaseRepository


class AmbassadorRepository(BaseRepository[Ambassador]):
    """Ambassador repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ambassador repository."""
        super().__init__(Ambassador, session)

    async def get_by_user_id(self, user_id: int) -> Ambassador | None:
        """
        Get ambassador by POS user ID.

        Args:
            user_id: POS user ID

        Returns:
            Ambassador or None if not found
        """
        return await self.get_by(user_id=user_id)

    async def get_by_code(
        self, referral_code: str, active_only: bool = True
    ) -> Ambassador | None:
        """
        Get ambassador by referral code.

        Args:
            referral_code: Normalized (upper-case) referral code
            active_only: Ignore deactivated ambassadors

        Returns:
            Ambassador or None if not found
        """
        if active_only:
            return await self.get_by(
                referral_code=referral_code, is_active=True
            )
        return await self.get_by(referral_code=referral_code)

    async def get_top_earners(self, limit: int = 5) -> list[Ambassador]:
        """
        Get ambassadors with the highest lifetime earnings.

        Args:
            limit: Max number of results

        Returns:
            Ambassadors ordered by total earnings, then referrals
        """
        stmt = (
            select(Ambassador)
            .order_by(
                Ambassador.total_earnings.desc(),
                Ambassador.lifetime_referral_count.desc(),
                Ambassador.id,
            )
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_tier_counters(self) -> list[tuple[int, int]]:
        """
        Get lifetime counters of every active ambassador.

        Returns:
            List of (lifetime_referral_count, lifetime_referred_sales) rows
        """
        stmt = select(
            Ambassador.lifetime_referral_count,
            Ambassador.lifetime_referred_sales,
        ).where(Ambassador.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return [tuple(row) for row in result.all()]
