"""
Tier repository.

Data access layer for AmbassadorTier model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.models.tier import AmbassadorTier
from referral_engine.repositories.base import BaseRepository


class TierRepository(BaseRepository[AmbassadorTier]):
    """Tier repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize tier repository."""
        super().__init__(AmbassadorTier, session)

    async def get_by_name(self, name: str) -> AmbassadorTier | None:
        """
        Get tier by name.

        Args:
            name: Tier name

        Returns:
            Tier or None if not found
        """
        return await self.get_by(name=name)

    async def get_ordered_tiers(
        self, active_only: bool = False
    ) -> list[AmbassadorTier]:
        """
        Get tiers ordered by rank.

        Args:
            active_only: If True, return only active tiers

        Returns:
            List of tiers ordered by rank
        """
        stmt = select(AmbassadorTier).order_by(AmbassadorTier.rank)

        if active_only:
            stmt = stmt.where(AmbassadorTier.is_active == True)  # noqa: E712

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
