"""
Base repository.

Generic data access shared by the ambassador program repositories.
Repositories never commit: the calling service owns the transaction.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_engine.models.base import Base

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository over one mapped model.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class TierRepository(BaseRepository[AmbassadorTier]):
            def __init__(self, session: AsyncSession):
                super().__init__(AmbassadorTier, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    def _select(self, **filters: Any) -> Select[tuple[ModelType]]:
        return select(self.model).filter_by(**filters)

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get row by primary key (identity map first)."""
        return await self.session.get(self.model, id)

    async def get_for_update(self, id: int) -> ModelType | None:
        """
        Get row by primary key and lock it until the transaction ends.

        Balance and payout checks run against the locked row, so two
        concurrent operations on one ambassador are serialized.
        ``populate_existing`` reloads a copy already held in the identity
        map, so the check never sees stale values.

        Args:
            id: Primary key

        Returns:
            Locked row or None if not found
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get the single row matching unique-column filters.

        Args:
            **filters: Column filters (e.g. ``user_id=5``)

        Returns:
            Matching row or None
        """
        result = await self.session.execute(self._select(**filters))
        return result.scalar_one_or_none()

    async def find_all(
        self,
        limit: int | None = None,
        offset: int | None = None,
        **filters: Any,
    ) -> list[ModelType]:
        """
        Find rows matching filters, oldest id first.

        Args:
            limit: Max number of results
            offset: Number of results to skip
            **filters: Column filters

        Returns:
            Matching rows
        """
        stmt = self._select(**filters).order_by(self.model.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data: Any) -> ModelType:
        """
        Insert a row and flush it so its id is assigned.

        Args:
            **data: Column values

        Returns:
            Created row
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def count(self, **filters: Any) -> int:
        """Count rows matching filters."""
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, **filters: Any) -> bool:
        """Check whether any row matches filters."""
        return await self.count(**filters) > 0

    async def find_paginated(
        self,
        page: int = 1,
        per_page: int = 20,
        order_by: Any = None,
        **filters: Any,
    ) -> tuple[list[ModelType], int]:
        """
        Find one page of rows plus the total match count.

        Args:
            page: Page number (1-indexed)
            per_page: Items per page
            order_by: Ordering clause (defaults to newest id first)
            **filters: Column filters

        Returns:
            Tuple of (items, total_count)
        """
        total = await self.count(**filters)

        if order_by is None:
            order_by = self.model.id.desc()

        stmt = (
            self._select(**filters)
            .order_by(order_by)
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
