"""
Ledger repository.

Data access layer for LedgerEntry model. Entries are only ever inserted;
there is deliberately no update path here.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission import round2
from referral_engine.models.ambassador import Ambassador
from referral_engine.models.ledger_entry import LedgerEntry, LedgerEntryType
from referral_engine.repositories.base import BaseRepository


class LedgerRepository(BaseRepository[LedgerEntry]):
    """Ledger repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ledger repository."""
        super().__init__(LedgerEntry, session)

    async def get_totals_by_type(self, ambassador_id: int) -> dict[str, Decimal]:
        """
        Sum an ambassador's entries per type in a single query.

        Args:
            ambassador_id: Ambassador ID

        Returns:
            Dict with signed ``amount`` sums per type plus the summed
            ``shortfall`` of reversals
        """
        stmt = (
            select(
                LedgerEntry.type,
                func.coalesce(func.sum(LedgerEntry.amount), 0),
                func.coalesce(func.sum(LedgerEntry.shortfall), 0),
            )
            .where(LedgerEntry.ambassador_id == ambassador_id)
            .group_by(LedgerEntry.type)
        )
        result = await self.session.execute(stmt)

        totals = {
            LedgerEntryType.ACCRUAL: Decimal("0"),
            LedgerEntryType.REVERSAL: Decimal("0"),
            LedgerEntryType.REDEMPTION: Decimal("0"),
            "shortfall": Decimal("0"),
        }
        for entry_type, amount, shortfall in result.all():
            totals[entry_type] = Decimal(amount)
            totals["shortfall"] += Decimal(shortfall)
        return totals

    async def get_transaction_totals(
        self, ambassador_id: int, transaction_id: int
    ) -> tuple[Decimal, Decimal]:
        """
        Get accrued and already reversed commission for one sale.

        Args:
            ambassador_id: Ambassador ID
            transaction_id: POS transaction ID

        Returns:
            Tuple of (accrued, reversed) magnitudes
        """
        stmt = (
            select(
                LedgerEntry.type,
                func.coalesce(func.sum(LedgerEntry.amount), 0),
            )
            .where(
                LedgerEntry.ambassador_id == ambassador_id,
                LedgerEntry.related_transaction_id == transaction_id,
                LedgerEntry.type.in_(
                    [LedgerEntryType.ACCRUAL, LedgerEntryType.REVERSAL]
                ),
            )
            .group_by(LedgerEntry.type)
        )
        result = await self.session.execute(stmt)

        accrued = Decimal("0")
        reversed_ = Decimal("0")
        for entry_type, amount in result.all():
            if entry_type == LedgerEntryType.ACCRUAL:
                accrued = round2(Decimal(str(amount)))
            else:
                reversed_ = -round2(Decimal(str(amount)))
        return accrued, reversed_

    async def get_transaction_subtotals(
        self, ambassador_id: int, transaction_id: int
    ) -> tuple[Decimal, Decimal]:
        """
        Get counted and already refunded sale subtotal for one sale.

        The accrual entry carries the subtotal added to lifetime sales;
        each reversal entry carries the portion taken back out.

        Returns:
            Tuple of (counted, refunded) subtotals
        """
        stmt = (
            select(
                LedgerEntry.type,
                func.coalesce(func.sum(LedgerEntry.subtotal), 0),
            )
            .where(
                LedgerEntry.ambassador_id == ambassador_id,
                LedgerEntry.related_transaction_id == transaction_id,
                LedgerEntry.type.in_(
                    [LedgerEntryType.ACCRUAL, LedgerEntryType.REVERSAL]
                ),
            )
            .group_by(LedgerEntry.type)
        )
        result = await self.session.execute(stmt)

        counted = Decimal("0")
        refunded = Decimal("0")
        for entry_type, subtotal in result.all():
            if entry_type == LedgerEntryType.ACCRUAL:
                counted = round2(Decimal(str(subtotal)))
            else:
                refunded = round2(Decimal(str(subtotal)))
        return counted, refunded

    async def get_history(
        self,
        ambassador_id: int,
        page: int = 1,
        per_page: int = 20,
        entry_type: str | None = None,
    ) -> tuple[list[LedgerEntry], int]:
        """
        Get an ambassador's entries, newest first.

        Args:
            ambassador_id: Ambassador ID
            page: Page number (1-indexed)
            per_page: Items per page
            entry_type: Optional type filter

        Returns:
            Tuple of (entries, total_count)
        """
        filters: dict[str, object] = {"ambassador_id": ambassador_id}
        if entry_type:
            filters["type"] = entry_type
        return await self.find_paginated(page=page, per_page=per_page, **filters)

    async def get_program_commission_total(self) -> Decimal:
        """
        Net commission earned across the whole program.

        Returns:
            Sum of accruals and reversals
        """
        stmt = select(func.coalesce(func.sum(LedgerEntry.amount), 0)).where(
            LedgerEntry.type.in_(
                [LedgerEntryType.ACCRUAL, LedgerEntryType.REVERSAL]
            )
        )
        result = await self.session.execute(stmt)
        return Decimal(result.scalar() or 0)

    async def get_recent_commissions(
        self, limit: int = 10
    ) -> list[tuple[LedgerEntry, Ambassador]]:
        """
        Get the latest accruals together with their ambassadors.

        Args:
            limit: Max number of results

        Returns:
            List of (entry, ambassador) pairs, newest first
        """
        stmt = (
            select(LedgerEntry, Ambassador)
            .join(Ambassador, Ambassador.id == LedgerEntry.ambassador_id)
            .where(LedgerEntry.type == LedgerEntryType.ACCRUAL)
            .order_by(LedgerEntry.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(entry, ambassador) for entry, ambassador in result.all()]
