"""
Ledger balance manager.

Appends ledger entries and keeps the ambassador's balance snapshot in step
with them. Every write locks the ambassador row first and performs its
read-check-write inside that lock.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from commission import round2
from referral_engine.models.ambassador import Ambassador
from referral_engine.models.ledger_entry import LedgerEntry, LedgerEntryType
from referral_engine.repositories.ambassador_repository import (
    AmbassadorRepository,
)
from referral_engine.repositories.ledger_repository import LedgerRepository
from referral_engine.services.base_service import BaseService, transaction
from referral_engine.utils.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    NotFoundError,
)
from referral_engine.utils.validation import (
    normalize_pagination,
    to_money,
    to_non_negative_money,
)


@dataclass(frozen=True)
class BalanceSnapshot:
    """Current balance figures of one ambassador."""

    ambassador_id: int
    total_earnings: Decimal
    available_balance: Decimal


@dataclass(frozen=True)
class ReconciliationReport:
    """Ledger totals compared with the stored balance snapshot."""

    ambassador_id: int
    ledger_total_earnings: Decimal
    ledger_available_balance: Decimal
    snapshot_total_earnings: Decimal
    snapshot_available_balance: Decimal
    total_shortfall: Decimal

    @property
    def earnings_drift(self) -> Decimal:
        return self.snapshot_total_earnings - self.ledger_total_earnings

    @property
    def balance_drift(self) -> Decimal:
        return self.snapshot_available_balance - self.ledger_available_balance

    @property
    def is_consistent(self) -> bool:
        return self.earnings_drift == 0 and self.balance_drift == 0


class LedgerBalanceManager(BaseService):
    """Applies accruals, reversals and redemptions to an ambassador."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize ledger balance manager.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.ambassador_repo = AmbassadorRepository(session)
        self.ledger_repo = LedgerRepository(session)

    async def _lock_ambassador(self, ambassador_id: int) -> Ambassador:
        ambassador = await self.ambassador_repo.get_for_update(ambassador_id)
        if ambassador is None:
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")
        return ambassador

    @transaction
    async def apply_accrual(
        self,
        ambassador_id: int,
        amount: Decimal,
        related_transaction_id: int | None = None,
        subtotal: Decimal | None = None,
        tier_name: str | None = None,
        commission_rate: Decimal | None = None,
        description: str | None = None,
    ) -> LedgerEntry:
        """
        Credit commission to an ambassador.

        Zero amounts are recorded too, so every referred sale leaves an
        audit entry.

        Args:
            ambassador_id: Ambassador ID
            amount: Commission (>= 0)
            related_transaction_id: POS sale the commission comes from
            subtotal: Sale subtotal the commission was computed on
            tier_name: Tier in effect for the sale
            commission_rate: Rate in effect for the sale
            description: Optional note

        Returns:
            Created accrual entry

        Raises:
            InvalidAmountError: Negative amount
            NotFoundError: Unknown ambassador
        """
        amount = to_non_negative_money(amount)
        ambassador = await self._lock_ambassador(ambassador_id)

        entry = await self.ledger_repo.create(
            ambassador_id=ambassador_id,
            type=LedgerEntryType.ACCRUAL,
            amount=amount,
            related_transaction_id=related_transaction_id,
            subtotal=subtotal,
            tier_name=tier_name,
            commission_rate=commission_rate,
            description=description,
        )

        ambassador.total_earnings = round2(ambassador.total_earnings + amount)
        ambassador.available_balance = round2(
            ambassador.available_balance + amount
        )
        await self.session.flush()

        self.logger.info(
            "Commission accrued",
            extra={
                "ambassador_id": ambassador_id,
                "ledger_entry_id": entry.id,
                "transaction_id": related_transaction_id,
                "amount": str(amount),
                "tier": tier_name,
                "available_balance": str(ambassador.available_balance),
            },
        )
        return entry

    @transaction
    async def apply_reversal(
        self,
        ambassador_id: int,
        amount: Decimal,
        related_transaction_id: int | None = None,
        subtotal: Decimal | None = None,
        tier_name: str | None = None,
        commission_rate: Decimal | None = None,
        description: str | None = None,
    ) -> LedgerEntry:
        """
        Take back commission after a void or refund.

        ``total_earnings`` drops by the full amount. ``available_balance``
        drops by as much as it holds; the rest is recorded as the entry's
        shortfall and reported for reconciliation instead of failing.

        Args:
            ambassador_id: Ambassador ID
            amount: Reversal magnitude (>= 0)
            related_transaction_id: Original POS sale
            subtotal: Refunded portion of the sale
            tier_name: Tier the original commission was accrued at
            commission_rate: Rate the original commission was accrued at
            description: Optional note

        Returns:
            Created reversal entry

        Raises:
            InvalidAmountError: Negative amount
            NotFoundError: Unknown ambassador
        """
        amount = to_non_negative_money(amount)
        ambassador = await self._lock_ambassador(ambassador_id)

        deducted = min(amount, ambassador.available_balance)
        shortfall = amount - deducted

        entry = await self.ledger_repo.create(
            ambassador_id=ambassador_id,
            type=LedgerEntryType.REVERSAL,
            amount=-amount,
            related_transaction_id=related_transaction_id,
            subtotal=subtotal,
            tier_name=tier_name,
            commission_rate=commission_rate,
            shortfall=shortfall,
            description=description,
        )

        ambassador.total_earnings = round2(ambassador.total_earnings - amount)
        ambassador.available_balance = round2(
            ambassador.available_balance - deducted
        )
        await self.session.flush()

        self.logger.info(
            "Commission reversed",
            extra={
                "ambassador_id": ambassador_id,
                "ledger_entry_id": entry.id,
                "transaction_id": related_transaction_id,
                "amount": str(amount),
                "available_balance": str(ambassador.available_balance),
            },
        )

        if shortfall > 0:
            self.logger.bind(reconciliation=True).warning(
                "Reversal exceeds available balance, clamped at zero",
                extra={
                    "ambassador_id": ambassador_id,
                    "ledger_entry_id": entry.id,
                    "transaction_id": related_transaction_id,
                    "reversal": str(amount),
                    "shortfall": str(shortfall),
                },
            )
        return entry

    @transaction
    async def apply_redemption(
        self,
        ambassador_id: int,
        amount: Decimal,
        payout_request_id: int | None = None,
        description: str | None = None,
    ) -> LedgerEntry:
        """
        Pay out part of the available balance.

        Args:
            ambassador_id: Ambassador ID
            amount: Amount to redeem (> 0)
            payout_request_id: Payout request being settled
            description: Optional note

        Returns:
            Created redemption entry

        Raises:
            InvalidAmountError: Amount not positive
            NotFoundError: Unknown ambassador
            InsufficientBalanceError: Amount above available balance
        """
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidAmountError(f"Redemption amount must be positive: {amount}")

        ambassador = await self._lock_ambassador(ambassador_id)

        if amount > ambassador.available_balance:
            raise InsufficientBalanceError(
                f"Insufficient balance: requested {amount}, "
                f"available {ambassador.available_balance}"
            )

        entry = await self.ledger_repo.create(
            ambassador_id=ambassador_id,
            type=LedgerEntryType.REDEMPTION,
            amount=-amount,
            payout_request_id=payout_request_id,
            description=description,
        )

        balance_before = ambassador.available_balance
        ambassador.available_balance = round2(balance_before - amount)
        await self.session.flush()

        self.logger.info(
            "Balance redeemed",
            extra={
                "ambassador_id": ambassador_id,
                "ledger_entry_id": entry.id,
                "payout_request_id": payout_request_id,
                "amount": str(amount),
                "balance_before": str(balance_before),
                "balance_after": str(ambassador.available_balance),
            },
        )
        return entry

    async def get_balance(self, ambassador_id: int) -> BalanceSnapshot:
        """
        Get the stored balance snapshot.

        Raises:
            NotFoundError: Unknown ambassador
        """
        ambassador = await self.ambassador_repo.get_by_id(ambassador_id)
        if ambassador is None:
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")
        return BalanceSnapshot(
            ambassador_id=ambassador_id,
            total_earnings=ambassador.total_earnings,
            available_balance=ambassador.available_balance,
        )

    async def list_entries(
        self,
        ambassador_id: int,
        page: int = 1,
        per_page: int = 20,
        entry_type: str | None = None,
    ) -> tuple[list[LedgerEntry], int]:
        """
        Get an ambassador's ledger history, newest first.

        Returns:
            Tuple of (entries, total_count)

        Raises:
            NotFoundError: Unknown ambassador
        """
        if not await self.ambassador_repo.exists(id=ambassador_id):
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")
        page, per_page = normalize_pagination(page, per_page)
        return await self.ledger_repo.get_history(
            ambassador_id, page=page, per_page=per_page, entry_type=entry_type
        )

    async def reconcile(self, ambassador_id: int) -> ReconciliationReport:
        """
        Recompute balances from the ledger and compare with the snapshot.

        Returns:
            Report with both sets of figures and their drift

        Raises:
            NotFoundError: Unknown ambassador
        """
        snapshot = await self.get_balance(ambassador_id)
        totals = await self.ledger_repo.get_totals_by_type(ambassador_id)

        earned = round2(
            totals[LedgerEntryType.ACCRUAL] + totals[LedgerEntryType.REVERSAL]
        )
        available = round2(
            earned + totals[LedgerEntryType.REDEMPTION] + totals["shortfall"]
        )

        report = ReconciliationReport(
            ambassador_id=ambassador_id,
            ledger_total_earnings=earned,
            ledger_available_balance=available,
            snapshot_total_earnings=snapshot.total_earnings,
            snapshot_available_balance=snapshot.available_balance,
            total_shortfall=round2(totals["shortfall"]),
        )

        if not report.is_consistent:
            self.logger.bind(reconciliation=True).warning(
                "Ledger and balance snapshot disagree",
                extra={
                    "ambassador_id": ambassador_id,
                    "earnings_drift": str(report.earnings_drift),
                    "balance_drift": str(report.balance_drift),
                },
            )
        return report
