"""
Commission processor.

Turns POS events (referral signup, completed sale, void/refund) into tier
resolution, commission math and ledger writes.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from commission import (
    CommissionCalculator,
    CommissionError,
    Tier,
    TierCatalog,
    normalize_code,
    resolve_tier,
    round2,
)
from referral_engine.models.ambassador import Ambassador
from referral_engine.models.ledger_entry import LedgerEntryType
from referral_engine.models.referral import Referral, ReferralStatus
from referral_engine.repositories.ambassador_repository import (
    AmbassadorRepository,
)
from referral_engine.repositories.ledger_repository import LedgerRepository
from referral_engine.repositories.referral_repository import (
    ReferralRepository,
)
from referral_engine.services.ambassador.ledger_manager import (
    LedgerBalanceManager,
)
from referral_engine.services.ambassador.tier_catalog import (
    TierCatalogService,
)
from referral_engine.services.base_service import BaseService, transaction
from referral_engine.utils.datetime_utils import utc_now
from referral_engine.utils.exceptions import (
    InvalidNameError,
    NotFoundError,
    to_engine_error,
)
from referral_engine.utils.validation import to_non_negative_money


@dataclass(frozen=True)
class CommissionResult:
    """Outcome of a completed referred purchase."""

    ambassador_id: int
    transaction_id: int
    commission: Decimal
    tier_name: str
    commission_rate: Decimal
    ledger_entry_id: int
    tier_changed: bool
    new_tier_name: str


@dataclass(frozen=True)
class ReversalResult:
    """Outcome of a voided or refunded referred purchase."""

    ambassador_id: int
    transaction_id: int
    reversed_commission: Decimal
    reversed_subtotal: Decimal
    shortfall: Decimal
    ledger_entry_id: int
    tier_changed: bool
    new_tier_name: str


class CommissionProcessor(BaseService):
    """
    Applies the commission side effects of POS events.

    The tier is resolved from the ambassador's lifetime counters as they
    stand before the event, and the commission is frozen on the ledger
    entry together with that tier's name and rate.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize commission processor.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.ambassador_repo = AmbassadorRepository(session)
        self.referral_repo = ReferralRepository(session)
        self.ledger_repo = LedgerRepository(session)
        self.ledger = LedgerBalanceManager(session)
        self.tiers = TierCatalogService(session)
        self.calculator = CommissionCalculator()

    async def _lock_ambassador(self, ambassador_id: int) -> Ambassador:
        ambassador = await self.ambassador_repo.get_for_update(ambassador_id)
        if ambassador is None:
            raise NotFoundError(f"Ambassador not found: {ambassador_id}")
        return ambassador

    @staticmethod
    def _resolve(ambassador: Ambassador, catalog: TierCatalog) -> Tier:
        return resolve_tier(
            ambassador.lifetime_referral_count,
            ambassador.lifetime_referred_sales,
            catalog,
        )

    @transaction
    async def on_referral_signup(
        self,
        ambassador_id: int,
        new_customer_id: int,
        referral_code: str | None = None,
    ) -> Referral:
        """
        Record a customer who signed up with an ambassador's code.

        Increments the lifetime referral count and awards the signup bonus
        of the ambassador's current tier. A customer who was already
        referred keeps the original link and nothing is counted again.

        Args:
            ambassador_id: Referring ambassador
            new_customer_id: Newly created customer
            referral_code: Code the customer typed, if any; must be the
                ambassador's own code

        Returns:
            The referral (new or existing)

        Raises:
            NotFoundError: Unknown ambassador
            InvalidNameError: Typed code belongs to someone else
        """
        ambassador = await self._lock_ambassador(ambassador_id)
        code = normalize_code(referral_code or "") or ambassador.referral_code
        if code != ambassador.referral_code:
            raise InvalidNameError(
                f"Referral code {code!r} does not belong to ambassador "
                f"{ambassador_id}"
            )

        existing = await self.referral_repo.get_by_customer(new_customer_id)
        if existing is not None:
            self.logger.info(
                "Customer already referred, signup not counted again",
                extra={
                    "customer_id": new_customer_id,
                    "ambassador_id": existing.ambassador_id,
                    "requested_ambassador_id": ambassador_id,
                },
            )
            return existing

        catalog = await self.tiers.load_catalog()
        tier = self._resolve(ambassador, catalog)

        referral = await self.referral_repo.create(
            ambassador_id=ambassador_id,
            customer_id=new_customer_id,
            referral_code=code,
            status=ReferralStatus.INACTIVE,
        )

        ambassador.lifetime_referral_count += 1
        ambassador.bonus_points += tier.signup_bonus_points
        await self.session.flush()

        self.logger.info(
            "Referral signup recorded",
            extra={
                "ambassador_id": ambassador_id,
                "customer_id": new_customer_id,
                "tier": tier.name,
                "bonus_points": tier.signup_bonus_points,
                "lifetime_referral_count": ambassador.lifetime_referral_count,
            },
        )
        return referral

    @transaction
    async def on_purchase_completed(
        self,
        ambassador_id: int,
        transaction_id: int,
        subtotal: Decimal,
        customer_id: int | None = None,
    ) -> CommissionResult:
        """
        Accrue commission for a completed referred purchase.

        The engine does not dedupe: callers must send each transaction once.

        Args:
            ambassador_id: Ambassador who referred the buyer
            transaction_id: POS transaction ID
            subtotal: Pre-tax, pre-loyalty-discount amount
            customer_id: Buyer; marks their referral active on first purchase

        Returns:
            CommissionResult

        Raises:
            InvalidAmountError: Negative subtotal
            NotFoundError: Unknown ambassador
        """
        subtotal = to_non_negative_money(subtotal, "subtotal")
        ambassador = await self._lock_ambassador(ambassador_id)
        catalog = await self.tiers.load_catalog()

        tier = self._resolve(ambassador, catalog)
        try:
            commission = self.calculator.compute_accrual(subtotal, tier)
        except CommissionError as e:
            raise to_engine_error(e) from e

        entry = await self.ledger.apply_accrual(
            ambassador_id,
            commission,
            related_transaction_id=transaction_id,
            subtotal=subtotal,
            tier_name=tier.name,
            commission_rate=tier.commission_rate,
            description=f"Commission on sale #{transaction_id}",
        )

        ambassador.lifetime_referred_sales = round2(
            ambassador.lifetime_referred_sales + subtotal
        )
        if customer_id is not None:
            await self._activate_referral(ambassador_id, customer_id)
        await self.session.flush()

        new_tier = self._resolve(ambassador, catalog)
        tier_changed = new_tier.name != tier.name
        if tier_changed:
            self.logger.info(
                "Ambassador tier changed",
                extra={
                    "ambassador_id": ambassador_id,
                    "from_tier": tier.name,
                    "to_tier": new_tier.name,
                },
            )

        return CommissionResult(
            ambassador_id=ambassador_id,
            transaction_id=transaction_id,
            commission=commission,
            tier_name=tier.name,
            commission_rate=tier.commission_rate,
            ledger_entry_id=entry.id,
            tier_changed=tier_changed,
            new_tier_name=new_tier.name,
        )

    async def _activate_referral(self, ambassador_id: int, customer_id: int) -> None:
        referral = await self.referral_repo.get_by_customer(customer_id)
        if referral is None or referral.ambassador_id != ambassador_id:
            return
        if referral.status == ReferralStatus.ACTIVE:
            return

        referral.status = ReferralStatus.ACTIVE
        referral.first_purchase_at = utc_now()
        self.logger.info(
            "Referral activated by first purchase",
            extra={"ambassador_id": ambassador_id, "customer_id": customer_id},
        )

    @transaction
    async def on_purchase_voided_or_refunded(
        self,
        ambassador_id: int,
        original_transaction_id: int,
        original_subtotal: Decimal,
        original_commission: Decimal,
        refund_amount: Decimal,
    ) -> ReversalResult:
        """
        Reverse commission for a voided or (partially) refunded sale.

        The reversal is proportional to the refunded share of the sale and
        is further capped by what is still unreversed for that transaction
        on the ledger, so repeated refunds never take back more than was
        accrued. Lifetime sales drop only by the part of the sale subtotal
        still counted for that transaction; a refund of a sale never
        accrued for this ambassador leaves them unchanged. A void is a
        refund of the whole subtotal.

        Args:
            ambassador_id: Ambassador credited for the sale
            original_transaction_id: POS transaction being voided/refunded
            original_subtotal: Subtotal of the original sale
            original_commission: Commission accrued on the original sale
            refund_amount: Amount refunded

        Returns:
            ReversalResult

        Raises:
            InvalidAmountError: Negative input
            NotFoundError: Unknown ambassador
        """
        original_subtotal = to_non_negative_money(
            original_subtotal, "original_subtotal"
        )
        original_commission = to_non_negative_money(
            original_commission, "original_commission"
        )
        refund_amount = to_non_negative_money(refund_amount, "refund_amount")

        ambassador = await self._lock_ambassador(ambassador_id)
        catalog = await self.tiers.load_catalog()
        tier_before = self._resolve(ambassador, catalog)

        try:
            reversal = self.calculator.compute_reversal(
                original_subtotal, original_commission, refund_amount
            )
            refunded = self.calculator.reversed_subtotal(
                original_subtotal, refund_amount
            )
        except CommissionError as e:
            raise to_engine_error(e) from e

        accrued, already_reversed = await self.ledger_repo.get_transaction_totals(
            ambassador_id, original_transaction_id
        )
        reversal = min(reversal, max(accrued - already_reversed, Decimal("0")))

        # Only subtotal still counted in lifetime sales can be taken back out
        counted, already_refunded = (
            await self.ledger_repo.get_transaction_subtotals(
                ambassador_id, original_transaction_id
            )
        )
        refunded = min(refunded, max(counted - already_refunded, Decimal("0")))

        accrual = await self.ledger_repo.find_all(
            limit=1,
            ambassador_id=ambassador_id,
            related_transaction_id=original_transaction_id,
            type=LedgerEntryType.ACCRUAL,
        )
        original_entry = accrual[0] if accrual else None

        entry = await self.ledger.apply_reversal(
            ambassador_id,
            reversal,
            related_transaction_id=original_transaction_id,
            subtotal=refunded,
            tier_name=original_entry.tier_name if original_entry else None,
            commission_rate=(
                original_entry.commission_rate if original_entry else None
            ),
            description=f"Reversal for sale #{original_transaction_id}",
        )

        ambassador.lifetime_referred_sales = max(
            round2(ambassador.lifetime_referred_sales - refunded), Decimal("0.00")
        )
        await self.session.flush()

        new_tier = self._resolve(ambassador, catalog)
        tier_changed = new_tier.name != tier_before.name
        if tier_changed:
            self.logger.info(
                "Ambassador tier changed",
                extra={
                    "ambassador_id": ambassador_id,
                    "from_tier": tier_before.name,
                    "to_tier": new_tier.name,
                },
            )

        return ReversalResult(
            ambassador_id=ambassador_id,
            transaction_id=original_transaction_id,
            reversed_commission=reversal,
            reversed_subtotal=refunded,
            shortfall=entry.shortfall,
            ledger_entry_id=entry.id,
            tier_changed=tier_changed,
            new_tier_name=new_tier.name,
        )
