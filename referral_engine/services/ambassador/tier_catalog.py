"""
Tier catalog service.

Persisted, admin-editable tier ladder. Every edit is checked against the
whole ladder before it is written.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from commission import DEFAULT_TIERS, CommissionError, Tier, TierCatalog
from referral_engine.models.tier import AmbassadorTier
from referral_engine.repositories.tier_repository import TierRepository
from referral_engine.services.base_service import BaseService, transaction
from referral_engine.utils.exceptions import (
    InvalidAmountError,
    InvalidNameError,
    InvalidTierCatalog,
    NotFoundError,
    to_engine_error,
)


EDITABLE_FIELDS = frozenset(
    {
        "name",
        "rank",
        "min_referrals",
        "min_sales",
        "commission_rate",
        "signup_bonus_points",
        "is_active",
    }
)

NAME_MAX_LENGTH = 50


def _non_negative_int(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidAmountError(f"{field} must be a non-negative integer: {value!r}")
    return value


def _decimal(field: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmountError(f"{field} must be a number: {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"{field} must be a number: {value!r}") from None
    if not result.is_finite():
        raise InvalidAmountError(f"{field} must be finite: {value!r}")
    return result


def validate_tier_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """
    Validate and normalize admin tier edits.

    Args:
        changes: Field name to new value

    Returns:
        Normalized changes

    Raises:
        InvalidTierCatalog: Unknown field
        InvalidAmountError: Out-of-range number
        InvalidNameError: Empty or too long name
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise InvalidTierCatalog(
            f"Unsupported tier fields: {', '.join(sorted(unknown))}"
        )

    normalized: dict[str, Any] = {}
    for field, value in changes.items():
        if field == "name":
            name = (value or "").strip() if isinstance(value, str) else ""
            if not name or len(name) > NAME_MAX_LENGTH:
                raise InvalidNameError(f"Invalid tier name: {value!r}")
            normalized[field] = name
        elif field == "is_active":
            if not isinstance(value, bool):
                raise InvalidAmountError(f"is_active must be a boolean: {value!r}")
            normalized[field] = value
        elif field == "commission_rate":
            rate = _decimal(field, value)
            if rate < 0 or rate > 1:
                raise InvalidAmountError(
                    f"commission_rate must be between 0 and 1: {value!r}"
                )
            normalized[field] = rate
        elif field == "min_sales":
            sales = _decimal(field, value)
            if sales < 0:
                raise InvalidAmountError(f"min_sales cannot be negative: {value!r}")
            normalized[field] = sales
        else:
            normalized[field] = _non_negative_int(field, value)
    return normalized


class TierCatalogService(BaseService):
    """Reads and edits the persisted tier ladder."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize tier catalog service.

        Args:
            session: Async database session
        """
        super().__init__(session)
        self.tier_repo = TierRepository(session)

    async def list_tiers(self, active_only: bool = False) -> list[AmbassadorTier]:
        """
        List tiers ascending by rank.

        Args:
            active_only: If True, return only active tiers

        Returns:
            Persisted tiers
        """
        return await self.tier_repo.get_ordered_tiers(active_only=active_only)

    async def list_active_tiers(self) -> list[AmbassadorTier]:
        """List active tiers ascending by rank."""
        return await self.list_tiers(active_only=True)

    async def get_tier(self, name: str) -> AmbassadorTier:
        """
        Get tier by name.

        Raises:
            NotFoundError: If no tier has this name
        """
        tier = await self.tier_repo.get_by_name(name)
        if tier is None:
            raise NotFoundError(f"Tier not found: {name}")
        return tier

    async def load_catalog(self) -> TierCatalog:
        """
        Build a validated catalog from the tier table.

        Returns:
            TierCatalog with active and inactive tiers

        Raises:
            InvalidTierCatalog: If the stored ladder is empty or broken
        """
        tiers = await self.list_tiers()
        try:
            return TierCatalog(tier.to_tier() for tier in tiers)
        except CommissionError as e:
            raise to_engine_error(e) from e

    @transaction
    async def update_tier(self, tier_id: int, **changes: Any) -> AmbassadorTier:
        """
        Apply an admin edit to one tier.

        The edited ladder is validated as a whole before anything is
        written. Commission already on the ledger keeps the rate it was
        accrued with.

        Args:
            tier_id: Tier ID
            **changes: New field values (name, rank, min_referrals,
                min_sales, commission_rate, signup_bonus_points, is_active)

        Returns:
            Updated tier

        Raises:
            NotFoundError: Unknown tier id
            InvalidAmountError: Invalid value
            InvalidNameError: Invalid name
            InvalidTierCatalog: Edit would break the ladder
        """
        normalized = validate_tier_changes(changes)

        tier = await self.tier_repo.get_for_update(tier_id)
        if tier is None:
            raise NotFoundError(f"Tier not found: {tier_id}")

        candidates: list[Tier] = []
        for existing in await self.list_tiers():
            current = existing.to_tier()
            if existing.id == tier_id:
                current = Tier(**{**current.model_dump(), **normalized})
            candidates.append(current)

        try:
            TierCatalog(candidates)
        except CommissionError as e:
            raise to_engine_error(e) from e

        before = {field: str(getattr(tier, field)) for field in normalized}
        for field, value in normalized.items():
            setattr(tier, field, value)
        await self.session.flush()

        self.logger.info(
            "Tier updated",
            extra={
                "tier_id": tier_id,
                "tier_name": tier.name,
                "before": before,
                "after": {field: str(value) for field, value in normalized.items()},
            },
        )
        return tier

    @transaction
    async def seed_default_tiers(self) -> int:
        """
        Insert the default ladder, skipping tiers that already exist.

        Returns:
            Number of tiers created
        """
        created = 0
        for tier in DEFAULT_TIERS:
            if await self.tier_repo.get_by_name(tier.name) is not None:
                continue
            await self.tier_repo.create(**tier.model_dump())
            created += 1

        if created:
            self.logger.info(
                "Default tiers seeded", extra={"created": created}
            )
        return created
