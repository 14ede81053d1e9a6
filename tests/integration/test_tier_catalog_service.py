"""Integration tests for the persisted tier catalog."""

from decimal import Decimal

import pytest

from referral_engine.services import AmbassadorService
from referral_engine.services.ambassador import TierCatalogService
from referral_engine.utils.exceptions import (
    InvalidAmountError,
    InvalidNameError,
    InvalidTierCatalog,
    NotFoundError,
)


async def tier_ids(service: AmbassadorService) -> dict[str, int]:
    return {tier.name: tier.id for tier in await service.list_tiers()}


class TestSeedAndList:
    """Default ladder seeding."""

    @pytest.mark.asyncio
    async def test_default_ladder_seeded(self, service: AmbassadorService):
        tiers = await service.list_tiers()

        assert [tier.name for tier in tiers] == ["Member", "Promoter", "Ambassador", "Elite"]
        assert [tier.commission_rate for tier in tiers] == [
            Decimal("0.05"),
            Decimal("0.075"),
            Decimal("0.10"),
            Decimal("0.15"),
        ]

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, service: AmbassadorService):
        created = await service.seed_default_tiers()

        assert created == 0
        assert len(await service.list_tiers()) == 4

    @pytest.mark.asyncio
    async def test_get_tier_by_name(self, session):
        catalog = TierCatalogService(session)

        tier = await catalog.get_tier("Elite")

        assert tier.min_referrals == 50
        with pytest.raises(NotFoundError):
            await catalog.get_tier("Platinum")


class TestUpdateTier:
    """Admin edits to the ladder."""

    @pytest.mark.asyncio
    async def test_update_rate_and_bonus(self, service: AmbassadorService):
        promoter_id = (await tier_ids(service))["Promoter"]

        updated = await service.update_tier(
            promoter_id, commission_rate="0.08", signup_bonus_points=80
        )

        assert updated.commission_rate == Decimal("0.08")
        assert updated.signup_bonus_points == 80

    @pytest.mark.asyncio
    async def test_new_rate_used_for_next_sale(
        self, service: AmbassadorService, make_ambassador
    ):
        ambassador_id = (await make_ambassador()).id
        member_id = (await tier_ids(service))["Member"]

        await service.update_tier(member_id, commission_rate=Decimal("0.04"))
        result = await service.on_purchase_completed(ambassador_id, 1, Decimal("100.00"))

        assert result.commission == Decimal("4.00")

    @pytest.mark.asyncio
    async def test_rename_tier(self, service: AmbassadorService):
        ids = await tier_ids(service)

        await service.update_tier(ids["Elite"], name="  Legend ")

        assert (await tier_ids(service))["Legend"] == ids["Elite"]

    @pytest.mark.asyncio
    async def test_deactivated_tier_skipped_in_resolution(
        self, service: AmbassadorService, make_ambassador
    ):
        ambassador_id = (await make_ambassador()).id
        for customer_id in range(1, 6):
            await service.on_referral_signup(ambassador_id, customer_id)
        await service.on_purchase_completed(ambassador_id, 1, Decimal("500.00"))
        promoter_id = (await tier_ids(service))["Promoter"]

        await service.update_tier(promoter_id, is_active=False)
        dashboard = await service.get_dashboard(ambassador_id)

        assert dashboard["current_tier"]["name"] == "Member"
        assert dashboard["next_tier"]["name"] == "Ambassador"
        assert [tier.name for tier in await service.list_tiers(active_only=True)] == [
            "Member",
            "Ambassador",
            "Elite",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "changes",
        [
            {"commission_rate": Decimal("1.5")},
            {"commission_rate": "-0.01"},
            {"commission_rate": "abc"},
            {"min_sales": Decimal("-1")},
            {"min_referrals": -1},
            {"min_referrals": 2.5},
            {"signup_bonus_points": True},
            {"is_active": "yes"},
        ],
    )
    async def test_invalid_values_rejected(self, service: AmbassadorService, changes):
        promoter_id = (await tier_ids(service))["Promoter"]

        with pytest.raises(InvalidAmountError):
            await service.update_tier(promoter_id, **changes)

        tiers = {tier.name: tier for tier in await service.list_tiers()}
        assert tiers["Promoter"].commission_rate == Decimal("0.075")
        assert tiers["Promoter"].min_referrals == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "x" * 51, None])
    async def test_invalid_name_rejected(self, service: AmbassadorService, name):
        member_id = (await tier_ids(service))["Member"]

        with pytest.raises(InvalidNameError):
            await service.update_tier(member_id, name=name)

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, service: AmbassadorService):
        member_id = (await tier_ids(service))["Member"]

        with pytest.raises(InvalidTierCatalog):
            await service.update_tier(member_id, color="gold")

    @pytest.mark.asyncio
    async def test_unknown_tier(self, service: AmbassadorService):
        with pytest.raises(NotFoundError):
            await service.update_tier(404, commission_rate=Decimal("0.05"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tier_name, changes",
        [
            ("Ambassador", {"min_sales": Decimal("100")}),
            ("Promoter", {"min_referrals": 0, "min_sales": Decimal("0")}),
            ("Elite", {"rank": 1}),
            ("Elite", {"name": "Member"}),
        ],
    )
    async def test_edit_breaking_ladder_rejected(
        self, service: AmbassadorService, tier_name, changes
    ):
        tier_id = (await tier_ids(service))[tier_name]

        with pytest.raises(InvalidTierCatalog):
            await service.update_tier(tier_id, **changes)

        assert list(await tier_ids(service)) == ["Member", "Promoter", "Ambassador", "Elite"]

    @pytest.mark.asyncio
    async def test_cannot_deactivate_every_tier(self, service: AmbassadorService):
        ids = await tier_ids(service)
        for name in ("Promoter", "Ambassador", "Elite"):
            await service.update_tier(ids[name], is_active=False)

        with pytest.raises(InvalidTierCatalog):
            await service.update_tier(ids["Member"], is_active=False)
