"""Integration tests for the ambassador dashboard and program analytics."""

from decimal import Decimal

import pytest

from referral_engine.models import LedgerEntryType, ReferralStatus
from referral_engine.services import AmbassadorService
from referral_engine.utils.exceptions import NotFoundError


class TestDashboard:
    """Ambassador-facing dashboard."""

    @pytest.mark.asyncio
    async def test_new_ambassador_dashboard(self, service: AmbassadorService, make_ambassador):
        ambassador_id = (await make_ambassador()).id

        dashboard = await service.get_dashboard(ambassador_id)

        assert dashboard["name"] == "Admin User"
        assert dashboard["referral_code"] == "ADUS0001"
        assert dashboard["referral_link"] == "https://candiez.shop/signup?ref=ADUS0001"
        assert dashboard["current_tier"]["name"] == "Member"
        assert dashboard["next_tier"]["name"] == "Promoter"
        assert dashboard["tier_progress"]["referrals_needed"] == 5
        assert dashboard["tier_progress"]["sales_needed"] == Decimal("500")
        assert dashboard["tier_progress"]["progress_percent"] == Decimal("0")
        assert dashboard["stats"] == {
            "total_referrals": 0,
            "active_referrals": 0,
            "total_earnings": Decimal("0"),
            "available_balance": Decimal("0"),
        }
        assert dashboard["bonus_points"] == 0

    @pytest.mark.asyncio
    async def test_dashboard_tracks_activity(self, service: AmbassadorService, make_ambassador):
        ambassador_id = (await make_ambassador()).id
        await service.on_referral_signup(ambassador_id, 11)
        await service.on_referral_signup(ambassador_id, 12)
        await service.on_purchase_completed(ambassador_id, 1, Decimal("100.00"), customer_id=11)

        dashboard = await service.get_dashboard(ambassador_id)

        assert dashboard["tier_progress"]["progress_percent"] == Decimal("30.00")
        assert dashboard["tier_progress"]["referrals_needed"] == 3
        assert dashboard["tier_progress"]["sales_needed"] == Decimal("400.00")
        assert dashboard["stats"]["total_referrals"] == 2
        assert dashboard["stats"]["active_referrals"] == 1
        assert dashboard["stats"]["total_earnings"] == Decimal("5.00")
        assert dashboard["bonus_points"] == 100

    @pytest.mark.asyncio
    async def test_top_tier_has_no_next_tier(self, service: AmbassadorService, make_ambassador):
        ambassador_id = (await make_ambassador()).id
        for customer_id in range(1, 51):
            await service.on_referral_signup(ambassador_id, customer_id)
        await service.on_purchase_completed(ambassador_id, 1, Decimal("10000.00"))

        dashboard = await service.get_dashboard(ambassador_id)

        assert dashboard["current_tier"]["name"] == "Elite"
        assert dashboard["next_tier"] is None
        assert dashboard["tier_progress"]["progress_percent"] == Decimal("100")

    @pytest.mark.asyncio
    async def test_unknown_ambassador(self, service: AmbassadorService):
        with pytest.raises(NotFoundError):
            await service.get_dashboard(404)
        with pytest.raises(NotFoundError):
            await service.get_network(404)
        with pytest.raises(NotFoundError):
            await service.get_earnings(404)


class TestNetworkAndEarnings:
    """Paginated referral network and earnings history."""

    @pytest.mark.asyncio
    async def test_network_newest_first(self, service: AmbassadorService, make_ambassador):
        ambassador_id = (await make_ambassador()).id
        for customer_id in (21, 22, 23):
            await service.on_referral_signup(ambassador_id, customer_id)

        first_page = await service.get_network(ambassador_id, page=1, per_page=2)
        second_page = await service.get_network(ambassador_id, page=2, per_page=2)

        assert first_page["total"] == 3
        assert [item["customer_id"] for item in first_page["items"]] == [23, 22]
        assert [item["customer_id"] for item in second_page["items"]] == [21]
        assert first_page["items"][0]["status"] == ReferralStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_network_only_own_referrals(self, service: AmbassadorService, make_ambassador):
        ambassador_id = (await make_ambassador()).id
        other_id = (await make_ambassador("Bob", "Brown")).id
        await service.on_referral_signup(ambassador_id, 31)
        await service.on_referral_signup(other_id, 32)

        network = await service.get_network(ambassador_id)

        assert [item["customer_id"] for item in network["items"]] == [31]

    @pytest.mark.asyncio
    async def test_earnings_history(self, service: AmbassadorService, make_ambassador):
        ambassador_id = (await make_ambassador()).id
        await service.on_purchase_completed(ambassador_id, 1, Decimal("100.00"))
        await service.on_purchase_completed(ambassador_id, 2, Decimal("60.00"))
        await service.on_purchase_voided_or_refunded(
            ambassador_id, 2, Decimal("60.00"), Decimal("3.00"), Decimal("60.00")
        )

        earnings = await service.get_earnings(ambassador_id, per_page=2)

        assert earnings["total"] == 3
        assert earnings["per_page"] == 2
        assert [item["type"] for item in earnings["items"]] == [
            LedgerEntryType.REVERSAL,
            LedgerEntryType.ACCRUAL,
        ]
        assert earnings["items"][0]["amount"] == Decimal("-3.00")
        assert earnings["items"][0]["tier_name"] == "Member"
        assert earnings["total_earnings"] == Decimal("5.00")
        assert earnings["available_balance"] == Decimal("5.00")

    @pytest.mark.asyncio
    async def test_page_size_is_clamped(self, service: AmbassadorService, make_ambassador):
        ambassador_id = (await make_ambassador()).id

        earnings = await service.get_earnings(ambassador_id, page=0, per_page=1000)

        assert earnings["page"] == 1
        assert earnings["per_page"] == 100


class TestProgramAnalytics:
    """Admin program overview."""

    @pytest.mark.asyncio
    async def test_empty_program(self, service: AmbassadorService):
        analytics = await service.get_program_analytics()

        assert analytics["overview"] == {
            "total_ambassadors": 0,
            "total_referrals": 0,
            "active_referrals": 0,
            "total_commissions": Decimal("0"),
            "pending_payouts": Decimal("0"),
            "pending_payouts_count": 0,
        }
        assert analytics["top_performers"] == []
        assert analytics["recent_commissions"] == []
        assert [row["ambassadors"] for row in analytics["tier_distribution"]] == [0, 0, 0, 0]

    @pytest.mark.asyncio
    async def test_program_overview(self, service: AmbassadorService, make_ambassador):
        admin_id = (await make_ambassador()).id
        bob_id = (await make_ambassador("Bob", "Brown")).id
        await make_ambassador("Cara", "Cole")

        for customer_id in range(1, 6):
            await service.on_referral_signup(bob_id, customer_id)
        await service.on_purchase_completed(bob_id, 1, Decimal("600.00"), customer_id=1)
        await service.on_referral_signup(admin_id, 10)
        await service.on_purchase_completed(admin_id, 2, Decimal("100.00"), customer_id=10)
        await service.on_purchase_voided_or_refunded(
            admin_id, 2, Decimal("100.00"), Decimal("5.00"), Decimal("20.00")
        )
        await service.request_payout(bob_id, Decimal("10.00"))

        analytics = await service.get_program_analytics(top=2, recent=5)

        overview = analytics["overview"]
        assert overview["total_ambassadors"] == 3
        assert overview["total_referrals"] == 6
        assert overview["active_referrals"] == 2
        assert overview["total_commissions"] == Decimal("34.00")
        assert overview["pending_payouts"] == Decimal("10.00")
        assert overview["pending_payouts_count"] == 1

        top = analytics["top_performers"]
        assert [row["ambassador_id"] for row in top] == [bob_id, admin_id]
        assert top[0]["tier"] == "Promoter"
        assert top[0]["total_earnings"] == Decimal("30.00")

        distribution = {
            row["tier"]: row["ambassadors"] for row in analytics["tier_distribution"]
        }
        assert distribution == {"Member": 2, "Promoter": 1, "Ambassador": 0, "Elite": 0}

        recent = analytics["recent_commissions"]
        assert [row["transaction_id"] for row in recent] == [2, 1]
        assert recent[0]["ambassador_name"] == "Admin User"
        assert recent[1]["amount"] == Decimal("30.00")
