"""Integration tests for ambassador enrollment and code lookup."""

import pytest

from referral_engine.services import AmbassadorService
from referral_engine.utils.exceptions import InvalidNameError, NotFoundError


class TestEnroll:
    """Enrollment issues a code derived from names and id."""

    @pytest.mark.asyncio
    async def test_codes_follow_names_and_id(self, service: AmbassadorService):
        first = await service.enroll(501, "Admin", "User")
        second = await service.enroll(502, "bob", "brown")
        third = await service.enroll(503, "Cher", "")

        assert first.referral_code == "ADUS0001"
        assert second.referral_code == "BOBR0002"
        assert third.referral_code == "CH0003"
        assert first.is_active is True
        assert first.available_balance == 0

    @pytest.mark.asyncio
    async def test_enrolling_twice_returns_existing(self, service: AmbassadorService):
        first = await service.enroll(501, "Admin", "User")

        again = await service.enroll(501, "Someone", "Else")

        assert again.id == first.id
        assert again.referral_code == "ADUS0001"
        assert again.first_name == "Admin"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("first_name, last_name", [("", ""), ("  ", " "), (None, None)])
    async def test_names_required(self, service: AmbassadorService, first_name, last_name):
        with pytest.raises(InvalidNameError):
            await service.enroll(501, first_name, last_name)


class TestFindByCode:
    """Typed codes resolve to active ambassadors."""

    @pytest.mark.asyncio
    async def test_lookup_ignores_case_and_whitespace(self, service: AmbassadorService):
        ambassador_id = (await service.enroll(501, "Admin", "User")).id

        found = await service.find_by_code("  adus0001 ")

        assert found.id == ambassador_id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["", "   ", "NOPE0001"])
    async def test_unknown_code(self, service: AmbassadorService, code):
        await service.enroll(501, "Admin", "User")

        with pytest.raises(NotFoundError):
            await service.find_by_code(code)

    @pytest.mark.asyncio
    async def test_deactivated_ambassador_not_found(self, service: AmbassadorService):
        ambassador_id = (await service.enroll(501, "Admin", "User")).id

        await service.set_ambassador_active(ambassador_id, False)
        with pytest.raises(NotFoundError):
            await service.find_by_code("ADUS0001")

        await service.set_ambassador_active(ambassador_id, True)
        assert (await service.find_by_code("ADUS0001")).id == ambassador_id

    @pytest.mark.asyncio
    async def test_set_active_unknown_ambassador(self, service: AmbassadorService):
        with pytest.raises(NotFoundError):
            await service.set_ambassador_active(404, False)
