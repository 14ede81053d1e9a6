"""Tests for the engine exception hierarchy."""

import pytest

from commission import InvalidAmount, InvalidName, InvalidTierCatalog, TierNotFound
from referral_engine.utils import exceptions as errors


class TestExceptionHierarchy:
    """Engine errors map to HTTP statuses and to pure commission errors."""

    @pytest.mark.parametrize(
        "error_cls,error_code,http_status",
        [
            (errors.InvalidAmountError, "INVALID_AMOUNT", 400),
            (errors.InvalidTransitionError, "INVALID_TRANSITION", 400),
            (errors.InvalidNameError, "INVALID_NAME", 400),
            (errors.InvalidTierCatalog, "INVALID_TIER_CATALOG", 400),
            (errors.NotFoundError, "NOT_FOUND", 404),
            (errors.InsufficientBalanceError, "INSUFFICIENT_BALANCE", 409),
        ],
    )
    def test_codes_and_statuses(self, error_cls, error_code, http_status) -> None:
        error = error_cls("boom")

        assert isinstance(error, errors.AmbassadorProgramError)
        assert error.error_code == error_code
        assert error.http_status == http_status
        assert error.to_dict() == {
            "error": "boom",
            "error_code": error_code,
            "status": http_status,
        }

    def test_engine_errors_are_commission_errors(self) -> None:
        """Callers catching the pure errors also catch engine errors."""
        assert issubclass(errors.InvalidAmountError, InvalidAmount)
        assert issubclass(errors.InvalidNameError, InvalidName)
        assert issubclass(errors.InvalidTierCatalog, InvalidTierCatalog)
        assert issubclass(errors.NotFoundError, TierNotFound)

    @pytest.mark.parametrize(
        "source,target",
        [
            (InvalidAmount("x"), errors.InvalidAmountError),
            (InvalidName("x"), errors.InvalidNameError),
            (InvalidTierCatalog("x"), errors.InvalidTierCatalog),
            (TierNotFound("x"), errors.NotFoundError),
        ],
    )
    def test_to_engine_error(self, source, target) -> None:
        converted = errors.to_engine_error(source)

        assert type(converted) is target
        assert converted.message == "x"
