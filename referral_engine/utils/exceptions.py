"""
Exception hierarchy for the ambassador program.

Every error carries a stable ``error_code`` and the ``http_status`` the HTTP
layer should answer with. Errors that mirror a pure ``commission`` error also
subclass it, so callers can catch either family.
"""

from commission import exceptions as commission_errors


class AmbassadorProgramError(Exception):
    """Base class for all ambassador program errors."""

    error_code = "AMBASSADOR_PROGRAM_ERROR"
    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str | int]:
        """Serialize for an API error response."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "status": self.http_status,
        }


class InvalidAmountError(AmbassadorProgramError, commission_errors.InvalidAmount):
    """Raised for a negative amount, or a non-positive one where positive is required."""

    error_code = "INVALID_AMOUNT"
    http_status = 400


class InvalidTransitionError(AmbassadorProgramError, ValueError):
    """Raised when a payout request cannot move to the requested status."""

    error_code = "INVALID_TRANSITION"
    http_status = 400


class InvalidNameError(AmbassadorProgramError, commission_errors.InvalidName):
    """Raised when a referral code cannot be derived from a name."""

    error_code = "INVALID_NAME"
    http_status = 400


class InvalidTierCatalog(
    AmbassadorProgramError, commission_errors.InvalidTierCatalog
):
    """Raised when a tier edit would break the requirement ladder."""

    error_code = "INVALID_TIER_CATALOG"
    http_status = 400


class NotFoundError(AmbassadorProgramError, commission_errors.TierNotFound):
    """Raised when an ambassador, tier, referral or payout does not exist."""

    error_code = "NOT_FOUND"
    http_status = 404


class InvalidPayoutTypeError(AmbassadorProgramError, ValueError):
    """Raised when a payout names an unsupported payout type."""

    error_code = "INVALID_PAYOUT_TYPE"
    http_status = 400


class InsufficientBalanceError(AmbassadorProgramError, ValueError):
    """Raised when a redemption exceeds the available balance."""

    error_code = "INSUFFICIENT_BALANCE"
    http_status = 409


# Pure commission errors and the engine error each one maps to
_ENGINE_ERRORS: dict[type[Exception], type[AmbassadorProgramError]] = {
    commission_errors.InvalidAmount: InvalidAmountError,
    commission_errors.InvalidName: InvalidNameError,
    commission_errors.InvalidTierCatalog: InvalidTierCatalog,
    commission_errors.TierNotFound: NotFoundError,
}


def to_engine_error(exc: commission_errors.CommissionError) -> AmbassadorProgramError:
    """
    Convert a pure commission error into its engine counterpart.

    Args:
        exc: Error raised by the ``commission`` package

    Returns:
        Engine error with the same message
    """
    if isinstance(exc, AmbassadorProgramError):
        return exc
    for source, target in _ENGINE_ERRORS.items():
        if isinstance(exc, source):
            return target(str(exc))
    return InvalidAmountError(str(exc))
