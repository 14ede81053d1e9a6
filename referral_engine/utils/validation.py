"""Input validation helpers shared by the ambassador services."""

from decimal import Decimal, InvalidOperation
from typing import Any

from commission import round2
from referral_engine.config.business_constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from referral_engine.utils.exceptions import InvalidAmountError


def to_money(value: Any, field: str = "amount") -> Decimal:
    """
    Convert an incoming amount to a cent-rounded Decimal.

    Floats are converted through ``str`` so 0.1 stays 0.1.

    Args:
        value: Amount as Decimal, int, float or numeric string
        field: Field name used in the error message

    Returns:
        Amount rounded to cents

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(f"{field} must be a number: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"{field} must be a number: {value!r}") from None
    if not amount.is_finite():
        raise InvalidAmountError(f"{field} must be finite: {value!r}")
    return round2(amount)


def to_non_negative_money(value: Any, field: str = "amount") -> Decimal:
    """Like ``to_money`` but rejects negative amounts."""
    amount = to_money(value, field)
    if amount < 0:
        raise InvalidAmountError(f"{field} cannot be negative: {value}")
    return amount


def normalize_pagination(page: int, per_page: int) -> tuple[int, int]:
    """
    Clamp page arguments to sane bounds.

    Returns:
        Tuple of (page >= 1, 1 <= per_page <= MAX_PAGE_SIZE)
    """
    page = max(int(page or 1), 1)
    per_page = int(per_page or DEFAULT_PAGE_SIZE)
    return page, min(max(per_page, 1), MAX_PAGE_SIZE)
