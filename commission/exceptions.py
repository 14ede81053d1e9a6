"""
Exceptions raised by the pure commission package.

All of them are ``ValueError`` subclasses so plain callers can treat them
as bad input.
"""


class CommissionError(ValueError):
    """Base class for commission calculation errors."""


class InvalidAmount(CommissionError):
    """Raised for a negative amount, or a non-positive one where positive is required."""


class InvalidName(CommissionError):
    """Raised when a referral code cannot be derived from the given names."""


class InvalidTierCatalog(CommissionError):
    """Raised when a tier list does not form a valid requirement ladder."""


class TierNotFound(CommissionError):
    """Raised when a tier name is not in the catalog."""
