"""
Referral code and link generation.

Codes are derived deterministically from the ambassador's name and numeric
id, so two ambassadors never share a code as long as their ids differ.
"""

from commission.exceptions import InvalidAmount, InvalidName


ID_WIDTH = 4
SIGNUP_PATH = "/signup"


def generate_code(first_name: str, last_name: str, id: int) -> str:
    """
    Generate a referral code.

    Format: first two letters of each name, upper-cased, followed by the id
    zero-padded to four digits. Ids longer than four digits are used as-is.

    Args:
        first_name: Ambassador first name
        last_name: Ambassador last name
        id: Ambassador numeric id

    Returns:
        Referral code

    Raises:
        InvalidName: If both names are empty
        InvalidAmount: If id is negative

    Example:
        >>> generate_code("Admin", "User", 1)
        'ADUS0001'
        >>> generate_code("Bob", "Brown", 9999)
        'BOBR9999'
    """
    first = (first_name or "").strip()
    last = (last_name or "").strip()
    if not first and not last:
        raise InvalidName("Referral code needs a first or last name")
    if id < 0:
        raise InvalidAmount(f"Referral code id cannot be negative: {id}")

    prefix = (first[:2] + last[:2]).upper()
    return f"{prefix}{id:0{ID_WIDTH}d}"


def generate_link(base_url: str, code: str) -> str:
    """
    Build a signup link carrying the referral code.

    Example:
        >>> generate_link("https://candiez.shop/", "ABC123")
        'https://candiez.shop/signup?ref=ABC123'
    """
    return f"{base_url.rstrip('/')}{SIGNUP_PATH}?ref={code}"


def normalize_code(code: str) -> str:
    """Normalize a typed referral code (trim and upper-case)."""
    return (code or "").strip().upper()
