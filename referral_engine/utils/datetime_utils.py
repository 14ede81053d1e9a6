"""Timestamp helpers; every stored timestamp is timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time in UTC, used for column defaults and status stamps."""
    return datetime.now(UTC)
