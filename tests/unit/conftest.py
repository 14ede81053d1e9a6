"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- CommissionCalculator instance
- Default tier catalog and individual default tiers
"""

import pytest

from commission import CommissionCalculator, TierCatalog, default_catalog
from commission.core.models import Tier


@pytest.fixture
def calc() -> CommissionCalculator:
    """Create calculator instance."""
    return CommissionCalculator()


@pytest.fixture
def catalog() -> TierCatalog:
    """Default four-tier ladder (Member, Promoter, Ambassador, Elite)."""
    return default_catalog()


@pytest.fixture
def member(catalog: TierCatalog) -> Tier:
    return catalog.get_tier("Member")


@pytest.fixture
def promoter(catalog: TierCatalog) -> Tier:
    return catalog.get_tier("Promoter")


@pytest.fixture
def elite(catalog: TierCatalog) -> Tier:
    return catalog.get_tier("Elite")
