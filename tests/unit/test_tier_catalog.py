"""Tests for TierCatalog ladder validation and lookups."""

from decimal import Decimal

import pytest

from commission import (
    DEFAULT_TIERS,
    InvalidTierCatalog,
    Tier,
    TierCatalog,
    TierNotFound,
)


def make_tier(name: str, rank: int, referrals: int, sales: str, **kwargs) -> Tier:
    return Tier(
        name=name,
        rank=rank,
        min_referrals=referrals,
        min_sales=Decimal(sales),
        commission_rate=kwargs.pop("commission_rate", Decimal("0.05")),
        **kwargs,
    )


class TestTierCatalogValidation:
    """Ladder invariants checked at construction."""

    def test_default_ladder_is_valid(self) -> None:
        """The seeded ladder passes validation."""
        assert len(TierCatalog(DEFAULT_TIERS)) == 4

    def test_orders_by_rank_not_position(self) -> None:
        """Input order is irrelevant, rank decides."""
        catalog = TierCatalog(reversed(DEFAULT_TIERS))
        assert [tier.name for tier in catalog.list_active_tiers()] == [
            "Member",
            "Promoter",
            "Ambassador",
            "Elite",
        ]

    def test_empty_catalog_rejected(self) -> None:
        """A catalog needs at least one active tier."""
        with pytest.raises(InvalidTierCatalog):
            TierCatalog([])

    def test_all_inactive_rejected(self) -> None:
        """A catalog of inactive tiers is rejected."""
        with pytest.raises(InvalidTierCatalog):
            TierCatalog([make_tier("Member", 1, 0, "0", is_active=False)])

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(InvalidTierCatalog):
            TierCatalog([make_tier("Member", 1, 0, "0"), make_tier("Member", 2, 5, "500")])

    def test_duplicate_ranks_rejected(self) -> None:
        with pytest.raises(InvalidTierCatalog):
            TierCatalog([make_tier("Member", 1, 0, "0"), make_tier("Promoter", 1, 5, "500")])

    def test_decreasing_requirement_rejected(self) -> None:
        """A higher rank may not ask for fewer sales."""
        with pytest.raises(InvalidTierCatalog):
            TierCatalog([make_tier("Member", 1, 0, "100"), make_tier("Promoter", 2, 5, "50")])

    def test_identical_requirements_rejected(self) -> None:
        """Neighbouring tiers must differ in at least one requirement."""
        with pytest.raises(InvalidTierCatalog):
            TierCatalog([make_tier("Member", 1, 5, "500"), make_tier("Promoter", 2, 5, "500")])

    def test_one_strict_increase_is_enough(self) -> None:
        """Equal referrals with higher sales is a valid step."""
        catalog = TierCatalog([make_tier("Member", 1, 5, "0"), make_tier("Promoter", 2, 5, "500")])
        assert len(catalog.list_active_tiers()) == 2

    def test_inactive_tier_not_checked_against_ladder(self) -> None:
        """Retired tiers are kept even if they no longer fit the ladder."""
        catalog = TierCatalog(
            [
                make_tier("Member", 1, 0, "0"),
                make_tier("Legacy", 2, 0, "0", is_active=False),
                make_tier("Promoter", 3, 5, "500"),
            ]
        )
        assert len(catalog) == 3
        assert [tier.name for tier in catalog.list_active_tiers()] == ["Member", "Promoter"]


class TestTierCatalogLookups:
    """Lookups on a valid catalog."""

    def test_get_tier(self, catalog: TierCatalog) -> None:
        assert catalog.get_tier("Elite").commission_rate == Decimal("0.15")

    def test_get_unknown_tier(self, catalog: TierCatalog) -> None:
        """Unknown names raise TierNotFound."""
        with pytest.raises(TierNotFound):
            catalog.get_tier("Platinum")

    def test_next_tier(self, catalog: TierCatalog) -> None:
        member = catalog.get_tier("Member")
        assert catalog.next_tier(member).name == "Promoter"

    def test_next_tier_at_top(self, catalog: TierCatalog) -> None:
        assert catalog.next_tier(catalog.get_tier("Elite")) is None

    def test_lowest_tier(self, catalog: TierCatalog) -> None:
        assert catalog.lowest_tier().name == "Member"
