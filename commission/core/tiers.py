"""
Tier catalog.

Holds an ordered, validated set of commission tiers. Ordering comes from
each tier's explicit ``rank``, never from list position.
"""

from collections.abc import Iterable

from commission.core.models import Tier
from commission.exceptions import InvalidTierCatalog, TierNotFound


class TierCatalog:
    """
    Validated, rank-ordered collection of tiers.

    The ladder invariant is checked once, at construction:
    - tier names and ranks are unique
    - at least one tier is active
    - walking active tiers by rank, neither ``min_referrals`` nor
      ``min_sales`` ever decreases, and at least one of them strictly
      increases between neighbours

    Inactive tiers are kept (commission audit refers to them by name) but
    they never take part in resolution and are not checked against the
    ladder.
    """

    def __init__(self, tiers: Iterable[Tier]) -> None:
        self._tiers: tuple[Tier, ...] = tuple(
            sorted(tiers, key=lambda tier: tier.rank)
        )
        self._validate()
        self._by_name = {tier.name: tier for tier in self._tiers}

    def _validate(self) -> None:
        names = [tier.name for tier in self._tiers]
        if len(set(names)) != len(names):
            raise InvalidTierCatalog(f"Duplicate tier names: {names}")

        ranks = [tier.rank for tier in self._tiers]
        if len(set(ranks)) != len(ranks):
            raise InvalidTierCatalog(f"Duplicate tier ranks: {ranks}")

        active = [tier for tier in self._tiers if tier.is_active]
        if not active:
            raise InvalidTierCatalog("Tier catalog has no active tiers")

        for lower, higher in zip(active, active[1:]):
            if (
                higher.min_referrals < lower.min_referrals
                or higher.min_sales < lower.min_sales
            ):
                raise InvalidTierCatalog(
                    f"Tier {higher.name!r} has lower requirements than "
                    f"{lower.name!r}"
                )
            if (
                higher.min_referrals == lower.min_referrals
                and higher.min_sales == lower.min_sales
            ):
                raise InvalidTierCatalog(
                    f"Tier {higher.name!r} has the same requirements as "
                    f"{lower.name!r}"
                )

    def __iter__(self):
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def all_tiers(self) -> list[Tier]:
        """Get every tier, active or not, ascending by rank."""
        return list(self._tiers)

    def list_active_tiers(self) -> list[Tier]:
        """
        Get active tiers ascending by requirement strictness.

        Returns:
            Active tiers ordered by rank
        """
        return [tier for tier in self._tiers if tier.is_active]

    def get_tier(self, name: str) -> Tier:
        """
        Get tier by name.

        Args:
            name: Tier name

        Returns:
            Matching tier (active or not)

        Raises:
            TierNotFound: If no tier has this name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise TierNotFound(f"Tier not found: {name}") from None

    def lowest_tier(self) -> Tier:
        """Get the least strict active tier."""
        return self.list_active_tiers()[0]

    def next_tier(self, current: Tier) -> Tier | None:
        """
        Get the active tier directly above ``current``.

        Args:
            current: Tier to start from

        Returns:
            Next active tier by rank, or None at the top of the ladder
        """
        for tier in self.list_active_tiers():
            if tier.rank > current.rank:
                return tier
        return None
