"""Network tier discovery.

A tier is a set of subnets treated as one network zone, e.g. the public,
app or database subnets of a VPC. Load balancers that share a subnet end
up in the same tier, and every tier owns one Recommendation.

Tiers are discovered online. The first subnet of a load balancer decides
its tier; the remaining subnets are pulled into that tier, even if an
earlier load balancer had already placed them in a different one. The
earlier tier keeps its recommendation, so depending on input order two
tiers that turn out to be linked are reported separately.
"""

import logging
from dataclasses import dataclass, field

from elbpruner.models import ExistingLoadBalancer, Recommendation

logger = logging.getLogger(__name__)


@dataclass
class Tier:
    """A set of subnets and the recommendation for them."""

    subnets: set[str] = field(default_factory=set)
    recommendation: Recommendation = field(default_factory=Recommendation)

    def add(self, subnet: str) -> None:
        self.subnets.add(subnet)

    def sorted_subnets(self) -> list[str]:
        return sorted(self.subnets)


class TierIndex:
    """Maps subnets to tiers, creating tiers the first time a subnet is seen."""

    def __init__(self):
        self._tiers_by_subnet: dict[str, Tier] = {}
        self._tiers: list[Tier] = []

    def __len__(self) -> int:
        return len(self._tiers)

    def find(self, subnet: str) -> Tier:
        """Get the tier owning `subnet`, creating a new tier if it is unknown."""
        tier = self._tiers_by_subnet.get(subnet)
        if tier is not None:
            return tier

        tier = Tier()
        self.associate(tier, subnet)
        self._tiers.append(tier)
        logger.debug(f"New tier #{len(self._tiers)} discovered from subnet {subnet}")
        return tier

    def associate(self, tier: Tier, subnet: str) -> None:
        """Add `subnet` to `tier`, overriding any previous owner."""
        previous = self._tiers_by_subnet.get(subnet)
        if previous is not None and previous is not tier:
            logger.warning(
                f"Subnet {subnet} moves to another tier; load balancers already "
                "placed in its previous tier are reported separately"
            )
        tier.add(subnet)
        self._tiers_by_subnet[subnet] = tier

    def resolve(self, lb: ExistingLoadBalancer) -> Recommendation:
        """Assign `lb` to a tier and return that tier's recommendation.

        Args:
            lb: Load balancer with at least one subnet

        Returns:
            Recommendation of the tier found for the load balancer's first subnet

        Raises:
            ValueError: If the load balancer has no subnets
        """
        if not lb.subnets:
            raise ValueError(f"Load balancer {lb.name} has no subnets")

        first, *rest = lb.subnets
        tier = self.find(first)
        for subnet in rest:
            self.associate(tier, subnet)
        return tier.recommendation

    def all_tiers(self) -> list[Recommendation]:
        """Recommendations in tier creation order, with sorted subnet lists."""
        recommendations = []
        for tier in self._tiers:
            tier.recommendation.subnets = tier.sorted_subnets()
            recommendations.append(tier.recommendation)
        return recommendations


__all__ = ["Tier", "TierIndex"]
