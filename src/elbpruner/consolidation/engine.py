"""Greedy consolidation of classic load balancers.

Each load balancer drops through three levels, like a coin in a penny
falls machine:

1. Which tier (set of subnets) is it in?
2. Which type of load balancer could replace it?
3. Is there already a proposed replacement of that type in the tier whose
   security groups admit the same traffic, and which can take its ports?

Decisions are made once per load balancer, in input order, and never
revisited. The result is a reasonable partition, not a minimal one.

Public API:
    ConsolidationEngine: Runs the placement for one inventory
    generate_recommendations: Convenience wrapper returning recommendations
"""

import logging
from collections.abc import Iterable, Mapping

from elbpruner.consolidation.classifier import ListenerClassifier
from elbpruner.consolidation.ingress import IngressEquivalence
from elbpruner.consolidation.tiers import TierIndex
from elbpruner.exceptions import InvariantViolationError
from elbpruner.models import (
    ConsolidatedLoadBalancer,
    ExistingLoadBalancer,
    Recommendation,
    SecurityGroup,
    TargetType,
)

logger = logging.getLogger(__name__)


class ConsolidationEngine:
    """Places existing load balancers into proposed replacements.

    One engine holds the state of one run: discovered tiers, the ingress
    cache, and the proposals built so far.

    Example:
        >>> engine = ConsolidationEngine(security_groups)
        >>> for lb in load_balancers:
        ...     engine.place(lb)
        >>> recommendations = engine.recommendations()
    """

    def __init__(
        self,
        security_groups: Mapping[str, SecurityGroup] | None = None,
        classifier: ListenerClassifier | None = None,
    ):
        self.tiers = TierIndex()
        self.ingress = IngressEquivalence(security_groups)
        self.classifier = classifier or ListenerClassifier()
        self.placed = 0

    def run(self, load_balancers: Iterable[ExistingLoadBalancer]) -> list[Recommendation]:
        """Place every load balancer in order and return the recommendations.

        Raises:
            ClassificationError: If a load balancer has no recognized listener
            MissingIngressError: If a needed security group has no ingress data
        """
        for lb in load_balancers:
            self.place(lb)
        logger.info(f"Placed {self.placed} load balancer(s) into {len(self.tiers)} tier(s)")
        return self.recommendations()

    def recommendations(self) -> list[Recommendation]:
        return self.tiers.all_tiers()

    def place(self, lb: ExistingLoadBalancer) -> ConsolidatedLoadBalancer:
        """Place one load balancer, returning the replacement that absorbed it."""
        target_type = self.classifier.classify(lb)
        if not isinstance(target_type, TargetType):
            raise InvariantViolationError(f"Unknown load balancer type: {target_type!r}")

        # Only a classifiable load balancer may create a tier
        recommendation = self.tiers.resolve(lb)

        clb = self._find_candidate(recommendation, target_type, lb)
        if clb is None:
            clb = ConsolidatedLoadBalancer.seeded_with(target_type, lb)
            recommendation.clbs_for(target_type).append(clb)
            logger.debug(f"{lb.name} starts a new {target_type.value}")
        else:
            clb.replace(lb)
            logger.debug(f"{lb.name} merged into {target_type.value} with {clb.load_balancers[0]}")

        recommendation.associate(clb, lb.security_groups)
        self.placed += 1
        return clb

    def _find_candidate(
        self,
        recommendation: Recommendation,
        target_type: TargetType,
        lb: ExistingLoadBalancer,
    ) -> ConsolidatedLoadBalancer | None:
        """Find an existing replacement that can absorb `lb`, if any."""
        if not recommendation.clbs_for(target_type):
            return None

        by_sg = recommendation.sg_index_for(target_type)

        def accepts(candidate: ConsolidatedLoadBalancer) -> bool:
            return target_type.allows_port_collisions or not candidate.has_port_collision(lb)

        for group_id in lb.security_groups:
            # Fast path: a replacement already allows this exact group
            candidate = by_sg.get(group_id)
            if candidate is not None and accepts(candidate):
                return candidate

            # Otherwise any group seen so far with the same ingress will do
            for seen_group, candidate in by_sg.items():
                if self.ingress.equivalent(seen_group, group_id) and accepts(candidate):
                    return candidate

        return None


def generate_recommendations(
    load_balancers: Iterable[ExistingLoadBalancer],
    security_groups: Mapping[str, SecurityGroup] | None = None,
) -> list[Recommendation]:
    """Recommend per-tier replacements for a set of classic load balancers.

    Args:
        load_balancers: Existing load balancers, in the order they should be placed
        security_groups: Security groups keyed by group id

    Returns:
        One Recommendation per tier, in discovery order
    """
    return ConsolidationEngine(security_groups).run(load_balancers)


__all__ = ["ConsolidationEngine", "generate_recommendations"]
