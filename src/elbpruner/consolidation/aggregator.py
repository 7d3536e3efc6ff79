"""Totals and savings estimate across all tier recommendations.

The estimate prices every proposed ALB or NLB at 90% of a classic ELB and
every retained classic ELB at 100%:

    savings% = (original - (0.9 * (albs + nlbs) + elbs)) / original * 100
"""

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass

from elbpruner.models import Recommendation

logger = logging.getLogger(__name__)

REPLACEMENT_COST_FACTOR = 0.9
RETAINED_COST_FACTOR = 1.0


def calculate_savings(
    original: int,
    albs: int,
    nlbs: int,
    elbs: int,
    replacement_cost_factor: float = REPLACEMENT_COST_FACTOR,
    retained_cost_factor: float = RETAINED_COST_FACTOR,
) -> float:
    """Estimated saving, in percent, of moving `original` ELBs to the proposal.

    Returns 0.0 when there is nothing to consolidate.
    """
    if original == 0:
        return 0.0
    proposed = (albs + nlbs) * replacement_cost_factor + elbs * retained_cost_factor
    return (original - proposed) / original * 100


@dataclass
class ConsolidationSummary:
    """Account-wide totals of a consolidation run."""

    original: int
    albs: int
    nlbs: int
    elbs: int
    savings_percent: float

    def to_dict(self) -> dict:
        return asdict(self)


class RecommendationAggregator:
    """Finalizes per-tier recommendations and computes the overall saving."""

    def __init__(
        self,
        replacement_cost_factor: float = REPLACEMENT_COST_FACTOR,
        retained_cost_factor: float = RETAINED_COST_FACTOR,
    ):
        self.replacement_cost_factor = replacement_cost_factor
        self.retained_cost_factor = retained_cost_factor

    def finalize(self, recommendations: Iterable[Recommendation]) -> list[Recommendation]:
        """Sort each recommendation's subnets; proposal lists keep their order."""
        finalized = []
        for recommendation in recommendations:
            recommendation.subnets = sorted(recommendation.subnets)
            finalized.append(recommendation)
        return finalized

    def summarize(self, recommendations: Iterable[Recommendation]) -> ConsolidationSummary:
        """Count load balancers before and after, and estimate the saving."""
        original = albs = nlbs = elbs = 0
        for recommendation in recommendations:
            for clb in recommendation.albs + recommendation.nlbs + recommendation.elbs:
                original += len(clb.load_balancers)
            albs += len(recommendation.albs)
            nlbs += len(recommendation.nlbs)
            elbs += len(recommendation.elbs)

        savings = calculate_savings(
            original,
            albs,
            nlbs,
            elbs,
            replacement_cost_factor=self.replacement_cost_factor,
            retained_cost_factor=self.retained_cost_factor,
        )
        logger.info(
            f"{original} ELB(s) would become {albs} ALB(s), {nlbs} NLB(s) and {elbs} ELB(s) "
            f"({savings:.0f}% saving)"
        )
        return ConsolidationSummary(
            original=original, albs=albs, nlbs=nlbs, elbs=elbs, savings_percent=savings
        )


__all__ = [
    "REPLACEMENT_COST_FACTOR",
    "RETAINED_COST_FACTOR",
    "ConsolidationSummary",
    "RecommendationAggregator",
    "calculate_savings",
]
