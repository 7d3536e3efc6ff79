"""Load balancer consolidation engine.

Philosophy:
- Ruthless simplicity: One greedy pass, no global optimization
- Zero-BS implementation: Pure functions of the inventory, no I/O
- Brick & studs architecture: Self-contained modules

Public API exported from submodules.
"""

from elbpruner.consolidation.aggregator import (
    ConsolidationSummary,
    RecommendationAggregator,
    calculate_savings,
)
from elbpruner.consolidation.classifier import ListenerClassifier
from elbpruner.consolidation.engine import ConsolidationEngine, generate_recommendations
from elbpruner.consolidation.ingress import IngressEquivalence
from elbpruner.consolidation.tiers import Tier, TierIndex

__all__ = [
    # Tiers
    "Tier",
    "TierIndex",
    # Ingress
    "IngressEquivalence",
    # Classification
    "ListenerClassifier",
    # Engine
    "ConsolidationEngine",
    "generate_recommendations",
    # Aggregation
    "ConsolidationSummary",
    "RecommendationAggregator",
    "calculate_savings",
]
