"""Security group ingress equivalence.

Two security groups are interchangeable for consolidation when they admit
traffic from exactly the same source address ranges. Ports and protocols
of the individual rules are ignored, and a group whose ranges are a strict
subset of another's is NOT equivalent to it.

Public API:
    IngressEquivalence: Per-run cache of flattened ingress ranges
"""

import logging
from collections.abc import Mapping

from elbpruner.exceptions import MissingIngressError
from elbpruner.models import SecurityGroup

logger = logging.getLogger(__name__)


class IngressEquivalence:
    """Flattens and compares security group ingress ranges.

    The cache lives as long as the instance, so each consolidation run
    gets its own view of the security groups it was given.
    """

    def __init__(self, security_groups: Mapping[str, SecurityGroup] | None = None):
        self._security_groups = security_groups or {}
        self._ranges_by_group: dict[str, frozenset[str]] = {}

    def ranges_for(self, group_id: str) -> frozenset[str]:
        """Get the set of source ranges allowed in by a security group.

        Args:
            group_id: Security group id, e.g. "sg-0123abcd"

        Returns:
            Deduplicated source ranges across all ingress permissions

        Raises:
            MissingIngressError: If no ingress data was supplied for the group
        """
        cached = self._ranges_by_group.get(group_id)
        if cached is not None:
            return cached

        group = self._security_groups.get(group_id)
        if group is None:
            raise MissingIngressError(group_id)

        ranges = frozenset(
            source for permission in group.ingress for source in permission.source_ranges
        )
        self._ranges_by_group[group_id] = ranges
        logger.debug(f"Security group {group_id} admits {len(ranges)} source range(s)")
        return ranges

    def equivalent(self, group_a: str, group_b: str) -> bool:
        """True if both groups admit exactly the same source ranges."""
        return self.ranges_for(group_a) == self.ranges_for(group_b)


__all__ = ["IngressEquivalence"]
