"""Listener classification.

Decides which kind of load balancer could replace an existing one by
looking at what its listeners speak:

- HTTP or HTTPS, or TCP on port 80/443 -> HTTP traffic
- TCP on any other port -> TCP traffic
- anything else (e.g. SSL) is ignored

Only HTTP traffic becomes an ALB, only TCP traffic becomes an NLB, and a
mix of both stays a classic ELB.
"""

import logging

from elbpruner.exceptions import ClassificationError
from elbpruner.models import ExistingLoadBalancer, Listener, TargetType

logger = logging.getLogger(__name__)

HTTP_CATEGORY = "HTTP"
TCP_CATEGORY = "TCP"

# TCP listeners on these ports almost certainly carry HTTP(S)
WEB_PORTS = frozenset({80, 443})


class ListenerClassifier:
    """Maps a load balancer's listener set to a replacement type."""

    @staticmethod
    def categorize(listener: Listener) -> str | None:
        """Get the traffic category of a listener, or None if it is not recognized."""
        protocol = listener.protocol.upper()
        if protocol in ("HTTP", "HTTPS"):
            return HTTP_CATEGORY
        if protocol == "TCP":
            return HTTP_CATEGORY if listener.port in WEB_PORTS else TCP_CATEGORY
        return None

    def classify(self, lb: ExistingLoadBalancer) -> TargetType:
        """Pick the replacement type for a load balancer.

        Raises:
            ClassificationError: If none of the listeners has a recognized protocol
        """
        categories = {self.categorize(listener) for listener in lb.listeners}
        categories.discard(None)

        if not categories:
            raise ClassificationError(lb.name)

        if len(categories) > 1:
            logger.debug(f"{lb.name} mixes HTTP and TCP listeners, retaining as ELB")
            return TargetType.ELB

        if HTTP_CATEGORY in categories:
            return TargetType.ALB
        return TargetType.NLB


__all__ = ["ListenerClassifier"]
