"""Custom exceptions for elb-pruner."""


class ElbPrunerError(Exception):
    """Base exception for elb-pruner errors."""

    pass


class ClassificationError(ElbPrunerError):
    """Load balancer has no listener protocol we know how to replace."""

    def __init__(self, load_balancer: str, reason: str = "no recognized listener protocol"):
        self.load_balancer = load_balancer
        self.reason = reason
        super().__init__(f"Cannot classify load balancer '{load_balancer}': {reason}")


class MissingIngressError(ElbPrunerError, LookupError):
    """Security group referenced by a load balancer has no ingress data."""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"No ingress data supplied for security group '{group_id}'")


class InvariantViolationError(ElbPrunerError):
    """Internal invariant broken (programmer error)."""

    pass


class InventoryError(ElbPrunerError):
    """Load balancer inventory could not be fetched or parsed."""

    pass


class ConfigError(ElbPrunerError):
    """Raised when configuration operations fail."""

    pass
