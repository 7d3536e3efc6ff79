"""Data model for load balancer consolidation.

Inputs mirror the parts of the AWS `describe-load-balancers` and
`describe-security-groups` responses that matter for consolidation.
Outputs are the proposed replacement load balancers, grouped per network
tier into recommendations.

Public API:
    TargetType: Replacement load balancer type (ALB, NLB, ELB)
    Listener: Front-end port and protocol of an existing load balancer
    ExistingLoadBalancer: Classic load balancer under analysis
    IngressPermission: One ingress rule of a security group
    SecurityGroup: Security group with its ingress rules
    ConsolidatedLoadBalancer: Proposed replacement for one or more ELBs
    Recommendation: Per-tier bundle of proposed replacements
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TargetType(str, Enum):
    """Type of load balancer proposed as a replacement."""

    ALB = "ALB"  # HTTP(S) only
    NLB = "NLB"  # TCP only
    ELB = "ELB"  # classic, retained when protocols are mixed

    @property
    def allows_port_collisions(self) -> bool:
        """Whether two merged load balancers may expose the same port.

        ALBs can pick a backend with host or path based routing. NLBs and
        classic ELBs have nothing to route on, so a shared port needs a
        separate load balancer.
        """
        return self is TargetType.ALB


@dataclass(frozen=True)
class Listener:
    """Front-end listener of a classic load balancer."""

    port: int
    protocol: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Listener":
        """Create from a `ListenerDescriptions[]` entry or a bare `Listener` dict."""
        listener = data.get("Listener", data)
        return cls(port=int(listener["LoadBalancerPort"]), protocol=listener["Protocol"])

    def to_dict(self) -> dict[str, Any]:
        return {"Listener": {"LoadBalancerPort": self.port, "Protocol": self.protocol}}


@dataclass
class ExistingLoadBalancer:
    """Classic load balancer as described by the ELB API."""

    name: str
    subnets: list[str]
    listeners: list[Listener] = field(default_factory=list)
    security_groups: list[str] = field(default_factory=list)

    @property
    def ports(self) -> list[int]:
        """Front-end ports in listener order."""
        return [listener.port for listener in self.listeners]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExistingLoadBalancer":
        """Create from a `LoadBalancerDescriptions[]` entry."""
        return cls(
            name=data["LoadBalancerName"],
            subnets=list(data.get("Subnets") or []),
            listeners=[Listener.from_dict(ld) for ld in data.get("ListenerDescriptions") or []],
            security_groups=list(data.get("SecurityGroups") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "LoadBalancerName": self.name,
            "Subnets": list(self.subnets),
            "ListenerDescriptions": [listener.to_dict() for listener in self.listeners],
            "SecurityGroups": list(self.security_groups),
        }


@dataclass
class IngressPermission:
    """Ingress rule of a security group.

    Only the source ranges take part in consolidation decisions; port and
    protocol are kept for snapshots and display.
    """

    source_ranges: list[str] = field(default_factory=list)
    protocol: str | None = None
    from_port: int | None = None
    to_port: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IngressPermission":
        """Create from an `IpPermissions[]` entry (IPv4 and IPv6 ranges)."""
        ranges = [r["CidrIp"] for r in data.get("IpRanges") or [] if r.get("CidrIp")]
        ranges.extend(r["CidrIpv6"] for r in data.get("Ipv6Ranges") or [] if r.get("CidrIpv6"))
        return cls(
            source_ranges=ranges,
            protocol=data.get("IpProtocol"),
            from_port=data.get("FromPort"),
            to_port=data.get("ToPort"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "IpRanges": [{"CidrIp": r} for r in self.source_ranges if ":" not in r],
            "Ipv6Ranges": [{"CidrIpv6": r} for r in self.source_ranges if ":" in r],
        }
        if self.protocol is not None:
            data["IpProtocol"] = self.protocol
        if self.from_port is not None:
            data["FromPort"] = self.from_port
        if self.to_port is not None:
            data["ToPort"] = self.to_port
        return data


@dataclass
class SecurityGroup:
    """Security group with its ingress permissions."""

    group_id: str
    ingress: list[IngressPermission] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecurityGroup":
        """Create from a `SecurityGroups[]` entry."""
        return cls(
            group_id=data["GroupId"],
            ingress=[IngressPermission.from_dict(p) for p in data.get("IpPermissions") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "GroupId": self.group_id,
            "IpPermissions": [permission.to_dict() for permission in self.ingress],
        }


@dataclass
class ConsolidatedLoadBalancer:
    """A proposed load balancer that can replace one or more existing ones.

    It listens on the union of the replaced load balancers' ports and
    carries the union of their security groups.
    """

    target_type: TargetType
    load_balancers: list[str] = field(default_factory=list)
    port_set: set[int] = field(default_factory=set)
    security_group_set: set[str] = field(default_factory=set)

    @classmethod
    def seeded_with(
        cls, target_type: TargetType, lb: ExistingLoadBalancer
    ) -> "ConsolidatedLoadBalancer":
        """Create a replacement exposing the same ports and groups as `lb`."""
        clb = cls(target_type=target_type)
        clb.replace(lb)
        return clb

    def replace(self, lb: ExistingLoadBalancer) -> None:
        """Take over `lb`: record its name, listen on its ports, allow its groups."""
        self.load_balancers.append(lb.name)
        self.port_set.update(lb.ports)
        self.security_group_set.update(lb.security_groups)

    def has_port_collision(self, lb: ExistingLoadBalancer) -> bool:
        """True if `lb` listens on any port this load balancer already exposes."""
        return any(port in self.port_set for port in lb.ports)

    @property
    def ports(self) -> list[str]:
        """Listening ports, ascending, formatted as strings."""
        return [str(port) for port in sorted(self.port_set)]

    @property
    def security_groups(self) -> list[str]:
        return sorted(self.security_group_set)

    @property
    def is_retained(self) -> bool:
        """A classic ELB standing in for just itself is kept as it is."""
        return self.target_type is TargetType.ELB and len(self.load_balancers) == 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "load_balancers": list(self.load_balancers),
            "ports": self.ports,
            "security_groups": self.security_groups,
        }


@dataclass
class Recommendation:
    """How the load balancers of one network tier could be restructured.

    Each target type keeps its list of proposed load balancers plus an
    index from security group id to the proposed load balancer most
    recently associated with that group.
    """

    subnets: list[str] = field(default_factory=list)
    albs: list[ConsolidatedLoadBalancer] = field(default_factory=list)
    nlbs: list[ConsolidatedLoadBalancer] = field(default_factory=list)
    elbs: list[ConsolidatedLoadBalancer] = field(default_factory=list)
    albs_by_sg: dict[str, ConsolidatedLoadBalancer] = field(default_factory=dict, repr=False)
    nlbs_by_sg: dict[str, ConsolidatedLoadBalancer] = field(default_factory=dict, repr=False)
    elbs_by_sg: dict[str, ConsolidatedLoadBalancer] = field(default_factory=dict, repr=False)

    def clbs_for(self, target_type: TargetType) -> list[ConsolidatedLoadBalancer]:
        return {
            TargetType.ALB: self.albs,
            TargetType.NLB: self.nlbs,
            TargetType.ELB: self.elbs,
        }[target_type]

    def sg_index_for(self, target_type: TargetType) -> dict[str, ConsolidatedLoadBalancer]:
        return {
            TargetType.ALB: self.albs_by_sg,
            TargetType.NLB: self.nlbs_by_sg,
            TargetType.ELB: self.elbs_by_sg,
        }[target_type]

    def associate(self, clb: ConsolidatedLoadBalancer, security_groups: list[str]) -> None:
        """Point each of `security_groups` at `clb`, replacing older associations."""
        index = self.sg_index_for(clb.target_type)
        for group_id in security_groups:
            index[group_id] = clb

    def to_dict(self) -> dict[str, Any]:
        return {
            "subnets": list(self.subnets),
            "albs": [clb.to_dict() for clb in self.albs],
            "nlbs": [clb.to_dict() for clb in self.nlbs],
            "elbs": [clb.to_dict() for clb in self.elbs],
        }


__all__ = [
    "ConsolidatedLoadBalancer",
    "ExistingLoadBalancer",
    "IngressPermission",
    "Listener",
    "Recommendation",
    "SecurityGroup",
    "TargetType",
]
