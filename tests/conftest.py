"""
Shared test fixtures and configuration for elb-pruner tests.

This module provides common fixtures used across all test types:
- Builders for load balancers and security groups
- Sample inventories in AWS CLI JSON shape
- Isolated config files
"""

from typing import Any

import pytest

from elbpruner.models import ExistingLoadBalancer, IngressPermission, Listener, SecurityGroup

# ============================================================================
# MODEL BUILDERS
# ============================================================================


def _build_lb(
    name: str,
    subnets: list[str],
    listeners: list[tuple[int, str]],
    security_groups: list[str] | None = None,
) -> ExistingLoadBalancer:
    """Build an ExistingLoadBalancer from (port, protocol) listener tuples."""
    return ExistingLoadBalancer(
        name=name,
        subnets=subnets,
        listeners=[Listener(port=port, protocol=protocol) for port, protocol in listeners],
        security_groups=security_groups or [],
    )


def _build_sg(group_id: str, *ranges: str, port: int = 443) -> SecurityGroup:
    """Build a SecurityGroup with a single TCP ingress rule from `ranges`."""
    return SecurityGroup(
        group_id=group_id,
        ingress=[
            IngressPermission(
                source_ranges=list(ranges), protocol="tcp", from_port=port, to_port=port
            )
        ],
    )


@pytest.fixture
def make_lb():
    """Factory for ExistingLoadBalancer: make_lb(name, subnets, [(port, protocol)], [sg])."""
    return _build_lb


@pytest.fixture
def make_sg():
    """Factory for SecurityGroup: make_sg(group_id, *ranges, port=443)."""
    return _build_sg


# ============================================================================
# INVENTORY FIXTURES
# ============================================================================


@pytest.fixture
def sample_inventory_data() -> dict[str, Any]:
    """Inventory document as written by `elb-pruner fetch`.

    Two web ELBs sharing a subnet and equivalent security groups, plus one
    TCP ELB in a separate tier.
    """
    return {
        "LoadBalancerDescriptions": [
            {
                "LoadBalancerName": "web-1",
                "Subnets": ["subnet-a", "subnet-b"],
                "ListenerDescriptions": [
                    {"Listener": {"LoadBalancerPort": 80, "Protocol": "HTTP"}},
                    {"Listener": {"LoadBalancerPort": 443, "Protocol": "HTTPS"}},
                ],
                "SecurityGroups": ["sg-web1"],
            },
            {
                "LoadBalancerName": "web-2",
                "Subnets": ["subnet-b"],
                "ListenerDescriptions": [
                    {"Listener": {"LoadBalancerPort": 443, "Protocol": "HTTPS"}},
                ],
                "SecurityGroups": ["sg-web2"],
            },
            {
                "LoadBalancerName": "cache",
                "Subnets": ["subnet-z"],
                "ListenerDescriptions": [
                    {"Listener": {"LoadBalancerPort": 11211, "Protocol": "TCP"}},
                ],
                "SecurityGroups": ["sg-cache"],
            },
        ],
        "SecurityGroups": [
            {
                "GroupId": "sg-web1",
                "IpPermissions": [
                    {"IpProtocol": "tcp", "FromPort": 80, "ToPort": 80,
                     "IpRanges": [{"CidrIp": "0.0.0.0/0"}]},
                    {"IpProtocol": "tcp", "FromPort": 443, "ToPort": 443,
                     "IpRanges": [{"CidrIp": "0.0.0.0/0"}]},
                ],
            },
            {
                "GroupId": "sg-web2",
                "IpPermissions": [
                    {"IpProtocol": "tcp", "FromPort": 443, "ToPort": 443,
                     "IpRanges": [{"CidrIp": "0.0.0.0/0"}]},
                ],
            },
            {
                "GroupId": "sg-cache",
                "IpPermissions": [
                    {"IpProtocol": "tcp", "FromPort": 11211, "ToPort": 11211,
                     "IpRanges": [{"CidrIp": "10.0.0.0/8"}]},
                ],
            },
        ],
    }


# ============================================================================
# CONFIG FIXTURES
# ============================================================================


@pytest.fixture
def isolated_config(tmp_path):
    """Provide an isolated config directory for tests.

    Use this fixture instead of modifying ~/.elbpruner/config.toml.
    """
    config_dir = tmp_path / ".elbpruner"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def mock_config_path(isolated_config, monkeypatch):
    """Point ConfigManager's default file at the isolated config directory."""
    from elbpruner.config_manager import ConfigManager

    config_file = isolated_config / "config.toml"
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_DIR", isolated_config)
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", config_file)
    return config_file
