"""Load balancer inventory collection.

Collects the classic load balancers of an AWS account and the security
groups they reference, either live through the AWS CLI or from a JSON
snapshot written by a previous run. READ-ONLY - only `describe-*` calls
are made.

Snapshot format (the two AWS CLI responses merged into one document):

    {
        "LoadBalancerDescriptions": [...],
        "SecurityGroups": [...]
    }

Public API:
    Inventory: Load balancers plus the security groups they reference
    fetch_inventory: Describe the live account through the AWS CLI
    load_inventory: Read a JSON snapshot
    save_inventory: Write a JSON snapshot
"""

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from elbpruner.aws_cli_executor import run_aws_command
from elbpruner.exceptions import InventoryError
from elbpruner.models import ExistingLoadBalancer, SecurityGroup

logger = logging.getLogger(__name__)


@dataclass
class Inventory:
    """Everything the consolidation engine needs about an account."""

    load_balancers: list[ExistingLoadBalancer] = field(default_factory=list)
    security_groups: dict[str, SecurityGroup] = field(default_factory=dict)

    def referenced_security_groups(self) -> list[str]:
        """Security group ids used by any load balancer, first-seen order, deduplicated."""
        seen: dict[str, None] = {}
        for lb in self.load_balancers:
            for group_id in lb.security_groups:
                seen.setdefault(group_id, None)
        return list(seen)

    def missing_security_groups(self) -> list[str]:
        """Referenced security group ids that have no ingress data."""
        return [g for g in self.referenced_security_groups() if g not in self.security_groups]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Inventory":
        """Create from a snapshot document.

        Raises:
            InventoryError: If a load balancer or security group entry is malformed
        """
        try:
            load_balancers = [
                ExistingLoadBalancer.from_dict(lb)
                for lb in data.get("LoadBalancerDescriptions") or []
            ]
            groups = [SecurityGroup.from_dict(sg) for sg in data.get("SecurityGroups") or []]
        except (KeyError, TypeError, ValueError) as e:
            raise InventoryError(f"Malformed inventory entry: {e!r}") from e

        return cls(
            load_balancers=load_balancers,
            security_groups={group.group_id: group for group in groups},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "LoadBalancerDescriptions": [lb.to_dict() for lb in self.load_balancers],
            "SecurityGroups": [group.to_dict() for group in self.security_groups.values()],
        }


def _base_command(service: str, operation: str, profile: str | None, region: str | None) -> list[str]:
    cmd = ["aws", service, operation, "--output", "json"]
    if profile:
        cmd.extend(["--profile", profile])
    if region:
        cmd.extend(["--region", region])
    return cmd


def _describe(cmd: list[str]) -> dict[str, Any]:
    """Run a describe command and parse its JSON output.

    Raises:
        InventoryError: If the command fails after retries or prints invalid JSON
    """
    try:
        result = run_aws_command(cmd)
    except FileNotFoundError as e:
        raise InventoryError("AWS CLI not found. Please install it first.") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise InventoryError(f"AWS CLI command failed: {' '.join(cmd[:3])}: {stderr}") from e
    except subprocess.TimeoutExpired as e:
        raise InventoryError(f"AWS CLI command timed out: {' '.join(cmd[:3])}") from e

    try:
        return json.loads(result.stdout) if result.stdout.strip() else {}
    except json.JSONDecodeError as e:
        raise InventoryError(f"Invalid JSON from {' '.join(cmd[:3])}: {e}") from e


def fetch_inventory(profile: str | None = None, region: str | None = None) -> Inventory:
    """Describe the classic load balancers and their security groups.

    The AWS CLI follows pagination tokens itself, so one call per service
    returns the complete listing.

    Args:
        profile: AWS named profile (optional)
        region: AWS region (optional, defaults to the profile's region)

    Returns:
        Inventory with every load balancer and every referenced security group

    Raises:
        InventoryError: If the AWS CLI fails or returns malformed data
    """
    lb_data = _describe(_base_command("elb", "describe-load-balancers", profile, region))
    inventory = Inventory.from_dict(
        {"LoadBalancerDescriptions": lb_data.get("LoadBalancerDescriptions", [])}
    )
    logger.info(f"Found {len(inventory.load_balancers)} classic load balancer(s)")

    group_ids = inventory.referenced_security_groups()
    if group_ids:
        cmd = _base_command("ec2", "describe-security-groups", profile, region)
        cmd.extend(["--group-ids", *group_ids])
        sg_data = _describe(cmd)
        inventory.security_groups = Inventory.from_dict(
            {"SecurityGroups": sg_data.get("SecurityGroups", [])}
        ).security_groups
        logger.info(f"Described {len(inventory.security_groups)} security group(s)")

    missing = inventory.missing_security_groups()
    if missing:
        raise InventoryError(f"Security groups not returned by AWS: {', '.join(missing)}")

    return inventory


def load_inventory(path: str | Path) -> Inventory:
    """Read an inventory snapshot from a JSON file.

    Raises:
        InventoryError: If the file cannot be read or parsed, or a referenced
            security group has no ingress data
    """
    path = Path(path).expanduser()
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise InventoryError(f"Inventory file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise InventoryError(f"Failed to read inventory {path}: {e}") from e

    if not isinstance(data, dict):
        raise InventoryError(f"Inventory {path} must be a JSON object")

    inventory = Inventory.from_dict(data)
    missing = inventory.missing_security_groups()
    if missing:
        raise InventoryError(f"Inventory {path} has no ingress data for: {', '.join(missing)}")

    logger.debug(
        f"Loaded {len(inventory.load_balancers)} load balancer(s) and "
        f"{len(inventory.security_groups)} security group(s) from {path}"
    )
    return inventory


def save_inventory(inventory: Inventory, path: str | Path) -> Path:
    """Write an inventory snapshot to a JSON file.

    Raises:
        InventoryError: If the file cannot be written
    """
    path = Path(path).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(inventory.to_dict(), f, indent=2)
    except OSError as e:
        raise InventoryError(f"Failed to write inventory {path}: {e}") from e

    logger.debug(f"Saved inventory to {path}")
    return path


__all__ = ["Inventory", "fetch_inventory", "load_inventory", "save_inventory"]
