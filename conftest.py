"""Pytest configuration for elb-pruner tests.

CRITICAL: Protects the user's configuration from test modifications.
"""

import os
import shutil
from pathlib import Path

import pytest


@pytest.fixture(scope="session", autouse=True)
def protect_production_config():
    """Protect ~/.elbpruner/config.toml from being modified by tests.

    Backs up the real config.toml before any tests run and restores it
    after all tests complete.
    """
    config_path = Path.home() / ".elbpruner" / "config.toml"
    backup_path = Path.home() / ".elbpruner" / ".config.toml.pytest-backup"

    config_existed = config_path.exists()
    if config_existed:
        shutil.copy2(config_path, backup_path)

    yield

    if config_existed and backup_path.exists():
        shutil.copy2(backup_path, config_path)
        backup_path.unlink()
    elif backup_path.exists():
        backup_path.unlink()


@pytest.fixture(scope="session", autouse=True)
def prevent_real_aws_calls():
    """Mark test mode so nothing reaches a real AWS account by accident."""
    os.environ["ELBPRUNER_TEST_MODE"] = "true"

    yield

    os.environ.pop("ELBPRUNER_TEST_MODE", None)
