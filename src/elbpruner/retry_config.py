"""Configuration for retry logic.

This module provides configurable retry settings for AWS CLI calls made
while collecting the load balancer inventory.

Design Philosophy:
- Ruthless simplicity: Single configuration object
- Sensible defaults: Works out of the box
- Environment-aware: Can be overridden via env vars
"""

import os
from dataclasses import dataclass


@dataclass
class RetryConfig:
    """Retry configuration settings for AWS CLI operations."""

    aws_cli_max_attempts: int = 3
    aws_cli_initial_delay: float = 1.0
    aws_cli_max_delay: float = 30.0
    jitter_enabled: bool = True

    @classmethod
    def from_environment(cls) -> "RetryConfig":
        """Load retry configuration from environment variables.

        Environment variables (all optional):
            ELBPRUNER_RETRY_MAX_ATTEMPTS: Max attempts per AWS CLI call (default: 3)
            ELBPRUNER_RETRY_INITIAL_DELAY: Initial delay in seconds (default: 1.0)
            ELBPRUNER_RETRY_MAX_DELAY: Max delay in seconds (default: 30.0)
            ELBPRUNER_RETRY_JITTER_ENABLED: Enable jitter (default: true)

        Returns:
            RetryConfig with values from environment or defaults
        """
        return cls(
            aws_cli_max_attempts=int(os.getenv("ELBPRUNER_RETRY_MAX_ATTEMPTS", "3")),
            aws_cli_initial_delay=float(os.getenv("ELBPRUNER_RETRY_INITIAL_DELAY", "1.0")),
            aws_cli_max_delay=float(os.getenv("ELBPRUNER_RETRY_MAX_DELAY", "30.0")),
            jitter_enabled=os.getenv("ELBPRUNER_RETRY_JITTER_ENABLED", "true").lower() == "true",
        )


# Global configuration instance (lazily loaded)
_config: RetryConfig | None = None


def get_retry_config() -> RetryConfig:
    """Get global retry configuration (loaded from environment on first access)."""
    global _config
    if _config is None:
        _config = RetryConfig.from_environment()
    return _config


def reset_retry_config() -> None:
    """Reset global retry configuration.

    Forces reload from environment on next access.
    """
    global _config
    _config = None


__all__ = ["RetryConfig", "get_retry_config", "reset_retry_config"]
