"""AWS CLI subprocess execution with retry logic.

Provides run_aws_command() - a thin wrapper around subprocess.run that
adds automatic retry with exponential backoff for transient AWS CLI
failures (throttling surfaces as CalledProcessError, hung calls as
TimeoutExpired).

Usage:
    from elbpruner.aws_cli_executor import run_aws_command

    result = run_aws_command(["aws", "elb", "describe-load-balancers", "--output", "json"])
"""

import logging
import subprocess

from elbpruner.retry_config import get_retry_config
from elbpruner.retry_handler import retry_with_exponential_backoff

logger = logging.getLogger(__name__)


def run_aws_command(
    cmd: list[str],
    *,
    timeout: int = 60,
    max_attempts: int | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute an AWS CLI command with retry logic.

    Args:
        cmd: Command list starting with "aws", e.g. ["aws", "elb", "describe-load-balancers"]
        timeout: Subprocess timeout in seconds (default: 60)
        max_attempts: Number of attempts (default: from RetryConfig)

    Returns:
        subprocess.CompletedProcess with stdout/stderr

    Raises:
        subprocess.CalledProcessError: After retries exhausted
        subprocess.TimeoutExpired: After retries exhausted
        FileNotFoundError: If the aws executable is not installed
    """
    config = get_retry_config()
    attempts = max_attempts or config.aws_cli_max_attempts

    @retry_with_exponential_backoff(
        max_attempts=attempts,
        initial_delay=config.aws_cli_initial_delay,
        max_delay=config.aws_cli_max_delay,
        jitter=config.jitter_enabled,
        retryable_exceptions=(subprocess.CalledProcessError, subprocess.TimeoutExpired),
    )
    def _run() -> subprocess.CompletedProcess[str]:
        logger.debug(f"Running: {' '.join(cmd)}")
        return subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=timeout)

    return _run()


__all__ = ["run_aws_command"]
