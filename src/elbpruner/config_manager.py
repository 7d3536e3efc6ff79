"""Configuration management module.

This module handles persistent configuration storage using TOML format.
Stores user preferences like the AWS profile and region to inspect, and
the relative costs used for the savings estimate.

Security:
- Config file permissions: 0600 (owner read/write only)
- No credentials are ever stored; the AWS CLI resolves them from the profile
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for Python versions shipping tomllib
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

try:
    import tomlkit
except ImportError as e:
    raise ImportError("tomlkit library not available. Install with: pip install tomlkit") from e

from elbpruner.consolidation.aggregator import REPLACEMENT_COST_FACTOR, RETAINED_COST_FACTOR
from elbpruner.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class ElbPrunerConfig:
    """elb-pruner configuration data."""

    aws_profile: str | None = None
    aws_region: str | None = None
    replacement_cost_factor: float = REPLACEMENT_COST_FACTOR  # ALB/NLB cost vs one ELB
    retained_cost_factor: float = RETAINED_COST_FACTOR

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        data = asdict(self)
        # TOML has no null
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ElbPrunerConfig":
        """Create from dictionary.

        Raises:
            ConfigError: If a cost factor is not a non-negative number
        """
        return cls(
            aws_profile=data.get("aws_profile"),
            aws_region=data.get("aws_region"),
            replacement_cost_factor=_cost_factor(
                data.get("replacement_cost_factor", REPLACEMENT_COST_FACTOR),
                "replacement_cost_factor",
            ),
            retained_cost_factor=_cost_factor(
                data.get("retained_cost_factor", RETAINED_COST_FACTOR), "retained_cost_factor"
            ),
        )

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in fields(cls)]


def _cost_factor(value: Any, key: str) -> float:
    try:
        factor = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}") from e
    if factor < 0:
        raise ConfigError(f"{key} must not be negative, got {factor}")
    return factor


class ConfigManager:
    """Manage elb-pruner configuration file.

    Configuration is stored at ~/.elbpruner/config.toml with secure permissions.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".elbpruner"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file
        """
        if custom_path:
            return Path(custom_path).expanduser().resolve()
        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def ensure_config_dir(cls, config_path: Path) -> Path:
        """Ensure the config file's directory exists.

        Raises:
            ConfigError: If directory creation fails
        """
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            if config_path.parent == cls.DEFAULT_CONFIG_DIR:
                os.chmod(config_path.parent, 0o700)
            return config_path.parent
        except OSError as e:
            raise ConfigError(f"Failed to create config directory: {e}") from e

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> ElbPrunerConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            ElbPrunerConfig object (defaults if the file does not exist)

        Raises:
            ConfigError: If loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            if custom_path:
                raise ConfigError(f"Config file not found: {config_path}")
            logger.debug("Config file not found, using defaults")
            return ElbPrunerConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)  # type: ignore[attr-defined]
        except Exception as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return ElbPrunerConfig.from_dict(data)

    @classmethod
    def save_config(cls, config: ElbPrunerConfig, custom_path: str | None = None) -> Path:
        """Save configuration to file.

        Uses tomlkit so comments in an existing file survive, and an atomic
        rename so a failed write never leaves a truncated file.

        Raises:
            ConfigError: If saving fails
        """
        config_path = cls.get_config_path(custom_path)
        temp_path = config_path.with_suffix(".tmp")
        try:
            cls.ensure_config_dir(config_path)

            if config_path.exists():
                with open(config_path) as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()

            values = config.to_dict()
            for key in ElbPrunerConfig.keys():
                if key in values:
                    doc[key] = values[key]
                elif key in doc:
                    del doc[key]

            with open(temp_path, "w") as f:
                tomlkit.dump(doc, f)
            os.chmod(temp_path, 0o600)
            temp_path.replace(config_path)

            logger.debug(f"Saved config to: {config_path}")
            return config_path

        except Exception as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e

    @classmethod
    def update_config(cls, custom_path: str | None = None, **updates: Any) -> ElbPrunerConfig:
        """Update configuration values.

        Raises:
            ConfigError: If a key is unknown, a value is invalid, or saving fails
        """
        if cls.get_config_path(custom_path).exists():
            data = cls.load_config(custom_path).to_dict()
        else:
            data = ElbPrunerConfig().to_dict()

        for key, value in updates.items():
            if key not in ElbPrunerConfig.keys():
                raise ConfigError(
                    f"Unknown config key: {key} (valid keys: {', '.join(ElbPrunerConfig.keys())})"
                )
            data[key] = value

        config = ElbPrunerConfig.from_dict(data)
        cls.save_config(config, custom_path)
        return config

    @classmethod
    def get_profile(cls, cli_value: str | None = None, custom_path: str | None = None) -> str | None:
        """Get AWS profile with CLI override."""
        if cli_value:
            return cli_value
        return cls.load_config(custom_path).aws_profile

    @classmethod
    def get_region(cls, cli_value: str | None = None, custom_path: str | None = None) -> str | None:
        """Get AWS region with CLI override."""
        if cli_value:
            return cli_value
        return cls.load_config(custom_path).aws_region


__all__ = ["ConfigManager", "ElbPrunerConfig"]
