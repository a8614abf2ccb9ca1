"""Configuration management for infoavi.

Supports loading configuration from:
1. Environment variables (INFOAVI_*)
2. Config file (~/.infoavi/config.yaml)
3. Default values

Example config file (~/.infoavi/config.yaml):
    walker:
      item_limit: 50        # or "none" for no truncation
      max_depth: 16
    output:
      trace: false
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from infoavi.parser.base import DEFAULT_ITEM_LIMIT, DEFAULT_MAX_DEPTH, UNLIMITED

# Config file search locations (in priority order)
CONFIG_LOCATIONS = [
    Path.home() / ".infoavi" / "config.yaml",
    Path.home() / ".config" / "infoavi" / "config.yaml",
    Path(".infoavi.yaml"),
]


@dataclass
class WalkerConfig:
    """Chunk walker configuration."""

    item_limit: int = DEFAULT_ITEM_LIMIT
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class OutputConfig:
    """Output configuration."""

    trace: bool = True


@dataclass
class InfoAviConfig:
    """Main configuration for infoavi."""

    walker: WalkerConfig = field(default_factory=WalkerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _load_yaml_config() -> dict[str, Any]:
    """Load configuration from the first YAML file found."""
    for config_path in CONFIG_LOCATIONS:
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f)
                    return data if isinstance(data, dict) else {}
            except (OSError, yaml.YAMLError):
                continue
    return {}


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with INFOAVI_ prefix."""
    return os.environ.get(f"INFOAVI_{key}", default)


def _parse_bool(value: str | None) -> bool | None:
    """Parse boolean from string."""
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes", "on")


def parse_item_limit(value: Any) -> int:
    """Parse an item limit; ``none``/``unlimited`` disable truncation.

    A YAML null is treated the same way.

    Raises:
        ValueError: If the value is not a positive integer
    """
    if value is None or (
        isinstance(value, str) and value.strip().lower() in ("none", "unlimited")
    ):
        return UNLIMITED
    return _parse_positive(value, "item limit")


def parse_max_depth(value: Any) -> int:
    """Parse a LIST nesting bound.

    Raises:
        ValueError: If the value is not a positive integer
    """
    return _parse_positive(value, "max depth")


def _parse_positive(value: Any, name: str) -> int:
    # Strings must be plain unsigned decimals ("5_0", "+5" and " 5" are rejected)
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            raise ValueError(f"{name} must be a positive integer, got {value!r}")
        number = int(value)
    elif isinstance(value, int) and not isinstance(value, bool):
        number = value
    else:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    if number < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return number


def load_config() -> InfoAviConfig:
    """Load configuration from file and environment variables.

    Priority (highest first):
    1. Environment variables (INFOAVI_*)
    2. Config file (~/.infoavi/config.yaml)
    3. Default values

    Raises:
        ValueError: If a walker setting is not a positive integer
    """
    file_config = _load_yaml_config()

    # Walker config
    walker_config = file_config.get("walker") or {}
    walker = WalkerConfig(
        item_limit=parse_item_limit(
            _get_env("ITEM_LIMIT") or walker_config.get("item_limit", DEFAULT_ITEM_LIMIT)
        ),
        max_depth=parse_max_depth(
            _get_env("MAX_DEPTH") or walker_config.get("max_depth", DEFAULT_MAX_DEPTH)
        ),
    )

    # Output config
    output_config = file_config.get("output") or {}
    output = OutputConfig(
        trace=(
            _parse_bool(_get_env("TRACE"))
            if _get_env("TRACE")
            else bool(output_config.get("trace", True))
        ),
    )

    return InfoAviConfig(walker=walker, output=output)


# Global config instance (lazy loaded)
_config: InfoAviConfig | None = None


def get_config() -> InfoAviConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
