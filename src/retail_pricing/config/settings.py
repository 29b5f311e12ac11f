"""
Configuration loading and management for the retail pricing engine.

This module provides utilities for loading, validating, and managing
configuration settings. Every setting has a default, so a missing file is
not an error unless an explicit path was given.
"""

import logging
import os
from pathlib import Path

from .models import PricingEngineConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "RETAIL_PRICING_"

_ENV_FIELDS = {
    "DEFAULT_CURRENCY": "default_currency",
    "AUDIT_LOG_ENABLED": "audit_log_enabled",
    "LOG_LEVEL": "log_level",
    "SAVINGS_PRECISION": "savings_precision",
}


def _env_overrides() -> dict[str, str]:
    overrides = {}
    for suffix, field in _ENV_FIELDS.items():
        value = os.getenv(f"{ENV_PREFIX}{suffix}")
        if value is not None and value.strip() != "":
            overrides[field] = value.strip()
    return overrides


def load_config(
    config_path: str | Path | None = None, config_name: str = "pricing.json"
) -> PricingEngineConfig:
    """
    Load configuration from file with intelligent path resolution.

    ``RETAIL_PRICING_*`` environment variables override values from the file.

    Args:
        config_path: Explicit path to config file or directory containing config
        config_name: Name of config file (default: "pricing.json")

    Returns:
        PricingEngineConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If configuration is invalid
    """
    if config_path is None:
        search_paths = [
            Path.cwd() / config_name,
            Path.cwd() / "config" / config_name,
        ]

        for path in search_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None:
        logger.debug(f"No {config_name} found, using defaults")
        data = PricingEngineConfig().model_dump()
    else:
        config_path = Path(config_path)

        # If path is a directory, look for config file inside it
        if config_path.is_dir():
            config_path = config_path / config_name

        data = PricingEngineConfig.from_file(config_path).model_dump()

    overrides = _env_overrides()
    if overrides:
        logger.info(f"Applying environment overrides: {sorted(overrides)}")
        data.update(overrides)

    return PricingEngineConfig(**data)


def create_default_config(output_path: str | Path) -> PricingEngineConfig:
    """
    Create a default configuration file with standard values.

    Args:
        output_path: Where to save the default config file

    Returns:
        PricingEngineConfig: The default configuration
    """
    default_config = PricingEngineConfig()
    default_config.to_file(output_path)
    return default_config
