"""
Configuration models for the retail pricing engine.

These models define the structure and validation for the optional
pricing.json file read by ``load_config``.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from retail_pricing.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class PricingEngineConfig(BaseModel):
    """Main configuration model for the pricing engine."""

    default_currency: str = Field(
        "IDR",
        min_length=3,
        max_length=3,
        description="Currency used when a transaction has no lines to take it from",
    )
    audit_log_enabled: bool = Field(
        True, description="Emit one structured audit record per priced line"
    )
    log_level: str = Field("INFO", description="Log level for configure_structured_logging")
    savings_precision: int = Field(
        2, ge=0, le=6, description="Decimal places of the reported savings percentage"
    )

    @field_validator("default_currency")
    @classmethod
    def validate_currency_code(cls, v: str) -> str:
        """Validate currency is 3 letters."""
        if not v.isalpha():
            raise ValueError("default_currency must be exactly 3 alphabetic characters")
        return v.upper()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_file(cls, file_path: str | Path) -> "PricingEngineConfig":
        """
        Load configuration from a JSON file.

        Args:
            file_path: Path to the configuration JSON file

        Returns:
            PricingEngineConfig instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigurationError: If the JSON is invalid
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        try:
            with path.open("r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON: {e}", path) from e

        return cls(**data)

    def to_file(self, file_path: str | Path) -> None:
        """
        Save configuration to a JSON file.

        Args:
            file_path: Path where to save the configuration file
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w") as f:
            json.dump(self.model_dump(), f, indent=2)
