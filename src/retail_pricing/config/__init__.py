"""Configuration models and loading for the retail pricing engine."""

from .models import PricingEngineConfig
from .settings import create_default_config, load_config

__all__ = ["PricingEngineConfig", "load_config", "create_default_config"]
