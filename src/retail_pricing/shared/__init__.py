"""Shared value types, exceptions, and logging utilities for the pricing engine."""

from retail_pricing.shared.exceptions import (
    ConfigurationError,
    CurrencyMismatchError,
    InvalidMoneyError,
    RetailPricingException,
    RuleLoadError,
)
from retail_pricing.shared.money import Money

__all__ = [
    "Money",
    "RetailPricingException",
    "InvalidMoneyError",
    "CurrencyMismatchError",
    "RuleLoadError",
    "ConfigurationError",
]
