"""
Custom exceptions for the retail pricing engine.

This module contains specialized exception classes for money arithmetic
misuse, rule hydration failures, and configuration problems. Rule invariant
violations at construction time surface as ``pydantic.ValidationError``;
ineligible rules are never exceptional and are reported through
``EvaluationResult`` instead.
"""

from pathlib import Path
from typing import Any


class RetailPricingException(Exception):
    """Base exception for all retail pricing engine errors."""

    pass


class InvalidMoneyError(RetailPricingException, ValueError):
    """Exception raised when a Money value would be negative or fractional."""

    def __init__(self, message: str, amount: Any | None = None):
        self.amount = amount

        if amount is not None:
            message = f"{message} (Amount: {amount})"

        super().__init__(message)


class CurrencyMismatchError(RetailPricingException, ValueError):
    """Exception raised when Money values of different currencies are combined."""

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Currency mismatch: {left} vs {right}")


class RuleLoadError(RetailPricingException):
    """Exception raised when one or more rule definitions fail validation."""

    def __init__(
        self,
        message: str,
        source: Path | None = None,
        validation_errors: list[str] | None = None,
        original_error: Exception | None = None,
    ):
        self.source = source
        self.validation_errors = validation_errors or []
        self.original_error = original_error

        error_parts = [message]

        if source:
            error_parts.append(f"Source: {source}")

        if validation_errors:
            error_parts.extend(
                [f"Validation error: {error}" for error in validation_errors]
            )

        if original_error:
            error_parts.append(f"Original error: {original_error}")

        super().__init__(" | ".join(error_parts))


class ConfigurationError(RetailPricingException):
    """Exception raised when engine configuration cannot be loaded."""

    def __init__(self, message: str, file_path: Path | None = None):
        self.file_path = file_path

        if file_path:
            message = f"Error loading configuration '{file_path}': {message}"

        super().__init__(message)
