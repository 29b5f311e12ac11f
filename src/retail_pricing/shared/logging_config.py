"""Logging configuration for structured logging."""
import logging
import sys


def configure_structured_logging(level: str = "INFO", stream=None):
    """Configure structured logging for applications embedding the engine."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",  # JSON already formatted
        stream=stream or sys.stdout,
    )

    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger("retail_pricing").setLevel(getattr(logging, level.upper()))

    # Pydantic schema building is noisy at DEBUG
    logging.getLogger("pydantic").setLevel(logging.WARNING)
