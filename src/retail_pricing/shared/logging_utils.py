"""Structured logging utilities for pricing audit records."""
import json
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_correlation_id: ContextVar[str | None] = ContextVar(
    "retail_pricing_correlation_id", default=None
)


class StructuredLogger:
    """
    Structured logger with correlation ID support.

    The correlation ID lives in a context variable, so one logger instance can
    be shared by concurrent pricing calls without mixing their IDs.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    @property
    def correlation_id(self) -> str | None:
        return _correlation_id.get()

    def set_correlation_id(self, correlation_id: str):
        """Set correlation ID for current context."""
        _correlation_id.set(correlation_id)

    def clear_correlation_id(self):
        """Clear correlation ID."""
        _correlation_id.set(None)

    def generate_correlation_id(self) -> str:
        """Generate new correlation ID."""
        return f"PRC_{uuid.uuid4().hex[:12]}"

    @contextmanager
    def correlation(self, correlation_id: str | None = None) -> Iterator[str]:
        """
        Scope a correlation ID to a block, restoring the previous one after.

        An ID already set by the caller is kept unless one is passed in.
        """
        current = _correlation_id.get()
        resolved = correlation_id or current or self.generate_correlation_id()
        token = _correlation_id.set(resolved)
        try:
            yield resolved
        finally:
            _correlation_id.reset(token)

    def _format_message(self, level: str, message: str, **kwargs) -> dict:
        """Format log message with structured data."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": level,
            "message": message,
            "correlation_id": _correlation_id.get() or "none",
        }

        if kwargs:
            log_entry["context"] = kwargs

        return log_entry

    def info(self, message: str, **kwargs):
        """Log info with structured data."""
        if self.logger.isEnabledFor(logging.INFO):
            entry = self._format_message("INFO", message, **kwargs)
            self.logger.info(json.dumps(entry, default=str))

    def debug(self, message: str, **kwargs):
        """Log debug with structured data."""
        if self.logger.isEnabledFor(logging.DEBUG):
            entry = self._format_message("DEBUG", message, **kwargs)
            self.logger.debug(json.dumps(entry, default=str))


def get_structured_logger(name: str) -> StructuredLogger:
    """Get or create structured logger."""
    return StructuredLogger(name)
