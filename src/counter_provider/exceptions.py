"""Custom exceptions for the counter input provider.

Cancellation is deliberately absent from this module: a stop request is a
normal way for a run to end and is reported through ``StopReason``.
"""

import logging
from typing import Any, Optional


class CounterProviderException(Exception):
    """Base exception for all counter provider errors.

    Provides common functionality for error reporting and logging.
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
        original_error: Optional[Exception] = None
    ):
        """Initialize counter provider exception.

        Args:
            message: Main error message
            details: Additional technical details
            suggestions: List of suggested solutions
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.suggestions = suggestions or []
        self.original_error = original_error

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with appropriate level."""
        logger = logging.getLogger(self.__class__.__module__)
        logger.error(f"{self.__class__.__name__}: {self.message}")
        if self.details:
            logger.debug(f"Details: {self.details}")
        if self.original_error:
            logger.debug(f"Original error: {self.original_error}")

    def get_user_message(self) -> str:
        """Get user-friendly error message with suggestions."""
        msg = self.message
        if self.details:
            msg += f"\n{self.details}"
        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"
        return msg


# Configuration exceptions

class ConfigurationException(CounterProviderException):
    """Base exception for configuration errors."""
    pass


class ConfigurationError(ConfigurationException):
    """Raised when provider configuration is invalid or cannot be read."""

    def __init__(
        self,
        config_errors: list[str],
        source: str = "configuration",
        original_error: Optional[Exception] = None
    ):
        error_list = "\n".join(f"  - {error}" for error in config_errors)

        suggestions = [
            "Use non-negative integers for 'interval' (milliseconds) and 'max_count'",
            "Pass configuration as a JSON object, e.g. {\"interval\": 1000, \"max_count\": 0}",
        ]

        super().__init__(
            message=f"Invalid {source}",
            details=f"Configuration errors:\n{error_list}",
            suggestions=suggestions,
            original_error=original_error
        )
        self.source = source
        self.config_errors = config_errors


# Output exceptions

class OutputError(CounterProviderException):
    """Raised when an envelope cannot be written to the output stream."""

    def __init__(self, record_value: Any, write_error: Exception):
        super().__init__(
            message=f"Failed to write record {record_value} to output",
            details=f"Write error: {write_error}",
            suggestions=[
                "Check that the consuming process is still reading stdout",
            ],
            original_error=write_error
        )
        self.record_value = record_value
