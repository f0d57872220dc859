"""Logging configuration for the counter input provider.

stdout is the provider's data channel, so every handler installed here
writes to stderr or to a file.
"""

import json
import logging
import sys
import time
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else was passed via ``extra``
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Structured formatter for better log parsing and analysis."""

    def __init__(self, json_format: bool = False):
        super().__init__()
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information."""
        log_data = {
            'timestamp': time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(record.created)),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        custom_attrs = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        }
        if custom_attrs:
            log_data['context'] = custom_attrs

        if self.json_format:
            return json.dumps(log_data, default=str)

        msg = f"{log_data['timestamp']} - {log_data['level']} - {log_data['logger']} - {log_data['message']}"
        if 'context' in log_data:
            context_str = ', '.join(f"{k}={v}" for k, v in log_data['context'].items())
            msg += f" [{context_str}]"
        if 'exception' in log_data:
            msg += f"\n{log_data['exception']}"
        return msg


class ProviderLogger:
    """Logger for provider lifecycle events with context tracking."""

    def __init__(self, name: str):
        """Initialize provider logger.

        Args:
            name: Logger name (typically module name)
        """
        self.logger = logging.getLogger(name)
        self._context: Dict[str, Any] = {}

    def set_context(self, **context: Any) -> None:
        """Set context for subsequent log messages."""
        self._context.update(context)

    def clear_context(self) -> None:
        """Clear context."""
        self._context.clear()

    def _log_with_context(self, level: int, message: str, **extra: Any) -> None:
        context = {**self._context, **extra}
        self.logger.log(level, message, extra=context)

    def debug(self, message: str, **context: Any) -> None:
        """Log debug message with context."""
        self._log_with_context(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Log info message with context."""
        self._log_with_context(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Log warning message with context."""
        self._log_with_context(logging.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        """Log error message with context."""
        self._log_with_context(logging.ERROR, message, **context)

    def log_start(self, interval_ms: int, max_count: int) -> None:
        """Log the start of a generator run."""
        self.info("counter_input_start", interval_ms=interval_ms, max_count=max_count)

    def log_emit(self, seq: int) -> None:
        """Log one emitted record."""
        self.debug("counter_emit", seq=seq, payload=seq)

    def log_complete(self, max_count: int) -> None:
        """Log that the configured bound was reached."""
        self.info("counter_input_complete", reached_max_count=max_count)

    def log_cancelled(self) -> None:
        """Log that cancellation stopped the run."""
        self.info("counter_input_cancelled")

    def log_stopped(self, final_count: int, reason: str) -> None:
        """Log the terminal state of a run."""
        self.info("counter_input_stopped", final_count=final_count, reason=reason)


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging for the provider process.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        json_format: Whether to use JSON format for logs
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    formatter = StructuredFormatter(json_format=json_format)

    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)  # Always debug level for files
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file else numeric_level,
        handlers=handlers,
        force=True
    )

    logging.getLogger('counter_provider').setLevel(
        logging.DEBUG if log_file else numeric_level
    )


def get_provider_logger(name: str) -> ProviderLogger:
    """Get a provider logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        ProviderLogger instance
    """
    return ProviderLogger(name)
