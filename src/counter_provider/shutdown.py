"""Graceful shutdown handling for the counter input provider."""
import logging
import signal
import threading
from collections.abc import Callable

from counter_provider.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class ShutdownHandler:
    """Turn SIGTERM/SIGINT into cancellation of a shared token."""

    def __init__(self, token: CancellationToken | None = None, install_signals: bool = True):
        """Initialize shutdown handler.

        Args:
            token: Token to cancel on shutdown (a new one is created if omitted)
            install_signals: Whether to register SIGTERM/SIGINT handlers
        """
        self.token = token or CancellationToken()
        self._cleanup_functions: list[Callable] = []
        self._original_handlers = {}
        self._signal_received: int | None = None
        self._cleaned_up = False
        self._cancel_dispatched = False

        if install_signals:
            self._register_signal_handlers()

    def _register_signal_handlers(self):
        """Register signal handlers for graceful shutdown."""
        signals = [signal.SIGTERM, signal.SIGINT]

        for sig in signals:
            self._original_handlers[sig] = signal.signal(sig, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals.

        Only cancels the token; cleanup functions run from ``shutdown()``.
        The cancel runs on a helper thread: the signal may interrupt this
        thread while it holds the token's internal lock inside ``wait()``.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        self._signal_received = signum
        if self._cancel_dispatched:
            return
        self._cancel_dispatched = True
        threading.Thread(target=self.token.cancel, name="shutdown-cancel", daemon=True).start()

    def register_cleanup(self, func: Callable):
        """Register a cleanup function to be called on shutdown.

        Args:
            func: Cleanup function to register
        """
        self._cleanup_functions.append(func)

    def wait_for_shutdown(self, timeout: float | None = None) -> bool:
        """Wait for a shutdown request.

        Returns:
            True if shutdown was requested, False on timeout
        """
        return self.token.wait(timeout)

    def request_shutdown(self):
        """Request cancellation without running cleanup."""
        self.token.cancel()

    def shutdown(self):
        """Cancel the token, run cleanup functions and restore signal handlers."""
        self.token.cancel()

        if self._cleaned_up:
            return
        self._cleaned_up = True

        if self._signal_received is not None:
            logger.info(f"Received signal {self._signal_received}, shut down gracefully")

        for func in reversed(self._cleanup_functions):
            try:
                func()
            except Exception as e:
                logger.error(f"Error during cleanup: {e}")

        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers = {}

    def is_shutting_down(self) -> bool:
        """Check if shutdown has been requested.

        Returns:
            True if shutting down
        """
        return self.token.is_cancelled

    @property
    def signal_received(self) -> int | None:
        """Number of the signal that triggered shutdown, if any."""
        return self._signal_received


def create_shutdown_handler(token: CancellationToken | None = None) -> ShutdownHandler:
    """Create and return a shutdown handler.

    Returns:
        ShutdownHandler instance
    """
    return ShutdownHandler(token)
