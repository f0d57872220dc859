"""Cooperative cancellation signal shared between the host and the generator."""
import threading


class CancellationToken:
    """Thread-safe, one-shot stop request.

    The token can be cancelled from any thread. ``cancel()`` takes a lock, so
    a signal handler should call it from another thread (``ShutdownHandler``
    does). Once cancelled it stays cancelled.
    """

    def __init__(self):
        """Initialize an uncancelled token."""
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation. Calling it more than once is harmless."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or until ``timeout`` seconds pass.

        Args:
            timeout: Maximum time to wait in seconds (None for unlimited)

        Returns:
            True if the token was cancelled, False if the timeout elapsed
        """
        return self._event.wait(timeout)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"
