"""Inter-record delay for controlled record generation."""
import threading
import time

from counter_provider.cancellation import CancellationToken

# Longest single blocking wait; longer intervals are waited out in slices
MAX_WAIT_SECONDS = min(threading.TIMEOUT_MAX, 86400.0)


class IntervalPacer:
    """Fixed, cancellable delay between emissions."""

    def __init__(self, interval_ms: int):
        """Initialize the pacer.

        Args:
            interval_ms: Delay between emissions in milliseconds
        """
        self.interval_ms = interval_ms
        self.interval = interval_ms / 1000.0 if interval_ms > 0 else 0

    def wait(self, cancel: CancellationToken) -> bool:
        """Wait for one interval unless cancelled first.

        With a zero interval there is no delay, but the thread still yields
        once so a busy consumer cannot starve the rest of the process.

        Args:
            cancel: Token that cuts the wait short when cancelled

        Returns:
            True if the interval elapsed, False if cancellation was observed
        """
        if self.interval <= 0:
            time.sleep(0)
            return not cancel.is_cancelled

        deadline = time.monotonic() + self.interval
        remaining = self.interval
        while remaining > 0:
            if cancel.wait(min(remaining, MAX_WAIT_SECONDS)):
                return False
            remaining = deadline - time.monotonic()
        return not cancel.is_cancelled
