"""Base generator interface for record generation."""
from abc import ABC, abstractmethod
from collections.abc import Iterator

from counter_provider.models import GeneratorState, Record, StopReason


class RecordGenerator(ABC):
    """Abstract base class for all record generators.

    A generator instance runs at most once. ``state`` follows
    IDLE -> EMITTING <-> WAITING -> STOPPED and never leaves STOPPED.
    """

    def __init__(self, max_count: int = 0):
        """Initialize the generator.

        Args:
            max_count: Maximum number of records to generate (0 for unlimited)
        """
        self.max_count = max_count
        self._count = 0
        self._started = False
        self._state = GeneratorState.IDLE
        self._stop_reason: StopReason | None = None

    @abstractmethod
    def generate(self) -> Iterator[Record]:
        """Generate records.

        Yields:
            Record instances
        """
        pass

    def should_continue(self) -> bool:
        """Check if generation should continue based on max_count."""
        if self.max_count <= 0:
            return True
        return self._count < self.max_count

    def increment_count(self) -> int:
        """Increment the record counter and return the new value."""
        self._count += 1
        return self._count

    def _mark_started(self) -> None:
        """Claim this instance for a single run."""
        if self._started:
            raise RuntimeError(
                f"{self.__class__.__name__} has already been started; create a new instance to restart"
            )
        self._started = True

    def _transition(self, state: GeneratorState) -> None:
        if self._state is GeneratorState.STOPPED:
            return
        self._state = state

    def _stop(self, reason: StopReason) -> None:
        if self._state is GeneratorState.STOPPED:
            return
        self._state = GeneratorState.STOPPED
        self._stop_reason = reason

    @property
    def count(self) -> int:
        """Get the number of records emitted so far."""
        return self._count

    @property
    def state(self) -> GeneratorState:
        """Get the current lifecycle state."""
        return self._state

    @property
    def stop_reason(self) -> StopReason | None:
        """Why generation stopped, or None while not stopped."""
        return self._stop_reason

    @property
    def is_stopped(self) -> bool:
        """Whether the generator has reached its terminal state."""
        return self._state is GeneratorState.STOPPED
