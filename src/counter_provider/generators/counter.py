"""Sequential counter generator."""
from collections.abc import Callable, Iterator
from datetime import datetime

from counter_provider.cancellation import CancellationToken
from counter_provider.config.loader import GeneratorConfig
from counter_provider.generators.base import RecordGenerator
from counter_provider.generators.pacing import IntervalPacer
from counter_provider.models import GeneratorState, Record, StopReason, utc_now
from counter_provider.observers import GeneratorObserver


class CounterGenerator(RecordGenerator):
    """Emits 1, 2, 3, ... at a fixed interval until cancelled or bounded."""

    def __init__(
        self,
        config: GeneratorConfig,
        cancel: CancellationToken | None = None,
        observer: GeneratorObserver | None = None,
        clock: Callable[[], datetime] | None = None,
        pacer: IntervalPacer | None = None,
    ):
        """Initialize the counter generator.

        Args:
            config: Validated generator configuration
            cancel: Cancellation token shared with the host
            observer: Receives lifecycle callbacks (logging, metrics)
            clock: Returns the emission time; defaults to the UTC wall clock
            pacer: Delay implementation; defaults to ``IntervalPacer``
        """
        super().__init__(max_count=config.max_count)
        self.config = config
        self.cancel = cancel or CancellationToken()
        self.observer = observer or GeneratorObserver()
        self._clock = clock or utc_now
        self._pacer = pacer or IntervalPacer(config.interval_ms)

    def generate(self) -> Iterator[Record]:
        """Return the lazy record sequence for this instance.

        Raises:
            RuntimeError: If called more than once on the same instance
        """
        self._mark_started()
        return self._run()

    def _run(self) -> Iterator[Record]:
        self.observer.on_start(self.config)
        try:
            while True:
                if self.cancel.is_cancelled:
                    self._stop(StopReason.CANCELLED)
                    return
                if not self.should_continue():
                    self._stop(StopReason.COMPLETED)
                    return

                self._transition(GeneratorState.EMITTING)
                value = self.increment_count()
                record = Record.create(value, self.config.interval_ms, self._clock())
                self.observer.on_record(record)
                yield record

                # No trailing delay once the bound is reached
                if not self.should_continue():
                    self._stop(StopReason.COMPLETED)
                    return

                self._transition(GeneratorState.WAITING)
                if not self._pacer.wait(self.cancel):
                    self._stop(StopReason.CANCELLED)
                    return
        finally:
            # Consumer closed the iterator, or an observer raised
            self._stop(StopReason.CLOSED)
            self.observer.on_stop(self.stop_reason, self.count)


def generate(
    config: GeneratorConfig,
    cancel: CancellationToken,
    observer: GeneratorObserver | None = None,
) -> Iterator[Record]:
    """Produce the counter sequence for ``config`` until ``cancel`` fires.

    Args:
        config: Validated generator configuration
        cancel: Cancellation token
        observer: Optional lifecycle observer

    Returns:
        Lazy iterator of Record
    """
    return CounterGenerator(config, cancel=cancel, observer=observer).generate()
