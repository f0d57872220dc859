"""Lifecycle observers attached to a generator.

Logging and metrics hook into a run through these callbacks instead of the
generator calling them directly.
"""
from collections.abc import Iterable

from counter_provider.config.loader import GeneratorConfig
from counter_provider.logging_config import ProviderLogger, get_provider_logger
from counter_provider.models import Record, StopReason


class GeneratorObserver:
    """No-op observer; subclasses override the hooks they need."""

    def on_start(self, config: GeneratorConfig) -> None:
        """Called once, before the first record is computed."""

    def on_record(self, record: Record) -> None:
        """Called for each record, just before it is handed to the consumer."""

    def on_stop(self, reason: StopReason, count: int) -> None:
        """Called once when the generator reaches its terminal state."""


class CompositeObserver(GeneratorObserver):
    """Fans callbacks out to several observers in order."""

    def __init__(self, observers: Iterable[GeneratorObserver] = ()):
        self.observers = list(observers)

    def add(self, observer: GeneratorObserver) -> None:
        self.observers.append(observer)

    def on_start(self, config: GeneratorConfig) -> None:
        for observer in self.observers:
            observer.on_start(config)

    def on_record(self, record: Record) -> None:
        for observer in self.observers:
            observer.on_record(record)

    def on_stop(self, reason: StopReason, count: int) -> None:
        for observer in self.observers:
            observer.on_stop(reason, count)


class LoggingObserver(GeneratorObserver):
    """Logs the run's lifecycle events."""

    def __init__(self, logger: ProviderLogger | None = None):
        self.logger = logger or get_provider_logger("counter_provider.generators")
        self._max_count = 0

    def on_start(self, config: GeneratorConfig) -> None:
        self._max_count = config.max_count
        self.logger.log_start(config.interval_ms, config.max_count)

    def on_record(self, record: Record) -> None:
        self.logger.log_emit(record.seq)

    def on_stop(self, reason: StopReason, count: int) -> None:
        if reason is StopReason.COMPLETED:
            self.logger.log_complete(self._max_count)
        elif reason is StopReason.CANCELLED:
            self.logger.log_cancelled()
        self.logger.log_stopped(count, reason.value)
