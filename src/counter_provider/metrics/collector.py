"""Metrics collection for the counter input provider.

Metrics live in a private registry and are reported at the end of a run;
the provider never opens a network listener.
"""
import time
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Gauge

from counter_provider.config.loader import PROVIDER_NAME, GeneratorConfig
from counter_provider.models import Record, StopReason
from counter_provider.observers import GeneratorObserver


@dataclass
class MetricsCollector(GeneratorObserver):
    """Collects run metrics; attach it to a generator as an observer."""

    registry: CollectorRegistry = field(default_factory=CollectorRegistry, init=False)

    records_emitted: Counter = field(init=False)
    runs_stopped: Counter = field(init=False)
    configured_interval: Gauge = field(init=False)
    last_value: Gauge = field(init=False)

    _start_time: float = field(default_factory=time.time, init=False)
    _end_time: float | None = field(default=None, init=False)
    _record_count: int = field(default=0, init=False)
    _stop_reason: str | None = field(default=None, init=False)

    def __post_init__(self):
        """Initialize Prometheus metrics."""
        self.records_emitted = Counter(
            'counter_provider_records_emitted_total',
            'Total number of records emitted',
            ['provider'],
            registry=self.registry
        )

        self.runs_stopped = Counter(
            'counter_provider_runs_stopped_total',
            'Generator runs that reached the stopped state',
            ['provider', 'reason'],
            registry=self.registry
        )

        self.configured_interval = Gauge(
            'counter_provider_interval_milliseconds',
            'Configured delay between records',
            ['provider'],
            registry=self.registry
        )

        self.last_value = Gauge(
            'counter_provider_last_value',
            'Sequence number of the most recent record',
            ['provider'],
            registry=self.registry
        )

    def on_start(self, config: GeneratorConfig) -> None:
        self._start_time = time.time()
        self._end_time = None
        self.configured_interval.labels(provider=PROVIDER_NAME).set(config.interval_ms)

    def on_record(self, record: Record) -> None:
        self.records_emitted.labels(provider=PROVIDER_NAME).inc()
        self.last_value.labels(provider=PROVIDER_NAME).set(record.value)
        self._record_count += 1

    def on_stop(self, reason: StopReason, count: int) -> None:
        self.runs_stopped.labels(provider=PROVIDER_NAME, reason=reason.value).inc()
        self._end_time = time.time()
        self._stop_reason = reason.value

    def get_stats(self) -> dict[str, Any]:
        """Get current statistics.

        Returns:
            Dictionary with current stats
        """
        end = self._end_time if self._end_time is not None else time.time()
        elapsed = end - self._start_time
        rate = self._record_count / elapsed if elapsed > 0 else 0

        return {
            "records_emitted": self._record_count,
            "duration_seconds": elapsed,
            "rate_per_second": rate,
            "stop_reason": self._stop_reason,
        }

    def reset(self):
        """Reset internal counters."""
        self._start_time = time.time()
        self._end_time = None
        self._record_count = 0
        self._stop_reason = None


class DummyMetricsCollector(MetricsCollector):
    """Metrics collector that does nothing (for when metrics are disabled)."""

    def __post_init__(self):
        """Skip Prometheus initialization."""
        pass

    def on_start(self, config: GeneratorConfig) -> None:
        """No-op."""
        pass

    def on_record(self, record: Record) -> None:
        """No-op."""
        pass

    def on_stop(self, reason: StopReason, count: int) -> None:
        """No-op."""
        pass


def create_metrics_collector(enabled: bool = True) -> MetricsCollector:
    """Create appropriate metrics collector based on configuration.

    Args:
        enabled: Whether metrics collection is enabled

    Returns:
        MetricsCollector instance
    """
    if enabled:
        return MetricsCollector()
    else:
        return DummyMetricsCollector()
