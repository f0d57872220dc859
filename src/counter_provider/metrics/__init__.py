"""Run metrics for the counter input provider."""
from counter_provider.metrics.collector import (
    DummyMetricsCollector,
    MetricsCollector,
    create_metrics_collector,
)

__all__ = ["MetricsCollector", "DummyMetricsCollector", "create_metrics_collector"]
