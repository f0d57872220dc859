"""Record generators for the counter input provider."""
from counter_provider.generators.base import RecordGenerator
from counter_provider.generators.counter import CounterGenerator, generate
from counter_provider.generators.pacing import IntervalPacer

__all__ = [
    "RecordGenerator",
    "CounterGenerator",
    "IntervalPacer",
    "generate",
]
