# counter_provider - sequential counter input provider for pipeline testing
__version__ = "0.1.0"

import logging

from counter_provider.cancellation import CancellationToken
from counter_provider.config.loader import AppConfig, GeneratorConfig
from counter_provider.exceptions import ConfigurationError, CounterProviderException
from counter_provider.generators import CounterGenerator, generate
from counter_provider.host import ProviderHost, RunSummary
from counter_provider.models import GeneratorState, Record, StopReason

# Records logged before configure_logging() runs are dropped, not printed by
# the last-resort handler
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "AppConfig",
    "CancellationToken",
    "ConfigurationError",
    "CounterGenerator",
    "CounterProviderException",
    "GeneratorConfig",
    "GeneratorState",
    "ProviderHost",
    "Record",
    "RunSummary",
    "StopReason",
    "generate",
]
