"""Configuration management for the counter input provider."""
from counter_provider.config.loader import (
    PROVIDER_NAME,
    AppConfig,
    GeneratorConfig,
    LoggingConfig,
    load_config_file,
    read_config_stream,
)

__all__ = [
    "PROVIDER_NAME",
    "AppConfig",
    "GeneratorConfig",
    "LoggingConfig",
    "load_config_file",
    "read_config_stream",
]
