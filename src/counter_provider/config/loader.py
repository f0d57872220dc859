"""Configuration loader for the counter input provider."""
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, IO

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from counter_provider.exceptions import ConfigurationError

PROVIDER_NAME = "counter-input-provider"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _format_validation_errors(error: ValidationError) -> list[str]:
    """Flatten pydantic errors into 'field: message' lines."""
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "config"
        messages.append(f"{location}: {err['msg']}")
    return messages


class GeneratorConfig(BaseModel):
    """Counter generator configuration.

    ``interval`` is the key used by the pipeline host, ``interval_ms`` the
    Python field name; both are accepted. Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    interval_ms: int = Field(
        default=1000,
        validation_alias=AliasChoices("interval", "interval_ms"),
        description="Milliseconds between emissions (0 = no delay)",
    )
    max_count: int = Field(default=0, description="Maximum records to emit (0 = unbounded)")

    @field_validator("interval_ms", "max_count", mode="before")
    @classmethod
    def reject_booleans(cls, v):
        """JSON true/false are not counts, even though bool subclasses int."""
        if isinstance(v, bool):
            raise ValueError("expected an integer, got a boolean")
        return v

    @model_validator(mode="after")
    def validate_non_negative(self) -> "GeneratorConfig":
        """Reject negative values before any generator can be built."""
        errors = []
        if self.interval_ms < 0:
            errors.append(f"interval: must be >= 0, got {self.interval_ms}")
        if self.max_count < 0:
            errors.append(f"max_count: must be >= 0, got {self.max_count}")
        if errors:
            raise ConfigurationError(errors, source="generator configuration")
        return self

    @classmethod
    def from_mapping(cls, data: Any, source: str = "generator configuration") -> "GeneratorConfig":
        """Build a config from a host-supplied mapping.

        Args:
            data: Mapping with optional ``interval`` and ``max_count`` keys
            source: Description of where the mapping came from, for errors

        Returns:
            GeneratorConfig instance

        Raises:
            ConfigurationError: If the mapping is not an object or holds invalid values
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                [f"expected a JSON object, got {type(data).__name__}"], source=source
            )
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(
                _format_validation_errors(e), source=source, original_error=e
            ) from e

    @property
    def interval_seconds(self) -> float:
        """The configured interval in seconds."""
        return self.interval_ms / 1000.0

    @property
    def is_bounded(self) -> bool:
        """Whether generation stops after ``max_count`` records."""
        return self.max_count > 0

    def to_provider_config(self) -> dict[str, int]:
        """Return the config in the host's wire format."""
        return {"interval": self.interval_ms, "max_count": self.max_count}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    json_format: bool = Field(default=False)
    log_file: str | None = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Normalize and validate the log level name."""
        level = str(v).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(_LOG_LEVELS)}")
        return level


class AppConfig(BaseSettings):
    """Application configuration.

    Defaults can be supplied through ``COUNTER_PROVIDER_*`` environment
    variables, e.g. ``COUNTER_PROVIDER_GENERATOR__INTERVAL_MS=250``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="COUNTER_PROVIDER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls) -> "AppConfig":
        """Load defaults and environment overrides.

        Raises:
            ConfigurationError: If an environment override is invalid
        """
        try:
            return cls()
        except ValidationError as e:
            raise ConfigurationError(
                _format_validation_errors(e), source="environment configuration", original_error=e
            ) from e

    @classmethod
    def from_file(cls, config_file: str) -> "AppConfig":
        """Load configuration from a JSON or YAML file.

        Args:
            config_file: Path to configuration file

        Returns:
            AppConfig instance
        """
        return cls.load().merge(load_config_file(config_file), source=config_file)

    @classmethod
    def from_stream(cls, stream: IO[str]) -> "AppConfig":
        """Load configuration from a stream such as stdin.

        Args:
            stream: Text stream holding one JSON object (may be empty)

        Returns:
            AppConfig instance
        """
        return cls.load().merge(read_config_stream(stream), source="stdin configuration")

    def merge(self, data: Mapping[str, Any], source: str = "configuration") -> "AppConfig":
        """Overlay a provider config mapping onto this configuration.

        The mapping may be the bare provider config, wrapped as
        ``{"config": {...}}``, and may carry a ``logging`` section.

        Args:
            data: Parsed configuration mapping
            source: Description of the mapping's origin, for errors

        Returns:
            New AppConfig with the overlay applied
        """
        provider_data = unwrap_provider_config(data, source=source)
        logging_data = provider_data.get("logging")

        generator_data = {
            key: value for key, value in provider_data.items() if key not in ("config", "logging")
        }
        merged_generator = {**self.generator.model_dump(), **generator_data}
        if "interval" in generator_data:
            merged_generator.pop("interval_ms", None)
        generator = GeneratorConfig.from_mapping(merged_generator, source=source)

        app_logging = self.logging
        if logging_data is not None:
            if not isinstance(logging_data, Mapping):
                raise ConfigurationError(["logging: expected an object"], source=source)
            try:
                app_logging = LoggingConfig(**{**self.logging.model_dump(), **logging_data})
            except ValidationError as e:
                raise ConfigurationError(
                    _format_validation_errors(e), source=source, original_error=e
                ) from e

        return self.model_copy(update={"generator": generator, "logging": app_logging})

    def with_overrides(
        self,
        interval_ms: int | None = None,
        max_count: int | None = None,
    ) -> "AppConfig":
        """Apply command-line overrides (only those explicitly provided)."""
        overrides: dict[str, Any] = {}
        if interval_ms is not None:
            overrides["interval_ms"] = interval_ms
        if max_count is not None:
            overrides["max_count"] = max_count
        if not overrides:
            return self
        return self.merge(overrides, source="command-line options")


def unwrap_provider_config(data: Any, source: str = "configuration") -> dict[str, Any]:
    """Return the provider config mapping, unwrapping a ``config`` envelope.

    Raises:
        ConfigurationError: If the top level is not an object
    """
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            [f"expected a JSON object, got {type(data).__name__}"], source=source
        )
    inner = data.get("config")
    if isinstance(inner, Mapping):
        unwrapped = dict(inner)
        if "logging" in data and "logging" not in unwrapped:
            unwrapped["logging"] = data["logging"]
        return unwrapped
    return dict(data)


def read_config_stream(stream: IO[str]) -> dict[str, Any]:
    """Read one JSON config object from a text stream.

    An empty stream yields an empty mapping, which means "all defaults".

    Raises:
        ConfigurationError: If the stream does not hold valid JSON
    """
    text = stream.read()
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            [f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}"],
            source="stdin configuration",
            original_error=e,
        ) from e
    return unwrap_provider_config(data, source="stdin configuration")


def load_config_file(config_file: str) -> dict[str, Any]:
    """Load a JSON or YAML config file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(config_file)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            [f"cannot read {config_file}: {e}"], source=config_file, original_error=e
        ) from e

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text) if text.strip() else {}
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            [f"cannot parse {config_file}: {e}"], source=config_file, original_error=e
        ) from e

    logging.getLogger(__name__).debug(f"Loaded configuration file: {config_file}")
    return unwrap_provider_config(data, source=config_file)
