"""Record and lifecycle types produced by the counter generator."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from counter_provider.config.loader import PROVIDER_NAME


class GeneratorState(Enum):
    """Lifecycle state of a generator instance."""
    IDLE = "idle"
    EMITTING = "emitting"
    WAITING = "waiting"
    STOPPED = "stopped"


class StopReason(Enum):
    """Why a generator reached the stopped state."""
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    CLOSED = "closed"


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as UTC ISO-8601 with microsecond precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


@dataclass(frozen=True)
class Record:
    """One emitted counter value with its metadata."""
    value: int
    timestamp: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, value: int, interval_ms: int, moment: datetime) -> "Record":
        """Build a record whose metadata is consistent with ``value``.

        Args:
            value: 1-based sequence number
            interval_ms: Configured interval, echoed into metadata
            moment: Emission time

        Returns:
            Record instance
        """
        return cls(
            value=value,
            timestamp=format_timestamp(moment),
            metadata={
                "seq": value,
                "interval_ms": interval_ms,
                "provider": PROVIDER_NAME,
            },
        )

    @property
    def seq(self) -> int:
        """Sequence number from the metadata."""
        return self.metadata["seq"]

    def to_envelope(self) -> dict[str, Any]:
        """Return the envelope shape the host serializes."""
        return {
            "data": {"value": self.value, "timestamp": self.timestamp},
            "metadata": dict(self.metadata),
        }
