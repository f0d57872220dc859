"""Provider host: drives the generator and writes envelopes to a stream."""
import json
import logging
import sys
import time
from dataclasses import dataclass
from typing import IO

from counter_provider.cancellation import CancellationToken
from counter_provider.config.loader import GeneratorConfig
from counter_provider.exceptions import OutputError
from counter_provider.generators.counter import CounterGenerator
from counter_provider.models import Record, StopReason
from counter_provider.observers import GeneratorObserver

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of one provider run."""
    records_written: int
    stop_reason: StopReason | None
    duration_seconds: float
    output_closed: bool = False

    @property
    def completed(self) -> bool:
        """Whether the run ended by reaching max_count."""
        return self.stop_reason is StopReason.COMPLETED

    @property
    def cancelled(self) -> bool:
        """Whether the run ended through cancellation."""
        return self.stop_reason is StopReason.CANCELLED


def serialize_record(record: Record) -> str:
    """Encode a record as one JSON line (without the newline)."""
    return json.dumps(record.to_envelope())


class ProviderHost:
    """Runs a counter generator and streams its envelopes as JSON lines."""

    def __init__(
        self,
        config: GeneratorConfig,
        output: IO[str] | None = None,
        cancel: CancellationToken | None = None,
        observer: GeneratorObserver | None = None,
    ):
        """Initialize the host.

        Args:
            config: Validated generator configuration
            output: Text stream receiving one envelope per line (default stdout)
            cancel: Token that stops the run when cancelled
            observer: Lifecycle observer passed to the generator
        """
        self.config = config
        self.output = output if output is not None else sys.stdout
        self.cancel = cancel or CancellationToken()
        self.observer = observer
        self.generator: CounterGenerator | None = None

    def run(self) -> RunSummary:
        """Stream records until the generator stops.

        A consumer that closes the pipe is treated like a cancellation.

        Returns:
            RunSummary describing how the run ended

        Raises:
            OutputError: If writing fails for a reason other than a closed pipe
        """
        self.generator = CounterGenerator(self.config, cancel=self.cancel, observer=self.observer)
        records = self.generator.generate()

        written = 0
        output_closed = False
        start_time = time.time()
        try:
            for record in records:
                try:
                    self._write(record)
                except BrokenPipeError:
                    logger.warning(f"Output closed by consumer after {written} records")
                    output_closed = True
                    self.cancel.cancel()
                    continue
                except OSError as e:
                    raise OutputError(record.value, e) from e
                written += 1
        finally:
            records.close()

        return RunSummary(
            records_written=written,
            stop_reason=self.generator.stop_reason,
            duration_seconds=time.time() - start_time,
            output_closed=output_closed,
        )

    def _write(self, record: Record) -> None:
        self.output.write(serialize_record(record) + "\n")
        self.output.flush()
