"""Unit tests for logging configuration."""
import json
import logging
import sys
from contextlib import contextmanager

from counter_provider.config.loader import GeneratorConfig
from counter_provider.generators import CounterGenerator
from counter_provider.logging_config import (
    ProviderLogger,
    StructuredFormatter,
    configure_logging,
    get_provider_logger,
)
from counter_provider.observers import CompositeObserver, LoggingObserver


@contextmanager
def preserved_logging():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    provider_level = logging.getLogger("counter_provider").level
    try:
        yield root
    finally:
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)
        logging.getLogger("counter_provider").setLevel(provider_level)


def _make_record(**extra):
    return logging.makeLogRecord({
        "name": "counter_provider.test",
        "levelno": logging.INFO,
        "levelname": "INFO",
        "msg": "counter_emit",
        **extra,
    })


class TestStructuredFormatter:
    """Test the StructuredFormatter class."""

    def test_human_format_with_context(self):
        """Context attributes are appended as key=value pairs."""
        output = StructuredFormatter().format(_make_record(seq=3, payload=3))
        assert "INFO - counter_provider.test - counter_emit" in output
        assert output.endswith("[seq=3, payload=3]")

    def test_human_format_without_context(self):
        """No brackets when there is no context."""
        output = StructuredFormatter().format(_make_record())
        assert "[" not in output

    def test_json_format(self):
        """JSON mode emits one parseable object."""
        output = StructuredFormatter(json_format=True).format(_make_record(seq=1))
        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["message"] == "counter_emit"
        assert data["context"] == {"seq": 1}

    def test_exception_included(self):
        """Exception text is rendered."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = _make_record(exc_info=sys.exc_info())
        output = StructuredFormatter().format(record)
        assert "ValueError: boom" in output


class TestProviderLogger:
    """Test the ProviderLogger class."""

    def test_context_is_attached(self, caplog):
        """Stored context is merged into each record."""
        logger = get_provider_logger("counter_provider.test")
        logger.set_context(run="abc")
        with caplog.at_level(logging.INFO, logger="counter_provider"):
            logger.info("hello", extra_key=1)

        record = caplog.records[-1]
        assert record.run == "abc"
        assert record.extra_key == 1

    def test_clear_context(self, caplog):
        """clear_context drops stored context."""
        logger = ProviderLogger("counter_provider.test")
        logger.set_context(run="abc")
        logger.clear_context()
        with caplog.at_level(logging.INFO, logger="counter_provider"):
            logger.warning("hello")

        assert not hasattr(caplog.records[-1], "run")


class TestLoggingObserver:
    """Test lifecycle logging."""

    def test_completed_run(self, caplog, fast_config):
        """A bounded run logs start, each emit, completion and stop."""
        with caplog.at_level(logging.DEBUG, logger="counter_provider"):
            list(CounterGenerator(fast_config, observer=LoggingObserver()).generate())

        assert caplog.messages == [
            "counter_input_start",
            "counter_emit",
            "counter_emit",
            "counter_emit",
            "counter_input_complete",
            "counter_input_stopped",
        ]
        assert caplog.records[0].interval_ms == 0
        assert caplog.records[0].max_count == 3
        assert caplog.records[4].reached_max_count == 3
        assert caplog.records[5].final_count == 3

    def test_cancelled_run(self, caplog, token):
        """A cancelled run logs the cancellation."""
        token.cancel()
        with caplog.at_level(logging.INFO, logger="counter_provider"):
            list(CounterGenerator(GeneratorConfig(interval_ms=0), cancel=token, observer=LoggingObserver()).generate())

        assert caplog.messages == ["counter_input_start", "counter_input_cancelled", "counter_input_stopped"]
        assert caplog.records[-1].reason == "cancelled"

    def test_composite_fans_out(self, fast_config, recording_observer, caplog):
        """CompositeObserver forwards to every observer."""
        observer = CompositeObserver([LoggingObserver()])
        observer.add(recording_observer)
        with caplog.at_level(logging.INFO, logger="counter_provider"):
            list(CounterGenerator(fast_config, observer=observer).generate())

        assert len(recording_observer.events) == 5
        assert "counter_input_complete" in caplog.messages


class TestConfigureLogging:
    """Test configure_logging."""

    def test_logs_go_to_stderr(self):
        """The console handler never writes to stdout."""
        with preserved_logging() as root:
            configure_logging(level="WARNING")

            assert len(root.handlers) == 1
            assert root.handlers[0].stream is sys.stderr
            assert root.level == logging.WARNING
            assert logging.getLogger("counter_provider").level == logging.WARNING

    def test_json_format(self):
        """JSON format is applied to handlers."""
        with preserved_logging() as root:
            configure_logging(level="INFO", json_format=True)
            formatter = root.handlers[0].formatter

        assert isinstance(formatter, StructuredFormatter)
        assert formatter.json_format is True

    def test_log_file(self, tmp_path):
        """A log file receives debug output."""
        log_file = tmp_path / "provider.log"
        with preserved_logging() as root:
            configure_logging(level="ERROR", log_file=str(log_file))

            logging.getLogger("counter_provider.test").debug("written to file")
            for handler in root.handlers:
                handler.flush()

        assert "written to file" in log_file.read_text()

    def test_unknown_level_defaults_to_info(self):
        """Unknown level names fall back to INFO."""
        with preserved_logging() as root:
            configure_logging(level="verbose")
            assert root.level == logging.INFO

    def test_package_logger_has_null_handler(self):
        """Errors raised before logging is configured are not printed twice."""
        handlers = logging.getLogger("counter_provider").handlers
        assert any(isinstance(handler, logging.NullHandler) for handler in handlers)

    def test_null_handler_survives_configuration(self):
        """configure_logging only replaces root handlers."""
        with preserved_logging():
            configure_logging(level="INFO")
            handlers = logging.getLogger("counter_provider").handlers

        assert any(isinstance(handler, logging.NullHandler) for handler in handlers)
