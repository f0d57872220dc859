"""CLI interface for the counter input provider."""
import json
import logging
import os
import sys

import click

from counter_provider import __version__
from counter_provider.config.loader import AppConfig
from counter_provider.exceptions import CounterProviderException
from counter_provider.host import ProviderHost, RunSummary
from counter_provider.logging_config import configure_logging, get_provider_logger
from counter_provider.metrics.collector import create_metrics_collector
from counter_provider.observers import CompositeObserver, LoggingObserver
from counter_provider.shutdown import create_shutdown_handler

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


_CONFIG_OPTIONS = [
    click.option(
        "--config",
        "-c",
        type=click.Path(exists=True, dir_okay=False),
        help="Configuration file path (JSON or YAML); replaces stdin",
    ),
    click.option("--interval", type=int, help="Milliseconds between records"),
    click.option("--max-count", type=int, help="Stop after this many records (0 = unbounded)"),
    click.option(
        "--stdin/--no-stdin",
        default=True,
        help="Read a JSON configuration object from stdin when it is not a terminal",
    ),
]


def _config_options(func):
    """Options shared by every command that resolves a configuration."""
    for option in reversed(_CONFIG_OPTIONS):
        func = option(func)
    return func


def _resolve_config(
    config: str | None,
    use_stdin: bool,
    interval: int | None,
    max_count: int | None,
) -> AppConfig:
    """Combine defaults, environment, file or stdin, and CLI overrides."""
    if config:
        app_config = AppConfig.from_file(config)
    elif use_stdin and not sys.stdin.isatty():
        app_config = AppConfig.from_stream(click.get_text_stream("stdin"))
    else:
        app_config = AppConfig.load()

    return app_config.with_overrides(interval_ms=interval, max_count=max_count)


def _fail(error: CounterProviderException) -> None:
    click.echo(f"Error: {error.get_user_message()}", err=True)
    sys.exit(1)


def _detach_stdout() -> None:
    """Point stdout at devnull so the interpreter's final flush cannot fail."""
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError) as e:
        logging.getLogger(__name__).debug(f"Could not detach stdout: {e}")


@click.group()
@click.version_option(version=__version__, prog_name="counter-provider")
def cli():
    """Counter input provider: streams sequential counter envelopes to stdout."""
    pass


@cli.command()
@_config_options
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level (logs go to stderr)",
)
@click.option("--log-json/--no-log-json", default=None, help="Emit logs as JSON lines")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write DEBUG logs to this file")
@click.option("--metrics/--no-metrics", default=False, help="Print run metrics to stderr at exit")
def run(
    config: str | None,
    interval: int | None,
    max_count: int | None,
    stdin: bool,
    log_level: str | None,
    log_json: bool | None,
    log_file: str | None,
    metrics: bool,
):
    """Stream counter envelopes to stdout until cancelled or bounded."""
    try:
        app_config = _resolve_config(config, stdin, interval, max_count)
    except CounterProviderException as e:
        _fail(e)

    log_settings = app_config.logging
    configure_logging(
        level=log_level or log_settings.level,
        json_format=log_settings.json_format if log_json is None else log_json,
        log_file=log_file or log_settings.log_file,
    )
    logger = get_provider_logger(__name__)

    shutdown_handler = create_shutdown_handler()
    metrics_collector = create_metrics_collector(enabled=metrics)
    observer = CompositeObserver([LoggingObserver(), metrics_collector])

    host = ProviderHost(
        app_config.generator,
        output=click.get_text_stream("stdout"),
        cancel=shutdown_handler.token,
        observer=observer,
    )

    summary: RunSummary | None = None
    try:
        summary = host.run()
    except CounterProviderException as e:
        _fail(e)
    finally:
        shutdown_handler.shutdown()

    logger.info(
        "Run finished",
        records=summary.records_written,
        reason=summary.stop_reason.value if summary.stop_reason else None,
        duration_seconds=round(summary.duration_seconds, 3),
    )

    if metrics:
        stats = metrics_collector.get_stats()
        click.echo("Summary:", err=True)
        click.echo(f"Total records: {stats['records_emitted']}", err=True)
        click.echo(f"Duration: {stats['duration_seconds']:.1f}s", err=True)
        click.echo(f"Actual rate: {stats['rate_per_second']:.1f} records/s", err=True)
        click.echo(f"Stop reason: {stats['stop_reason']}", err=True)

    if summary.output_closed:
        _detach_stdout()


@cli.command()
@_config_options
def validate(config: str | None, interval: int | None, max_count: int | None, stdin: bool):
    """Validate configuration without emitting any records."""
    try:
        app_config = _resolve_config(config, stdin, interval, max_count)
    except CounterProviderException as e:
        click.echo(f"✗ Configuration is invalid: {e.get_user_message()}", err=True)
        sys.exit(1)

    generator = app_config.generator
    click.echo("✓ Configuration is valid")
    click.echo(f"  Interval: {generator.interval_ms} ms")
    if generator.is_bounded:
        click.echo(f"  Max count: {generator.max_count}")
    else:
        click.echo("  Max count: unbounded")
    click.echo(f"  Log level: {app_config.logging.level}")


@cli.command("show-config")
@_config_options
def show_config(config: str | None, interval: int | None, max_count: int | None, stdin: bool):
    """Print the effective configuration as JSON."""
    try:
        app_config = _resolve_config(config, stdin, interval, max_count)
    except CounterProviderException as e:
        _fail(e)

    click.echo(json.dumps(
        {
            "config": app_config.generator.to_provider_config(),
            "logging": app_config.logging.model_dump(),
        },
        indent=2,
    ))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
