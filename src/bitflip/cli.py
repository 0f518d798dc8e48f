"""Typer CLI for bitflip."""

from __future__ import annotations

import logging
import signal
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .checker import PatternChecker
from .config import ScanConfig, normalize_log_level, resolve_config
from .exceptions import BitflipError, InvalidSizeError
from .logs import configure_logging
from .models import ScanStats
from .pattern import BYTES_PER_MB
from .reporting import CompositeReporter, ConsoleReporter, LogFileReporter, Reporter
from .scanner import ScanLoop
from .sysinfo import available_memory_bytes, collect_sysinfo
from .utils import format_bytes

app = typer.Typer(
    help="Detect RAM bit flips by slowly re-checking a pattern-filled buffer.",
    add_completion=False,
)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

logger = logging.getLogger(__name__)


def _fail(exc: Exception) -> typer.Exit:
    err_console.print(f"[red]error:[/red] {escape(str(exc))}", soft_wrap=True)
    return typer.Exit(code=1)


def _format_stats_table(stats: ScanStats, settings: ScanConfig) -> Table:
    table = Table(title="Scan Summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Passes", str(stats.passes))
    table.add_row("Failed passes", str(stats.failed_passes))
    table.add_row("Mismatched bytes", str(stats.mismatches))
    table.add_row("Chunks checked", str(stats.chunks_checked))
    table.add_row("Data checked", format_bytes(stats.bytes_checked))
    table.add_row("Log file", str(settings.log_path) if settings.log_path else "-")
    return table


@contextmanager
def _stop_on_signals(loop: ScanLoop) -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum: int, frame: object) -> None:
        logger.info("received signal %d, stopping scan", signum)
        loop.stop()

    previous = {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _check_host_memory(size_mb: int) -> None:
    for key, value in sorted(collect_sysinfo().items()):
        logger.debug("host %s: %s", key, value)
    available = available_memory_bytes()
    requested = size_mb * BYTES_PER_MB
    if available is not None and requested > available:
        logger.warning(
            "requested %s but only %s is available; the system may swap",
            format_bytes(requested),
            format_bytes(available),
        )


@app.command()
def main(
    size_mb: int = typer.Argument(..., metavar="SIZE_MB", help="Megabytes of memory to test"),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", help="Bytes checked per step (multiple of 257)"
    ),
    interval: Optional[float] = typer.Option(
        None, "--interval", min=0.0, help="Seconds to sleep between chunks"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", dir_okay=False, help="Append results to this log file"
    ),
    no_log: bool = typer.Option(False, "--no-log", help="Report to the console only"),
    max_passes: Optional[int] = typer.Option(
        None, "--max-passes", min=1, help="Stop after this many full passes"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, resolve_path=True
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Diagnostic log level"),
) -> None:
    """Fill SIZE_MB megabytes with a test pattern and keep checking it."""
    try:
        settings = resolve_config(config).with_overrides(
            chunk_size=chunk_size,
            interval_s=interval,
            log_path=log_file,
            max_passes=max_passes,
            log_level=log_level,
        )
        if no_log:
            settings.log_path = None
        settings.log_level = normalize_log_level(settings.log_level, "--log-level")
        if size_mb <= 0:
            raise InvalidSizeError(
                f"test size must be a positive number of megabytes, got {size_mb}"
            )
    except BitflipError as exc:
        raise _fail(exc) from exc

    configure_logging(settings.log_level, err_console)
    _check_host_memory(size_mb)

    log_sink = LogFileReporter.open(settings.log_path) if settings.log_path else None
    reporter: Reporter = ConsoleReporter(err_console)
    if log_sink is not None:
        log_sink.write_line(f"Started bitflip, testing {size_mb} MB of RAM")
        reporter = CompositeReporter(reporter, log_sink)

    try:
        try:
            checker = PatternChecker.from_megabytes(
                size_mb, reporter=reporter, chunk_size=settings.chunk_size
            )
            loop = ScanLoop(checker, interval_s=settings.interval_s, max_passes=settings.max_passes)
        except BitflipError as exc:
            raise _fail(exc) from exc

        console.print(f"Initialized {size_mb} megs of memory.  Test running...")
        with _stop_on_signals(loop):
            stats = loop.run()
    finally:
        if log_sink is not None:
            log_sink.close()

    console.print(_format_stats_table(stats, settings))


if __name__ == "__main__":
    app()
