"""Reporting sinks for mismatches and pass results."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Protocol, TextIO

from rich.console import Console

from .models import Mismatch, PassResult
from .utils import hex_byte

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    def mismatch(self, event: Mismatch) -> None: ...

    def block_mismatch(self, offset: int, length: int) -> None: ...

    def pass_complete(self, result: PassResult) -> None: ...


def format_mismatch(event: Mismatch) -> str:
    return (
        f"RAM MISMATCH DETECTED: Index {event.offset} should contain {hex_byte(event.expected)} "
        f"actually had {hex_byte(event.actual)} (flip {hex_byte(event.flip)})"
    )


def format_block(offset: int, length: int) -> str:
    return f"Mismatch found in block starting at {offset} size {length}"


def format_pass(result: PassResult) -> str:
    return f"Pass {result.status}"


class ConsoleReporter:
    """Writes results to stderr; the channel that is always available."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True, highlight=False)

    def mismatch(self, event: Mismatch) -> None:
        self._console.print(
            format_mismatch(event), style="bold red", markup=False, soft_wrap=True
        )

    def block_mismatch(self, offset: int, length: int) -> None:
        self._console.print(
            format_block(offset, length), style="yellow", markup=False, soft_wrap=True
        )

    def pass_complete(self, result: PassResult) -> None:
        style = "green" if result.ok else "bold red"
        self._console.print(
            format_pass(result), style=style, markup=False, soft_wrap=True
        )


class LogFileReporter:
    """Appends result lines to a text log.

    A log that cannot be opened or written is disabled after one warning;
    console reporting carries on without it.
    """

    def __init__(self, handle: TextIO, path: Path | None = None) -> None:
        self._handle: Optional[TextIO] = handle
        self._path = path

    @classmethod
    def open(cls, path: Path) -> "LogFileReporter | None":
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handle = path.open("a", encoding="utf-8")
        except OSError as exc:
            logger.warning("cannot open log file %s (%s); reporting to console only", path, exc)
            return None
        return cls(handle, path)

    @property
    def active(self) -> bool:
        return self._handle is not None

    def write_line(self, line: str) -> None:
        if self._handle is None:
            return
        try:
            self._handle.write(line + "\n")
            self._handle.flush()
        except (OSError, ValueError) as exc:
            logger.warning("log file %s failed (%s); reporting to console only", self._path, exc)
            self._handle = None

    def mismatch(self, event: Mismatch) -> None:
        self.write_line(format_mismatch(event))

    def block_mismatch(self, offset: int, length: int) -> None:
        self.write_line(format_block(offset, length))

    def pass_complete(self, result: PassResult) -> None:
        self.write_line(format_pass(result))

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.close()
        except OSError as exc:
            logger.warning("closing log file %s failed: %s", self._path, exc)
        self._handle = None


class CompositeReporter:
    def __init__(self, *reporters: Reporter) -> None:
        self._reporters: List[Reporter] = list(reporters)

    def _dispatch(self, action: Callable[[Reporter], None]) -> None:
        for reporter in self._reporters:
            try:
                action(reporter)
            except OSError as exc:
                logger.warning("reporter %s failed: %s", type(reporter).__name__, exc)

    def mismatch(self, event: Mismatch) -> None:
        self._dispatch(lambda reporter: reporter.mismatch(event))

    def block_mismatch(self, offset: int, length: int) -> None:
        self._dispatch(lambda reporter: reporter.block_mismatch(offset, length))

    def pass_complete(self, result: PassResult) -> None:
        self._dispatch(lambda reporter: reporter.pass_complete(result))


class CollectingReporter:
    """Keeps the mismatches of the pass in progress and every pass result."""

    def __init__(self) -> None:
        self.mismatches: List[Mismatch] = []
        self.blocks: List[tuple[int, int]] = []
        self.passes: List[PassResult] = []
        self.last_pass_mismatches: List[Mismatch] = []
        self.last_pass_blocks: List[tuple[int, int]] = []

    def mismatch(self, event: Mismatch) -> None:
        self.mismatches.append(event)

    def block_mismatch(self, offset: int, length: int) -> None:
        self.blocks.append((offset, length))

    def pass_complete(self, result: PassResult) -> None:
        self.passes.append(result)
        self.last_pass_mismatches = self.mismatches
        self.last_pass_blocks = self.blocks
        self.mismatches = []
        self.blocks = []


class CallbackReporter:
    def __init__(
        self,
        on_mismatch: Callable[[Mismatch], None],
        on_pass: Callable[[PassResult], None] | None = None,
    ) -> None:
        self._on_mismatch = on_mismatch
        self._on_pass = on_pass

    def mismatch(self, event: Mismatch) -> None:
        self._on_mismatch(event)

    def block_mismatch(self, offset: int, length: int) -> None:
        return None

    def pass_complete(self, result: PassResult) -> None:
        if self._on_pass is not None:
            self._on_pass(result)
