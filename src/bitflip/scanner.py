"""Throttled scan loop around a pattern checker."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from .checker import PatternChecker
from .exceptions import ConfigurationError
from .models import ScanStats

logger = logging.getLogger(__name__)

# One chunk (about 1 MiB) every 100 ms scans roughly 10 MB/s.
DEFAULT_INTERVAL_S = 0.1


class ScanLoop:
    """Calls ``check_chunk`` forever, sleeping between calls.

    The loop stops when ``stop()`` is called (from a signal handler or another
    thread) or after ``max_passes`` completed passes.
    """

    def __init__(
        self,
        checker: PatternChecker,
        interval_s: float = DEFAULT_INTERVAL_S,
        max_passes: int | None = None,
        stop_event: threading.Event | None = None,
        sleep: Callable[[float], Any] | None = None,
    ) -> None:
        if interval_s < 0:
            raise ConfigurationError(f"scan interval must not be negative, got {interval_s}")
        if max_passes is not None and max_passes < 1:
            raise ConfigurationError(f"max_passes must be at least 1, got {max_passes}")
        self._checker = checker
        self._interval_s = interval_s
        self._max_passes = max_passes
        self._stop_event = stop_event or threading.Event()
        self._sleep = sleep or self._stop_event.wait

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> ScanStats:
        logger.info(
            "scanning %d bytes in chunks of %d every %.3fs",
            self._checker.size,
            self._checker.chunk_size,
            self._interval_s,
        )
        passes = 0
        while not self._stop_event.is_set():
            result = self._checker.check_chunk()
            if result is not None:
                passes += 1
                logger.debug("pass %d finished: %s", result.number, result.status)
                if self._max_passes is not None and passes >= self._max_passes:
                    break
            if self._interval_s:
                self._sleep(self._interval_s)
        logger.info("scan stopped after %d passes", passes)
        return self._checker.stats
