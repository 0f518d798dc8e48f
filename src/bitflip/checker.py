"""Pattern fill and chunked verification of the test buffer."""

from __future__ import annotations

import logging
import threading
import time

from .exceptions import AllocationFailureError, ConfigurationError, InvalidSizeError
from .models import Mismatch, PassResult, ScanStats
from .pattern import BYTES_PER_MB, CHUNK_SIZE, PATTERN_SIZE, REFERENCE_PATTERN, repeat_pattern
from .reporting import ConsoleReporter, Reporter
from .utils import timestamp_now

logger = logging.getLogger(__name__)

_PATTERN_VIEW = memoryview(REFERENCE_PATTERN)


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class PatternChecker:
    """Owns a test buffer and re-verifies it one chunk at a time.

    The buffer only changes through :meth:`fill`. :meth:`check_chunk` does a
    bounded amount of work per call so the caller can pace the scan; every
    mismatching byte goes to the reporter and a failed pass refills the buffer
    so the same corruption is not reported twice.
    """

    def __init__(
        self,
        size_bytes: int,
        reporter: Reporter | None = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        if not _is_positive_int(size_bytes):
            raise InvalidSizeError(f"test size must be a positive byte count, got {size_bytes!r}")
        if not _is_positive_int(chunk_size) or chunk_size % PATTERN_SIZE:
            raise ConfigurationError(
                f"chunk size must be a positive multiple of {PATTERN_SIZE}, got {chunk_size!r}"
            )
        try:
            self._buffer = bytearray(size_bytes)
        except (MemoryError, OverflowError) as exc:
            raise AllocationFailureError(
                f"unable to allocate {size_bytes} bytes for the test buffer"
            ) from exc

        self._size = size_bytes
        self._chunk_size = chunk_size
        self._view = memoryview(self._buffer)
        # One chunk of pattern, phase zero; every chunk starts on a pattern boundary.
        self._reference = memoryview(repeat_pattern(min(chunk_size, size_bytes)))
        self._reporter: Reporter = reporter if reporter is not None else ConsoleReporter()
        self._lock = threading.RLock()
        self._stats = ScanStats()
        self._passes_completed = 0
        self._chunk_start = 0
        self._pass_failed = False
        self._pass_mismatches = 0
        self._pass_started_at = timestamp_now()
        self._pass_clock = time.monotonic()
        self.fill()

    @classmethod
    def from_megabytes(
        cls,
        size_mb: int,
        reporter: Reporter | None = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> "PatternChecker":
        if not _is_positive_int(size_mb):
            raise InvalidSizeError(
                f"test size must be a positive number of megabytes, got {size_mb!r}"
            )
        return cls(size_mb * BYTES_PER_MB, reporter=reporter, chunk_size=chunk_size)

    @property
    def size(self) -> int:
        return self._size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_start(self) -> int:
        return self._chunk_start

    @property
    def pass_failed(self) -> bool:
        return self._pass_failed

    @property
    def passes_completed(self) -> int:
        return self._passes_completed

    @property
    def stats(self) -> ScanStats:
        return self._stats

    @property
    def buffer(self) -> bytearray:
        """The live test buffer. Writing to it simulates a memory fault."""
        return self._buffer

    def fill(self) -> None:
        """Write the reference pattern over the whole buffer and restart the pass."""
        with self._lock:
            step = len(self._reference)
            for start in range(0, self._size, step):
                end = min(start + step, self._size)
                self._view[start:end] = self._reference[: end - start]
            self._reset_cursor()
        logger.debug("filled %d bytes with the reference pattern", self._size)

    def check_chunk(self) -> PassResult | None:
        """Verify the next chunk; returns the pass result when this chunk ends a pass."""
        with self._lock:
            start = self._chunk_start
            end = min(start + self._chunk_size, self._size)
            if self._view[start:end] != self._reference[: end - start]:
                self._scan_blocks(start, end)
            self._chunk_start = end
            self._stats.chunks_checked += 1
            self._stats.bytes_checked += end - start
            if self._chunk_start < self._size:
                return None
            return self._complete_pass()

    def check_pass(self) -> PassResult:
        """Check chunks until the current pass completes."""
        while True:
            result = self.check_chunk()
            if result is not None:
                return result

    def is_healthy(self) -> bool:
        """True when the whole buffer matches the pattern. Reports nothing."""
        with self._lock:
            step = len(self._reference)
            for start in range(0, self._size, step):
                end = min(start + step, self._size)
                if self._view[start:end] != self._reference[: end - start]:
                    return False
            return True

    def _scan_blocks(self, start: int, end: int) -> None:
        for block_start in range(start, end, PATTERN_SIZE):
            block_len = min(PATTERN_SIZE, end - block_start)
            if self._view[block_start : block_start + block_len] != _PATTERN_VIEW[:block_len]:
                self._scan_block_bytes(block_start, block_len)

    def _scan_block_bytes(self, block_start: int, block_len: int) -> None:
        self._reporter.block_mismatch(block_start, block_len)
        for index in range(block_len):
            actual = self._buffer[block_start + index]
            expected = REFERENCE_PATTERN[index]
            if actual != expected:
                self._record_mismatch(Mismatch(block_start + index, expected, actual))

    def _record_mismatch(self, event: Mismatch) -> None:
        self._pass_failed = True
        self._pass_mismatches += 1
        self._stats.mismatches += 1
        self._reporter.mismatch(event)

    def _complete_pass(self) -> PassResult:
        self._passes_completed += 1
        result = PassResult(
            number=self._passes_completed,
            ok=not self._pass_failed,
            mismatch_count=self._pass_mismatches,
            started_at=self._pass_started_at,
            completed_at=timestamp_now(),
            duration_s=time.monotonic() - self._pass_clock,
        )
        self._stats.record_pass(result)
        self._reporter.pass_complete(result)
        if result.ok:
            self._reset_cursor()
        else:
            logger.warning(
                "pass %d found %d mismatches; refilling buffer",
                result.number,
                result.mismatch_count,
            )
            self.fill()
        return result

    def _reset_cursor(self) -> None:
        self._chunk_start = 0
        self._pass_failed = False
        self._pass_mismatches = 0
        self._pass_started_at = timestamp_now()
        self._pass_clock = time.monotonic()
