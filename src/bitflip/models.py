"""Data models for bitflip."""

from __future__ import annotations

from dataclasses import dataclass

from .pattern import PATTERN_SIZE


@dataclass(frozen=True, slots=True)
class Mismatch:
    """One byte of the test buffer that no longer holds its pattern value."""

    offset: int
    expected: int
    actual: int

    @property
    def flip(self) -> int:
        return self.expected ^ self.actual

    @property
    def pattern_index(self) -> int:
        return self.offset % PATTERN_SIZE

    @property
    def flipped_bits(self) -> int:
        return bin(self.flip).count("1")


@dataclass(frozen=True, slots=True)
class PassResult:
    number: int
    ok: bool
    mismatch_count: int
    started_at: str
    completed_at: str
    duration_s: float

    @property
    def status(self) -> str:
        return "OK" if self.ok else "FAIL"


@dataclass(slots=True)
class ScanStats:
    passes: int = 0
    failed_passes: int = 0
    mismatches: int = 0
    chunks_checked: int = 0
    bytes_checked: int = 0

    def record_pass(self, result: PassResult) -> None:
        self.passes += 1
        if not result.ok:
            self.failed_passes += 1
