"""Reference test pattern and buffer sizing constants."""

from __future__ import annotations

from typing import Final

BYTES_PER_MB: Final[int] = 1024 * 1024

# Prime length, so the pattern never lines up with word or cache-line boundaries
# and every fixed-offset fault is eventually seen at every phase.
PATTERN_SIZE: Final[int] = 257

REFERENCE_PATTERN: Final[bytes] = bytes(
    [
        0x55, 0x55, 0xAA, 0xAA, 0x55, 0x55, 0xAA, 0xAA,  # fenceposts
        0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF,  # all ones
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,  # all zeros
        # 233 random bytes
        0x98, 0xCC, 0x95, 0x4F, 0x96, 0xE9, 0x5C, 0x27, 0xAB, 0xA9, 0xEE, 0x16,
        0xAD, 0x9E, 0x61, 0xF2, 0x94, 0x1D, 0x83, 0x19, 0x9A, 0x23, 0x0A, 0x31,
        0xEC, 0x30, 0x43, 0xDF, 0xDF, 0x19, 0x8C, 0x40, 0x73, 0x73, 0xEF, 0x3A,
        0x70, 0xF4, 0x58, 0xA3, 0x67, 0x95, 0xE6, 0x5A, 0x15, 0xB1, 0x13, 0x00,
        0x7D, 0x2C, 0x51, 0xE1, 0xC4, 0x00, 0xC4, 0xE7, 0x15, 0x4D, 0xAF, 0x85,
        0x1A, 0x5E, 0x21, 0x0A, 0xA1, 0x8D, 0xDC, 0xAE, 0x66, 0xF9, 0x5E, 0xC7,
        0x25, 0xAB, 0x7A, 0xEE, 0x2D, 0x7A, 0x0F, 0x33, 0x43, 0x53, 0x21, 0xE6,
        0xD4, 0x4E, 0x0F, 0x8B, 0x6E, 0xA6, 0x67, 0x98, 0x74, 0x80, 0x0E, 0x82,
        0xDF, 0xB6, 0x4A, 0xC9, 0xE2, 0x49, 0x45, 0x6C, 0xE6, 0xC6, 0x64, 0x73,
        0xCD, 0xA8, 0xE3, 0xE5, 0x86, 0x77, 0x95, 0xE6, 0x7D, 0x33, 0x71, 0x2F,
        0xF9, 0x13, 0xD6, 0xD2, 0x4E, 0xBE, 0x78, 0x4D, 0x52, 0xCF, 0x83, 0xF6,
        0xB3, 0xDD, 0x94, 0xBC, 0xFF, 0x88, 0xCD, 0x72, 0xA5, 0x72, 0x55, 0x0A,
        0x4D, 0x76, 0x49, 0xF8, 0x96, 0x86, 0x2C, 0x53, 0x87, 0x70, 0x44, 0x7B,
        0x14, 0x4F, 0x0D, 0xD1, 0x6F, 0x30, 0x88, 0x8D, 0xE9, 0xF0, 0xF8, 0x4A,
        0xE4, 0x6C, 0x82, 0xA3, 0x24, 0xDB, 0x65, 0x4D, 0x1E, 0xE6, 0xAB, 0x0C,
        0xAB, 0x42, 0xAF, 0xC8, 0xFC, 0xAB, 0xD1, 0x15, 0x05, 0xDC, 0x22, 0xBF,
        0x79, 0x33, 0x41, 0x62, 0x73, 0x6E, 0xEA, 0x0E, 0xB5, 0xA3, 0xDF, 0x84,
        0x34, 0xDB, 0x70, 0xDD, 0x3E, 0x48, 0x7A, 0xC8, 0x68, 0x98, 0x3D, 0x32,
        0x40, 0x10, 0x72, 0x43, 0xC8, 0x93, 0xDC, 0xFC, 0x43, 0x60, 0x49, 0xDB,
        0xD7, 0x15, 0x41, 0x93, 0x60,
    ]
)

# Largest multiple of the pattern length that fits in one megabyte.
CHUNK_SIZE: Final[int] = BYTES_PER_MB // PATTERN_SIZE * PATTERN_SIZE


def repeat_pattern(length: int) -> bytes:
    """Return ``length`` bytes of the pattern starting at phase zero."""
    repeats, remainder = divmod(length, PATTERN_SIZE)
    return REFERENCE_PATTERN * repeats + REFERENCE_PATTERN[:remainder]
