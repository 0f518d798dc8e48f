import pytest

from bitflip.pattern import CHUNK_SIZE
from bitflip.utils import format_bytes, hex_byte


@pytest.mark.parametrize(
    ("count", "expected"),
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KiB"),
        (1536, "1.5 KiB"),
        (CHUNK_SIZE, "1.0 MiB"),
        (1024 * 1024 * 512, "512.0 MiB"),
        (1024**3 - 1, "1.0 GiB"),
        (1024**4, "1024.0 GiB"),
    ],
)
def test_format_bytes(count: int, expected: str) -> None:
    assert format_bytes(count) == expected


def test_hex_byte() -> None:
    assert hex_byte(0x0A) == "0a"
    assert hex_byte(0xFF) == "ff"
