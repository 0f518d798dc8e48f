"""Well-known file locations."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

DEFAULT_LOG_PATH: Final[Path] = Path("/tmp/bitflip.log")

CONFIG_FILENAME: Final[str] = "bitflip.yaml"


def config_file() -> Path | None:
    if "BITFLIP_CONFIG" in os.environ:
        return Path(os.environ["BITFLIP_CONFIG"]).expanduser().resolve()
    candidate = Path.cwd() / CONFIG_FILENAME
    return candidate if candidate.exists() else None
