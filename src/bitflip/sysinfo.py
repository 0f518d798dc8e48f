"""Host memory information."""

from __future__ import annotations

import platform
from pathlib import Path
from typing import Dict

MEMINFO_PATH = Path("/proc/meminfo")


def _read_optional(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""
    except PermissionError:
        return ""


def parse_meminfo(text: str) -> Dict[str, int]:
    """Parse ``/proc/meminfo`` into byte counts keyed by field name."""
    parsed: Dict[str, int] = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        fields = value.split()
        if not fields:
            continue
        try:
            amount = int(fields[0])
        except ValueError:
            continue
        if len(fields) > 1 and fields[1].lower() == "kb":
            amount *= 1024
        parsed[key.strip()] = amount
    return parsed


def available_memory_bytes(meminfo_path: Path = MEMINFO_PATH) -> int | None:
    meminfo = parse_meminfo(_read_optional(meminfo_path))
    return meminfo.get("MemAvailable")


def collect_sysinfo(meminfo_path: Path = MEMINFO_PATH) -> Dict[str, str]:
    info: Dict[str, str] = {
        "platform": platform.platform(),
        "python_version": platform.python_version(),
    }
    meminfo = parse_meminfo(_read_optional(meminfo_path))
    for key in ("MemTotal", "MemAvailable"):
        if key in meminfo:
            info[key] = str(meminfo[key])
    return info
