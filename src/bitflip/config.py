"""Scan configuration: defaults, YAML file, environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .exceptions import ConfigurationError
from .paths import DEFAULT_LOG_PATH, config_file
from .pattern import CHUNK_SIZE, PATTERN_SIZE
from .scanner import DEFAULT_INTERVAL_S
from .utils import load_yaml

_KNOWN_KEYS = ("chunk_size", "interval_s", "log_path", "max_passes", "log_level")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class ScanConfig:
    chunk_size: int = CHUNK_SIZE
    interval_s: float = DEFAULT_INTERVAL_S
    log_path: Path | None = DEFAULT_LOG_PATH
    max_passes: int | None = None
    log_level: str = "WARNING"

    def with_overrides(self, **overrides: Any) -> "ScanConfig":
        """Return a copy with every override that is not ``None`` applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied)


def _positive_int(value: Any, name: str, context: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{context}: '{name}' must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{context}: '{name}' must be positive, got {value}")
    return value


def _interval(value: Any, context: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{context}: 'interval_s' must be numeric, got {value!r}")
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{context}: 'interval_s' must be numeric, got {value!r}") from exc
    if numeric < 0:
        raise ConfigurationError(f"{context}: 'interval_s' must not be negative, got {numeric}")
    return numeric


def normalize_log_level(value: Any, context: str = "log_level") -> str:
    level = str(value).upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(f"{context}: unknown log_level {value!r}")
    return level


def parse_config(payload: Dict[str, Any], context: str) -> ScanConfig:
    unknown = sorted(set(payload) - set(_KNOWN_KEYS))
    if unknown:
        raise ConfigurationError(f"{context}: unknown keys {', '.join(unknown)}")

    config = ScanConfig()
    if "chunk_size" in payload:
        chunk_size = _positive_int(payload["chunk_size"], "chunk_size", context)
        if chunk_size % PATTERN_SIZE:
            raise ConfigurationError(
                f"{context}: 'chunk_size' must be a multiple of {PATTERN_SIZE}, got {chunk_size}"
            )
        config.chunk_size = chunk_size
    if "interval_s" in payload:
        config.interval_s = _interval(payload["interval_s"], context)
    if "log_path" in payload:
        raw = payload["log_path"]
        config.log_path = None if raw in (None, False, "") else Path(str(raw)).expanduser()
    if payload.get("max_passes") is not None:
        config.max_passes = _positive_int(payload["max_passes"], "max_passes", context)
    if "log_level" in payload:
        config.log_level = normalize_log_level(payload["log_level"], context)
    return config


def load_config(path: Path) -> ScanConfig:
    try:
        payload = load_yaml(path)
    except OSError as exc:
        reason = exc.strerror or exc
        raise ConfigurationError(f"{path}: cannot read config file ({reason})") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"{path}: invalid YAML: {exc}") from exc
    if payload is None:
        return ScanConfig()
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{path}: expected mapping at root")
    return parse_config(payload, f"{path}")


def apply_environment(config: ScanConfig, environ: Mapping[str, str] | None = None) -> ScanConfig:
    env = os.environ if environ is None else environ
    updated = replace(config)
    if "BITFLIP_LOG" in env:
        raw = env["BITFLIP_LOG"].strip()
        updated.log_path = Path(raw).expanduser() if raw else None
    if "BITFLIP_INTERVAL" in env:
        updated.interval_s = _interval(env["BITFLIP_INTERVAL"], "BITFLIP_INTERVAL")
    return updated


def resolve_config(
    path: Path | None = None, environ: Mapping[str, str] | None = None
) -> ScanConfig:
    source = path or config_file()
    config = load_config(source) if source is not None else ScanConfig()
    return apply_environment(config, environ)
