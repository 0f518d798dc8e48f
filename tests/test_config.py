from pathlib import Path

import pytest

from bitflip.config import ScanConfig, apply_environment, load_config, resolve_config
from bitflip.exceptions import ConfigurationError
from bitflip.paths import DEFAULT_LOG_PATH
from bitflip.pattern import CHUNK_SIZE, PATTERN_SIZE


def test_defaults() -> None:
    config = ScanConfig()
    assert config.chunk_size == CHUNK_SIZE
    assert config.interval_s == pytest.approx(0.1)
    assert config.log_path == DEFAULT_LOG_PATH
    assert config.max_passes is None


def test_config_loading(tmp_path: Path) -> None:
    config_path = tmp_path / "bitflip.yaml"
    config_path.write_text(
        f"""
chunk_size: {PATTERN_SIZE * 8}
interval_s: 0.25
log_path: {tmp_path / "scan.log"}
max_passes: 3
log_level: info
""",
        encoding="utf-8",
    )
    config = load_config(config_path)
    assert config.chunk_size == PATTERN_SIZE * 8
    assert config.interval_s == pytest.approx(0.25)
    assert config.log_path == tmp_path / "scan.log"
    assert config.max_passes == 3
    assert config.log_level == "INFO"


def test_null_log_path_disables_log(tmp_path: Path) -> None:
    config_path = tmp_path / "bitflip.yaml"
    config_path.write_text("log_path: null\n", encoding="utf-8")
    assert load_config(config_path).log_path is None


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "bitflip.yaml"
    config_path.write_text("", encoding="utf-8")
    assert load_config(config_path) == ScanConfig()


@pytest.mark.parametrize(
    "content",
    [
        "- not a mapping\n",
        "chunk_size: 1000\n",
        "chunk_size: -257\n",
        "interval_s: fast\n",
        "interval_s: -1\n",
        "max_passes: 0\n",
        "log_level: loud\n",
        "size: 10\n",
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, content: str) -> None:
    config_path = tmp_path / "bitflip.yaml"
    config_path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(config_path)
    assert str(config_path) in str(excinfo.value)


def test_environment_overrides(tmp_path: Path) -> None:
    config = apply_environment(
        ScanConfig(),
        {"BITFLIP_LOG": str(tmp_path / "env.log"), "BITFLIP_INTERVAL": "0.5"},
    )
    assert config.log_path == tmp_path / "env.log"
    assert config.interval_s == pytest.approx(0.5)
    assert apply_environment(ScanConfig(), {"BITFLIP_LOG": ""}).log_path is None


def test_resolve_config_without_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BITFLIP_CONFIG", raising=False)
    assert resolve_config(environ={}) == ScanConfig()


def test_resolve_config_picks_up_working_directory_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "bitflip.yaml").write_text("max_passes: 7\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BITFLIP_CONFIG", raising=False)
    assert resolve_config(environ={}).max_passes == 7


def test_with_overrides_ignores_none() -> None:
    config = ScanConfig(max_passes=2).with_overrides(max_passes=None, interval_s=0.0)
    assert config.max_passes == 2
    assert config.interval_s == 0.0


def test_missing_config_file_is_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "absent.yaml"
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(config_path)
    assert str(config_path) in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_malformed_yaml_is_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "bitflip.yaml"
    config_path.write_text("interval_s: [0\n", encoding="utf-8")
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(config_path)
    assert str(config_path) in str(excinfo.value)
    assert "invalid YAML" in str(excinfo.value)
