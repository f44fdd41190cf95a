from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from gym_cli.core.config import (
    ConfigError,
    _deep_merge,
    config_number,
    default_config_path,
    default_data_dir,
    expand_path,
    load_config,
    resolve_data_dir,
    resolve_output_dir,
    save_config,
)


def test_deep_merge_nested_dicts() -> None:
    base = {"a": {"b": 1, "c": 2}, "x": 3}
    override = {"a": {"b": 9}, "y": 4}
    merged = _deep_merge(base, override)
    assert merged == {"a": {"b": 9, "c": 2}, "x": 3, "y": 4}
    assert base["a"]["b"] == 1


def test_expand_path_expands_home_and_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GYM_TMP_PATH", str(tmp_path))
    expanded = expand_path("$GYM_TMP_PATH/config.toml")
    assert expanded == (tmp_path / "config.toml").resolve()


def test_default_config_path_uses_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "custom.toml"
    monkeypatch.setenv("GYM_CONFIG_FILE", str(path))
    assert default_config_path() == path.resolve()


def test_default_data_dir_uses_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "gym-data"
    monkeypatch.setenv("GYM_DATA_DIR", str(path))
    assert default_data_dir() == path.resolve()


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.toml")
    assert cfg["limits"]["max_weight"] == 300.0
    assert cfg["limits"]["history_limit"] == 50
    assert cfg["defaults"]["weight_step"] == 2.5
    assert cfg["timer"]["rest_seconds"] == 90
    assert cfg["export"]["default_directory"] == "./gym-export"


def test_load_config_from_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"limits": {"history_limit": 10}, "timer": {"rest_seconds": 120}}))
    cfg = load_config(path)
    assert cfg["limits"]["history_limit"] == 10
    assert cfg["limits"]["max_weight"] == 300.0
    assert cfg["timer"]["rest_seconds"] == 120


def test_load_config_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[defaults]
weight_step = 1.25

[timer]
increment_seconds = 15
""".strip()
        + "\n"
    )
    cfg = load_config(path)
    assert cfg["defaults"]["weight_step"] == 1.25
    assert cfg["defaults"]["start_weight"] == 20.0
    assert cfg["timer"]["increment_seconds"] == 15


def test_load_config_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{broken")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_invalid_toml_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[limits\nmax_weight = 3")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_non_table_root_raises(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="object/table"):
        load_config(path)


def test_save_config_json(tmp_path: Path) -> None:
    payload: Dict[str, Any] = {"limits": {"history_limit": 7}}
    path = save_config(payload, tmp_path / "config.json")
    assert path.exists()
    assert json.loads(path.read_text())["limits"]["history_limit"] == 7


def test_save_config_toml_and_reload(tmp_path: Path) -> None:
    payload: Dict[str, Any] = {
        "storage": {"directory": str(tmp_path / "data")},
        "timer": {"rest_seconds": 60},
        "export": {"default_directory": "./out"},
    }
    path = save_config(payload, tmp_path / "nested" / "config.toml")
    assert path.exists()
    cfg = load_config(path)
    assert cfg["timer"]["rest_seconds"] == 60
    assert cfg["storage"]["directory"] == str(tmp_path / "data")
    assert cfg["export"]["default_directory"] == "./out"


def test_resolve_data_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GYM_DATA_DIR", str(tmp_path / "from-env"))
    resolved = resolve_data_dir({"storage": {"directory": "/nope"}})
    assert resolved == (tmp_path / "from-env").resolve()


def test_resolve_data_dir_uses_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("GYM_DATA_DIR", raising=False)
    resolved = resolve_data_dir({"storage": {"directory": str(tmp_path / "cfg")}})
    assert resolved == (tmp_path / "cfg").resolve()


def test_resolve_output_dir_prefers_explicit(tmp_path: Path) -> None:
    explicit = tmp_path / "exports"
    cfg = {"export": {"default_directory": "/tmp/ignored"}}
    assert resolve_output_dir(cfg, explicit=explicit) == explicit.resolve()


def test_resolve_output_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GYM_OUTPUT_DIR", str(tmp_path / "from-env"))
    cfg = {"export": {"default_directory": "/tmp/ignored"}}
    assert resolve_output_dir(cfg) == (tmp_path / "from-env").resolve()


def test_config_number_falls_back_on_unusable_values() -> None:
    cfg = {"limits": {"max_weight": "250", "history_limit": "lots", "flag": True}}
    assert config_number(cfg, "limits", "max_weight", 300.0) == 250.0
    assert config_number(cfg, "limits", "history_limit", 50) == 50
    assert config_number(cfg, "limits", "flag", 1.0) == 1.0
    assert config_number(cfg, "timer", "rest_seconds", 90) == 90
