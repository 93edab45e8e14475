"""Tests for ctatracker.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ctatracker.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    get_replay_dir,
    load_global_config,
    load_project_config,
    reset_global_config,
    resolve_config,
    save_global_config,
)
from ctatracker.exceptions import ConfigError
from ctatracker.models import CallMode, GlobalConfig, ReplayConfig


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_xdg(self, isolated_config: Path) -> None:
        result = get_config_dir()
        assert result == isolated_config / "config" / "ctatracker"
        assert result.is_dir()

    def test_data_dir_xdg(self, isolated_config: Path) -> None:
        result = get_data_dir()
        assert result == isolated_config / "data" / "ctatracker"
        assert result.is_dir()

    def test_fallback_on_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("ctatracker.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".ctatracker"
        assert get_data_dir() == tmp_path / ".ctatracker" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        _atomic_write(target, "hello")
        assert target.read_text() == "hello"

    def test_newlines_untranslated(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        _atomic_write(target, "a\r\nb\n")
        assert target.read_bytes() == b"a\r\nb\n"

    def test_no_temp_file_left_behind(self, tmp_path: Path) -> None:
        _atomic_write(tmp_path / "out.txt", "x")
        assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.mode is CallMode.LIVE

    def test_save_and_load(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(mode=CallMode.OFFLINE, api_key="K"))
        loaded = load_global_config()
        assert loaded.mode is CallMode.OFFLINE
        assert loaded.api_key == "K"

    def test_invalid_json(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json")
        with pytest.raises(ConfigError):
            load_global_config()

    def test_invalid_mode(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"mode": "sometimes"})
        with pytest.raises(ConfigError):
            load_global_config()

    def test_reset(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(api_key="K"))
        assert reset_global_config() == GlobalConfig()
        assert load_global_config().api_key is None


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loads(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "ctatracker.json", {"mode": "offline"})
        assert load_project_config() == {"mode": "offline"}

    def test_not_an_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "ctatracker.json", ["offline"])
        with pytest.raises(ConfigError):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_project_overrides_user(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(mode=CallMode.LIVE_SAVE, api_key="USER"))
        _write_json(isolated_config / "ctatracker.json", {"mode": "offline", "request": {"timeout": 7}})

        config = resolve_config()
        assert config.mode is CallMode.OFFLINE
        assert config.api_key == "USER"
        assert config.request.timeout == 7

    def test_env_overrides_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(isolated_config / "ctatracker.json", {"mode": "offline"})
        monkeypatch.setenv("CTATRACKER_MODE", "live-save")
        monkeypatch.setenv("CTATRACKER_API_KEY", "ENV")
        monkeypatch.setenv("CTATRACKER_REPLAY_DIR", "/tmp/replays")
        monkeypatch.setenv("CTATRACKER_TIMEOUT", "12.5")

        config = resolve_config()
        assert config.mode is CallMode.LIVE_SAVE
        assert config.api_key == "ENV"
        assert config.replay.directory == "/tmp/replays"
        assert config.request.timeout == 12.5

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CTATRACKER_MODE", "live-save")
        monkeypatch.setenv("CTATRACKER_TIMEOUT", "12.5")

        config = resolve_config(cli_mode="offline", cli_timeout=1.0, cli_replay_dir="here", cli_api_key="CLI")
        assert config.mode is CallMode.OFFLINE
        assert config.request.timeout == 1.0
        assert config.replay.directory == "here"
        assert config.api_key == "CLI"

    def test_invalid_env_mode(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CTATRACKER_MODE", "never")
        with pytest.raises(ConfigError):
            resolve_config()

    def test_invalid_timeout(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_config(cli_timeout=0)


class TestReplayDir:
    def test_defaults_to_cwd(self, isolated_config: Path) -> None:
        assert get_replay_dir(GlobalConfig()) == isolated_config

    def test_configured(self, tmp_path: Path) -> None:
        config = GlobalConfig(replay=ReplayConfig(directory=str(tmp_path / "r")))
        assert get_replay_dir(config) == tmp_path / "r"
