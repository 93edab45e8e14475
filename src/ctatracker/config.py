"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for ctatracker:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.ctatracker/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~ctatracker.models.GlobalConfig`
  JSON file storing the call mode, API key, request and replay settings.
* **Project config** -- An optional ``./ctatracker.json`` whose keys are
  layered over the global config.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`), which the replay store reuses for response files.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ctatracker.exceptions import ConfigError
from ctatracker.models import GlobalConfig

_APP_NAME = "ctatracker"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "ctatracker.json"

ENV_MODE = "CTATRACKER_MODE"
ENV_API_KEY = "CTATRACKER_API_KEY"
ENV_REPLAY_DIR = "CTATRACKER_REPLAY_DIR"
ENV_TIMEOUT = "CTATRACKER_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/ctatracker/`` (default ``~/.config/ctatracker/``).
    On macOS/Windows: ``~/.ctatracker/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/ctatracker/`` (default ``~/.local/share/ctatracker/``).
    On macOS/Windows: ``~/.ctatracker/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  Newlines are
    written untranslated.  On any failure the temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~ctatracker.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def reset_global_config() -> GlobalConfig:
    """Overwrite the global config file with defaults and return them."""
    config = GlobalConfig()
    save_global_config(config)
    return config


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./ctatracker.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *override* merged in, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_mode: Optional[str] = None,
    cli_replay_dir: Optional[str] = None,
    cli_timeout: Optional[float] = None,
    cli_api_key: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_mode``, ``cli_replay_dir``, ``cli_timeout``, ``cli_api_key``)
        2. Environment variables (``CTATRACKER_MODE``, ``CTATRACKER_REPLAY_DIR``,
           ``CTATRACKER_TIMEOUT``, ``CTATRACKER_API_KEY``)
        3. Project config (``./ctatracker.json``)
        4. User config (``~/.config/ctatracker/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer supplies an invalid value.
    """
    # 5 + 4.
    data = load_global_config().model_dump(mode="json")

    # 3.
    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    # 2.
    overrides: dict[str, Any] = {}
    env_mode = os.environ.get(ENV_MODE)
    if env_mode:
        overrides["mode"] = env_mode
    env_api_key = os.environ.get(ENV_API_KEY)
    if env_api_key:
        overrides["api_key"] = env_api_key
    env_replay_dir = os.environ.get(ENV_REPLAY_DIR)
    if env_replay_dir:
        overrides["replay"] = {"directory": env_replay_dir}
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        overrides["request"] = {"timeout": env_timeout}
    data = _deep_merge(data, overrides)

    # 1.
    cli: dict[str, Any] = {}
    if cli_mode is not None:
        cli["mode"] = cli_mode
    if cli_api_key is not None:
        cli["api_key"] = cli_api_key
    if cli_replay_dir is not None:
        cli["replay"] = {"directory": cli_replay_dir}
    if cli_timeout is not None:
        cli["request"] = {"timeout": cli_timeout}
    data = _deep_merge(data, cli)

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def get_replay_dir(config: GlobalConfig) -> Path:
    """Return the replay directory for *config* (the working directory if unset)."""
    if config.replay.directory:
        return Path(config.replay.directory).expanduser()
    return Path.cwd()
