"""Shared test fixtures for ctatracker.

Provides reusable fixtures for isolating configuration and the working
directory, managing output state, building mock transports, and running
CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from ctatracker.output import OutputFormat, OutputManager, reset_output, set_output


SAMPLE_URL = (
    "http://ctabustracker.com/bustime/api/v2/getpredictions"
    "?key=X&rt=20&stpid=456&format=json"
)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once pytest's capture or Typer's
    CliRunner swaps the streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and the working directory to *tmp_path*.

    Points the XDG directories at subdirectories of tmp_path, clears every
    CTATRACKER_* environment variable, and changes into tmp_path so that
    replay files default there.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("ctatracker.config._is_xdg_platform", lambda: True)

    for var in [
        "CTATRACKER_MODE",
        "CTATRACKER_API_KEY",
        "CTATRACKER_REPLAY_DIR",
        "CTATRACKER_TIMEOUT",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN-format, colourless OutputManager with debug enabled."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Transport fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Factory for :class:`httpx.Client` instances backed by a MockTransport.

    Clients built by the factory are closed after the test.
    """
    clients: list[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
