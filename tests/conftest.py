"""Shared pytest fixtures and test helpers for wsldisplay tests."""

from __future__ import annotations

import logging
import os
import socket
from collections.abc import Callable, Generator, Iterable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's env vars and config file out of every test."""
    for key in list(os.environ):
        if key.startswith("WSLDISPLAY_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("wsldisplay")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


@pytest.fixture
def write_resolv_conf(tmp_path: Path) -> Callable[[str | bytes], Path]:
    """Write resolv.conf content to a temp file and return its path."""

    def _write(content: str | bytes) -> Path:
        path = tmp_path / "resolv.conf"
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def listening_port() -> Generator[int]:
    """A loopback TCP port with a listener accepting connections."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(8)
    try:
        yield server.getsockname()[1]
    finally:
        server.close()


@pytest.fixture
def closed_port() -> int:
    """A loopback TCP port with nothing listening (connects are refused)."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


# ---------------------------------------------------------------------------
# Fakes for the probe loop
# ---------------------------------------------------------------------------


class FakeConnection:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class ScriptedConnector:
    """Connect stand-in that replays a script of outcomes.

    Each entry is either an exception instance to raise or ``None`` for a
    successful connect. The last entry repeats once the script runs out.
    """

    def __init__(self, script: Iterable[BaseException | None]) -> None:
        self._script = list(script)
        self.calls: list[tuple[tuple[str, int], float]] = []
        self.connections: list[FakeConnection] = []

    def __call__(self, address: tuple[str, int], timeout: float) -> Any:
        self.calls.append((address, timeout))
        index = min(len(self.calls), len(self._script)) - 1
        outcome = self._script[index]
        if outcome is not None:
            raise outcome
        conn = FakeConnection()
        self.connections.append(conn)
        return conn


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_connector() -> type[ScriptedConnector]:
    """Factory for scripted connectors: ``make_connector([exc, None])``."""
    return ScriptedConnector
