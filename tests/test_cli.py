"""Tests for the wsldisplay command, end to end through Click."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from wsldisplay import __version__
from wsldisplay.cli import cli
from wsldisplay.config.settings import EXIT_ABSENT, EXIT_FAILURE
from wsldisplay.infrastructure import probe as probe_module


@pytest.fixture
def fake_socket(monkeypatch: pytest.MonkeyPatch, make_connector: Any) -> Callable[..., Any]:
    """Route socket.create_connection through a scripted connector."""

    def _install(*script: BaseException | None) -> Any:
        connector = make_connector(list(script))
        monkeypatch.setattr(
            probe_module.socket,
            "create_connection",
            lambda address, timeout: connector(address, timeout),
        )
        return connector

    return _install


@pytest.fixture
def nameserver_file(write_resolv_conf: Callable[[str | bytes], Path]) -> Path:
    return write_resolv_conf("nameserver 172.30.192.1\nnameserver 8.8.8.8\n")


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "--display" in result.output
    assert "--strategy" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--examples"])
    assert result.exit_code == 0
    assert "export DISPLAY=$(wsldisplay)" in result.output


def test_examples_ignore_broken_config(cli_runner: CliRunner, tmp_path: Path) -> None:
    missing = tmp_path / "missing.toml"
    result = cli_runner.invoke(
        cli, ["--examples", "-c", str(missing)], env={"WSLDISPLAY_PROBE__RETRIES": "0"}
    )
    assert result.exit_code == 0
    assert "wsldisplay -d 0" in result.output


class TestResolvStrategy:
    def test_display_reachable(
        self, cli_runner: CliRunner, nameserver_file: Path, fake_socket: Any
    ) -> None:
        connector = fake_socket(None)
        result = cli_runner.invoke(
            cli, ["--strategy", "resolv", "--resolv-conf", str(nameserver_file)]
        )
        assert result.exit_code == 0, result.stderr
        assert result.stdout == "172.30.192.1:1\n"
        assert connector.calls == [(("172.30.192.1", 6001), 0.5)]

    def test_nothing_listening(
        self, cli_runner: CliRunner, nameserver_file: Path, fake_socket: Any
    ) -> None:
        fake_socket(ConnectionRefusedError())
        result = cli_runner.invoke(
            cli, ["-s", "resolv", "--resolv-conf", str(nameserver_file), "--retries", "1"]
        )
        assert result.exit_code == EXIT_ABSENT
        assert result.stdout == ""
        assert result.stderr == ""

    def test_display_offset_alias(
        self, cli_runner: CliRunner, nameserver_file: Path, fake_socket: Any
    ) -> None:
        connector = fake_socket(None)
        result = cli_runner.invoke(
            cli,
            ["-s", "resolv", "--resolv-conf", str(nameserver_file), "--display-offset", "0"],
        )
        assert result.stdout == "172.30.192.1:0\n"
        assert connector.calls[0][0] == ("172.30.192.1", 6000)

    def test_missing_file_fails(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(
            cli, ["-s", "resolv", "--resolv-conf", str(tmp_path / "missing.conf")]
        )
        assert result.exit_code == EXIT_FAILURE
        assert result.stdout == ""
        assert result.stderr.startswith("ERROR: resolve — Failed to read")

    def test_port_overflow_fails(
        self, cli_runner: CliRunner, nameserver_file: Path, fake_socket: Any
    ) -> None:
        connector = fake_socket(None)
        result = cli_runner.invoke(
            cli, ["-s", "resolv", "--resolv-conf", str(nameserver_file), "-d", "65535"]
        )
        assert result.exit_code == EXIT_FAILURE
        assert "exceeds 65535" in result.stderr
        assert connector.calls == []

    def test_real_loopback_listener(
        self,
        cli_runner: CliRunner,
        write_resolv_conf: Callable[[str | bytes], Path],
        listening_port: int,
    ) -> None:
        if listening_port < 6000:
            pytest.skip("ephemeral port below the X11 base")
        path = write_resolv_conf("nameserver 127.0.0.1\n")
        display = listening_port - 6000
        result = cli_runner.invoke(
            cli, ["-s", "resolv", "--resolv-conf", str(path), "-d", str(display)]
        )
        assert result.exit_code == 0, result.stderr
        assert result.stdout == f"127.0.0.1:{display}\n"

    def test_real_loopback_refused(
        self,
        cli_runner: CliRunner,
        write_resolv_conf: Callable[[str | bytes], Path],
        closed_port: int,
    ) -> None:
        if closed_port < 6000:
            pytest.skip("ephemeral port below the X11 base")
        path = write_resolv_conf("nameserver 127.0.0.1\n")
        result = cli_runner.invoke(
            cli, ["-s", "resolv", "--resolv-conf", str(path), "-d", str(closed_port - 6000)]
        )
        assert result.exit_code == EXIT_ABSENT
        assert result.stdout == ""


class TestRouteStrategy:
    def _config(self, tmp_path: Path, records: Any) -> Path:
        script = f"print({json.dumps(records)!r})"
        cfg = tmp_path / "wsldisplay.toml"
        command = json.dumps([sys.executable, "-c", script])
        cfg.write_text(f"[resolver]\nroute_command = {command}\n")
        return cfg

    def test_default_strategy_is_route(
        self, cli_runner: CliRunner, tmp_path: Path, fake_socket: Any
    ) -> None:
        cfg = self._config(tmp_path, [{"dst": "default", "gateway": "172.30.192.1"}])
        fake_socket(None)
        result = cli_runner.invoke(cli, ["-c", str(cfg)])
        assert result.exit_code == 0, result.stderr
        assert result.stdout == "172.30.192.1:1\n"

    def test_multiple_routes_warn_on_stderr(
        self, cli_runner: CliRunner, tmp_path: Path, fake_socket: Any
    ) -> None:
        cfg = self._config(
            tmp_path,
            [
                {"dst": "default", "gateway": "10.0.0.1"},
                {"dst": "default", "gateway": "10.0.0.2"},
            ],
        )
        fake_socket(None)
        result = cli_runner.invoke(cli, ["-c", str(cfg)])
        assert result.exit_code == 0
        assert result.stdout == "10.0.0.1:1\n"
        assert result.stderr.startswith("WARNING: Found 2 default routes")

    def test_multiple_routes_warn_on_stderr_in_json_mode(
        self, cli_runner: CliRunner, tmp_path: Path, fake_socket: Any
    ) -> None:
        cfg = self._config(
            tmp_path,
            [
                {"dst": "default", "gateway": "10.0.0.1"},
                {"dst": "default", "gateway": "10.0.0.2"},
            ],
        )
        fake_socket(None)
        result = cli_runner.invoke(cli, ["--json", "-c", str(cfg)])
        assert result.exit_code == 0
        assert result.stderr.startswith("WARNING: Found 2 default routes")
        payload = json.loads(result.stdout)
        assert payload["host"] == "10.0.0.1"
        assert len(payload["warnings"]) == 1

    def test_empty_routes_fail(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cfg = self._config(tmp_path, [])
        result = cli_runner.invoke(cli, ["-c", str(cfg)])
        assert result.exit_code == EXIT_FAILURE
        assert "No default route found" in result.stderr

    def test_json_failure_on_stderr(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        cfg = self._config(tmp_path, [{"dst": "10.0.0.0/8", "gateway": "10.0.0.1"}])
        result = cli_runner.invoke(cli, ["--json", "-c", str(cfg)])
        assert result.exit_code == EXIT_FAILURE
        assert result.stdout == ""
        payload = json.loads(result.stderr)
        assert payload["status"] == "failed"
        assert payload["error"]["code"] == "VALIDATION_ERROR"


class TestJsonOutput:
    def test_success_payload(
        self, cli_runner: CliRunner, nameserver_file: Path, fake_socket: Any
    ) -> None:
        fake_socket(None)
        result = cli_runner.invoke(
            cli, ["--json", "-s", "resolv", "--resolv-conf", str(nameserver_file)]
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "succeeded"
        assert payload["host"] == "172.30.192.1"
        assert payload["port"] == 6001

    def test_absent_payload(
        self, cli_runner: CliRunner, nameserver_file: Path, fake_socket: Any
    ) -> None:
        fake_socket(TimeoutError())
        result = cli_runner.invoke(
            cli, ["--json", "-s", "resolv", "--resolv-conf", str(nameserver_file), "-r", "2"]
        )
        assert result.exit_code == EXIT_ABSENT
        payload = json.loads(result.stdout)
        assert payload["status"] == "absent"
        assert payload["attempts"] == 2


class TestInvalidConfiguration:
    @pytest.mark.parametrize(
        "args",
        [["--retries", "0"], ["--timeout", "0"], ["-d", "-1"], ["-d", "70000"]],
    )
    def test_out_of_range(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == EXIT_FAILURE
        assert "Invalid configuration" in result.stderr
        assert result.stdout == ""

    def test_bad_strategy_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--strategy", "dns"])
        assert result.exit_code == EXIT_FAILURE

    def test_missing_config_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml")])
        assert result.exit_code == EXIT_FAILURE
        assert "Config file not found" in result.stderr


def test_verbose_diagnostics_stay_on_stderr(
    cli_runner: CliRunner, nameserver_file: Path, fake_socket: Any
) -> None:
    fake_socket(None)
    result = cli_runner.invoke(
        cli, ["-v", "--log-json", "-s", "resolv", "--resolv-conf", str(nameserver_file)]
    )
    assert result.exit_code == 0
    assert result.stdout == "172.30.192.1:1\n"
