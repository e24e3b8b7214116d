"""Root CLI command for wsldisplay."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from wsldisplay import __version__
from wsldisplay.commands._base import ExamplesCommand
from wsldisplay.commands._context import AppContext
from wsldisplay.config.settings import ConfigError, DisplaySettings
from wsldisplay.domain.types import Strategy


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "Invalid configuration: " + "; ".join(parts)


@click.command(
    cls=ExamplesCommand,
    context_settings={"max_content_width": 80},
    examples="""\
  export DISPLAY=$(wsldisplay)
  wsldisplay -d 0
  wsldisplay --strategy resolv
  wsldisplay --timeout 250 --retries 4 -v
  wsldisplay --json""",
)
@click.version_option(version=__version__, prog_name="wsldisplay")
@click.option(
    "-d",
    "--display",
    "--display-offset",
    "display",
    type=int,
    default=None,
    help="X display number; the probed port is 6000 + this.  [default: 1]",
)
@click.option(
    "-t",
    "--timeout",
    "timeout_ms",
    type=int,
    default=None,
    help="Connect timeout in milliseconds.  [default: 500]",
)
@click.option(
    "-r",
    "--retries",
    type=int,
    default=None,
    help="Number of connect attempts.  [default: 1]",
)
@click.option(
    "-s",
    "--strategy",
    type=click.Choice([s.value for s in Strategy]),
    default=None,
    help="Host discovery: default route gateway or resolv.conf nameserver.  [default: route]",
)
@click.option(
    "--resolv-conf",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Nameserver file used by --strategy resolv.  [default: /etc/resolv.conf]",
)
@click.option("-v", "--verbose", is_flag=True, help="Diagnostic output on stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON result.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
def cli(
    display: int | None,
    timeout_ms: int | None,
    retries: int | None,
    strategy: str | None,
    resolv_conf: Path | None,
    verbose: bool,
    log_json: bool,
    json_output: bool,
    config_path: str | None,
) -> None:
    """Print the host's X display (host:N) if an X server is listening on it.

    Exits 0 when a display answered, 1 when none did, 2 on errors.
    """
    try:
        settings = DisplaySettings.from_cli(
            config_path=config_path,
            probe={"display": display, "timeout_ms": timeout_ms, "retries": retries},
            resolver={"resolv_conf": resolv_conf},
            strategy=strategy,
            verbose=verbose,
            log_json=log_json,
            json_output=json_output,
        )
    except ValidationError as exc:
        raise ConfigError(_describe(exc)) from exc

    app = AppContext(settings)

    from wsldisplay.services.display import DisplayService

    app.emit(DisplayService(settings).locate())
