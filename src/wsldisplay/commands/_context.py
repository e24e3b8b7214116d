"""AppContext — per-invocation state for the CLI.

Configures logging from the settings once, and owns result emission:
stdout/stderr routing and the exit code contract.

Exit codes:
  0 — display reachable, ``host:display`` on stdout
  1 — no display server answered (nothing on stdout)
  2 — resolution, configuration or probe failure (message on stderr)
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from wsldisplay.config.logging import configure_logging
from wsldisplay.config.settings import EXIT_ABSENT, EXIT_FAILURE
from wsldisplay.domain.types import LookupStatus
from wsldisplay.output.formatters import format_error, format_result, format_warnings

if TYPE_CHECKING:
    from wsldisplay.config.settings import DisplaySettings
    from wsldisplay.services.result import LookupResult


class AppContext:
    """Shared state for one CLI invocation."""

    def __init__(self, settings: DisplaySettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: LookupResult) -> None:
        """Write a LookupResult and exit with the matching code.

        * Succeeded: payload to stdout, returns normally.
        * Absent: nothing on stdout in human mode, exit 1.
        * Failed: error to stderr, exit 2.

        Warnings always go to stderr as WARNING: lines, so a caller running
        `export DISPLAY=$(wsldisplay)` still sees them; in JSON mode they are
        also carried in the payload.
        """
        json_output = self.settings.json_output
        color = sys.stderr.isatty()

        warnings = format_warnings(result, color=color)
        if warnings:
            click.echo(warnings, err=True)

        if result.status is LookupStatus.FAILED:
            if json_output:
                click.echo(format_result(result, json_output=True), err=True)
            else:
                click.echo(
                    format_error(result, verbose=self.settings.verbose, color=color),
                    err=True,
                )
            raise SystemExit(EXIT_FAILURE)

        output = format_result(result, json_output=json_output)
        if output:
            click.echo(output)
        if result.status is LookupStatus.ABSENT:
            raise SystemExit(EXIT_ABSENT)
