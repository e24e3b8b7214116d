"""Human/JSON output for LookupResult.

Human mode keeps stdout machine-friendly: a successful lookup prints only
``host:display`` so ``export DISPLAY=$(wsldisplay)`` works. Errors and
warnings are rendered separately for stderr.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from wsldisplay.output.console import create_console, get_output

if TYPE_CHECKING:
    from wsldisplay.services.result import LookupResult


def format_result(result: LookupResult, *, json_output: bool = False) -> str:
    """Return the payload for a result; empty for a human-mode absent/failed."""
    if json_output:
        return result.model_dump_json(indent=2)
    return result.display_value or ""


def format_error(result: LookupResult, *, verbose: bool = False, color: bool = False) -> str:
    """Render ``ERROR: <step> — <message>`` (plus detail when verbose)."""
    console = create_console(color=color)
    error = result.error
    step = str(error.detail.get("step", result.op)) if error else result.op
    message = error.message if error else "Unknown error"

    console.print(
        Text("ERROR:", style="wsl.error"),
        Text(step, style="wsl.step"),
        Text(f"— {message}"),
    )
    if verbose and error:
        console.print(Text(f"  code: {error.code}", style="wsl.key"))
        for key, value in error.detail.items():
            if key == "step":
                continue
            console.print(Text(f"  {key}: {value}", style="wsl.key"))
    return get_output(console).rstrip("\n")


def format_warnings(result: LookupResult, *, color: bool = False) -> str:
    """Render one ``WARNING: ...`` line per warning."""
    if not result.warnings:
        return ""
    console = create_console(color=color)
    for warning in result.warnings:
        console.print(Text("WARNING:", style="wsl.warning"), Text(warning))
    return get_output(console).rstrip("\n")
