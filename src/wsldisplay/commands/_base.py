"""Click command class for the single ``wsldisplay`` entry point.

``--help`` is kept to the option table at 80 columns. The recipes people
actually need, such as ``export DISPLAY=$(wsldisplay)`` in a shell profile or
picking another display with ``-d 0``, are printed by ``--examples``. The flag
is eager, so it works even when the config file or env vars are invalid.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach ``--examples``; it prints *examples* to stdout and exits 0."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class ExamplesCommand(click.Command):
    """Command that takes an ``examples`` block of shell recipes.

    Used by :func:`wsldisplay.cli.cli`. Without *examples* it behaves like a
    plain :class:`click.Command`.
    """

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)
