"""Shared pieces for subcommands: the command class and argument types."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

# Model files may be missing; the codec reports that as FILE_NOT_FOUND
# in the command's own output format.
MODEL_PATH = click.Path(dir_okay=False, path_type=Path)


class HtcCommand(click.Command):
    """A command whose usage examples sit behind ``--examples``, not in ``--help``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    is_eager=True,
                    expose_value=False,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)
