"""The ``htcdl`` command.

Global flags are turned into one :class:`HtcSettings` before any subcommand
runs. Flags that mirror ``htcdl.toml`` keys (``--context``, ``--no-plugins``)
override the file and the environment only when given.
"""

from __future__ import annotations

from typing import Any

import click

from htcdl import __version__
from htcdl.commands import register_commands
from htcdl.commands._context import AppContext
from htcdl.config.settings import HtcSettings


def _section_overrides(context: str | None, no_plugins: bool) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if context is not None:
        overrides["validation"] = {"expected_context": context}
    if no_plugins:
        overrides["plugins"] = {"enabled": False}
    return overrides


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="htcdl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the essentials.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing spans.")
@click.option("--log-json", is_flag=True, help="Log JSON lines to stderr.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Read settings from this htcdl.toml.",
)
@click.option("--context", default=None, metavar="DTMI", help="Expected @context of models.")
@click.option("--no-plugins", is_flag=True, help="Skip checks and hooks from plugins.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    context: str | None,
    no_plugins: bool,
) -> None:
    """Validate and analyze HTC digital twin models."""
    settings = HtcSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        **_section_overrides(context, no_plugins),
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
