"""Subcommand modules for htcdl.

Provides register_commands() which uses deferred imports to keep
``htcdl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from htcdl.commands.analyze import analyze, dump, unused
    from htcdl.commands.validate import check_id, validate

    cli.add_command(validate)
    cli.add_command(check_id)
    cli.add_command(analyze)
    cli.add_command(unused)
    cli.add_command(dump)
