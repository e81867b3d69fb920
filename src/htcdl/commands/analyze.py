"""Commands: read-only reports over a model file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from htcdl.commands._base import MODEL_PATH, HtcCommand

if TYPE_CHECKING:
    from pathlib import Path

    from htcdl.commands._context import AppContext


@click.command(
    cls=HtcCommand,
    examples="""\
  htcdl analyze car-model.htcdl.json
  htcdl --json analyze car-model.htcdl.json""",
)
@click.argument("path", type=MODEL_PATH)
@click.pass_obj
def analyze(app: AppContext, path: Path) -> None:
    """Count the elements declared by a model."""
    from htcdl.services.analysis import AnalysisService

    app.emit(AnalysisService(app.settings).statistics(path))


@click.command(
    cls=HtcCommand,
    examples="""\
  htcdl unused car-model.htcdl.json
  htcdl -q unused car-model.htcdl.json | wc -l""",
)
@click.argument("path", type=MODEL_PATH)
@click.pass_obj
def unused(app: AppContext, path: Path) -> None:
    """List events and schemas that nothing in the model references."""
    from htcdl.services.analysis import AnalysisService

    app.emit(AnalysisService(app.settings).unused(path))


@click.command(
    cls=HtcCommand,
    examples="""\
  htcdl -q dump car-model.htcdl.json > canonical.json""",
)
@click.argument("path", type=MODEL_PATH)
@click.pass_obj
def dump(app: AppContext, path: Path) -> None:
    """Print the model re-encoded in canonical form."""
    from htcdl.services.analysis import AnalysisService

    app.emit(AnalysisService(app.settings).dump(path))
