"""Commands: model validation and identifier checking."""

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
  htcdl validate car-model.htcdl.json
  htcdl --json validate car-model.htcdl.json
  htcdl -q validate car-model.htcdl.json && echo valid""",
)
@click.argument("path", type=MODEL_PATH)
@click.pass_obj
def validate(app: AppContext, path: Path) -> None:
    """Validate a model file and report every defect. Exits 1 if any are found."""
    from htcdl.services.validation import ValidationService

    app.emit(ValidationService(app.settings, app.plugins).validate_file(path))


@click.command(
    "check-id",
    cls=HtcCommand,
    examples="""\
  htcdl check-id "dtmi:htc:mobility:car;1"
  htcdl --json check-id 'dtmi:test;0'""",
)
@click.argument("dtmi")
@click.pass_obj
def check_id(app: AppContext, dtmi: str) -> None:
    """Check a single identifier against the DTMI grammar."""
    from htcdl.services.validation import ValidationService

    app.emit(ValidationService(app.settings).check_id(dtmi))
