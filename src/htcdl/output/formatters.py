"""Output mode selection.

The CLI renders ServiceResult for humans (Rich) or machines (``--json``).
The formatter picks the mode; renderers do the drawing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from htcdl.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from htcdl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output flags resolved from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if result.ok and result.op == "dump":
        # The document is the output; Rich would wrap its long lines.
        return str(result.data.get("document", ""))
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
