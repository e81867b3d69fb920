"""Rich rendering into strings.

Renderers draw on a Console backed by a StringIO and hand back the text, so
commands only ever see ``str``. Colour is dropped automatically when the
output is not a terminal.
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

from rich.console import Console
from rich.theme import Theme

WIDTH = 120

HTC_THEME = Theme(
    {
        "htc.ok": "bold green",
        "htc.error": "bold red",
        "htc.warning": "bold yellow",
        "htc.op": "bold cyan",
        "htc.key": "dim",
        "htc.id": "bold blue",
        "htc.kind": "magenta",
        "htc.count": "bold",
    }
)


def render_to_string(draw: Callable[[Console], None], *, width: int = WIDTH) -> str:
    """Run *draw* against a fresh themed console and return what it printed."""
    buffer = StringIO()
    draw(Console(file=buffer, theme=HTC_THEME, highlight=False, width=width))
    return buffer.getvalue().rstrip("\n")
