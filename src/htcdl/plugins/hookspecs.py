"""Pluggy hook specifications for htcdl.

One setup-time hook lets plugins contribute extra validation checks; one
lifecycle hook reports each validation outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from htcdl.validation.orchestrator import Check

hookspec = pluggy.HookspecMarker("htcdl")
hookimpl = pluggy.HookimplMarker("htcdl")


class HtcdlHookSpec:
    """Hook specifications for the htcdl plugin system."""

    @hookspec
    def register_checks(self) -> list[Check] | None:
        """Return extra checks ``Model -> Iterable[Defect]``.

        Their defects are accumulated after the built-in checks.
        """

    @hookspec
    def post_validate(self, model_id: str, ok: bool, defect_count: int) -> None:
        """Called after a model has been validated."""
