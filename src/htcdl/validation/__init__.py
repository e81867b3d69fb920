"""Validation engine — structural, reference and reachability checks.

Every check is a pure function ``Model -> list[Defect]``. The orchestrator
runs all of them and only branches on "no defects vs some" at the end.
"""

from htcdl.validation.orchestrator import (
    ValidationOptions,
    collect_defects,
    finish,
    planned_checks,
    validate,
)

__all__ = ["ValidationOptions", "collect_defects", "finish", "planned_checks", "validate"]
