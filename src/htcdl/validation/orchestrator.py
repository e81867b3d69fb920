"""Validation orchestrator — error-accumulating composition of all checks.

Combination law: every check runs regardless of earlier failures, defects
are concatenated in order, and only the final list is inspected. The
result is either the input model unchanged (zero defects) or a
:class:`DefectList` holding every defect found.

Validating the same model any number of times yields identical results;
nothing is mutated or cached.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable, Sequence

from pydantic import BaseModel

from htcdl.domain.defects import Defect, DefectList
from htcdl.domain.ids import HTC_CONTEXT
from htcdl.domain.model import Model
from htcdl.validation.reachability import check_reachability
from htcdl.validation.references import check_references
from htcdl.validation.structural import check_structure

logger = logging.getLogger(__name__)

Check = Callable[[Model], Iterable[Defect]]


class ValidationOptions(BaseModel):
    """Knobs for the built-in checks."""

    model_config = {"frozen": True}

    expected_context: str = HTC_CONTEXT
    check_action_events: bool = True
    check_reachability: bool = True


DEFAULT_OPTIONS = ValidationOptions()


def _reachability(model: Model) -> Iterable[Defect]:
    if model.state_machine is None:
        return []
    return check_reachability(model.state_machine)


def planned_checks(
    options: ValidationOptions | None = None,
    extra_checks: Sequence[Check] = (),
) -> list[tuple[str, Check]]:
    """The named checks a validation run executes, in order.

    Built-ins are ``structure``, ``references`` and ``reachability``;
    extra checks are named ``extra:<function name>``.
    """
    opts = options or DEFAULT_OPTIONS
    plan: list[tuple[str, Check]] = [
        ("structure", functools.partial(check_structure, expected_context=opts.expected_context)),
        (
            "references",
            functools.partial(check_references, check_action_events=opts.check_action_events),
        ),
    ]
    if opts.check_reachability:
        plan.append(("reachability", _reachability))
    for check in extra_checks:
        plan.append((f"extra:{getattr(check, '__name__', type(check).__name__)}", check))
    return plan


def collect_defects(
    model: Model,
    *,
    options: ValidationOptions | None = None,
    extra_checks: Sequence[Check] = (),
) -> list[Defect]:
    """Run every check against *model* and return all defects in order."""
    defects: list[Defect] = []
    for _name, check in planned_checks(options, extra_checks):
        defects.extend(check(model))

    logger.debug("Validated %s: %d defect(s)", model.id, len(defects))
    return defects


def validate(
    model: Model,
    *,
    options: ValidationOptions | None = None,
    extra_checks: Sequence[Check] = (),
) -> Model | DefectList:
    """Return *model* itself if it is valid, else every defect found."""
    defects = collect_defects(model, options=options, extra_checks=extra_checks)
    return finish(model, defects)


def finish(model: Model, defects: Sequence[Defect]) -> Model | DefectList:
    """The model when *defects* is empty, else the defects as a :class:`DefectList`."""
    if not defects:
        return model
    return DefectList(defects=tuple(defects))
