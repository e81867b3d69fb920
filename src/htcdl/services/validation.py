"""ValidationService — run the validation engine and report a ServiceResult.

A model with defects is a failed result (``VALIDATION_FAILED``) carrying
every defect in ``error.detail["defects"]``; the CLI maps it to exit 1.
Decode failures surface with their own codes, never as defects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from htcdl.config.logging import model_log_context
from htcdl.domain.analysis import find_unused
from htcdl.domain.defects import Defect, DefectList
from htcdl.domain.ids import check_dtmi
from htcdl.services.base import BaseService
from htcdl.services.result import INVALID_DTMI, VALIDATION_FAILED, ServiceError, ServiceResult
from htcdl.services.telemetry import annotate, trace_span, traced
from htcdl.validation.orchestrator import ValidationOptions, finish, planned_checks

if TYPE_CHECKING:
    from pathlib import Path

    from htcdl.config.models import ValidationConfig
    from htcdl.domain.model import Model
    from htcdl.validation.orchestrator import Check

logger = logging.getLogger(__name__)


class ValidationService(BaseService):
    """Validates models and identifiers."""

    @traced
    def validate_file(self, path: Path) -> ServiceResult:
        """Decode and validate the model stored at *path*."""
        with trace_span("decode"):
            loaded = self._load(path, "validate")
        if isinstance(loaded, ServiceResult):
            return loaded
        return self._validate(loaded, source=str(path))

    @traced
    def validate_model(self, model: Model) -> ServiceResult:
        """Validate an already decoded model."""
        return self._validate(model, source=None)

    @traced
    def check_id(self, value: str) -> ServiceResult:
        """Check a single identifier against the DTMI grammar."""
        reason = check_dtmi(value)
        if reason is not None:
            return ServiceResult(
                ok=False,
                op="check_id",
                error=ServiceError(
                    code=INVALID_DTMI,
                    message=f"Invalid DTMI '{value}': {reason}",
                    detail={"dtmi": value, "reason": reason},
                ),
            )
        return ServiceResult(ok=True, op="check_id", data={"dtmi": value, "valid": True})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(self, model: Model, *, source: str | None) -> ServiceResult:
        cfg = self._settings.validation
        warnings: list[str] = []

        with model_log_context(model.id, "validate"):
            plan = planned_checks(_options(cfg), self._extra_checks(warnings))
            found: list[Defect] = []
            with trace_span("checks"):
                for name, check in plan:
                    with trace_span(name):
                        defects = list(check(model))
                        annotate(defects=len(defects))
                    found.extend(defects)
                annotate(defects=len(found))
            logger.debug("Ran %d check(s): %d defect(s)", len(plan), len(found))

            outcome = finish(model, found)
            self._dispatch_event(
                "post_validate",
                {"model_id": model.id, "ok": not found, "defect_count": len(found)},
                warnings,
            )

        if isinstance(outcome, DefectList):
            return ServiceResult(
                ok=False,
                op="validate",
                warnings=warnings,
                error=ServiceError(
                    code=VALIDATION_FAILED,
                    message=f"Model validation failed with {len(outcome)} defect(s)",
                    detail={"id": model.id, "source": source, "defects": outcome.to_dicts()},
                ),
            )

        if cfg.warn_unused:
            unused = find_unused(model)
            warnings.extend(f"Unused event: '{name}'" for name in unused.unused_events)

        data: dict[str, object] = {
            "id": model.id,
            "display_name": model.display_name,
            "defect_count": 0,
        }
        if source is not None:
            data["source"] = source
        return ServiceResult(ok=True, op="validate", data=data, warnings=warnings)

    def _extra_checks(self, warnings: list[str]) -> list[Check]:
        if self._plugins is None or not self._settings.plugins.enabled:
            return []
        return [_guarded(check, warnings) for check in self._plugins.collect_checks()]


def _options(cfg: ValidationConfig) -> ValidationOptions:
    """The engine's options from the ``[validation]`` section."""
    return ValidationOptions(
        expected_context=cfg.expected_context,
        check_action_events=cfg.check_action_events,
        check_reachability=cfg.check_reachability,
    )


def _guarded(check: Check, warnings: list[str]) -> Check:
    """Wrap a plugin check so a crash becomes a warning instead of an abort."""
    name = getattr(check, "__qualname__", repr(check))

    def run(model: Model) -> Iterable[Defect]:
        try:
            return list(check(model))
        except Exception:
            logger.warning("Plugin check %s failed", name, exc_info=True)
            warnings.append(f"Plugin check {name} failed")
            return []

    run.__name__ = getattr(check, "__name__", "check")
    return run
