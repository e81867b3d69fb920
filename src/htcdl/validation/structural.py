"""Structural checks on the model root: context, id, required text, type."""

from __future__ import annotations

from htcdl.domain.defects import (
    Defect,
    InvalidContext,
    InvalidDtmi,
    InvalidFieldValue,
    MissingRequiredField,
)
from htcdl.domain.ids import HTC_CONTEXT, check_dtmi
from htcdl.domain.model import Model
from htcdl.domain.types import INTERFACE_TYPE

MODEL_ELEMENT = "Model"


def check_structure(model: Model, *, expected_context: str = HTC_CONTEXT) -> list[Defect]:
    """Report every structural defect of *model*; each check runs independently."""
    defects: list[Defect] = []

    if model.context != expected_context:
        defects.append(InvalidContext(expected=expected_context, actual=model.context))

    reason = check_dtmi(model.id)
    if reason is not None:
        defects.append(InvalidDtmi(dtmi=model.id, reason=reason))

    if not model.display_name.strip():
        defects.append(MissingRequiredField(element_type=MODEL_ELEMENT, field_name="displayName"))

    if not model.description.strip():
        defects.append(MissingRequiredField(element_type=MODEL_ELEMENT, field_name="description"))

    if model.kind != INTERFACE_TYPE:
        defects.append(
            InvalidFieldValue(
                element_type=MODEL_ELEMENT,
                field_name="@type",
                value=model.kind,
                reason=f"Must be '{INTERFACE_TYPE}'",
            )
        )

    return defects
