"""Defect taxonomy — structured validation failures.

A defect is a value, never an exception. Every check returns a list of
zero or more defects; the orchestrator concatenates them.

Each defect carries enough structure (element kind, names, referenced
kind/name) to render a diagnostic without re-running validation, and a
``message`` property with the human-readable form.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterator
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class _Defect(BaseModel):
    model_config = {"frozen": True}

    @property
    @abstractmethod
    def message(self) -> str:
        """One-line diagnostic for humans."""


class InvalidReference(_Defect):
    """A named cross-reference does not resolve to a declared element."""

    kind: Literal["invalid_reference"] = "invalid_reference"
    element_type: str
    referenced_type: str
    referenced_name: str
    location: str | None = None

    @property
    def message(self) -> str:
        where = f" ({self.location})" if self.location else ""
        return (
            f"{self.element_type}{where} references non-existent "
            f"{self.referenced_type} '{self.referenced_name}'"
        )


class DuplicateName(_Defect):
    kind: Literal["duplicate_name"] = "duplicate_name"
    element_type: str
    name: str

    @property
    def message(self) -> str:
        return f"Duplicate {self.element_type} name: '{self.name}'"


class InvalidStateTransition(_Defect):
    """A malformed transition. Built-in checks do not emit this kind."""

    kind: Literal["invalid_state_transition"] = "invalid_state_transition"
    from_state: str
    to_state: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid state transition from '{self.from_state}' to '{self.to_state}': {self.reason}"


class UnreachableStates(_Defect):
    """Declared states that cannot be reached from the initial state."""

    kind: Literal["unreachable_states"] = "unreachable_states"
    initial_state: str
    names: tuple[str, ...]

    @property
    def message(self) -> str:
        listed = ", ".join(f"'{n}'" for n in self.names)
        return f"Unreachable states from '{self.initial_state}': {listed}"


class MissingRequiredField(_Defect):
    kind: Literal["missing_required_field"] = "missing_required_field"
    element_type: str
    field_name: str

    @property
    def message(self) -> str:
        return f"{self.element_type} is missing required field: '{self.field_name}'"


class InvalidFieldValue(_Defect):
    kind: Literal["invalid_field_value"] = "invalid_field_value"
    element_type: str
    field_name: str
    value: str
    reason: str

    @property
    def message(self) -> str:
        return (
            f"{self.element_type} has invalid value for field "
            f"'{self.field_name}' = '{self.value}': {self.reason}"
        )


class InvalidContext(_Defect):
    kind: Literal["invalid_context"] = "invalid_context"
    expected: str
    actual: str

    @property
    def message(self) -> str:
        return f"Invalid context: expected '{self.expected}', got '{self.actual}'"


class InvalidDtmi(_Defect):
    kind: Literal["invalid_dtmi"] = "invalid_dtmi"
    dtmi: str
    reason: str

    @property
    def message(self) -> str:
        return f"Invalid DTMI '{self.dtmi}': {self.reason}"


class CircularReference(_Defect):
    """Reserved. Cycles in a state machine are valid, so nothing emits this."""

    kind: Literal["circular_reference"] = "circular_reference"
    path: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Circular reference detected: {' -> '.join(self.path)}"


Defect = Annotated[
    Union[
        InvalidReference,
        DuplicateName,
        InvalidStateTransition,
        UnreachableStates,
        MissingRequiredField,
        InvalidFieldValue,
        InvalidContext,
        InvalidDtmi,
        CircularReference,
    ],
    Field(discriminator="kind"),
]


class DefectList(BaseModel):
    """The failure outcome of validation: every defect found, in discovery order."""

    model_config = {"frozen": True}

    defects: tuple[Defect, ...]

    def __iter__(self) -> Iterator[Defect]:  # type: ignore[override]
        return iter(self.defects)

    def __len__(self) -> int:
        return len(self.defects)

    def __contains__(self, item: object) -> bool:
        return item in self.defects

    def messages(self) -> list[str]:
        return [d.message for d in self.defects]

    def of_kind(self, kind: str) -> list[Defect]:
        return [d for d in self.defects if d.kind == kind]

    def to_dicts(self) -> list[dict[str, Any]]:
        """Structured dumps with the rendered message attached."""
        return [{**d.model_dump(), "message": d.message} for d in self.defects]
