"""Read-only reporting over a model: statistics and unused elements.

Pure functions, no validation. On an unvalidated model they simply report
over whatever is present.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel

from htcdl.domain.ids import DTMI_SCHEME
from htcdl.domain.model import EventTrigger, Model, ObjectSchema, items, names


class ModelStatistics(BaseModel):
    """Element counts for a model."""

    model_config = {"frozen": True}

    property_count: int = 0
    telemetry_count: int = 0
    command_count: int = 0
    event_count: int = 0
    relationship_count: int = 0
    state_count: int = 0
    transition_count: int = 0
    rule_count: int = 0
    goal_count: int = 0
    ai_model_count: int = 0
    has_state_machine: bool = False
    has_physics: bool = False


class UnusedElements(BaseModel):
    """Declared elements that nothing else in the model refers to."""

    model_config = {"frozen": True}

    unused_events: list[str]
    unused_schemas: list[str]

    @property
    def empty(self) -> bool:
        return not self.unused_events and not self.unused_schemas


def analyze(model: Model) -> ModelStatistics:
    """Count the elements declared on *model*."""
    sm = model.state_machine
    return ModelStatistics(
        property_count=len(items(model.properties)),
        telemetry_count=len(items(model.telemetry)),
        command_count=len(items(model.commands)),
        event_count=len(items(model.events)),
        relationship_count=len(items(model.relationships)),
        state_count=len(sm.states) if sm else 0,
        transition_count=len(sm.transitions) if sm else 0,
        rule_count=len(items(model.rules)),
        goal_count=len(items(model.goals)),
        ai_model_count=len(items(model.ai_models)),
        has_state_machine=sm is not None,
        has_physics=model.physics is not None,
    )


def find_unused(model: Model) -> UnusedElements:
    """Find declared events and schemas that are never referenced.

    Results keep declaration order.
    """
    used_events = referenced_events(model)
    used_schemas = referenced_schemas(model)
    return UnusedElements(
        unused_events=[n for n in names(model.events) if n not in used_events],
        unused_schemas=[s for s in schema_ids(model) if s not in used_schemas],
    )


def referenced_events(model: Model) -> set[str]:
    """Event names used as a trigger, an emitted action, or a completion event."""
    found: set[str] = set()
    for command in items(model.commands):
        if command.completion_events is not None:
            found.update(command.completion_events.names())
    if model.state_machine is not None:
        for transition in model.state_machine.transitions:
            if isinstance(transition.trigger, EventTrigger):
                found.add(transition.trigger.event)
            if transition.action is not None and transition.action.emit_event:
                found.add(transition.action.emit_event)
    for rule in items(model.rules):
        if rule.action.emit_event:
            found.add(rule.action.emit_event)
    return found


# --- Schemas ---


def schema_ids(model: Model) -> list[str]:
    return [schema.id for schema in items(model.schemas)]


def find_schema(model: Model, schema_id: str) -> ObjectSchema | None:
    for schema in items(model.schemas):
        if schema.id == schema_id:
            return schema
    return None


def referenced_schemas(model: Model) -> set[str]:
    """DTMI strings mentioned anywhere inside the model's schema values."""
    values: list[Any] = []
    values.extend(p.data_schema for p in items(model.properties))
    values.extend(t.data_schema for t in items(model.telemetry))
    for command in items(model.commands):
        values.extend((command.request_schema, command.response_schema))
    values.extend(e.payload_schema for e in items(model.events))
    found = {ref for value in values for ref in _dtmi_strings(value)}

    # A schema mentioning itself does not count as a use.
    for schema in items(model.schemas):
        for schema_field in schema.fields:
            found.update(ref for ref in _dtmi_strings(schema_field.data_schema) if ref != schema.id)
    return found


def _dtmi_strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        if value.startswith(f"{DTMI_SCHEME}:"):
            yield value
    elif isinstance(value, dict):
        for nested in value.values():
            yield from _dtmi_strings(nested)
    elif isinstance(value, (list, tuple)):
        for nested in value:
            yield from _dtmi_strings(nested)
