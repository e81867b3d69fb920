"""Model records — the typed shape of a decoded ``.htcdl.json`` document.

All records are frozen pydantic models. Attribute names are snake_case;
the JSON wire names (``@id``, ``displayName``, ``from``...) are aliases, so
``Model.model_validate(data)`` accepts the wire form and
``model_dump(by_alias=True, exclude_none=True)`` reproduces it.

INVARIANT: Records are never mutated. Any transformation produces a new
value (see :meth:`Model.with_updates`).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Literal, Protocol, TypeVar, Union

from pydantic import BaseModel, Discriminator, Field, Tag

from htcdl.domain.types import EmissionType, ExecutionMode, IntentType


class _Record(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}


class VersionInfo(_Record):
    version: str
    change_log: str | None = Field(default=None, alias="changeLog")


# --- Schemas ---


class SchemaField(_Record):
    name: str
    data_schema: Any = Field(alias="schema")
    unit: str | None = None


class ObjectSchema(_Record):
    """A named, reusable object schema referenced by its DTMI."""

    id: str = Field(alias="@id")
    kind: str = Field(alias="@type")
    fields: tuple[SchemaField, ...] = ()


# --- Interface contents ---


class EmissionProfile(_Record):
    emission_type: EmissionType = Field(alias="type")
    rate: float | None = None
    unit: str | None = None
    tolerance: float | None = None


class Property(_Record):
    """Observable, optionally writable device state."""

    name: str
    data_schema: Any = Field(alias="schema")
    writable: bool = False
    unit: str | None = None
    semantic_id: str | None = Field(default=None, alias="semanticId")


class Telemetry(_Record):
    """A data stream emitted by the device."""

    name: str
    data_schema: Any = Field(alias="schema")
    unit: str | None = None
    emission_profile: EmissionProfile | None = Field(default=None, alias="emissionProfile")


class CompletionEvents(_Record):
    success: str | None = None
    failure: str | None = None

    def names(self) -> list[str]:
        return [name for name in (self.success, self.failure) if name is not None]


class Command(_Record):
    """An invocable action, optionally reporting completion through events."""

    name: str
    intent: IntentType | None = None
    execution_mode: ExecutionMode | None = Field(default=None, alias="executionMode")
    request_schema: Any = Field(default=None, alias="requestSchema")
    response_schema: Any = Field(default=None, alias="responseSchema")
    completion_events: CompletionEvents | None = Field(default=None, alias="completionEvents")


class Event(_Record):
    name: str
    payload_schema: Any = Field(default=None, alias="payloadSchema")


class Relationship(_Record):
    kind: str = Field(alias="@type")
    name: str
    target: str


# --- State machine ---


class State(_Record):
    name: str


class CommandTrigger(_Record):
    """Transition fired by invoking a declared command."""

    kind: Literal["command"] = Field(default="command", exclude=True)
    command: str


class EventTrigger(_Record):
    """Transition fired when a declared event occurs."""

    kind: Literal["event"] = Field(default="event", exclude=True)
    event: str


class ConditionTrigger(_Record):
    """Transition fired when a free-form boolean expression holds."""

    kind: Literal["condition"] = Field(default="condition", exclude=True)
    condition: str


TRIGGER_KINDS = ("command", "event", "condition")


def _trigger_tag(value: Any) -> str | None:
    """Pick the trigger variant: exactly one of the trigger keys must be set."""
    if isinstance(value, dict):
        present = [key for key in TRIGGER_KINDS if value.get(key) is not None]
        return present[0] if len(present) == 1 else None
    return getattr(value, "kind", None)


Trigger = Annotated[
    Union[
        Annotated[CommandTrigger, Tag("command")],
        Annotated[EventTrigger, Tag("event")],
        Annotated[ConditionTrigger, Tag("condition")],
    ],
    Discriminator(
        _trigger_tag,
        custom_error_type="invalid_trigger",
        custom_error_message="trigger must set exactly one of 'command', 'event' or 'condition'",
    ),
]


class Action(_Record):
    """Side effect of a transition or rule."""

    emit_event: str | None = Field(default=None, alias="emitEvent")
    update_property: str | None = Field(default=None, alias="updateProperty")
    value: Any = None


class Transition(_Record):
    from_state: str = Field(alias="from")
    to_state: str = Field(alias="to")
    trigger: Trigger
    action: Action | None = None

    @property
    def label(self) -> str:
        return f"{self.from_state} -> {self.to_state}"


class StateMachine(_Record):
    initial_state: str = Field(alias="initialState")
    states: tuple[State, ...] = ()
    transitions: tuple[Transition, ...] = ()

    def state_names(self) -> list[str]:
        return [s.name for s in self.states]


# --- Physics, rules, goals, AI ---


class Mass(_Record):
    value: float
    unit: str


class Dimensions(_Record):
    length: float
    width: float
    height: float
    unit: str


class Physics(_Record):
    mass: Mass | None = None
    dimensions: Dimensions | None = None


class Rule(_Record):
    name: str
    condition: str
    action: Action


class Goal(_Record):
    name: str
    priority: float


class AiModel(_Record):
    model_config = {"frozen": True, "populate_by_name": True, "protected_namespaces": ()}

    name: str
    purpose: str
    model_uri: str = Field(alias="modelUri")
    input_schema: str | None = Field(default=None, alias="inputSchema")
    output_schema: str | None = Field(default=None, alias="outputSchema")


# --- Root ---


class Model(_Record):
    """Root of a device description (an ``Interface``)."""

    context: str = Field(alias="@context")
    id: str = Field(alias="@id")
    kind: str = Field(alias="@type")
    display_name: str = Field(alias="displayName")
    description: str
    version_info: VersionInfo | None = Field(default=None, alias="@versionInfo")
    schemas: tuple[ObjectSchema, ...] | None = None
    properties: tuple[Property, ...] | None = None
    telemetry: tuple[Telemetry, ...] | None = None
    commands: tuple[Command, ...] | None = None
    events: tuple[Event, ...] | None = None
    relationships: tuple[Relationship, ...] | None = None
    state_machine: StateMachine | None = Field(default=None, alias="stateMachine")
    physics: Physics | None = None
    rules: tuple[Rule, ...] | None = None
    goals: tuple[Goal, ...] | None = None
    ai_models: tuple[AiModel, ...] | None = Field(default=None, alias="aiModels")

    def with_updates(self, **changes: Any) -> Model:
        """Return a copy with *changes* applied to the named fields."""
        return self.model_copy(update=changes)


# --- Helpers ---


class _Named(Protocol):
    @property
    def name(self) -> str: ...


_T = TypeVar("_T")


def items(collection: Sequence[_T] | None) -> Sequence[_T]:
    """Treat an absent collection as empty."""
    return collection or ()


def names(collection: Sequence[_Named] | None) -> list[str]:
    """Declared names of a collection, in declaration order."""
    return [entry.name for entry in items(collection)]
