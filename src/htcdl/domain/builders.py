"""Programmatic construction of models.

``ModelBuilder`` accumulates elements and produces a frozen :class:`Model`.
It checks nothing; run the result through ``htcdl.validate``.

Usage::

    model = (
        ModelBuilder("dtmi:htc:demo:lamp;1", "Lamp", "A dimmable lamp")
        .add_command(command("switchOn"))
        .with_state_machine(
            StateMachine(
                initial_state="Off",
                states=(state("Off"), state("On")),
                transitions=(transition_on_command("Off", "On", "switchOn"),),
            )
        )
        .build()
    )
"""

from __future__ import annotations

from typing import Any, Self

from htcdl.domain.ids import HTC_CONTEXT
from htcdl.domain.model import (
    Action,
    AiModel,
    Command,
    CommandTrigger,
    CompletionEvents,
    ConditionTrigger,
    Event,
    EventTrigger,
    Goal,
    Model,
    ObjectSchema,
    Physics,
    Property,
    Relationship,
    Rule,
    State,
    StateMachine,
    Telemetry,
    Transition,
    VersionInfo,
)
from htcdl.domain.types import INTERFACE_TYPE, ExecutionMode, IntentType


class ModelBuilder:
    """Fluent accumulator for :class:`Model` fields."""

    def __init__(
        self,
        id: str,
        display_name: str,
        description: str,
        *,
        context: str = HTC_CONTEXT,
    ) -> None:
        self._id = id
        self._display_name = display_name
        self._description = description
        self._context = context
        self._version_info: VersionInfo | None = None
        self._state_machine: StateMachine | None = None
        self._physics: Physics | None = None
        self._collections: dict[str, list[Any]] = {
            "schemas": [],
            "properties": [],
            "telemetry": [],
            "commands": [],
            "events": [],
            "relationships": [],
            "rules": [],
            "goals": [],
            "ai_models": [],
        }

    def with_version(self, version: str, change_log: str | None = None) -> Self:
        self._version_info = VersionInfo(version=version, change_log=change_log)
        return self

    def add_schema(self, schema: ObjectSchema) -> Self:
        return self._add("schemas", schema)

    def add_property(self, prop: Property) -> Self:
        return self._add("properties", prop)

    def add_telemetry(self, stream: Telemetry) -> Self:
        return self._add("telemetry", stream)

    def add_command(self, cmd: Command) -> Self:
        return self._add("commands", cmd)

    def add_event(self, evt: Event) -> Self:
        return self._add("events", evt)

    def add_relationship(self, relationship: Relationship) -> Self:
        return self._add("relationships", relationship)

    def add_rule(self, r: Rule) -> Self:
        return self._add("rules", r)

    def add_goal(self, g: Goal) -> Self:
        return self._add("goals", g)

    def add_ai_model(self, ai: AiModel) -> Self:
        return self._add("ai_models", ai)

    def with_state_machine(self, machine: StateMachine) -> Self:
        self._state_machine = machine
        return self

    def with_physics(self, physics: Physics) -> Self:
        self._physics = physics
        return self

    def build(self) -> Model:
        """Produce the model. Empty collections are left absent."""
        collections = {key: tuple(values) or None for key, values in self._collections.items()}
        return Model(
            context=self._context,
            id=self._id,
            kind=INTERFACE_TYPE,
            display_name=self._display_name,
            description=self._description,
            version_info=self._version_info,
            state_machine=self._state_machine,
            physics=self._physics,
            **collections,
        )

    def _add(self, key: str, value: Any) -> Self:
        self._collections[key].append(value)
        return self


# --- Element factories ---


def prop(name: str, schema: Any, *, writable: bool = False, unit: str | None = None) -> Property:
    return Property(name=name, data_schema=schema, writable=writable, unit=unit)


def telemetry(name: str, schema: Any, *, unit: str | None = None) -> Telemetry:
    return Telemetry(name=name, data_schema=schema, unit=unit)


def command(
    name: str,
    intent: IntentType = IntentType.CONTROL,
    mode: ExecutionMode = ExecutionMode.ASYNC,
    *,
    on_success: str | None = None,
    on_failure: str | None = None,
) -> Command:
    completion = None
    if on_success is not None or on_failure is not None:
        completion = CompletionEvents(success=on_success, failure=on_failure)
    return Command(name=name, intent=intent, execution_mode=mode, completion_events=completion)


def event(name: str) -> Event:
    return Event(name=name)


def state(name: str) -> State:
    return State(name=name)


def transition_on_command(
    from_state: str, to_state: str, cmd: str, emit_event: str | None = None
) -> Transition:
    action = Action(emit_event=emit_event) if emit_event is not None else None
    return Transition(
        from_state=from_state,
        to_state=to_state,
        trigger=CommandTrigger(command=cmd),
        action=action,
    )


def transition_on_event(
    from_state: str,
    to_state: str,
    evt: str,
    update_property: str | None = None,
    value: Any = None,
) -> Transition:
    action = None
    if update_property is not None:
        action = Action(update_property=update_property, value=value)
    return Transition(
        from_state=from_state,
        to_state=to_state,
        trigger=EventTrigger(event=evt),
        action=action,
    )


def transition_on_condition(from_state: str, to_state: str, condition: str) -> Transition:
    return Transition(
        from_state=from_state,
        to_state=to_state,
        trigger=ConditionTrigger(condition=condition),
    )


def rule(name: str, condition: str, emit_event: str) -> Rule:
    return Rule(name=name, condition=condition, action=Action(emit_event=emit_event))


def goal(name: str, priority: float = 1.0) -> Goal:
    return Goal(name=name, priority=priority)


def ai_model(name: str, purpose: str, model_uri: str) -> AiModel:
    return AiModel(name=name, purpose=purpose, model_uri=model_uri)
