"""Reference integrity — duplicate names and unresolved cross-references.

Defects are returned in discovery order:

1. duplicate names (Property, Telemetry, Command, Event, State)
2. state machine: initial state, then per transition from / to / trigger / action
3. rule actions
4. command completion events

A single malformed element may yield several defects; nothing is
deduplicated across different elements.
"""

from __future__ import annotations

from collections.abc import Iterable

from htcdl.domain.defects import Defect, DuplicateName, InvalidReference
from htcdl.domain.model import (
    CommandTrigger,
    EventTrigger,
    Model,
    StateMachine,
    Transition,
    items,
    names,
)


def check_references(model: Model, *, check_action_events: bool = True) -> list[Defect]:
    """Report duplicate names and unresolved references in *model*."""
    command_names = set(names(model.commands))
    event_names = set(names(model.events))

    defects: list[Defect] = []
    defects.extend(find_duplicates(names(model.properties), "Property"))
    defects.extend(find_duplicates(names(model.telemetry), "Telemetry"))
    defects.extend(find_duplicates(names(model.commands), "Command"))
    defects.extend(find_duplicates(names(model.events), "Event"))

    sm = model.state_machine
    if sm is not None:
        defects.extend(find_duplicates(sm.state_names(), "State"))
        defects.extend(
            _check_state_machine(
                sm, command_names, event_names, check_action_events=check_action_events
            )
        )

    if check_action_events:
        for index, r in enumerate(items(model.rules)):
            emitted = r.action.emit_event
            if emitted is not None and emitted not in event_names:
                defects.append(
                    InvalidReference(
                        element_type="Action",
                        referenced_type="Event",
                        referenced_name=emitted,
                        location=f"rules[{index}] '{r.name}'",
                    )
                )

    for cmd in items(model.commands):
        completion = cmd.completion_events
        if completion is None:
            continue
        for outcome, evt in (("success", completion.success), ("failure", completion.failure)):
            if evt is not None and evt not in event_names:
                defects.append(
                    InvalidReference(
                        element_type="CompletionEvents",
                        referenced_type="Event",
                        referenced_name=evt,
                        location=f"command '{cmd.name}' {outcome}",
                    )
                )

    return defects


def find_duplicates(declared: Iterable[str], element_type: str) -> list[Defect]:
    """One defect per repeated name, ordered by first repetition."""
    seen: set[str] = set()
    reported: set[str] = set()
    defects: list[Defect] = []
    for name in declared:
        if name in seen and name not in reported:
            reported.add(name)
            defects.append(DuplicateName(element_type=element_type, name=name))
        seen.add(name)
    return defects


def _check_state_machine(
    sm: StateMachine,
    command_names: set[str],
    event_names: set[str],
    *,
    check_action_events: bool,
) -> list[Defect]:
    state_names = set(sm.state_names())
    defects: list[Defect] = []

    if sm.initial_state not in state_names:
        defects.append(
            InvalidReference(
                element_type="StateMachine",
                referenced_type="State",
                referenced_name=sm.initial_state,
                location="initialState",
            )
        )

    for index, transition in enumerate(sm.transitions):
        location = f"transitions[{index}] {transition.label}"
        defects.extend(
            _check_transition(
                transition,
                location,
                state_names,
                command_names,
                event_names,
                check_action_events=check_action_events,
            )
        )
    return defects


def _check_transition(
    transition: Transition,
    location: str,
    state_names: set[str],
    command_names: set[str],
    event_names: set[str],
    *,
    check_action_events: bool,
) -> list[Defect]:
    defects: list[Defect] = []

    for endpoint in (transition.from_state, transition.to_state):
        if endpoint not in state_names:
            defects.append(
                InvalidReference(
                    element_type="Transition",
                    referenced_type="State",
                    referenced_name=endpoint,
                    location=location,
                )
            )

    # Condition triggers are free-form expressions and resolve nothing.
    trigger = transition.trigger
    if isinstance(trigger, CommandTrigger) and trigger.command not in command_names:
        defects.append(
            InvalidReference(
                element_type="Trigger",
                referenced_type="Command",
                referenced_name=trigger.command,
                location=location,
            )
        )
    elif isinstance(trigger, EventTrigger) and trigger.event not in event_names:
        defects.append(
            InvalidReference(
                element_type="Trigger",
                referenced_type="Event",
                referenced_name=trigger.event,
                location=location,
            )
        )

    action = transition.action
    if check_action_events and action is not None and action.emit_event is not None:
        if action.emit_event not in event_names:
            defects.append(
                InvalidReference(
                    element_type="Action",
                    referenced_type="Event",
                    referenced_name=action.emit_event,
                    location=location,
                )
            )

    return defects
