"""Tests for state reachability."""

from __future__ import annotations

from htcdl.domain.builders import state, transition_on_command
from htcdl.domain.defects import UnreachableStates
from htcdl.domain.model import StateMachine
from htcdl.validation.reachability import (
    build_graph,
    check_reachability,
    reachable_states,
    unreachable_states,
)


def _machine(*edges: tuple[str, str], states: tuple[str, ...] = ("A", "B", "C")) -> StateMachine:
    return StateMachine(
        initial_state=states[0],
        states=tuple(state(s) for s in states),
        transitions=tuple(transition_on_command(a, b, "cmd") for a, b in edges),
    )


class TestReachability:
    def test_chain_reaches_everything(self) -> None:
        sm = _machine(("A", "B"), ("B", "C"))
        assert reachable_states(sm) == {"A", "B", "C"}
        assert check_reachability(sm) == []

    def test_missing_edge(self) -> None:
        sm = _machine(("A", "B"))
        assert unreachable_states(sm) == ["C"]
        assert check_reachability(sm) == [UnreachableStates(initial_state="A", names=("C",))]

    def test_cycles_are_fine(self) -> None:
        sm = _machine(("A", "B"), ("B", "A"), ("B", "C"), ("C", "C"))
        assert check_reachability(sm) == []

    def test_single_defect_lists_all_in_declaration_order(self) -> None:
        sm = _machine(states=("A", "D", "B", "C"))
        (defect,) = check_reachability(sm)
        assert isinstance(defect, UnreachableStates)
        assert defect.names == ("D", "B", "C")
        assert defect.message == "Unreachable states from 'A': 'D', 'B', 'C'"

    def test_edges_against_direction_do_not_count(self) -> None:
        sm = _machine(("B", "A"), ("C", "A"))
        assert unreachable_states(sm) == ["B", "C"]

    def test_undeclared_initial_state(self) -> None:
        sm = StateMachine(initial_state="Z", states=(state("A"),))
        assert reachable_states(sm) == {"Z"}
        assert unreachable_states(sm) == ["A"]

    def test_graph_includes_undeclared_endpoints(self) -> None:
        g = build_graph(_machine(("A", "X")))
        assert set(g.nodes) == {"A", "B", "C", "X"}
        assert g.has_edge("A", "X")

    def test_lone_initial_state_without_transitions(self) -> None:
        sm = StateMachine(initial_state="A", states=(state("A"),))
        assert check_reachability(sm) == []

    def test_no_transitions_leaves_others_unreachable(self) -> None:
        assert unreachable_states(_machine()) == ["B", "C"]
