"""State reachability over the transition graph.

The machine is loaded into a NetworkX DiGraph (declared states as nodes,
transitions as edges) and the reachable set is the initial state plus its
descendants. Cycles are ordinary and never a defect.
"""

from __future__ import annotations

import networkx as nx

from htcdl.domain.defects import Defect, UnreachableStates
from htcdl.domain.model import StateMachine

type _Graph = nx.DiGraph


def build_graph(sm: StateMachine) -> _Graph:
    """Directed graph of *sm*. Undeclared endpoints still appear as nodes."""
    g: _Graph = nx.DiGraph()
    g.add_nodes_from(sm.state_names())
    for transition in sm.transitions:
        g.add_edge(transition.from_state, transition.to_state)
    return g


def reachable_states(sm: StateMachine) -> set[str]:
    """States reachable from the initial state by zero or more transitions."""
    g = build_graph(sm)
    if sm.initial_state not in g:
        return {sm.initial_state}
    return {sm.initial_state} | nx.descendants(g, sm.initial_state)


def unreachable_states(sm: StateMachine) -> list[str]:
    """Declared states outside the reachable set, in declaration order."""
    reachable = reachable_states(sm)
    unreachable: list[str] = []
    for name in sm.state_names():
        if name not in reachable and name not in unreachable:
            unreachable.append(name)
    return unreachable


def check_reachability(sm: StateMachine) -> list[Defect]:
    """At most one defect listing every unreachable state."""
    unreachable = unreachable_states(sm)
    if not unreachable:
        return []
    return [UnreachableStates(initial_state=sm.initial_state, names=tuple(unreachable))]
