"""Graph augmentor: put a ``resumeTo`` dispatcher in front of a workflow.

The dispatcher is a Choice state with one branch per reachable state, so an
execution started with ``{"resumeTo": "Deploy"}`` jumps straight into
``Deploy``. Anything else falls through to the original entry state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable

from deployment_manager.core.logging import get_logger
from deployment_manager.graph.registry import DispatcherRegistry
from deployment_manager.models.decision import RESUME_TO

logger = get_logger(__name__)

DISPATCHER_UID = "com.giss.aws-stepfunctions.deploymentmanager-statemachine"
DISPATCHER_STATE_ID = "ResumeTo"
RESUME_TO_PATH = f"$.{RESUME_TO}"


@dataclass(eq=False)
class StateNode:
    """A workflow state and its outgoing transitions (next, catch, branches)."""

    id: str
    transitions: list[StateNode] = field(default_factory=list)

    def next(self, node: StateNode) -> StateNode:
        """Chain ``node`` after this one and return it."""
        self.transitions.append(node)
        return node


@dataclass(frozen=True)
class ChoiceRule:
    variable: str
    string_equals: str
    next: StateNode

    def matches(self, payload: dict[str, Any]) -> bool:
        key = self.variable.removeprefix("$.")
        return payload.get(key) == self.string_equals

    def to_state(self) -> dict[str, str]:
        return {"Variable": self.variable, "StringEquals": self.string_equals, "Next": self.next.id}


@dataclass
class DispatcherNode:
    """Choice state that branches on ``$.resumeTo``."""

    id: str
    choices: list[ChoiceRule]
    default: StateNode

    def route(self, payload: dict[str, Any]) -> StateNode:
        for rule in self.choices:
            if rule.matches(payload):
                return rule.next
        return self.default

    def to_state(self) -> dict[str, Any]:
        """Render as an Amazon States Language Choice state."""
        return {
            "Type": "Choice",
            "Choices": [rule.to_state() for rule in self.choices],
            "Default": self.default.id,
        }


def find_reachable_states(entry: StateNode) -> list[StateNode]:
    """Every state reachable from ``entry``, entry first, in discovery order.

    Iterative DFS with a visited set, so cycles terminate.
    """
    seen: set[str] = set()
    ordered: list[StateNode] = []
    stack = [entry]
    while stack:
        node = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        ordered.append(node)
        stack.extend(reversed(node.transitions))
    return ordered


def build_dispatcher(entry: StateNode) -> DispatcherNode:
    choices = [
        ChoiceRule(variable=RESUME_TO_PATH, string_equals=node.id, next=node)
        for node in find_reachable_states(entry)
    ]
    logger.info("dispatcher_built", entry=entry.id, branches=len(choices))
    return DispatcherNode(id=DISPATCHER_STATE_ID, choices=choices, default=entry)


def augment(entry: StateNode, registry: DispatcherRegistry, scope: Hashable) -> DispatcherNode:
    """Return the scope's dispatcher, building it on first request."""
    return registry.get_or_create(scope, DISPATCHER_UID, lambda: build_dispatcher(entry))
