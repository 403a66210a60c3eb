"""
Grammar Validation - static checks over a compiled node graph.

Validates that:
1. Every select node has at least one option with positive weight
2. Every cycle passes through the primary branch of a fallback node,
   so generation terminates for any positive depth bound

Warns about:
- Zero-weight options, which can never be chosen
- Fixed repetitions whose count rounds to zero
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import math

from ..config import GrammarSettings, RepetitionMode
from .nodes import Node, NodeKind, children

if TYPE_CHECKING:
    from ..engine_core.registry import RuleRegistry


class GrammarValidationError(Exception):
    """Raised when grammar validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        first = f": {errors[0]}" if errors else ""
        super().__init__(f"Grammar has {len(errors)} error(s){first}")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]

    # Rule-name paths of recursion that no fallback bounds
    unbounded_cycles: list[list[str]] = field(default_factory=list)


def validate_grammar(
    registry: RuleRegistry,
    settings: GrammarSettings | None = None,
) -> ValidationResult:
    """
    Validate every node reachable from the registry.

    Returns ValidationResult with errors and warnings.
    """
    settings = settings or GrammarSettings()
    errors: list[str] = []
    warnings: list[str] = []

    labels = _label_nodes(registry)
    nodes = _reachable(registry)

    for node in nodes:
        label = labels.get(id(node), f"<{node.kind.value}>")

        if node.kind == NodeKind.SELECT:
            if node.total_weight <= 0:
                errors.append(f"Rule '{label}' has no option with positive weight")
            for i, option in enumerate(node.options, start=1):
                if option.weight == 0:
                    warnings.append(
                        f"Rule '{label}' option {i} has weight 0 and is never chosen"
                    )

        elif node.kind == NodeKind.REPETITION:
            if settings.repetition_mode == RepetitionMode.FIXED and math.floor(node.count + 0.5) == 0:
                warnings.append(f"Rule '{label}' repeats {node.count} times, which produces nothing")

    unbounded_cycles = []
    for cycle in _unbounded_cycles(nodes):
        names = [labels.get(id(n), f"<{n.kind.value}>") for n in cycle]
        unbounded_cycles.append(names)
        path = " -> ".join(names)
        errors.append(f"Unbounded recursion (no fallback primary on the cycle): {path}")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        unbounded_cycles=unbounded_cycles,
    )


def _label_nodes(registry: RuleRegistry) -> dict[int, str]:
    """Name each registered node by the first name it was registered under."""
    labels: dict[int, str] = {}
    for name, node in registry.items():
        labels.setdefault(id(node), name)
    return labels


def _reachable(registry: RuleRegistry) -> list[Node]:
    """All distinct nodes reachable from registry entries."""
    seen: set[int] = set()
    ordered: list[Node] = []
    stack = [node for _, node in registry.items()]

    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        ordered.append(node)
        stack.extend(children(node))

    return ordered


def _unbounded_edges(node: Node) -> list[Node]:
    """Children reached without increasing the recursion depth."""
    if node.kind == NodeKind.FALLBACK:
        return [node.alternate]
    return children(node)


def _unbounded_cycles(nodes: list[Node]) -> list[list[Node]]:
    """
    Cycles made only of depth-preserving edges.

    Iterative DFS; each back edge yields one cycle, closed on its start node.
    """
    in_progress = 1
    done = 2
    state: dict[int, int] = {}
    cycles: list[list[Node]] = []

    for root in nodes:
        if id(root) in state:
            continue

        state[id(root)] = in_progress
        path = [root]
        stack = [iter(_unbounded_edges(root))]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                finished = path.pop()
                state[id(finished)] = done
                continue

            child_state = state.get(id(child))
            if child_state == in_progress:
                start = next(i for i, n in enumerate(path) if n is child)
                cycles.append(path[start:] + [child])
            elif child_state is None:
                state[id(child)] = in_progress
                path.append(child)
                stack.append(iter(_unbounded_edges(child)))

    return cycles
