"""
Grammar Nodes - the compiled form of a rule.

A compiled grammar is a graph of nodes. Nodes are:
- Shared: one node may be the child of many nodes and the target of many names
- Possibly cyclic: a rule may reach itself, bounded by fallback nodes
- Rewirable: a composite node can swap one child reference for another

Key design decisions:
- Nodes compare by identity, never by structure (the graph may be cyclic)
- Child references are kept out of repr for the same reason
- Per-kind behaviour (children, substitution) dispatches on NodeKind
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class NodeKind(Enum):
    """Kinds of grammar nodes."""
    LEAF = "leaf"
    SEQUENCE = "sequence"
    SELECT = "select"
    REPETITION = "repetition"
    FALLBACK = "fallback"


@dataclass(eq=False)
class LeafNode:
    """A single terminal value. Always produces exactly that value."""
    kind: ClassVar[NodeKind] = NodeKind.LEAF
    value: Any


@dataclass(eq=False)
class SequenceNode:
    """Ordered children; output is their concatenation."""
    kind: ClassVar[NodeKind] = NodeKind.SEQUENCE
    elements: list[Node] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class WeightedOption:
    """One option of a select node."""
    node: Node = field(repr=False)
    weight: float = 1.0


@dataclass(eq=False)
class SelectNode:
    """Weighted choice: produces the output of exactly one option."""
    kind: ClassVar[NodeKind] = NodeKind.SELECT
    options: list[WeightedOption] = field(default_factory=list)

    @property
    def total_weight(self) -> float:
        return sum(option.weight for option in self.options)


@dataclass(eq=False)
class RepetitionNode:
    """Child output repeated a number of times derived from `count`."""
    kind: ClassVar[NodeKind] = NodeKind.REPETITION
    child: Node = field(repr=False)
    count: float = 1.0


@dataclass(eq=False)
class FallbackNode:
    """
    Primary child until the recursion bound is reached, alternate after.

    This is what makes self-referential rules terminate.
    """
    kind: ClassVar[NodeKind] = NodeKind.FALLBACK
    primary: Node = field(repr=False)
    alternate: Node = field(repr=False)


Node = Union[LeafNode, SequenceNode, SelectNode, RepetitionNode, FallbackNode]


def children(node: Node) -> list[Node]:
    """Direct child references of a node, in declaration order."""
    kind = node.kind
    if kind == NodeKind.LEAF:
        return []
    elif kind == NodeKind.SEQUENCE:
        return list(node.elements)
    elif kind == NodeKind.SELECT:
        return [option.node for option in node.options]
    elif kind == NodeKind.REPETITION:
        return [node.child]
    elif kind == NodeKind.FALLBACK:
        return [node.primary, node.alternate]
    raise TypeError(f"Unknown node kind: {kind}")


def substitute_child(node: Node, old: Node, new: Node) -> int:
    """
    Replace every direct child reference to `old` with `new`.

    Shallow: only this node's own references are touched.
    Returns the number of references swapped.
    """
    swapped = 0
    kind = node.kind

    if kind == NodeKind.LEAF:
        return 0

    elif kind == NodeKind.SEQUENCE:
        for i, element in enumerate(node.elements):
            if element is old:
                node.elements[i] = new
                swapped += 1

    elif kind == NodeKind.SELECT:
        for option in node.options:
            if option.node is old:
                option.node = new
                swapped += 1

    elif kind == NodeKind.REPETITION:
        if node.child is old:
            node.child = new
            swapped += 1

    elif kind == NodeKind.FALLBACK:
        if node.primary is old:
            node.primary = new
            swapped += 1
        if node.alternate is old:
            node.alternate = new
            swapped += 1

    else:
        raise TypeError(f"Unknown node kind: {kind}")

    return swapped


# ============================================================================
# Factory functions
# ============================================================================

def leaf(value: Any) -> LeafNode:
    """Create a leaf node."""
    return LeafNode(value=value)


def sequence(elements: list[Node]) -> SequenceNode:
    """Create a sequence node."""
    return SequenceNode(elements=list(elements))


def select(options: list[tuple[Node, float]]) -> SelectNode:
    """Create a select node from (node, weight) pairs."""
    if not options:
        raise ValueError("A select node needs at least one option")
    weighted = []
    for node, weight in options:
        if weight < 0:
            raise ValueError(f"Option weight must be >= 0, got {weight}")
        weighted.append(WeightedOption(node=node, weight=weight))
    return SelectNode(options=weighted)


def repetition(child: Node, count: float) -> RepetitionNode:
    """Create a repetition node."""
    if count < 0:
        raise ValueError(f"Repeat count must be >= 0, got {count}")
    return RepetitionNode(child=child, count=count)


def fallback(primary: Node, alternate: Node) -> FallbackNode:
    """Create a fallback node."""
    return FallbackNode(primary=primary, alternate=alternate)
