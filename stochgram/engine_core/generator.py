"""
Generator - expands a node into a sequence of terminal values.

Randomness is confined to:
- Select nodes: weighted draw among options
- Repetition nodes in EXPECTED mode: whether to add one more repeat

Recursion depth is an explicit argument of every evaluation step. It only
grows when a fallback node takes its primary branch, so the fallback
decision is a pure function of (depth, bound).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import math
import random

from ..config import DEFAULT_MAX_DEPTH, RepetitionMode
from ..grammar_schema.nodes import Node, NodeKind, SelectNode
from .errors import GenerationError


@dataclass
class GenerationContext:
    """Everything an evaluation needs besides the node and the depth."""
    rng: random.Random
    max_depth: int = DEFAULT_MAX_DEPTH
    repetition_mode: RepetitionMode = RepetitionMode.FIXED


def should_fall_back(depth: int, bound: int) -> bool:
    """True when a fallback node at `depth` must use its alternate."""
    return depth >= bound


def repeat_count(count: float, mode: RepetitionMode, rng: random.Random) -> int:
    """
    Turn a repeat parameter into a number of repeats.

    FIXED rounds to the nearest integer, halves up.
    EXPECTED takes floor(count), plus one more with probability equal to
    the fractional part, so the mean is `count`.
    """
    if mode == RepetitionMode.FIXED:
        return int(math.floor(count + 0.5))

    whole = math.floor(count)
    fraction = count - whole
    if fraction > 0 and rng.random() < fraction:
        whole += 1
    return int(whole)


def choose_option(node: SelectNode, rng: random.Random) -> Node:
    """
    Weighted draw among a select node's options.

    Draws uniformly in [0, total) and walks the options until the running
    total exceeds the draw. Zero-weight options are never chosen.
    """
    total = node.total_weight
    if total <= 0:
        raise GenerationError("Select node has no option with positive weight")

    draw = rng.random() * total
    running = 0.0
    for option in node.options:
        running += option.weight
        if running > draw:
            return option.node

    # Float rounding can leave draw == running at the end
    for option in reversed(node.options):
        if option.weight > 0:
            return option.node
    raise GenerationError("Select node has no option with positive weight")


class Generator:
    """
    Evaluates nodes.

    Usage:
        generator = Generator(GenerationContext(rng=random.Random(7)))
        values = generator.generate(node)
    """

    def __init__(self, context: GenerationContext):
        self.context = context

    def generate(self, node: Node) -> list[Any]:
        """Expand a node from depth zero."""
        out: list[Any] = []
        self.emit(node, 0, out)
        return out

    def emit(self, node: Node, depth: int, out: list[Any]):
        """Append the expansion of `node` at `depth` to `out`."""
        kind = node.kind

        if kind == NodeKind.LEAF:
            out.append(node.value)

        elif kind == NodeKind.SEQUENCE:
            for element in node.elements:
                self.emit(element, depth, out)

        elif kind == NodeKind.SELECT:
            self.emit(choose_option(node, self.context.rng), depth, out)

        elif kind == NodeKind.REPETITION:
            times = repeat_count(node.count, self.context.repetition_mode, self.context.rng)
            for _ in range(times):
                self.emit(node.child, depth, out)

        elif kind == NodeKind.FALLBACK:
            if should_fall_back(depth, self.context.max_depth):
                self.emit(node.alternate, depth, out)
            else:
                self.emit(node.primary, depth + 1, out)

        else:
            raise TypeError(f"Unknown node kind: {kind}")
