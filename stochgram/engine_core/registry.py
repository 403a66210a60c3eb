"""
Rule Registry - maps rule names to shared nodes.

The registry is the only owner of the name -> node mapping. Redefining a
name goes through replace(), which rewires every node that referenced the
old definition so that already-compiled rules follow the new one.
"""

from __future__ import annotations
from typing import Iterator
import logging

from ..grammar_schema.nodes import Node, substitute_child

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Name -> node mapping with dependency rewrite.

    Usage:
        registry = RuleRegistry()
        registry.install("greeting", leaf("hello"))
        registry.install("greeting", leaf("hi"))  # rewires dependents
    """

    def __init__(self):
        self._rules: dict[str, Node] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def get(self, name: str) -> Node | None:
        """Get the node for a name, or None."""
        return self._rules.get(name)

    def names(self) -> list[str]:
        """All registered names, in registration order."""
        return list(self._rules)

    def items(self) -> list[tuple[str, Node]]:
        """(name, node) pairs, in registration order."""
        return list(self._rules.items())

    def install(self, name: str, node: Node):
        """
        Install a node under a name.

        New names are inserted. Existing names are replaced and rewired.
        """
        if name in self._rules:
            self.replace(name, node)
            return

        self._rules[name] = node
        logger.debug("Installed rule %r (%s)", name, node.kind.value)

    def replace(self, name: str, new: Node):
        """
        Point `name` at `new` and rewire references to the old node.

        Every registry entry is asked to swap its direct children from the
        old node to the new one. The swap is one level deep per entry; any
        composite holding the old node is itself an entry and gets its own
        turn. Other names that alias the old node keep it.
        """
        old = self._rules[name]
        if old is new:
            return

        self._rules[name] = new

        swapped = 0
        for node in self._rules.values():
            swapped += substitute_child(node, old, new)

        logger.debug(
            "Replaced rule %r (%s -> %s), rewired %d reference(s)",
            name, old.kind.value, new.kind.value, swapped,
        )
