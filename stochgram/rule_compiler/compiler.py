"""
Rule Compiler - compiles rule strings into registry nodes.

The compiler:
1. Parses the rule string
2. Checks that every reference can be resolved, before touching anything
3. Builds the node, compiling unknown references from their own text
4. Installs the node under its name (replacing and rewiring if it exists)

A failed compile leaves the registry exactly as it was.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, TYPE_CHECKING
import logging

from ..engine_core.errors import UnresolvedReference
from ..engine_core.registry import RuleRegistry
from ..grammar_schema.nodes import (
    Node,
    leaf,
    sequence,
    select,
    repetition,
    fallback,
)
from .literals import LiteralPolicy, no_literal
from .parser import ParsedRule, RuleKind, parse_rule

if TYPE_CHECKING:
    from ..config import GrammarSettings
    from ..engine_core.grammar import Grammar

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    """
    Result of compiling one rule.
    """
    name: str
    kind: RuleKind
    replaced: bool = False  # name existed before and was rewired

    # Names registered along the way (sub-rules, literal leaves)
    created: list[str] = field(default_factory=list)


class RuleCompiler:
    """
    Compiles rule strings into a RuleRegistry.

    Usage:
        compiler = RuleCompiler(registry, literal_policy=string_literal)
        compiler.compile("greeting", "1 hello | 2 hi")
    """

    def __init__(
        self,
        registry: RuleRegistry,
        literal_policy: LiteralPolicy = no_literal,
    ):
        self.registry = registry
        self.literal_policy = literal_policy

    def compile(self, name: str, rule_text: str) -> CompilationResult:
        """
        Compile `rule_text` and install it under `name`.

        Raises:
            MalformedNumericLiteral: a weight or repeat token is not a number
            UnresolvedReference: a reference cannot be resolved
        """
        parsed = parse_rule(rule_text)
        self._check(name, parsed, planned=set())

        before = set(self.registry.names())
        replaced = name in before

        self._build(name, parsed)

        created = [n for n in self.registry.names() if n not in before and n != name]
        logger.debug(
            "Compiled rule %r as %s (%d sub-rule(s) created)",
            name, parsed.kind.value, len(created),
        )
        return CompilationResult(
            name=name,
            kind=parsed.kind,
            replaced=replaced,
            created=created,
        )

    def register_terminal(self, name: str, value: Any):
        """Install a leaf under `name`, bypassing parsing."""
        self.registry.install(name, leaf(value))

    def _check(self, name: str, parsed: ParsedRule, planned: set[str]):
        """
        Raise if any reference of `parsed` cannot be resolved.

        `planned` collects names that compiling would create, so the check
        matches what _build is going to do without mutating anything.
        """
        if parsed.kind == RuleKind.REFERENCE:
            reference = parsed.references[0]
            if self._known(reference, planned):
                return
            self._check_literal(reference, name)
            planned.add(reference)
            return

        for reference in parsed.references:
            if self._known(reference, planned):
                continue
            if not reference:
                raise UnresolvedReference(reference, rule_name=name)
            self._check(reference, parse_rule(reference), planned)
            planned.add(reference)

    def _check_literal(self, reference: str, rule_name: str):
        if not reference:
            raise UnresolvedReference(reference, rule_name=rule_name)
        accepted, _ = self.literal_policy(reference)
        if not accepted:
            raise UnresolvedReference(reference, rule_name=rule_name)

    def _known(self, reference: str, planned: set[str]) -> bool:
        return reference in self.registry or reference in planned

    def _build(self, name: str, parsed: ParsedRule):
        """Build the node for `parsed` and install it under `name`."""
        kind = parsed.kind

        if kind == RuleKind.REFERENCE:
            reference = parsed.references[0]
            if reference not in self.registry:
                accepted, value = self.literal_policy(reference)
                if not accepted:
                    raise UnresolvedReference(reference, rule_name=name)
                logger.debug("Created literal leaf %r", reference)
                self.registry.install(reference, leaf(value))
            # Alias: the name shares the referenced node
            self.registry.install(name, self.registry.get(reference))
            return

        if kind == RuleKind.FALLBACK:
            primary = self._resolve(parsed.references[0])
            alternate = self._resolve(parsed.references[1])
            node = fallback(primary, alternate)

        elif kind == RuleKind.SEQUENCE:
            node = sequence([self._resolve(ref) for ref in parsed.references])

        elif kind == RuleKind.SELECTOR:
            options = []
            for ref, weight in zip(parsed.references, parsed.weights):
                options.append((self._resolve(ref), weight))
            node = select(options)

        elif kind == RuleKind.REPETITION:
            node = repetition(self._resolve(parsed.references[0]), parsed.count)

        else:
            raise TypeError(f"Unknown rule kind: {kind}")

        self.registry.install(name, node)

    def _resolve(self, reference: str) -> Node:
        """Node for a reference, compiling the reference text if unknown."""
        if reference not in self.registry:
            logger.debug("Compiling unknown reference %r from its own text", reference)
            self._build(reference, parse_rule(reference))
        return self.registry.get(reference)


def compile_rules(
    rules: Mapping[str, str],
    terminals: Mapping[str, Any] | None = None,
    literal_policy: LiteralPolicy | None = None,
    settings: GrammarSettings | None = None,
) -> Grammar:
    """
    Convenience function to build a grammar from a rule table.

    Terminals are registered first, then rules are compiled in mapping
    order. Without an explicit policy, string literals are allowed only
    when no terminals are given.
    """
    from ..engine_core.grammar import Grammar
    from .literals import string_literal

    if literal_policy is None:
        literal_policy = no_literal if terminals else string_literal

    grammar = Grammar(literal_policy=literal_policy, settings=settings)
    for name, value in (terminals or {}).items():
        grammar.register_terminal(name, value)
    for name, rule_text in rules.items():
        grammar.compile(name, rule_text)
    return grammar
