"""
Grammar - the library entry point.

Holds one registry, one compiler and one random source:
- register_terminal(name, value): add a leaf rule
- compile(name, rule_text): add or redefine a rule from rule text
- generate(name): expand a rule into a list of terminal values

Not thread-safe. Callers sharing a grammar across threads must guard
every call, generation included, with one lock.
"""

from __future__ import annotations
from typing import Any, TYPE_CHECKING
import random

from ..config import GrammarSettings
from ..grammar_schema.validation import (
    GrammarValidationError,
    ValidationResult,
    validate_grammar,
)
from ..rule_compiler.compiler import CompilationResult, RuleCompiler
from ..rule_compiler.literals import LiteralPolicy, no_literal, string_literal
from .errors import GenerationError, RuleNotFound
from .generator import GenerationContext, Generator
from .registry import RuleRegistry

if TYPE_CHECKING:
    from ..grammar_schema.definition import GrammarDefinition


class Grammar:
    """
    A compiled stochastic grammar.

    Usage:
        grammar = Grammar.for_strings()
        grammar.compile("name", "1 Ada | 1 Grace")
        grammar.compile("greeting", "hello & name")
        grammar.generate("greeting")  # ["hello", "Ada"] or ["hello", "Grace"]

    For other terminal types, register terminals first:
        grammar = Grammar()
        grammar.register_terminal("one", 1)
        grammar.compile("ones", "one # 3")
        grammar.generate("ones")  # [1, 1, 1]
    """

    def __init__(
        self,
        literal_policy: LiteralPolicy = no_literal,
        settings: GrammarSettings | None = None,
    ):
        self.settings = settings or GrammarSettings()
        self.registry = RuleRegistry()
        self.compiler = RuleCompiler(self.registry, literal_policy=literal_policy)
        self.rng = random.Random(self.settings.seed)
        self.start: str | None = None  # default rule for generate()

    @classmethod
    def for_strings(cls, settings: GrammarSettings | None = None) -> Grammar:
        """Grammar over string terminals; unknown references become literals."""
        return cls(literal_policy=string_literal, settings=settings)

    @classmethod
    def from_definition(
        cls,
        definition: GrammarDefinition,
        literal_policy: LiteralPolicy | None = None,
        settings: GrammarSettings | None = None,
    ) -> Grammar:
        """Build a grammar from a validated GrammarDefinition."""
        from ..rule_compiler.compiler import compile_rules

        grammar = compile_rules(
            definition.rules,
            terminals=definition.terminals,
            literal_policy=literal_policy,
            settings=settings,
        )
        grammar.start = definition.start
        return grammar

    def register_terminal(self, name: str, value: Any):
        """Register a leaf rule producing exactly `value`."""
        self.compiler.register_terminal(name, value)

    def compile(self, name: str, rule_text: str) -> CompilationResult:
        """Compile a rule string under `name`. See RuleCompiler.compile."""
        return self.compiler.compile(name, rule_text)

    def generate(self, name: str | None = None, rng: random.Random | None = None) -> list[Any]:
        """
        Expand the rule `name` into a list of terminal values.

        Args:
            name: Rule to expand (defaults to self.start)
            rng: Optional random source (the grammar's own otherwise)

        Raises:
            RuleNotFound: `name` is not registered
            GenerationError: expansion nests deeper than the interpreter stack
        """
        if name is None:
            name = self.start
        node = self.registry.get(name) if name is not None else None
        if node is None:
            raise RuleNotFound(name)

        context = GenerationContext(
            rng=rng or self.rng,
            max_depth=self.settings.max_depth,
            repetition_mode=self.settings.repetition_mode,
        )
        try:
            return Generator(context).generate(node)
        except RecursionError as e:
            raise GenerationError(
                f"Rule '{name}' nests too deeply; check validate() for unbounded recursion"
            ) from e

    def sample(self, name: str, n: int, rng: random.Random | None = None) -> list[list[Any]]:
        """Generate `n` independent expansions of `name`."""
        return [self.generate(name, rng=rng) for _ in range(n)]

    def seed(self, value: int | None):
        """Reseed the grammar's own random source."""
        self.rng.seed(value)

    def has_rule(self, name: str) -> bool:
        return name in self.registry

    def rule_names(self) -> list[str]:
        return self.registry.names()

    def validate(self, raise_on_error: bool = False) -> ValidationResult:
        """
        Check the compiled graph for unbounded cycles and dead selects.

        Raises GrammarValidationError if raise_on_error=True and errors exist.
        """
        result = validate_grammar(self.registry, self.settings)
        if raise_on_error and not result.valid:
            raise GrammarValidationError(result.errors)
        return result
