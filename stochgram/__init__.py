"""
Stochgram - Stochastic Grammar Engine

Compiles named rules written in a small operator language into a shared node
graph and expands them into sequences of terminal values:
- Sequence (a & b), weighted choice (1 a | 2 b), repetition (a # 3)
- Fallback (a -> b) to bound self-referential rules
- Redefinitions propagate to every rule that already references them
"""

from .engine_core import (
    Grammar,
    GrammarError,
    RuleNotFound,
    UnresolvedReference,
    MalformedNumericLiteral,
    GenerationError,
)
from .config import GrammarSettings, RepetitionMode
from .rule_compiler import compile_rules, string_literal, no_literal

__version__ = "0.1.0"

__all__ = [
    "Grammar",
    "GrammarError",
    "RuleNotFound",
    "UnresolvedReference",
    "MalformedNumericLiteral",
    "GenerationError",
    "GrammarSettings",
    "RepetitionMode",
    "compile_rules",
    "string_literal",
    "no_literal",
]
