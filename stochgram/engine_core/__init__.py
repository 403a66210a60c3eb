"""
Engine Core - rule registry and generation.

The engine is the runtime that:
1. Keeps the name -> node registry
2. Rewires dependents when a rule is redefined
3. Expands nodes into terminal sequences
"""

from .errors import (
    GrammarError,
    RuleNotFound,
    UnresolvedReference,
    MalformedNumericLiteral,
    GenerationError,
)
from .registry import RuleRegistry
from .generator import GenerationContext, Generator, should_fall_back, repeat_count
from .grammar import Grammar

__all__ = [
    "GrammarError",
    "RuleNotFound",
    "UnresolvedReference",
    "MalformedNumericLiteral",
    "GenerationError",
    "RuleRegistry",
    "GenerationContext",
    "Generator",
    "should_fall_back",
    "repeat_count",
    "Grammar",
]
