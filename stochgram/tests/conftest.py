"""
Pytest fixtures for Stochgram tests.
"""

import random

import pytest

from ..config import GrammarSettings
from ..engine_core.grammar import Grammar


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for repeatable draws."""
    return random.Random(1234)


@pytest.fixture
def string_grammar() -> Grammar:
    """Grammar over strings; unknown references become literal leaves."""
    return Grammar.for_strings(settings=GrammarSettings(seed=42))


@pytest.fixture
def int_grammar() -> Grammar:
    """Grammar over ints with a few terminals and no literal synthesis."""
    grammar = Grammar(settings=GrammarSettings(seed=42))
    grammar.register_terminal("one", 1)
    grammar.register_terminal("two", 2)
    grammar.register_terminal("three", 3)
    return grammar


@pytest.fixture
def shallow_settings() -> GrammarSettings:
    """Settings with a small fallback bound."""
    return GrammarSettings(max_depth=3, seed=7)
