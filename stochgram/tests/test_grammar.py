"""
End-to-end tests for the Grammar API.

Tests:
- register_terminal / compile / generate
- Weighted selection statistics
- Bounded recursion
- Error conditions
"""

import random
from collections import Counter

import pytest

from ..config import MAX_DEPTH_LIMIT, GrammarSettings, RepetitionMode
from ..engine_core.errors import GenerationError, GrammarError, RuleNotFound, UnresolvedReference
from ..engine_core.grammar import Grammar
from ..grammar_schema.definition import GrammarDefinition


class TestTerminals:
    """Terminal rules produce their value."""

    def test_terminal_generates_single_value(self, int_grammar):
        for _ in range(5):
            assert int_grammar.generate("one") == [1]

    def test_terminal_value_is_not_copied(self):
        grammar = Grammar()
        payload = {"token": "x"}
        grammar.register_terminal("t", payload)

        assert grammar.generate("t")[0] is payload


class TestOperators:
    """Each operator end to end."""

    def test_sequence_order(self, int_grammar):
        int_grammar.compile("pair", "one & two")
        for _ in range(5):
            assert int_grammar.generate("pair") == [1, 2]

    def test_repetition(self, int_grammar):
        int_grammar.compile("triple", "one # 3")
        assert int_grammar.generate("triple") == [1, 1, 1]

    def test_select_is_balanced(self, int_grammar):
        int_grammar.compile("coin", "1 one | 1 two")

        counts = Counter(v for [v] in int_grammar.sample("coin", 4000))
        assert counts[1] / 4000 == pytest.approx(0.5, abs=0.04)
        assert counts[1] + counts[2] == 4000

    def test_zero_weight_option_never_generated(self, int_grammar):
        int_grammar.compile("biased", "1 one | 0 two")
        assert all(out == [1] for out in int_grammar.sample("biased", 500))

    def test_nested_operators(self, string_grammar):
        string_grammar.compile("s", "a # 2 & 1 b | 0 c")
        assert string_grammar.generate("s") == ["a", "a", "b"]

    def test_expected_repetition_mode(self):
        grammar = Grammar.for_strings(
            settings=GrammarSettings(seed=3, repetition_mode=RepetitionMode.EXPECTED),
        )
        grammar.compile("s", "a # 1.5")

        lengths = {len(out) for out in grammar.sample("s", 200)}
        assert lengths == {1, 2}


class TestRecursion:
    """Fallback nodes bound self-referential rules."""

    def test_direct_self_reference_terminates(self, string_grammar):
        string_grammar.compile("A", "A -> literal")
        assert string_grammar.generate("A") == ["literal"]

    def test_list_length_is_bounded(self, shallow_settings):
        grammar = Grammar.for_strings(settings=shallow_settings)
        grammar.compile("list", "item & list -> item")

        assert grammar.generate("list") == ["item"] * (shallow_settings.max_depth + 1)

    def test_random_recursion_is_bounded(self, shallow_settings):
        grammar = Grammar.for_strings(settings=shallow_settings)
        grammar.compile("expr", "1 x | 1 expr & plus & expr -> x")

        for out in grammar.sample("expr", 100):
            assert 1 <= len(out) <= 2 ** (shallow_settings.max_depth + 1)

    def test_non_string_recursion_needs_placeholder(self, int_grammar):
        with pytest.raises(UnresolvedReference):
            int_grammar.compile("chain", "one & chain -> two")

        int_grammar.register_terminal("chain", 0)
        int_grammar.compile("chain", "one & chain -> two")
        out = int_grammar.generate("chain")
        assert out == [1] * int_grammar.settings.max_depth + [2]

    def test_deepest_allowed_bound(self):
        grammar = Grammar.for_strings(settings=GrammarSettings(max_depth=MAX_DEPTH_LIMIT))
        grammar.compile("A", "A -> end")
        assert grammar.generate("A") == ["end"]

    def test_unbounded_recursion_raises_generation_error(self, string_grammar):
        string_grammar.compile("s", "a & s")
        with pytest.raises(GenerationError):
            string_grammar.generate("s")


class TestErrors:
    """Error conditions surface to the caller."""

    def test_missing_rule(self, string_grammar):
        string_grammar.compile("a", "x")
        before = string_grammar.rule_names()

        with pytest.raises(RuleNotFound) as exc_info:
            string_grammar.generate("missing")

        assert exc_info.value.name == "missing"
        assert string_grammar.rule_names() == before

    def test_missing_rule_is_key_error(self, string_grammar):
        with pytest.raises(KeyError):
            string_grammar.generate("missing")

    def test_all_errors_share_base(self, int_grammar):
        with pytest.raises(GrammarError):
            int_grammar.compile("bad", "one & nowhere")

    def test_generate_without_name_or_start(self, string_grammar):
        with pytest.raises(RuleNotFound):
            string_grammar.generate()


class TestRandomSource:
    """Seeds and injected random sources."""

    def test_same_seed_same_samples(self):
        outputs = []
        for _ in range(2):
            grammar = Grammar.for_strings(settings=GrammarSettings(seed=11))
            grammar.compile("s", "1 a | 1 b | 1 c & 1 d | 1 e")
            outputs.append(grammar.sample("s", 30))
        assert outputs[0] == outputs[1]

    def test_injected_rng(self, string_grammar):
        string_grammar.compile("s", "1 a | 1 b")

        first = [string_grammar.generate("s", rng=random.Random(5)) for _ in range(3)]
        second = [string_grammar.generate("s", rng=random.Random(5)) for _ in range(3)]
        assert first == second

    def test_reseed(self, string_grammar):
        string_grammar.compile("s", "1 a | 1 b # 3")

        string_grammar.seed(8)
        first = string_grammar.sample("s", 10)
        string_grammar.seed(8)
        assert string_grammar.sample("s", 10) == first


class TestFromDefinition:
    """Grammars built from a GrammarDefinition."""

    def test_from_definition_uses_start(self):
        definition = GrammarDefinition.model_validate({
            "rules": {
                "greeting": "hello & name",
                "name": "1 Ada | 0 Grace",
            },
            "start": "greeting",
        })
        grammar = Grammar.from_definition(definition)

        assert grammar.generate() == ["hello", "Ada"]
        assert grammar.has_rule("name")

    def test_from_definition_with_terminals(self):
        definition = GrammarDefinition(
            terminals={"up": (0, 1), "down": (0, -1)},
            rules={"walk": "up & down & up"},
        )
        grammar = Grammar.from_definition(definition)

        assert grammar.generate("walk") == [(0, 1), (0, -1), (0, 1)]
