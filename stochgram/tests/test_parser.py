"""
Tests for the rule parser.

Tests:
- Operator priority
- N-ary splitting
- Selector weights and names
- Numeric literal errors
"""

import pytest

from ..engine_core.errors import MalformedNumericLiteral, UnresolvedReference
from ..rule_compiler.parser import (
    RuleKind,
    parse_number,
    parse_rule,
    split_operands,
)


class TestOperatorPriority:
    """The first matching operator, by priority, decides the rule kind."""

    def test_bare_reference(self):
        parsed = parse_rule("hello world")
        assert parsed.kind == RuleKind.REFERENCE
        assert parsed.references == ["hello world"]

    def test_fallback_beats_sequence(self):
        parsed = parse_rule("a & b -> c")
        assert parsed.kind == RuleKind.FALLBACK
        assert parsed.references == ["a & b", "c"]

    def test_sequence_beats_selector(self):
        parsed = parse_rule("1 a | 2 b & c")
        assert parsed.kind == RuleKind.SEQUENCE
        assert parsed.references == ["1 a | 2 b", "c"]

    def test_selector_beats_repetition(self):
        parsed = parse_rule("1 a # 2 | 1 b")
        assert parsed.kind == RuleKind.SELECTOR
        assert parsed.references == ["a # 2", "b"]
        assert parsed.weights == [1.0, 1.0]

    def test_delimiters_need_spaces(self):
        """a&b is a name, not a sequence."""
        parsed = parse_rule("a&b")
        assert parsed.kind == RuleKind.REFERENCE


class TestBinaryOperators:
    """Fallback and repetition split on their first delimiter only."""

    def test_fallback_primary_then_alternate(self):
        parsed = parse_rule("loop -> done")
        assert parsed.references == ["loop", "done"]

    def test_fallback_chain_keeps_rest_as_alternate(self):
        parsed = parse_rule("a -> b -> c")
        assert parsed.references == ["a", "b -> c"]

    def test_repetition(self):
        parsed = parse_rule("word # 2.5")
        assert parsed.kind == RuleKind.REPETITION
        assert parsed.references == ["word"]
        assert parsed.count == 2.5

    def test_repetition_extra_delimiter_is_malformed(self):
        with pytest.raises(MalformedNumericLiteral):
            parse_rule("word # 2 # 3")


class TestSplitting:
    """N-ary splitting behaviour."""

    def test_split_sequence(self):
        assert split_operands("a & b & c", " & ") == ["a", "b", "c"]

    def test_trailing_delimiter_is_ignored(self):
        assert split_operands("a & b & ", " & ") == ["a", "b"]

    def test_leading_delimiter_characters_are_skipped(self):
        assert split_operands("  a & b", " & ") == ["a", "b"]

    def test_selector_names_may_contain_spaces(self):
        parsed = parse_rule("1 big dog | 3 cat")
        assert parsed.references == ["big dog", "cat"]
        assert parsed.weights == [1.0, 3.0]


class TestNumbers:
    """Weight and repeat literals."""

    @pytest.mark.parametrize("token,expected", [
        ("1", 1.0),
        ("0.25", 0.25),
        (".5", 0.5),
        ("2.", 2.0),
        ("1e2", 100.0),
        ("0", 0.0),
    ])
    def test_valid_literals(self, token, expected):
        assert parse_number(token) == expected

    @pytest.mark.parametrize("token", ["abc", "", "1.2.3", "inf", "nan", "-1", "1_000", "2x"])
    def test_invalid_literals(self, token):
        with pytest.raises(MalformedNumericLiteral) as exc_info:
            parse_number(token, "weight")
        assert exc_info.value.token == token

    def test_bad_weight_in_selector(self):
        with pytest.raises(MalformedNumericLiteral):
            parse_rule("heavy a | 1 b")

    def test_option_without_weight(self):
        """An option with no space reads its name as the weight."""
        with pytest.raises(MalformedNumericLiteral):
            parse_rule("1 a | b")

    def test_option_without_name(self):
        with pytest.raises(UnresolvedReference):
            parse_rule("1 a | 2")

    def test_selector_without_options(self):
        with pytest.raises(UnresolvedReference):
            parse_rule(" | ")

    def test_malformed_literal_is_value_error(self):
        with pytest.raises(ValueError):
            parse_number("x")
