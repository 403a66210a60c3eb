"""
Rule Parser - turns one rule string into a ParsedRule.

Rule syntax (every delimiter is surrounded by single spaces):
    fallback:    PRIMARY -> ALTERNATE
    sequence:    R1 & R2 & ... & Rn
    selector:    W1 R1 | W2 R2 | ... | Wn Rn
    repetition:  R # N
    reference:   R

Operators are checked against the whole string in the order above and the
first match wins. There is no grouping: an operand that itself contains a
lower-priority operator is a reference to a rule of that name, which the
compiler builds from the operand text when no such rule exists.

Parsing is pure. It never looks at the registry.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import math
import re

from ..engine_core.errors import MalformedNumericLiteral, UnresolvedReference

FALLBACK_DELIMITER = " -> "
SEQUENCE_DELIMITER = " & "
SELECTOR_DELIMITER = " | "
REPETITION_DELIMITER = " # "

_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class RuleKind(Enum):
    """Kinds of parsed rules, in priority order."""
    FALLBACK = "fallback"
    SEQUENCE = "sequence"
    SELECTOR = "selector"
    REPETITION = "repetition"
    REFERENCE = "reference"


@dataclass
class ParsedRule:
    """
    The operator structure of a rule string.

    `references` holds operand names in order:
    - fallback: [primary, alternate]
    - sequence: the elements
    - selector: one name per option, matching `weights`
    - repetition / reference: a single name
    """
    kind: RuleKind
    references: list[str]
    weights: list[float] = field(default_factory=list)
    count: float | None = None


def parse_rule(text: str) -> ParsedRule:
    """Parse a rule string."""
    if FALLBACK_DELIMITER in text:
        primary, alternate = _split_binary(text, FALLBACK_DELIMITER)
        return ParsedRule(kind=RuleKind.FALLBACK, references=[primary, alternate])

    if SEQUENCE_DELIMITER in text:
        return ParsedRule(
            kind=RuleKind.SEQUENCE,
            references=split_operands(text, SEQUENCE_DELIMITER),
        )

    if SELECTOR_DELIMITER in text:
        references = []
        weights = []
        for option in split_operands(text, SELECTOR_DELIMITER):
            weight, name = _split_option(option)
            weights.append(weight)
            references.append(name)
        if not references:
            raise UnresolvedReference("", rule_name=text)
        return ParsedRule(kind=RuleKind.SELECTOR, references=references, weights=weights)

    if REPETITION_DELIMITER in text:
        name, count_token = _split_binary(text, REPETITION_DELIMITER)
        return ParsedRule(
            kind=RuleKind.REPETITION,
            references=[name],
            count=parse_number(count_token, "repeat count"),
        )

    return ParsedRule(kind=RuleKind.REFERENCE, references=[text])


def split_operands(text: str, delimiter: str) -> list[str]:
    """
    Split an n-ary rule on `delimiter`.

    At each cursor position, characters that occur in the delimiter are
    skipped before the operand starts. Trailing delimiters yield nothing.
    """
    skip = set(delimiter)
    operands = []
    cursor = 0

    while True:
        start = cursor
        while start < len(text) and text[start] in skip:
            start += 1
        if start >= len(text):
            break

        end = text.find(delimiter, start)
        if end == -1:
            operands.append(text[start:])
            break

        operands.append(text[start:end])
        cursor = end

    return operands


def parse_number(token: str, what: str = "number") -> float:
    """
    Parse a decimal floating point literal.

    Raises MalformedNumericLiteral for anything else, and for values that
    are negative or not finite.
    """
    if not _DECIMAL.fullmatch(token):
        raise MalformedNumericLiteral(token, what)
    value = float(token)
    if not math.isfinite(value) or value < 0:
        raise MalformedNumericLiteral(token, what)
    return value


def _split_binary(text: str, delimiter: str) -> tuple[str, str]:
    """Split on the first occurrence of `delimiter` only."""
    left, _, right = text.partition(delimiter)
    return left, right


def _split_option(option: str) -> tuple[float, str]:
    """Split a selector option into (weight, rule name)."""
    weight_token, _, name = option.partition(" ")
    weight = parse_number(weight_token, "weight")
    if not name:
        raise UnresolvedReference(name, rule_name=option)
    return weight, name
