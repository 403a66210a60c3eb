"""
Grammar errors.

Every failure is deterministic for a given input and is raised straight to
the caller of the failing operation. Nothing is retried.
"""

from __future__ import annotations


class GrammarError(Exception):
    """Base class for all grammar errors."""


class RuleNotFound(GrammarError, KeyError):
    """Raised by generate when the requested rule name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Rule '{name}' is not registered")

    def __str__(self) -> str:
        # KeyError would quote the whole message
        return self.args[0]


class UnresolvedReference(GrammarError):
    """
    Raised during compilation when a referenced name is not a rule, does not
    parse as a composite rule, and cannot become a literal leaf.
    """

    def __init__(self, reference: str, rule_name: str | None = None):
        self.reference = reference
        self.rule_name = rule_name
        where = f" in rule '{rule_name}'" if rule_name is not None else ""
        super().__init__(f"Unresolved reference '{reference}'{where}")


class MalformedNumericLiteral(GrammarError, ValueError):
    """Raised when a weight or repeat token is not a usable number."""

    def __init__(self, token: str, what: str = "number"):
        self.token = token
        self.what = what
        super().__init__(f"Malformed {what} literal: '{token}'")


class GenerationError(GrammarError):
    """Raised when a node cannot produce output (e.g. all weights zero)."""
