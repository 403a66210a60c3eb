"""
Literal policies.

When a bare reference names no rule, the compiler asks a literal policy
whether the reference text itself can become a terminal value. The policy
returns (True, value) to accept, (False, None) to decline.
"""

from __future__ import annotations
from typing import Any, Callable

LiteralPolicy = Callable[[str], tuple[bool, Any]]


def string_literal(text: str) -> tuple[bool, str]:
    """Accept any reference text as a string terminal."""
    return True, text


def no_literal(text: str) -> tuple[bool, None]:
    """Decline every reference. Unknown references become errors."""
    return False, None
