"""
Rule Compiler - compiles rule strings into grammar nodes.

The rule compiler:
1. Parses rule text by fixed operator priority
2. Compiles unknown references from their own text
3. Turns leftover references into literals when the policy allows
4. Installs the result, rewiring earlier definitions
"""

from .compiler import RuleCompiler, CompilationResult, compile_rules
from .parser import ParsedRule, RuleKind, parse_rule, parse_number
from .literals import LiteralPolicy, string_literal, no_literal

__all__ = [
    "RuleCompiler",
    "CompilationResult",
    "compile_rules",
    "ParsedRule",
    "RuleKind",
    "parse_rule",
    "parse_number",
    "LiteralPolicy",
    "string_literal",
    "no_literal",
]
