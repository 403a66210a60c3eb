"""Grammar schema - node variants, graph validation and rule tables."""

from .nodes import (
    Node,
    NodeKind,
    LeafNode,
    SequenceNode,
    SelectNode,
    WeightedOption,
    RepetitionNode,
    FallbackNode,
    children,
    substitute_child,
)
from .validation import validate_grammar, ValidationResult, GrammarValidationError
from .definition import GrammarDefinition

__all__ = [
    "Node",
    "NodeKind",
    "LeafNode",
    "SequenceNode",
    "SelectNode",
    "WeightedOption",
    "RepetitionNode",
    "FallbackNode",
    "children",
    "substitute_child",
    "validate_grammar",
    "ValidationResult",
    "GrammarValidationError",
    "GrammarDefinition",
]
