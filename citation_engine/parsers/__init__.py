"""Citation grammars, parsing, and reference resolution."""

from .citations import CitationParser, extract_citations
from .resolver import ReferenceResolver
from .rules import CitationRule, ComponentRule, RuleTable, RuleTableError

__all__ = [
    "CitationParser",
    "CitationRule",
    "ComponentRule",
    "ReferenceResolver",
    "RuleTable",
    "RuleTableError",
    "extract_citations",
]
