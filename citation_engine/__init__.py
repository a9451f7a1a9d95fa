"""
Legal citation engine.

Extracts citations from legal text, resolves short forms and Id.
references, validates them against citation rules, and renders them in
Bluebook or ALWD style, including a table of authorities.
"""

from .config import Settings
from .engine import CitationEngine, InputTooLargeError
from .models import (
    CitationContext,
    CitationStyle,
    CitationType,
    FormatOptions,
    ParsedCitation,
    TableOfAuthorities,
    ValidationResult,
)
from .parsers.rules import RuleTableError

__all__ = [
    "CitationContext",
    "CitationEngine",
    "CitationStyle",
    "CitationType",
    "FormatOptions",
    "InputTooLargeError",
    "ParsedCitation",
    "RuleTableError",
    "Settings",
    "TableOfAuthorities",
    "ValidationResult",
]
