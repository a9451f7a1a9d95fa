"""Citation rendering."""

from .formatter import FORMATTING_RULES, CitationFormatter

__all__ = ["FORMATTING_RULES", "CitationFormatter"]
