"""Citation validation."""

from .validator import CitationValidator

__all__ = ["CitationValidator"]
