"""
Citation Engine - one entry point for parsing, validation, formatting, and export.

Usage:
    engine = CitationEngine()
    result = engine.process_document(text)
    print(result.processed_text)
    for cite in result.table_of_authorities.cases:
        print(cite.full_citation)

The engine holds no per-document state; one instance can serve any number
of documents, from any number of threads.
"""
from __future__ import annotations

import logging

from .analysis.validator import CitationValidator
from .authorities.export import export_citations, export_table_of_authorities
from .authorities.table import build_table_of_authorities
from .config import Settings
from .formatting.formatter import CitationFormatter
from .models import (
    CitationContext,
    CitationStyle,
    FormatOptions,
    ParsedCitation,
    ProcessedDocument,
    TableOfAuthorities,
    ValidationResult,
)
from .parsers.citations import CitationParser
from .parsers.resolver import is_id_citation
from .parsers.rules import DEFAULT_RULE_TABLE, RuleTable, strip_signal

logger = logging.getLogger(__name__)


class InputTooLargeError(ValueError):
    """Input is longer than the configured CITATION_MAX_INPUT_CHARS."""


class CitationEngine:
    """Facade over the parser, validator, formatter, and table of authorities."""

    def __init__(self, settings: Settings | None = None, rule_table: RuleTable | None = None):
        self.settings = settings or Settings.from_env()
        rule_table = rule_table or DEFAULT_RULE_TABLE
        self.parser = CitationParser(rule_table)
        self.validator = CitationValidator(rule_table)
        self.formatter = CitationFormatter()

    @property
    def style(self) -> CitationStyle:
        return self.settings.style

    # =========================================================================
    # Parsing and Validation
    # =========================================================================

    def parse(self, text: str) -> list[ParsedCitation]:
        self._check_size(text)
        return self.parser.parse(text)

    def parse_and_validate(self, text: str, context: CitationContext | None = None) -> list[ParsedCitation]:
        """Parse, then annotate every citation with its validation outcome."""
        citations = self.parse(text)
        for citation, result in zip(citations, self.validator.validate_multiple(citations, context)):
            self.validator.annotate(citation, result)
        return citations

    def validate(self, citation: ParsedCitation, context: CitationContext | None = None) -> ValidationResult:
        return self.validator.validate(citation, context)

    def validate_multiple(
        self, citations: list[ParsedCitation], context: CitationContext | None = None
    ) -> list[ValidationResult]:
        return self.validator.validate_multiple(citations, context)

    # =========================================================================
    # Formatting
    # =========================================================================

    def format(
        self,
        citation: ParsedCitation,
        style: CitationStyle | None = None,
        options: FormatOptions | None = None,
    ) -> str:
        return self.formatter.format(citation, style or self.style, options)

    def generate_short_form(
        self,
        citation: ParsedCitation,
        prior_citations: list[ParsedCitation],
        style: CitationStyle | None = None,
    ) -> str:
        return self.formatter.generate_short_form(citation, prior_citations, style or self.style)

    def generate_table_of_authorities(
        self, citations: list[ParsedCitation], style: CitationStyle | None = None
    ) -> TableOfAuthorities:
        return build_table_of_authorities(citations, style or self.style, self.formatter)

    # =========================================================================
    # Documents
    # =========================================================================

    def process_document(
        self,
        text: str,
        style: CitationStyle | None = None,
        context: CitationContext | None = None,
        generate_short_forms: bool = True,
        validate_citations: bool = True,
    ) -> ProcessedDocument:
        """
        Parse a document and rewrite repeat citations as short forms.

        Replacement offsets all come from the original text, so earlier
        rewrites never shift later ones. Id. references stay as written.
        """
        style = style or self.style
        citations = self.parse(text)

        validation_results: list[ValidationResult] = []
        if validate_citations:
            validation_results = self.validator.validate_multiple(citations, context)
            for citation, result in zip(citations, validation_results):
                self.validator.annotate(citation, result)

        processed_text = text
        if generate_short_forms:
            processed_text = self._rewrite_repeats(text, citations, style)

        return ProcessedDocument(
            processed_text=processed_text,
            citations=citations,
            table_of_authorities=self.generate_table_of_authorities(citations, style),
            validation_results=validation_results,
        )

    def _rewrite_repeats(self, text: str, citations: list[ParsedCitation], style: CitationStyle) -> str:
        pieces: list[str] = []
        cursor = 0
        seen: set[tuple] = set()
        rewritten = 0

        for citation in citations:
            key = citation.identity_key()
            repeat = key in seen
            seen.add(key)

            if not repeat or is_id_citation(citation):
                continue
            if citation.start_index is None or citation.end_index is None:
                continue

            # Keep the signal as written; replace only the citation proper
            written = text[citation.start_index:citation.end_index]
            start = citation.end_index - len(strip_signal(written))

            short_form = self.formatter.format(citation, style, FormatOptions(short_form=True, italicize=False))
            pieces.append(text[cursor:start])
            pieces.append(short_form)
            cursor = citation.end_index
            rewritten += 1

        pieces.append(text[cursor:])
        if rewritten:
            logger.debug(f"Rewrote {rewritten} repeat citations as short forms")
        return "".join(pieces)

    # =========================================================================
    # Export
    # =========================================================================

    def export_citations(self, citations: list[ParsedCitation], fmt: str) -> str:
        return export_citations(citations, fmt)

    def export_table_of_authorities(self, toa: TableOfAuthorities, fmt: str) -> str:
        return export_table_of_authorities(toa, fmt)

    def _check_size(self, text: str) -> None:
        limit = self.settings.max_input_chars
        if limit is not None and isinstance(text, str) and len(text) > limit:
            logger.warning(f"Refusing {len(text)} characters of input (limit {limit})")
            raise InputTooLargeError(f"Input is {len(text)} characters; the limit is {limit}")
