"""
Core data models for the citation engine.

These Pydantic models define the records that flow through the engine:
1. ParsedCitation - created by the parser, enriched by the resolver,
   annotated by the validator, read by the formatter
2. ValidationResult - what the validator reports for a single citation
3. FormattingRule - one template per (style, type) pair
4. TableOfAuthorities - deduplicated, sorted buckets of citations
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class CitationType(str, Enum):
    """Kinds of authority the engine understands."""

    CASE = "case"
    STATUTE = "statute"
    RULE = "rule"
    CONSTITUTION = "constitution"
    REGULATION = "regulation"
    BOOK = "book"
    ARTICLE = "article"
    UNKNOWN = "unknown"  # Id. with nothing to point back to


class CitationStyle(str, Enum):
    """Citation manuals we can render."""

    BLUEBOOK = "Bluebook"
    ALWD = "ALWD"


class Signal(str, Enum):
    """Introductory signals, longest first so prefixes don't shadow."""

    SEE_GENERALLY = "See generally"
    SEE_ALSO = "See also"
    BUT_SEE = "But see"
    BUT_CF = "But cf."
    COMPARE = "Compare"
    ACCORD = "Accord"
    CONTRA = "Contra"
    SEE = "See"
    CF = "Cf."
    EG = "E.g."


class ComponentType(str, Enum):
    """Pieces a citation grammar can extract."""

    PARTY_NAME = "party_name"
    VOLUME = "volume"
    REPORTER = "reporter"
    PAGE = "page"
    COURT = "court"
    YEAR = "year"
    PIN_CITE = "pin_cite"
    PARENTHETICAL = "parenthetical"
    SIGNAL = "signal"
    TITLE = "title"
    CODE = "code"
    SECTION = "section"
    RULE_NUMBER = "rule_number"
    AUTHOR = "author"
    PUBLISHER = "publisher"
    EDITION = "edition"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ErrorCode(str, Enum):
    """Codes attached to validation issues."""

    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_REQUIRED_COMPONENT = "MISSING_REQUIRED_COMPONENT"
    INVALID_REPORTER = "INVALID_REPORTER"
    INVALID_COURT = "INVALID_COURT"
    INVALID_YEAR = "INVALID_YEAR"
    INVALID_PAGE = "INVALID_PAGE"
    INVALID_VOLUME = "INVALID_VOLUME"
    INVALID_SECTION_FORMAT = "INVALID_SECTION_FORMAT"
    MISSING_PARALLEL_CITATION = "MISSING_PARALLEL_CITATION"
    PIN_CITE_FORMATTING = "PIN_CITE_FORMATTING"
    SHORT_FORM_NOT_ALLOWED = "SHORT_FORM_NOT_ALLOWED"


class CourtLevel(str, Enum):
    TRIAL = "trial"
    APPELLATE = "appellate"
    SUPREME = "supreme"


# =============================================================================
# Lookup Table Entries
# =============================================================================


class ReporterInfo(BaseModel, frozen=True):
    """A known reporter series."""

    name: str
    abbreviation: str
    jurisdiction: str  # "federal", "pennsylvania", "regional"
    is_official: bool
    requires_court: bool = False  # Reporter alone doesn't identify the court


class CourtInfo(BaseModel, frozen=True):
    """A known court abbreviation."""

    name: str
    abbreviation: str
    jurisdiction: str
    level: CourtLevel


# =============================================================================
# Citations
# =============================================================================


class ParsedCitation(BaseModel):
    """
    A citation extracted from text.

    Attributes:
        citation_type: Which grammar produced the record (always set)
        full_citation: The citation as written, signal included
        short_form: Original text of a resolved short form or Id. reference
        pin_cite: Pinpoint page or paragraph
        party_names: Plaintiff/defendant for cases
        missing_components: Required components the grammar could not capture
        is_valid: Meaningful only after validation (defaults to True)
        start_index: Offset of the first character in the source text
        end_index: Offset one past the last character
    """

    citation_type: CitationType
    full_citation: str
    short_form: str | None = None
    pin_cite: str | None = None
    parenthetical: str | None = None
    signal: Signal | None = None

    # Shared components
    title: str | None = None
    reporter: str | None = None
    volume: str | None = None
    page: str | None = None
    year: str | None = None
    court: str | None = None
    jurisdiction: str | None = None

    # Case-specific
    party_names: list[str] = Field(default_factory=list)

    # Statute / rule-specific
    code: str | None = None
    section: str | None = None
    rule_number: str | None = None

    # Book / article-specific
    author: str | None = None
    publisher: str | None = None
    edition: str | None = None

    # Validation
    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    missing_components: list[ComponentType] = Field(default_factory=list)

    # Position in text
    start_index: int | None = None
    end_index: int | None = None

    @property
    def first_party(self) -> str | None:
        return self.party_names[0] if self.party_names else None

    @property
    def case_name(self) -> str | None:
        """'A v. B' when both parties are known."""
        if len(self.party_names) >= 2:
            return f"{self.party_names[0]} v. {self.party_names[1]}"
        return None

    def identity_key(self) -> tuple:
        """Fields that make two citations 'the same authority'."""
        if self.citation_type == CitationType.CASE:
            return (self.citation_type, self.volume, self.reporter, self.page)
        if self.citation_type == CitationType.STATUTE:
            return (self.citation_type, self.code, self.section)
        if self.citation_type == CitationType.RULE:
            return (self.citation_type, self.code, self.rule_number)
        return (self.citation_type, self.full_citation)

    def __str__(self) -> str:
        return self.full_citation


class CitationContext(BaseModel):
    """Optional document-level context handed to the validator."""

    require_parallel_citations: bool = False
    allow_short_forms: bool = True


# =============================================================================
# Validation
# =============================================================================


class ValidationIssue(BaseModel):
    """One problem found with a citation."""

    code: ErrorCode
    message: str
    component: ComponentType | None = None
    severity: Severity = Severity.ERROR
    suggestion: str | None = None


class ValidationResult(BaseModel):
    """
    Outcome of validating one citation.

    is_valid is True iff no entry in errors has error severity; warnings
    never affect it.
    """

    is_valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


# =============================================================================
# Formatting
# =============================================================================


class FormattingRule(BaseModel, frozen=True):
    """Template for rendering one citation type in one style."""

    style: CitationStyle
    citation_type: CitationType
    template: str
    short_form_template: str | None = None
    italicize: tuple[ComponentType, ...] = ()


class FormatOptions(BaseModel):
    short_form: bool = False
    italicize: bool = True


# =============================================================================
# Table of Authorities
# =============================================================================


class TableOfAuthorities(BaseModel):
    """Citations grouped by category; no two entries in a bucket share an identity key."""

    cases: list[ParsedCitation] = Field(default_factory=list)
    statutes: list[ParsedCitation] = Field(default_factory=list)
    rules: list[ParsedCitation] = Field(default_factory=list)
    constitutions: list[ParsedCitation] = Field(default_factory=list)
    regulations: list[ParsedCitation] = Field(default_factory=list)
    books: list[ParsedCitation] = Field(default_factory=list)
    articles: list[ParsedCitation] = Field(default_factory=list)
    other: list[ParsedCitation] = Field(default_factory=list)

    def buckets(self) -> dict[str, list[ParsedCitation]]:
        """Category name -> entries, in display order."""
        return {
            "cases": self.cases,
            "statutes": self.statutes,
            "rules": self.rules,
            "constitutions": self.constitutions,
            "regulations": self.regulations,
            "books": self.books,
            "articles": self.articles,
            "other": self.other,
        }

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.buckets().values())


class CitationRecord(BaseModel):
    """Flat row used by the CSV/JSON exporters."""

    category: str | None = None
    type: str
    full_citation: str
    title: str = ""
    author: str = ""
    year: str = ""
    is_valid: bool


class ProcessedDocument(BaseModel):
    """Everything process_document hands back."""

    processed_text: str
    citations: list[ParsedCitation]
    table_of_authorities: TableOfAuthorities
    validation_results: list[ValidationResult]
