"""
Citation Validator - checks parsed citations against formal citation rules.

Each citation type has a fixed checklist of required components. Missing
components and malformed numbers are errors; reporter and court
abbreviations missing from the lookup tables are only warnings, since
unknown-but-correct abbreviations are common.

Nothing here raises for a bad citation. Problems come back as data:

    validator = CitationValidator()
    result = validator.validate(citation)
    if not result.is_valid:
        for issue in result.errors:
            print(issue.code.value, issue.message)
"""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable

from ..models import (
    CitationContext,
    CitationType,
    ComponentType,
    ErrorCode,
    ParsedCitation,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from ..parsers.citations import COMPONENT_FIELDS
from ..parsers.resolver import is_id_citation, is_short_form
from ..parsers.rules import DEFAULT_RULE_TABLE, RuleTable

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

EARLIEST_YEAR = 1600
# No reported American decisions predate the federal courts
EARLIEST_CASE_YEAR = 1789

PIN_CITE = re.compile(r"^\d+(?:-\d+)?$")
SECTION = re.compile(r"^[0-9A-Za-z.()\-]+$")

# Hint per error code, in the order they are reported
SUGGESTIONS: dict[ErrorCode, str] = {
    ErrorCode.MISSING_REQUIRED_COMPONENT: "Ensure all required components are included for this citation type",
    ErrorCode.INVALID_REPORTER: "Check reporter abbreviation against the standard reporter table",
    ErrorCode.INVALID_COURT: "Check court abbreviation against the standard court table",
    ErrorCode.INVALID_YEAR: "Use a four-digit year no later than next year",
    ErrorCode.INVALID_PAGE: "Page numbers should contain only digits",
    ErrorCode.INVALID_VOLUME: "Volume numbers should contain only digits",
    ErrorCode.PIN_CITE_FORMATTING: "Write pin cites as a page or a page range (e.g., 123 or 123-125)",
    ErrorCode.MISSING_PARALLEL_CITATION: "Add a parallel citation to the official reporter",
    ErrorCode.SHORT_FORM_NOT_ALLOWED: "Cite the authority in full where short forms are not allowed",
}


def _missing(component: ComponentType, message: str, suggestion: str | None = None) -> ValidationIssue:
    return ValidationIssue(
        code=ErrorCode.MISSING_REQUIRED_COMPONENT,
        message=message,
        component=component,
        severity=Severity.ERROR,
        suggestion=suggestion,
    )


def _present(citation: ParsedCitation, component: ComponentType) -> bool:
    return bool(getattr(citation, COMPONENT_FIELDS[component]))


class CitationValidator:
    """
    Validates citations one at a time or as a document.

    Usage:
        validator = CitationValidator()
        results = validator.validate_multiple(citations)
    """

    def __init__(self, rule_table: RuleTable | None = None):
        self.rule_table = rule_table or DEFAULT_RULE_TABLE
        self._checks: dict[CitationType, Callable[..., None]] = {
            CitationType.CASE: self._validate_case,
            CitationType.STATUTE: self._validate_statute,
            CitationType.REGULATION: self._validate_statute,
            CitationType.RULE: self._validate_rule,
            CitationType.CONSTITUTION: self._validate_constitution,
            CitationType.BOOK: self._validate_book,
            CitationType.ARTICLE: self._validate_article,
            CitationType.UNKNOWN: self._validate_unknown,
        }
        unchecked = set(CitationType) - set(self._checks)
        if unchecked:
            raise RuntimeError(f"No validation for citation types: {sorted(t.value for t in unchecked)}")

    def validate(self, citation: ParsedCitation, context: CitationContext | None = None) -> ValidationResult:
        """Validate a single citation."""
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        self._validate_basic_format(citation, errors)
        self._checks[citation.citation_type](citation, errors, warnings, context)
        if context and not context.allow_short_forms:
            self._validate_full_form(citation, warnings)
        self._validate_parse_notes(citation, errors)

        codes = [issue.code for issue in errors + warnings]
        suggestions = [text for code, text in SUGGESTIONS.items() if code in codes]

        return ValidationResult(
            is_valid=not any(issue.severity == Severity.ERROR for issue in errors),
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
        )

    def validate_multiple(
        self, citations: list[ParsedCitation], context: CitationContext | None = None
    ) -> list[ValidationResult]:
        """Validate every citation; results line up with the input list."""
        results = [self.validate(citation, context) for citation in citations]
        invalid = sum(1 for r in results if not r.is_valid)
        if invalid:
            logger.debug(f"{invalid} of {len(results)} citations failed validation")
        return results

    @staticmethod
    def annotate(citation: ParsedCitation, result: ValidationResult) -> ParsedCitation:
        """Copy a result onto the citation it describes."""
        citation.is_valid = result.is_valid
        citation.errors = [issue.message for issue in result.errors]
        citation.suggestions = list(result.suggestions)
        return citation

    # =========================================================================
    # Per-Type Checklists
    # =========================================================================

    def _validate_basic_format(self, citation: ParsedCitation, errors: list[ValidationIssue]) -> None:
        if not citation.full_citation or not citation.full_citation.strip():
            errors.append(ValidationIssue(
                code=ErrorCode.INVALID_FORMAT,
                message="Citation cannot be empty",
            ))

    def _validate_case(self, citation, errors, warnings, context) -> None:
        if len(citation.party_names) < 2:
            errors.append(_missing(
                ComponentType.PARTY_NAME,
                "Case citation must include party names",
                'Include both party names separated by "v."',
            ))

        if not citation.volume:
            errors.append(_missing(ComponentType.VOLUME, "Case citation must include volume number"))
        else:
            self._validate_volume(citation.volume, errors)

        if not citation.reporter:
            errors.append(_missing(ComponentType.REPORTER, "Case citation must include reporter"))
        else:
            self._validate_reporter(citation.reporter, warnings)

        if not citation.page:
            errors.append(_missing(ComponentType.PAGE, "Case citation must include page number"))
        else:
            self._validate_page(citation.page, errors)

        if not citation.year:
            errors.append(_missing(ComponentType.YEAR, "Case citation must include year"))
        else:
            self._validate_year(citation.year, errors, earliest=EARLIEST_CASE_YEAR)

        if not citation.court:
            if self._requires_court(citation.reporter):
                errors.append(_missing(ComponentType.COURT, "Court designation required for this reporter"))
        else:
            self._validate_court(citation.court, warnings)

        if citation.pin_cite:
            self._validate_pin_cite(citation.pin_cite, errors)

        if context and context.require_parallel_citations:
            self._validate_parallel_citation(citation, warnings)

    def _validate_statute(self, citation, errors, warnings, context) -> None:
        if not citation.code and not citation.title:
            errors.append(_missing(ComponentType.CODE, "Statute citation must include code or title"))

        if not citation.section:
            errors.append(_missing(ComponentType.SECTION, "Statute citation must include section number"))
        elif not SECTION.match(citation.section):
            warnings.append(ValidationIssue(
                code=ErrorCode.INVALID_SECTION_FORMAT,
                message="Section number format may be incorrect",
                component=ComponentType.SECTION,
                severity=Severity.WARNING,
                suggestion="Use standard section numbering (e.g., 1983, 12.1, 101(a))",
            ))

        if citation.year:
            self._validate_year(citation.year, errors)

    def _validate_rule(self, citation, errors, warnings, context) -> None:
        if not citation.code:
            errors.append(_missing(ComponentType.CODE, "Rule citation must include rule code"))
        if not citation.rule_number:
            errors.append(_missing(ComponentType.RULE_NUMBER, "Rule citation must include rule number"))

    def _validate_constitution(self, citation, errors, warnings, context) -> None:
        if not citation.title:
            errors.append(_missing(ComponentType.TITLE, "Constitution citation must include title"))
        if not citation.section:
            errors.append(_missing(ComponentType.SECTION, "Constitution citation must include article or amendment"))

    def _validate_book(self, citation, errors, warnings, context) -> None:
        if not citation.author:
            errors.append(_missing(ComponentType.AUTHOR, "Book citation must include author"))
        if not citation.title:
            errors.append(_missing(ComponentType.TITLE, "Book citation must include title"))
        if citation.year:
            self._validate_year(citation.year, errors)

    def _validate_article(self, citation, errors, warnings, context) -> None:
        if not citation.author:
            errors.append(_missing(ComponentType.AUTHOR, "Article citation must include author"))
        if not citation.title:
            errors.append(_missing(ComponentType.TITLE, "Article citation must include title"))

        if not citation.volume or not citation.reporter or not citation.page:
            errors.append(ValidationIssue(
                code=ErrorCode.MISSING_REQUIRED_COMPONENT,
                message="Article citation must include volume, journal, and page",
            ))
        else:
            self._validate_page(citation.page, errors)

        if citation.year:
            self._validate_year(citation.year, errors)
        if citation.pin_cite:
            self._validate_pin_cite(citation.pin_cite, errors)

    def _validate_unknown(self, citation, errors, warnings, context) -> None:
        errors.append(ValidationIssue(
            code=ErrorCode.INVALID_FORMAT,
            message="Citation type could not be determined",
            suggestion="Id. must follow the citation it refers to",
        ))

    def _validate_parse_notes(self, citation: ParsedCitation, errors: list[ValidationIssue]) -> None:
        """Required components the grammar missed and no checklist entry covered."""
        flagged = {issue.component for issue in errors if issue.code == ErrorCode.MISSING_REQUIRED_COMPONENT}
        for component in dict.fromkeys(citation.missing_components):
            if component in flagged or _present(citation, component):
                continue
            errors.append(_missing(component, f"Missing required component: {component.value}"))

    # =========================================================================
    # Component Checks
    # =========================================================================

    def _validate_reporter(self, reporter: str, warnings: list[ValidationIssue]) -> None:
        if not self.rule_table.reporter_info(reporter):
            warnings.append(ValidationIssue(
                code=ErrorCode.INVALID_REPORTER,
                message=f"Unknown reporter: {reporter}",
                component=ComponentType.REPORTER,
                severity=Severity.WARNING,
                suggestion="Verify reporter abbreviation is correct",
            ))

    def _validate_court(self, court: str, warnings: list[ValidationIssue]) -> None:
        if not self.rule_table.court_info(court):
            warnings.append(ValidationIssue(
                code=ErrorCode.INVALID_COURT,
                message=f"Unknown court: {court}",
                component=ComponentType.COURT,
                severity=Severity.WARNING,
                suggestion="Verify court abbreviation is correct",
            ))

    def _validate_year(self, year: str, errors: list[ValidationIssue], earliest: int = EARLIEST_YEAR) -> None:
        latest = date.today().year + 1
        try:
            value = int(year)
        except ValueError:
            value = None

        if value is None or not earliest <= value <= latest:
            errors.append(ValidationIssue(
                code=ErrorCode.INVALID_YEAR,
                message=f"Invalid year: {year}",
                component=ComponentType.YEAR,
                suggestion=f"Year should be between {earliest} and {latest}",
            ))

    def _validate_page(self, page: str, errors: list[ValidationIssue]) -> None:
        if not page.isdigit():
            errors.append(ValidationIssue(
                code=ErrorCode.INVALID_PAGE,
                message=f"Invalid page number: {page}",
                component=ComponentType.PAGE,
                suggestion="Page number should contain only digits",
            ))

    def _validate_volume(self, volume: str, errors: list[ValidationIssue]) -> None:
        if not volume.isdigit():
            errors.append(ValidationIssue(
                code=ErrorCode.INVALID_VOLUME,
                message=f"Invalid volume number: {volume}",
                component=ComponentType.VOLUME,
            ))

    def _validate_pin_cite(self, pin_cite: str, errors: list[ValidationIssue]) -> None:
        if not PIN_CITE.match(pin_cite):
            errors.append(ValidationIssue(
                code=ErrorCode.PIN_CITE_FORMATTING,
                message=f"Invalid pin cite format: {pin_cite}",
                component=ComponentType.PIN_CITE,
                suggestion="Pin cite should be a page number or range (e.g., 123 or 123-125)",
            ))

    def _validate_parallel_citation(self, citation: ParsedCitation, warnings: list[ValidationIssue]) -> None:
        info = self.rule_table.reporter_info(citation.reporter) if citation.reporter else None
        if info and not info.is_official:
            warnings.append(ValidationIssue(
                code=ErrorCode.MISSING_PARALLEL_CITATION,
                message="Consider including parallel citation to official reporter",
                component=ComponentType.REPORTER,
                severity=Severity.WARNING,
                suggestion="Include citation to official reporter when available",
            ))

    def _validate_full_form(self, citation: ParsedCitation, warnings: list[ValidationIssue]) -> None:
        if citation.short_form or is_id_citation(citation) or is_short_form(citation):
            warnings.append(ValidationIssue(
                code=ErrorCode.SHORT_FORM_NOT_ALLOWED,
                message="Short-form citation used where full citations are required",
                severity=Severity.WARNING,
                suggestion="Repeat the full citation",
            ))

    def _requires_court(self, reporter: str | None) -> bool:
        if not reporter:
            return False
        info = self.rule_table.reporter_info(reporter)
        return bool(info and info.requires_court)
