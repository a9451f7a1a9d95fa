"""
Citation Parser - extracts structured citations from free-form legal text.

The parser scans the text once with the rule table's combined matcher,
builds one ParsedCitation per non-overlapping match, and then runs the
reference resolver so short forms and Id. references point back at their
antecedents.

Substructure extracted after the main match:
  - Signal:         "See also Brown v. ..."        -> signal = See also
  - Parenthetical:  "... (1954) (per curiam)"       -> parenthetical = per curiam
  - Year:           "... § 1331 (2018)"             -> year = 2018
  - Pin cite:       ", 444" / "at 484" / "¶ 12"     -> pin_cite
"""
from __future__ import annotations

import logging
import re
from typing import Iterator

from ..models import CitationType, ComponentType, ParsedCitation
from .resolver import ReferenceResolver
from .rules import DEFAULT_RULE_TABLE, CitationRule, RuleTable, match_signal

logger = logging.getLogger(__name__)


# Component -> attribute on ParsedCitation (party names are a list)
COMPONENT_FIELDS: dict[ComponentType, str] = {
    ComponentType.PARTY_NAME: "party_names",
    ComponentType.VOLUME: "volume",
    ComponentType.REPORTER: "reporter",
    ComponentType.PAGE: "page",
    ComponentType.COURT: "court",
    ComponentType.YEAR: "year",
    ComponentType.PIN_CITE: "pin_cite",
    ComponentType.PARENTHETICAL: "parenthetical",
    ComponentType.SIGNAL: "signal",
    ComponentType.TITLE: "title",
    ComponentType.CODE: "code",
    ComponentType.SECTION: "section",
    ComponentType.RULE_NUMBER: "rule_number",
    ComponentType.AUTHOR: "author",
    ComponentType.PUBLISHER: "publisher",
    ComponentType.EDITION: "edition",
}


class CitationParser:
    """
    Extracts citations from text.

    Usage:
        parser = CitationParser()
        citations = parser.parse("See Brown v. Board of Education, 347 U.S. 483 (1954).")
        for cite in citations:
            print(f"{cite.citation_type.value}: {cite.full_citation}")
    """

    # Trailing "(...)" group set off by whitespace; "12(b)(6)" is a subdivision
    TRAILING_PARENTHETICAL = re.compile(r"(?:^|\s)\(([^()]+)\)\s*$")

    # Pin cite shapes, tried in order against the text minus trailing parentheticals
    PIN_CITE_SUFFIXES = (
        re.compile(r",\s*(\d+(?:[-–]\d+)?)\s*$"),  # ", 444" or ", 444-45"
        re.compile(r"\s+at\s+(\d+(?:[-–]\d+)?)\s*$"),  # " at 484"
        re.compile(r"\s*¶\s*(\d+(?:[-–]\d+)?)\s*$"),  # " ¶ 12"
    )

    def __init__(self, rule_table: RuleTable | None = None, resolver: ReferenceResolver | None = None):
        self.rule_table = rule_table or DEFAULT_RULE_TABLE
        self.resolver = resolver or ReferenceResolver()

    def parse(self, text: str, resolve: bool = True) -> list[ParsedCitation]:
        """
        Extract all citations from text, ordered by position.

        Non-string or empty input yields an empty list. With resolve=True
        (the default) short forms and Id. references are resolved in place.
        """
        if not isinstance(text, str) or not text:
            return []

        citations = list(self._scan(text))
        citations.sort(key=lambda c: c.start_index or 0)
        logger.debug(f"Matched {len(citations)} citations in {len(text)} characters")

        if resolve:
            self.resolver.resolve(citations)
        return citations

    def parse_single(self, citation_text: str) -> ParsedCitation | None:
        """Parse a string that should be exactly one citation."""
        if not isinstance(citation_text, str):
            return None
        trimmed = citation_text.strip()
        match = self.rule_table.matcher.fullmatch(trimmed)
        if not match:
            return None
        return self._build(match)

    # =========================================================================
    # Internal Parsing Methods
    # =========================================================================

    def _scan(self, text: str) -> Iterator[ParsedCitation]:
        for match in self.rule_table.matcher.finditer(text):
            citation = self._build(match)
            citation.start_index = match.start()
            citation.end_index = match.end()
            yield citation

    def _build(self, match: re.Match[str]) -> ParsedCitation:
        rule, base = self.rule_table.owner(match)
        citation = ParsedCitation(
            citation_type=rule.citation_type,
            full_citation=match.group(0),
            jurisdiction=rule.jurisdiction,
        )

        self._extract_components(citation, rule, match, base)
        self._finish_components(citation)

        self._extract_signal(citation)
        self._extract_parenthetical(citation)
        self._extract_pin_cite(citation)
        return citation

    def _extract_components(
        self, citation: ParsedCitation, rule: CitationRule, match: re.Match[str], base: int
    ) -> None:
        for component in rule.components:
            value = match.group(base + component.position)
            value = value.strip() if value else None

            if value and component.normalize:
                value = component.normalize(value)
            if value and component.validate and not component.validate(value):
                logger.debug(f"Rule {rule.name}: rejected {component.component.value} {value!r}")
                value = None

            if value:
                self._set_component(citation, component.component, value)
            elif component.required:
                citation.missing_components.append(component.component)

    def _set_component(self, citation: ParsedCitation, component: ComponentType, value: str) -> None:
        if component == ComponentType.PARTY_NAME:
            citation.party_names.append(value)
        elif component == ComponentType.REPORTER:
            citation.reporter = self.rule_table.normalize_reporter(value)
        elif component == ComponentType.COURT:
            citation.court = " ".join(value.split())
        else:
            setattr(citation, COMPONENT_FIELDS[component], value)

    def _finish_components(self, citation: ParsedCitation) -> None:
        """Derive the fields grammars don't capture directly."""
        if citation.party_names and not citation.title:
            citation.title = citation.case_name or citation.first_party

        if citation.citation_type == CitationType.CASE and citation.reporter:
            info = self.rule_table.reporter_info(citation.reporter)
            if info:
                citation.jurisdiction = info.jurisdiction

    def _extract_signal(self, citation: ParsedCitation) -> None:
        """Record a leading signal; the text itself keeps it."""
        found = match_signal(citation.full_citation)
        if found:
            citation.signal = found[0]

    def _extract_parenthetical(self, citation: ParsedCitation) -> None:
        """
        Split the trailing (...) group.

        Four digits are a year. A group ending in the citation's own year is
        the date parenthetical, "(3d Cir. 1999)" or "(West 2018)", and is
        already captured. Anything else is an explanatory parenthetical.
        """
        match = self.TRAILING_PARENTHETICAL.search(citation.full_citation)
        if not match:
            return
        content = match.group(1).strip()

        if re.fullmatch(r"\d{4}", content):
            citation.year = citation.year or content
        elif citation.year and content.endswith(citation.year):
            return
        else:
            citation.parenthetical = content

    def _extract_pin_cite(self, citation: ParsedCitation) -> None:
        text = citation.full_citation
        while True:
            stripped = self.TRAILING_PARENTHETICAL.sub("", text).rstrip()
            if stripped == text:
                break
            text = stripped

        for pattern in self.PIN_CITE_SUFFIXES:
            match = pattern.search(text)
            if match:
                citation.pin_cite = match.group(1).replace("–", "-")
                break


# =============================================================================
# Convenience Functions
# =============================================================================


def extract_citations(text: str) -> list[ParsedCitation]:
    """Extract all citations from text. Convenience wrapper around CitationParser."""
    return CitationParser().parse(text)
