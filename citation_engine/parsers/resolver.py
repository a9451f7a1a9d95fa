"""
Reference Resolver - points short forms and Id. references at their antecedents.

A single forward pass over the parser's output, in document order. Records
that are neither Id. references nor short forms are collected as they are
seen; each reference looks backward through that collection only, so a
short form that appears before its full citation stays unresolved.
"""
from __future__ import annotations

import logging
import re

from ..models import CitationType, ParsedCitation
from .rules import strip_signal

logger = logging.getLogger(__name__)


# Texts shorter than this can be short forms
SHORT_FORM_MAX_LENGTH = 50

ID_TEXT = re.compile(r"^id\.(?:\s+at\s+\d+(?:[-–]\d+)?)?$", re.IGNORECASE)

# Fields copied from the antecedent when a reference resolves
BACKFILL_FIELDS = (
    "title",
    "party_names",
    "volume",
    "reporter",
    "page",
    "year",
    "court",
    "jurisdiction",
    "code",
    "section",
    "rule_number",
    "author",
    "publisher",
    "edition",
)


def is_id_citation(citation: ParsedCitation) -> bool:
    """'Id.' or 'Id. at 485' as written, ignoring a leading signal."""
    written = citation.short_form or citation.full_citation
    return bool(ID_TEXT.match(strip_signal(written.strip())))


def looks_like_short_form(text: str) -> bool:
    """Short, no 'v.', no section symbol, and at least one digit."""
    return (
        len(text) < SHORT_FORM_MAX_LENGTH
        and " v. " not in text
        and "§" not in text
        and any(ch.isdigit() for ch in text)
    )


def is_short_form(citation: ParsedCitation) -> bool:
    """A case reference without a first page that passes the text heuristic."""
    return (
        citation.citation_type == CitationType.CASE
        and not citation.page
        and looks_like_short_form(citation.full_citation)
    )


class ReferenceResolver:
    """
    Resolves references over an ordered citation list, in place.

    Usage:
        resolver = ReferenceResolver()
        resolver.resolve(citations)
    """

    def resolve(self, citations: list[ParsedCitation]) -> list[ParsedCitation]:
        antecedents: list[ParsedCitation] = []
        resolved = 0

        for citation in citations:
            if is_id_citation(citation):
                if antecedents:
                    self._adopt(citation, antecedents[-1])
                    resolved += 1
            elif is_short_form(citation):
                antecedent = self._find_case(citation, antecedents)
                if antecedent:
                    self._adopt(citation, antecedent)
                    resolved += 1
            else:
                antecedents.append(citation)

        if resolved:
            logger.debug(f"Resolved {resolved} of {len(citations)} citations to antecedents")
        return citations

    def _find_case(self, short: ParsedCitation, antecedents: list[ParsedCitation]) -> ParsedCitation | None:
        """Nearest earlier case whose first party appears in the short form."""
        for candidate in reversed(antecedents):
            if candidate.citation_type != CitationType.CASE:
                continue
            first_party = candidate.first_party
            if first_party and first_party in short.full_citation:
                return candidate
        return None

    def _adopt(self, reference: ParsedCitation, antecedent: ParsedCitation) -> None:
        reference.short_form = reference.full_citation
        reference.citation_type = antecedent.citation_type
        reference.full_citation = antecedent.full_citation
        reference.title = antecedent.title

        for name in BACKFILL_FIELDS:
            ours = getattr(reference, name)
            theirs = getattr(antecedent, name)
            if name == "party_names":
                if len(ours) < len(theirs):
                    reference.party_names = list(theirs)
            elif not ours and theirs:
                setattr(reference, name, theirs)
