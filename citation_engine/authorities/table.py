"""
Table of Authorities - groups a document's citations by category.

Each citation lands in exactly one bucket by type. Within a bucket, an
authority is listed once (first appearance wins) and entries are sorted by
title, falling back to the first party name and then the citation text.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from ..formatting.formatter import CitationFormatter
from ..models import CitationStyle, CitationType, ParsedCitation, TableOfAuthorities

logger = logging.getLogger(__name__)


BUCKETS: Mapping[CitationType, str] = MappingProxyType({
    CitationType.CASE: "cases",
    CitationType.STATUTE: "statutes",
    CitationType.RULE: "rules",
    CitationType.CONSTITUTION: "constitutions",
    CitationType.REGULATION: "regulations",
    CitationType.BOOK: "books",
    CitationType.ARTICLE: "articles",
    CitationType.UNKNOWN: "other",
})


def sort_key(citation: ParsedCitation) -> str:
    return citation.title or citation.first_party or citation.full_citation


def build_table_of_authorities(
    citations: list[ParsedCitation],
    style: CitationStyle = CitationStyle.BLUEBOOK,
    formatter: CitationFormatter | None = None,
) -> TableOfAuthorities:
    """
    Bucket, dedupe, and sort citations.

    Entries are copies whose full_citation is the TOA rendering; the input
    records are left untouched.
    """
    formatter = formatter or CitationFormatter()
    toa = TableOfAuthorities()
    buckets = toa.buckets()
    seen: dict[str, set[tuple]] = {name: set() for name in buckets}

    for citation in citations:
        entry = citation.model_copy(update={"full_citation": formatter.format_for_toa(citation, style)}, deep=True)
        name = BUCKETS.get(entry.citation_type, "other")
        key = entry.identity_key()
        if key in seen[name]:
            continue
        seen[name].add(key)
        buckets[name].append(entry)

    for entries in buckets.values():
        entries.sort(key=sort_key)

    logger.debug(f"Table of authorities: {len(toa)} entries from {len(citations)} citations")
    return toa
