"""
Citation export: JSON, CSV, and a BibTeX-like bibliography.

    export_citations(citations, "csv")
    export_table_of_authorities(toa, "json")

CSV rows carry Type, Full Citation, Title, Author, Year, Valid with every
cell quoted. Bibliography entries are keyed by a deterministic id built
from the title (or the citation text when there is no title).
"""
from __future__ import annotations

import csv
import io
import json
import re

from ..models import CitationRecord, CitationType, ParsedCitation, TableOfAuthorities

EXPORT_FORMATS = ("json", "csv", "bibtex-like")

CSV_HEADER = ["Type", "Full Citation", "Title", "Author", "Year", "Valid"]
TOA_CSV_HEADER = ["Category", *CSV_HEADER]

BIBTEX_ID_LENGTH = 20


def to_record(citation: ParsedCitation, category: str | None = None) -> CitationRecord:
    return CitationRecord(
        category=category,
        type=citation.citation_type.value,
        full_citation=citation.full_citation,
        title=citation.title or "",
        author=citation.author or "",
        year=citation.year or "",
        is_valid=citation.is_valid,
    )


def toa_records(toa: TableOfAuthorities) -> list[CitationRecord]:
    """One flat record per TOA entry, in bucket display order."""
    return [
        to_record(citation, category)
        for category, entries in toa.buckets().items()
        for citation in entries
    ]


def bibtex_id(citation: ParsedCitation) -> str:
    """'Brown v. Board of Education' -> 'brownvboardofeducati'"""
    source = citation.title or citation.full_citation
    return re.sub(r"[^a-z0-9]", "", source.lower())[:BIBTEX_ID_LENGTH]


def to_bibtex(citation: ParsedCitation) -> str:
    entry_id = bibtex_id(citation)

    if citation.citation_type == CitationType.CASE:
        entry_type = "misc"
        fields = [
            ("title", citation.title or ""),
            ("year", citation.year or ""),
            ("note", citation.full_citation),
        ]
    elif citation.citation_type == CitationType.ARTICLE:
        entry_type = "article"
        fields = [
            ("author", citation.author or ""),
            ("title", citation.title or ""),
            ("journal", citation.reporter or ""),
            ("volume", citation.volume or ""),
            ("pages", citation.page or ""),
            ("year", citation.year or ""),
        ]
    elif citation.citation_type == CitationType.BOOK:
        entry_type = "book"
        fields = [
            ("author", citation.author or ""),
            ("title", citation.title or ""),
            ("year", citation.year or ""),
            ("publisher", citation.publisher or ""),
        ]
    else:
        entry_type = "misc"
        fields = [
            ("title", citation.title or citation.full_citation),
            ("year", citation.year or ""),
        ]

    body = ",\n".join(f"  {name}={{{value}}}" for name, value in fields)
    return f"@{entry_type}{{{entry_id},\n{body}\n}}"


def _csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def _csv_row(record: CitationRecord) -> list[str]:
    return [
        record.type,
        record.full_citation,
        record.title,
        record.author,
        record.year,
        "true" if record.is_valid else "false",
    ]


def _check_format(fmt: str) -> None:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})")


def export_citations(citations: list[ParsedCitation], fmt: str) -> str:
    """Serialize citations as 'json', 'csv', or 'bibtex-like'."""
    _check_format(fmt)

    if fmt == "json":
        return json.dumps([c.model_dump(mode="json") for c in citations], indent=2)
    if fmt == "csv":
        return _csv([CSV_HEADER, *(_csv_row(to_record(c)) for c in citations)])
    return "\n\n".join(to_bibtex(c) for c in citations)


def export_table_of_authorities(toa: TableOfAuthorities, fmt: str) -> str:
    """Serialize a TOA; flat formats gain a category column."""
    _check_format(fmt)
    records = toa_records(toa)

    if fmt == "json":
        return json.dumps([r.model_dump(mode="json") for r in records], indent=2)
    if fmt == "csv":
        return _csv([TOA_CSV_HEADER, *([r.category or "", *_csv_row(r)] for r in records)])
    return "\n\n".join(
        to_bibtex(citation) for entries in toa.buckets().values() for citation in entries
    )
