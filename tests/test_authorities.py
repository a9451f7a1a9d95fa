"""
Tests for the table of authorities and the exporters.
"""

import csv
import io
import json

import pytest

from citation_engine.authorities import (
    bibtex_id,
    build_table_of_authorities,
    export_citations,
    export_table_of_authorities,
    toa_records,
)
from citation_engine.models import CitationType, ParsedCitation
from citation_engine.parsers import CitationParser

DOCUMENT = (
    "See Miranda v. Arizona, 384 U.S. 436 (1966). "
    "Brown v. Board of Education, 347 U.S. 483 (1954). Id. at 495. "
    "Brown, 347 U.S. at 494. 42 U.S.C. § 1983; § 1983; 42 U.S.C. § 1983 (2018). "
    "Fed. R. Civ. P. 12(b)(6); Fed. R. Civ. P. 12(b)(6). U.S. Const. amend. XIV. "
    "29 C.F.R. § 1630.2. Wright & Miller, Federal Practice and Procedure (3d ed. 2020). "
    "Laurence H. Tribe, The Constitutional Structure of American Federalism, 123 Harv. L. Rev. 1 (2010)."
)


@pytest.fixture
def citations():
    return CitationParser().parse(DOCUMENT)


@pytest.fixture
def toa(citations):
    return build_table_of_authorities(citations)


class TestTableOfAuthorities:
    """Bucketing, deduplication, and sorting."""

    def test_bucket_counts(self, toa):
        counts = {name: len(entries) for name, entries in toa.buckets().items()}

        assert counts == {
            "cases": 2,
            "statutes": 2,
            "rules": 1,
            "constitutions": 1,
            "regulations": 1,
            "books": 1,
            "articles": 1,
            "other": 0,
        }
        assert len(toa) == 9

    def test_no_duplicate_identity_keys(self, toa):
        for entries in toa.buckets().values():
            keys = [entry.identity_key() for entry in entries]
            assert len(keys) == len(set(keys))

    def test_sorted_within_bucket(self, toa):
        assert [c.title for c in toa.cases] == ["Brown v. Board of Education", "Miranda v. Arizona"]
        for entries in toa.buckets().values():
            sort_keys = [c.title or c.first_party or c.full_citation for c in entries]
            assert sort_keys == sorted(sort_keys)

    def test_first_seen_wins(self, toa):
        # Statute with and without a year share (code, section)
        usc = [c for c in toa.statutes if c.code == "U.S.C."]
        assert len(usc) == 1
        assert usc[0].year is None

    def test_entries_use_toa_form(self, toa):
        miranda = toa.cases[1]
        assert miranda.full_citation == "Miranda v. Arizona, 384 U.S. 436 (1966)"
        assert "<em>" not in miranda.full_citation

    def test_input_not_modified(self, citations, toa):
        assert citations[0].full_citation.startswith("See ")

    def test_unresolved_id_goes_to_other(self):
        citations = CitationParser().parse("Id. at 5.")
        toa = build_table_of_authorities(citations)

        assert len(toa.other) == 1
        assert toa.other[0].citation_type == CitationType.UNKNOWN

    def test_empty(self):
        assert len(build_table_of_authorities([])) == 0


class TestExport:
    """JSON, CSV, and bibliography output."""

    def test_csv_header_and_quoting(self, citations):
        lines = export_citations(citations, "csv").splitlines()

        assert lines[0] == '"Type","Full Citation","Title","Author","Year","Valid"'
        assert len(lines) == len(citations) + 1

    def test_csv_valid_flag(self):
        cite = ParsedCitation(citation_type=CitationType.STATUTE, full_citation="§ 1983", is_valid=False)
        row = list(csv.reader(io.StringIO(export_citations([cite], "csv"))))[1]

        assert row == ["statute", "§ 1983", "", "", "", "false"]

    def test_csv_escapes_quotes(self):
        cite = ParsedCitation(citation_type=CitationType.BOOK, full_citation='The "Red" Book', title='The "Red" Book')
        row = list(csv.reader(io.StringIO(export_citations([cite], "csv"))))[1]

        assert row[1] == 'The "Red" Book'

    def test_json(self, citations):
        data = json.loads(export_citations(citations, "json"))

        assert len(data) == len(citations)
        assert data[0]["citation_type"] == "case"
        assert data[0]["signal"] == "See"

    def test_bibtex_id(self):
        cite = ParsedCitation(
            citation_type=CitationType.CASE,
            full_citation="Brown v. Board of Education, 347 U.S. 483 (1954)",
            title="Brown v. Board of Education",
        )
        assert bibtex_id(cite) == "brownvboardofeducati"

    def test_bibtex_id_falls_back_to_citation(self):
        cite = ParsedCitation(citation_type=CitationType.STATUTE, full_citation="§ 1983")
        assert bibtex_id(cite) == "1983"

    def test_bibtex_entries(self, toa):
        output = export_table_of_authorities(toa, "bibtex-like")

        assert output.startswith("@misc{brownvboardofeducati,\n")
        assert "@article{theconstitutionalstr," in output
        assert "@book{federalpracticeandpr," in output
        assert output.count("\n\n") == len(toa) - 1

    def test_unsupported_format(self, citations):
        with pytest.raises(ValueError, match="Unsupported export format"):
            export_citations(citations, "xml")
        with pytest.raises(ValueError):
            export_table_of_authorities(build_table_of_authorities(citations), "yaml")


class TestTableOfAuthoritiesExport:
    """Exported rows line up with the buckets they came from."""

    def test_csv_rows_per_bucket(self, toa):
        rows = list(csv.DictReader(io.StringIO(export_table_of_authorities(toa, "csv"))))

        for name, entries in toa.buckets().items():
            assert sum(1 for row in rows if row["Category"] == name) == len(entries)

    def test_records(self, toa):
        records = toa_records(toa)

        assert len(records) == len(toa)
        assert records[0].category == "cases"
        assert records[0].type == "case"

    def test_json(self, toa):
        data = json.loads(export_table_of_authorities(toa, "json"))

        assert len(data) == len(toa)
        assert {row["category"] for row in data} == {
            name for name, entries in toa.buckets().items() if entries
        }
