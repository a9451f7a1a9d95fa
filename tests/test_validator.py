"""
Tests for the citation validator.
"""

from datetime import date

import pytest

from citation_engine.analysis import CitationValidator
from citation_engine.models import (
    CitationContext,
    CitationType,
    ComponentType,
    ErrorCode,
    ParsedCitation,
    Severity,
)
from citation_engine.parsers import CitationParser


@pytest.fixture
def validator():
    return CitationValidator()


@pytest.fixture
def parser():
    return CitationParser()


def make_case(**overrides):
    fields = dict(
        citation_type=CitationType.CASE,
        full_citation="Brown v. Board of Education, 347 U.S. 483 (1954)",
        party_names=["Brown", "Board of Education"],
        volume="347",
        reporter="U.S.",
        page="483",
        year="1954",
    )
    fields.update(overrides)
    return ParsedCitation(**fields)


def codes(issues):
    return [issue.code for issue in issues]


class TestStatuteValidation:
    """Statutes need a code or title plus a section."""

    def test_complete_statute(self, validator, parser):
        cite = parser.parse("42 U.S.C. § 1983")[0]
        result = validator.validate(cite)

        assert result.is_valid
        assert result.errors == []

    def test_bare_section_missing_code(self, validator, parser):
        cite = parser.parse("§ 1983")[0]
        result = validator.validate(cite)

        assert not result.is_valid
        assert any(
            e.code == ErrorCode.MISSING_REQUIRED_COMPONENT and e.component == ComponentType.CODE
            for e in result.errors
        )

    def test_regulation_uses_statute_checklist(self, validator, parser):
        cite = parser.parse("29 C.F.R. § 1630.2")[0]
        assert validator.validate(cite).is_valid

    def test_odd_section_is_warning(self, validator):
        cite = ParsedCitation(
            citation_type=CitationType.STATUTE, full_citation="42 U.S.C. § 1983*", code="U.S.C.", section="1983*"
        )
        result = validator.validate(cite)

        assert result.is_valid
        assert codes(result.warnings) == [ErrorCode.INVALID_SECTION_FORMAT]


class TestCaseValidation:
    """Cases have the longest checklist."""

    def test_complete_case(self, validator, parser):
        cite = parser.parse("Brown v. Board of Education, 347 U.S. 483 (1954)")[0]
        result = validator.validate(cite)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.parametrize("year", ["1700", "3099", "19x4"])
    def test_year_out_of_range(self, validator, year):
        result = validator.validate(make_case(year=year))

        assert not result.is_valid
        assert ErrorCode.INVALID_YEAR in codes(result.errors)

    def test_year_in_range(self, validator):
        assert validator.validate(make_case(year="1954")).is_valid

    def test_next_year_allowed(self, validator):
        assert validator.validate(make_case(year=str(date.today().year + 1))).is_valid

    def test_missing_parties(self, validator):
        result = validator.validate(make_case(party_names=["Brown"]))

        assert not result.is_valid
        assert any(e.component == ComponentType.PARTY_NAME for e in result.errors)

    def test_each_missing_field_is_one_error(self, validator):
        result = validator.validate(make_case(volume=None, page=None, year=None))

        missing = [e.component for e in result.errors if e.code == ErrorCode.MISSING_REQUIRED_COMPONENT]
        assert sorted(missing) == sorted([ComponentType.VOLUME, ComponentType.PAGE, ComponentType.YEAR])

    def test_regional_reporter_needs_court(self, validator, parser):
        cite = parser.parse("Commonwealth v. Smith, 123 A.3d 456 (2020)")[0]
        result = validator.validate(cite)

        assert not result.is_valid
        assert any(e.component == ComponentType.COURT for e in result.errors)

    def test_regional_reporter_with_court(self, validator, parser):
        cite = parser.parse("Commonwealth v. Smith, 123 A.3d 456 (Pa. 2020)")[0]
        assert validator.validate(cite).is_valid

    def test_unknown_reporter_is_warning(self, validator):
        result = validator.validate(make_case(reporter="Foo. Rep."))

        assert result.is_valid
        assert codes(result.warnings) == [ErrorCode.INVALID_REPORTER]
        assert all(w.severity == Severity.WARNING for w in result.warnings)
        assert "Check reporter abbreviation against the standard reporter table" in result.suggestions

    def test_unknown_court_is_warning(self, validator):
        result = validator.validate(make_case(court="Moon Ct."))

        assert result.is_valid
        assert codes(result.warnings) == [ErrorCode.INVALID_COURT]

    def test_non_numeric_page(self, validator):
        result = validator.validate(make_case(page="48a"))
        assert ErrorCode.INVALID_PAGE in codes(result.errors)

    def test_non_numeric_volume(self, validator):
        result = validator.validate(make_case(volume="XLII"))
        assert ErrorCode.INVALID_VOLUME in codes(result.errors)

    @pytest.mark.parametrize("pin", ["484", "484-86"])
    def test_good_pin_cite(self, validator, pin):
        assert validator.validate(make_case(pin_cite=pin)).is_valid

    def test_bad_pin_cite(self, validator):
        result = validator.validate(make_case(pin_cite="484, 486"))
        assert ErrorCode.PIN_CITE_FORMATTING in codes(result.errors)

    def test_parallel_citation_warning(self, validator):
        context = CitationContext(require_parallel_citations=True)
        result = validator.validate(make_case(reporter="S. Ct.", volume="74", page="686"), context)

        assert result.is_valid
        assert ErrorCode.MISSING_PARALLEL_CITATION in codes(result.warnings)

    def test_official_reporter_needs_no_parallel(self, validator):
        context = CitationContext(require_parallel_citations=True)
        assert validator.validate(make_case(), context).warnings == []

    def test_rejected_reporter_is_missing(self, validator, parser):
        result = validator.validate(parser.parse("Smith v. Jones, 12 Angry Men 5 (1957)")[0])

        assert not result.is_valid
        reporter_errors = [e for e in result.errors if e.component == ComponentType.REPORTER]
        assert len(reporter_errors) == 1


class TestShortFormContext:
    """Documents that require every citation in full."""

    @pytest.fixture
    def full_only(self):
        return CitationContext(allow_short_forms=False)

    def test_resolved_short_form_flagged(self, validator, parser, full_only):
        short = parser.parse("Brown v. Board of Education, 347 U.S. 483 (1954). Brown, 347 U.S. at 484.")[1]
        result = validator.validate(short, full_only)

        assert result.is_valid
        assert codes(result.warnings) == [ErrorCode.SHORT_FORM_NOT_ALLOWED]

    def test_id_flagged(self, validator, parser, full_only):
        ref = parser.parse("42 U.S.C. § 1983. Id.")[1]
        assert ErrorCode.SHORT_FORM_NOT_ALLOWED in codes(validator.validate(ref, full_only).warnings)

    def test_full_citation_not_flagged(self, validator, full_only):
        assert validator.validate(make_case(), full_only).warnings == []

    def test_short_forms_allowed_by_default(self, validator, parser):
        short = parser.parse("Brown v. Board of Education, 347 U.S. 483 (1954). Brown, 347 U.S. at 484.")[1]
        assert validator.validate(short, CitationContext()).warnings == []


class TestOtherTypes:
    """Rules, constitutions, books, articles, and unknowns."""

    def test_rule_missing_number(self, validator):
        cite = ParsedCitation(
            citation_type=CitationType.RULE,
            full_citation="Fed. R. Civ. P.",
            code="Fed. R. Civ. P.",
            missing_components=[ComponentType.RULE_NUMBER],
        )
        result = validator.validate(cite)

        rule_number_errors = [e for e in result.errors if e.component == ComponentType.RULE_NUMBER]
        assert len(rule_number_errors) == 1

    def test_constitution(self, validator, parser):
        assert validator.validate(parser.parse("U.S. Const. art. I, § 8")[0]).is_valid

    def test_book(self, validator, parser):
        cite = parser.parse("Wright & Miller, Federal Practice and Procedure (3d ed. 2020)")[0]
        assert validator.validate(cite).is_valid

    def test_book_missing_author(self, validator):
        cite = ParsedCitation(citation_type=CitationType.BOOK, full_citation="Treatise", title="Treatise")
        result = validator.validate(cite)

        assert not result.is_valid
        assert [e.component for e in result.errors] == [ComponentType.AUTHOR]

    def test_article_missing_journal(self, validator):
        cite = ParsedCitation(
            citation_type=CitationType.ARTICLE,
            full_citation="Tribe, Federalism",
            author="Tribe",
            title="Federalism",
        )
        result = validator.validate(cite)

        assert not result.is_valid
        assert codes(result.errors) == [ErrorCode.MISSING_REQUIRED_COMPONENT]

    def test_parse_note_surfaces_as_error(self, validator):
        cite = ParsedCitation(
            citation_type=CitationType.ARTICLE,
            full_citation="Tribe, Federalism, 123 Harv. L. Rev. 1",
            author="Tribe",
            title="Federalism",
            volume="123",
            reporter="Harv. L. Rev.",
            page="1",
            missing_components=[ComponentType.YEAR],
        )
        result = validator.validate(cite)

        assert not result.is_valid
        assert [e.component for e in result.errors] == [ComponentType.YEAR]

    def test_unknown_type(self, validator, parser):
        cite = parser.parse("Id. at 5")[0]
        result = validator.validate(cite)

        assert not result.is_valid
        assert codes(result.errors) == [ErrorCode.INVALID_FORMAT]

    def test_empty_citation(self, validator):
        cite = ParsedCitation(citation_type=CitationType.RULE, full_citation=" ", code="Fed. R. Evid.", rule_number="401")
        assert ErrorCode.INVALID_FORMAT in codes(validator.validate(cite).errors)


class TestResults:
    """Result shape and helpers."""

    def test_suggestions_from_codes(self, validator, parser):
        result = validator.validate(parser.parse("§ 1983")[0])
        assert result.suggestions == ["Ensure all required components are included for this citation type"]

    def test_validate_multiple(self, validator, parser):
        citations = parser.parse("42 U.S.C. § 1983 and § 1983")
        results = validator.validate_multiple(citations)

        assert [r.is_valid for r in results] == [True, False]

    def test_annotate(self, validator, parser):
        cite = parser.parse("§ 1983")[0]
        validator.annotate(cite, validator.validate(cite))

        assert cite.is_valid is False
        assert cite.errors == ["Statute citation must include code or title"]
        assert cite.suggestions

    def test_unvalidated_defaults(self, parser):
        cite = parser.parse("§ 1983")[0]
        assert cite.is_valid is True
        assert cite.errors == []
