"""
Tests for the citation parser.

The parser is the front door of the engine - it has to pull every kind of
legal citation out of running text without tripping over the prose around it.
"""

import pytest

from citation_engine.models import CitationType, ComponentType, Signal
from citation_engine.parsers import CitationParser, extract_citations


@pytest.fixture
def parser():
    return CitationParser()


class TestCaseCitations:
    """Test full case citation parsing."""

    def test_supreme_court(self, parser):
        citations = parser.parse("Brown v. Board of Education, 347 U.S. 483 (1954)")

        assert len(citations) == 1
        cite = citations[0]
        assert cite.citation_type == CitationType.CASE
        assert cite.party_names == ["Brown", "Board of Education"]
        assert cite.volume == "347"
        assert cite.reporter == "U.S."
        assert cite.page == "483"
        assert cite.year == "1954"
        assert cite.court is None
        assert cite.title == "Brown v. Board of Education"
        assert cite.jurisdiction == "federal"

    def test_pin_cite(self, parser):
        cite = parser.parse("Miranda v. Arizona, 384 U.S. 436, 444 (1966)")[0]

        assert cite.page == "436"
        assert cite.pin_cite == "444"
        assert cite.year == "1966"

    def test_pin_cite_range_with_en_dash(self, parser):
        cite = parser.parse("Miranda v. Arizona, 384 U.S. 436, 444–45 (1966)")[0]
        assert cite.pin_cite == "444-45"

    def test_court_and_year(self, parser):
        cite = parser.parse("United States v. Jones, 565 F.3d 123, 130 (3d Cir. 2009)")[0]

        assert cite.reporter == "F.3d"
        assert cite.court == "3d Cir."
        assert cite.year == "2009"
        assert cite.pin_cite == "130"

    def test_regional_reporter(self, parser):
        cite = parser.parse("Commonwealth v. Smith, 123 A.3d 456 (Pa. 2020)")[0]

        assert cite.reporter == "A.3d"
        assert cite.court == "Pa."
        assert cite.jurisdiction == "regional"

    def test_multiword_reporter(self, parser):
        cite = parser.parse("Doe v. Roe, 100 F. Supp. 2d 200 (E.D. Pa. 2000)")[0]

        assert cite.reporter == "F. Supp. 2d"
        assert cite.court == "E.D. Pa."

    def test_explanatory_parenthetical(self, parser):
        cite = parser.parse(
            "Brown v. Board of Education, 347 U.S. 483 (1954) (holding segregation unconstitutional)"
        )[0]

        assert cite.parenthetical == "holding segregation unconstitutional"
        assert cite.year == "1954"
        assert cite.pin_cite is None

    def test_in_running_text(self, parser):
        text = "The Court in Brown v. Board of Education, 347 U.S. 483 (1954), overruled Plessy."
        citations = parser.parse(text)

        assert len(citations) == 1
        assert citations[0].full_citation == "Brown v. Board of Education, 347 U.S. 483 (1954)"

    def test_signal_is_kept_in_text(self, parser):
        cite = parser.parse("See also Brown v. Board of Education, 347 U.S. 483 (1954).")[0]

        assert cite.signal == Signal.SEE_ALSO
        assert cite.full_citation.startswith("See also ")
        assert cite.party_names[0] == "Brown"

    def test_signal_does_not_join_party_name(self, parser):
        text = "This violates the Equal Protection Clause. See Brown v. Board of Education, 347 U.S. 483 (1954)."
        cite = parser.parse(text)[0]

        assert cite.signal == Signal.SEE
        assert cite.party_names == ["Brown", "Board of Education"]

    def test_short_form_pattern(self, parser):
        cite = parser.parse("Brown, 347 U.S. at 484", resolve=False)[0]

        assert cite.citation_type == CitationType.CASE
        assert cite.party_names == ["Brown"]
        assert cite.page is None
        assert cite.pin_cite == "484"

    def test_double_spaced_signal(self, parser):
        cite = parser.parse("See  also Brown v. Board of Education, 347 U.S. 483 (1954).")[0]

        assert cite.signal == Signal.SEE_ALSO
        assert cite.party_names[0] == "Brown"

    def test_italicized_case_name(self, parser):
        cite = parser.parse("<em>Brown v. Board of Education</em>, 347 U.S. 483 (1954)")[0]
        assert cite.party_names == ["Brown", "Board of Education"]

    def test_unrecognized_reporter_is_noted(self, parser):
        cite = parser.parse("Smith v. Jones, 12 Angry Men 5 (1957)")[0]

        assert cite.reporter is None
        assert ComponentType.REPORTER in cite.missing_components


class TestSentenceBoundaries:
    """A citation that opens a sentence starts after the previous period."""

    def test_case_after_sentence(self, parser):
        text = "The Court applied the Equal Protection Clause. Brown v. Board of Education, 347 U.S. 483 (1954)."
        cite = parser.parse(text)[0]

        assert cite.party_names == ["Brown", "Board of Education"]
        assert cite.start_index == text.index("Brown")
        assert cite.full_citation == "Brown v. Board of Education, 347 U.S. 483 (1954)"

    def test_roman_numeral_ends_sentence(self, parser):
        text = "Plaintiffs rely on Title VII. Smith v. Jones, 123 F.3d 456 (3d Cir. 1999)."
        cite = parser.parse(text)[0]

        assert cite.party_names == ["Smith", "Jones"]
        assert cite.court == "3d Cir."

    def test_abbreviations_stay_in_party_name(self, parser):
        cite = parser.parse("Smith & Wesson Co. v. Jones, 100 F.3d 200 (3d Cir. 1999)")[0]
        assert cite.party_names[0] == "Smith & Wesson Co."

    def test_initialism_party(self, parser):
        cite = parser.parse("N.L.R.B. v. Jones & Laughlin Steel Corp., 301 U.S. 1 (1937)")[0]
        assert cite.party_names == ["N.L.R.B.", "Jones & Laughlin Steel Corp."]

    def test_article_after_sentence(self, parser):
        text = (
            "Commentators agree. Laurence H. Tribe, The Constitutional Structure of "
            "American Federalism, 123 Harv. L. Rev. 1 (2010)."
        )
        cite = parser.parse(text)[0]

        assert cite.citation_type == CitationType.ARTICLE
        assert cite.author == "Laurence H. Tribe"


class TestStatuteCitations:
    """Test statute and regulation parsing."""

    def test_usc(self, parser):
        citations = parser.parse("See 42 U.S.C. § 1983 for details.")

        assert len(citations) == 1
        cite = citations[0]
        assert cite.citation_type == CitationType.STATUTE
        assert cite.title == "42"
        assert cite.code == "U.S.C."
        assert cite.section == "1983"
        assert cite.signal == Signal.SEE
        assert cite.jurisdiction == "federal"

    def test_year_parenthetical(self, parser):
        cite = parser.parse("28 U.S.C. § 1331 (2018)")[0]

        assert cite.year == "2018"
        assert cite.parenthetical is None

    def test_publisher_and_year(self, parser):
        cite = parser.parse("28 U.S.C. § 1331 (West 2018)")[0]

        assert cite.publisher == "West"
        assert cite.year == "2018"
        assert cite.parenthetical is None

    def test_subdivisions_are_not_parentheticals(self, parser):
        cite = parser.parse("42 U.S.C. § 1983(c)(2)")[0]

        assert cite.section == "1983(c)(2)"
        assert cite.parenthetical is None

    def test_pennsylvania_statute(self, parser):
        cite = parser.parse("42 Pa.C.S. § 8301")[0]

        assert cite.citation_type == CitationType.STATUTE
        assert cite.section == "8301"
        assert cite.jurisdiction == "pennsylvania"

    def test_bare_section(self, parser):
        cite = parser.parse("§ 1983")[0]

        assert cite.citation_type == CitationType.STATUTE
        assert cite.section == "1983"
        assert cite.code is None
        assert cite.title is None

    def test_cfr_is_regulation(self, parser):
        cite = parser.parse("Under 29 C.F.R. § 1630.2.")[0]

        assert cite.citation_type == CitationType.REGULATION
        assert cite.code == "C.F.R."
        assert cite.section == "1630.2"


class TestRuleAndConstitutionCitations:
    """Test court rules and constitutional provisions."""

    def test_federal_rule(self, parser):
        cite = parser.parse("The complaint survives Fed. R. Civ. P. 12(b)(6).")[0]

        assert cite.citation_type == CitationType.RULE
        assert cite.code == "Fed. R. Civ. P."
        assert cite.rule_number == "12(b)(6)"
        assert cite.parenthetical is None

    def test_pennsylvania_rule(self, parser):
        cite = parser.parse("Pa. R. Civ. P. 1035.2")[0]

        assert cite.rule_number == "1035.2"
        assert cite.jurisdiction == "pennsylvania"

    def test_constitution_article(self, parser):
        cite = parser.parse("U.S. Const. art. I, § 8")[0]

        assert cite.citation_type == CitationType.CONSTITUTION
        assert cite.title == "U.S. Const."
        assert cite.section == "art. I, § 8"
        assert cite.pin_cite is None

    def test_constitution_amendment(self, parser):
        cite = parser.parse("See U.S. Const. amend. XIV.")[0]

        assert cite.section == "amend. XIV"
        assert cite.signal == Signal.SEE


class TestSecondarySources:
    """Test books and law review articles."""

    def test_law_review_article(self, parser):
        cite = parser.parse(
            "Laurence H. Tribe, The Constitutional Structure of American Federalism, 123 Harv. L. Rev. 1 (2010)"
        )[0]

        assert cite.citation_type == CitationType.ARTICLE
        assert cite.author == "Laurence H. Tribe"
        assert cite.title == "The Constitutional Structure of American Federalism"
        assert cite.volume == "123"
        assert cite.reporter == "Harv. L. Rev."
        assert cite.page == "1"
        assert cite.year == "2010"

    def test_book_with_edition(self, parser):
        cite = parser.parse("Wright & Miller, Federal Practice and Procedure (3d ed. 2020)")[0]

        assert cite.citation_type == CitationType.BOOK
        assert cite.author == "Wright & Miller"
        assert cite.title == "Federal Practice and Procedure"
        assert cite.edition == "3d ed."
        assert cite.year == "2020"
        assert cite.parenthetical is None

    def test_treatise_section(self, parser):
        cite = parser.parse("Wright & Miller, Federal Practice and Procedure § 1357 (3d ed. 2004)")[0]

        assert cite.citation_type == CitationType.BOOK
        assert cite.section == "1357"
        assert cite.year == "2004"

    def test_italicized_title(self, parser):
        cite = parser.parse("Wright & Miller, <em>Federal Practice and Procedure</em> (3d ed. 2020)")[0]

        assert cite.citation_type == CitationType.BOOK
        assert cite.title == "Federal Practice and Procedure"


class TestMixedCitations:
    """Test documents with several citation types."""

    def test_ordered_by_position(self, parser):
        text = "See 42 U.S.C. § 1983; Fed. R. Civ. P. 56. Cf. Miranda v. Arizona, 384 U.S. 436 (1966)."
        citations = parser.parse(text)

        assert [c.citation_type for c in citations] == [
            CitationType.STATUTE,
            CitationType.RULE,
            CitationType.CASE,
        ]
        starts = [c.start_index for c in citations]
        assert starts == sorted(starts)

    def test_offsets_match_text(self, parser):
        text = "See 42 U.S.C. § 1983; Fed. R. Civ. P. 56. Cf. Miranda v. Arizona, 384 U.S. 436 (1966)."
        for cite in parser.parse(text):
            assert text[cite.start_index:cite.end_index] == cite.full_citation

    def test_convenience_function(self):
        citations = extract_citations("42 U.S.C. § 1983 and 29 C.F.R. § 1630.2")
        assert len(citations) == 2


class TestParseSingle:
    """Test whole-string parsing."""

    def test_exact_citation(self, parser):
        cite = parser.parse_single("  42 U.S.C. § 1983 ")
        assert cite is not None
        assert cite.section == "1983"

    def test_not_a_citation(self, parser):
        assert parser.parse_single("not a citation") is None

    def test_citation_with_trailing_prose(self, parser):
        assert parser.parse_single("42 U.S.C. § 1983 applies here") is None


class TestEdgeCases:
    """Test edge cases and error handling."""

    def test_empty_string(self, parser):
        assert parser.parse("") == []

    def test_non_string_input(self, parser):
        assert parser.parse(None) == []
        assert parser.parse(42) == []

    def test_no_citations(self, parser):
        assert parser.parse("This is just regular text without any citations.") == []

    def test_unresolved_id(self, parser):
        cite = parser.parse("Id. at 5")[0]

        assert cite.citation_type == CitationType.UNKNOWN
        assert cite.pin_cite == "5"
        assert cite.short_form is None

    def test_no_missing_components_for_complete_case(self, parser):
        cite = parser.parse("Brown v. Board of Education, 347 U.S. 483 (1954)")[0]
        assert cite.missing_components == []

    def test_missing_optional_components_not_noted(self, parser):
        cite = parser.parse("42 U.S.C. § 1983")[0]
        assert ComponentType.YEAR not in cite.missing_components
