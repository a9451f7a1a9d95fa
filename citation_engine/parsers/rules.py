"""
Rule Table - the static grammar and lookup data behind the parser.

Every citation grammar is a CitationRule: one regex plus the ordered list of
components it extracts. Rules are combined into a single alternation, so the
order of CITATION_RULES matters: when two grammars can start at the same
offset, the earlier rule wins.

Case:
  - Brown v. Board of Education, 347 U.S. 483 (1954)
  - Miranda v. Arizona, 384 U.S. 436, 444 (1966)
  - Brown, 347 U.S. at 484
  - Id. at 485

Statutes / Regulations:
  - 42 U.S.C. § 1983
  - 28 U.S.C. § 1331 (2018)
  - 42 Pa.C.S. § 8301
  - 29 C.F.R. § 1630.2

Rules / Constitutions:
  - Fed. R. Civ. P. 12(b)(6)
  - Pa. R. Civ. P. 1035.2
  - U.S. Const. art. I, § 8

Secondary sources:
  - Tribe, The Constitutional Structure, 123 Harv. L. Rev. 1 (2010)
  - Wright & Miller, Federal Practice and Procedure (3d ed. 2020)
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

from ..models import (
    CitationStyle,
    CitationType,
    ComponentType,
    CourtInfo,
    CourtLevel,
    ReporterInfo,
    Signal,
)


class RuleTableError(ValueError):
    """The rule table is malformed. Raised once, at construction."""


# =============================================================================
# Rule Definitions
# =============================================================================


@dataclass(frozen=True)
class ComponentRule:
    """Maps one capture group of a rule's pattern onto a citation component."""

    component: ComponentType
    position: int  # Capture group index within the rule's own pattern
    required: bool = True
    validate: Callable[[str], bool] | None = None
    normalize: Callable[[str], str] | None = None


@dataclass(frozen=True)
class CitationRule:
    """One grammar for one citation type."""

    name: str
    citation_type: CitationType
    pattern: str
    components: tuple[ComponentRule, ...]
    examples: tuple[str, ...] = ()
    jurisdiction: str | None = None
    styles: frozenset[CitationStyle] = field(default_factory=lambda: frozenset(CitationStyle))


def _c(component: ComponentType, position: int, required: bool = True, **kwargs) -> ComponentRule:
    return ComponentRule(component=component, position=position, required=required, **kwargs)


def _dash(value: str) -> str:
    """Normalize en dashes in page ranges: 444–45 -> 444-45"""
    return value.replace("–", "-")


def _abbreviated(value: str) -> bool:
    """Reporters are abbreviations: "F.3d" passes, "Angry Men" does not."""
    return "." in value


# =============================================================================
# Pattern Building Blocks
# =============================================================================

# Words that start a sentence rather than a party or author name
_LEAD_STOP = (
    r"(?!(?:In|The|This|That|These|See|Under|As|But|And|Also|Accord|Compare|"
    r"Contra|Cf|Id|Here|Thus|Then|When|Where|While|Since|Because|Although|"
    r"However|Moreover|Finally|Similarly|Likewise|Following|After|Before|"
    r"Unlike|Citing|Quoting)\b)"
)

# Abbreviations that may end in a period inside a name. Any other word
# followed by a period ends the sentence, and the name with it.
NAME_ABBREVIATIONS = (
    "Admin", "Am", "Assocs", "Assoc", "Auth", "Bd", "Bros", "Cnty", "Comm", "Corp", "Co",
    "Ctr", "Cty", "Dist", "Div", "Dr", "Educ", "Envtl", "Fed", "Found", "Gen", "Grp",
    "Hosp", "Inc", "Indus", "Ins", "Jr", "Ltd", "Mfg", "Mgmt", "Mrs", "Mr", "Ms", "Mut",
    "Prods", "Ry", "Sch", "Servs", "Serv", "Sr", "St", "Sys", "Tel", "Transp", "Univ",
)
_ABBREVIATION = r"(?:" + "|".join(NAME_ABBREVIATIONS) + r")\.(?![A-Za-z0-9])"

# "U.S.", "N.L.R.B.", "D.C."
_INITIALISM = r"[A-Z](?:\.[A-Z])+\.?"

_CAP_WORD = rf"(?:{_INITIALISM}|{_ABBREVIATION}|[A-Z][A-Za-z0-9'&\-]*|&)"
_CONNECTOR = r"(?:of|the|and|for|de|du|la|ex|rel\.|on|to)"

# "Board of Education", "United States", "Smith & Wesson Co."
_PARTY = rf"{_LEAD_STOP}{_CAP_WORD}(?:\s+(?:{_LEAD_STOP}{_CAP_WORD}|{_CONNECTOR}))*"

# Second party runs up to the comma before the volume
_PARTY_TAIL = r"[A-Z0-9][^;()<>\n]{0,100}?"

# Initials only count inside author names: "Laurence H. Tribe"
_AUTHOR_WORD = rf"(?:{_INITIALISM}|{_ABBREVIATION}|[A-Z]\.(?=\s)|[A-Z][A-Za-z'\-]*)"

# "Laurence H. Tribe", "Wright & Miller"
_AUTHOR = rf"{_LEAD_STOP}{_AUTHOR_WORD}(?:\s+(?:{_LEAD_STOP}{_AUTHOR_WORD}|&|and|de|van|von))*"

# Formatted output wraps case names and titles in emphasis markers
_EM_OPEN = r"(?:<em>)?"
_EM_CLOSE = r"(?:</em>)?"

_VOLUME = r"(\d{1,4})"
_PAGE = r"(\d{1,5})"
_PIN = r"(\d{1,5}(?:[-–]\d{1,5})?)"

# "U.S.", "F.3d", "F. Supp. 2d", "L. Ed. 2d", "Pa. Super."
_REPORTER = r"([A-Z][A-Za-z.']*(?:\s[A-Z][A-Za-z.']*|\s?\d{1,2}(?:d|th|st|nd|rd))*)"

# "1983", "1395w-4", "1630.2", "1983(c)(2)"
_SECTION = r"(\d+[A-Za-z0-9]*(?:[.\-–]\d+[A-Za-z0-9]*)*(?:\((?:[a-z]{1,4}|\d{1,3}|[A-Z]{1,2})\))*)"

_EDITION = r"(\d+(?:st|nd|rd|th|d)\s+ed\.)"

# Optional leading signal, shared by every rule
SIGNAL_PREFIX = (
    r"(?:\b(?i:see\s+generally|see\s+also|but\s+see|but\s+cf\.|compare|accord|"
    r"contra|see|cf\.|e\.g\.),?\s+)?"
)


# =============================================================================
# Case Patterns
# =============================================================================

# Party v. Party, Volume Reporter Page, Pin (Court Year) (parenthetical)
CASE_FULL = (
    rf"{_EM_OPEN}({_PARTY})\s+v\.\s+({_PARTY_TAIL}){_EM_CLOSE},\s*"  # Parties
    rf"{_VOLUME}\s+{_REPORTER}\s+{_PAGE}"  # Volume Reporter Page
    rf"(?:,\s*{_PIN})?"  # Optional pin cite
    r"(?:\s*\((?:([^()]*?)\s+)?(\d{4})\)"  # (Court Year)
    r"(?:\s+\(([^()]{2,})\))?)?"  # Explanatory parenthetical
)

# Party, Volume Reporter at Pin
CASE_SHORT = rf"{_EM_OPEN}({_PARTY}){_EM_CLOSE},\s*{_VOLUME}\s+{_REPORTER}\s+at\s+{_PIN}"

# Id. / Id. at 485
ID_CITATION = r"(?i:\bid\.)(?:\s+at\s+(\d{1,5}(?:[-–]\d{1,5})?))?"


# =============================================================================
# Statute / Regulation Patterns
# =============================================================================

USC = (
    r"\b(\d{1,3})\s+(U\.S\.C\.(?:A\.|S\.)?)\s*"  # Title, code
    r"(?:§{1,2}\s*)?"
    rf"{_SECTION}"
    r"(?:\s*\((?:([^()\d][^()]*?)\s+)?(\d{4})\))?"  # (Publisher Year)
)

PA_STATUTE = rf"\b(\d{{1,3}})\s+(Pa\.\s?C\.S\.)\s*§{{1,2}}\s*{_SECTION}"

CFR = (
    r"\b(\d{1,3})\s+(C\.F\.R\.)\s*"
    r"(?:§{1,2}\s*|[Pp]art\s+)?"
    rf"{_SECTION}"
    r"(?:\s*\((\d{4})\))?"
)

# "§ 1983" with no code or title in front of it
BARE_SECTION = rf"§{{1,2}}\s*{_SECTION}"


# =============================================================================
# Rule / Constitution Patterns
# =============================================================================

_RULE_NUMBER = r"(\d+(?:\.\d+)?(?:\([A-Za-z0-9]{1,4}\))*)"

FED_RULES = (
    r"(Fed\.\s?R\.\s?(?:Civ\.\s?P\.|Crim\.\s?P\.|Evid\.|App\.\s?P\.|Bankr\.\s?P\.))"
    rf"\s*{_RULE_NUMBER}"
)

PA_RULES = (
    r"(Pa\.\s?R\.\s?(?:Civ\.\s?P\.|Crim\.\s?P\.|Evid\.|App\.\s?P\.))"
    rf"\s*{_RULE_NUMBER}"
)

_CONST_PART = (
    r"(art\.\s+[IVXLC]+(?:,\s*§\s*\d+)?(?:,\s*cl\.\s*\d+)?"
    r"|amend\.\s+[IVXLC]+(?:,\s*§\s*\d+)?)"
)

US_CONST = rf"(U\.S\.\s?Const\.)\s+{_CONST_PART}"
PA_CONST = rf"(Pa\.\s?Const\.)\s+{_CONST_PART}"


# =============================================================================
# Secondary Source Patterns
# =============================================================================

# Author, Title, Volume Journal Page, Pin (Year)
ARTICLE = (
    rf"({_AUTHOR}),\s+{_EM_OPEN}([A-Z][^();<>\n]{{0,200}}?){_EM_CLOSE},\s+"
    rf"{_VOLUME}\s+([A-Z][A-Za-z.&' ]*?)\s+{_PAGE}"
    rf"(?:,\s*{_PIN})?"
    r"\s*\((\d{4})\)"
)

# (3d ed. 2020), (3d ed., West 2020), (West 2020), (2020)
_BOOK_DATE = rf"\s+\((?:{_EDITION},?\s+)?(?:([A-Z][^()\d]*?)\s+)?(\d{{4}})\)"

# Author, Title § Section (Edition Publisher Year)
BOOK_WITH_SECTION = (
    rf"({_AUTHOR}),\s+{_EM_OPEN}([A-Z][^()§;<>\n]{{0,200}}?){_EM_CLOSE}"
    rf"\s+§{{1,2}}\s*{_SECTION}{_BOOK_DATE}"
)

# Author, Title (Edition Publisher Year)
BOOK = rf"({_AUTHOR}),\s+{_EM_OPEN}([A-Z][^()§;<>\n]{{0,200}}?){_EM_CLOSE}{_BOOK_DATE}"


# =============================================================================
# The Rule Table
# =============================================================================

CITATION_RULES: tuple[CitationRule, ...] = (
    CitationRule(
        name="id",
        citation_type=CitationType.UNKNOWN,
        pattern=ID_CITATION,
        components=(_c(ComponentType.PIN_CITE, 1, required=False, normalize=_dash),),
        examples=("Id.", "Id. at 485"),
    ),
    CitationRule(
        name="case",
        citation_type=CitationType.CASE,
        pattern=CASE_FULL,
        components=(
            _c(ComponentType.PARTY_NAME, 1),
            _c(ComponentType.PARTY_NAME, 2),
            _c(ComponentType.VOLUME, 3),
            _c(ComponentType.REPORTER, 4, validate=_abbreviated),
            _c(ComponentType.PAGE, 5),
            _c(ComponentType.PIN_CITE, 6, required=False, normalize=_dash),
            _c(ComponentType.COURT, 7, required=False),
            _c(ComponentType.YEAR, 8),
            _c(ComponentType.PARENTHETICAL, 9, required=False),
        ),
        examples=(
            "Brown v. Board of Education, 347 U.S. 483 (1954)",
            "Miranda v. Arizona, 384 U.S. 436, 444 (1966)",
            "Commonwealth v. Smith, 123 A.3d 456 (Pa. 2020)",
        ),
    ),
    CitationRule(
        name="case_short",
        citation_type=CitationType.CASE,
        pattern=CASE_SHORT,
        components=(
            _c(ComponentType.PARTY_NAME, 1),
            _c(ComponentType.VOLUME, 2),
            _c(ComponentType.REPORTER, 3, validate=_abbreviated),
            _c(ComponentType.PIN_CITE, 4, normalize=_dash),
        ),
        examples=("Brown, 347 U.S. at 484", "Miranda, 384 U.S. at 444"),
    ),
    CitationRule(
        name="usc",
        citation_type=CitationType.STATUTE,
        pattern=USC,
        components=(
            _c(ComponentType.TITLE, 1),
            _c(ComponentType.CODE, 2),
            _c(ComponentType.SECTION, 3, normalize=_dash),
            _c(ComponentType.PUBLISHER, 4, required=False),
            _c(ComponentType.YEAR, 5, required=False),
        ),
        examples=("42 U.S.C. § 1983", "28 U.S.C. § 1331 (2018)"),
        jurisdiction="federal",
    ),
    CitationRule(
        name="pa_statute",
        citation_type=CitationType.STATUTE,
        pattern=PA_STATUTE,
        components=(
            _c(ComponentType.TITLE, 1),
            _c(ComponentType.CODE, 2),
            _c(ComponentType.SECTION, 3, normalize=_dash),
        ),
        examples=("42 Pa.C.S. § 8301", "23 Pa.C.S. § 5301"),
        jurisdiction="pennsylvania",
    ),
    CitationRule(
        name="cfr",
        citation_type=CitationType.REGULATION,
        pattern=CFR,
        components=(
            _c(ComponentType.TITLE, 1),
            _c(ComponentType.CODE, 2),
            _c(ComponentType.SECTION, 3),
            _c(ComponentType.YEAR, 4, required=False),
        ),
        examples=("29 C.F.R. § 1630.2", "42 C.F.R. § 405.1 (2020)"),
        jurisdiction="federal",
    ),
    CitationRule(
        name="bare_section",
        citation_type=CitationType.STATUTE,
        pattern=BARE_SECTION,
        components=(_c(ComponentType.SECTION, 1, normalize=_dash),),
        examples=("§ 1983",),
    ),
    CitationRule(
        name="fed_rules",
        citation_type=CitationType.RULE,
        pattern=FED_RULES,
        components=(
            _c(ComponentType.CODE, 1),
            _c(ComponentType.RULE_NUMBER, 2),
        ),
        examples=("Fed. R. Civ. P. 12(b)(6)", "Fed. R. Evid. 401"),
        jurisdiction="federal",
    ),
    CitationRule(
        name="pa_rules",
        citation_type=CitationType.RULE,
        pattern=PA_RULES,
        components=(
            _c(ComponentType.CODE, 1),
            _c(ComponentType.RULE_NUMBER, 2),
        ),
        examples=("Pa. R. Civ. P. 1035.2", "Pa. R. Evid. 401"),
        jurisdiction="pennsylvania",
    ),
    CitationRule(
        name="us_constitution",
        citation_type=CitationType.CONSTITUTION,
        pattern=US_CONST,
        components=(
            _c(ComponentType.TITLE, 1),
            _c(ComponentType.SECTION, 2),
        ),
        examples=("U.S. Const. art. I, § 8", "U.S. Const. amend. XIV"),
        jurisdiction="federal",
    ),
    CitationRule(
        name="pa_constitution",
        citation_type=CitationType.CONSTITUTION,
        pattern=PA_CONST,
        components=(
            _c(ComponentType.TITLE, 1),
            _c(ComponentType.SECTION, 2),
        ),
        examples=("Pa. Const. art. I, § 7",),
        jurisdiction="pennsylvania",
    ),
    CitationRule(
        name="law_review",
        citation_type=CitationType.ARTICLE,
        pattern=ARTICLE,
        components=(
            _c(ComponentType.AUTHOR, 1),
            _c(ComponentType.TITLE, 2),
            _c(ComponentType.VOLUME, 3),
            _c(ComponentType.REPORTER, 4),
            _c(ComponentType.PAGE, 5),
            _c(ComponentType.PIN_CITE, 6, required=False, normalize=_dash),
            _c(ComponentType.YEAR, 7),
        ),
        examples=(
            "Tribe, The Constitutional Structure of American Federalism, 123 Harv. L. Rev. 1 (2010)",
        ),
    ),
    CitationRule(
        name="treatise_section",
        citation_type=CitationType.BOOK,
        pattern=BOOK_WITH_SECTION,
        components=(
            _c(ComponentType.AUTHOR, 1),
            _c(ComponentType.TITLE, 2),
            _c(ComponentType.SECTION, 3),
            _c(ComponentType.EDITION, 4, required=False),
            _c(ComponentType.PUBLISHER, 5, required=False),
            _c(ComponentType.YEAR, 6, required=False),
        ),
        examples=("Wright & Miller, Federal Practice and Procedure § 1357 (3d ed. 2004)",),
    ),
    CitationRule(
        name="book",
        citation_type=CitationType.BOOK,
        pattern=BOOK,
        components=(
            _c(ComponentType.AUTHOR, 1),
            _c(ComponentType.TITLE, 2),
            _c(ComponentType.EDITION, 3, required=False),
            _c(ComponentType.PUBLISHER, 4, required=False),
            _c(ComponentType.YEAR, 5, required=False),
        ),
        examples=(
            "Wright & Miller, Federal Practice and Procedure (3d ed. 2020)",
            "Garner, Black's Law Dictionary (11th ed. 2019)",
        ),
    ),
)


# =============================================================================
# Reporters and Courts
# =============================================================================


def _reporter(abbreviation: str, name: str, jurisdiction: str, official: bool, requires_court: bool) -> ReporterInfo:
    return ReporterInfo(
        name=name,
        abbreviation=abbreviation,
        jurisdiction=jurisdiction,
        is_official=official,
        requires_court=requires_court,
    )


REPORTERS: Mapping[str, ReporterInfo] = MappingProxyType({
    info.abbreviation: info
    for info in (
        # Supreme Court
        _reporter("U.S.", "United States Reports", "federal", True, False),
        _reporter("S. Ct.", "Supreme Court Reporter", "federal", False, False),
        _reporter("L. Ed.", "Lawyers' Edition", "federal", False, False),
        _reporter("L. Ed. 2d", "Lawyers' Edition, Second Series", "federal", False, False),
        # Circuit courts
        _reporter("F.", "Federal Reporter", "federal", True, True),
        _reporter("F.2d", "Federal Reporter, Second Series", "federal", True, True),
        _reporter("F.3d", "Federal Reporter, Third Series", "federal", True, True),
        _reporter("F.4th", "Federal Reporter, Fourth Series", "federal", True, True),
        _reporter("F. App'x", "Federal Appendix", "federal", False, True),
        # District courts
        _reporter("F. Supp.", "Federal Supplement", "federal", True, True),
        _reporter("F. Supp. 2d", "Federal Supplement, Second Series", "federal", True, True),
        _reporter("F. Supp. 3d", "Federal Supplement, Third Series", "federal", True, True),
        _reporter("F.R.D.", "Federal Rules Decisions", "federal", True, True),
        _reporter("B.R.", "Bankruptcy Reporter", "federal", True, True),
        # Pennsylvania
        _reporter("Pa.", "Pennsylvania State Reports", "pennsylvania", True, False),
        _reporter("Pa. Super.", "Pennsylvania Superior Court Reports", "pennsylvania", True, False),
        _reporter("Pa. Commw.", "Pennsylvania Commonwealth Court Reports", "pennsylvania", True, False),
        # Regional
        _reporter("A.", "Atlantic Reporter", "regional", False, True),
        _reporter("A.2d", "Atlantic Reporter, Second Series", "regional", False, True),
        _reporter("A.3d", "Atlantic Reporter, Third Series", "regional", False, True),
        _reporter("P.2d", "Pacific Reporter, Second Series", "regional", False, True),
        _reporter("P.3d", "Pacific Reporter, Third Series", "regional", False, True),
        _reporter("N.E.2d", "North Eastern Reporter, Second Series", "regional", False, True),
        _reporter("N.E.3d", "North Eastern Reporter, Third Series", "regional", False, True),
        _reporter("N.W.2d", "North Western Reporter, Second Series", "regional", False, True),
        _reporter("S.E.2d", "South Eastern Reporter, Second Series", "regional", False, True),
        _reporter("S.W.3d", "South Western Reporter, Third Series", "regional", False, True),
        _reporter("So. 3d", "Southern Reporter, Third Series", "regional", False, True),
    )
})

# Variant spellings -> canonical abbreviation
REPORTER_ALIASES: Mapping[str, str] = MappingProxyType({
    "U. S.": "U.S.",
    "S.Ct.": "S. Ct.",
    "L.Ed.": "L. Ed.",
    "L.Ed.2d": "L. Ed. 2d",
    "L. Ed.2d": "L. Ed. 2d",
    "F. 2d": "F.2d",
    "F. 3d": "F.3d",
    "F. 4th": "F.4th",
    "F.Supp.": "F. Supp.",
    "F.Supp.2d": "F. Supp. 2d",
    "F.Supp.3d": "F. Supp. 3d",
    "F. Supp.2d": "F. Supp. 2d",
    "F. Supp.3d": "F. Supp. 3d",
    "F.App'x": "F. App'x",
    "Fed. Appx.": "F. App'x",
    "F. R. D.": "F.R.D.",
    "B. R.": "B.R.",
    "Pa.Super.": "Pa. Super.",
    "Pa.Commw.": "Pa. Commw.",
    "A. 2d": "A.2d",
    "A. 3d": "A.3d",
})


def _court(abbreviation: str, name: str, jurisdiction: str, level: CourtLevel) -> CourtInfo:
    return CourtInfo(name=name, abbreviation=abbreviation, jurisdiction=jurisdiction, level=level)


_CIRCUITS = {
    "1st Cir.": "First", "2d Cir.": "Second", "3d Cir.": "Third", "4th Cir.": "Fourth",
    "5th Cir.": "Fifth", "6th Cir.": "Sixth", "7th Cir.": "Seventh", "8th Cir.": "Eighth",
    "9th Cir.": "Ninth", "10th Cir.": "Tenth", "11th Cir.": "Eleventh",
    "D.C. Cir.": "District of Columbia", "Fed. Cir.": "Federal",
}

COURTS: Mapping[str, CourtInfo] = MappingProxyType({
    info.abbreviation: info
    for info in (
        _court("U.S.", "Supreme Court of the United States", "federal", CourtLevel.SUPREME),
        *(
            _court(abbrev, f"United States Court of Appeals for the {name} Circuit", "federal", CourtLevel.APPELLATE)
            for abbrev, name in _CIRCUITS.items()
        ),
        _court("E.D. Pa.", "United States District Court for the Eastern District of Pennsylvania", "federal", CourtLevel.TRIAL),
        _court("M.D. Pa.", "United States District Court for the Middle District of Pennsylvania", "federal", CourtLevel.TRIAL),
        _court("W.D. Pa.", "United States District Court for the Western District of Pennsylvania", "federal", CourtLevel.TRIAL),
        _court("Pa.", "Supreme Court of Pennsylvania", "pennsylvania", CourtLevel.SUPREME),
        _court("Pa. Super. Ct.", "Superior Court of Pennsylvania", "pennsylvania", CourtLevel.APPELLATE),
        _court("Pa. Commw. Ct.", "Commonwealth Court of Pennsylvania", "pennsylvania", CourtLevel.APPELLATE),
    )
})


# =============================================================================
# Signals
# =============================================================================

# Any run of whitespace between signal words, as in SIGNAL_PREFIX
_SIGNAL_TOKEN = re.compile(
    r"^(" + "|".join(r"\s+".join(map(re.escape, s.value.split())) for s in Signal) + r"),?(?=\s|$)",
    re.IGNORECASE,
)


def match_signal(text: str) -> tuple[Signal, str] | None:
    """Return (signal, remaining text) if text opens with a signal."""
    match = _SIGNAL_TOKEN.match(text)
    if not match:
        return None
    token = " ".join(match.group(1).split()).lower()
    signal = next(s for s in Signal if s.value.lower() == token)
    return signal, text[match.end():].lstrip()


def strip_signal(text: str) -> str:
    """Drop a leading signal: 'See also Brown v. ...' -> 'Brown v. ...'"""
    found = match_signal(text)
    return found[1] if found else text


# =============================================================================
# RuleTable
# =============================================================================


class RuleTable:
    """
    Immutable, validated set of citation grammars.

    Construction checks every rule and builds the combined matcher; a bad rule
    raises RuleTableError here and never at parse time.

    Usage:
        table = RuleTable()
        for match in table.matcher.finditer(text):
            rule, base = table.owner(match)
    """

    def __init__(self, rules: tuple[CitationRule, ...] | list[CitationRule] | None = None):
        self._rules: tuple[CitationRule, ...] = tuple(CITATION_RULES if rules is None else rules)
        if not self._rules:
            raise RuleTableError("Rule table has no rules")

        for rule in self._rules:
            self._check_rule(rule)

        self._group_names = tuple(f"r{index}" for index in range(len(self._rules)))
        self.matcher: re.Pattern[str] = re.compile(
            "|".join(
                f"(?P<{name}>{SIGNAL_PREFIX}(?:{rule.pattern}))"
                for name, rule in zip(self._group_names, self._rules)
            )
        )

    @property
    def rules(self) -> tuple[CitationRule, ...]:
        return self._rules

    def rules_for(self, citation_type: CitationType, style: CitationStyle | None = None) -> list[CitationRule]:
        """Rules of one type, optionally limited to those a style recognizes."""
        return [
            rule for rule in self._rules
            if rule.citation_type == citation_type and (style is None or style in rule.styles)
        ]

    def owner(self, match: re.Match[str]) -> tuple[CitationRule, int]:
        """
        Which rule produced a combined match.

        Returns the rule and the group index of its wrapper; the rule's own
        capture group N is group (base + N) of the combined match.
        """
        for name, rule in zip(self._group_names, self._rules):
            if match.start(name) != -1:
                return rule, self.matcher.groupindex[name]
        raise LookupError(f"No rule owns match {match.group(0)!r}")

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def normalize_reporter(reporter: str) -> str:
        """Collapse spacing variants: 'F.Supp.2d' -> 'F. Supp. 2d'"""
        reporter = " ".join(reporter.split())
        return REPORTER_ALIASES.get(reporter, reporter)

    @staticmethod
    def reporter_info(abbreviation: str) -> ReporterInfo | None:
        return REPORTERS.get(RuleTable.normalize_reporter(abbreviation))

    @staticmethod
    def court_info(abbreviation: str) -> CourtInfo | None:
        return COURTS.get(" ".join(abbreviation.split()))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_rule(rule: CitationRule) -> None:
        if not isinstance(rule.citation_type, CitationType):
            raise RuleTableError(f"Rule {rule.name!r}: unknown citation type {rule.citation_type!r}")
        if not rule.pattern:
            raise RuleTableError(f"Rule {rule.name!r}: missing pattern")
        try:
            compiled = re.compile(rule.pattern)
        except re.error as e:
            raise RuleTableError(f"Rule {rule.name!r}: pattern does not compile: {e}") from e
        if compiled.groupindex:
            raise RuleTableError(f"Rule {rule.name!r}: named groups are not allowed")

        positions = [component.position for component in rule.components]
        if len(positions) != len(set(positions)):
            raise RuleTableError(f"Rule {rule.name!r}: duplicate extraction positions {sorted(positions)}")
        if sorted(positions) != list(range(1, compiled.groups + 1)):
            raise RuleTableError(
                f"Rule {rule.name!r}: positions {sorted(positions)} do not match "
                f"the pattern's {compiled.groups} capture groups"
            )


# Built once at import; a malformed table stops the process here.
DEFAULT_RULE_TABLE = RuleTable()
