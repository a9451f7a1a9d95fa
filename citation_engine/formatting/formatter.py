"""
Citation Formatter - renders parsed citations as styled text.

Every (style, type) pair has at most one FormattingRule. A rule is an
immutable template plus the list of components to italicize; rendering is
plain placeholder substitution followed by a fixed cleanup pass:

    '{partyNames}, {volume} {reporter} {page}{pinCite} ({court} {year})'
        -> 'Miranda v. Arizona, 384 U.S. 436, 444 (1966)'

Types without a rule (unresolved Id. references) render as written.
"""
from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Callable, Mapping

from ..models import (
    CitationStyle,
    CitationType,
    ComponentType,
    FormatOptions,
    FormattingRule,
    ParsedCitation,
)
from ..parsers.rules import strip_signal

logger = logging.getLogger(__name__)


EMPHASIS_OPEN = "<em>"
EMPHASIS_CLOSE = "</em>"


# =============================================================================
# Formatting Rules
# =============================================================================


def _rule(style, citation_type, template, short_form_template=None, italicize=()) -> FormattingRule:
    return FormattingRule(
        style=style,
        citation_type=citation_type,
        template=template,
        short_form_template=short_form_template,
        italicize=tuple(italicize),
    )


_CASE = "{partyNames}, {volume} {reporter} {page}{pinCite} ({court} {year}){parenthetical}"
_CASE_SHORT = "{shortPartyName}, {volume} {reporter} at {pinPage}"
_STATUTE = "{title} {code} § {section}{year}"
_ARTICLE = "{author}, {title}, {volume} {reporter} {page}{pinCite} ({year})"

FORMATTING_RULES: tuple[FormattingRule, ...] = (
    # Bluebook
    _rule(CitationStyle.BLUEBOOK, CitationType.CASE, _CASE, _CASE_SHORT, [ComponentType.PARTY_NAME]),
    _rule(CitationStyle.BLUEBOOK, CitationType.STATUTE, _STATUTE, "§ {section}"),
    _rule(CitationStyle.BLUEBOOK, CitationType.REGULATION, _STATUTE, "§ {section}"),
    _rule(CitationStyle.BLUEBOOK, CitationType.RULE, "{code} {ruleNumber}"),
    _rule(CitationStyle.BLUEBOOK, CitationType.CONSTITUTION, "{title} {section}"),
    _rule(
        CitationStyle.BLUEBOOK, CitationType.BOOK,
        "{author}, {title} {section} ({editionText} {year})",
        "{author}, supra, {section}",
        [ComponentType.TITLE],
    ),
    _rule(CitationStyle.BLUEBOOK, CitationType.ARTICLE, _ARTICLE, "{author}, supra, at {pinPage}", [ComponentType.TITLE]),
    # ALWD: same shapes, publisher inside the book parenthetical
    _rule(CitationStyle.ALWD, CitationType.CASE, _CASE, _CASE_SHORT, [ComponentType.PARTY_NAME]),
    _rule(CitationStyle.ALWD, CitationType.STATUTE, _STATUTE, "§ {section}"),
    _rule(CitationStyle.ALWD, CitationType.REGULATION, _STATUTE, "§ {section}"),
    _rule(CitationStyle.ALWD, CitationType.RULE, "{code} {ruleNumber}"),
    _rule(CitationStyle.ALWD, CitationType.CONSTITUTION, "{title} {section}"),
    _rule(
        CitationStyle.ALWD, CitationType.BOOK,
        "{author}, {title} {section} ({editionText}, {publisher} {year})",
        "{author}, supra, {section}",
        [ComponentType.TITLE],
    ),
    _rule(CitationStyle.ALWD, CitationType.ARTICLE, _ARTICLE, "{author}, supra, at {pinPage}", [ComponentType.TITLE]),
)

# Pin cites follow the first page after a comma; elsewhere they stand alone
PIN_PREFIX: Mapping[CitationType, str] = MappingProxyType({
    CitationType.CASE: ", ",
    CitationType.ARTICLE: ", ",
})

# Years sit inside their own parenthetical only where the template has none
PARENTHESIZED_YEAR = frozenset({CitationType.STATUTE, CitationType.REGULATION})

PLACEHOLDER = re.compile(r"\{(\w+)\}")


def substitute(template: str, fields: Mapping[str, str]) -> str:
    """Replace each {name} with fields[name]; unknown names render empty."""
    return PLACEHOLDER.sub(lambda m: fields.get(m.group(1), ""), template)


def cleanup(text: str) -> str:
    """Tidy whitespace and punctuation left behind by empty placeholders."""
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"\(\s+", "(", text)
    text = re.sub(r"\s+\)", ")", text)
    text = re.sub(r"\s+([,.;:])", r"\1", text)
    text = re.sub(r"\s*\(,?\s*\)", "", text)
    text = re.sub(r"\(,\s*", "(", text)
    text = re.sub(r",\)", ")", text)
    return re.sub(r"[,\s]+$", "", text.strip())


class CitationFormatter:
    """
    Renders citations in Bluebook or ALWD style.

    Usage:
        formatter = CitationFormatter()
        text = formatter.format(citation, CitationStyle.BLUEBOOK)
        rendered = formatter.format_all(citations)  # later repeats become short forms
    """

    def __init__(self, rules: tuple[FormattingRule, ...] | None = None):
        self._rules: dict[tuple[CitationStyle, CitationType], FormattingRule] = {}
        for rule in FORMATTING_RULES if rules is None else rules:
            key = (rule.style, rule.citation_type)
            if key in self._rules:
                raise ValueError(f"Duplicate formatting rule for {rule.style.value} {rule.citation_type.value}")
            self._rules[key] = rule

        self._fields: dict[str, Callable[[ParsedCitation], str]] = {
            "partyNames": self._party_names,
            "shortPartyName": self._short_party_name,
            "volume": lambda c: c.volume or "",
            "reporter": lambda c: c.reporter or "",
            "page": lambda c: c.page or "",
            "pinCite": self._pin_cite,
            "pinPage": lambda c: c.pin_cite or c.page or "",
            "court": lambda c: c.court or "",
            "year": self._year,
            "parenthetical": lambda c: f" ({c.parenthetical})" if c.parenthetical else "",
            "title": lambda c: c.title or "",
            "code": lambda c: c.code or "",
            "section": self._section,
            "ruleNumber": lambda c: c.rule_number or "",
            "author": lambda c: c.author or "",
            "edition": lambda c: f" ({c.edition})" if c.edition else "",
            "editionText": lambda c: c.edition or "",
            "publisher": lambda c: c.publisher or "",
        }

    def rule_for(self, citation_type: CitationType, style: CitationStyle) -> FormattingRule | None:
        return self._rules.get((style, citation_type))

    def format(
        self,
        citation: ParsedCitation,
        style: CitationStyle = CitationStyle.BLUEBOOK,
        options: FormatOptions | None = None,
    ) -> str:
        """Render one citation. Falls back to the text as written when no rule applies."""
        options = options or FormatOptions()
        rule = self.rule_for(citation.citation_type, style)
        if not rule:
            return citation.full_citation

        template = rule.template
        if options.short_form and rule.short_form_template:
            template = rule.short_form_template

        fields = {name: render(citation) for name, render in self._fields.items()}
        text = cleanup(substitute(template, fields))

        if options.italicize:
            text = self.apply_italics(text, citation, rule)
        return text

    def format_for_toa(self, citation: ParsedCitation, style: CitationStyle = CitationStyle.BLUEBOOK) -> str:
        """Full form, plain text, with any leading signal removed."""
        return strip_signal(self.format(citation, style, FormatOptions(italicize=False)))

    def generate_short_form(
        self,
        citation: ParsedCitation,
        prior_citations: list[ParsedCitation],
        style: CitationStyle = CitationStyle.BLUEBOOK,
    ) -> str:
        """Full form on first appearance, short form once the authority has been cited."""
        key = citation.identity_key()
        repeated = any(prior.identity_key() == key for prior in prior_citations)
        return self.format(citation, style, FormatOptions(short_form=repeated))

    def format_all(
        self,
        citations: list[ParsedCitation],
        style: CitationStyle = CitationStyle.BLUEBOOK,
        italicize: bool = True,
    ) -> list[str]:
        """Render a document's citations in order, shortening repeats."""
        seen: set[tuple] = set()
        rendered = []
        for citation in citations:
            key = citation.identity_key()
            rendered.append(self.format(citation, style, FormatOptions(short_form=key in seen, italicize=italicize)))
            seen.add(key)
        return rendered

    def apply_italics(self, text: str, citation: ParsedCitation, rule: FormattingRule) -> str:
        """Wrap the first occurrence of each italicized component in emphasis markers."""
        for component in rule.italicize:
            target = self._italic_target(text, citation, component)
            if target:
                text = text.replace(target, f"{EMPHASIS_OPEN}{target}{EMPHASIS_CLOSE}", 1)
        return text

    # =========================================================================
    # Field Rendering
    # =========================================================================

    def _italic_target(self, text: str, citation: ParsedCitation, component: ComponentType) -> str | None:
        if component == ComponentType.PARTY_NAME:
            candidates = [citation.case_name, citation.first_party]
        elif component == ComponentType.TITLE:
            candidates = [citation.title]
        else:
            logger.debug(f"No italic rendering for {component.value}")
            return None
        return next((c for c in candidates if c and c in text), None)

    def _party_names(self, citation: ParsedCitation) -> str:
        return citation.case_name or citation.title or ""

    def _short_party_name(self, citation: ParsedCitation) -> str:
        return citation.first_party or citation.title or ""

    def _pin_cite(self, citation: ParsedCitation) -> str:
        if not citation.pin_cite:
            return ""
        return f"{PIN_PREFIX.get(citation.citation_type, '')}{citation.pin_cite}"

    def _year(self, citation: ParsedCitation) -> str:
        if not citation.year:
            return ""
        if citation.citation_type in PARENTHESIZED_YEAR:
            date = f"{citation.publisher} {citation.year}" if citation.publisher else citation.year
            return f" ({date})"
        return citation.year

    def _section(self, citation: ParsedCitation) -> str:
        if not citation.section:
            return ""
        if citation.citation_type == CitationType.BOOK:
            return f"§ {citation.section}"
        return citation.section
