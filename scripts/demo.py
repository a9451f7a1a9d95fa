#!/usr/bin/env python3
"""
Citation Engine Demo - From Brief to Table of Authorities

Walks a short sample brief through parsing, reference resolution,
validation, short-form rewriting, and the table of authorities.

Run: python scripts/demo.py
"""
from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from citation_engine import CitationEngine, CitationStyle, FormatOptions

console = Console()

SAMPLE_BRIEF = """
Segregation in public schools violates the Equal Protection Clause. See Brown v.
Board of Education, 347 U.S. 483 (1954). The Court rejected "separate but equal."
Brown, 347 U.S. at 495. Id. at 494. Plaintiffs sue under 42 U.S.C. § 1983, and
the complaint survives Fed. R. Civ. P. 12(b)(6). Cf. Miranda v. Arizona, 384 U.S.
436, 444 (1966). Relief under § 1983 is also addressed in Wright & Miller,
Federal Practice and Procedure (3d ed. 2020). Brown v. Board of Education, 347
U.S. 483 (1954) remains the leading case. See U.S. Const. amend. XIV.
"""


def demo_parsing(engine: CitationEngine):
    """Show extraction and reference resolution."""
    console.print("\n")
    console.print(Panel.fit(
        "[bold cyan]Demo 1: Parsing[/bold cyan]\n\n"
        "Every citation is extracted with its offsets; short forms and Id.\n"
        "references are resolved back to the citation they point at.",
        border_style="cyan"
    ))

    console.print("\n[bold]Input text:[/bold]")
    console.print(Panel(escape(SAMPLE_BRIEF.strip()), border_style="dim"))

    citations = engine.parse(SAMPLE_BRIEF)

    table = Table(title="Extracted Citations", box=box.ROUNDED)
    table.add_column("Type", style="cyan")
    table.add_column("As Written", style="white")
    table.add_column("Resolves To", style="green")
    table.add_column("Pin", style="yellow")

    for cite in citations:
        written = cite.short_form or cite.full_citation
        resolved = cite.full_citation if cite.short_form else ""
        table.add_row(cite.citation_type.value, escape(written), escape(resolved), cite.pin_cite or "")

    console.print(table)
    return citations


def demo_validation(engine: CitationEngine):
    """Show per-citation validation."""
    console.print("\n")
    console.print(Panel.fit(
        "[bold cyan]Demo 2: Validation[/bold cyan]\n\n"
        "A bare '§ 1983' names no code, so it is flagged for review.",
        border_style="cyan"
    ))

    for cite in engine.parse_and_validate(SAMPLE_BRIEF):
        mark = "[green]✓[/green]" if cite.is_valid else "[red]✗[/red]"
        console.print(f"  {mark} {escape(cite.short_form or cite.full_citation)}")
        for error in cite.errors:
            console.print(f"      [red]{escape(error)}[/red]")


def demo_formatting(engine: CitationEngine, citations):
    """Show Bluebook vs ALWD output."""
    console.print("\n")
    console.print(Panel.fit(
        "[bold cyan]Demo 3: Formatting[/bold cyan]\n\n"
        "The same records rendered in each style.",
        border_style="cyan"
    ))

    table = Table(box=box.ROUNDED)
    table.add_column("Bluebook", style="white")
    table.add_column("ALWD", style="green")

    plain = FormatOptions(italicize=False)
    for cite in citations:
        if cite.short_form:
            continue
        table.add_row(
            escape(engine.format(cite, CitationStyle.BLUEBOOK, plain)),
            escape(engine.format(cite, CitationStyle.ALWD, plain)),
        )
    console.print(table)


def demo_document(engine: CitationEngine):
    """Show short-form rewriting and the table of authorities."""
    console.print("\n")
    console.print(Panel.fit(
        "[bold cyan]Demo 4: Document Processing[/bold cyan]\n\n"
        "Repeat citations become short forms; the TOA lists each authority once.",
        border_style="cyan"
    ))

    result = engine.process_document(SAMPLE_BRIEF)
    console.print(Panel(escape(result.processed_text.strip()), title="Processed", border_style="dim"))

    for category, entries in result.table_of_authorities.buckets().items():
        if entries:
            console.print(f"\n[bold]{category.title()}[/bold]")
            for cite in entries:
                console.print(f"  {escape(cite.full_citation)}")

    console.print("\n[bold]CSV export:[/bold]")
    console.print(escape(engine.export_table_of_authorities(result.table_of_authorities, "csv")))


def main():
    console.print(Panel.fit(
        "[bold white on blue] Citation Engine [/bold white on blue]\n\n"
        "[bold]From Brief to Table of Authorities[/bold] - Demo",
        border_style="blue",
        padding=(1, 4)
    ))

    engine = CitationEngine()
    citations = demo_parsing(engine)
    demo_validation(engine)
    demo_formatting(engine, citations)
    demo_document(engine)

    console.print("\n")
    console.print(Panel.fit(
        "[bold green]Demo complete![/bold green]\n\n"
        "Try it on your own text: [cyan]citecheck validate brief.txt[/cyan]",
        border_style="green"
    ))


if __name__ == "__main__":
    main()
