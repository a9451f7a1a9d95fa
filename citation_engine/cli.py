"""
citecheck - command-line front end for the citation engine.

Examples:
  citecheck parse brief.txt
  citecheck validate brief.txt --style ALWD
  citecheck toa brief.txt
  citecheck export brief.txt --format csv > citations.csv
  cat brief.txt | citecheck process -
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .authorities.export import EXPORT_FORMATS
from .config import Settings
from .engine import CitationEngine, InputTooLargeError
from .models import CitationStyle, ParsedCitation

logger = logging.getLogger(__name__)

console = Console()


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _style(value: str) -> CitationStyle:
    for style in CitationStyle:
        if style.value.lower() == value.lower():
            return style
    raise argparse.ArgumentTypeError(
        f"unknown style {value!r} (choose from {', '.join(s.value for s in CitationStyle)})"
    )


def _citation_table(citations: list[ParsedCitation], title: str, show_errors: bool = False) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Citation", style="white")
    table.add_column("Short Form", style="green")
    if show_errors:
        table.add_column("Valid")
        table.add_column("Errors", style="red")

    for i, cite in enumerate(citations, 1):
        row = [str(i), cite.citation_type.value, escape(cite.full_citation), escape(cite.short_form or "")]
        if show_errors:
            row.append("[green]✓[/green]" if cite.is_valid else "[red]✗[/red]")
            row.append(escape("; ".join(cite.errors)))
        table.add_row(*row)
    return table


# =============================================================================
# Commands
# =============================================================================


def cmd_parse(engine: CitationEngine, args: argparse.Namespace) -> int:
    citations = engine.parse(_read_input(args.file))
    console.print(_citation_table(citations, f"{len(citations)} citations"))
    return 0


def cmd_validate(engine: CitationEngine, args: argparse.Namespace) -> int:
    citations = engine.parse_and_validate(_read_input(args.file))
    console.print(_citation_table(citations, "Validation", show_errors=True))

    invalid = [c for c in citations if not c.is_valid]
    if invalid:
        console.print(f"\n[red]{len(invalid)} of {len(citations)} citations need review[/red]")
        for cite in invalid:
            for suggestion in cite.suggestions:
                console.print(f"  [yellow]→[/yellow] {escape(cite.full_citation)}: {escape(suggestion)}")
        return 1

    console.print(f"\n[green]All {len(citations)} citations valid[/green]")
    return 0


def cmd_toa(engine: CitationEngine, args: argparse.Namespace) -> int:
    citations = engine.parse(_read_input(args.file))
    toa = engine.generate_table_of_authorities(citations, args.style)

    for category, entries in toa.buckets().items():
        if not entries:
            continue
        console.print(f"\n[bold]{category.title()}[/bold]")
        for cite in entries:
            console.print(f"  {escape(cite.full_citation)}")
    if not len(toa):
        console.print("[dim]No citations found[/dim]")
    return 0


def cmd_export(engine: CitationEngine, args: argparse.Namespace) -> int:
    citations = engine.parse_and_validate(_read_input(args.file))
    if args.toa:
        output = engine.export_table_of_authorities(
            engine.generate_table_of_authorities(citations, args.style), args.format
        )
    else:
        output = engine.export_citations(citations, args.format)
    sys.stdout.write(output + "\n")
    return 0


def cmd_process(engine: CitationEngine, args: argparse.Namespace) -> int:
    result = engine.process_document(_read_input(args.file), style=args.style)
    sys.stdout.write(result.processed_text)
    invalid = sum(1 for r in result.validation_results if not r.is_valid)
    if invalid:
        logger.warning(f"{invalid} citations failed validation")
    return 0


# =============================================================================
# Entry Point
# =============================================================================


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="citecheck",
        description="Extract, validate, and format legal citations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    style_help = f"Citation style (default: {settings.style.value})"
    parser.add_argument("--style", type=_style, default=settings.style, help=style_help)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    # Also accepted after the command; SUPPRESS keeps the global value otherwise
    style_option = argparse.ArgumentParser(add_help=False)
    style_option.add_argument("--style", type=_style, default=argparse.SUPPRESS, help=style_help)

    commands = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("parse", cmd_parse, "List the citations found in a document"),
        ("validate", cmd_validate, "Validate citations; exit 1 if any are invalid"),
        ("toa", cmd_toa, "Print a table of authorities"),
        ("export", cmd_export, "Export citations as json, csv, or bibtex-like"),
        ("process", cmd_process, "Rewrite repeat citations as short forms"),
    ):
        sub = commands.add_parser(name, help=help_text, parents=[style_option])
        sub.add_argument("file", help="Input file, or - for stdin")
        sub.set_defaults(handler=handler)
        if name == "export":
            sub.add_argument("--format", choices=EXPORT_FORMATS, default="json", help="Output format")
            sub.add_argument("--toa", action="store_true", help="Export the table of authorities instead")

    return parser


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    engine = CitationEngine(settings=settings)
    try:
        return args.handler(engine, args)
    except (OSError, InputTooLargeError) as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
