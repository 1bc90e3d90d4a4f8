#!/usr/bin/env python3
"""
CLI interface for the ICS statement parser.
"""
import logging
import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .core.classifier import (
    ExchangeRateAnnotation, HeaderRow, RowClassifier, Skip, TransactionCandidate,
)
from .core.detectors import TemplateDetector, detect_template
from .core.loader import PDFLoader
from .core.rows import group_into_rows
from .core.runner import parse_statement
from .core.validation import validate_total

app = typer.Typer(help="ICS credit card statement parser")
console = Console()

OUTCOME_STYLES = {
    TransactionCandidate: "green",
    ExchangeRateAnnotation: "cyan",
    HeaderRow: "blue",
    Skip: "dim",
}


@app.command()
def parse(
    pdf_path: Path = typer.Argument(..., help="Path to PDF file"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output JSON file path"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Template ID to use"),
    debug_overlay: Optional[Path] = typer.Option(None, "--debug-overlay", help="Create debug overlay images"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Parse an ICS statement PDF into structured JSON."""

    if not pdf_path.exists():
        console.print(f"[red]Error: PDF file not found: {pdf_path}[/red]")
        raise typer.Exit(1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            task = progress.add_task("Parsing PDF...", total=None)

            result = parse_statement(pdf_path, template_id=template, verbose=verbose)

            if debug_overlay:
                progress.update(task, description="Creating debug overlay...")
                from .tools.debug_overlay import create_debug_overlay
                create_debug_overlay(pdf_path, template, debug_overlay)

        if output:
            output.write_text(result.model_dump_json(indent=2))
            console.print(f"[green]✓ Parsed {len(result.transactions)} transactions! Output written to: {output}[/green]")
        else:
            console.print_json(result.model_dump_json())

        for warning in result.warnings:
            console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")

        if debug_overlay:
            console.print(f"[blue]Debug overlay created in: {debug_overlay}[/blue]")

    except Exception as e:
        console.print(f"[red]Error parsing PDF: {escape(str(e))}[/red]")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(1)


@app.command()
def detect(
    pdf_path: Path = typer.Argument(..., help="Path to PDF file")
):
    """Detect which template matches a PDF file."""
    try:
        template = detect_template(pdf_path)
    except Exception as e:
        console.print(f"[red]Error detecting template: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not template:
        console.print("[red]No matching template found[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Detected template: {template}[/green]")


@app.command()
def rows(
    pdf_path: Path = typer.Argument(..., help="Path to PDF file"),
    template: str = typer.Option("ics_nl_v1", "--template", "-t", help="Template ID to use"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Show the reconstructed rows and how each one is classified."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        template_config = TemplateDetector().get_template(template)
        with PDFLoader(pdf_path, **template_config.get('loader', {})) as loader:
            items = loader.text_items()
    except Exception as e:
        console.print(f"[red]Error reading PDF: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    y_tolerance = template_config.get('rows', {}).get('y_tolerance', 3)
    classifier = RowClassifier(template_config)

    table = Table(title=f"{pdf_path.name}")
    table.add_column("Page", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Kind")
    table.add_column("Text")

    for row in group_into_rows(items, y_tolerance):
        outcome = classifier.classify(row)
        kind = type(outcome).__name__
        if isinstance(outcome, Skip):
            kind = f"Skip ({outcome.reason})"
        style = OUTCOME_STYLES.get(type(outcome))
        table.add_row(str(row.page), f"{row.y:.1f}", kind, escape(" | ".join(row.texts)), style=style)

    console.print(table)


@app.command()
def validate(
    json_path: Path = typer.Argument(..., help="Path to JSON file to validate")
):
    """Validate a parse result JSON file against the schema."""
    from .models.schema import ParseResult

    try:
        data = ParseResult.model_validate_json(json_path.read_text())
    except Exception as e:
        console.print(f"[red]Validation failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ JSON is valid[/green]")
    console.print(f"Statement: {data.statement_id}")
    console.print(f"Statement Date: {data.header.statement_date}")
    console.print(f"Transactions: {len(data.transactions)}")
    console.print(f"Debit total: €{data.debit_total:.2f} (statement: €{data.header.total_new_expenses:.2f})")

    for warning in validate_total(data.transactions, data.header.total_new_expenses):
        console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")


if __name__ == "__main__":
    app()
