"""Console output helpers for the mdimport CLI.

All terminal rendering goes through this module so commands stay thin and
the validator itself never prints.
"""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mdimport.markdown.validation_types import ValidationResult

console = Console()
err_console = Console(stderr=True)

RULE = "=" * 60

_CHECK_ICONS = {
    "pass": "[green]✅[/]",
    "fail": "[red]❌[/]",
    "warn": "[yellow]⚠️ [/]",
    "info": "[cyan]ℹ️ [/]",
}


def set_color(enabled: bool) -> None:
    """Turn off colored output when disabled; NO_COLOR in the environment still wins."""
    if not enabled:
        console.no_color = True
        err_console.no_color = True


def print_error(message: str, hint: str | None = None) -> None:
    """Print an error message with an optional hint."""
    err_console.print(f"[bold red]Error:[/] {escape(message)}")
    if hint:
        err_console.print(f"[dim]{escape(hint)}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/] {escape(message)}")


def print_success(message: str) -> None:
    console.print(f"[green]✅ {escape(message)}[/]")


def print_info(message: str) -> None:
    console.print(f"[dim]{escape(message)}[/]")


def print_progress(message: str) -> None:
    console.print(f"[cyan]{escape(message)}...[/]")


def print_validation_report(result: ValidationResult, verbose: bool = False) -> None:
    """Render the validation report.

    Sections appear in a fixed order: document metrics, parse status,
    structure analysis, quality checks, and the pass/fail summary.
    """
    console.print()
    console.print(RULE, markup=False)
    console.print("📋 MARKDOWN VALIDATION REPORT", style="bold")
    console.print(RULE, markup=False)
    console.print()

    metrics = result.metrics
    if metrics is not None:
        console.print("📊 Document Metrics:")
        console.print(f"   Characters: {metrics.characters:,}")
        console.print(f"   Lines: {metrics.lines:,}")
        console.print(f"   Words (approx): {metrics.words:,}")
        console.print(f'   Title: "{result.title}"', markup=False)
        console.print()

    if not result.parsed:
        console.print(f"[red]❌ Markdown parsing failed:[/] {escape(result.parse_error or '')}")
    else:
        console.print("[green]✅ Markdown syntax is valid and parseable[/]")
        console.print()

        census = result.census
        console.print("🔍 Content Structure Analysis:")
        console.print(f"   Headings: {census.headings}")
        for level, count in census.heading_levels.items():
            console.print(f"      H{level}: {count}")
        console.print(f"   Code blocks: {census.code_blocks}")
        if census.languages:
            console.print(f"      Languages: {', '.join(census.languages)}", markup=False)
        console.print(f"   Images: {census.images}")
        console.print(f"   Tables: {census.tables}")
        console.print(f"   Blockquotes: {census.blockquotes}")
        console.print(f"   Lists: {census.lists}")
        console.print(f"   Links: {census.links}")
        console.print()

        console.print("⚠️  Quality Checks:")
        for check in result.checks:
            console.print(f"   {_CHECK_ICONS[check.status]} {escape(check.message)}")

    console.print()
    console.print(RULE, markup=False)
    if result.success:
        console.print("[bold green]✅ VALIDATION PASSED - No critical issues found[/]")
    else:
        console.print("[bold red]❌ VALIDATION FAILED - Critical issues found:[/]")
        for issue in result.issues:
            console.print(f"   • {issue}", markup=False)

    if result.warnings:
        console.print()
        console.print("[yellow]⚠️  WARNINGS (non-critical):[/]")
        for warning in result.warnings:
            console.print(f"   • {warning}", markup=False)
    console.print(RULE, markup=False)
    console.print()

    if verbose and result.detailed_errors:
        print_detailed_errors(result)


def print_detailed_errors(result: ValidationResult) -> None:
    """Render the line-located findings as a table."""
    table = Table(title="Detailed findings", show_lines=False)
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Line", justify="right")
    table.add_column("Element", overflow="fold")
    table.add_column("Additional Info", overflow="fold")

    for error in result.detailed_errors:
        style = "red" if error.severity == "Critical" else "yellow"
        table.add_row(
            f"[{style}]{error.severity}[/]",
            error.category,
            str(error.line),
            escape(error.element),
            escape(error.additional_info),
        )
    console.print(table)


def print_validation_result(result: ValidationResult, output_format: str, verbose: bool) -> None:
    """Print a validation result as a report or as JSON."""
    if output_format == "json":
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_validation_report(result, verbose=verbose)


def print_export_summary(path: Any, result: ValidationResult) -> None:
    """Summarize a CSV export."""
    console.print(f"📄 Validation errors exported to: {path}", markup=False)
    console.print(f"   Total errors/warnings: {len(result.detailed_errors)}")
    console.print(f"   Critical: {result.critical_count}")
    console.print(f"   Warnings: {result.warning_count}")
    console.print()


def print_config(config: dict[str, Any], show_token: bool = False) -> None:
    """Print configuration as a table, masking the management token."""
    table = Table(title="mdimport configuration")
    table.add_column("Key")
    table.add_column("Value")

    for section, values in config.items():
        for key, value in values.items():
            if key == "management_token" and value and not show_token:
                value = f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "****"
            table.add_row(escape(f"{section}.{key}"), escape(str(value)))

    console.print(table)
