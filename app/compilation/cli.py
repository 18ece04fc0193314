"""CLI for rendering the statement template and compiled execution reports."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from pydantic import TypeAdapter
from rich.console import Console
from rich.table import Table
from rich.text import Text

from app.common.exceptions import ReportingError
from app.execution.template import generate_empty_financial_template
from app.execution.tree import walk
from config.settings import get_compiled_report_settings
from fin_schemas import CompiledReport, FinancialRow

from .formatting import format_amount, format_comments
from .service import CompiledReportService

app = typer.Typer(help="Compiled execution report CLI")
console = Console()

FACILITIES_PATH_ARGUMENT = typer.Argument(
    ..., exists=True, dir_okay=False, help="JSON file with [{facilityName, data}] records"
)


class DisplayField(str, Enum):
    q1 = "q1"
    q2 = "q2"
    q3 = "q3"
    q4 = "q4"
    cumulative_balance = "cumulative_balance"


def _label(title: str, depth: int, is_category: bool) -> Text:
    return Text("  " * depth + title, style="bold" if is_category else "")


@app.command("template")
def template(
    json_output: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    rows = generate_empty_financial_template()
    if json_output:
        payload = TypeAdapter(list[FinancialRow]).dump_json(rows, by_alias=True, indent=2)
        typer.echo(payload.decode("utf-8"))
        return

    table = Table(title="Execution Statement Template", show_lines=False)
    table.add_column("Id", style="cyan")
    table.add_column("Line item")
    for row, depth in walk(rows):
        table.add_row(row.id, _label(row.title, depth, row.is_category))
    console.print(table)


@app.command("compile")
def compile_(
    facilities_path: Path = FACILITIES_PATH_ARGUMENT,
    field: Optional[DisplayField] = typer.Option(None, "--field", help="Amount column to display"),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON output"),
    strict: bool = typer.Option(False, "--strict", help="Reject trees that deviate from the template"),
) -> None:
    settings = get_compiled_report_settings()
    if strict:
        settings = settings.model_copy(update={"reconciliation_mode": "strict"})

    try:
        payload = json.loads(facilities_path.read_text(encoding="utf-8"))
        report = CompiledReportService(settings).build_from_payload(payload)
    except json.JSONDecodeError as exc:
        console.print(f"Invalid JSON in {facilities_path}: {exc}", style="red", markup=False)
        raise typer.Exit(code=1) from exc
    except ReportingError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1) from exc

    if json_output:
        typer.echo(report.model_dump_json(by_alias=True, indent=2))
        return

    _print_report(report, field.value if field else settings.display_field, settings.placeholder, settings.amount_decimals)


def _print_report(report: CompiledReport, field: str, placeholder: str, decimals: int) -> None:
    table = Table(title=f"Compiled Report ({field})", show_lines=False)
    table.add_column("Event Details")
    for name in report.facility_names:
        table.add_column(Text(name), justify="right")
    table.add_column("Total", justify="right", style="bold")
    table.add_column("Comments")

    for row in report.rows:
        cells = []
        for name in report.facility_names:
            value = row.per_facility_values.get(name)
            cells.append(format_amount(getattr(value, field) if value is not None else None, placeholder, decimals))
        total = getattr(row.total_row, field) if row.total_row is not None else None
        table.add_row(
            _label(row.title, row.depth, row.is_category),
            *cells,
            format_amount(total, placeholder, decimals),
            Text(format_comments(row.per_facility_values)),
        )
    console.print(table)


def main() -> None:  # pragma: no cover - CLI entry point
    app()


if __name__ == "__main__":  # pragma: no cover - CLI
    main()
