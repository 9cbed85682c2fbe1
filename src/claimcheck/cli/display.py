# Copyright (c) Syntropy Systems
"""Shared rendering and loading helpers for claimcheck commands."""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from claimcheck.corpus import resolve_polarity
from claimcheck.models import TestCase

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from claimcheck.models import RunSummary, TestResult

console = Console()

_CORPUS_ADAPTER: TypeAdapter[list[TestCase]] = TypeAdapter(list[TestCase])

STATUS_STYLES = {
    "passed": "green",
    "failed": "red",
    "pending": "yellow",
    "running": "blue",
    "completed": "green",
}


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    # httpcore is noisy at DEBUG
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def load_corpus(path: Path) -> list[TestCase]:
    """Load test case records from a JSON file.

    Accepts either a bare list or an object with a ``data`` list. Exits
    with code 1 when the file can't be parsed.
    """
    try:
        records = json.loads(path.read_text())
        if isinstance(records, dict):
            records = records.get("data", [])
        return _CORPUS_ADAPTER.validate_python(records)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Could not load corpus {path}: {e}")
        raise typer.Exit(1) from e


def styled(value: str) -> str:
    """Wrap a status value in its rich style."""
    style = STATUS_STYLES.get(value, "white")
    return f"[{style}]{value}[/{style}]"


def render_selection(test_cases: Iterable[TestCase]) -> None:
    """Print a table of test cases chosen for a run."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Intervention")
    table.add_column("Polarity")
    table.add_column("Source", style="dim")
    table.add_column("Title")

    for tc in test_cases:
        tag = resolve_polarity(tc)
        table.add_row(
            str(tc.id) if tc.id is not None else "-",
            str(tc.intervention_id) if tc.intervention_id else "-",
            tag.polarity.value if tag.polarity else "-",
            tag.origin,
            tc.title,
        )

    console.print(table)


def render_results(results: Iterable[TestResult]) -> None:
    """Print one row per result."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Claim", style="dim")
    table.add_column("Name")
    table.add_column("Polarity")
    table.add_column("Status")
    table.add_column("Outcome")
    table.add_column("Duration", justify="right")
    table.add_column("Message")

    for result in results:
        table.add_row(
            result.claim_id or "-",
            result.name,
            result.test_polarity.value if result.test_polarity else "-",
            styled(result.status.value),
            result.outcome or "-",
            f"{result.duration}ms",
            result.error or result.message or "-",
        )

    console.print(table)


def render_summary(summary: RunSummary) -> None:
    """Print the run totals on one line."""
    console.print(
        f"[bold]Total:[/bold] {summary.total}  "
        f"[green]Passed:[/green] {summary.passed}  "
        f"[red]Failed:[/red] {summary.failed}  "
        f"[yellow]Pending:[/yellow] {summary.pending}  "
        f"[bold]Pass rate:[/bold] {summary.pass_rate}%"
    )
