# Copyright (c) Syntropy Systems
"""claimcheck report command."""
from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from claimcheck.aggregator import ResultAggregator
from claimcheck.cli.display import console, render_results, render_summary
from claimcheck.models import RunReport


def report(
    path: Path = typer.Argument(
        ...,
        help="Results file written by 'claimcheck run --output'",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Show the results and summary of a saved run."""
    try:
        saved = RunReport.model_validate_json(path.read_bytes())
    except (OSError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Could not read {path}: {e}")
        raise typer.Exit(1) from e

    console.print(f"[bold]Run:[/bold] {saved.run_id}")
    if saved.started_at:
        console.print(f"[dim]{saved.started_at} -> {saved.finished_at or '-'}[/dim]")

    if not saved.results:
        console.print("[dim]No results recorded[/dim]")
        return

    render_results(saved.results)
    render_summary(ResultAggregator(saved.results).summary())
