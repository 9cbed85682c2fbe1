# Copyright (c) Syntropy Systems
"""claimcheck sample command."""
from __future__ import annotations

import random
from pathlib import Path
from typing import Optional

import typer

from claimcheck.cli.display import console, load_corpus, render_selection
from claimcheck.config import load_config
from claimcheck.corpus import select_test_cases


def sample(
    corpus: Path = typer.Option(
        ...,
        "--corpus", "-c",
        help="JSON file of test case records",
        exists=True,
        dir_okay=False,
    ),
    max_per_type: Optional[int] = typer.Option(
        None,
        "--max-per-type", "-n",
        min=0,
        help="Test cases per polarity per intervention (default from config)",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for a reproducible selection",
    ),
    intervention: Optional[list[int]] = typer.Option(
        None,
        "--intervention", "-i",
        help="Only sample these interventions (repeatable)",
    ),
) -> None:
    """Show which test cases a run would submit.

    Nothing is sent to the claims service.
    """
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    test_cases = load_corpus(corpus)
    cap = max_per_type if max_per_type is not None else config.max_per_polarity
    selected = select_test_cases(
        test_cases,
        cap,
        random.Random(seed),  # noqa: S311
        intervention_ids=intervention or None,
    )

    if not selected:
        console.print("[dim]No test cases selected[/dim]")
        return

    render_selection(selected)
    console.print(f"[dim]{len(selected)} of {len(test_cases)} test cases selected[/dim]")
