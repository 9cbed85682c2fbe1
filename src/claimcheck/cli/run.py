# Copyright (c) Syntropy Systems
"""claimcheck run command."""
from __future__ import annotations

import random
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer

from claimcheck.classifier import ResultBuilder
from claimcheck.cli.display import (
    console,
    load_corpus,
    render_results,
    render_summary,
    styled,
)
from claimcheck.client import ClaimCheckClient, ClaimCheckClientError
from claimcheck.config import load_config
from claimcheck.corpus import select_test_cases
from claimcheck.exceptions import RunPreconditionError
from claimcheck.executor import ClaimSubmitter
from claimcheck.models import ItemStatus, RunReport
from claimcheck.orchestrator import Orchestrator
from claimcheck.resolver import OutcomeResolver

if TYPE_CHECKING:
    from claimcheck.models import RunItem, TestCase
    from claimcheck.orchestrator import RunState


def _print_progress(run: RunState, item: RunItem) -> None:
    position = f"{run.current_index + 1}/{len(run.items)}" if run.is_running else "-"
    if item.status is ItemStatus.RUNNING:
        console.print(f"[blue]Running test {position}:[/blue] {item.test_case.title}")
    else:
        console.print(f"  {styled(item.status.value)}")


def _scope(
    client: ClaimCheckClient,
    intervention: Optional[list[int]],
    package: Optional[int],
) -> Optional[set[int]]:
    wanted = set(intervention) if intervention else None
    if package is None:
        return wanted
    in_package = set(client.get_package_intervention_ids(package))
    return wanted & in_package if wanted is not None else in_package


def write_report(path: Path, run: RunState) -> None:
    """Write a run's results as JSON."""
    report = RunReport(
        run_id=run.run_id,
        started_at=run.started_at,
        finished_at=run.finished_at,
        summary=run.summary(),
        results=run.results,
    )
    _ = path.write_text(report.model_dump_json(indent=2))


def run(
    corpus: Optional[Path] = typer.Option(
        None,
        "--corpus", "-c",
        help="JSON file of test case records (default: fetch from the service)",
        exists=True,
        dir_okay=False,
    ),
    package: Optional[int] = typer.Option(
        None,
        "--package", "-p",
        help="Only run interventions belonging to this package",
    ),
    intervention: Optional[list[int]] = typer.Option(
        None,
        "--intervention", "-i",
        help="Only run these interventions (repeatable)",
    ),
    run_all: bool = typer.Option(
        False,
        "--all",
        help="Run every matching test case instead of a random sample",
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
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Write results as JSON to this file",
    ),
    server: Optional[str] = typer.Option(
        None,
        "--server", "-s",
        envvar="CLAIMCHECK_API_URL",
        help="Claims API base URL (default from config)",
    ),
    user: Optional[str] = typer.Option(
        None,
        "--user", "-u",
        envvar="CLAIMCHECK_USER",
        help="Recorded as the creator of persisted results",
    ),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        envvar="CLAIMCHECK_API_TOKEN",
        help="Bearer token for the claims API",
    ),
    save: bool = typer.Option(
        True,
        "--save/--no-save",
        help="Persist each result to the service",
    ),
    register: bool = typer.Option(
        True,
        "--register/--no-register",
        help="Create missing patient, provider and practitioner records",
    ),
) -> None:
    """Submit test cases as claims and classify the outcomes.

    Test cases that fail are reported in the table; the command itself
    only fails when the run can't be carried out.

    Examples:
        claimcheck run --corpus cases.json --seed 7
        claimcheck run --package 3 --all --output results.json
    """
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    cap = max_per_type if max_per_type is not None else config.max_per_polarity
    file_cases: Optional[list[TestCase]] = load_corpus(corpus) if corpus else None

    with ClaimCheckClient(
        server or config.api_url,
        timeout=config.timeout,
        token=token or config.api_token,
    ) as client:
        try:
            test_cases = file_cases if file_cases is not None else client.list_test_cases()
            intervention_ids = _scope(client, intervention, package)
        except ClaimCheckClientError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

        if run_all:
            selected = [
                tc
                for tc in test_cases
                if intervention_ids is None or tc.intervention_id in intervention_ids
            ]
        else:
            selected = select_test_cases(
                test_cases,
                cap,
                random.Random(seed),  # noqa: S311
                intervention_ids=intervention_ids,
            )

        resolver = OutcomeResolver(client, settle_delay=config.settle_delay)
        builder = ResultBuilder(
            resolver,
            store=client if save else None,
            user=user or config.user,
        )
        orchestrator = Orchestrator(
            ClaimSubmitter(client, builder, register_resources=register),
            pacing_delay=config.pacing_delay,
            on_progress=_print_progress,
        )
        state = orchestrator.admit(selected)

        try:
            _ = orchestrator.run_batch(state)
        except RunPreconditionError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

    render_results(state.results)
    render_summary(state.summary())

    if output is not None:
        write_report(output, state)
        console.print(f"[green]Exported results to {output}[/green]")
