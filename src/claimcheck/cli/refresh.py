# Copyright (c) Syntropy Systems
"""claimcheck refresh command."""
from __future__ import annotations

from typing import Optional

import typer

from claimcheck.cli.display import console, styled
from claimcheck.client import ClaimCheckClient, ClaimCheckClientError
from claimcheck.config import load_config
from claimcheck.outcomes import Intent
from claimcheck.resolver import OutcomeResolver


def refresh(
    claim_id: str = typer.Argument(
        ...,
        help="Claim ID to look up",
    ),
    intent: Intent = typer.Option(
        Intent.POSITIVE,
        "--intent",
        case_sensitive=False,
        help="Polarity of the test that produced the claim",
    ),
    server: Optional[str] = typer.Option(
        None,
        "--server", "-s",
        envvar="CLAIMCHECK_API_URL",
        help="Claims API base URL (default from config)",
    ),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        envvar="CLAIMCHECK_API_TOKEN",
        help="Bearer token for the claims API",
    ),
) -> None:
    """Re-read a submitted claim's state and re-derive its verdict."""
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    with ClaimCheckClient(
        server or config.api_url,
        timeout=config.timeout,
        token=token or config.api_token,
    ) as client:
        resolver = OutcomeResolver(client, settle_delay=config.settle_delay)
        try:
            result = resolver.refresh(claim_id, intent)
        except ClaimCheckClientError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

    console.print(f"[bold]Claim:[/bold] {claim_id}")
    console.print(f"[bold]Outcome:[/bold] {result.outcome or '-'}")
    console.print(f"[bold]Status:[/bold] {styled(result.status.value)}")
    console.print(f"[dim]{result.message}[/dim]")
