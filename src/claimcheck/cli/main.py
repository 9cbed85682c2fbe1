# Copyright (c) Syntropy Systems
"""Main CLI entry point for claimcheck."""

import typer

from claimcheck.cli.display import setup_logging
from claimcheck.cli.init_cmd import init
from claimcheck.cli.refresh import refresh
from claimcheck.cli.report import report
from claimcheck.cli.run import run
from claimcheck.cli.sample import sample

app = typer.Typer(
    name="claimcheck",
    help=(
        "Scripted test runs against a claims-adjudication service. "
        "Sample test cases, submit them as claims, classify the outcomes."
    ),
    no_args_is_help=True,
    add_completion=False,
)


def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show library logging",
    ),
) -> None:
    """Scripted test runs against a claims-adjudication service."""
    setup_logging(verbose)


_ = app.callback()(main)

# Register commands
_ = app.command()(init)
_ = app.command()(sample)
_ = app.command()(run)
_ = app.command()(refresh)
_ = app.command()(report)


if __name__ == "__main__":
    app()
