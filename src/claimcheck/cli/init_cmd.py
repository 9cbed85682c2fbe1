# Copyright (c) Syntropy Systems
"""claimcheck init command."""

from pathlib import Path

import typer
import yaml
from rich.console import Console

from claimcheck.config import CONFIG_DIR_NAME, CONFIG_FILE_NAME, ClaimCheckConfig

console = Console()


def init(
    path: Path = typer.Argument(
        Path(),
        help="Directory to initialize (default: current directory)",
    ),
) -> None:
    """Initialize a claimcheck project.

    Creates a .claimcheck directory with a default config.yaml.
    """
    target = path.resolve()
    config_dir = target / CONFIG_DIR_NAME

    if config_dir.exists():
        console.print(f"[yellow]Already initialized:[/yellow] {config_dir}")
        return

    config_dir.mkdir(parents=True)

    # Unset values are omitted
    config = {k: v for k, v in ClaimCheckConfig().to_dict().items() if v is not None}

    config_path = config_dir / CONFIG_FILE_NAME
    with config_path.open("w") as f:
        yaml.dump(config, f, default_flow_style=False)

    console.print(f"[green]Initialized claimcheck project:[/green] {config_dir}")
    console.print(f"  [dim]config:[/dim] {config_path}")
