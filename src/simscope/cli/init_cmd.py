# Copyright (c) Syntropy Systems
"""simscope init command."""

from pathlib import Path

import typer
import yaml
from rich.console import Console

from simscope.config import default_config_values

console = Console()


def init(
    path: Path = typer.Argument(
        Path(),
        help="Directory to initialize (default: current directory)",
    ),
) -> None:
    """Initialize a new simscope project.

    Creates a .simscope directory with configuration and a golden
    baseline directory.
    """
    target = path.resolve()
    simscope_dir = target / ".simscope"

    if simscope_dir.exists():
        console.print(f"[yellow]Already initialized:[/yellow] {simscope_dir}")
        return

    # Create directory structure
    simscope_dir.mkdir(parents=True)
    golden_dir = simscope_dir / "golden"
    golden_dir.mkdir()

    # Create default config
    config_path = simscope_dir / "config.yaml"
    with config_path.open("w") as f:
        yaml.dump(default_config_values(), f, default_flow_style=False)

    console.print(f"[green]Initialized simscope project:[/green] {simscope_dir}")
    console.print(f"  [dim]config:[/dim] {config_path}")
    console.print(f"  [dim]golden:[/dim] {golden_dir}")
