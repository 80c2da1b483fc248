# Copyright (c) Syntropy Systems
"""Shared helpers for profileset commands."""
from __future__ import annotations

from typing import TYPE_CHECKING

import typer
from rich.console import Console

from simscope.config import get_golden_dir, require_simscope_dir
from simscope.models.result import MalformedResultError
from simscope.profilesets import GoldenStore, load_profileset_output

if TYPE_CHECKING:
    from pathlib import Path

    from simscope.models.profileset import ProfilesetResult

console = Console()


def load_or_exit(path: Path, scenario: str) -> ProfilesetResult:
    """Parse raw simulator output, exiting with an error message on failure."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    try:
        return load_profileset_output(path, scenario)
    except MalformedResultError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def golden_store_or_exit() -> GoldenStore:
    """Golden store of the current project."""
    try:
        simscope_dir = require_simscope_dir()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    return GoldenStore(get_golden_dir(simscope_dir))
