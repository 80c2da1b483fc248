# Copyright (c) Syntropy Systems
"""simscope profileset save-golden command."""
from __future__ import annotations

from pathlib import Path

import typer

from simscope.cli.profileset.common import console, golden_store_or_exit, load_or_exit


def save_golden(
    output: Path = typer.Argument(..., help="Raw simulator JSON from a profileset run"),
    label: str = typer.Argument(..., help="Golden baseline label"),
    scenario: str = typer.Option("st", "--scenario", help="Scenario id"),
) -> None:
    """Save a profileset result as the golden baseline for a label.

    Replaces any existing golden result for the label.

    Example:
        simscope profileset save-golden results/talents_st.json talents_st

    """
    results = load_or_exit(output, scenario)
    store = golden_store_or_exit()

    replaced = store.exists(label)
    path = store.save(label, results)

    verb = "Replaced" if replaced else "Saved"
    console.print(f"[green]{verb} golden results:[/green] {label}")
    console.print(f"  [dim]path:[/dim] {path}")
    console.print(f"  [dim]variants:[/dim] {len(results.variants)}")
