# Copyright (c) Syntropy Systems
"""simscope profileset check command."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from simscope.cli.profileset.common import console, golden_store_or_exit, load_or_exit
from simscope.cli.render import render_regressions
from simscope.config import load_config
from simscope.models.result import MalformedResultError
from simscope.profilesets import check_regressions


def check(
    output: Path = typer.Argument(..., help="Raw simulator JSON from a profileset run"),
    label: str = typer.Argument(..., help="Golden baseline label"),
    scenario: str = typer.Option("st", "--scenario", help="Scenario id"),
    warn: Optional[float] = typer.Option(
        None,
        "--warn",
        help="Warn when a variant drops more than this % (default from config)",
    ),
    error: Optional[float] = typer.Option(
        None,
        "--error",
        help="Fail when a variant drops more than this % (default from config)",
    ),
) -> None:
    """Check a profileset result against its golden baseline.

    Saves the result as golden when the label has none yet. Exits with
    status 1 when any variant regressed.

    Example:
        simscope profileset check results/talents_st.json talents_st

    """
    results = load_or_exit(output, scenario)
    store = golden_store_or_exit()

    try:
        golden = store.load(label)
    except MalformedResultError as e:
        console.print(f"[red]Error:[/red] Golden results for '{label}' are invalid: {e}")
        raise typer.Exit(1) from e

    if golden is None:
        path = store.save(label, results)
        console.print(
            f"[yellow]No golden results for '{label}'.[/yellow] Saved current results."
        )
        console.print(f"  [dim]path:[/dim] {path}")
        return

    report = check_regressions(results, golden, warn, error, settings=load_config())
    render_regressions(console, report)

    if not report.passed:
        raise typer.Exit(1)
