# Copyright (c) Syntropy Systems
"""simscope profileset show command."""
from __future__ import annotations

from pathlib import Path

import typer

from simscope.cli.profileset.common import console, load_or_exit
from simscope.cli.render import render_profileset


def show(
    output: Path = typer.Argument(..., help="Raw simulator JSON from a profileset run"),
    scenario: str = typer.Option("st", "--scenario", help="Scenario id"),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the parsed comparison as JSON",
    ),
) -> None:
    """Rank profileset variants against the baseline.

    Example:
        simscope profileset show results/talents_st.json

    """
    results = load_or_exit(output, scenario)

    if as_json:
        console.print_json(results.to_json())
        return

    render_profileset(console, results)
