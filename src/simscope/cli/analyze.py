# Copyright (c) Syntropy Systems
"""analyze and diff commands."""
from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Optional, cast

import typer
from rich.console import Console

from simscope.analyze import analyze_results, load_summary
from simscope.cli.render import render_analysis, render_differential
from simscope.config import load_config
from simscope.differential import analyze_archetype_differential
from simscope.models.result import MalformedResultError
from simscope.simc import parse_sim_results
from simscope.spec_adapter import SpecAdapterError, YamlSpecAdapter

if TYPE_CHECKING:
    from simscope.models.result import ResultRecord
    from simscope.models.spec import SpecConfig

console = Console()


def load_records(path: Path, scenario: str) -> list[ResultRecord]:
    """Load result records from a summary file or raw simulator output.

    Raw simulator output is recognized by its top-level ``sim`` key.
    """
    try:
        data = cast("object", json.loads(path.read_text()))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResultError("<root>", f"is not valid JSON: {e}") from e

    if isinstance(data, dict) and "sim" in data:
        return [parse_sim_results(cast("dict[str, object]", data), scenario)]
    return load_summary(path)


def _load_inputs(
    path: Path, scenario: str, spec_path: Path | None
) -> tuple[list[ResultRecord], SpecConfig | None]:
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    spec: SpecConfig | None = None
    if spec_path is not None:
        try:
            spec = YamlSpecAdapter(spec_path).get_spec_config()
        except SpecAdapterError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

    try:
        records = load_records(path, scenario)
    except MalformedResultError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    return records, spec


def analyze(
    summary: Path = typer.Argument(
        ..., help="Summary JSON of result records, or raw simulator JSON"
    ),
    spec: Optional[Path] = typer.Option(
        None,
        "--spec",
        "-s",
        help="Spec config YAML (key buffs, off-GCD abilities, resource flow)",
    ),
    scenario: str = typer.Option(
        "st",
        "--scenario",
        help="Scenario id for raw simulator JSON",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print analysis as JSON",
    ),
) -> None:
    """Extract rotation signals from simulation results.

    Example:
        simscope analyze results/baseline_summary.json --spec vengeance.yaml

    """
    records, spec_config = _load_inputs(summary, scenario, spec)
    analyses = analyze_results(records, spec_config, load_config())

    if as_json:
        payload = [a.to_dict() for a in analyses]
        console.print_json(json.dumps(payload))
        return

    for analysis in analyses:
        render_analysis(console, analysis)


def diff(
    summary: Path = typer.Argument(
        ..., help="Summary JSON with one result record per build"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print differential as JSON",
    ),
) -> None:
    """Compare ability DPS shares across builds.

    Example:
        simscope diff results/roster_summary.json

    """
    records, _ = _load_inputs(summary, "st", None)
    differential = analyze_archetype_differential(records, load_config())

    if differential is None:
        console.print("[yellow]Need at least 2 builds to compare[/yellow]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(differential.to_json())
        return

    render_differential(console, differential)
