# Copyright (c) Syntropy Systems
"""Rich rendering of analysis and profileset results."""
from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from simscope.models.analysis import BuffWindowGap, CooldownUsage, ResourceWasteEstimate
from simscope.profilesets import compare_results

if TYPE_CHECKING:
    from rich.console import Console

    from simscope.models.analysis import ArchetypeDifferential, ScenarioAnalysis
    from simscope.models.profileset import ProfilesetResult, RegressionReport

TOP_N = 10


def format_pct(fraction: float, digits: int = 1) -> str:
    """Format a 0-1 fraction as a percentage."""
    return f"{fraction * 100:.{digits}f}%"


def render_analysis(console: Console, analysis: ScenarioAnalysis) -> None:
    """Print every facet of one scenario analysis."""
    console.print(f"\n[bold]Analysis: {analysis.scenario_name}[/bold]")
    console.print(f"  [dim]dps:[/dim] {round(analysis.dps):,}")

    contrib = analysis.dps_contribution
    if contrib.low_contrib:
        console.print("\n[bold]Low-contribution abilities (<1% DPS)[/bold]")
        for a in contrib.low_contrib:
            console.print(
                f"  {a.name}: {format_pct(a.fraction, 2)} ({a.executes:.1f} casts)"
            )
    console.print("\n[bold]Major contributors (>10% DPS)[/bold]")
    for a in contrib.high_contrib:
        console.print(f"  {a.name}: {format_pct(a.fraction)} ({round(a.dps):,} DPS)")

    buffs = analysis.buff_uptime
    if buffs.found:
        table = Table(title="Key buff uptimes", show_header=True, header_style="bold")
        table.add_column("Buff")
        table.add_column("Uptime", justify="right")
        table.add_column("", style="yellow")
        for b in buffs.found:
            table.add_row(b.name, f"{b.uptime:.1f}%", b.status or "")
        console.print(table)
    for warning in buffs.warnings:
        console.print(f"  [yellow]Warning:[/yellow] {warning}")

    gcd = analysis.gcd_usage
    console.print("\n[bold]GCD usage[/bold]")
    console.print(f"  [dim]fight length:[/dim] {gcd.fight_length:.0f}s")
    console.print(f"  [dim]estimated GCDs:[/dim] {gcd.estimated_gcds:.0f}")
    console.print(f"  [dim]on-GCD damage casts:[/dim] {gcd.total_casts:.0f}")
    console.print(f"  [dim]efficiency:[/dim] {format_pct(gcd.efficiency)}")
    if gcd.warning:
        console.print(f"  [yellow]Warning:[/yellow] {gcd.warning}")

    if analysis.resource_waste:
        console.print("\n[bold]Resource waste[/bold]")
        for name, waste in analysis.resource_waste.items():
            if isinstance(waste, ResourceWasteEstimate):
                console.print(
                    f"  {name}: gen {waste.gen_per_sec:.1f}/s, "
                    f"spend {waste.spend_per_sec:.1f}/s, "
                    f"net +{waste.net_per_sec:.1f}/s (cap {waste.cap:g}), "
                    f"~{waste.estimated_waste_per_sec:.1f}/s lost"
                )
            else:
                console.print(
                    f"  {name}: {round(waste.total_lost)} total lost "
                    f"({waste.per_second:.1f}/s)"
                )

    if analysis.cooldown_utilization:
        console.print("\n[bold]Cooldown utilization[/bold]")
        for finding in analysis.cooldown_utilization:
            if isinstance(finding, CooldownUsage):
                waste = (
                    f" ({finding.wasted_sec:.1f}s wasted)" if finding.wasted_sec > 0 else ""
                )
                console.print(
                    f"  {finding.ability}: {finding.actual_casts:.1f}/"
                    f"{finding.expected_casts} casts, "
                    f"{finding.utilization:.0f}% util{waste}"
                )
            elif isinstance(finding, BuffWindowGap):
                console.print(
                    f"  {finding.buff}: {finding.actual_uptime:.1f}% uptime "
                    f"(expected ~{finding.expected_uptime:.0f}%)"
                )

    if analysis.dpgcd:
        table = Table(title="DPGCD ranking", show_header=True, header_style="bold")
        table.add_column("Ability")
        table.add_column("Dmg/cast", justify="right")
        table.add_column("Share", justify="right")
        table.add_column("Casts", justify="right")
        for entry in analysis.dpgcd[:TOP_N]:
            table.add_row(
                entry.name,
                f"{round(entry.dpgcd):,}",
                format_pct(entry.fraction),
                f"{entry.executes:.1f}",
            )
        console.print(table)


def render_differential(console: Console, differential: ArchetypeDifferential) -> None:
    """Print the archetype differential."""
    if differential.high_variance:
        table = Table(
            title="High-variance abilities (>5% DPS fraction spread)",
            show_header=True,
            header_style="bold",
        )
        table.add_column("Ability")
        table.add_column("Spread", justify="right")
        table.add_column("Best")
        table.add_column("Worst")
        for d in differential.high_variance[:TOP_N]:
            table.add_row(
                d.ability,
                format_pct(d.range),
                f"{d.best.build}: {format_pct(d.best.fraction)}",
                f"{d.worst.build}: {format_pct(d.worst.fraction)}",
            )
        console.print(table)
    else:
        console.print("[dim]No high-variance abilities[/dim]")

    if differential.build_specific:
        console.print("\n[bold]Build-specific abilities[/bold]")
        for b in differential.build_specific:
            console.print(f"  {b.ability}: {', '.join(b.builds)}")

    console.print(
        f"\n[dim]{len(differential.universal)} universal abilities[/dim]"
    )


def render_profileset(console: Console, results: ProfilesetResult) -> None:
    """Print profileset variants ranked by DPS."""
    console.print(f"\n[bold]{results.scenario_name}[/bold]")
    console.print(
        f"  [dim]baseline:[/dim] {results.baseline.name} "
        f"({round(results.baseline.dps):,} DPS)"
    )

    if not results.variants:
        console.print("[dim]No profileset variants found[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Rank", style="dim")
    table.add_column("Name")
    table.add_column("DPS", justify="right")
    table.add_column("Delta", justify="right")
    table.add_column("Change", justify="right")

    comparisons = compare_results(results.baseline.dps, results)
    for rank_idx, row in enumerate(comparisons, 1):
        style = "green" if row.delta >= 0 else "red"
        table.add_row(
            str(rank_idx),
            row.name,
            f"{round(row.dps):,}",
            f"[{style}]{row.delta:+d}[/{style}]",
            f"[{style}]{row.pct_change:+.2f}%[/{style}]",
        )

    console.print(table)


def render_regressions(console: Console, report: RegressionReport) -> None:
    """Print a regression report."""
    if report.regressions:
        console.print("\n[red bold]Regressions detected:[/red bold]")
        for r in report.regressions:
            console.print(f"  {r.name}: {r.old_dps} -> {r.new_dps} ({r.pct_change}%)")
    if report.warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for w in report.warnings:
            console.print(f"  {w.name}: {w.old_dps} -> {w.new_dps} ({w.pct_change}%)")
    if report.passed and not report.warnings:
        console.print("\n[green]No regressions detected.[/green]")
