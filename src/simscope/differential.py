# Copyright (c) Syntropy Systems
"""Archetype differential: how each ability's DPS share varies by build."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from simscope.config import SimscopeConfig
from simscope.models.analysis import (
    ArchetypeDifferential,
    BuildShare,
    BuildSpecificAbility,
    HighVarianceAbility,
    UniversalAbility,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from simscope.models.result import ResultRecord

MIN_BUILDS = 2


@dataclass
class _BuildEntry:
    build: str
    dps: float
    fraction: float
    executes: float


def build_label(result: ResultRecord, index: int) -> str:
    """Identifier for a build: its player name, else its position."""
    if result.player:
        return result.player
    return f"build-{index + 1}"


def analyze_archetype_differential(
    build_results: Sequence[ResultRecord],
    settings: SimscopeConfig | None = None,
) -> ArchetypeDifferential | None:
    """Compare per-ability DPS fractions across builds.

    Abilities seen in one build only are build-specific. The rest are
    universal when their fraction spread is at most
    ``settings.differential_spread``, otherwise high-variance. High-variance
    abilities are sorted by spread, widest first: those are the ones that
    most need build-specific priority branches.

    Returns None for fewer than two builds.
    """
    if len(build_results) < MIN_BUILDS:
        return None
    if settings is None:
        settings = SimscopeConfig()

    ability_map: dict[str, list[_BuildEntry]] = {}
    for index, build in enumerate(build_results):
        label = build_label(build, index)
        for ability in build.damage_abilities:
            ability_map.setdefault(ability.name, []).append(
                _BuildEntry(
                    build=label,
                    dps=ability.dps,
                    fraction=ability.fraction,
                    executes=ability.executes,
                )
            )

    differential = ArchetypeDifferential()

    for name, entries in ability_map.items():
        if len(entries) < MIN_BUILDS:
            differential.build_specific.append(
                BuildSpecificAbility(
                    ability=name,
                    builds=[e.build for e in entries],
                    avg_dps=entries[0].dps,
                )
            )
            continue

        fractions = [e.fraction for e in entries]
        low = min(fractions)
        high = max(fractions)
        spread = high - low

        if spread > settings.differential_spread:
            ranked = sorted(entries, key=lambda e: e.fraction, reverse=True)
            differential.high_variance.append(
                HighVarianceAbility(
                    ability=name,
                    range=spread,
                    best=BuildShare(build=ranked[0].build, fraction=ranked[0].fraction),
                    worst=BuildShare(
                        build=ranked[-1].build, fraction=ranked[-1].fraction
                    ),
                )
            )
        else:
            differential.universal.append(
                UniversalAbility(ability=name, avg_fraction=(low + high) / 2)
            )

    differential.high_variance.sort(key=lambda d: d.range, reverse=True)
    return differential
