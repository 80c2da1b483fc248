# Copyright (c) Syntropy Systems
"""Scenario table: fight presets the simulator is run against."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from simscope.config import SimscopeConfig

if TYPE_CHECKING:
    from simscope.models.result import ResultRecord


@dataclass(frozen=True)
class Scenario:
    """A fight preset."""

    name: str
    max_time: float
    desired_targets: int


SCENARIOS: dict[str, Scenario] = {
    "st": Scenario(name="Patchwerk 1T", max_time=300, desired_targets=1),
    "small_aoe": Scenario(name="Patchwerk 5T", max_time=75, desired_targets=5),
    "big_aoe": Scenario(name="Patchwerk 10T", max_time=60, desired_targets=10),
}


def get_scenario(scenario_id: str) -> Scenario | None:
    """Look up a scenario by id."""
    return SCENARIOS.get(scenario_id)


def scenario_display_name(scenario_id: str) -> str:
    """Display name for a scenario, falling back to the id itself."""
    scenario = get_scenario(scenario_id)
    return scenario.name if scenario is not None else scenario_id


def resolve_fight_length(
    result: ResultRecord, settings: SimscopeConfig | None = None
) -> float:
    """Fight length in seconds.

    Priority:
    1. result.combat_length if set and non-zero
    2. The scenario's max_time
    3. settings.fallback_fight_length
    """
    if settings is None:
        settings = SimscopeConfig()

    if result.combat_length:
        return result.combat_length

    scenario = get_scenario(result.scenario)
    if scenario is not None and scenario.max_time:
        return scenario.max_time

    return settings.fallback_fight_length
