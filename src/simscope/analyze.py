# Copyright (c) Syntropy Systems
"""Signal extraction from simulation results.

Each extractor turns one ResultRecord (plus an optional SpecConfig) into one
analysis facet: DPS contribution, buff uptime, GCD usage, resource waste,
cooldown utilization and damage per GCD. Extractors are pure; passing
``spec=None`` means "no spec adapter" and selects the documented defaults.
"""
from __future__ import annotations

import json
import logging
import math
from typing import TYPE_CHECKING, cast

from simscope.config import SimscopeConfig
from simscope.matching import find_ability, find_buff, normalize_name, normalized_set
from simscope.models.analysis import (
    BuffUptime,
    BuffUptimeEntry,
    BuffWindowGap,
    CooldownFinding,
    CooldownUsage,
    DpgcdEntry,
    DpsContribution,
    GcdUsage,
    ResourceWaste,
    ResourceWasteEstimate,
    ScenarioAnalysis,
)
from simscope.models.result import MalformedResultError, ResultRecord, parse_result_record
from simscope.scenarios import resolve_fight_length
from simscope.spec_adapter import resolve_spec_config

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from simscope.models.analysis import UptimeStatus
    from simscope.models.spec import FlowEntry, SpecConfig

logger = logging.getLogger(__name__)

LOW_CONTRIB_FRACTION = 0.01
HIGH_CONTRIB_FRACTION = 0.10
LOW_UPTIME_PCT = 30.0
HIGH_UPTIME_PCT = 90.0
MAINTAINED_BUFF_WARN_PCT = 50.0


def _settings(settings: SimscopeConfig | None) -> SimscopeConfig:
    return settings if settings is not None else SimscopeConfig()


def _off_gcd(spec: SpecConfig | None, settings: SimscopeConfig) -> frozenset[str]:
    if spec is None:
        return normalized_set(settings.default_off_gcd)
    return normalized_set(spec.off_gcd_abilities)


def analyze_dps_contribution(result: ResultRecord) -> DpsContribution:
    """Split damage abilities into noise-level (<1%) and major (>10%) shares."""
    damage = result.damage_abilities
    return DpsContribution(
        low_contrib=[a for a in damage if 0 < a.fraction < LOW_CONTRIB_FRACTION],
        high_contrib=[a for a in damage if a.fraction > HIGH_CONTRIB_FRACTION],
    )


def _uptime_status(uptime: float) -> UptimeStatus | None:
    if uptime < LOW_UPTIME_PCT:
        return "LOW"
    if uptime > HIGH_UPTIME_PCT:
        return "HIGH"
    return None


def analyze_buff_uptime(result: ResultRecord, spec: SpecConfig | None) -> BuffUptime:
    """Report key buff uptimes and warn on poorly maintained buffs.

    Buffs listed in ``cooldown_buffs`` are burst-driven and never warned on.
    Without a spec config the result is empty.
    """
    if spec is None:
        return BuffUptime()

    key_buffs = normalized_set(spec.key_buffs)
    found = [
        BuffUptimeEntry(name=b.name, uptime=b.uptime, status=_uptime_status(b.uptime))
        for b in result.buffs
        if any(kb in normalize_name(b.name) for kb in key_buffs)
    ]

    cooldown_buffs = normalized_set(spec.cooldown_buffs)
    warnings: list[str] = []
    for buff_name in spec.key_buffs:
        if normalize_name(buff_name) in cooldown_buffs:
            continue
        buff = find_buff(result.buffs, buff_name)
        if buff is not None and buff.uptime < MAINTAINED_BUFF_WARN_PCT:
            warnings.append(f"{buff.name} uptime is {buff.uptime:.1f}%")

    return BuffUptime(found=found, warnings=warnings)


def analyze_gcd_usage(
    result: ResultRecord,
    spec: SpecConfig | None,
    settings: SimscopeConfig | None = None,
) -> GcdUsage:
    """Estimate how many of the available GCDs went to damage casts."""
    settings = _settings(settings)
    fight_length = resolve_fight_length(result, settings)
    estimated_gcds = fight_length / settings.gcd_seconds

    off_gcd = _off_gcd(spec, settings)
    total_casts = sum(
        a.executes
        for a in result.damage_abilities
        if normalize_name(a.name) not in off_gcd
    )

    efficiency = total_casts / estimated_gcds
    warning = None
    if efficiency < settings.gcd_efficiency_warn:
        warning = (
            "Low GCD efficiency: dead GCDs from resource starvation or cooldown gaps"
        )

    return GcdUsage(
        fight_length=fight_length,
        estimated_gcds=estimated_gcds,
        total_casts=total_casts,
        efficiency=efficiency,
        warning=warning,
    )


def _flow_per_second(
    result: ResultRecord,
    entries: Iterable[FlowEntry],
    fight_length: float,
    *,
    spending: bool,
) -> float:
    total = 0.0
    for entry in entries:
        ability = find_ability(result.abilities, entry.ability)
        if ability is None:
            logger.debug("Flow entry %s not in result; skipped", entry.ability)
            continue
        casts_per_sec = ability.executes / fight_length
        total += casts_per_sec * (entry.spent if spending else entry.generated)
    return total


def analyze_resource_waste(
    result: ResultRecord,
    spec: SpecConfig | None,
    settings: SimscopeConfig | None = None,
) -> dict[str, ResourceWaste]:
    """Resource lost to capping.

    Simulator-tracked loss is returned as-is. Otherwise the primary resource
    is estimated from generator/consumer flow: when generation outpaces
    spending, ``overcap_factor`` of the surplus is assumed wasted.
    """
    if result.resource_waste:
        return dict(result.resource_waste)

    settings = _settings(settings)
    if spec is None or spec.resources is None or spec.resources.primary is None:
        return {}

    primary = spec.resources.primary
    generators = spec.generators(primary.name)
    consumers = spec.consumers(primary.name)
    if generators is None or consumers is None:
        return {}

    fight_length = resolve_fight_length(result, settings)
    gen_per_sec = _flow_per_second(result, generators, fight_length, spending=False)
    spend_per_sec = _flow_per_second(result, consumers, fight_length, spending=True)

    net_per_sec = gen_per_sec - spend_per_sec
    if net_per_sec <= 0:
        return {}

    return {
        primary.name: ResourceWasteEstimate(
            gen_per_sec=gen_per_sec,
            spend_per_sec=spend_per_sec,
            net_per_sec=net_per_sec,
            cap=primary.cap,
            estimated_waste_per_sec=net_per_sec * settings.overcap_factor,
        )
    }


def analyze_cooldown_utilization(
    result: ResultRecord,
    spec: SpecConfig | None,
    settings: SimscopeConfig | None = None,
) -> list[CooldownFinding]:
    """Find cooldowns with wasted or unused time.

    Ability findings come first (in ability order), then buff windows whose
    uptime is well short of the buff's duty cycle. An empty list means
    either nothing is configured or every cooldown is well used.
    """
    if spec is None or not spec.cooldown_buffs:
        return []

    settings = _settings(settings)
    fight_length = resolve_fight_length(result, settings)
    findings: list[CooldownFinding] = []

    for ability in result.abilities:
        cd = ability.cooldown
        if cd is None or cd.duration <= 0:
            continue
        if ability.executes < 1:
            continue

        # +1 for the opening use at time 0
        expected_casts = math.floor(fight_length / cd.duration) + 1
        used_pct = ability.executes / expected_casts * 100

        if cd.waste_sec > 0 or used_pct < settings.cooldown_utilization_warn:
            findings.append(
                CooldownUsage(
                    ability=ability.name,
                    cooldown_duration=cd.duration,
                    actual_casts=ability.executes,
                    expected_casts=expected_casts,
                    utilization=used_pct,
                    wasted_sec=cd.waste_sec,
                )
            )

    for window in spec.buff_windows:
        buff = find_buff(result.buffs, window.buff)
        if buff is None:
            continue

        cooldown = (
            window.cooldown
            if window.cooldown is not None
            else settings.default_buff_cooldown
        )
        if window.duration + cooldown <= 0:
            logger.debug("Buff window %s has no duty cycle; skipped", window.buff)
            continue
        expected_uptime = window.duration / (window.duration + cooldown) * 100
        if buff.uptime < expected_uptime * settings.buff_window_tolerance:
            findings.append(
                BuffWindowGap(
                    buff=buff.name,
                    actual_uptime=buff.uptime,
                    expected_uptime=expected_uptime,
                    gap=expected_uptime - buff.uptime,
                )
            )

    return findings


def analyze_dpgcd(
    result: ResultRecord,
    spec: SpecConfig | None,
    settings: SimscopeConfig | None = None,
) -> list[DpgcdEntry]:
    """Rank on-GCD damage abilities by damage per cast, highest first.

    Ties keep source order.
    """
    settings = _settings(settings)
    fight_length = resolve_fight_length(result, settings)
    off_gcd = _off_gcd(spec, settings)

    entries = [
        DpgcdEntry(
            name=a.name,
            dpgcd=a.dps * fight_length / a.executes,
            executes=a.executes,
            fraction=a.fraction,
            dps=a.dps,
        )
        for a in result.damage_abilities
        if a.executes > 0 and normalize_name(a.name) not in off_gcd
    ]
    # sorted() is stable
    return sorted(entries, key=lambda e: e.dpgcd, reverse=True)


def analyze_result(
    result: ResultRecord,
    spec: SpecConfig | None = None,
    settings: SimscopeConfig | None = None,
) -> ScenarioAnalysis:
    """Run every extractor over one result record.

    When spec is None the registered spec adapter is consulted; if there is
    none the extractors use their defaults.
    """
    if spec is None:
        spec = resolve_spec_config()

    return ScenarioAnalysis(
        scenario=result.scenario,
        scenario_name=result.scenario_name,
        dps=result.dps,
        dps_contribution=analyze_dps_contribution(result),
        buff_uptime=analyze_buff_uptime(result, spec),
        gcd_usage=analyze_gcd_usage(result, spec, settings),
        resource_waste=analyze_resource_waste(result, spec, settings),
        cooldown_utilization=analyze_cooldown_utilization(result, spec, settings),
        dpgcd=analyze_dpgcd(result, spec, settings),
    )


def analyze_results(
    results: Iterable[ResultRecord],
    spec: SpecConfig | None = None,
    settings: SimscopeConfig | None = None,
) -> list[ScenarioAnalysis]:
    """Analyze several result records with one resolved spec config."""
    if spec is None:
        spec = resolve_spec_config()
    return [analyze_result(r, spec, settings) for r in results]


def load_summary(path: Path) -> list[ResultRecord]:
    """Load result records from a summary JSON file.

    The file holds either a list of records or a single record.

    Raises:
        MalformedResultError: if the file is not valid JSON or a record is
            missing a required field.

    """
    try:
        data = cast("object", json.loads(path.read_text()))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResultError("<root>", f"is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise MalformedResultError("<root>", "must be a record or list of records")

    return [parse_result_record(item) for item in cast("list[object]", data)]


def analyze_summary(
    path: Path,
    spec: SpecConfig | None = None,
    settings: SimscopeConfig | None = None,
) -> list[ScenarioAnalysis]:
    """Load a summary file and analyze every record in it."""
    return analyze_results(load_summary(path), spec, settings)
