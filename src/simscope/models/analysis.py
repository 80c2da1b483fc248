# Copyright (c) Syntropy Systems
"""Pydantic models for analysis output.

Every extractor returns one of these; rendering is left to the caller.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import Field
from typing_extensions import TypeAlias

from .base import SimscopeBaseModel
from .result import AbilityStat, ResourceLoss

UptimeStatus: TypeAlias = Literal["LOW", "HIGH"]


class DpsContribution(SimscopeBaseModel):
    """Noise-level and rotation-defining damage abilities."""

    low_contrib: list[AbilityStat] = Field(default_factory=list)
    high_contrib: list[AbilityStat] = Field(default_factory=list)


class BuffUptimeEntry(SimscopeBaseModel):
    """A key buff found in the result, with an advisory status."""

    name: str
    uptime: float
    status: Optional[UptimeStatus] = None


class BuffUptime(SimscopeBaseModel):
    found: list[BuffUptimeEntry] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class GcdUsage(SimscopeBaseModel):
    """GCD usage estimate for one run."""

    fight_length: float
    estimated_gcds: float = Field(alias="estimatedGCDs")
    total_casts: float
    efficiency: float
    warning: Optional[str] = None


class ResourceWasteEstimate(SimscopeBaseModel):
    """Overcap estimate from generator/consumer flow balance."""

    gen_per_sec: float
    spend_per_sec: float
    net_per_sec: float
    cap: float
    estimated_waste_per_sec: float


ResourceWaste: TypeAlias = Union[ResourceLoss, ResourceWasteEstimate]


class CooldownUsage(SimscopeBaseModel):
    """An ability cooldown that was wasted or under-used."""

    ability: str
    cooldown_duration: float
    actual_casts: float
    expected_casts: int
    utilization: float
    wasted_sec: float


class BuffWindowGap(SimscopeBaseModel):
    """A cooldown buff whose uptime falls short of its duty cycle."""

    buff: str
    actual_uptime: float
    expected_uptime: float
    gap: float


CooldownFinding: TypeAlias = Union[CooldownUsage, BuffWindowGap]


class DpgcdEntry(SimscopeBaseModel):
    """Damage per GCD-consuming cast."""

    name: str
    dpgcd: float
    executes: float
    fraction: float
    dps: float


class ScenarioAnalysis(SimscopeBaseModel):
    """All signals extracted from one result record."""

    scenario: str
    scenario_name: str
    dps: float
    dps_contribution: DpsContribution
    buff_uptime: BuffUptime
    gcd_usage: GcdUsage
    resource_waste: dict[str, ResourceWaste] = Field(default_factory=dict)
    cooldown_utilization: list[CooldownFinding] = Field(default_factory=list)
    dpgcd: list[DpgcdEntry] = Field(default_factory=list)


class BuildShare(SimscopeBaseModel):
    build: str
    fraction: float


class HighVarianceAbility(SimscopeBaseModel):
    """Ability whose DPS share differs strongly between builds."""

    ability: str
    range: float
    best: BuildShare
    worst: BuildShare


class BuildSpecificAbility(SimscopeBaseModel):
    ability: str
    builds: list[str]
    avg_dps: float


class UniversalAbility(SimscopeBaseModel):
    ability: str
    avg_fraction: float


class ArchetypeDifferential(SimscopeBaseModel):
    """Per-ability DPS share comparison across builds."""

    high_variance: list[HighVarianceAbility] = Field(default_factory=list)
    build_specific: list[BuildSpecificAbility] = Field(default_factory=list)
    universal: list[UniversalAbility] = Field(default_factory=list)
