# Copyright (c) Syntropy Systems
"""Pydantic models for profileset comparison runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from .base import SimscopeBaseModel

if TYPE_CHECKING:
    from pathlib import Path


class ProfilesetBaseline(SimscopeBaseModel):
    """The base actor every variant is compared against."""

    name: str
    dps: float
    hps: float = 0.0


class ProfilesetVariant(SimscopeBaseModel):
    """One named variant and its DPS distribution."""

    name: str
    dps: float
    dps_min: float
    dps_max: float
    dps_median: float
    dps_std_dev: float = 0.0
    dps_mean_std_dev: float = 0.0
    dps_mean_error: float = 0.0
    iterations: int = 0


class ProfilesetResult(SimscopeBaseModel):
    """Baseline plus variants, sorted by DPS descending."""

    scenario: str
    scenario_name: str
    baseline: ProfilesetBaseline
    variants: list[ProfilesetVariant] = Field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> ProfilesetResult:
        """Load a result from a JSON file."""
        return cls.model_validate_json(path.read_text())

    def save(self, path: Path) -> None:
        """Save the result to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(self.to_json())


class VariantComparison(SimscopeBaseModel):
    """A variant's DPS relative to a baseline value."""

    name: str
    dps: float
    delta: int
    pct_change: float


class RegressionEntry(SimscopeBaseModel):
    """A variant that lost DPS against its golden value."""

    name: str
    old_dps: int = Field(alias="oldDPS")
    new_dps: int = Field(alias="newDPS")
    pct_change: float


class RegressionReport(SimscopeBaseModel):
    """Outcome of a golden comparison. Warnings never fail the check."""

    passed: bool
    regressions: list[RegressionEntry] = Field(default_factory=list)
    warnings: list[RegressionEntry] = Field(default_factory=list)


class ActorDps(SimscopeBaseModel):
    """Per-build throughput, keyed by build id in an actor map."""

    dps: float
    hps: float = 0.0
    dtps: float = 0.0
