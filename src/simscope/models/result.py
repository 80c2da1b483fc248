# Copyright (c) Syntropy Systems
"""Pydantic models for a single simulation run (the Result Record)."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, ValidationError

from .base import SimscopeBaseModel

DAMAGE = "damage"


class MalformedResultError(ValueError):
    """A result document is missing a required field or has an invalid one."""

    field: str
    scenario: str | None

    def __init__(self, field: str, reason: str, scenario: str | None = None) -> None:
        self.field = field
        self.scenario = scenario
        where = f" (scenario {scenario})" if scenario else ""
        super().__init__(f"Malformed result{where}: '{field}' {reason}")

    @classmethod
    def from_validation_error(
        cls, exc: ValidationError, scenario: str | None = None
    ) -> MalformedResultError:
        """Build from the first error pydantic reported."""
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "<root>"
        reason = "is missing" if first["type"] == "missing" else first["msg"]
        return cls(field, reason, scenario)


class CooldownStat(SimscopeBaseModel):
    """Cooldown timing for one ability."""

    duration: float
    waste_sec: float = Field(default=0.0, ge=0.0)


class AbilityStat(SimscopeBaseModel):
    """Per-ability damage and cast breakdown."""

    name: str
    type: str
    dps: float
    fraction: float = Field(ge=0.0, le=1.0)
    # Mean over iterations, so it can be fractional
    executes: float = Field(ge=0.0)
    cooldown: Optional[CooldownStat] = None

    @property
    def is_damage(self) -> bool:
        return self.type == DAMAGE


class BuffStat(SimscopeBaseModel):
    """Buff uptime as a percentage of the fight."""

    name: str
    uptime: float = Field(ge=0.0, le=100.0)
    refresh_count: float = 0.0


class ResourceLoss(SimscopeBaseModel):
    """Resource lost to capping, as tracked by the simulator."""

    total_lost: float
    per_second: float


class ResultRecord(SimscopeBaseModel):
    """One simulated scenario run."""

    scenario: str
    scenario_name: str
    dps: float = Field(ge=0.0)
    player: Optional[str] = None
    hps: float = 0.0
    dtps: float = 0.0
    combat_length: Optional[float] = None
    abilities: list[AbilityStat]
    buffs: list[BuffStat]
    resource_waste: dict[str, ResourceLoss] = Field(default_factory=dict)

    @property
    def damage_abilities(self) -> list[AbilityStat]:
        """Damage abilities in source order."""
        return [a for a in self.abilities if a.is_damage]


def parse_result_record(data: object) -> ResultRecord:
    """Validate a decoded result document.

    Raises:
        MalformedResultError: naming the first missing or invalid field.

    """
    try:
        return ResultRecord.model_validate(data)
    except ValidationError as e:
        scenario = data.get("scenario") if isinstance(data, dict) else None
        raise MalformedResultError.from_validation_error(
            e, scenario if isinstance(scenario, str) else None
        ) from e
