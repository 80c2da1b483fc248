# Copyright (c) Syntropy Systems
"""Pydantic models for per-spec configuration supplied by a spec adapter."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from .base import SimscopeBaseModel


class ResourceDefinition(SimscopeBaseModel):
    """A resource pool, e.g. fury capped at 100."""

    name: str
    cap: float


class SpecResources(SimscopeBaseModel):
    """Resources the spec tracks."""

    primary: Optional[ResourceDefinition] = None
    secondary: Optional[ResourceDefinition] = None


class FlowEntry(SimscopeBaseModel):
    """One generator or consumer row in a resource flow table."""

    ability: str
    base: Optional[float] = None
    amount: Optional[float] = None
    cost: Optional[float] = None

    @property
    def generated(self) -> float:
        """Resource generated per cast (base, else amount, else 0)."""
        if self.base is not None:
            return self.base
        if self.amount is not None:
            return self.amount
        return 0.0

    @property
    def spent(self) -> float:
        """Resource spent per cast."""
        return self.cost if self.cost is not None else 0.0


class BuffWindow(SimscopeBaseModel):
    """A cooldown-driven buff that is up for `duration` every `cooldown`."""

    buff: str
    duration: float
    cooldown: Optional[float] = None
    ability: Optional[str] = None


class SpecConfig(SimscopeBaseModel):
    """Configuration for one class spec.

    Buff and ability identifiers are short canonical substrings
    (``demon_spikes``), matched against simulator display names.
    """

    key_buffs: list[str] = Field(default_factory=list)
    cooldown_buffs: list[str] = Field(default_factory=list)
    off_gcd_abilities: list[str] = Field(default_factory=list)
    resources: Optional[SpecResources] = None
    resource_flow: dict[str, list[FlowEntry]] = Field(default_factory=dict)
    buff_windows: list[BuffWindow] = Field(default_factory=list)

    @field_validator("key_buffs", "cooldown_buffs", "off_gcd_abilities", mode="before")
    @classmethod
    def _coerce_identifiers(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, (set, frozenset, tuple)):
            return sorted(value) if isinstance(value, (set, frozenset)) else list(value)
        return value

    def generators(self, resource: str) -> list[FlowEntry] | None:
        """Generator table for a resource, e.g. ``furyGenerators``."""
        return self.resource_flow.get(f"{resource}Generators")

    def consumers(self, resource: str) -> list[FlowEntry] | None:
        """Consumer table for a resource, e.g. ``furyConsumers``."""
        return self.resource_flow.get(f"{resource}Consumers")
