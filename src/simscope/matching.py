# Copyright (c) Syntropy Systems
"""Name matching between spec identifiers and simulator display names.

Spec configs list short canonical identifiers (``fiery_brand``) while the
simulator reports display names (``Fiery Brand (Rank 2)``). Both sides go
through normalize_name before every comparison.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from simscope.models.result import AbilityStat, BuffStat


def normalize_name(name: str) -> str:
    """Lowercase and replace spaces with underscores."""
    return name.lower().replace(" ", "_")


def find_buff(buffs: Iterable[BuffStat], identifier: str) -> BuffStat | None:
    """First buff whose normalized name contains the identifier."""
    needle = normalize_name(identifier)
    for buff in buffs:
        if needle in normalize_name(buff.name):
            return buff
    return None


def find_ability(
    abilities: Iterable[AbilityStat], identifier: str
) -> AbilityStat | None:
    """First ability whose normalized name equals the identifier."""
    needle = normalize_name(identifier)
    for ability in abilities:
        if normalize_name(ability.name) == needle:
            return ability
    return None


def normalized_set(identifiers: Iterable[str]) -> frozenset[str]:
    """Normalize a collection of identifiers for membership tests."""
    return frozenset(normalize_name(i) for i in identifiers)
