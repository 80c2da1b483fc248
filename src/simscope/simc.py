# Copyright (c) Syntropy Systems
"""Decoding of raw simulator JSON output into result records.

Only the decoded document is handled here; running the simulator is
someone else's job.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from simscope.models.result import MalformedResultError, ResultRecord
from simscope.scenarios import scenario_display_name

if TYPE_CHECKING:
    from collections.abc import Mapping

ABILITY_TYPES = ("damage", "heal")


def value_at(
    data: Mapping[str, object],
    *keys: str,
    where: str | None = None,
    scenario: str | None = None,
) -> object:
    """Walk nested mappings, naming the first missing key on failure.

    Raises:
        MalformedResultError: with the dotted path that could not be read.

    """
    path = [where] if where else []
    current: object = data
    for key in keys:
        path.append(key)
        if not isinstance(current, dict) or key not in current:
            raise MalformedResultError(".".join(path), "is missing", scenario)
        current = cast("dict[str, object]", current)[key]
    return current


def number_at(
    data: Mapping[str, object],
    *keys: str,
    where: str | None = None,
    scenario: str | None = None,
) -> float:
    """Like value_at, but the value must be a number."""
    value = value_at(data, *keys, where=where, scenario=scenario)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        path = ".".join([*([where] if where else []), *keys])
        raise MalformedResultError(path, "is not a number", scenario)
    return float(value)


def _mean(stat: Mapping[str, object], key: str) -> float:
    value = stat.get(key)
    if isinstance(value, dict):
        mean = cast("dict[str, object]", value).get("mean")
        if isinstance(mean, (int, float)):
            return float(mean)
    return 0.0


def _number(stat: Mapping[str, object], key: str) -> float:
    value = stat.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def parse_sim_results(data: Mapping[str, object], scenario: str) -> ResultRecord:
    """Build a ResultRecord from the first player of a simulator run.

    Damage and heal stats become abilities (sorted by DPS, highest first);
    buffs with non-zero uptime are kept (sorted by uptime).

    Raises:
        MalformedResultError: if the player or its mean DPS is missing, or a
            stat is out of range.

    """
    players = value_at(data, "sim", "players", scenario=scenario)
    if not isinstance(players, list) or not players:
        raise MalformedResultError("sim.players", "has no player", scenario)
    player = cast("Mapping[str, object]", players[0])
    where = "sim.players.0"

    dps = number_at(player, "collected_data", "dps", "mean", where=where, scenario=scenario)
    collected = cast("Mapping[str, object]", player["collected_data"])

    abilities: list[dict[str, object]] = []
    for raw in cast("list[object]", player.get("stats") or []):
        if not isinstance(raw, dict):
            continue
        stat = cast("dict[str, object]", raw)
        if stat.get("type") not in ABILITY_TYPES:
            continue
        abilities.append(
            {
                "name": str(stat.get("spell_name") or stat.get("name")),
                "type": str(stat["type"]),
                "dps": _mean(stat, "portion_aps"),
                "fraction": _number(stat, "portion_amount"),
                "executes": _mean(stat, "num_executes"),
            }
        )
    abilities.sort(key=lambda a: cast("float", a["dps"]), reverse=True)

    buffs: list[dict[str, object]] = []
    for raw in cast("list[object]", player.get("buffs") or []):
        if not isinstance(raw, dict):
            continue
        buff = cast("dict[str, object]", raw)
        uptime = _number(buff, "uptime")
        if uptime > 0:
            buffs.append(
                {
                    "name": str(buff.get("name")),
                    "uptime": uptime,
                    "refresh_count": _number(buff, "trigger"),
                }
            )
    buffs.sort(key=lambda b: cast("float", b["uptime"]), reverse=True)

    fight_length = _mean(collected, "fight_length")

    try:
        return ResultRecord.model_validate(
            {
                "scenario": scenario,
                "scenario_name": scenario_display_name(scenario),
                "player": str(player.get("name")) if player.get("name") else None,
                "dps": dps,
                "hps": _mean(collected, "hps"),
                "dtps": _mean(collected, "dtps"),
                "combat_length": fight_length or None,
                "abilities": abilities,
                "buffs": buffs,
            }
        )
    except ValidationError as e:
        raise MalformedResultError.from_validation_error(e, scenario) from e
