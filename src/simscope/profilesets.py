# Copyright (c) Syntropy Systems
"""Profileset results: parsing, comparison and golden regression checks."""
from __future__ import annotations

import json
import logging
import math
import re
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from simscope.config import SimscopeConfig
from simscope.models.profileset import (
    ActorDps,
    ProfilesetBaseline,
    ProfilesetResult,
    ProfilesetVariant,
    RegressionEntry,
    RegressionReport,
    VariantComparison,
)
from simscope.models.result import MalformedResultError
from simscope.scenarios import scenario_display_name
from simscope.simc import number_at, value_at

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)


def profileset_safe_name(name: str) -> str:
    """Variant name as the simulator reports it (dots and spaces replaced)."""
    return _WHITESPACE.sub("_", name.replace(".", "_"))


def _parse_variant(raw: Mapping[str, object], index: int) -> ProfilesetVariant:
    where = f"sim.profilesets.results.{index}"
    name = value_at(raw, "name", where=where)
    mean = number_at(raw, "mean", where=where)

    def optional(key: str, default: float) -> float:
        value = raw.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return default

    return ProfilesetVariant(
        name=str(name),
        dps=mean,
        dps_min=optional("min", mean),
        dps_max=optional("max", mean),
        dps_median=optional("median", mean),
        dps_std_dev=optional("stddev", 0.0),
        dps_mean_std_dev=optional("mean_stddev", 0.0),
        dps_mean_error=optional("mean_error", 0.0),
        iterations=int(optional("iterations", 0)),
    )


def parse_profileset_results(
    data: Mapping[str, object], scenario: str
) -> ProfilesetResult:
    """Normalize raw batch-simulation output into a ranked comparison.

    The first player is the baseline; each profileset result is a variant.
    Variants are sorted by mean DPS, highest first.

    Raises:
        MalformedResultError: if the baseline DPS or a variant's name or
            mean is missing.

    """
    players = value_at(data, "sim", "players")
    if not isinstance(players, list) or not players:
        raise MalformedResultError("sim.players", "has no baseline player", scenario)
    baseline = cast("Mapping[str, object]", players[0])
    where = "sim.players.0"

    baseline_dps = number_at(baseline, "collected_data", "dps", "mean", where=where)
    try:
        baseline_hps = number_at(baseline, "collected_data", "hps", "mean", where=where)
    except MalformedResultError:
        baseline_hps = 0.0

    sim = cast("Mapping[str, object]", data["sim"])
    profilesets = sim.get("profilesets")
    raw_variants: list[object] = []
    if isinstance(profilesets, dict):
        raw_variants = cast(
            "list[object]", cast("dict[str, object]", profilesets).get("results") or []
        )

    variants = [
        _parse_variant(cast("Mapping[str, object]", raw), i)
        for i, raw in enumerate(raw_variants)
    ]
    variants.sort(key=lambda v: v.dps, reverse=True)

    return ProfilesetResult(
        scenario=scenario,
        scenario_name=scenario_display_name(scenario),
        baseline=ProfilesetBaseline(
            name=str(baseline.get("name", "baseline")),
            dps=baseline_dps,
            hps=baseline_hps,
        ),
        variants=variants,
    )


def load_profileset_output(path: Path, scenario: str) -> ProfilesetResult:
    """Read raw simulator JSON output from disk and parse it."""
    try:
        data = cast("object", json.loads(path.read_text()))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResultError("<root>", f"is not valid JSON: {e}", scenario) from e
    if not isinstance(data, dict):
        raise MalformedResultError("<root>", "must be an object", scenario)
    return parse_profileset_results(cast("Mapping[str, object]", data), scenario)


def compare_results(
    baseline_dps: float, results: ProfilesetResult
) -> list[VariantComparison]:
    """Each variant's DPS delta and % change against a baseline value.

    A zero baseline yields a 0% change rather than a division error.
    """
    comparisons: list[VariantComparison] = []
    for v in results.variants:
        delta = v.dps - baseline_dps
        pct_change = delta / baseline_dps * 100 if baseline_dps else 0.0
        comparisons.append(
            VariantComparison(
                name=v.name,
                dps=v.dps,
                delta=round_half_up(delta),
                pct_change=round(pct_change, 2),
            )
        )
    return comparisons


def _regression_entry(
    current: ProfilesetVariant, golden: ProfilesetVariant, pct_change: float
) -> RegressionEntry:
    return RegressionEntry(
        name=current.name,
        old_dps=round_half_up(golden.dps),
        new_dps=round_half_up(current.dps),
        pct_change=round(pct_change, 2),
    )


def check_regressions(
    current: ProfilesetResult,
    golden: ProfilesetResult | None,
    warn_threshold: float | None = None,
    error_threshold: float | None = None,
    settings: SimscopeConfig | None = None,
) -> RegressionReport:
    """Compare current variants against a golden result by name.

    A drop of more than ``error_threshold`` % is a regression, more than
    ``warn_threshold`` % a warning. Variants without a golden counterpart
    (or with a zero golden DPS) are skipped. With no golden result the
    check passes trivially.
    """
    if golden is None:
        return RegressionReport(passed=True)

    if settings is None:
        settings = SimscopeConfig()
    if warn_threshold is None:
        warn_threshold = settings.warn_threshold
    if error_threshold is None:
        error_threshold = settings.error_threshold

    golden_by_name = {v.name: v for v in golden.variants}

    regressions: list[RegressionEntry] = []
    warnings: list[RegressionEntry] = []
    for v in current.variants:
        g = golden_by_name.get(v.name)
        if g is None or g.dps <= 0:
            continue

        pct_change = (v.dps - g.dps) / g.dps * 100
        if pct_change < -error_threshold:
            regressions.append(_regression_entry(v, g, pct_change))
        elif pct_change < -warn_threshold:
            warnings.append(_regression_entry(v, g, pct_change))

    return RegressionReport(
        passed=not regressions,
        regressions=regressions,
        warnings=warnings,
    )


def profileset_results_to_actor_map(
    results: ProfilesetResult, build_ids: Sequence[str]
) -> dict[str, ActorDps]:
    """Map profileset DPS back to build ids.

    The first build is the baseline actor; variant names are matched to the
    remaining builds through their sanitized profileset names.
    """
    if not build_ids:
        return {}

    actor_map = {
        build_ids[0]: ActorDps(dps=results.baseline.dps, hps=results.baseline.hps)
    }
    name_to_id = {profileset_safe_name(b): b for b in build_ids[1:]}
    for variant in results.variants:
        build_id = name_to_id.get(variant.name, variant.name)
        actor_map[build_id] = ActorDps(dps=variant.dps)
    return actor_map


class GoldenStore:
    """Golden baselines stored as ``<label>.json`` under a directory.

    Reads and overwrites are not locked; callers serialize updates per label.
    """

    directory: Path

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, label: str) -> Path:
        """Get path to the golden file for a label."""
        return self.directory / f"{label}.json"

    def exists(self, label: str) -> bool:
        return self.path_for(label).exists()

    def load(self, label: str) -> ProfilesetResult | None:
        """Load a golden result, or None if the label was never saved.

        Raises:
            MalformedResultError: if the stored file does not validate.

        """
        path = self.path_for(label)
        if not path.exists():
            return None
        try:
            return ProfilesetResult.load(path)
        except ValidationError as e:
            raise MalformedResultError.from_validation_error(e) from e
        except UnicodeDecodeError as e:
            raise MalformedResultError("<root>", f"is not valid UTF-8: {e}") from e

    def save(self, label: str, result: ProfilesetResult) -> Path:
        """Save (or replace) the golden result for a label."""
        path = self.path_for(label)
        result.save(path)
        logger.info("Golden results saved to %s", path)
        return path
