# Copyright (c) Syntropy Systems
"""Configuration management for simscope."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

import yaml

logger = logging.getLogger(__name__)


@dataclass
class SimscopeConfig:
    """Tunable analysis heuristics.

    None of these are derived from game data; they are rough constants that
    can be replaced once better measurements are available.
    """

    # Fight length (seconds) when neither the record nor its scenario has one
    fallback_fight_length: float = 300.0

    # Assumed average global cooldown (seconds), not haste-adjusted
    gcd_seconds: float = 1.5

    # GCD efficiency below this is flagged
    gcd_efficiency_warn: float = 0.85

    # Share of sustained net-positive generation assumed lost to capping
    overcap_factor: float = 0.15

    # Ability cooldown utilization (%) below this is reported
    cooldown_utilization_warn: float = 85.0

    # Buff windows below this share of expected uptime are reported
    buff_window_tolerance: float = 0.8

    # Cooldown (seconds) assumed for buff windows that do not declare one
    default_buff_cooldown: float = 60.0

    # DPS fraction spread separating universal from high-variance abilities
    differential_spread: float = 0.05

    # Regression thresholds (% DPS drop)
    warn_threshold: float = 1.0
    error_threshold: float = 3.0

    # Off-GCD abilities when no spec adapter is available
    default_off_gcd: list[str] = field(
        default_factory=lambda: ["auto_attack", "melee"]
    )


_FLOAT_KEYS = (
    "fallback_fight_length",
    "gcd_seconds",
    "gcd_efficiency_warn",
    "overcap_factor",
    "cooldown_utilization_warn",
    "buff_window_tolerance",
    "default_buff_cooldown",
    "differential_spread",
    "warn_threshold",
    "error_threshold",
)

# Divisors in the extractors
_POSITIVE_KEYS = frozenset({"fallback_fight_length", "gcd_seconds"})


def find_simscope_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .simscope directory by walking up from start_path.

    Returns None if no .simscope directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        simscope_dir = current / ".simscope"
        if simscope_dir.is_dir():
            return simscope_dir
        current = current.parent

    # Check root
    simscope_dir = current / ".simscope"
    if simscope_dir.is_dir():
        return simscope_dir

    return None


def get_global_config_dir() -> Path:
    """Get the global simscope config directory (~/.simscope)."""
    return Path.home() / ".simscope"


def load_config(simscope_dir: Path | None = None) -> SimscopeConfig:
    """Load configuration from .simscope/config.yaml or defaults.

    Looks for config in:
    1. Provided simscope_dir
    2. Nearest .simscope directory walking up
    3. ~/.simscope/config.yaml
    4. Defaults
    """
    config = SimscopeConfig()

    # Find config file
    config_path = None

    if simscope_dir is not None:
        config_path = simscope_dir / "config.yaml"
    else:
        found_dir = find_simscope_dir()
        if found_dir is not None:
            config_path = found_dir / "config.yaml"
        else:
            global_config = get_global_config_dir() / "config.yaml"
            if global_config.exists():
                config_path = global_config

    if config_path is not None and config_path.exists():
        with config_path.open() as f:
            data = cast("dict[str, object]", yaml.safe_load(f) or {})

        for key in _FLOAT_KEYS:
            value = data.get(key)
            # bool is an int subclass; reject it explicitly
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                continue
            if key in _POSITIVE_KEYS and value <= 0:
                logger.warning(
                    "Ignoring %s=%s in %s: must be positive", key, value, config_path
                )
                continue
            setattr(config, key, float(value))

        default_off_gcd = data.get("default_off_gcd")
        if isinstance(default_off_gcd, list):
            config.default_off_gcd = [str(v) for v in cast("list[object]", default_off_gcd)]

    return config


def default_config_values() -> dict[str, object]:
    """Default config as written by `simscope init`."""
    defaults = SimscopeConfig()
    values: dict[str, object] = {key: getattr(defaults, key) for key in _FLOAT_KEYS}
    values["default_off_gcd"] = list(defaults.default_off_gcd)
    return values


def get_golden_dir(simscope_dir: Path | None = None) -> Path:
    """Get the path to the golden baseline directory."""
    if simscope_dir is None:
        simscope_dir = find_simscope_dir()

    if simscope_dir is None:
        msg = "No .simscope directory found. Run 'simscope init' first."
        raise RuntimeError(
            msg
        )

    return simscope_dir / "golden"


def require_simscope_dir() -> Path:
    """Get simscope directory or raise an error if not found."""
    simscope_dir = find_simscope_dir()
    if simscope_dir is None:
        msg = "No .simscope directory found. Run 'simscope init' first."
        raise RuntimeError(
            msg
        )
    return simscope_dir
