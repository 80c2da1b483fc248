# Copyright (c) Syntropy Systems
"""Pytest fixtures for simscope tests."""

import json
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from simscope.models.spec import SpecConfig
from simscope.spec_adapter import clear_spec_adapter

# Store original cwd at module load time
_original_cwd = Path.cwd()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def simscope_project(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary simscope project directory."""
    simscope_dir = temp_dir / ".simscope"
    simscope_dir.mkdir()
    (simscope_dir / "golden").mkdir()

    # Change to temp directory
    os.chdir(temp_dir)

    yield temp_dir

    # Always return to original cwd
    os.chdir(_original_cwd)


@pytest.fixture(autouse=True)
def _no_registered_adapter() -> Generator[None, None, None]:
    """Keep the process-wide spec adapter from leaking between tests."""
    clear_spec_adapter()
    yield
    clear_spec_adapter()


@pytest.fixture
def vengeance_spec() -> SpecConfig:
    """A spec config shaped like a tank spec's adapter output."""
    return SpecConfig.model_validate(
        {
            "keyBuffs": ["demon_spikes", "fiery_brand", "metamorphosis", "frailty"],
            "cooldownBuffs": ["fiery_brand", "metamorphosis"],
            "offGcdAbilities": ["auto_attack", "melee", "immolation_aura"],
            "resources": {"primary": {"name": "fury", "cap": 100}},
            "resourceFlow": {
                "furyGenerators": [
                    {"ability": "fracture", "base": 25},
                    {"ability": "felblade", "amount": 15},
                ],
                "furyConsumers": [
                    {"ability": "soul_cleave", "cost": 30},
                    {"ability": "spirit_bomb", "cost": 40},
                ],
            },
            "buffWindows": [
                {"buff": "fiery_brand", "duration": 10, "cooldown": 60},
                {"buff": "metamorphosis", "duration": 15},
            ],
        }
    )


@pytest.fixture
def raw_profileset_output() -> dict:
    """Raw simulator JSON for a profileset run."""
    return {
        "sim": {
            "players": [
                {
                    "name": "baseline_build",
                    "collected_data": {
                        "dps": {"mean": 100000.0},
                        "hps": {"mean": 2500.0},
                    },
                }
            ],
            "profilesets": {
                "results": [
                    {
                        "name": "talent_a",
                        "mean": 98000.0,
                        "min": 90000.0,
                        "max": 106000.0,
                        "median": 98100.0,
                        "stddev": 2000.0,
                        "mean_stddev": 40.0,
                        "mean_error": 80.0,
                        "iterations": 5000,
                    },
                    {
                        "name": "talent_b",
                        "mean": 103000.0,
                        "min": 95000.0,
                        "max": 111000.0,
                        "median": 103200.0,
                    },
                ]
            },
        }
    }


@pytest.fixture
def raw_profileset_file(temp_dir: Path, raw_profileset_output: dict) -> Path:
    """Raw profileset output written to disk."""
    path = temp_dir / "profileset_st.json"
    path.write_text(json.dumps(raw_profileset_output))
    return path
