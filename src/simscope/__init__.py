# Copyright (c) Syntropy Systems
"""
simscope - Rotation analysis for combat simulator output.

Turn simulation results into rotation signals, catch DPS regressions.
"""

from simscope.analyze import analyze_result, analyze_results
from simscope.differential import analyze_archetype_differential
from simscope.profilesets import check_regressions, compare_results

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "analyze_archetype_differential",
    "analyze_result",
    "analyze_results",
    "check_regressions",
    "compare_results",
]
