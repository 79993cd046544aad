"""
thermo_swarm/experiments/

Experiment definitions and the command line runner.

An experiment names a threshold distribution, a colony size, a driver and
a delay. Built-ins mirror the two classic setups: normally distributed
thresholds, and every bee identical.
"""

from .config import load_experiments, parse_experiments
from .example import (
    BUILTIN_EXAMPLES,
    DEFAULT_EXAMPLE,
    FIXED_EXAMPLE,
    ExperimentConfig,
    ExperimentResult,
    make_bees,
    run_example,
)

__all__ = [
    "BUILTIN_EXAMPLES",
    "DEFAULT_EXAMPLE",
    "FIXED_EXAMPLE",
    "ExperimentConfig",
    "ExperimentResult",
    "make_bees",
    "run_example",
    "load_experiments",
    "parse_experiments",
]
