#!/usr/bin/env python3
"""
Run Thermoregulation Experiments CLI

Runs named experiments and plots the controlled temperature against the
external driver. Several delays can be compared on one figure; each delay
gets an identically sampled colony.

Usage:
    # Both built-in examples
    thermo-swarm

    # One experiment from a YAML file, comparing delays
    thermo-swarm fixed --config experiments.yaml --delay 0 --delay 3 --delay 10

    # Headless, save figures
    thermo-swarm default --no-plot --save ./figures
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from thermo_swarm.experiments.config import load_experiments
from thermo_swarm.experiments.example import BUILTIN_EXAMPLES, ExperimentConfig, ExperimentResult, run_example
from thermo_swarm.observations.visualize import plot_results

logger = logging.getLogger(__name__)


def select_experiments(
    names: List[str],
    config_path: Optional[str] = None,
) -> Dict[str, ExperimentConfig]:
    """Pick experiments by name from a YAML file or the built-ins."""
    available = load_experiments(config_path) if config_path else dict(BUILTIN_EXAMPLES)

    if not names or names == ["all"]:
        return available

    missing = [n for n in names if n not in available]
    if missing:
        raise ValueError(
            f"Unknown experiments {missing}, available: {sorted(available)}"
        )
    return {n: available[n] for n in names}


def run_with_delays(
    config: ExperimentConfig,
    delays: Optional[List[int]] = None,
    seed: Optional[int] = None,
) -> List[ExperimentResult]:
    """One run per delay, each with a colony sampled from the same seed."""
    if seed is None:
        seed = config.seed
    if seed is None:
        seed = int(np.random.SeedSequence().entropy % (2 ** 32))
    delays = delays or [config.delay]

    return [
        run_example(config, delay=delay, rng=np.random.default_rng(seed))
        for delay in delays
    ]


def summarize(name: str, results: List[ExperimentResult]) -> None:
    print("=" * 50)
    print(f"{name}: {results[0].config.title}")
    print("=" * 50)
    external = results[0].external
    if external.size:
        print(f"External range:   [{external.min():+.3f}, {external.max():+.3f}]")
    for result in results:
        controlled = result.controlled
        if not controlled.size:
            continue
        print(
            f"delay={result.trajectory.delay:<3d} controlled range: "
            f"[{controlled.min():+.3f}, {controlled.max():+.3f}]  "
            f"rms={np.sqrt(np.mean(controlled ** 2)):.3f}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Bee thermoregulation experiments")
    parser.add_argument("experiments", nargs="*", help="Experiment names (default: all)")
    parser.add_argument("--config", help="YAML file with experiment definitions")
    parser.add_argument(
        "--delay", type=int, action="append",
        help="Measurement delay in steps (repeat to compare)"
    )
    parser.add_argument("--seed", type=int, help="Seed for threshold sampling")
    parser.add_argument("--no-plot", action="store_true", help="Do not open plot windows")
    parser.add_argument("--save", help="Directory to save one PNG per experiment")
    parser.add_argument("--verbose", action="store_true", help="Log every simulation step")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        experiments = select_experiments(args.experiments, args.config)
    except (OSError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.delay and any(d < 0 for d in args.delay):
        logger.error("Delays must be >= 0")
        return 1

    save_dir = Path(args.save) if args.save else None
    if save_dir is not None:
        save_dir.mkdir(parents=True, exist_ok=True)

    for name, config in experiments.items():
        results = run_with_delays(config, args.delay, args.seed)
        summarize(name, results)

        if args.no_plot and save_dir is None:
            continue
        plot_results(
            results,
            title=config.title,
            save_path=str(save_dir / f"{name}.png") if save_dir else None,
            show=not args.no_plot,
        )
        if save_dir is not None:
            logger.info(f"Saved {save_dir / f'{name}.png'}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
