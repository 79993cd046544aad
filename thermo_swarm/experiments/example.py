"""
experiments/example.py

An experiment is a colony plus a weather.

The colony is described by threshold distributions and a head count;
the weather by a driver function sampled on a time grid. Running an
experiment builds fresh bees, derives the exogenous deltas and hands
both to the control loop.
"""

from __future__ import annotations
import logging
import numbers
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional
import numpy as np

from thermo_swarm.core.agent import HysteresisAgent
from thermo_swarm.core.control_loop import ControlLoop, Trajectory, exogenous_deltas
from thermo_swarm.core.distributions import Distribution, distribution_from_spec
from thermo_swarm.environments.drivers import get_driver, time_seq

logger = logging.getLogger(__name__)

NUMBER_OF_BEES = 100
END_TIME = 120.0
TIME_STEP = 1.0


@dataclass
class ExperimentConfig:
    """
    Everything that defines one experiment.

    Distributions may be given as Distribution objects or as config values
    understood by distribution_from_spec.
    """
    title: str = "Unnamed Example"

    # Colony
    start_cooling: Any = field(
        default_factory=lambda: {"kind": "normal", "mean": 2.0, "std": 1.0}
    )
    stop_cooling: Any = field(
        default_factory=lambda: {"kind": "normal", "mean": 0.0, "std": 0.1}
    )
    number_of_bees: int = NUMBER_OF_BEES
    delta_temp: Optional[float] = None    # Defaults to 1 / number_of_bees
    band_margin: float = 0.5              # Minimum start-stop gap at construction

    # Weather
    driver: str = "accelerated_sin_exp"
    driver_amplitude: float = 5.0
    end_time: float = END_TIME
    time_step: float = TIME_STEP

    # Loop
    initial_temperature: float = 0.0
    delay: int = 0
    seed: Optional[int] = None

    def __post_init__(self):
        bees = self.number_of_bees
        if not isinstance(bees, numbers.Integral) or isinstance(bees, bool):
            raise ValueError(
                f"number_of_bees must be an integer, got {self.number_of_bees!r}"
            )
        if self.number_of_bees < 0:
            raise ValueError(f"number_of_bees must be >= 0, got {self.number_of_bees}")
        if self.time_step <= 0:
            raise ValueError(f"time_step must be > 0, got {self.time_step}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")
        if self.band_margin < 0:
            raise ValueError(f"band_margin must be >= 0, got {self.band_margin}")
        if self.delta_temp is None:
            self.delta_temp = 1.0 / self.number_of_bees if self.number_of_bees else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for name in ("start_cooling", "stop_cooling"):
            value = getattr(self, name)
            if isinstance(value, Distribution):
                data[name] = value.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperimentConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown experiment fields: {sorted(unknown)}")
        return cls(**data)


@dataclass
class ExperimentResult:
    """What one run produced, ready for plotting."""
    config: ExperimentConfig
    times: np.ndarray
    external: np.ndarray            # Uncontrolled exogenous temperature
    trajectory: Trajectory          # Controlled temperature, initial value first

    @property
    def controlled(self) -> np.ndarray:
        """Controlled temperatures aligned with `times`.

        temperatures[0] is the initial value; the value after step k sits
        at times[k], the same sample the exogenous delta of step k ends on.
        """
        return self.trajectory.temperatures[1:len(self.times) + 1]


def make_bees(
    config: ExperimentConfig,
    rng: Optional[np.random.Generator] = None
) -> List[HysteresisAgent]:
    """
    Sample a fresh colony.

    start_cooling is the absolute value of a draw; stop_cooling is a draw
    clamped to at most start_cooling - band_margin.
    """
    rng = rng or np.random.default_rng(config.seed)
    start_dist = distribution_from_spec(config.start_cooling, rng)
    stop_dist = distribution_from_spec(config.stop_cooling, rng)

    bees = []
    for i in range(config.number_of_bees):
        start_cooling = abs(start_dist.draw())
        stop_cooling = min(stop_dist.draw(), start_cooling - config.band_margin)
        bees.append(HysteresisAgent(
            start_cooling=start_cooling,
            stop_cooling=stop_cooling,
            delta=config.delta_temp,
            agent_id=f"bee_{i}",
        ))
    return bees


def run_example(
    config: ExperimentConfig,
    delay: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> ExperimentResult:
    """Build bees and weather from a config and run the control loop."""
    delay = config.delay if delay is None else delay

    times = time_seq(config.end_time, config.time_step)
    external_fn = get_driver(config.driver, config.driver_amplitude)
    external = np.array([external_fn(t) for t in times], dtype=np.float64)

    bees = make_bees(config, rng)
    logger.info(
        "Running %r: %d bees, %d steps, delay=%d",
        config.title, len(bees), len(times), delay,
    )

    loop = ControlLoop(bees, delay=delay)
    trajectory = loop.run(config.initial_temperature, exogenous_deltas(external))

    logger.info(
        "Finished %r: controlled range [%.3f, %.3f], external range [%.3f, %.3f]",
        config.title,
        float(trajectory.temperatures.min()), float(trajectory.temperatures.max()),
        float(external.min()) if external.size else 0.0,
        float(external.max()) if external.size else 0.0,
    )
    return ExperimentResult(config=config, times=times, external=external, trajectory=trajectory)


DEFAULT_EXAMPLE = ExperimentConfig(
    title="Normally Distributed Default Example",
    start_cooling={"kind": "normal", "mean": 1.0, "std": 0.5},
    stop_cooling={"kind": "normal", "mean": 0.5, "std": 0.1},
)

FIXED_EXAMPLE = ExperimentConfig(
    title="Fixed Distribution",
    start_cooling=[1.0],
    stop_cooling=[0.5],
)

BUILTIN_EXAMPLES: Dict[str, ExperimentConfig] = {
    "default": DEFAULT_EXAMPLE,
    "fixed": FIXED_EXAMPLE,
}
