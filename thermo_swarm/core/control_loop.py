"""
core/control_loop.py

The environment pushes, the colony pushes back.

Each step the exogenous driver moves the temperature by some amount and
every bee adds its own small correction. The bees, however, act on what
they can sense, and with a transport delay what they sense is the comb
as it was `delay` steps ago.

Three quantities evolve together:
- env_temp: the true temperature
- delayed_env_temp: what the bees observe
- the bee-delta FIFO: colony actions still in transit

Inspired by:
- Dead-time systems in process control
- Smith predictor block diagrams
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .agent import HysteresisAgent
from .delay import DelayBuffer
from .policy import AggregatePolicy

logger = logging.getLogger(__name__)


def exogenous_deltas(samples: Iterable[float]) -> List[float]:
    """
    Discrete derivative of an exogenous temperature sequence.

    Same length as the input. The first sample is its own predecessor,
    so the first delta is always 0.0.
    """
    values = np.asarray(list(samples), dtype=np.float64)
    if values.size == 0:
        return []
    return np.diff(values, prepend=values[0]).tolist()


def delayed_deltas(deltas: Sequence[float], delay: int) -> List[float]:
    """The delta sequence as seen `delay` steps late: left-padded with zeros."""
    if delay < 0:
        raise ValueError(f"delay must be >= 0, got {delay}")
    return [0.0] * delay + [float(d) for d in deltas]


@dataclass
class LoopState:
    """Where the loop is after `step` completed steps."""
    env_temp: float
    delayed_env_temp: float
    bee_delta: float = 0.0
    step: int = 0


@dataclass(frozen=True, eq=False)
class Trajectory:
    """
    The realized temperatures of one run.

    temperatures[0] is the initial temperature; temperatures[i + 1] is the
    true temperature after step i. observed and bee_deltas are per step.
    """
    temperatures: np.ndarray
    observed: np.ndarray
    bee_deltas: np.ndarray
    delay: int = 0

    def __post_init__(self):
        for name in ("temperatures", "observed", "bee_deltas"):
            array = np.array(getattr(self, name), dtype=np.float64)
            array.flags.writeable = False
            object.__setattr__(self, name, array)

    def tolist(self) -> List[float]:
        return self.temperatures.tolist()

    def __eq__(self, other):
        """Equal to another Trajectory with the same data, or to a plain
        sequence of the same temperatures."""
        if isinstance(other, Trajectory):
            return bool(
                self.delay == other.delay
                and np.array_equal(self.temperatures, other.temperatures)
                and np.array_equal(self.observed, other.observed)
                and np.array_equal(self.bee_deltas, other.bee_deltas)
            )
        if isinstance(other, (list, tuple, np.ndarray)):
            return bool(np.array_equal(self.temperatures, np.asarray(other, dtype=np.float64)))
        return NotImplemented

    __hash__ = None

    def __len__(self) -> int:
        return len(self.temperatures)

    def __getitem__(self, index):
        return self.temperatures[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self.temperatures.tolist())


class ControlLoop:
    """
    Delayed-feedback trajectory integrator.

    One instance owns its agent list and delay buffer for the duration of a
    run. Agents are mutated in place, so two loops must never share agents.
    """

    def __init__(
        self,
        agents: Iterable[HysteresisAgent],
        delay: int = 0,
        policy: Optional[AggregatePolicy] = None,
    ):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")

        self.agents = list(agents)
        self.delay = int(delay)
        self.policy = policy or AggregatePolicy()

        self.state: Optional[LoopState] = None
        self._bee_buffer = DelayBuffer(self.delay)

    # ==================== Core Loop ====================

    def reset(self, initial_temperature: float) -> None:
        """Start over from a temperature. Agent states are left as they are."""
        self.state = LoopState(
            env_temp=float(initial_temperature),
            delayed_env_temp=float(initial_temperature),
        )
        self._bee_buffer = DelayBuffer(self.delay)

    def step(self, d_env: float, delayed_d_env: float) -> LoopState:
        """
        Advance by one step.

        1. The colony acts on the delayed reading.
        2. The true temperature takes the current exogenous delta and the
           current colony delta.
        3. The observed temperature takes the delay-shifted exogenous delta
           and the colony delta from `delay` steps ago.
        """
        if self.state is None:
            raise RuntimeError("ControlLoop.step called before reset()")

        state = self.state
        bee_delta = self.policy.aggregate(self.agents, state.delayed_env_temp)

        state.env_temp += d_env + bee_delta
        state.delayed_env_temp += delayed_d_env + self._bee_buffer.push_pop(bee_delta)
        state.bee_delta = bee_delta
        state.step += 1

        logger.debug(
            "step=%d env_temp=%.4f delayed_env_temp=%.4f d_env=%.4f bee_delta=%.4f",
            state.step, state.env_temp, state.delayed_env_temp, d_env, bee_delta,
        )
        return state

    def iterate(
        self,
        initial_temperature: float,
        deltas: Sequence[float],
    ) -> Iterator[LoopState]:
        """
        Yield a snapshot of the state after every completed step.

        Stopping the iteration early leaves everything yielded so far valid.
        """
        deltas = [float(d) for d in deltas]
        shifted = delayed_deltas(deltas, self.delay)

        self.reset(initial_temperature)
        for d_env, delayed_d_env in zip(deltas, shifted):
            yield replace(self.step(d_env, delayed_d_env))

    def run(self, initial_temperature: float, deltas: Sequence[float]) -> Trajectory:
        """Integrate the whole delta sequence into a Trajectory."""
        temperatures = [float(initial_temperature)]
        observed = []
        bee_deltas = []

        for state in self.iterate(initial_temperature, deltas):
            temperatures.append(state.env_temp)
            observed.append(state.delayed_env_temp)
            bee_deltas.append(state.bee_delta)

        logger.debug(
            "Ran %d steps with %d agents (delay=%d): final temperature %.4f",
            len(bee_deltas), len(self.agents), self.delay, temperatures[-1],
        )
        return Trajectory(
            temperatures=temperatures,
            observed=observed,
            bee_deltas=bee_deltas,
            delay=self.delay,
        )

    def __repr__(self) -> str:
        step = self.state.step if self.state is not None else 0
        return (
            f"ControlLoop(agents={len(self.agents)}, "
            f"delay={self.delay}, "
            f"step={step})"
        )


def run(
    initial_temperature: float,
    exogenous_deltas: Sequence[float],
    agents: Iterable[HysteresisAgent],
    delay: int = 0,
) -> Trajectory:
    """Run one control loop over an exogenous delta sequence."""
    return ControlLoop(agents, delay=delay).run(initial_temperature, exogenous_deltas)
