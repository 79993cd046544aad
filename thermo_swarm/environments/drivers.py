"""
environments/drivers.py

The outside world, as closed-form functions of time.

None of these claim physical meaning. They are shapes: a plain sine, and
sines whose frequency keeps rising so the colony is pushed harder and
harder until it can no longer keep up. All are 0.0 before time zero.
"""

from __future__ import annotations
import math
from typing import Callable, Dict
import numpy as np

Driver = Callable[[float], float]


def sin_1(t: float) -> float:
    """Slow sine, period 4*pi."""
    if t < 0:
        return 0.0
    return math.sin(t / 2)


def accelerated_sin_2(t: float) -> float:
    """Sine with a quadratically growing phase."""
    if t < 0:
        return 0.0
    scaled = t / math.pi / 10.0
    return math.sin(math.pi * scaled * scaled)


def accelerated_sin_3(t: float) -> float:
    """Sine with a cubically growing phase."""
    if t < 0:
        return 0.0
    scaled = t / math.pi / 10.0
    return math.sin(0.3 * math.pi * scaled * scaled * scaled)


def accelerated_sin_exp(t: float) -> float:
    """Sine with an exponentially growing phase."""
    if t < 0:
        return 0.0
    scaled = t / math.pi / 10.0
    return math.sin(math.exp(scaled) - 1)


def make_external_temperature(amplitude: float, driver: Driver) -> Driver:
    """Scale a unit driver to a temperature amplitude."""
    def external(t: float) -> float:
        return amplitude * driver(t)
    return external


external_temperature = make_external_temperature(5.0, accelerated_sin_exp)


DRIVERS: Dict[str, Driver] = {
    "sin_1": sin_1,
    "accelerated_sin_2": accelerated_sin_2,
    "accelerated_sin_3": accelerated_sin_3,
    "accelerated_sin_exp": accelerated_sin_exp,
}


def get_driver(name: str, amplitude: float = 5.0) -> Driver:
    """Look up a driver by name and scale it."""
    if name not in DRIVERS:
        raise ValueError(
            f"Unknown driver {name!r}, expected one of {sorted(DRIVERS)}"
        )
    return make_external_temperature(amplitude, DRIVERS[name])


def time_seq(end_time: float, time_step: float) -> np.ndarray:
    """Sample times [0, end_time) spaced by time_step."""
    if time_step <= 0:
        raise ValueError(f"time_step must be > 0, got {time_step}")
    return np.arange(0.0, end_time, time_step)
