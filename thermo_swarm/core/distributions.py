"""
core/distributions.py

Where thresholds come from.

No two bees are alike. A colony is described not by one threshold but by
a distribution of them, and an experiment is a choice of distribution.
A single fixed value is a distribution too.
"""

from __future__ import annotations
import numbers
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence
import numpy as np


class Distribution(ABC):
    """A source of values. Agents only ever call draw()."""

    @abstractmethod
    def draw(self) -> float:
        """Return one value."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the mapping accepted by distribution_from_spec."""
        pass


class FixedDistribution(Distribution):
    """Always the same value."""

    def __init__(self, value: float):
        self.value = float(value)

    def draw(self) -> float:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "fixed", "value": self.value}

    def __repr__(self) -> str:
        return f"FixedDistribution({self.value})"


class ChoiceDistribution(Distribution):
    """Uniform draw from a finite list of values."""

    def __init__(self, values: Sequence[float], rng: Optional[np.random.Generator] = None):
        if len(values) == 0:
            raise ValueError("ChoiceDistribution needs at least one value")
        self.values = [float(v) for v in values]
        self.rng = rng or np.random.default_rng()

    def draw(self) -> float:
        if len(self.values) == 1:
            return self.values[0]
        return self.values[int(self.rng.integers(len(self.values)))]

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "choice", "values": list(self.values)}

    def __repr__(self) -> str:
        return f"ChoiceDistribution({self.values})"


class NormalDistribution(Distribution):
    """Gaussian draws."""

    def __init__(self, mean: float, std: float, rng: Optional[np.random.Generator] = None):
        if std < 0:
            raise ValueError(f"std must be >= 0, got {std}")
        self.mean = float(mean)
        self.std = float(std)
        self.rng = rng or np.random.default_rng()

    def draw(self) -> float:
        return float(self.rng.normal(self.mean, self.std))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "normal", "mean": self.mean, "std": self.std}

    def __repr__(self) -> str:
        return f"NormalDistribution(mean={self.mean}, std={self.std})"


class UniformDistribution(Distribution):
    """Uniform draws on [low, high)."""

    def __init__(self, low: float, high: float, rng: Optional[np.random.Generator] = None):
        if high < low:
            raise ValueError(f"high must be >= low, got [{low}, {high}]")
        self.low = float(low)
        self.high = float(high)
        self.rng = rng or np.random.default_rng()

    def draw(self) -> float:
        return float(self.rng.uniform(self.low, self.high))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "uniform", "low": self.low, "high": self.high}

    def __repr__(self) -> str:
        return f"UniformDistribution(low={self.low}, high={self.high})"


def distribution_from_spec(
    spec: Any,
    rng: Optional[np.random.Generator] = None
) -> Distribution:
    """
    Build a distribution from a config value.

    Accepts a Distribution (returned unchanged), a bare number (fixed),
    a list of numbers (choice) or a mapping with a `kind` key:
        {kind: fixed, value: 1.0}
        {kind: choice, values: [0.5, 1.0]}
        {kind: normal, mean: 1.0, std: 0.5}
        {kind: uniform, low: 0.0, high: 2.0}
    """
    if isinstance(spec, Distribution):
        return spec
    if isinstance(spec, numbers.Real) and not isinstance(spec, bool):
        return FixedDistribution(spec)
    if isinstance(spec, (list, tuple)):
        return ChoiceDistribution(spec, rng)
    if not isinstance(spec, dict):
        raise ValueError(f"Cannot build a distribution from {spec!r}")

    kind = spec.get("kind")
    try:
        if kind == "fixed":
            return FixedDistribution(spec["value"])
        if kind == "choice":
            return ChoiceDistribution(spec["values"], rng)
        if kind == "normal":
            return NormalDistribution(spec["mean"], spec["std"], rng)
        if kind == "uniform":
            return UniformDistribution(spec["low"], spec["high"], rng)
    except KeyError as e:
        raise ValueError(f"Distribution of kind {kind!r} is missing {e}") from e

    raise ValueError(f"Unknown distribution kind: {kind!r}")
