"""
core/policy.py

Many small actions, one temperature change.

No bee knows what the others are doing. Each reads the same comb
temperature, acts on its own thresholds, and the colony's effect is
simply the sum.
"""

from __future__ import annotations
from typing import Iterable, Protocol, Tuple

from .agent import Action


class ActionRule(Protocol):
    """Anything that turns a temperature reading into a contribution."""

    def decide(self, temperature: float) -> Tuple[Action, float]:
        ...


class AggregatePolicy:
    """
    Sums the contributions of a collection of agents.

    Every agent's decide() is called exactly once per aggregate() call,
    so every agent's state may change. The sum does not depend on the
    order of the agents.
    """

    def __init__(self):
        self.last_counts = {action: 0 for action in Action}

    def aggregate(self, agents: Iterable[ActionRule], temperature: float) -> float:
        """Collective temperature change for one reading."""
        counts = {action: 0 for action in Action}
        total = 0.0

        for agent in agents:
            action, contribution = agent.decide(temperature)
            counts[action] += 1
            total += contribution

        self.last_counts = counts
        return total

    def __repr__(self) -> str:
        return (
            f"AggregatePolicy(cooling={self.last_counts[Action.COOLING]}, "
            f"heating={self.last_counts[Action.HEATING]}, "
            f"idle={self.last_counts[Action.NONE]})"
        )


def aggregate(agents: Iterable[ActionRule], temperature: float) -> float:
    """Sum of decide() contributions for a single shared reading."""
    return AggregatePolicy().aggregate(agents, temperature)
