"""
core/agent.py

A bee is a thermostat with one bit of memory.

It fans its wings when the comb is too hot, shivers when it is too cold,
and keeps doing so until the temperature has come back past a second,
gentler threshold. Two thresholds instead of one: that is the whole trick.

Inspired by:
- Honeybee brood-nest thermoregulation
- Schmitt triggers
- Bang-bang controllers with a dead band
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class Action(Enum):
    """What a bee is doing to the temperature right now."""
    NONE = "none"
    HEATING = "heating"
    COOLING = "cooling"

    def mirror(self) -> Action:
        """HEATING and COOLING swapped; NONE stays NONE."""
        if self is Action.HEATING:
            return Action.COOLING
        if self is Action.COOLING:
            return Action.HEATING
        return Action.NONE


@dataclass(frozen=True)
class AgentThresholds:
    """
    The dead band of a single agent.

    Only the cooling pair is stored; the heating pair is its mirror image
    around zero.
    """
    start_cooling: float    # Begin cooling at or above this
    stop_cooling: float     # Keep cooling until strictly below this

    def __post_init__(self):
        if self.start_cooling < 0:
            raise ValueError(
                f"start_cooling must be >= 0, got {self.start_cooling}"
            )
        # Clamp rather than fail: the band may collapse but never invert
        if self.stop_cooling > self.start_cooling:
            object.__setattr__(self, "stop_cooling", float(self.start_cooling))

    @property
    def start_heating(self) -> float:
        return -self.start_cooling

    @property
    def stop_heating(self) -> float:
        return -self.stop_cooling


class HysteresisAgent:
    """
    A single bee.

    Principles embodied:
    - Hysteresis: act on entering the band edge, stop only on leaving it
    - Ownership: action state is private and changed only by decide()
    - Reversal: a big enough swing flips heating to cooling in one step
    """

    def __init__(
        self,
        start_cooling: float,
        stop_cooling: float,
        delta: float,
        agent_id: str = "bee",
    ):
        if delta < 0:
            raise ValueError(f"delta must be >= 0, got {delta}")

        self.id = agent_id
        self.thresholds = AgentThresholds(float(start_cooling), float(stop_cooling))
        self.delta = float(delta)
        self.action = Action.NONE

        # History for observation (optional, for studies)
        self.history: List[Action] = []
        self.record_history = False

    # ==================== Thresholds ====================

    @property
    def start_cooling(self) -> float:
        return self.thresholds.start_cooling

    @property
    def stop_cooling(self) -> float:
        return self.thresholds.stop_cooling

    @property
    def start_heating(self) -> float:
        return self.thresholds.start_heating

    @property
    def stop_heating(self) -> float:
        return self.thresholds.stop_heating

    # ==================== Core Loop ====================

    def decide(self, temperature: float) -> Tuple[Action, float]:
        """
        Choose an action for this reading and apply it to our own state.

        Returns (action, contribution) where contribution is -delta while
        cooling, +delta while heating and 0.0 otherwise.

        COOLING is checked before HEATING from rest, so when the band has
        collapsed to a single point cooling wins the tie.
        """
        if self.action is Action.COOLING:
            if temperature < self.stop_cooling:
                # Leaving the band: straight into heating if cold enough
                if temperature <= self.start_heating:
                    self.action = Action.HEATING
                else:
                    self.action = Action.NONE
        elif self.action is Action.HEATING:
            if temperature > self.stop_heating:
                if temperature >= self.start_cooling:
                    self.action = Action.COOLING
                else:
                    self.action = Action.NONE
        elif temperature >= self.start_cooling:
            self.action = Action.COOLING
        elif temperature <= self.start_heating:
            self.action = Action.HEATING

        if self.record_history:
            self.history.append(self.action)

        return self.action, self.contribution()

    def contribution(self) -> float:
        """Signed temperature change caused by the current action."""
        if self.action is Action.COOLING:
            return -self.delta
        if self.action is Action.HEATING:
            return self.delta
        return 0.0

    def reset(self) -> None:
        """Back to rest, history cleared."""
        self.action = Action.NONE
        self.history = []

    def __repr__(self) -> str:
        return (
            f"HysteresisAgent(id={self.id}, "
            f"cool=[{self.stop_cooling:.2f}, {self.start_cooling:.2f}], "
            f"delta={self.delta:.3f}, "
            f"action={self.action.value})"
        )
