"""
Core components of the thermo-swarm system.

- agent: The HysteresisAgent - thresholds and one bit of memory
- policy: Collective action of many agents
- delay: Transport delay between action and observation
- control_loop: The trajectory integrator
- distributions: Where agent thresholds come from
"""

from .agent import Action, AgentThresholds, HysteresisAgent
from .control_loop import ControlLoop, Trajectory, exogenous_deltas, run
from .delay import DelayBuffer
from .policy import AggregatePolicy, aggregate

__all__ = [
    "Action",
    "AgentThresholds",
    "HysteresisAgent",
    "AggregatePolicy",
    "aggregate",
    "DelayBuffer",
    "ControlLoop",
    "Trajectory",
    "exogenous_deltas",
    "run",
]
