"""
Thermo-Swarm: Collective Thermoregulation by Hysteresis Agents

A framework for exploring how a population of simple threshold-driven
agents ("bees") holds an environment temperature against an exogenous
driver, and how measurement delay shapes the controlled trajectory.
"""

__version__ = "0.1.0"
