"""
Exogenous temperature drivers.

The weather outside the hive: scalar functions of time, nothing more.
"""

from .drivers import DRIVERS, external_temperature, get_driver, make_external_temperature, time_seq

__all__ = [
    "DRIVERS",
    "external_temperature",
    "get_driver",
    "make_external_temperature",
    "time_seq",
]
