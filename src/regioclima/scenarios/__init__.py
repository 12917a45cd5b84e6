"""
Built-in forcing scenarios.
"""

from regioclima.scenarios.presets import (
    SCENARIOS,
    get_scenario,
    list_scenarios,
    greenhouse_for,
    forcing_for,
    clock_for,
)

__all__ = [
    "SCENARIOS",
    "get_scenario",
    "list_scenarios",
    "greenhouse_for",
    "forcing_for",
    "clock_for",
]
