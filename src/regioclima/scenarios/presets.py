"""
Named forcing presets.

Each preset bundles the stellar flux, surface pressure, atmospheric
composition and greenhouse efficiencies that produce a ``Forcing``:

- realistic:     present-day Mars physics
- game_balanced: stronger greenhouse response for playability
- debug:         extreme warming for quick checks
- polar_winter:  realistic physics, start of northern winter
"""

from typing import Dict, Any, List, Optional

from regioclima.core.forcing import (
    Forcing,
    OrbitalClock,
    greenhouse_from_composition,
    MARS_SOLAR_CONSTANT,
    MARS_SURFACE_PRESSURE,
)


SCENARIOS: Dict[str, Dict[str, Any]] = {
    "realistic": {
        "name": "Realistic Mars",
        "subtitle": "Present-day physics",
        "solar_constant": MARS_SOLAR_CONSTANT,
        "atmospheric_pressure": MARS_SURFACE_PRESSURE,
        "co2_pressure": 0.57,
        "ghg_pressure": 0.0,
        "co2_efficiency": 1.0,
        "h2o_efficiency": 2.8,
        "max_warming": 60.0,
        "start_day": 0.0,
        "color_primary": "#FF6B35",
        "color_secondary": "#00E5CC",
        "description": "Thin CO2 atmosphere, weak greenhouse, stable polar caps",
    },
    "game_balanced": {
        "name": "Game Balanced",
        "subtitle": "Enhanced greenhouse response",
        "solar_constant": MARS_SOLAR_CONSTANT,
        "atmospheric_pressure": MARS_SURFACE_PRESSURE,
        "co2_pressure": 0.57,
        "ghg_pressure": 5.0,
        "co2_efficiency": 1.5,
        "h2o_efficiency": 4.0,
        "max_warming": 80.0,
        "start_day": 0.0,
        "color_primary": "#FFD700",
        "color_secondary": "#88FF00",
        "description": "Stronger CO2 and water vapour warming with engineered gases",
    },
    "debug": {
        "name": "Debug",
        "subtitle": "Massive greenhouse effect",
        "solar_constant": MARS_SOLAR_CONSTANT,
        "atmospheric_pressure": MARS_SURFACE_PRESSURE,
        "co2_pressure": 0.57,
        "ghg_pressure": 50.0,
        "co2_efficiency": 5.0,
        "h2o_efficiency": 10.0,
        "max_warming": 200.0,
        "start_day": 0.0,
        "color_primary": "#FF0066",
        "color_secondary": "#FF3388",
        "description": "Runaway warming for exercising clamps and ice loss quickly",
    },
    "polar_winter": {
        "name": "Northern Polar Winter",
        "subtitle": "Realistic physics, north pole in darkness",
        "solar_constant": MARS_SOLAR_CONSTANT,
        "atmospheric_pressure": MARS_SURFACE_PRESSURE,
        "co2_pressure": 0.57,
        "ghg_pressure": 0.0,
        "co2_efficiency": 1.0,
        "h2o_efficiency": 2.8,
        "max_warming": 60.0,
        "start_day": 400.0,
        "color_primary": "#00FFFF",
        "color_secondary": "#8888FF",
        "description": "Seasonal factor negative for the north pole; cap cools and grows",
    },
}


def get_scenario(key: str) -> Dict[str, Any]:
    """
    Scenario configuration by key.

    Keys are matched case-insensitively; hyphens and spaces are read as
    underscores.

    Raises
    ------
    KeyError
        If the scenario is not known.
    """
    normalized = key.strip().lower().replace("-", "_").replace(" ", "_")
    if normalized in SCENARIOS:
        return SCENARIOS[normalized]

    available = list(SCENARIOS.keys())
    raise KeyError(f"Unknown scenario '{key}'. Available: {available}")


def list_scenarios() -> List[str]:
    return list(SCENARIOS.keys())


def greenhouse_for(scenario: Dict[str, Any]) -> float:
    return greenhouse_from_composition(
        scenario["co2_pressure"],
        scenario["ghg_pressure"],
        co2_efficiency=scenario["co2_efficiency"],
        h2o_efficiency=scenario["h2o_efficiency"],
        max_warming=scenario["max_warming"],
    )


def forcing_for(key: str, time_of_day: float = 0.5, start_day: Optional[float] = None) -> Forcing:
    """Constant ``Forcing`` for a scenario at its starting day, or at ``start_day`` if given."""
    scenario = get_scenario(key)
    return Forcing(
        solar_constant=scenario["solar_constant"],
        day_of_year=scenario["start_day"] if start_day is None else start_day,
        time_of_day=time_of_day,
        atmospheric_pressure=scenario["atmospheric_pressure"],
        greenhouse_effect=greenhouse_for(scenario),
    )


def clock_for(key: str, start_time: float = 0.0, start_day: Optional[float] = None) -> OrbitalClock:
    """``OrbitalClock`` seeded from a scenario; ``start_day`` overrides the scenario's."""
    scenario = get_scenario(key)
    return OrbitalClock(
        solar_constant=scenario["solar_constant"],
        atmospheric_pressure=scenario["atmospheric_pressure"],
        greenhouse_effect=greenhouse_for(scenario),
        start_day=scenario["start_day"] if start_day is None else start_day,
        start_time=start_time,
    )
