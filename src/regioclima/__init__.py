"""
regioclima - Regional Mars Climate Simulation Engine

Polar and equatorial region models integrating surface energy balance,
ice cap dynamics and humidity/wind relaxation, aggregated into
area-weighted planet-wide averages for habitability scoring.
"""

__version__ = "0.1.0"

from regioclima.core.region import RegionKind, RegionKindError, RegionState, ClampBands
from regioclima.core.physics import NumericalInstabilityError
from regioclima.core.forcing import Forcing, OrbitalClock, greenhouse_from_composition
from regioclima.core.polar import PolarRegionModel
from regioclima.core.equatorial import EquatorialRegionModel
from regioclima.core.aggregator import GlobalClimateAverages, aggregate
from regioclima.core.engine import ClimateSimulationEngine
from regioclima.core.results import SimulationResults
from regioclima.scenarios import SCENARIOS, get_scenario, list_scenarios

__all__ = [
    "__version__",
    "RegionKind",
    "RegionKindError",
    "RegionState",
    "ClampBands",
    "NumericalInstabilityError",
    "Forcing",
    "OrbitalClock",
    "greenhouse_from_composition",
    "PolarRegionModel",
    "EquatorialRegionModel",
    "GlobalClimateAverages",
    "aggregate",
    "ClimateSimulationEngine",
    "SimulationResults",
    "SCENARIOS",
    "get_scenario",
    "list_scenarios",
]
